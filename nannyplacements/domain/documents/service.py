"""Document service - Verification uploads and admin review status"""

import logging

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ... import email_service
from ...models import DOCUMENT_STATUSES, Nanny, User
from ...services.notification_service import send_notification
from ...utils.storage import (
    build_document_key,
    generate_presigned_url,
    upload_object,
    validate_document_file,
)

logger = logging.getLogger(__name__)

# Documents that go through admin review; uploading a new file resets the status
REVIEWED_DOCUMENTS = ("criminal_check", "credit_check", "proof_of_residence")
UPLOADABLE_DOCUMENTS = REVIEWED_DOCUMENTS + ("interview_video", "profile_picture")


class DocumentService:
    """Service layer for worker verification documents"""

    def __init__(self, db: Session):
        self.db = db

    def _get_nanny(self, user: User) -> Nanny:
        nanny = self.db.query(Nanny).filter(Nanny.user_id == user.id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny profile not found")
        return nanny

    async def upload_document(self, user: User, document_type: str, file: UploadFile) -> dict:
        """Validate and store a document, then point the profile at the new object key"""
        if document_type not in UPLOADABLE_DOCUMENTS:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown document type. Allowed: {', '.join(UPLOADABLE_DOCUMENTS)}",
            )

        # Profile pictures may belong to any user; the rest need a worker profile
        nanny = None if document_type == "profile_picture" else self._get_nanny(user)

        contents = await file.read()
        is_valid, error = validate_document_file(
            document_type, file.filename, len(contents), file.content_type
        )
        if not is_valid:
            logger.warning(f"❌ Rejected {document_type} upload from user {user.id}: {error}")
            raise HTTPException(status_code=400, detail=error)

        key = build_document_key(user.id, document_type, file.filename)
        logger.info(f"📤 Uploading {document_type} for user {user.id}")
        try:
            upload_object(key, contents, file.content_type)
        except Exception as e:
            logger.error(f"❌ Storage upload failed for {key}: {e}")
            raise HTTPException(status_code=502, detail=f"Upload failed: {str(e)}") from e

        if document_type == "profile_picture":
            user.profile_picture_url = key
        else:
            setattr(nanny, f"{document_type}_url", key)
            if document_type in REVIEWED_DOCUMENTS:
                setattr(nanny, f"{document_type}_status", "pending")
        self.db.commit()

        return {
            "document_type": document_type,
            "key": key,
            "status": "pending" if document_type in REVIEWED_DOCUMENTS else None,
            "url": generate_presigned_url(key),
        }

    def list_documents(self, user: User) -> list[dict]:
        nanny = self._get_nanny(user)
        return self.describe_documents(nanny)

    @staticmethod
    def describe_documents(nanny: Nanny) -> list[dict]:
        """Document keys resolved to presigned URLs, with review status where applicable"""
        documents = []
        for document_type in REVIEWED_DOCUMENTS + ("interview_video",):
            key = getattr(nanny, f"{document_type}_url")
            documents.append(
                {
                    "document_type": document_type,
                    "uploaded": bool(key),
                    "status": getattr(nanny, f"{document_type}_status", None),
                    "url": generate_presigned_url(key),
                }
            )
        return documents

    async def update_document_status(self, nanny_id: str, document_type: str, status: str) -> dict:
        """Admin review of an uploaded document; the worker is emailed on approval"""
        if document_type not in REVIEWED_DOCUMENTS:
            raise HTTPException(
                status_code=400,
                detail=f"Document type must be one of: {', '.join(REVIEWED_DOCUMENTS)}",
            )
        if status not in DOCUMENT_STATUSES:
            raise HTTPException(
                status_code=400, detail=f"Status must be one of: {', '.join(DOCUMENT_STATUSES)}"
            )

        nanny = self.db.query(Nanny).filter(Nanny.id == nanny_id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny not found")
        if not getattr(nanny, f"{document_type}_url"):
            raise HTTPException(status_code=400, detail="This document has not been uploaded yet")

        setattr(nanny, f"{document_type}_status", status)
        self.db.commit()
        logger.info(f"📝 {document_type} for nanny {nanny_id} set to {status}")

        notification = None
        if status == "approved":
            notification = await send_notification(
                nanny.user.email,
                "document_approved",
                email_service.send_document_approved_email,
                to=nanny.user.email,
                nanny_name=nanny.user.first_name,
                document_type=document_type,
            )

        return {
            "nanny_id": nanny_id,
            "document_type": document_type,
            "status": status,
            "notification": notification,
        }
