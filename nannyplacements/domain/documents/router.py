"""Document router - Worker verification uploads"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_nanny, get_current_user
from ...database import get_db
from ...models import User
from .service import DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    """Dependency injection for DocumentService"""
    return DocumentService(db)


@router.get("")
async def list_documents(
    current_user: User = Depends(get_current_nanny),
    service: DocumentService = Depends(get_document_service),
):
    """The worker's documents with review statuses and short-lived download links"""
    return service.list_documents(current_user)


@router.post("/{document_type}", status_code=201)
async def upload_document(
    document_type: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """
    Upload a document.

    criminal_check, credit_check and proof_of_residence go back to pending review;
    interview_video is stored as-is; profile_picture is stored on the user account.
    """
    return await service.upload_document(current_user, document_type, file)
