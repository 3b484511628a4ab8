"""Profile service - Own-profile reads and updates for clients and workers"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, Nanny, User
from ...security_utils import mask_sensitive_data, sanitize_text
from .schemas import ClientProfileUpdate, NannyOwnProfileResponse, NannyProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for client and worker profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_client_profile(self, user: User) -> Client:
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        if not client:
            raise HTTPException(status_code=404, detail="Client profile not found")
        return client

    def update_client_profile(self, user: User, data: ClientProfileUpdate) -> Client:
        client = self.get_client_profile(user)
        updates = data.model_dump(exclude_unset=True)
        if "description" in updates:
            updates["description"] = sanitize_text(updates["description"])
        for key, value in updates.items():
            setattr(client, key, value)
        self.db.commit()
        self.db.refresh(client)
        logger.info(f"✅ Client profile {client.id} updated: {list(updates)}")
        return client

    def get_nanny_profile(self, user: User) -> Nanny:
        nanny = self.db.query(Nanny).filter(Nanny.user_id == user.id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny profile not found")
        return nanny

    def update_nanny_profile(self, user: User, data: NannyProfileUpdate) -> Nanny:
        nanny = self.get_nanny_profile(user)
        updates = data.model_dump(exclude_unset=True)
        if "bio" in updates:
            updates["bio"] = sanitize_text(updates["bio"])
        if "languages" in updates and updates["languages"] is None:
            updates["languages"] = []
        if "experience_type" in updates and updates["experience_type"] is None:
            del updates["experience_type"]
        for key, value in updates.items():
            setattr(nanny, key, value)
        self.db.commit()
        self.db.refresh(nanny)
        logger.info(f"✅ Nanny profile {nanny.id} updated: {list(updates)}")
        return nanny

    @staticmethod
    def to_own_response(nanny: Nanny) -> NannyOwnProfileResponse:
        return NannyOwnProfileResponse(
            id=nanny.id,
            user_id=nanny.user_id,
            bio=nanny.bio,
            hourly_rate=nanny.hourly_rate,
            languages=nanny.languages or [],
            date_of_birth=nanny.date_of_birth,
            education_level=nanny.education_level,
            experience_type=nanny.experience_type,
            experience_duration=nanny.experience_duration,
            employment_type=nanny.employment_type,
            accommodation_preference=nanny.accommodation_preference,
            criminal_check_status=nanny.criminal_check_status,
            credit_check_status=nanny.credit_check_status,
            proof_of_residence_status=nanny.proof_of_residence_status,
            has_criminal_check=bool(nanny.criminal_check_url),
            has_credit_check=bool(nanny.credit_check_url),
            has_proof_of_residence=bool(nanny.proof_of_residence_url),
            has_interview_video=bool(nanny.interview_video_url),
            training_cpr=nanny.training_cpr,
            training_first_aid=nanny.training_first_aid,
            training_nanny=nanny.training_nanny,
            training_child_development=nanny.training_child_development,
            training_cleaning=nanny.training_cleaning,
            academy_completed=nanny.academy_completed,
            profile_approved=nanny.profile_approved,
            bank_name=nanny.bank_name,
            account_number_masked=(
                mask_sensitive_data(nanny.account_number) if nanny.account_number else None
            ),
            account_holder_name=nanny.account_holder_name,
        )
