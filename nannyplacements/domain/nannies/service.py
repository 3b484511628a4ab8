"""Nanny browse service - Filtering, public views and auto-matching"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, Nanny, User
from ...utils.storage import generate_presigned_url
from .filters import NannyFilters, calculate_age, matches_in_memory
from .repository import NannyRepository
from .schemas import AutoMatchResponse, NannyListResponse, NannyPublicResponse

logger = logging.getLogger(__name__)


class NannyBrowseService:
    """Service layer for browsing workers"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NannyRepository()

    def list_nannies(
        self, filters: NannyFilters, viewer: Optional[User] = None, cleaners_only: bool = False
    ) -> NannyListResponse:
        """Workers matching the filters; unapproved profiles are only visible to admins"""
        is_admin = viewer is not None and viewer.role == "admin"
        candidates = self.repo.search(
            self.db, filters, approved_only=not is_admin, cleaners_only=cleaners_only
        )
        nannies = [n for n in candidates if matches_in_memory(n, filters)]
        logger.debug(f"🔍 Browse returned {len(nannies)} of {len(candidates)} candidates")
        views = self.to_public_views(nannies)
        return NannyListResponse(count=len(views), nannies=views)

    def get_nanny(self, nanny_id: str, viewer: Optional[User] = None) -> NannyPublicResponse:
        nanny = self.repo.get_nanny_by_id(self.db, nanny_id)
        is_admin = viewer is not None and viewer.role == "admin"
        if not nanny or (not nanny.profile_approved and not is_admin):
            raise HTTPException(status_code=404, detail="Nanny not found")
        return self.to_public_views([nanny])[0]

    def auto_match(self, user: User) -> AutoMatchResponse:
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        if not client:
            raise HTTPException(status_code=404, detail="Client profile not found")

        filters = NannyFilters.from_client_preferences(client)
        result = self.list_nannies(filters, viewer=user)
        logger.info(f"🤝 Auto-match for client {client.id}: {result.count} matches")
        return AutoMatchResponse(count=result.count, filters=filters.as_dict(), nannies=result.nannies)

    def to_public_views(self, nannies: list[Nanny]) -> list[NannyPublicResponse]:
        ratings = self.repo.rating_summaries(self.db, [n.id for n in nannies])
        return [self.to_public_view(n, *ratings.get(n.id, (None, 0))) for n in nannies]

    @staticmethod
    def to_public_view(
        nanny: Nanny, average_rating: Optional[float] = None, review_count: int = 0
    ) -> NannyPublicResponse:
        user = nanny.user
        return NannyPublicResponse(
            id=nanny.id,
            user_id=nanny.user_id,
            first_name=user.first_name,
            last_name=user.last_name,
            city=user.city,
            suburb=user.suburb,
            profile_picture_url=generate_presigned_url(user.profile_picture_url),
            bio=nanny.bio,
            hourly_rate=nanny.hourly_rate,
            languages=nanny.languages or [],
            age=calculate_age(nanny.date_of_birth),
            education_level=nanny.education_level,
            experience_type=nanny.experience_type,
            experience_duration=nanny.experience_duration,
            employment_type=nanny.employment_type,
            accommodation_preference=nanny.accommodation_preference,
            criminal_check_status=nanny.criminal_check_status,
            credit_check_status=nanny.credit_check_status,
            proof_of_residence_status=nanny.proof_of_residence_status,
            training_cpr=nanny.training_cpr,
            training_first_aid=nanny.training_first_aid,
            training_nanny=nanny.training_nanny,
            training_child_development=nanny.training_child_development,
            training_cleaning=nanny.training_cleaning,
            academy_completed=nanny.academy_completed,
            profile_approved=nanny.profile_approved,
            average_rating=average_rating,
            review_count=review_count,
        )
