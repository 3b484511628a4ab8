"""Nanny repository - Browse queries and rating aggregates"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Nanny, Review, User
from .filters import CLEANER_EXPERIENCE_TYPES, NannyFilters


class NannyRepository:
    """Repository for worker browse queries"""

    @staticmethod
    def get_nanny_by_id(db: Session, nanny_id: str) -> Optional[Nanny]:
        return db.query(Nanny).options(joinedload(Nanny.user)).filter(Nanny.id == nanny_id).first()

    @staticmethod
    def search(
        db: Session,
        filters: NannyFilters,
        approved_only: bool = True,
        cleaners_only: bool = False,
    ) -> list[Nanny]:
        """Apply the filters that map directly to columns"""
        query = db.query(Nanny).join(User, Nanny.user_id == User.id).options(joinedload(Nanny.user))

        if approved_only:
            query = query.filter(Nanny.profile_approved.is_(True))
        if cleaners_only:
            query = query.filter(Nanny.experience_type.in_(CLEANER_EXPERIENCE_TYPES))

        if filters.city:
            query = query.filter(User.city.ilike(f"%{filters.city}%"))
        if filters.experience_type:
            # "both" workers offer either service
            query = query.filter(Nanny.experience_type.in_((filters.experience_type, "both")))
        if filters.employment_type:
            query = query.filter(Nanny.employment_type == filters.employment_type)
        if filters.accommodation:
            query = query.filter(Nanny.accommodation_preference == filters.accommodation)
        if filters.max_rate is not None:
            query = query.filter(Nanny.hourly_rate <= filters.max_rate)
        if filters.education:
            query = query.filter(Nanny.education_level == filters.education)
        if filters.experience_duration is not None:
            query = query.filter(Nanny.experience_duration == filters.experience_duration)

        return query.order_by(Nanny.created_at.desc()).all()

    @staticmethod
    def rating_summaries(db: Session, nanny_ids: list[str]) -> dict[str, tuple[Optional[float], int]]:
        """Average rating and rated-review count per worker; dismissed reviews don't count"""
        if not nanny_ids:
            return {}
        rows = (
            db.query(Review.nanny_id, func.avg(Review.rating), func.count(Review.id))
            .filter(
                Review.nanny_id.in_(nanny_ids),
                Review.rating.isnot(None),
                Review.status != "dismissed",
            )
            .group_by(Review.nanny_id)
            .all()
        )
        return {
            nanny_id: (round(float(avg), 2) if avg is not None else None, count)
            for nanny_id, avg, count in rows
        }
