"""Admin service - Dashboard counts and worker vetting"""

import logging

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ... import email_service
from ...models import Nanny, Review, User, UserRole
from ...services.notification_service import send_notification
from ..documents.service import REVIEWED_DOCUMENTS, DocumentService
from ..interests.repository import InterestRepository
from ..nannies.service import NannyBrowseService
from ..payments.repository import PaymentRepository
from .schemas import BADGES, DashboardStats, NannyAdminResponse

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for the back-office"""

    def __init__(self, db: Session):
        self.db = db

    def get_stats(self) -> DashboardStats:
        role_rows = self.db.query(UserRole.role, func.count(UserRole.id)).group_by(UserRole.role).all()
        users_by_role = {role: count for role, count in role_rows}
        with_role = self.db.query(UserRole.user_id).distinct()
        users_by_role["no-role"] = self.db.query(User).filter(User.id.notin_(with_role)).count()

        pending_docs = or_(
            *[
                (getattr(Nanny, f"{doc}_url").isnot(None)) & (getattr(Nanny, f"{doc}_status") == "pending")
                for doc in REVIEWED_DOCUMENTS
            ]
        )

        return DashboardStats(
            users_by_role=users_by_role,
            nannies_pending_approval=self.db.query(Nanny).filter(Nanny.profile_approved.is_(False)).count(),
            documents_pending_review=self.db.query(Nanny).filter(pending_docs).count(),
            interests_by_stage=InterestRepository.count_by_stage(self.db),
            completed_payment_total=PaymentRepository.completed_total(self.db),
            open_reviews=self.db.query(Review).filter(Review.status == "pending").count(),
        )

    def _get_nanny(self, nanny_id: str) -> Nanny:
        nanny = self.db.query(Nanny).filter(Nanny.id == nanny_id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny not found")
        return nanny

    def get_nanny_detail(self, nanny_id: str) -> NannyAdminResponse:
        nanny = self._get_nanny(nanny_id)
        return self.to_admin_response(nanny)

    async def set_profile_approval(self, nanny_id: str, approved: bool) -> NannyAdminResponse:
        """Publish or withdraw a worker profile; the worker is emailed either way"""
        nanny = self._get_nanny(nanny_id)
        nanny.profile_approved = approved
        self.db.commit()
        logger.info(f"{'✅' if approved else '⛔'} Nanny {nanny.id} profile_approved={approved}")

        notification = await send_notification(
            nanny.user.email,
            "profile_status",
            email_service.send_profile_status_email,
            to=nanny.user.email,
            nanny_name=nanny.user.first_name,
            approved=approved,
        )
        return self.to_admin_response(nanny, notification)

    async def toggle_badge(self, nanny_id: str, badge: str) -> NannyAdminResponse:
        nanny = self._get_nanny(nanny_id)
        awarded = not getattr(nanny, badge)
        setattr(nanny, badge, awarded)
        self.db.commit()
        logger.info(f"🎖️ Nanny {nanny.id} {badge}={awarded}")

        notification = await send_notification(
            nanny.user.email,
            "badge_update",
            email_service.send_badge_update_email,
            to=nanny.user.email,
            nanny_name=nanny.user.first_name,
            badge=badge,
            awarded=awarded,
        )
        return self.to_admin_response(nanny, notification)

    def to_admin_response(self, nanny: Nanny, notification=None) -> NannyAdminResponse:
        profile = NannyBrowseService(self.db).to_public_views([nanny])[0]
        return NannyAdminResponse(
            id=nanny.id,
            user_id=nanny.user_id,
            email=nanny.user.email,
            phone=nanny.user.phone,
            profile_approved=nanny.profile_approved,
            academy_completed=nanny.academy_completed,
            badges={badge: getattr(nanny, badge) for badge in BADGES},
            documents=DocumentService.describe_documents(nanny),
            profile=profile.model_dump(),
            notification=notification,
        )
