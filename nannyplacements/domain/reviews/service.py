"""Review service - Client feedback and the admin complaint desk"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ... import email_service
from ...config import ADMIN_NOTIFICATION_EMAIL
from ...models import Client, Nanny, Review, User
from ...security_utils import sanitize_text
from ...services.notification_service import send_notification, send_notifications
from .schemas import ReviewCreate, ReviewResponse

logger = logging.getLogger(__name__)

REVIEW_TYPES = ("review", "complaint")


class ReviewService:
    """Service layer for reviews and complaints"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Review).options(
            joinedload(Review.client).joinedload(Client.user),
            joinedload(Review.nanny).joinedload(Nanny.user),
        )

    def _get_review(self, review_id: str) -> Review:
        review = self._query().filter(Review.id == review_id).first()
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        return review

    async def submit_review(self, user: User, data: ReviewCreate) -> tuple[Review, dict]:
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        if not client:
            raise HTTPException(status_code=404, detail="Client profile not found")

        nanny = self.db.query(Nanny).filter(Nanny.id == data.nanny_id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny not found")

        existing = (
            self.db.query(Review)
            .filter(Review.nanny_id == nanny.id, Review.client_id == client.id)
            .first()
        )
        if existing:
            raise HTTPException(status_code=409, detail="You have already reviewed this worker")

        complaint_text = sanitize_text(data.complaint_text)
        if data.rating is None and complaint_text is None:
            raise HTTPException(status_code=400, detail="Provide a rating or a complaint")

        review = Review(
            nanny_id=nanny.id,
            client_id=client.id,
            rating=data.rating,
            complaint_text=complaint_text,
            status="pending",
        )
        try:
            self.db.add(review)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="You have already reviewed this worker") from e
        self.db.refresh(review)

        kind = "complaint" if review.is_complaint else f"{review.rating}-star review"
        logger.info(f"⭐ New {kind} {review.id} for nanny {nanny.id} from client {client.id}")

        notification = await send_notification(
            ADMIN_NOTIFICATION_EMAIL,
            "new_review_admin",
            email_service.send_new_review_admin_email,
            client_name=user.full_name,
            nanny_name=nanny.user.full_name,
            rating=review.rating,
            complaint_text=review.complaint_text,
        )
        return review, notification

    def list_reviews(
        self,
        review_type: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Review]:
        """Admin listing; type is review (has a rating) or complaint (no rating)"""
        query = self._query()
        if review_type == "complaint":
            query = query.filter(Review.rating.is_(None))
        elif review_type == "review":
            query = query.filter(Review.rating.isnot(None))
        elif review_type:
            raise HTTPException(status_code=400, detail=f"Type must be one of: {', '.join(REVIEW_TYPES)}")

        if status:
            query = query.filter(Review.status == status)
        else:
            query = query.filter(Review.status != "archived")

        if search:
            pattern = f"%{search.strip()}%"
            client_ids = _user_match(self.db.query(Client.id).join(User, Client.user_id == User.id), pattern)
            nanny_ids = _user_match(self.db.query(Nanny.id).join(User, Nanny.user_id == User.id), pattern)
            query = query.filter(
                or_(
                    Review.complaint_text.ilike(pattern),
                    Review.client_id.in_(client_ids),
                    Review.nanny_id.in_(nanny_ids),
                )
            )
        return query.order_by(Review.created_at.desc()).all()

    async def update_review_status(
        self, review_id: str, status: str, admin_response: Optional[str] = None
    ) -> tuple[Review, list[dict]]:
        """
        Set the admin status and response.

        The client is always emailed; the worker only for complaints and low ratings.
        """
        review = self._get_review(review_id)
        review.status = status
        if admin_response is not None:
            review.admin_response = sanitize_text(admin_response)
        self.db.commit()
        self.db.refresh(review)
        logger.info(f"📝 Review {review.id} set to {status}")

        client_user = review.client.user
        nanny_user = review.nanny.user
        notifications = [
            (
                client_user.email,
                "review_status_client",
                email_service.send_review_status_email,
                {
                    "to": client_user.email,
                    "recipient_name": client_user.first_name,
                    "counterpart_name": nanny_user.full_name,
                    "recipient_role": "client",
                    "rating": review.rating,
                    "status": status,
                    "admin_message": review.admin_response,
                },
            )
        ]
        if review.is_complaint or (review.rating is not None and review.rating <= 2):
            notifications.append(
                (
                    nanny_user.email,
                    "review_status_nanny",
                    email_service.send_review_status_email,
                    {
                        "to": nanny_user.email,
                        "recipient_name": nanny_user.first_name,
                        "counterpart_name": client_user.full_name,
                        "recipient_role": "nanny",
                        "rating": review.rating,
                        "status": status,
                        "admin_message": review.admin_response,
                    },
                )
            )
        return review, await send_notifications(*notifications)

    def archive(self, review_id: str) -> Review:
        review = self._get_review(review_id)
        review.status = "archived"
        self.db.commit()
        self.db.refresh(review)
        logger.info(f"🗄️ Review {review.id} archived")
        return review

    @staticmethod
    def to_response(review: Review, notifications: Optional[list[dict]] = None) -> ReviewResponse:
        response = ReviewResponse.model_validate(review)
        response.client_name = review.client.user.full_name if review.client else None
        response.nanny_name = review.nanny.user.full_name if review.nanny else None
        response.notifications = notifications
        return response


def _user_match(query, pattern: str):
    return query.filter(
        or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern), User.email.ilike(pattern))
    )
