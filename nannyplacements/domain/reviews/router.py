"""Review router - Clients rate workers or lodge complaints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_client
from ...database import get_db
from ...models import User
from .schemas import ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.post("", response_model=ReviewResponse, status_code=201)
async def submit_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_client),
    service: ReviewService = Depends(get_review_service),
):
    """
    Rate a worker (1-5), lodge a complaint, or both.

    One submission per client and worker. The admin team is notified by email.
    """
    review, notification = await service.submit_review(current_user, data)
    return service.to_response(review, [notification])
