"""Interest router - Client requests, worker responses and their history"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_client, get_current_user, require_role
from ...database import get_db
from ...models import User
from .schemas import InterestCreate, InterestRespond, InterestResponse
from .service import InterestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interests", tags=["Interests"])


def get_interest_service(db: Session = Depends(get_db)) -> InterestService:
    """Dependency injection for InterestService"""
    return InterestService(db)


@router.post("", response_model=InterestResponse, status_code=201)
async def express_interest(
    data: InterestCreate,
    current_user: User = Depends(get_current_client),
    service: InterestService = Depends(get_interest_service),
):
    """
    Express interest in a worker.

    The worker is notified by email and the client receives a confirmation with the
    placement fee due once the worker accepts.
    """
    logger.info(f"📥 Interest request from {current_user.email} for nanny {data.nanny_id}")
    interest, notifications = await service.express_interest(current_user, data)
    return service.to_response(interest, current_user, notifications)


@router.get("", response_model=list[InterestResponse])
async def list_interests(
    stage: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InterestService = Depends(get_interest_service),
):
    """Interests the caller is a party to (all interests for admins)"""
    interests = service.list_interests(current_user, stage)
    return [service.to_response(i, current_user) for i in interests]


@router.get("/{interest_id}", response_model=InterestResponse)
async def get_interest(
    interest_id: str,
    current_user: User = Depends(get_current_user),
    service: InterestService = Depends(get_interest_service),
):
    interest = service.get_for_user(current_user, interest_id)
    return service.to_response(interest, current_user)


@router.post("/{interest_id}/respond", response_model=InterestResponse)
async def respond_to_interest(
    interest_id: str,
    data: InterestRespond,
    current_user: User = Depends(require_role("nanny", "admin")),
    service: InterestService = Depends(get_interest_service),
):
    """Worker approves or declines a pending request"""
    interest, notifications = await service.respond(current_user, interest_id, data.response)
    return service.to_response(interest, current_user, notifications)
