"""Profile router - Own profile endpoints for clients and workers"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_client, get_current_nanny
from ...database import get_db
from ...models import User
from .schemas import (
    ClientProfileResponse,
    ClientProfileUpdate,
    NannyOwnProfileResponse,
    NannyProfileUpdate,
)
from .service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/client", response_model=ClientProfileResponse)
async def get_client_profile(
    current_user: User = Depends(get_current_client),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_client_profile(current_user)


@router.put("/client", response_model=ClientProfileResponse)
async def update_client_profile(
    data: ClientProfileUpdate,
    current_user: User = Depends(get_current_client),
    service: ProfileService = Depends(get_profile_service),
):
    """Update the client's description and matching preferences"""
    return service.update_client_profile(current_user, data)


@router.get("/nanny", response_model=NannyOwnProfileResponse)
async def get_nanny_profile(
    current_user: User = Depends(get_current_nanny),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_own_response(service.get_nanny_profile(current_user))


@router.put("/nanny", response_model=NannyOwnProfileResponse)
async def update_nanny_profile(
    data: NannyProfileUpdate,
    current_user: User = Depends(get_current_nanny),
    service: ProfileService = Depends(get_profile_service),
):
    """Update the worker's self-editable profile fields"""
    return service.to_own_response(service.update_nanny_profile(current_user, data))
