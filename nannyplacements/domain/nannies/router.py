"""Nanny browse router - Public listing of approved workers"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_client, get_optional_user
from ...database import get_db
from ...models import User
from .filters import NannyFilters
from .schemas import AutoMatchResponse, NannyListResponse, NannyPublicResponse
from .service import NannyBrowseService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Nannies"])


def get_browse_service(db: Session = Depends(get_db)) -> NannyBrowseService:
    """Dependency injection for NannyBrowseService"""
    return NannyBrowseService(db)


def get_filters(
    city: Optional[str] = Query(None),
    experience_type: Optional[str] = Query(None),
    employment_type: Optional[str] = Query(None),
    accommodation: Optional[str] = Query(None),
    max_rate: Optional[float] = Query(None, ge=0),
    languages: Optional[str] = Query(None, description="Comma-separated; worker must speak all"),
    education: Optional[str] = Query(None),
    experience_duration: Optional[int] = Query(None, ge=0),
    age_range: Optional[str] = Query(None, description="One of 20-25 ... 50-55"),
) -> NannyFilters:
    try:
        return NannyFilters(
            city=city,
            experience_type=experience_type,
            employment_type=employment_type,
            accommodation=accommodation,
            max_rate=max_rate,
            languages=languages,
            education=education,
            experience_duration=experience_duration,
            age_range=age_range,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/nannies", response_model=NannyListResponse)
async def list_nannies(
    filters: NannyFilters = Depends(get_filters),
    viewer: Optional[User] = Depends(get_optional_user),
    service: NannyBrowseService = Depends(get_browse_service),
):
    """Browse approved workers with optional filters"""
    return service.list_nannies(filters, viewer)


@router.get("/cleaners", response_model=NannyListResponse)
async def list_cleaners(
    filters: NannyFilters = Depends(get_filters),
    viewer: Optional[User] = Depends(get_optional_user),
    service: NannyBrowseService = Depends(get_browse_service),
):
    """Browse approved workers offering cleaning services"""
    return service.list_nannies(filters, viewer, cleaners_only=True)


@router.get("/nannies/auto-match", response_model=AutoMatchResponse)
async def auto_match(
    current_user: User = Depends(get_current_client),
    service: NannyBrowseService = Depends(get_browse_service),
):
    """Workers matching the calling client's saved preferences"""
    return service.auto_match(current_user)


@router.get("/nannies/{nanny_id}", response_model=NannyPublicResponse)
async def get_nanny(
    nanny_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    service: NannyBrowseService = Depends(get_browse_service),
):
    return service.get_nanny(nanny_id, viewer)
