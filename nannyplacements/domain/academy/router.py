"""Academy router - Training videos for workers"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_nanny, get_current_user
from ...database import get_db
from ...models import User
from .schemas import AcademyOverview, MarkCompleteResponse
from .service import AcademyService

router = APIRouter(prefix="/academy", tags=["Academy"])


def get_academy_service(db: Session = Depends(get_db)) -> AcademyService:
    """Dependency injection for AcademyService"""
    return AcademyService(db)


@router.get("/videos", response_model=AcademyOverview)
async def list_videos(
    current_user: User = Depends(get_current_user),
    service: AcademyService = Depends(get_academy_service),
):
    return service.list_videos(current_user)


@router.post("/videos/{video_id}/complete", response_model=MarkCompleteResponse)
async def mark_complete(
    video_id: str,
    current_user: User = Depends(get_current_nanny),
    service: AcademyService = Depends(get_academy_service),
):
    """Mark a video as watched. Repeating the call is harmless."""
    return service.mark_complete(current_user, video_id)
