"""Academy service - Training video catalogue and worker progress"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import AcademyProgress, AcademyVideo, Nanny, User
from ...security_utils import sanitize_text
from .schemas import AcademyOverview, AcademyVideoCreate, AcademyVideoResponse, MarkCompleteResponse

logger = logging.getLogger(__name__)


class AcademyService:
    """Service layer for the academy"""

    def __init__(self, db: Session):
        self.db = db

    def _active_videos(self) -> list[AcademyVideo]:
        return (
            self.db.query(AcademyVideo)
            .filter(AcademyVideo.is_active.is_(True))
            .order_by(AcademyVideo.order_index, AcademyVideo.created_at)
            .all()
        )

    def _completed_ids(self, nanny_id: str) -> set[str]:
        rows = self.db.query(AcademyProgress.video_id).filter(AcademyProgress.nanny_id == nanny_id).all()
        return {video_id for (video_id,) in rows}

    def _get_nanny(self, user: User) -> Nanny:
        nanny = self.db.query(Nanny).filter(Nanny.user_id == user.id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny profile not found")
        return nanny

    def list_videos(self, user: User) -> AcademyOverview:
        """Active videos in course order, with the worker's progress when the caller is one"""
        videos = self._active_videos()
        views = [AcademyVideoResponse.model_validate(v) for v in videos]

        if user.role != "nanny":
            return AcademyOverview(videos=views, total_count=len(videos))

        nanny = self._get_nanny(user)
        done = self._completed_ids(nanny.id)
        for view in views:
            view.completed = view.id in done
        return AcademyOverview(
            videos=views,
            completed_count=sum(1 for v in views if v.completed),
            total_count=len(views),
            academy_completed=nanny.academy_completed,
        )

    def mark_complete(self, user: User, video_id: str) -> MarkCompleteResponse:
        """Record a watched video; completing every active video completes the academy"""
        nanny = self._get_nanny(user)
        video = (
            self.db.query(AcademyVideo)
            .filter(AcademyVideo.id == video_id, AcademyVideo.is_active.is_(True))
            .first()
        )
        if not video:
            raise HTTPException(status_code=404, detail="Video not found")

        if video_id not in self._completed_ids(nanny.id):
            try:
                self.db.add(AcademyProgress(nanny_id=nanny.id, video_id=video_id))
                self.db.commit()
                logger.info(f"🎓 Nanny {nanny.id} completed video {video_id}")
            except IntegrityError:
                # Double click; the other request already stored it
                self.db.rollback()

        active_ids = {v.id for v in self._active_videos()}
        completed_count = len(active_ids & self._completed_ids(nanny.id))
        if active_ids and completed_count >= len(active_ids) and not nanny.academy_completed:
            nanny.academy_completed = True
            self.db.commit()
            logger.info(f"🏅 Nanny {nanny.id} completed the academy")

        return MarkCompleteResponse(
            video_id=video_id,
            completed_count=completed_count,
            total_count=len(active_ids),
            academy_completed=nanny.academy_completed,
        )

    # ========================================================================
    # ADMIN
    # ========================================================================

    def list_all_videos(self) -> list[AcademyVideo]:
        return self.db.query(AcademyVideo).order_by(AcademyVideo.order_index, AcademyVideo.created_at).all()

    def create_video(self, data: AcademyVideoCreate) -> AcademyVideo:
        video = AcademyVideo(
            title=sanitize_text(data.title, max_length=255) or "Untitled video",
            description=sanitize_text(data.description),
            video_url=data.video_url,
            duration_minutes=data.duration_minutes,
            order_index=data.order_index,
            is_active=data.is_active,
        )
        self.db.add(video)
        self.db.commit()
        self.db.refresh(video)
        logger.info(f"🎬 Academy video created: {video.id} ({video.title})")
        return video

    def _get_video(self, video_id: str) -> AcademyVideo:
        video = self.db.query(AcademyVideo).filter(AcademyVideo.id == video_id).first()
        if not video:
            raise HTTPException(status_code=404, detail="Video not found")
        return video

    def delete_video(self, video_id: str) -> None:
        video = self._get_video(video_id)
        self.db.query(AcademyProgress).filter(AcademyProgress.video_id == video_id).delete(
            synchronize_session=False
        )
        self.db.delete(video)
        self.db.commit()
        logger.info(f"🗑️ Academy video deleted: {video_id}")

    def toggle_video(self, video_id: str) -> AcademyVideo:
        video = self._get_video(video_id)
        video.is_active = not video.is_active
        self.db.commit()
        self.db.refresh(video)
        logger.info(f"🔁 Academy video {video_id} active={video.is_active}")
        return video
