"""Academy schemas - Pydantic models for training videos"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AcademyVideoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1, max_length=500)
    duration_minutes: Optional[int] = Field(None, ge=0)
    order_index: int = Field(0, ge=0)
    is_active: bool = True

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v):
        v = v.strip()
        if not v.startswith(("https://", "http://")):
            raise ValueError("video_url must be an http(s) URL")
        return v


class AcademyVideoResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    video_url: str
    duration_minutes: Optional[int]
    order_index: int
    is_active: bool
    created_at: Optional[datetime]
    # Only set for workers
    completed: Optional[bool] = None

    class Config:
        from_attributes = True


class AcademyOverview(BaseModel):
    videos: list[AcademyVideoResponse]
    completed_count: Optional[int] = None
    total_count: int
    academy_completed: Optional[bool] = None


class MarkCompleteResponse(BaseModel):
    video_id: str
    completed_count: int
    total_count: int
    academy_completed: bool
