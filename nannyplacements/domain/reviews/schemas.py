"""Review schemas - Ratings and complaints about workers"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models import REVIEW_STATUSES
from ...shared.validators import validate_choice


class ReviewCreate(BaseModel):
    """A star rating, a written complaint, or both"""

    nanny_id: str
    rating: Optional[int] = Field(None, ge=1, le=5)
    complaint_text: Optional[str] = Field(None, max_length=5000)

    @field_validator("complaint_text")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def check_rating_or_text(self):
        if self.rating is None and not self.complaint_text:
            raise ValueError("Provide a rating, a complaint, or both")
        return self


class ReviewStatusUpdate(BaseModel):
    status: str
    admin_response: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, REVIEW_STATUSES, "review status")


class ReviewResponse(BaseModel):
    id: str
    nanny_id: str
    client_id: str
    rating: Optional[int]
    complaint_text: Optional[str]
    status: str
    admin_response: Optional[str]
    is_complaint: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    client_name: Optional[str] = None
    nanny_name: Optional[str] = None
    notifications: Optional[list[dict]] = None

    class Config:
        from_attributes = True
