"""Admin back-office schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_choice

BADGES = (
    "training_cpr",
    "training_first_aid",
    "training_nanny",
    "training_child_development",
    "training_cleaning",
)


class DashboardStats(BaseModel):
    users_by_role: dict[str, int]
    nannies_pending_approval: int
    documents_pending_review: int
    interests_by_stage: dict[str, int]
    completed_payment_total: float
    open_reviews: int


class ProfileApproval(BaseModel):
    approved: bool


class BadgeToggle(BaseModel):
    badge: str

    @field_validator("badge")
    @classmethod
    def validate_badge(cls, v):
        return validate_choice(v, BADGES, "badge")


class DocumentStatusUpdate(BaseModel):
    status: str


class NannyAdminResponse(BaseModel):
    """Everything the back-office needs to vet a worker"""

    id: str
    user_id: str
    email: str
    phone: Optional[str]
    profile_approved: bool
    academy_completed: bool
    badges: dict[str, bool]
    documents: list[dict]
    profile: dict
    notification: Optional[dict] = None
