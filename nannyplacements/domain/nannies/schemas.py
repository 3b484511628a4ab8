"""Nanny browse schemas - Public worker view without contact or payout details"""

from typing import Optional

from pydantic import BaseModel


class NannyPublicResponse(BaseModel):
    id: str
    user_id: str
    first_name: Optional[str]
    last_name: Optional[str]
    city: Optional[str]
    suburb: Optional[str]
    profile_picture_url: Optional[str] = None
    bio: Optional[str]
    hourly_rate: Optional[float]
    languages: list[str]
    age: Optional[int]
    education_level: Optional[str]
    experience_type: str
    experience_duration: Optional[int]
    employment_type: Optional[str]
    accommodation_preference: Optional[str]
    criminal_check_status: str
    credit_check_status: str
    proof_of_residence_status: str
    training_cpr: bool
    training_first_aid: bool
    training_nanny: bool
    training_child_development: bool
    training_cleaning: bool
    academy_completed: bool
    profile_approved: bool
    average_rating: Optional[float] = None
    review_count: int = 0


class NannyListResponse(BaseModel):
    count: int
    nannies: list[NannyPublicResponse]


class AutoMatchResponse(BaseModel):
    count: int
    filters: dict
    nannies: list[NannyPublicResponse]
