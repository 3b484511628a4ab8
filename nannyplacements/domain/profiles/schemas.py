"""Profile schemas - Client preferences and worker profile fields"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import (
    ACCOMMODATION_TYPES,
    EDUCATION_LEVELS,
    EMPLOYMENT_TYPES,
    EXPERIENCE_TYPES,
    LANGUAGES,
)
from ...shared.validators import validate_choice


class ClientProfileUpdate(BaseModel):
    description: Optional[str] = Field(None, max_length=5000)
    preferred_employment_type: Optional[str] = None
    preferred_experience_type: Optional[str] = None
    preferred_accommodation_type: Optional[str] = None

    @field_validator("preferred_employment_type")
    @classmethod
    def validate_employment(cls, v):
        return validate_choice(v, EMPLOYMENT_TYPES, "employment type")

    @field_validator("preferred_experience_type")
    @classmethod
    def validate_experience(cls, v):
        return validate_choice(v, EXPERIENCE_TYPES, "experience type")

    @field_validator("preferred_accommodation_type")
    @classmethod
    def validate_accommodation(cls, v):
        return validate_choice(v, ACCOMMODATION_TYPES, "accommodation type")


class ClientProfileResponse(BaseModel):
    id: str
    user_id: str
    description: Optional[str]
    preferred_employment_type: Optional[str]
    preferred_experience_type: Optional[str]
    preferred_accommodation_type: Optional[str]

    class Config:
        from_attributes = True


class NannyProfileUpdate(BaseModel):
    """Self-editable worker fields; approval flags, documents and badges are admin-only"""

    bio: Optional[str] = Field(None, max_length=5000)
    hourly_rate: Optional[float] = None
    languages: Optional[list[str]] = None
    date_of_birth: Optional[date] = None
    education_level: Optional[str] = None
    experience_type: Optional[str] = None
    experience_duration: Optional[int] = None
    employment_type: Optional[str] = None
    accommodation_preference: Optional[str] = None

    @field_validator("hourly_rate")
    @classmethod
    def validate_rate(cls, v):
        if v is not None and v < 0:
            raise ValueError("Hourly rate cannot be negative")
        return v

    @field_validator("experience_duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and not 0 <= v <= 60:
            raise ValueError("Experience duration must be between 0 and 60 years")
        return v

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v):
        if v is None:
            return v
        unknown = [lang for lang in v if lang not in LANGUAGES]
        if unknown:
            raise ValueError(f"Unsupported languages: {', '.join(unknown)}")
        # Keep order, drop duplicates
        return list(dict.fromkeys(v))

    @field_validator("date_of_birth")
    @classmethod
    def validate_dob(cls, v):
        if v is not None and v >= date.today():
            raise ValueError("Date of birth must be in the past")
        return v

    @field_validator("education_level")
    @classmethod
    def validate_education(cls, v):
        return validate_choice(v, EDUCATION_LEVELS, "education level")

    @field_validator("experience_type")
    @classmethod
    def validate_experience(cls, v):
        return validate_choice(v, EXPERIENCE_TYPES, "experience type")

    @field_validator("employment_type")
    @classmethod
    def validate_employment(cls, v):
        return validate_choice(v, EMPLOYMENT_TYPES, "employment type")

    @field_validator("accommodation_preference")
    @classmethod
    def validate_accommodation(cls, v):
        return validate_choice(v, ACCOMMODATION_TYPES, "accommodation preference")


class NannyOwnProfileResponse(BaseModel):
    """The worker's own view, including review statuses and masked payout details"""

    id: str
    user_id: str
    bio: Optional[str]
    hourly_rate: Optional[float]
    languages: list[str]
    date_of_birth: Optional[date]
    education_level: Optional[str]
    experience_type: str
    experience_duration: Optional[int]
    employment_type: Optional[str]
    accommodation_preference: Optional[str]
    criminal_check_status: str
    credit_check_status: str
    proof_of_residence_status: str
    has_criminal_check: bool
    has_credit_check: bool
    has_proof_of_residence: bool
    has_interview_video: bool
    training_cpr: bool
    training_first_aid: bool
    training_nanny: bool
    training_child_development: bool
    training_cleaning: bool
    academy_completed: bool
    profile_approved: bool
    bank_name: Optional[str]
    account_number_masked: Optional[str]
    account_holder_name: Optional[str]
