"""Accounts domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import USER_ROLES
from ...shared.validators import validate_choice, validate_email, validate_sa_phone


class SignupRequest(BaseModel):
    """Schema for self-registration of a client or nanny"""

    email: str
    password: str
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    suburb: Optional[str] = None
    user_type: str
    experience_type: Optional[str] = None
    # Nanny payout details
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_holder_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v):
        if not v or not v.strip():
            raise ValueError("First name is required")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_sa_phone(v)
        return v

    @field_validator("user_type")
    @classmethod
    def validate_user_type(cls, v):
        return validate_choice(v, ("client", "nanny"), "user_type")

    @field_validator("experience_type")
    @classmethod
    def validate_experience_type(cls, v):
        return validate_choice(v, ("nanny", "cleaning", "both"), "experience_type")

    @field_validator("bank_name", "account_number", "account_holder_name")
    @classmethod
    def strip_bank_fields(cls, v):
        if v is None:
            return v
        return v.strip() or None


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: Optional[str]


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    suburb: Optional[str] = None
    town: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_sa_phone(v)
        return v


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    phone: Optional[str]
    city: Optional[str]
    suburb: Optional[str]
    town: Optional[str]
    role: Optional[str]
    profile_complete: bool
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class RoleAssignment(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        return validate_choice(v, USER_ROLES, "role")
