"""Interest domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models import CLEANING_TYPES, SERVICE_TYPES
from ...shared.validators import validate_choice


class InterestCreate(BaseModel):
    """Schema for a client expressing interest in a worker"""

    nanny_id: str
    message: Optional[str] = Field(None, max_length=2000)
    service_type: str = "nanny"
    cleaning_type: Optional[str] = None

    @field_validator("service_type")
    @classmethod
    def validate_service_type(cls, v):
        return validate_choice(v, SERVICE_TYPES, "service type")

    @field_validator("cleaning_type")
    @classmethod
    def validate_cleaning_type(cls, v):
        return validate_choice(v, CLEANING_TYPES, "cleaning type")

    @model_validator(mode="after")
    def check_cleaning_type(self):
        if self.service_type == "cleaning" and not self.cleaning_type:
            raise ValueError("cleaning_type is required for cleaning requests")
        if self.service_type == "nanny" and self.cleaning_type:
            raise ValueError("cleaning_type only applies to cleaning requests")
        return self


class InterestRespond(BaseModel):
    """Worker (or admin on the worker's behalf) approves or declines"""

    response: str

    @field_validator("response")
    @classmethod
    def validate_response(cls, v):
        return validate_choice(v, ("approved", "declined"), "response")


class AdminDecision(BaseModel):
    decision: str
    admin_message: Optional[str] = Field(None, max_length=2000)

    @field_validator("decision")
    @classmethod
    def validate_decision(cls, v):
        return validate_choice(v, ("approve", "reject"), "decision")


class AdminCancel(BaseModel):
    admin_message: Optional[str] = Field(None, max_length=2000)


class ContactDetails(BaseModel):
    name: str
    email: Optional[str]
    phone: Optional[str]
    city: Optional[str]


class InterestResponse(BaseModel):
    id: str
    client_id: str
    nanny_id: str
    service_type: str
    cleaning_type: Optional[str]
    message: Optional[str]
    stage: str
    status: str
    payment_status: Optional[str]
    admin_approved: bool
    nanny_response: Optional[str]
    fee_amount: float
    client_name: Optional[str]
    nanny_name: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    # Only populated once the placement is completed
    counterpart_contact: Optional[ContactDetails] = None
    notifications: Optional[list[dict]] = None
