"""Payment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_choice

PAYMENT_STATUSES = ("completed", "failed")


class CheckoutRequest(BaseModel):
    interest_id: str


class CheckoutResponse(BaseModel):
    """Parameters the frontend hands to the payment gateway widget"""

    interest_id: str
    tx_ref: str
    amount: float
    currency: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    title: str
    description: str


class PaymentConfirm(BaseModel):
    """Client-side callback after the gateway redirect"""

    interest_id: str
    transaction_id: str
    tx_ref: Optional[str] = None
    status: str = "completed"
    payment_method: Optional[str] = None

    @field_validator("transaction_id")
    @classmethod
    def validate_transaction_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("transaction_id is required")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, PAYMENT_STATUSES, "payment status")


class WebhookPayload(BaseModel):
    """Body of a signed gateway callback"""

    tx_ref: str
    transaction_id: str
    status: str
    payment_method: Optional[str] = None
    amount: Optional[float] = None

    @field_validator("transaction_id", "tx_ref")
    @classmethod
    def validate_not_blank(cls, v):
        v = str(v).strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v):
        # Gateways report success in several spellings
        v = v.strip().lower()
        if v in ("successful", "success", "succeeded", "completed"):
            return "completed"
        return "failed"


class PaymentResponse(BaseModel):
    id: str
    client_id: str
    nanny_id: str
    interest_id: str
    amount: float
    currency: str
    status: str
    payment_method: Optional[str]
    transaction_id: str
    tx_ref: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    """Outcome of recording a payment"""

    payment: PaymentResponse
    interest_stage: str
    already_recorded: bool
    notifications: Optional[list[dict]] = None


class ReconcileResponse(BaseModel):
    repaired_interest_ids: list[str]
    count: int
