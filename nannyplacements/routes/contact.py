"""
Contact Routes - Public contact form forwarded to the admin mailbox
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from ..email_service import send_contact_form_email
from ..rate_limiter import create_rate_limiter
from ..shared.validators import validate_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contact"])

contact_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="contact")


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v.strip())

    @field_validator("name", "subject", "message")
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


@router.post("/contact")
async def submit_contact_form(
    data: ContactRequest,
    _: None = Depends(contact_rate_limit),
):
    """Forward a visitor's message to the admin team (rate limited to 5 per hour)"""
    logger.info(f"📨 Contact form message from {data.email}")
    try:
        await send_contact_form_email(
            name=data.name, email=data.email, subject=data.subject, message=data.message
        )
    except Exception as e:
        logger.error(f"❌ Failed to forward contact form message from {data.email}: {e}")
        raise HTTPException(
            status_code=502, detail="We could not send your message. Please try again later."
        ) from e
    return {"success": True, "message": "Thanks for getting in touch. We'll reply by email."}
