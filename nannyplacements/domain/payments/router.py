"""Payment router - Checkout, confirmation and the gateway webhook"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import get_current_client, require_role
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import CheckoutRequest, CheckoutResponse, PaymentConfirm, PaymentResponse, PaymentResult
from .service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])

rate_limit_payment_webhook = create_rate_limiter(limit=100, window_seconds=60, key_prefix="payment_webhook")


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.post("/checkout", response_model=CheckoutResponse)
async def start_checkout(
    data: CheckoutRequest,
    current_user: User = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service),
):
    """Checkout parameters for an accepted interest"""
    return service.start_checkout(current_user, data.interest_id)


@router.post("/confirm", response_model=PaymentResult)
async def confirm_payment(
    data: PaymentConfirm,
    current_user: User = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service),
):
    """Record the outcome the gateway reported to the browser"""
    logger.info(f"📥 Payment confirmation from {current_user.email} for interest {data.interest_id}")
    return await service.confirm_payment(current_user, data)


@router.post("/webhook", response_model=PaymentResult)
async def payment_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
    _: None = Depends(rate_limit_payment_webhook),
):
    """
    Gateway callback.

    Security:
      - HMAC-SHA256 over "<timestamp>.<body>" with constant-time comparison
      - Timestamp window to prevent replay attacks
      - Idempotent on transaction_id
    """
    return await service.handle_webhook(request)


@router.get("", response_model=list[PaymentResponse])
async def list_payments(
    current_user: User = Depends(require_role("client", "admin")),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_payments(current_user)
