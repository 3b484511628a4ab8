"""Payment service - Placement fee checkout, confirmation and reconciliation"""

import json
import logging
from typing import Optional

from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import email_service
from ...config import PAYMENT_CURRENCY, PAYMENT_WEBHOOK_SECRET
from ...models import Client, Interest, Payment, User
from ...services.notification_service import send_notifications
from ...webhook_security import verify_payment_webhook
from ..interests.repository import InterestRepository
from ..interests.state_machine import PAID_STAGES, Event, Stage
from .references import extract_interest_id, generate_tx_ref
from .repository import PaymentRepository
from .schemas import CheckoutResponse, PaymentConfirm, PaymentResponse, PaymentResult, WebhookPayload

logger = logging.getLogger(__name__)

PAYABLE_STAGES = {Stage.AWAITING_PAYMENT.value} | {s.value for s in PAID_STAGES}


class PaymentService:
    """Service layer for placement fee payments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()
        self.interest_repo = InterestRepository()

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _get_interest(self, interest_id: str) -> Interest:
        interest = self.interest_repo.get_interest_by_id(self.db, interest_id)
        if not interest:
            raise HTTPException(status_code=404, detail="Interest not found")
        return interest

    def _get_owned_interest(self, user: User, interest_id: str) -> Interest:
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        interest = self._get_interest(interest_id)
        if not client or interest.client_id != client.id:
            raise HTTPException(status_code=404, detail="Interest not found")
        return interest

    # ========================================================================
    # CHECKOUT
    # ========================================================================

    def start_checkout(self, user: User, interest_id: str) -> CheckoutResponse:
        """Checkout parameters for an interest the worker has accepted"""
        interest = self._get_owned_interest(user, interest_id)
        if interest.stage != Stage.AWAITING_PAYMENT.value:
            raise HTTPException(
                status_code=409,
                detail=f"Interest is not awaiting payment (stage: {interest.stage})",
            )

        nanny_name = interest.nanny.user.full_name
        if interest.service_type == "cleaning":
            title = "Cleaner placement fee"
            description = f"Contact details for {nanny_name} ({interest.cleaning_type.replace('_', ' ')} cleaning)"
        else:
            title = "Nanny placement fee"
            description = f"Contact details for {nanny_name}"

        tx_ref = generate_tx_ref(interest.id, interest.service_type)
        logger.info(f"🛒 Checkout started for interest {interest.id}: {tx_ref}")

        return CheckoutResponse(
            interest_id=interest.id,
            tx_ref=tx_ref,
            amount=interest.fee_amount,
            currency=PAYMENT_CURRENCY,
            customer_name=user.full_name,
            customer_email=user.email,
            customer_phone=user.phone,
            title=title,
            description=description,
        )

    # ========================================================================
    # RECORDING
    # ========================================================================

    async def record_payment(
        self,
        interest: Interest,
        transaction_id: str,
        status: str,
        payment_method: Optional[str] = None,
        tx_ref: Optional[str] = None,
    ) -> PaymentResult:
        """
        Record a gateway transaction against an interest.

        Idempotent on transaction_id. A completed payment advances the interest from
        awaiting_payment to awaiting_admin; a failed one is stored without touching
        the stage.
        """
        existing = self.repo.get_by_transaction_id(self.db, transaction_id)
        if existing:
            return self._already_recorded(existing, interest)

        if status == "completed":
            if interest.stage not in PAYABLE_STAGES:
                raise HTTPException(
                    status_code=409,
                    detail=f"Interest cannot be paid in stage {interest.stage}",
                )
            paid = self.repo.get_completed_for_interest(self.db, interest.id)
            if paid:
                logger.warning(
                    f"⚠️ Interest {interest.id} already paid by {paid.transaction_id}, "
                    f"rejecting {transaction_id}"
                )
                raise HTTPException(
                    status_code=409, detail="This interest has already been paid"
                )

        try:
            payment = self.repo.add_payment(
                self.db,
                client_id=interest.client_id,
                nanny_id=interest.nanny_id,
                interest_id=interest.id,
                amount=interest.fee_amount,
                currency=PAYMENT_CURRENCY,
                status=status,
                payment_method=payment_method,
                transaction_id=transaction_id,
                tx_ref=tx_ref,
            )
        except IntegrityError as e:
            # Same transaction delivered twice at once (webhook and client callback),
            # or a different completed transaction for the interest won the race
            self.db.rollback()
            existing = self.repo.get_by_transaction_id(self.db, transaction_id)
            if existing:
                return self._already_recorded(existing, interest)
            if status == "completed" and self.repo.get_completed_for_interest(self.db, interest.id):
                logger.warning(f"⚠️ Interest {interest.id} was paid concurrently, rejecting {transaction_id}")
                raise HTTPException(status_code=409, detail="This interest has already been paid") from e
            raise

        advanced = False
        if status == "completed" and interest.stage == Stage.AWAITING_PAYMENT.value:
            advanced = self.interest_repo.transition(
                self.db, interest.id, Event.PAYMENT_COMPLETED, Stage.AWAITING_ADMIN.value
            )
        else:
            self.db.commit()
        self.db.expire(interest)
        self.db.refresh(payment)

        logger.info(
            f"💳 Payment {transaction_id} recorded for interest {interest.id}: {status} "
            f"(stage {interest.stage})"
        )

        notifications = None
        if advanced:
            notifications = await self._send_payment_success(interest, payment)
        elif status == "completed":
            logger.warning(f"⚠️ Payment {transaction_id} did not advance interest {interest.id}")

        return PaymentResult(
            payment=PaymentResponse.model_validate(payment),
            interest_stage=interest.stage,
            already_recorded=False,
            notifications=notifications,
        )

    def _already_recorded(self, payment: Payment, interest: Interest) -> PaymentResult:
        if payment.interest_id != interest.id:
            logger.warning(
                f"🚫 Transaction {payment.transaction_id} belongs to interest {payment.interest_id}, "
                f"not {interest.id}"
            )
            raise HTTPException(
                status_code=409, detail="Transaction already recorded for another interest"
            )
        logger.info(f"🔄 Payment {payment.transaction_id} already recorded, skipping")
        return PaymentResult(
            payment=PaymentResponse.model_validate(payment),
            interest_stage=interest.stage,
            already_recorded=True,
        )

    async def confirm_payment(self, user: User, data: PaymentConfirm) -> PaymentResult:
        """Client callback after the gateway reports the outcome in the browser"""
        interest = self._get_owned_interest(user, data.interest_id)
        if data.tx_ref and extract_interest_id(data.tx_ref) != interest.id:
            raise HTTPException(status_code=400, detail="Transaction reference does not match interest")
        return await self.record_payment(
            interest, data.transaction_id, data.status, data.payment_method, data.tx_ref
        )

    async def handle_webhook(self, request: Request) -> PaymentResult:
        """Signed server-to-server callback from the gateway"""
        raw_body = await verify_payment_webhook(request, PAYMENT_WEBHOOK_SECRET)

        try:
            payload = WebhookPayload(**json.loads(raw_body.decode("utf-8")))
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"❌ Invalid payment webhook payload: {e}")
            raise HTTPException(status_code=400, detail="Invalid webhook payload") from e

        logger.info(f"🔔 Payment webhook tx_ref={payload.tx_ref} status={payload.status}")

        interest_id = extract_interest_id(payload.tx_ref)
        if not interest_id:
            raise HTTPException(status_code=400, detail="Unrecognised transaction reference")
        interest = self._get_interest(interest_id)

        if (
            payload.status == "completed"
            and payload.amount is not None
            and payload.amount < interest.fee_amount
        ):
            logger.warning(
                f"🚫 Underpayment for interest {interest.id}: {payload.amount} < {interest.fee_amount}"
            )
            raise HTTPException(status_code=400, detail="Paid amount is below the placement fee")

        return await self.record_payment(
            interest,
            payload.transaction_id,
            payload.status,
            payload.payment_method,
            payload.tx_ref,
        )

    async def reconcile(self) -> list[str]:
        """Advance interests that hold a completed payment but never left awaiting_payment"""
        repaired = []
        for interest in self.repo.interests_paid_but_awaiting_payment(self.db):
            if self.interest_repo.transition(
                self.db, interest.id, Event.PAYMENT_COMPLETED, Stage.AWAITING_ADMIN.value
            ):
                repaired.append(interest.id)
                self.db.expire(interest)
                payment = self.repo.get_completed_for_interest(self.db, interest.id)
                await self._send_payment_success(interest, payment)

        if repaired:
            logger.info(f"🛠️ Reconciled {len(repaired)} paid interests: {repaired}")
        return repaired

    def list_payments(self, user: User) -> list[Payment]:
        if user.role == "admin":
            return self.repo.list_all(self.db)
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        if not client:
            return []
        return self.repo.list_for_client(self.db, client.id)

    # ========================================================================
    # NOTIFICATIONS
    # ========================================================================

    async def _send_payment_success(self, interest: Interest, payment: Payment) -> list[dict]:
        client_user = interest.client.user
        nanny_user = interest.nanny.user
        return await send_notifications(
            (
                client_user.email,
                "payment_success_client",
                email_service.send_payment_success_email,
                {
                    "to": client_user.email,
                    "recipient_name": client_user.first_name,
                    "recipient_role": "client",
                    "counterpart_name": nanny_user.full_name,
                    "amount": payment.amount,
                    "transaction_id": payment.transaction_id,
                },
            ),
            (
                nanny_user.email,
                "payment_success_nanny",
                email_service.send_payment_success_email,
                {
                    "to": nanny_user.email,
                    "recipient_name": nanny_user.first_name,
                    "recipient_role": "nanny",
                    "counterpart_name": client_user.full_name,
                    "amount": payment.amount,
                    "transaction_id": payment.transaction_id,
                },
            ),
        )
