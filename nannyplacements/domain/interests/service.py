"""Interest service - The client-to-worker interest workflow"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import email_service
from ...config import CLEANING_FEES, NANNY_PLACEMENT_FEE
from ...models import Client, Interest, Nanny, User
from ...security_utils import sanitize_text
from ...services.notification_service import send_notifications
from .repository import InterestRepository
from .schemas import ContactDetails, InterestCreate, InterestResponse
from .state_machine import Event, InvalidTransitionError, Stage, next_stage

logger = logging.getLogger(__name__)


def placement_fee(service_type: str, cleaning_type: Optional[str] = None) -> float:
    """Fee charged to the client for the contact release"""
    if service_type == "cleaning":
        return CLEANING_FEES[cleaning_type]
    return NANNY_PLACEMENT_FEE


class InterestService:
    """Service layer for the interest state machine"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InterestRepository()

    # ========================================================================
    # LOOKUPS
    # ========================================================================

    def get_interest_or_404(self, interest_id: str) -> Interest:
        interest = self.repo.get_interest_by_id(self.db, interest_id)
        if not interest:
            raise HTTPException(status_code=404, detail="Interest not found")
        return interest

    def _client_for(self, user: User) -> Client:
        client = self.db.query(Client).filter(Client.user_id == user.id).first()
        if not client:
            raise HTTPException(status_code=404, detail="Client profile not found")
        return client

    def _nanny_for(self, user: User) -> Nanny:
        nanny = self.db.query(Nanny).filter(Nanny.user_id == user.id).first()
        if not nanny:
            raise HTTPException(status_code=404, detail="Nanny profile not found")
        return nanny

    def get_for_user(self, user: User, interest_id: str) -> Interest:
        """Fetch an interest the user is a party to (admins see all)"""
        interest = self.get_interest_or_404(interest_id)
        if user.role == "admin":
            return interest
        if user.role == "client" and interest.client.user_id == user.id:
            return interest
        if user.role == "nanny" and interest.nanny.user_id == user.id:
            return interest
        # Same answer as a missing interest so ids can't be probed
        raise HTTPException(status_code=404, detail="Interest not found")

    def list_interests(self, user: User, stage: Optional[str] = None) -> list[Interest]:
        if user.role == "admin":
            if stage and stage not in {s.value for s in Stage}:
                raise HTTPException(status_code=400, detail=f"Unknown stage: {stage}")
            return self.repo.list_all(self.db, stage)
        if user.role == "client":
            interests = self.repo.list_for_client(self.db, self._client_for(user).id)
        elif user.role == "nanny":
            interests = self.repo.list_for_nanny(self.db, self._nanny_for(user).id)
        else:
            raise HTTPException(status_code=403, detail="No role assigned")
        if stage:
            interests = [i for i in interests if i.stage == stage]
        return interests

    # ========================================================================
    # TRANSITIONS
    # ========================================================================

    def apply_event(self, interest: Interest, event: Event, **updates) -> Interest:
        """
        Move the interest along the state machine.

        Raises 409 when the event is not allowed from the current stage, including
        when a concurrent request changed the stage first.
        """
        try:
            target = next_stage(interest.stage, event)
        except InvalidTransitionError as e:
            logger.warning(f"⚠️ Interest {interest.id}: {e}")
            raise HTTPException(status_code=409, detail=str(e)) from e

        if not self.repo.transition(self.db, interest.id, event, target.value, **updates):
            self.db.expire(interest)
            error = InvalidTransitionError(event, interest.stage)
            logger.warning(f"⚠️ Interest {interest.id} lost a race: {error}")
            raise HTTPException(status_code=409, detail=str(error))

        self.db.expire(interest)
        logger.info(f"🔀 Interest {interest.id}: {event.value} -> {target.value}")
        return interest

    async def express_interest(self, user: User, data: InterestCreate) -> tuple[Interest, list[dict]]:
        client = self._client_for(user)
        if not user.profile_complete:
            raise HTTPException(
                status_code=400,
                detail="Please complete your profile (first name, last name, email, phone and city) first",
            )

        nanny = self.db.query(Nanny).filter(Nanny.id == data.nanny_id).first()
        if not nanny or not nanny.profile_approved:
            raise HTTPException(status_code=404, detail="Nanny not found")

        if data.service_type == "cleaning" and nanny.experience_type not in ("cleaning", "both"):
            raise HTTPException(status_code=400, detail="This worker does not offer cleaning services")
        if data.service_type == "nanny" and nanny.experience_type not in ("nanny", "both"):
            raise HTTPException(status_code=400, detail="This worker does not offer nanny services")

        existing = self.repo.find_blocking_interest(self.db, client.id, nanny.id)
        if existing:
            raise HTTPException(
                status_code=409,
                detail=f"You already have an open request with this worker (stage: {existing.stage})",
            )

        try:
            interest = self.repo.create_interest(
                self.db,
                client_id=client.id,
                nanny_id=nanny.id,
                service_type=data.service_type,
                cleaning_type=data.cleaning_type,
                message=sanitize_text(data.message, max_length=2000),
                stage=Stage.PENDING_RESPONSE.value,
                fee_amount=placement_fee(data.service_type, data.cleaning_type),
                client_name=user.full_name,
                client_email=user.email,
                nanny_name=nanny.user.full_name,
                nanny_email=nanny.user.email,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent interest for client {client.id} and nanny {nanny.id}: {e}")
            raise HTTPException(
                status_code=409, detail="You already have an open request with this worker"
            ) from e
        logger.info(f"💌 Interest {interest.id} created: client {client.id} -> nanny {nanny.id}")

        notifications = await send_notifications(
            (
                nanny.user.email,
                "new_interest",
                email_service.send_new_interest_email,
                {
                    "to": nanny.user.email,
                    "nanny_name": nanny.user.first_name,
                    "client_name": user.full_name,
                    "service_type": data.service_type,
                    "message": interest.message,
                },
            ),
            (
                user.email,
                "interest_submitted",
                email_service.send_interest_submitted_email,
                {
                    "to": user.email,
                    "client_name": user.first_name,
                    "nanny_name": nanny.user.full_name,
                    "fee_amount": interest.fee_amount,
                },
            ),
        )
        return interest, notifications

    async def respond(self, user: User, interest_id: str, response: str) -> tuple[Interest, list[dict]]:
        """Worker approves or declines; an admin may respond on the worker's behalf"""
        interest = self.get_interest_or_404(interest_id)
        client_user, nanny_user = self._parties(interest)
        if user.role != "admin" and nanny_user.id != user.id:
            raise HTTPException(status_code=404, detail="Interest not found")

        approved = response == "approved"
        actor = "Admin" if user.role == "admin" else (user.first_name or "The nanny")
        response_text = f"{actor} has {response} your request on {date.today():%d %B %Y}"

        event = Event.NANNY_APPROVE if approved else Event.NANNY_DECLINE
        self.apply_event(interest, event, nanny_response=response_text)

        notifications = await send_notifications(
            (
                client_user.email,
                "nanny_response",
                email_service.send_nanny_response_email,
                {
                    "to": client_user.email,
                    "client_name": client_user.first_name,
                    "nanny_name": nanny_user.full_name,
                    "approved": approved,
                    "response_text": response_text,
                },
            ),
        )
        return interest, notifications

    async def admin_decide(
        self, interest_id: str, decision: str, admin_message: Optional[str] = None
    ) -> tuple[Interest, list[dict]]:
        """Final gate after payment: approve releases contact details to both parties"""
        interest = self.get_interest_or_404(interest_id)
        admin_message = sanitize_text(admin_message, max_length=2000)
        parties = self._parties(interest)

        if decision == "approve":
            self.apply_event(interest, Event.ADMIN_APPROVE)
            notifications = await self._send_contact_details(*parties)
        else:
            self.apply_event(interest, Event.ADMIN_REJECT)
            notifications = await self._send_closed(parties, "payment_rejected", admin_message)
        return interest, notifications

    async def cancel(self, interest_id: str, admin_message: Optional[str] = None) -> tuple[Interest, list[dict]]:
        """Admin withdraws an interest before any payment was made"""
        interest = self.get_interest_or_404(interest_id)
        parties = self._parties(interest)
        self.apply_event(interest, Event.ADMIN_CANCEL)
        notifications = await self._send_closed(
            parties, "cancelled", sanitize_text(admin_message, max_length=2000)
        )
        return interest, notifications

    # ========================================================================
    # NOTIFICATIONS
    # ========================================================================

    @staticmethod
    def _parties(interest: Interest) -> tuple[User, User]:
        """Client and worker accounts, resolved before any transition is committed"""
        if interest.client is None or interest.nanny is None:
            logger.error(f"❌ Interest {interest.id} is missing its client or nanny profile")
            raise HTTPException(status_code=409, detail="Interest no longer has both a client and a nanny")
        return interest.client.user, interest.nanny.user

    async def _send_contact_details(self, client_user: User, nanny_user: User) -> list[dict]:
        return await send_notifications(
            (
                client_user.email,
                "contact_details_client",
                email_service.send_contact_details_email,
                {
                    "to": client_user.email,
                    "recipient_name": client_user.first_name,
                    "counterpart_name": nanny_user.full_name,
                    "counterpart_email": nanny_user.email,
                    "counterpart_phone": nanny_user.phone,
                    "counterpart_city": nanny_user.city,
                },
            ),
            (
                nanny_user.email,
                "contact_details_nanny",
                email_service.send_contact_details_email,
                {
                    "to": nanny_user.email,
                    "recipient_name": nanny_user.first_name,
                    "counterpart_name": client_user.full_name,
                    "counterpart_email": client_user.email,
                    "counterpart_phone": client_user.phone,
                    "counterpart_city": client_user.city,
                },
            ),
        )

    async def _send_closed(
        self, parties: tuple[User, User], reason: str, admin_message: Optional[str]
    ) -> list[dict]:
        client_user, nanny_user = parties
        return await send_notifications(
            (
                client_user.email,
                f"{reason}_client",
                email_service.send_interest_closed_email,
                {
                    "to": client_user.email,
                    "recipient_name": client_user.first_name,
                    "counterpart_name": nanny_user.full_name,
                    "reason": reason,
                    "admin_message": admin_message,
                },
            ),
            (
                nanny_user.email,
                f"{reason}_nanny",
                email_service.send_interest_closed_email,
                {
                    "to": nanny_user.email,
                    "recipient_name": nanny_user.first_name,
                    "counterpart_name": client_user.full_name,
                    "reason": reason,
                    "admin_message": admin_message,
                },
            ),
        )

    # ========================================================================
    # RESPONSES
    # ========================================================================

    @staticmethod
    def to_response(
        interest: Interest, viewer: User, notifications: Optional[list[dict]] = None
    ) -> InterestResponse:
        """Serialize an interest; the counterpart's contact details appear only once completed"""
        contact = None
        if interest.stage == Stage.COMPLETED.value:
            if viewer.role == "client":
                contact = _contact_of(interest.nanny.user)
            elif viewer.role == "nanny":
                contact = _contact_of(interest.client.user)

        return InterestResponse(
            id=interest.id,
            client_id=interest.client_id,
            nanny_id=interest.nanny_id,
            service_type=interest.service_type,
            cleaning_type=interest.cleaning_type,
            message=interest.message,
            stage=interest.stage,
            status=interest.status,
            payment_status=interest.payment_status,
            admin_approved=interest.admin_approved,
            nanny_response=interest.nanny_response,
            fee_amount=interest.fee_amount,
            client_name=interest.client_name,
            nanny_name=interest.nanny_name,
            created_at=interest.created_at,
            updated_at=interest.updated_at,
            counterpart_contact=contact,
            notifications=notifications,
        )


def _contact_of(user: User) -> ContactDetails:
    return ContactDetails(name=user.full_name, email=user.email, phone=user.phone, city=user.city)
