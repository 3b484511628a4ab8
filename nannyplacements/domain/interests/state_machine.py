"""
Interest workflow state machine

pending_response --nanny_approve--> awaiting_payment --payment_completed--> awaiting_admin
pending_response --nanny_decline--> declined
awaiting_admin --admin_approve--> completed
awaiting_admin --admin_reject--> payment_rejected
pending_response | awaiting_payment --admin_cancel--> cancelled

Transitions are applied with a compare-and-set update on the current stage
(see InterestRepository.transition), so two conflicting actions on the same
interest cannot both succeed.
"""

from enum import Enum

from ...models import OPEN_INTEREST_STAGES


class Stage(str, Enum):
    PENDING_RESPONSE = "pending_response"
    DECLINED = "declined"
    AWAITING_PAYMENT = "awaiting_payment"
    AWAITING_ADMIN = "awaiting_admin"
    PAYMENT_REJECTED = "payment_rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(str, Enum):
    NANNY_APPROVE = "nanny_approve"
    NANNY_DECLINE = "nanny_decline"
    PAYMENT_COMPLETED = "payment_completed"
    ADMIN_APPROVE = "admin_approve"
    ADMIN_REJECT = "admin_reject"
    ADMIN_CANCEL = "admin_cancel"


# event -> (allowed source stages, target stage)
TRANSITIONS: dict[Event, tuple[tuple[Stage, ...], Stage]] = {
    Event.NANNY_APPROVE: ((Stage.PENDING_RESPONSE,), Stage.AWAITING_PAYMENT),
    Event.NANNY_DECLINE: ((Stage.PENDING_RESPONSE,), Stage.DECLINED),
    Event.PAYMENT_COMPLETED: ((Stage.AWAITING_PAYMENT,), Stage.AWAITING_ADMIN),
    Event.ADMIN_APPROVE: ((Stage.AWAITING_ADMIN,), Stage.COMPLETED),
    Event.ADMIN_REJECT: ((Stage.AWAITING_ADMIN,), Stage.PAYMENT_REJECTED),
    Event.ADMIN_CANCEL: ((Stage.PENDING_RESPONSE, Stage.AWAITING_PAYMENT), Stage.CANCELLED),
}

TERMINAL_STAGES = frozenset(
    {Stage.DECLINED, Stage.PAYMENT_REJECTED, Stage.COMPLETED, Stage.CANCELLED}
)

# A new interest for the same client/worker pair is blocked while one of these is live.
# A completed placement also blocks a repeat request. The partial unique index on
# interests enforces the same set.
BLOCKING_STAGES = frozenset(Stage(stage) for stage in OPEN_INTEREST_STAGES)

# Stages reached only after a successful payment
PAID_STAGES = frozenset({Stage.AWAITING_ADMIN, Stage.COMPLETED, Stage.PAYMENT_REJECTED})


class InvalidTransitionError(Exception):
    """Raised when an event is not allowed from the interest's current stage"""

    def __init__(self, event: Event, current_stage: str):
        self.event = Event(event)
        self.current_stage = current_stage
        super().__init__(
            f"Cannot apply '{self.event.value}' to an interest in stage '{current_stage}'"
        )


def allowed_sources(event: Event) -> tuple[Stage, ...]:
    return TRANSITIONS[Event(event)][0]


def next_stage(current_stage: str, event: Event) -> Stage:
    """Return the target stage, raising InvalidTransitionError when not allowed"""
    sources, target = TRANSITIONS[Event(event)]
    if current_stage not in {s.value for s in sources}:
        raise InvalidTransitionError(event, current_stage)
    return target


def can_apply(current_stage: str, event: Event) -> bool:
    return current_stage in {s.value for s in allowed_sources(event)}


def is_terminal(stage: str) -> bool:
    return stage in {s.value for s in TERMINAL_STAGES}
