"""Payment repository - Database operations for payments"""

from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ...models import Interest, Payment


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def get_by_transaction_id(db: Session, transaction_id: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.transaction_id == transaction_id).first()

    @staticmethod
    def get_completed_for_interest(db: Session, interest_id: str) -> Optional[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.interest_id == interest_id, Payment.status == "completed")
            .first()
        )

    @staticmethod
    def add_payment(db: Session, **payment_data) -> Payment:
        """Stage a payment row; the caller commits"""
        payment = Payment(**payment_data)
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def list_for_client(db: Session, client_id: str) -> list[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.client_id == client_id)
            .order_by(Payment.created_at.desc())
            .all()
        )

    @staticmethod
    def list_all(db: Session) -> list[Payment]:
        return db.query(Payment).order_by(Payment.created_at.desc()).all()

    @staticmethod
    def interests_paid_but_awaiting_payment(db: Session) -> list[Interest]:
        """Interests whose completed payment never advanced the stage"""
        return (
            db.query(Interest)
            .join(Payment, Payment.interest_id == Interest.id)
            .filter(Interest.stage == "awaiting_payment", Payment.status == "completed")
            .distinct()
            .all()
        )

    @staticmethod
    def completed_total(db: Session) -> float:
        total = db.query(func.sum(Payment.amount)).filter(Payment.status == "completed").scalar()
        return float(total or 0)
