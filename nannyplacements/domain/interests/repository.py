"""Interest repository - Database operations for interests"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import func

from ...models import Client, Interest, Nanny
from .state_machine import BLOCKING_STAGES, Event, allowed_sources


class InterestRepository:
    """Repository for interest database operations"""

    @staticmethod
    def _base_query(db: Session):
        return db.query(Interest).options(
            joinedload(Interest.client).joinedload(Client.user),
            joinedload(Interest.nanny).joinedload(Nanny.user),
        )

    @classmethod
    def get_interest_by_id(cls, db: Session, interest_id: str) -> Optional[Interest]:
        return cls._base_query(db).filter(Interest.id == interest_id).first()

    @staticmethod
    def find_blocking_interest(db: Session, client_id: str, nanny_id: str) -> Optional[Interest]:
        """An existing interest for the pair that prevents a new one"""
        return (
            db.query(Interest)
            .filter(
                Interest.client_id == client_id,
                Interest.nanny_id == nanny_id,
                Interest.stage.in_([s.value for s in BLOCKING_STAGES]),
            )
            .first()
        )

    @staticmethod
    def create_interest(db: Session, **interest_data) -> Interest:
        interest = Interest(**interest_data)
        db.add(interest)
        db.commit()
        db.refresh(interest)
        return interest

    @staticmethod
    def transition(db: Session, interest_id: str, event: Event, target: str, **updates) -> bool:
        """
        Compare-and-set the stage: the UPDATE only matches while the row is still in
        one of the event's source stages. Returns False when another request won.
        """
        sources = [s.value for s in allowed_sources(event)]
        values = {"stage": target, "updated_at": func.now(), **updates}
        rowcount = (
            db.query(Interest)
            .filter(Interest.id == interest_id, Interest.stage.in_(sources))
            .update(values, synchronize_session=False)
        )
        db.commit()
        return rowcount == 1

    @classmethod
    def list_for_client(cls, db: Session, client_id: str) -> list[Interest]:
        return (
            cls._base_query(db)
            .filter(Interest.client_id == client_id)
            .order_by(Interest.created_at.desc())
            .all()
        )

    @classmethod
    def list_for_nanny(cls, db: Session, nanny_id: str) -> list[Interest]:
        return (
            cls._base_query(db)
            .filter(Interest.nanny_id == nanny_id)
            .order_by(Interest.created_at.desc())
            .all()
        )

    @classmethod
    def list_all(cls, db: Session, stage: Optional[str] = None) -> list[Interest]:
        query = cls._base_query(db)
        if stage:
            query = query.filter(Interest.stage == stage)
        return query.order_by(Interest.created_at.desc()).all()

    @staticmethod
    def count_by_stage(db: Session) -> dict[str, int]:
        rows = db.query(Interest.stage, func.count(Interest.id)).group_by(Interest.stage).all()
        return {stage: count for stage, count in rows}
