"""Account repository - Database operations for users and roles"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Client, Interest, Nanny, Payment, Review, User, UserRole


class AccountRepository:
    """Repository for user, role and role-row database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).options(joinedload(User.roles)).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def add_user(db: Session, **user_data) -> User:
        """Add a user without committing; the caller commits the whole registration"""
        user = User(**user_data)
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def add_role(db: Session, user_id: str, role: str) -> UserRole:
        user_role = UserRole(user_id=user_id, role=role)
        db.add(user_role)
        return user_role

    @staticmethod
    def add_client_row(db: Session, user_id: str) -> Client:
        client = Client(user_id=user_id)
        db.add(client)
        return client

    @staticmethod
    def add_nanny_row(db: Session, user_id: str, **nanny_data) -> Nanny:
        nanny = Nanny(
            user_id=user_id,
            languages=[],
            experience_type=nanny_data.pop("experience_type", None) or "nanny",
            criminal_check_status="pending",
            credit_check_status="pending",
            proof_of_residence_status="pending",
            profile_approved=False,
            **nanny_data,
        )
        db.add(nanny)
        return nanny

    @staticmethod
    def clear_roles(db: Session, user_id: str, keep: Optional[str] = None) -> None:
        """Remove every role and the role-specific rows except the one for `keep`"""
        db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
        if keep != "nanny":
            db.query(Nanny).filter(Nanny.user_id == user_id).delete(synchronize_session=False)
        if keep != "client":
            db.query(Client).filter(Client.user_id == user_id).delete(synchronize_session=False)

    @staticmethod
    def nanny_has_history(db: Session, nanny_id: str) -> bool:
        """Interests, payments or reviews reference this worker"""
        return any(
            db.query(model.id).filter(model.nanny_id == nanny_id).first() is not None
            for model in (Interest, Payment, Review)
        )

    @staticmethod
    def client_has_history(db: Session, client_id: str) -> bool:
        return any(
            db.query(model.id).filter(model.client_id == client_id).first() is not None
            for model in (Interest, Payment, Review)
        )

    @staticmethod
    def list_users(db: Session, role: Optional[str] = None, search: Optional[str] = None) -> list[User]:
        """
        List users, optionally filtered by role and a search term.

        role may be one of the user roles or "no-role" for users without any role.
        """
        query = db.query(User).options(joinedload(User.roles))

        if role == "no-role":
            query = query.filter(~User.roles.any())
        elif role and role != "all":
            query = query.filter(User.roles.any(UserRole.role == role))

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )

        return query.order_by(User.created_at.desc()).all()
