"""Account service - Business logic for registration, login and roles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import email_service
from ...models import User
from ...security_utils import (
    check_password_strength,
    create_jwt_token,
    hash_password_bcrypt,
    mask_sensitive_data,
    verify_password_bcrypt,
)
from ...services.notification_service import send_notification
from .repository import AccountRepository
from .schemas import SignupRequest, UserUpdate

logger = logging.getLogger(__name__)

BANK_FIELDS = ("bank_name", "account_number", "account_holder_name")


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository()

    async def signup(self, data: SignupRequest) -> dict:
        """Register a client or nanny, create the role row and send the welcome email"""
        logger.info(f"📥 Signup attempt for {data.email} as {data.user_type}")

        problems = check_password_strength(data.password)
        if problems:
            raise HTTPException(status_code=400, detail="; ".join(problems))

        if data.user_type == "nanny":
            missing = [field for field in BANK_FIELDS if not getattr(data, field)]
            if missing:
                raise HTTPException(
                    status_code=400,
                    detail=f"Banking details are required for nannies: {', '.join(missing)}",
                )

        if self.repo.get_user_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="An account with this email already exists")

        try:
            user = self.repo.add_user(
                self.db,
                email=data.email,
                password_hash=hash_password_bcrypt(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                city=data.city,
                suburb=data.suburb,
            )
            self.repo.add_role(self.db, user.id, data.user_type)
            if data.user_type == "nanny":
                self.repo.add_nanny_row(
                    self.db,
                    user.id,
                    experience_type=data.experience_type,
                    bank_name=data.bank_name,
                    account_number=data.account_number,
                    account_holder_name=data.account_holder_name,
                )
                logger.info(f"🏦 Nanny banking captured, account {mask_sensitive_data(data.account_number)}")
            else:
                self.repo.add_client_row(self.db, user.id)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"❌ Signup failed for {data.email}: {e}")
            raise HTTPException(
                status_code=409, detail="An account with this email already exists"
            ) from e

        self.db.refresh(user)
        logger.info(f"✅ User {user.id} registered as {data.user_type}")

        notification = await send_notification(
            user.email,
            "welcome",
            email_service.send_welcome_email,
            to=user.email,
            user_name=user.first_name,
            role=data.user_type,
        )

        return {
            "user_id": user.id,
            "role": data.user_type,
            "access_token": self._issue_token(user, data.user_type),
            "token_type": "bearer",
            "email_sent": notification["email_sent"],
        }

    def login(self, email: str, password: str) -> dict:
        user = self.repo.get_user_by_email(self.db, email)
        if not user or not verify_password_bcrypt(password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="Account is disabled")

        return {
            "access_token": self._issue_token(user, user.role),
            "token_type": "bearer",
            "user_id": user.id,
            "role": user.role,
        }

    def update_me(self, user: User, data: UserUpdate) -> User:
        updates = data.model_dump(exclude_unset=True)
        for key, value in updates.items():
            if isinstance(value, str):
                value = value.strip() or None
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"✅ Profile updated for user {user.id}: {list(updates)}")
        return user

    def list_users(self, role: Optional[str] = None, search: Optional[str] = None) -> list[User]:
        return self.repo.list_users(self.db, role, search)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def assign_role(self, user_id: str, role: str) -> User:
        """
        Replace the user's role; role rows that don't match the new role are removed
        and the new one created.

        A nanny or client row that interests, payments or reviews point to is never
        removed; the role change is refused with 409 instead.
        """
        user = self.get_user(user_id)
        previous = user.role
        logger.info(f"🔄 Assigning role {role} to user {user_id} (was {previous})")

        if role != "nanny" and user.nanny is not None and self.repo.nanny_has_history(self.db, user.nanny.id):
            raise HTTPException(
                status_code=409, detail="This nanny has placement history; the role cannot be changed"
            )
        if role != "client" and user.client is not None and self.repo.client_has_history(self.db, user.client.id):
            raise HTTPException(
                status_code=409, detail="This client has placement history; the role cannot be changed"
            )

        has_nanny_row = user.nanny is not None
        has_client_row = user.client is not None
        try:
            self.repo.clear_roles(self.db, user_id, keep=role)
            self.repo.add_role(self.db, user_id, role)
            if role == "nanny" and not has_nanny_row:
                self.repo.add_nanny_row(self.db, user_id, experience_type="nanny")
            elif role == "client" and not has_client_row:
                self.repo.add_client_row(self.db, user_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.expire_all()
        return self.get_user(user_id)

    @staticmethod
    def _issue_token(user: User, role: Optional[str]) -> str:
        return create_jwt_token({"sub": user.id, "role": role})
