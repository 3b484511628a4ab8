import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Allowed values for enumerated columns
USER_ROLES = ("admin", "nanny", "client")
EXPERIENCE_TYPES = ("nanny", "cleaning", "both")
EMPLOYMENT_TYPES = ("full_time", "part_time")
ACCOMMODATION_TYPES = ("live_in", "stay_out")
EDUCATION_LEVELS = ("high school no matric", "matric", "certificate", "diploma", "degree")
DOCUMENT_STATUSES = ("pending", "approved", "rejected")
CLEANING_TYPES = ("once_off", "part_time", "full_time")
SERVICE_TYPES = ("nanny", "cleaning")
REVIEW_STATUSES = ("pending", "resolved", "dismissed", "archived")
# Interest stages that block a new interest for the same client and nanny
OPEN_INTEREST_STAGES = ("pending_response", "awaiting_payment", "awaiting_admin", "completed")
LANGUAGES = (
    "Afrikaans",
    "English",
    "Zulu",
    "Xhosa",
    "Sotho",
    "Tswana",
    "Pedi",
    "Venda",
    "Tsonga",
    "Swati",
    "Ndebele",
    "Shona",
    "Chewa",
)


def _in_clause(column: str, values: tuple) -> str:
    return f"{column} IN (" + ", ".join(f"'{value}'" for value in values) + ")"


def generate_uuid():
    """Generate a string UUID primary key"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    city = Column(String(100), nullable=True)
    suburb = Column(String(100), nullable=True)
    town = Column(String(100), nullable=True)
    profile_picture_url = Column(String(500), nullable=True)  # Storage key, not a URL
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    client = relationship("Client", back_populates="user", uselist=False)
    nanny = relationship("Nanny", back_populates="user", uselist=False)

    @property
    def role(self):
        return self.roles[0].role if self.roles else None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def profile_complete(self) -> bool:
        return all([self.first_name, self.last_name, self.email, self.phone, self.city])


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False)  # admin, nanny, client
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="roles")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    preferred_employment_type = Column(String(20), nullable=True)
    preferred_experience_type = Column(String(20), nullable=True)
    preferred_accommodation_type = Column(String(20), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="client")
    interests = relationship("Interest", back_populates="client")


class Nanny(Base):
    """A domestic worker. Workers with experience_type cleaning or both are listed as cleaners."""

    __tablename__ = "nannies"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    languages = Column(JSON, default=list, nullable=False)
    date_of_birth = Column(Date, nullable=True)
    education_level = Column(String(50), nullable=True)
    experience_type = Column(String(20), default="nanny", nullable=False)
    experience_duration = Column(Integer, nullable=True)  # Years
    employment_type = Column(String(20), nullable=True)
    accommodation_preference = Column(String(20), nullable=True)

    # Verification documents (storage keys) and their review status
    criminal_check_url = Column(String(500), nullable=True)
    criminal_check_status = Column(String(20), default="pending", nullable=False)
    credit_check_url = Column(String(500), nullable=True)
    credit_check_status = Column(String(20), default="pending", nullable=False)
    proof_of_residence_url = Column(String(500), nullable=True)
    proof_of_residence_status = Column(String(20), default="pending", nullable=False)
    interview_video_url = Column(String(500), nullable=True)

    # Training badges awarded by admins
    training_cpr = Column(Boolean, default=False, nullable=False)
    training_first_aid = Column(Boolean, default=False, nullable=False)
    training_nanny = Column(Boolean, default=False, nullable=False)
    training_child_development = Column(Boolean, default=False, nullable=False)
    training_cleaning = Column(Boolean, default=False, nullable=False)

    academy_completed = Column(Boolean, default=False, nullable=False)
    profile_approved = Column(Boolean, default=False, nullable=False)

    # Payout details captured at signup; never exposed publicly
    bank_name = Column(String(100), nullable=True)
    account_number = Column(String(50), nullable=True)
    account_holder_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="nanny")
    interests = relationship("Interest", back_populates="nanny")
    reviews = relationship("Review", back_populates="nanny")
    academy_progress = relationship("AcademyProgress", back_populates="nanny")


class Interest(Base):
    __tablename__ = "interests"
    # At most one open interest per pair, even under concurrent requests
    __table_args__ = (
        Index(
            "uq_interests_open_pair",
            "client_id",
            "nanny_id",
            unique=True,
            postgresql_where=text(_in_clause("stage", OPEN_INTEREST_STAGES)),
            sqlite_where=text(_in_clause("stage", OPEN_INTEREST_STAGES)),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    nanny_id = Column(String(36), ForeignKey("nannies.id", ondelete="CASCADE"), nullable=False, index=True)
    service_type = Column(String(20), default="nanny", nullable=False)  # nanny, cleaning
    cleaning_type = Column(String(20), nullable=True)  # once_off, part_time, full_time
    message = Column(Text, nullable=True)
    stage = Column(String(32), default="pending_response", nullable=False, index=True)
    nanny_response = Column(Text, nullable=True)
    fee_amount = Column(Float, nullable=False)

    # Snapshot of both parties at the time the interest was expressed
    client_name = Column(String(255), nullable=True)
    client_email = Column(String(255), nullable=True)
    nanny_name = Column(String(255), nullable=True)
    nanny_email = Column(String(255), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="interests")
    nanny = relationship("Nanny", back_populates="interests")
    payments = relationship("Payment", back_populates="interest")

    @property
    def status(self) -> str:
        """Worker response: pending, approved or declined"""
        if self.stage == "pending_response":
            return "pending"
        if self.stage == "declined":
            return "declined"
        if self.stage == "cancelled":
            return "approved" if self.nanny_response else "pending"
        return "approved"

    @property
    def payment_status(self):
        if self.stage == "awaiting_payment":
            return "pending"
        if self.stage in ("awaiting_admin", "completed", "payment_rejected"):
            return "completed"
        return None

    @property
    def admin_approved(self) -> bool:
        return self.stage == "completed"


class Payment(Base):
    __tablename__ = "payments"
    # At most one completed payment per interest
    __table_args__ = (
        Index(
            "uq_payments_completed_interest",
            "interest_id",
            unique=True,
            postgresql_where=text("status = 'completed'"),
            sqlite_where=text("status = 'completed'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    nanny_id = Column(String(36), ForeignKey("nannies.id", ondelete="CASCADE"), nullable=False)
    interest_id = Column(String(36), ForeignKey("interests.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="ZAR", nullable=False)
    status = Column(String(20), nullable=False)  # completed, failed
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(255), unique=True, nullable=False, index=True)
    tx_ref = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    interest = relationship("Interest", back_populates="payments")


class AcademyVideo(Base):
    __tablename__ = "academy_videos"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String(500), nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    order_index = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class AcademyProgress(Base):
    __tablename__ = "academy_progress"
    __table_args__ = (UniqueConstraint("nanny_id", "video_id", name="uq_academy_progress_nanny_video"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    nanny_id = Column(String(36), ForeignKey("nannies.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(String(36), ForeignKey("academy_videos.id", ondelete="CASCADE"), nullable=False)
    completed_at = Column(DateTime, server_default=func.now())

    nanny = relationship("Nanny", back_populates="academy_progress")
    video = relationship("AcademyVideo")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("nanny_id", "client_id", name="uq_reviews_nanny_client"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    nanny_id = Column(String(36), ForeignKey("nannies.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=True)  # 1..5, null for a pure complaint
    complaint_text = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    admin_response = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    nanny = relationship("Nanny", back_populates="reviews")
    client = relationship("Client")

    @property
    def is_complaint(self) -> bool:
        return bool(self.complaint_text) and self.rating is None
