# app/models/user.py
from datetime import datetime
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float, Enum, JSON
from sqlalchemy.orm import relationship

from models.base import Base


class UserRole(str, enum.Enum):
    DONOR = "donor"
    ADMIN = "admin"


class UserGender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class DonationEntryStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class User(Base):
    __tablename__ = "users"

    # ---------- identity ----------
    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # ---------- profile ----------
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(Enum(UserGender, name="user_gender"), default=UserGender.OTHER)
    profile = Column(JSON, default=dict)  # {phone_number, address, preferred_causes}

    # ---------- auth ----------
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), default=UserRole.DONOR, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # append-only donation ledger, oldest first
    donations = relationship(
        "DonationEntry",
        back_populates="user",
        order_by="DonationEntry.id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class DonationEntry(Base):
    """One line of a donor's donation history. Rows are inserted, never updated or deleted."""
    __tablename__ = "donation_entries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cause_id = Column(Integer, ForeignKey("causes.id"), nullable=True, index=True)

    amount = Column(Float, nullable=False)
    cause = Column(String(200), nullable=False)  # cause name at donation time
    payment_id = Column(String(100), index=True)
    payment_method = Column(String(50))
    status = Column(
        Enum(DonationEntryStatus, name="donation_entry_status"),
        default=DonationEntryStatus.COMPLETED,
        nullable=False,
    )
    is_multi_cause = Column(Boolean, default=False, nullable=False)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="donations")
    cause_ref = relationship("Cause", back_populates="donation_entries")
