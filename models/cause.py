# app/models/cause.py
from datetime import datetime
import enum
import math

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship

from models.base import Base


class CauseCategory(str, enum.Enum):
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    ENVIRONMENT = "environment"
    DISASTER_RELIEF = "disaster-relief"
    POVERTY = "poverty"
    ANIMAL_WELFARE = "animal-welfare"
    OTHER = "other"


class CauseStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# statuses matched by the admin "archived" filter
ARCHIVED_STATUSES = (CauseStatus.PAUSED, CauseStatus.COMPLETED, CauseStatus.CANCELLED)


class Cause(Base):
    __tablename__ = "causes"
    __table_args__ = (
        CheckConstraint("target_amount >= 0", name="ck_causes_target_amount"),
        CheckConstraint("current_amount >= 0", name="ck_causes_current_amount"),
    )

    id = Column(Integer, primary_key=True)

    name = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(Enum(CauseCategory, name="cause_category"), default=CauseCategory.OTHER, nullable=False)
    image_url = Column(String(500), default="")

    # aggregates; written by the donation coordinator only
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, default=0.0, nullable=False)
    donation_event_count = Column(Integer, default=0, nullable=False)  # donation events, not unique donors

    status = Column(Enum(CauseStatus, name="cause_status"), default=CauseStatus.ACTIVE, nullable=False, index=True)

    start_date = Column(DateTime, default=datetime.utcnow)
    end_date = Column(DateTime, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = relationship("User", foreign_keys=[created_by])
    donation_entries = relationship("DonationEntry", back_populates="cause_ref", passive_deletes=True)

    @property
    def percentage_achieved(self) -> int:
        if not self.target_amount:
            return 0
        return math.floor((self.current_amount or 0) / self.target_amount * 100 + 0.5)
