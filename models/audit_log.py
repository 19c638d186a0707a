# app/models/audit_log.py
from datetime import datetime
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship

from models.base import Base


class AuditEventType(str, enum.Enum):
    USER_REGISTRATION = "USER_REGISTRATION"
    USER_LOGIN_SUCCESS = "USER_LOGIN_SUCCESS"
    USER_LOGIN_FAILED = "USER_LOGIN_FAILED"
    DONATION_CREATED = "DONATION_CREATED"
    DONATION_FAILED = "DONATION_FAILED"
    CAUSE_CREATED = "CAUSE_CREATED"
    CAUSE_UPDATED = "CAUSE_UPDATED"
    CAUSE_DELETED = "CAUSE_DELETED"
    CAUSE_ARCHIVED = "CAUSE_ARCHIVED"
    USER_ROLE_CHANGED = "USER_ROLE_CHANGED"
    PLATFORM_CONFIG_UPDATED = "PLATFORM_CONFIG_UPDATED"
    ADMIN_ACTION = "ADMIN_ACTION"
    SYSTEM_EVENT = "SYSTEM_EVENT"


class AuditSeverity(str, enum.Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AuditResourceType(str, enum.Enum):
    USER = "USER"
    CAUSE = "CAUSE"
    DONATION = "DONATION"
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)

    event_type = Column(Enum(AuditEventType, name="audit_event_type"), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    severity = Column(Enum(AuditSeverity, name="audit_severity"), default=AuditSeverity.INFO, nullable=False)

    # affected resource
    resource_type = Column(Enum(AuditResourceType, name="audit_resource_type"), nullable=True)
    resource_id = Column(String(100), nullable=True)

    # request info
    ip_address = Column(String(45))
    user_agent = Column(Text)

    # non-sensitive extra data
    event_metadata = Column("metadata", JSON, default=dict)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    user_email = Column(String(255), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", foreign_keys=[user_id])
