# app/schemas/audit_log.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime

from models.audit_log import AuditEventType, AuditSeverity, AuditResourceType


class AuditLogRead(BaseModel):
    id: int
    event_type: AuditEventType = Field(serialization_alias="eventType")
    description: str
    severity: AuditSeverity
    resource_type: Optional[AuditResourceType] = Field(None, serialization_alias="resourceType")
    resource_id: Optional[str] = Field(None, serialization_alias="resourceId")
    ip_address: Optional[str] = Field(None, serialization_alias="ipAddress")
    user_agent: Optional[str] = Field(None, serialization_alias="userAgent")
    event_metadata: Dict[str, Any] = Field(default_factory=dict, serialization_alias="metadata")
    user_id: Optional[int] = Field(None, serialization_alias="userId")
    user_email: Optional[str] = Field(None, serialization_alias="userEmail")
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True


class AuditLogFilter(BaseModel):
    event_type: Optional[AuditEventType] = None
    severity: Optional[AuditSeverity] = None
    resource_type: Optional[AuditResourceType] = None
    user_email: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
