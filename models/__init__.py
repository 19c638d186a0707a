from models.base import Base

from models.user import User, DonationEntry
from models.cause import Cause
from models.platform_config import PlatformConfig
from models.audit_log import AuditLog
