"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Complaint Portal - Models Package                                           ║
║                                                                              ║
║  from models import Role, ComplaintStatus, ComplaintCreate, etc.             ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from .auth import (
    Role,
    VALID_ROLES,
    MANAGED_ROLES,
    validate_role,
    normalize_email,
    UserLogin,
    PasswordChange,
    UserCreate,
)

from .complaint import (
    ComplaintStatus,
    VALID_STATUSES,
    REPORT_DEADLINES,
    SIMPLE_REQUIRED_FIELDS,
    EXTENDED_REQUIRED_FIELDS,
    ComplaintCreate,
    ComplaintUpdate,
)

__all__ = [
    "Role",
    "VALID_ROLES",
    "MANAGED_ROLES",
    "validate_role",
    "normalize_email",
    "UserLogin",
    "PasswordChange",
    "UserCreate",
    "ComplaintStatus",
    "VALID_STATUSES",
    "REPORT_DEADLINES",
    "SIMPLE_REQUIRED_FIELDS",
    "EXTENDED_REQUIRED_FIELDS",
    "ComplaintCreate",
    "ComplaintUpdate",
]
