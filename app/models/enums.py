"""Closed string enumerations shared by models, schemas and config."""
import enum


class LeadStatus(str, enum.Enum):
    """Lead status enum."""
    NEW = "new"
    CONVERTED = "converted"
    NOT_CONVERTED = "not_converted"


class LeadPriority(str, enum.Enum):
    """Lead priority enum."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LeadCategory(str, enum.Enum):
    LOCAL_NEW = "local_new"
    LOCAL_USED = "local_used"
    PREMIUM_EXPORT = "premium_export"
    REGULAR_EXPORT = "regular_export"
    COMMERCIAL_EXPORT = "commercial_export"


class UserRole(str, enum.Enum):
    """Actor role enum."""
    MANAGER = "manager"
    SALES = "sales"
    FINANCE = "finance"


class CustomerStatus(str, enum.Enum):
    LEAD = "lead"
    ACTIVE = "active"
    INACTIVE = "inactive"


def enum_values(enum_cls):
    """Persist enum values (not member names) in the database."""
    return [member.value for member in enum_cls]
