"""Common module — shared utilities for the HR Portal."""

from portal.common.constants import (
    PRIVILEGED_ROLES,
    Decision,
    EmployeesTab,
    EmploymentStatus,
    GrievanceCategory,
    GrievancePriority,
    GrievanceStatus,
    GrievanceType,
    LeaveStatus,
    LeaveType,
    LeaveViewMode,
    OfferAction,
    OfferStatus,
    ProfileStatus,
    UserRole,
    Visibility,
)
from portal.common.debounce import Debouncer
from portal.common.exceptions import (
    AppException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    UpstreamError,
    ValidationException,
    register_exception_handlers,
)
from portal.common.notices import ActionResult, Notice, NoticeLevel, NoticeLog, failure_message
from portal.common.payload import (
    dig,
    format_long_date,
    format_row_date,
    is_past,
    parse_datetime,
    percentage,
    ref_id,
)

__all__ = [
    # Constants / Enums
    "Decision",
    "EmployeesTab",
    "EmploymentStatus",
    "GrievanceCategory",
    "GrievancePriority",
    "GrievanceStatus",
    "GrievanceType",
    "LeaveStatus",
    "LeaveType",
    "LeaveViewMode",
    "OfferAction",
    "OfferStatus",
    "ProfileStatus",
    "UserRole",
    "Visibility",
    "PRIVILEGED_ROLES",
    # Debounce
    "Debouncer",
    # Exceptions
    "AppException",
    "ForbiddenException",
    "NotFoundException",
    "UnauthorizedException",
    "UpstreamError",
    "ValidationException",
    "register_exception_handlers",
    # Notices
    "ActionResult",
    "Notice",
    "NoticeLevel",
    "NoticeLog",
    "failure_message",
    # Payload helpers
    "dig",
    "format_long_date",
    "format_row_date",
    "is_past",
    "parse_datetime",
    "percentage",
    "ref_id",
]
