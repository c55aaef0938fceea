from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    SUPORTE = "suporte"


class EmployeeStatus(str, Enum):
    ATIVO = "ativo"
    AFASTADO = "afastado"
    INATIVO = "inativo"


class RequestStatus(str, Enum):
    """Approval workflow state shared by vacation and adjustment requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TimeRecordType(str, Enum):
    ENTRY = "entry"
    LUNCH_OUT = "lunch_out"
    LUNCH_IN = "lunch_in"
    EXIT = "exit"


class OvertimeDestination(str, Enum):
    """Where a month's overtime balance goes when the closing is settled."""

    BANK = "bank"
    PAYMENT = "payment"
    MIXED = "mixed"


class DocumentStatus(str, Enum):
    PENDING_SIGNATURE = "pending_signature"
    SIGNED = "signed"
    EXPIRED = "expired"


class VacationType(str, Enum):
    INDIVIDUAL = "individual"
    COLLECTIVE = "collective"


class AdjustmentRequestType(str, Enum):
    ADJUSTMENT = "adjustment"
    MEDICAL_CERTIFICATE = "medical_certificate"


class FlexibilityMode(str, Enum):
    """How strictly punches are checked against the work schedule."""

    TOLERANCE = "tolerance"
    FIXED = "fixed"
    HOURS_ONLY = "hours_only"


class LocationMode(str, Enum):
    DISABLED = "disabled"
    LOG_ONLY = "log_only"
    REQUIRE_EXACT = "require_exact"
    REQUIRE_RADIUS = "require_radius"


class ScheduleType(str, Enum):
    FIXED = "fixed"
    SHIFT = "shift"


class ScheduleAdjustmentType(str, Enum):
    TEMPORARY_CHANGE = "temporary_change"
    OVERTIME_AUTHORIZATION = "overtime_authorization"


class DayType(str, Enum):
    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    HOLIDAY = "holiday"
