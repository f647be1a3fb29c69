"""Error Hierarchy: typed, categorized exceptions for all Roster failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are WARNING; infrastructure errors (500-level) are CRITICAL
    - to_response() produces the REST envelope: a single human-readable "error" field
    - No backend details leaked in user-facing messages
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class RosterError(Exception):
    """Base exception for all Roster errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {"error": self.message}


# ─── Client Errors (400-level) ──────────────────────────────────

class FieldValidationError(RosterError):
    """Malformed or out-of-range input. Never retried."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.field = field


class ResourceNotFoundError(RosterError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: object):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(RosterError):
    """Uniqueness violation (application pre-check or backend constraint)."""
    def __init__(self, message: str = "A user with this email already exists"):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalError(RosterError):
    """Any unclassified backend/store failure. Message is generic by construction."""
    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation
