"""Error Hierarchy — every failure the profile service reports, under one base class.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity
      (ErrorSeverity) and http_status, declared once on its class
    - NotFound, AlreadyExists, InvalidIdentity and Contention reach the caller
      unchanged; StoreConflictError is consumed by the interaction recorder
      (retried, or converted to ContentionError)
    - User-facing messages never carry driver or SQL text

Design Decisions:
    - Single hierarchy rooted at PersonaError: one FastAPI handler renders all
    - ErrorContext dataclass travels with the error: log extras and the
      response's "context" block are read from it
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where and for whom the error happened."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    profile_key: str | None = None
    viewer_id: str | None = None
    attempt: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class PersonaError(Exception):
    """Base exception for all profile-service errors."""

    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """REST envelope; viewer_id and debug_info stay server-side."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "profile_key": self.context.profile_key,
                    "attempt": self.context.attempt,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Caller errors (4xx) ────────────────────────────────────────

class InvalidIdentityError(PersonaError):
    """Viewer identity is empty, malformed, or refused by the anonymous policy."""
    code = "INVALID_IDENTITY"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING
    http_status = 400


class PrincipalRequiredError(PersonaError):
    code = "PRINCIPAL_REQUIRED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Authenticated principal required to {operation}", context)
        self.operation = operation


class ResourceNotFoundError(PersonaError):
    """Profile (or a viewer record of it) does not exist."""
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ProfileAlreadyExistsError(PersonaError):
    code = "PROFILE_ALREADY_EXISTS"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, profile_key: str, context: ErrorContext | None = None):
        context = context or ErrorContext()
        context.profile_key = profile_key
        super().__init__(f"Profile '{profile_key}' already exists", context)


class StoreConflictError(PersonaError):
    """A concurrent transaction invalidated this transaction's reads."""
    code = "WRITE_CONFLICT"
    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.WARNING
    http_status = 409


class ContentionError(PersonaError):
    """Interaction recording exhausted its retry budget; nothing was applied."""
    code = "INTERACTION_CONTENTION"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, attempts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Interaction not recorded after {attempts} attempts (write contention)",
            context,
        )
        self.attempts = attempts


# ─── Infrastructure errors (5xx) ────────────────────────────────

class DatabaseError(PersonaError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context)
        self.operation = operation
