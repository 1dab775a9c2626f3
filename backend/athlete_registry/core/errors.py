"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are local validation failures, never retried inside the core
    - Infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No ciphertext or plaintext payloads leaked in messages (owner id only)

Design Decisions:
    - Single hierarchy with RegistryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Enforcement functions return these instances instead of raising, controllers raise
      (ADR: pure checks chain with `or`, first error wins)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    EXTERNAL_API = "external_api"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    owner: str | None = None
    operation: str | None = None
    batch_size: int | None = None
    debug_info: dict[str, Any] | None = None


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "owner": self.context.owner,
                    "operation": self.context.operation,
                    "batch_size": self.context.batch_size,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class DuplicateOwnerError(RegistryError):
    """Owner already holds a record (uniqueness is permanent)."""
    def __init__(self, owner: str, context: ErrorContext | None = None):
        super().__init__(
            f"Athlete '{owner}' is already registered",
            "DUPLICATE_OWNER", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.owner = owner


class InvalidProofError(RegistryError):
    """Input proof rejected (or could not be checked) by the encryption collaborator."""
    def __init__(self, reason: str = "rejected", context: ErrorContext | None = None):
        super().__init__(
            f"Input proof could not be verified ({reason})",
            "INVALID_PROOF", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.reason = reason


class ArrayLengthMismatchError(RegistryError):
    """Batch input arrays differ in length."""
    def __init__(self, lengths: dict[str, int], context: ErrorContext | None = None):
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        super().__init__(
            f"Batch arrays must have equal length ({detail})",
            "ARRAY_LENGTH_MISMATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.lengths = lengths


class BatchTooLargeError(RegistryError):
    """Batch exceeds the admission ceiling."""
    def __init__(self, size: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Batch size limited to {limit} athletes (got {size})",
            "BATCH_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.size = size
        self.limit = limit


class EmptyBatchError(RegistryError):
    """Batch admission called with no athletes."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Batch must contain at least one athlete",
            "EMPTY_BATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class RecordNotFoundError(RegistryError):
    """No record exists for the owner."""
    def __init__(self, owner: str, context: ErrorContext | None = None):
        super().__init__(
            f"Athlete '{owner}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.owner = owner


class AlreadyDecryptedError(RegistryError):
    """Record was already finalized."""
    def __init__(self, owner: str, context: ErrorContext | None = None):
        super().__init__(
            f"Athlete '{owner}' results are already finalized",
            "ALREADY_DECRYPTED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.owner = owner


class AgeRequirementNotMetError(RegistryError):
    """Disclosed age is below the category minimum."""
    def __init__(
        self, sport_category: str, minimum_age: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Age requirement not met for category '{sport_category}' (minimum {minimum_age})",
            "AGE_REQUIREMENT_NOT_MET", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 422,
        )
        self.sport_category = sport_category
        self.minimum_age = minimum_age


class DisclosureMismatchError(RegistryError):
    """Collaborator reported that the disclosure does not match the stored ciphertext."""
    def __init__(self, owner: str, context: ErrorContext | None = None):
        super().__init__(
            f"Disclosure for athlete '{owner}' does not match the registered ciphertext",
            "DISCLOSURE_MISMATCH", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 422,
        )
        self.owner = owner


class CoordinatorRequiredError(RegistryError):
    """Privileged operation called without the coordinator credential."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the registry coordinator may finalize results",
            "COORDINATOR_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class CoprocessorError(RegistryError):
    """Encryption coprocessor call failed (transport, timeout, bad status)."""
    def __init__(self, message: str, error_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"Coprocessor error ({error_type}): {message}",
            "COPROCESSOR_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.error_type = error_type
