from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or malformed."""

    status_code = 422


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class BusinessRuleError(DomainError):
    """Raised when well-formed input violates a domain rule."""

    status_code = 400


class ConflictError(DomainError):
    """Raised when the request clashes with existing records."""

    status_code = 409

    def __init__(self, message: str, *, conflicts: Optional[Sequence[Any]] = None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])
