from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class EmptySubmissionError(ValidationError):
    """Raised when a save would submit zero attendance records."""


class ApiError(DomainError):
    """Raised when the CRM REST backend fails or reports an error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
