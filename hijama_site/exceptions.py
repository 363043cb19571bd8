"""Exception classes for the booking site engine."""

from datetime import date
from typing import Any, Dict, Optional


class SiteError(Exception):
    """Base exception for the site engine."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize site error.

        Args:
            message: Error message
            details: Additional error details (internal diagnostics only)
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class VerificationError(SiteError):
    """Bot verification could not produce a token."""


class VerificationUnavailable(VerificationError):
    """Verification collaborator is not loaded or unreachable."""

    def __init__(self, message: str = "Verification service unavailable"):
        super().__init__(message)


class VerificationFailed(VerificationError):
    """Verification collaborator returned an error."""

    def __init__(self, message: str = "Verification failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class SubmissionRejected(SiteError):
    """Form endpoint answered with a non-success status or was unreachable."""

    def __init__(self, message: str = "Submission failed", status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, details)
        self.status_code = status_code


class UnknownModuleType(SiteError):
    """No handler is registered for a module's type tag."""

    def __init__(self, type_tag: str):
        super().__init__(f"Unknown module type: {type_tag}", {"type_tag": type_tag})
        self.type_tag = type_tag


class DateOutOfRange(SiteError):
    """Selected appointment date lies outside the booking window."""

    def __init__(self, selected: date, min_date: date, max_date: date):
        super().__init__(
            f"{selected.isoformat()} is outside {min_date.isoformat()}..{max_date.isoformat()}",
            {"date": selected.isoformat(), "min": min_date.isoformat(), "max": max_date.isoformat()},
        )


class OutOfRangeDate(SiteError):
    """Date cannot be converted to the lunar calendar."""

    def __init__(self, value: date):
        super().__init__(f"{value.isoformat()} is outside the supported lunar calendar range")
        self.value = value


class FormBusy(SiteError):
    """Form is submitting; edits and new submissions are refused."""

    def __init__(self, message: str = "Form is already submitting"):
        super().__init__(message)
