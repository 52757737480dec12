"""Custom exception classes for upload admission.

Only construction-time and collaborator errors are raised. Admission
outcomes (too many files, too large, not accepted) are returned as
RejectionReason values, never raised.
"""

from typing import Any, Optional


class UploadAdmissionError(Exception):
    """Base exception for all upload admission errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InvalidSpecError(UploadAdmissionError):
    """Invalid accept specification given when building an upload slot."""

    def __init__(
        self,
        message: str,
        accept: Any = None,
        token: Any = None,
        **kwargs,
    ):
        super().__init__(message, error_code="INVALID_SPEC", **kwargs)
        self.accept = accept
        self.token = token
        self.details.update({
            "accept": repr(accept),
            "token": repr(token) if token is not None else None,
        })


class InvalidQuotaError(UploadAdmissionError):
    """Quota option (max_entries, max_file_size) is not a positive integer."""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ):
        super().__init__(message, error_code="INVALID_QUOTA", **kwargs)
        self.option = option
        self.value = value
        self.details.update({
            "option": option,
            "value": repr(value),
        })


class MalformedEntryError(UploadAdmissionError):
    """Raw client entry record could not be parsed."""

    def __init__(
        self,
        message: str,
        ref: Optional[str] = None,
        errors: Optional[list] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="MALFORMED_ENTRY", **kwargs)
        self.ref = ref
        self.errors = errors or []
        self.details.update({
            "ref": ref,
            "errors": self.errors,
        })
