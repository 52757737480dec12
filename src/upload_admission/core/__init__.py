"""Core utilities for upload admission."""

from upload_admission.core.logging import get_logger, configure_logging
from upload_admission.core.errors import (
    UploadAdmissionError,
    InvalidSpecError,
    InvalidQuotaError,
    MalformedEntryError,
)
from upload_admission.core.settings import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_MAX_FILE_SIZE,
    UploadDefaults,
    validate_quota,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    # Errors
    "UploadAdmissionError",
    "InvalidSpecError",
    "InvalidQuotaError",
    "MalformedEntryError",
    # Settings
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_MAX_FILE_SIZE",
    "UploadDefaults",
    "validate_quota",
]
