"""Default quotas for upload slots.

Defaults are injected into slot construction rather than read from module
state, so callers and tests can override them per slot.
"""

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from upload_admission.core.errors import InvalidQuotaError


DEFAULT_MAX_ENTRIES = 1
DEFAULT_MAX_FILE_SIZE = 8_000_000


def validate_quota(option: str, value: Any) -> int:
    """Check that a quota option is a positive integer.

    Args:
        option: Option name used in the error message
        value: Supplied value

    Returns:
        The value unchanged

    Raises:
        InvalidQuotaError: If the value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidQuotaError(
            f"invalid :{option} value provided to allow_upload. "
            f"Expected a positive integer, got: {value!r}",
            option=option,
            value=value,
        )
    return value


class UploadDefaults(BaseModel):
    """Quota defaults applied when a slot omits max_entries or max_file_size."""
    model_config = {"frozen": True}

    max_entries: int = Field(default=DEFAULT_MAX_ENTRIES, gt=0, description="Default entry count limit")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0, description="Default per-file size limit in bytes")

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "UploadDefaults":
        """Build defaults from UPLOAD_MAX_ENTRIES and UPLOAD_MAX_FILE_SIZE.

        Unset variables fall back to the built-in defaults.

        Raises:
            InvalidQuotaError: If a variable is set to a non-positive or
                non-numeric value
        """
        environ = os.environ if environ is None else environ
        return cls(
            max_entries=_env_quota(environ, "UPLOAD_MAX_ENTRIES", "max_entries", DEFAULT_MAX_ENTRIES),
            max_file_size=_env_quota(environ, "UPLOAD_MAX_FILE_SIZE", "max_file_size", DEFAULT_MAX_FILE_SIZE),
        )


def _env_quota(environ, variable: str, option: str, default: int) -> int:
    raw = environ.get(variable)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidQuotaError(
            f"invalid {variable} value in environment: {raw!r}",
            option=option,
            value=raw,
        ) from None
    return validate_quota(option, value)
