"""Data models for upload entry admission.

- Raw client announcements (ClientEntry)
- Admitted entries (UploadEntry)
- Rejection reasons returned by admission
"""

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from upload_admission.core import MalformedEntryError
from upload_admission.upload.mime_types import DEFAULT_CLIENT_TYPE


class RejectionReason(str, Enum):
    """Why a batch of entries was not admitted."""
    TOO_MANY_FILES = "too_many_files"
    TOO_LARGE = "too_large"
    NOT_ACCEPTED = "not_accepted"

    @property
    def message(self) -> str:
        """User-facing description of the rejection."""
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.TOO_MANY_FILES: "You have selected too many files",
    RejectionReason.TOO_LARGE: "File is too large",
    RejectionReason.NOT_ACCEPTED: "You have selected an unacceptable file type",
}


def generate_ref() -> str:
    """Generate a reference for an entry announced without one."""
    return uuid.uuid4().hex


class ClientEntry(BaseModel):
    """File attributes announced by the client before upload.

    Parsed from the announcement record keys ``ref``, ``name``, ``type``,
    ``size`` and ``last_modified``.
    """
    model_config = {"frozen": True, "populate_by_name": True}

    ref: str = Field(default_factory=generate_ref, description="Entry reference")
    client_name: str = Field(..., alias="name", description="Announced file name")
    client_type: str = Field(DEFAULT_CLIENT_TYPE, alias="type", description="Announced MIME type")
    client_size: int = Field(..., alias="size", ge=0, strict=True, description="Announced size in bytes")
    client_last_modified: Optional[Any] = Field(None, alias="last_modified", description="Announced timestamp")

    @field_validator("ref", mode="before")
    @classmethod
    def _coerce_ref(cls, value: Any) -> Any:
        if value is None or value == "":
            return generate_ref()
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("client_type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_CLIENT_TYPE
        return value

    @classmethod
    def from_raw(cls, raw: Any) -> "ClientEntry":
        """Parse a raw announcement record.

        Raises:
            MalformedEntryError: If the record is missing fields or carries
                invalid values
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            ref = raw.get("ref") if isinstance(raw, dict) else None
            raise MalformedEntryError(
                f"malformed client entry: {exc.error_count()} invalid field(s)",
                ref=str(ref) if ref is not None else None,
                errors=[
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc


class UploadEntry(BaseModel):
    """An admitted file announcement."""
    model_config = {"frozen": True}

    ref: str = Field(..., description="Entry reference")
    upload_config: str = Field(..., description="Name of the owning upload slot")
    client_name: str = Field(..., description="Announced file name")
    client_type: str = Field(..., description="Announced MIME type")
    client_size: int = Field(..., ge=0, description="Announced size in bytes")
    client_last_modified: Optional[Any] = Field(None, description="Announced timestamp")

    @classmethod
    def from_client_entry(cls, config_name: str, entry: ClientEntry) -> "UploadEntry":
        return cls(
            ref=entry.ref,
            upload_config=config_name,
            client_name=entry.client_name,
            client_type=entry.client_type.strip(),
            client_size=entry.client_size,
            client_last_modified=entry.client_last_modified,
        )
