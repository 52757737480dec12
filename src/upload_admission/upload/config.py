"""Upload slot configuration and entry admission.

An UploadConfig is built once per named slot by ``allow_upload`` and is
never mutated in place. ``put_entries`` admits a whole batch of announced
entries or none of them, returning a new configuration on success and the
original one on rejection.
"""

from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from upload_admission.core import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_MAX_FILE_SIZE,
    InvalidSpecError,
    UploadDefaults,
    get_logger,
    validate_quota,
)
from upload_admission.upload.accept import AcceptPolicy, compile_accept
from upload_admission.upload.models import (
    ClientEntry,
    RejectionReason,
    UploadEntry,
)

logger = get_logger(__name__)


class UploadConfig(BaseModel):
    """Configuration and admitted entries of one named upload slot."""
    model_config = {"frozen": True}

    name: str = Field(..., description="Upload slot name")
    accept: AcceptPolicy = Field(..., description="Compiled accept policy")
    max_entries: int = Field(default=DEFAULT_MAX_ENTRIES, gt=0, description="Maximum number of entries")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0, description="Maximum file size in bytes")
    entries: tuple[UploadEntry, ...] = Field(default=(), description="Admitted entries in admission order")

    @model_validator(mode="after")
    def _check_entry_count(self) -> "UploadConfig":
        if len(self.entries) > self.max_entries:
            raise ValueError(
                f"{len(self.entries)} entries exceed max_entries of {self.max_entries}"
            )
        return self

    @property
    def remaining_capacity(self) -> int:
        return self.max_entries - len(self.entries)

    def get_entry(self, ref: str) -> Optional[UploadEntry]:
        """Look up an admitted entry by reference."""
        for entry in self.entries:
            if entry.ref == ref:
                return entry
        return None

    def put_entries(self, raw_entries: Iterable[Any]) -> "AdmissionResult":
        return put_entries(self, raw_entries)


class AdmissionResult(BaseModel):
    """Outcome of an admission call.

    ``config`` is the updated configuration when ``ok`` and the untouched
    input configuration otherwise.
    """
    model_config = {"frozen": True}

    ok: bool = Field(..., description="Whether the batch was admitted")
    config: UploadConfig = Field(..., description="Resulting configuration")
    reason: Optional[RejectionReason] = Field(None, description="Rejection reason if not admitted")
    error_message: Optional[str] = Field(None, description="User-facing message if not admitted")

    @classmethod
    def admitted(cls, config: UploadConfig) -> "AdmissionResult":
        return cls(ok=True, config=config)

    @classmethod
    def rejected(cls, config: UploadConfig, reason: RejectionReason) -> "AdmissionResult":
        return cls(ok=False, config=config, reason=reason, error_message=reason.message)


def allow_upload(
    name: str,
    accept: Any = None,
    max_entries: Optional[int] = None,
    max_file_size: Optional[int] = None,
    defaults: Optional[UploadDefaults] = None,
) -> UploadConfig:
    """Build the configuration for a named upload slot.

    Args:
        name: Upload slot name
        accept: ``"any"`` or a non-empty list of extensions, MIME types
            and ``type/*`` wildcards
        max_entries: Maximum number of entries the slot admits
        max_file_size: Maximum announced size per file, in bytes
        defaults: Quota defaults used for omitted options

    Returns:
        A new UploadConfig with no entries

    Raises:
        InvalidSpecError: If accept is missing or invalid
        InvalidQuotaError: If a quota option is not a positive integer
    """
    if accept is None:
        raise InvalidSpecError(
            "the accept option is required when allowing uploads",
            accept=accept,
        )

    defaults = defaults or UploadDefaults()
    policy = compile_accept(accept)

    if max_entries is None:
        max_entries = defaults.max_entries
    if max_file_size is None:
        max_file_size = defaults.max_file_size

    config = UploadConfig(
        name=name,
        accept=policy,
        max_entries=validate_quota("max_entries", max_entries),
        max_file_size=validate_quota("max_file_size", max_file_size),
    )
    logger.info(
        "upload_allowed",
        upload_config=name,
        accept=policy.to_accept_attribute() or policy.kind.value,
        max_entries=config.max_entries,
        max_file_size=config.max_file_size,
    )
    return config


def put_entries(config: UploadConfig, raw_entries: Iterable[Any]) -> AdmissionResult:
    """Admit a batch of announced entries into an upload slot.

    Checks run in order over the whole batch before anything is appended:
    capacity against the batch total, per-file size, then accept policy.
    The first failing check rejects the entire batch.

    Args:
        config: Current slot configuration
        raw_entries: Raw announcement records (dicts or ClientEntry)

    Returns:
        AdmissionResult with the new configuration, or the unchanged
        configuration and a RejectionReason

    Raises:
        MalformedEntryError: If a raw record cannot be parsed
    """
    batch = [ClientEntry.from_raw(raw) for raw in raw_entries]

    reason = _check_batch(config, batch)
    if reason is not None:
        logger.info(
            "entries_rejected",
            upload_config=config.name,
            reason=reason.value,
            batch_size=len(batch),
            existing_entries=len(config.entries),
        )
        return AdmissionResult.rejected(config, reason)

    admitted = tuple(UploadEntry.from_client_entry(config.name, entry) for entry in batch)
    new_config = config.model_copy(update={"entries": config.entries + admitted})

    logger.info(
        "entries_admitted",
        upload_config=config.name,
        refs=[entry.ref for entry in admitted],
        total_entries=len(new_config.entries),
    )
    return AdmissionResult.admitted(new_config)


def _check_batch(config: UploadConfig, batch: list[ClientEntry]) -> Optional[RejectionReason]:
    if len(config.entries) + len(batch) > config.max_entries:
        return RejectionReason.TOO_MANY_FILES

    for entry in batch:
        if entry.client_size > config.max_file_size:
            return RejectionReason.TOO_LARGE

    for entry in batch:
        if not config.accept.matches(entry.client_name, entry.client_type):
            return RejectionReason.NOT_ACCEPTED

    return None
