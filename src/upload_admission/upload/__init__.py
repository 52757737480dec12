"""Upload module for file entry admission.

- Accept policy compilation (extensions, MIME types, wildcards, any)
- Upload slot configuration with entry count and file size quotas
- All-or-nothing admission of announced entry batches
"""

from upload_admission.upload.mime_types import (
    DEFAULT_CLIENT_TYPE,
    EXTENSION_MIME_TYPES,
    MIME_FAMILIES,
    extension_of,
    mime_for_extension,
    normalize_mime_type,
)
from upload_admission.upload.accept import (
    ACCEPT_ANY,
    AcceptPolicy,
    PolicyKind,
    compile_accept,
)
from upload_admission.upload.models import (
    ClientEntry,
    RejectionReason,
    UploadEntry,
)
from upload_admission.upload.config import (
    AdmissionResult,
    UploadConfig,
    allow_upload,
    put_entries,
)

__all__ = [
    # MIME table
    "DEFAULT_CLIENT_TYPE",
    "EXTENSION_MIME_TYPES",
    "MIME_FAMILIES",
    "extension_of",
    "mime_for_extension",
    "normalize_mime_type",
    # Accept policy
    "ACCEPT_ANY",
    "AcceptPolicy",
    "PolicyKind",
    "compile_accept",
    # Models
    "ClientEntry",
    "RejectionReason",
    "UploadEntry",
    # Configuration
    "AdmissionResult",
    "UploadConfig",
    "allow_upload",
    "put_entries",
]
