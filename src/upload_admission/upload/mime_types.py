"""MIME type table and helpers for upload admission.

Single source of truth for:
- Extension -> canonical MIME type resolution
- Extension extraction from announced client file names
- MIME string normalization and syntax checks
"""

import re
from pathlib import PurePosixPath
from typing import Optional


DEFAULT_CLIENT_TYPE = "application/octet-stream"

# Registered top-level media types. Wildcards and exact MIME tokens must use one.
MIME_FAMILIES = frozenset({
    "application",
    "audio",
    "font",
    "image",
    "message",
    "model",
    "multipart",
    "text",
    "video",
})

_MIME_PART = r"[a-z0-9][a-z0-9!#$&^_.+-]*"
MIME_PATTERN = re.compile(rf"^(?P<type>{_MIME_PART})/(?P<subtype>{_MIME_PART}|\*)$")

EXTENSION_MIME_TYPES: dict[str, str] = {
    # Images
    ".avif": "image/avif",
    ".bmp": "image/bmp",
    ".gif": "image/gif",
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".ico": "image/vnd.microsoft.icon",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".webp": "image/webp",
    # Audio
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".mid": "audio/midi",
    ".midi": "audio/midi",
    ".mp3": "audio/mpeg",
    ".oga": "audio/ogg",
    ".ogg": "audio/ogg",
    ".opus": "audio/opus",
    ".wav": "audio/wav",
    ".weba": "audio/webm",
    # Video
    ".avi": "video/x-msvideo",
    ".m4v": "video/mp4",
    ".mkv": "video/x-matroska",
    ".mov": "video/quicktime",
    ".mp4": "video/mp4",
    ".mpeg": "video/mpeg",
    ".mpg": "video/mpeg",
    ".ogv": "video/ogg",
    ".webm": "video/webm",
    # Documents
    ".csv": "text/csv",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".epub": "application/epub+zip",
    ".htm": "text/html",
    ".html": "text/html",
    ".md": "text/markdown",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".pdf": "application/pdf",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".rtf": "application/rtf",
    ".txt": "text/plain",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xml": "text/xml",
    # Data and archives
    ".7z": "application/x-7z-compressed",
    ".bz2": "application/x-bzip2",
    ".gz": "application/gzip",
    ".json": "application/json",
    ".rar": "application/vnd.rar",
    ".tar": "application/x-tar",
    ".yaml": "application/yaml",
    ".yml": "application/yaml",
    ".zip": "application/zip",
    # Fonts
    ".otf": "font/otf",
    ".ttf": "font/ttf",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def mime_for_extension(extension: str) -> Optional[str]:
    """Resolve a dotted extension to its canonical MIME type.

    Lookup is case-insensitive, so ``.JPG`` and ``.jpg`` resolve the same.

    Args:
        extension: Extension including the leading dot

    Returns:
        Canonical MIME type, or None when the extension is unknown
    """
    return EXTENSION_MIME_TYPES.get(extension.lower())


def extension_of(file_name: Optional[str]) -> Optional[str]:
    """Extract the lower-cased extension of a client file name.

    Returns None for names without an extension (``photo``) and for
    dot-files (``.bashrc``).
    """
    if not file_name:
        return None
    suffix = PurePosixPath(file_name.replace("\\", "/")).suffix
    return suffix.lower() or None


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Lower-case a MIME string and drop any parameters.

    ``"Image/PNG; charset=binary"`` becomes ``"image/png"``.
    """
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def split_mime_type(mime_type: str) -> Optional[tuple[str, str]]:
    """Split a MIME string into (type, subtype) if it is well formed.

    The subtype may be ``*``. The top-level type is not checked against
    MIME_FAMILIES here.
    """
    match = MIME_PATTERN.match(normalize_mime_type(mime_type))
    if match is None:
        return None
    return match.group("type"), match.group("subtype")


def wildcard_for(mime_type: Optional[str]) -> Optional[str]:
    """Return the ``type/*`` family key for an announced MIME type."""
    parts = normalize_mime_type(mime_type).split("/", 1)
    if len(parts) != 2 or not parts[0]:
        return None
    return f"{parts[0]}/*"
