"""Accept policy compilation and matching.

An accept specification is either the ``"any"`` marker or a non-empty list
of tokens, each a dotted extension (``.jpg``), an exact MIME type
(``image/png``) or a family wildcard (``image/*``). Compilation keys every
token by its canonical MIME type so matching is an exact lookup followed
by a family lookup.
"""

from collections import defaultdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from upload_admission.core import InvalidSpecError, get_logger
from upload_admission.upload.mime_types import (
    MIME_FAMILIES,
    extension_of,
    mime_for_extension,
    normalize_mime_type,
    split_mime_type,
    wildcard_for,
)

logger = get_logger(__name__)

ACCEPT_ANY = "any"


class PolicyKind(str, Enum):
    """Variant tag of a compiled accept policy."""
    ANY = "any"
    MIME_MAP = "mime_map"


class AcceptPolicy(BaseModel):
    """Compiled accept policy.

    For ``MIME_MAP`` policies, ``rules`` pairs each canonical MIME type or
    ``type/*`` wildcard with the literal tokens that resolved to it, in the
    order they were first seen. ``mime_map`` is a read-only view of them.
    """
    model_config = {"frozen": True}

    kind: PolicyKind = Field(..., description="Policy variant")
    rules: tuple[tuple[str, tuple[str, ...]], ...] = Field(
        default=(), description="(canonical MIME key, contributing tokens) pairs"
    )

    @classmethod
    def any(cls) -> "AcceptPolicy":
        return cls(kind=PolicyKind.ANY)

    @property
    def mime_map(self) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(self.rules))

    @property
    def is_any(self) -> bool:
        return self.kind == PolicyKind.ANY

    @property
    def extensions(self) -> frozenset[str]:
        """Lower-cased extension tokens the policy was compiled from."""
        return frozenset(
            token.lower()
            for tokens in self.mime_map.values()
            for token in tokens
            if token.startswith(".")
        )

    def matches(self, client_name: Optional[str], client_type: Optional[str]) -> bool:
        """Check whether an announced file satisfies the policy.

        A file matches if its type is an exact key, its type family has a
        wildcard key, or its extension was listed in the accept tokens.
        """
        if self.is_any:
            return True

        mime_type = normalize_mime_type(client_type)
        if mime_type in self.mime_map:
            return True

        wildcard = wildcard_for(mime_type)
        if wildcard is not None and wildcard in self.mime_map:
            return True

        extension = extension_of(client_name)
        return extension is not None and extension in self.extensions

    def matching_tokens(self, client_name: Optional[str], client_type: Optional[str]) -> list[str]:
        """List the literal accept tokens an announced file satisfied.

        Returns an empty list for ``ANY`` policies and for files that do
        not match.
        """
        if self.is_any:
            return []

        matched: list[str] = []
        mime_type = normalize_mime_type(client_type)
        wildcard = wildcard_for(mime_type)
        for key in (mime_type, wildcard):
            if key and key in self.mime_map:
                matched.extend(self.mime_map[key])

        extension = extension_of(client_name)
        if extension is not None:
            for tokens in self.mime_map.values():
                matched.extend(t for t in tokens if t.lower() == extension)

        return list(dict.fromkeys(matched))

    def to_accept_attribute(self) -> Optional[str]:
        """Render the policy as an HTML ``accept`` attribute value."""
        if self.is_any:
            return None
        tokens = [token for tokens in self.mime_map.values() for token in tokens]
        return ",".join(dict.fromkeys(tokens))


def compile_accept(accept: Any) -> AcceptPolicy:
    """Compile a raw accept specification into an AcceptPolicy.

    Args:
        accept: ``"any"``, an already compiled AcceptPolicy, or a non-empty
            list/tuple of extension, MIME type and wildcard tokens

    Returns:
        Compiled AcceptPolicy

    Raises:
        InvalidSpecError: If the specification or any of its tokens is invalid
    """
    if isinstance(accept, AcceptPolicy):
        return accept

    if isinstance(accept, str) and accept == ACCEPT_ANY:
        return AcceptPolicy.any()

    if not isinstance(accept, (list, tuple)) or not accept:
        raise InvalidSpecError(
            f"invalid accept filter provided to allow_upload. "
            f'Expected "any" or a non-empty list of extensions and MIME types, got: {accept!r}',
            accept=accept,
        )

    mime_map: dict[str, list[str]] = defaultdict(list)
    for token in accept:
        mime_map[_resolve_token(accept, token)].append(token)

    policy = AcceptPolicy(
        kind=PolicyKind.MIME_MAP,
        rules=tuple((key, tuple(tokens)) for key, tokens in mime_map.items()),
    )
    logger.debug(
        "accept_policy_compiled",
        tokens=len(accept),
        mime_types=list(policy.mime_map),
    )
    return policy


def _resolve_token(accept: Any, token: Any) -> str:
    """Resolve one accept token to its canonical MIME key."""
    if isinstance(token, str):
        if token.startswith("."):
            mime_type = mime_for_extension(token)
            if mime_type is not None:
                return mime_type
        else:
            parts = split_mime_type(token)
            if parts is not None and parts[0] in MIME_FAMILIES:
                return f"{parts[0]}/{parts[1]}"

    raise InvalidSpecError(
        f"invalid accept filter provided to allow_upload. "
        f"Expected a file extension with a known MIME type, a MIME type, "
        f"or a type/* wildcard, got: {token!r}",
        accept=accept,
        token=token,
    )
