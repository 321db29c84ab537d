"""
Type definitions for the access-control engine.

This module provides:
- RequestOptions, the immutable per-request configuration
- PermissionSummary, the cross-action summary embedded into documents
- Visible / Denied, the result of sanitizing one document
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence, Union

from .constants import Action

# Level name -> action name -> bool or list of field paths
ActionMap = Mapping[str, Union[bool, Sequence[str]]]
PermissionTable = Mapping[str, ActionMap]

AuthLevel = Union[None, bool, str, Sequence[str]]


@dataclass(frozen=True)
class RequestOptions:
    """
    Per-request options consumed by the engine.

    Attributes:
        auth_level: Explicit level override. A level name or a sequence of
            names; ``False`` disables authorization for the request.
        auth_payload: Opaque identity context handed to the schema's
            level-computation function when no override is given.
        permissions: Embed a permission summary into sanitized documents.

    Every ``with_*`` method returns a new instance, so a base options
    value can be shared between requests safely.

    Example:
        >>> base = RequestOptions(auth_payload=request.user)
        >>> admin = base.with_auth_level("admin").with_permissions()
    """

    auth_level: AuthLevel = None
    auth_payload: Any = None
    permissions: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.auth_level, list):
            object.__setattr__(self, "auth_level", tuple(self.auth_level))

    @property
    def auth_disabled(self) -> bool:
        return self.auth_level is False

    def with_auth_level(self, auth_level: AuthLevel) -> "RequestOptions":
        return replace(self, auth_level=auth_level)

    def with_auth_payload(self, auth_payload: Any) -> "RequestOptions":
        return replace(self, auth_payload=auth_payload)

    def with_permissions(self, enabled: bool = True) -> "RequestOptions":
        return replace(self, permissions=enabled)

    def without_auth(self) -> "RequestOptions":
        return replace(self, auth_level=False)

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "RequestOptions":
        """Build options from a mapping using camelCase or snake_case keys."""
        if not options:
            return cls()
        if isinstance(options, RequestOptions):
            return options
        return cls(
            auth_level=options.get("auth_level", options.get("authLevel")),
            auth_payload=options.get("auth_payload", options.get("authPayload")),
            permissions=bool(options.get("permissions", False)),
        )


@dataclass(frozen=True)
class PermissionSummary:
    """What the resolved levels allow for each action."""

    read: list[str] = field(default_factory=list)
    write: list[str] = field(default_factory=list)
    remove: bool = False
    find: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            Action.READ.value: list(self.read),
            Action.WRITE.value: list(self.write),
            Action.REMOVE.value: self.remove,
            Action.FIND.value: self.find,
        }


@dataclass(frozen=True)
class Visible:
    """A sanitized document with at least one visible field."""

    document: Any


class Denied:
    """Marker for a document the caller may not see at all."""

    _instance: Optional["Denied"] = None

    def __new__(cls) -> "Denied":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DENIED"


DENIED = Denied()

SanitizeResult = Union[Visible, Denied]


def as_options(options: Any) -> Optional[RequestOptions]:
    """Normalize ``None``, a mapping or a RequestOptions value."""
    if options is None or isinstance(options, RequestOptions):
        return options
    if isinstance(options, Mapping):
        return RequestOptions.from_mapping(options)
    raise TypeError(f"Unsupported request options: {type(options).__name__}")


def is_auth_disabled(options: Any) -> bool:
    """True when the request carries the ``auth_level=False`` sentinel."""
    options = as_options(options)
    return options is not None and options.auth_disabled
