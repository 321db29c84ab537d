"""
Field-level access control for Django data layers.

The engine resolves which permission levels apply to a request, computes
the fields each action may touch and redacts documents accordingly.

Example usage:
    >>> from rail_acl import PermissionEngine, RequestOptions
    >>>
    >>> engine = PermissionEngine.from_model(
    ...     Employee,
    ...     {
    ...         "defaults": {"read": ["name"], "find": True},
    ...         "hr": {"read": ["name", "salary"], "write": ["salary"]},
    ...     },
    ... )
    >>> options = RequestOptions(auth_level="hr", permissions=True)
    >>> engine.sanitize_many(options, [{"name": "Ada", "salary": 10, "ssn": "x"}])
    [{"name": "Ada", "salary": 10, "permissions": {...}}]
"""

__version__ = "0.1.0"

# Constants and types
from .constants import (
    ADHOC_OR_UNDEFINED,
    DEFAULTS_LEVEL,
    OPERATOR_PREFIX,
    PERMISSIONS_FIELD,
    Action,
)
from .exceptions import AclConfigurationError, AclError, PermissionDenied
from .types import (
    DENIED,
    Denied,
    PermissionSummary,
    RequestOptions,
    SanitizeResult,
    Visible,
    as_options,
    is_auth_disabled,
)

# Documents and schemas
from .records import AclDocument, PlainRecord, Unwrappable, WrappedRecord, as_record
from .schema import DeclaredSchema, ModelSchema, SchemaCapability

# Engine operations
from .authorizer import (
    authorized_fields,
    embed_permissions,
    has_permission,
    unauthorized_update_paths,
)
from .engine import PermissionEngine
from .resolver import resolve_levels
from .sanitizer import sanitize_many, sanitize_one
from .updates import extract_update_paths

__all__ = [
    # Constants
    "Action",
    "ADHOC_OR_UNDEFINED",
    "DEFAULTS_LEVEL",
    "OPERATOR_PREFIX",
    "PERMISSIONS_FIELD",
    # Exceptions
    "AclError",
    "AclConfigurationError",
    "PermissionDenied",
    # Types
    "RequestOptions",
    "PermissionSummary",
    "SanitizeResult",
    "Visible",
    "Denied",
    "DENIED",
    "as_options",
    "is_auth_disabled",
    # Documents and schemas
    "Unwrappable",
    "PlainRecord",
    "WrappedRecord",
    "AclDocument",
    "as_record",
    "SchemaCapability",
    "ModelSchema",
    "DeclaredSchema",
    # Engine
    "PermissionEngine",
    "resolve_levels",
    "authorized_fields",
    "has_permission",
    "embed_permissions",
    "sanitize_one",
    "sanitize_many",
    "extract_update_paths",
    "unauthorized_update_paths",
]
