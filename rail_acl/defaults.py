"""
Default configuration for the rail-acl library.

Every setting the engine consumes has a single default here. Projects
override them through the ``RAIL_ACL`` dictionary in Django settings or
at runtime with ``configure_runtime_settings``.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "rail-acl"


# --------------------------------------------------------------------------- #
# Library-wide defaults
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "acl_settings": {
        # Level appended to every resolved level set.
        "defaults_level": "defaults",
        # Prefix marking operator keys in update payloads ({"$set": {...}}).
        "operator_prefix": "$",
        # Raise on malformed permission tables instead of logging and skipping.
        "strict_table_validation": False,
        "log_denials": True,
    },
}
