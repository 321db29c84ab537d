"""
Update payload inspection.
"""

from typing import Any, Mapping, Optional

from .config_proxy import get_setting
from .constants import OPERATOR_PREFIX


def extract_update_paths(
    update: Optional[Mapping[str, Any]], operator_prefix: Optional[str] = None
) -> list[str]:
    """
    Flatten an update payload into the field paths it touches.

    Operator keys (``$set``, ``$inc`` ...) expand to the keys of their
    nested mapping; any other key is a touched path itself. Both kinds may
    be mixed in one payload. Non-string keys are reported as strings.

    Example:
        >>> extract_update_paths({"$set": {"a": 1, "b": 2}, "c": 3})
        ["a", "b", "c"]
    """
    if not update:
        return []

    prefix = operator_prefix or get_setting(
        "acl_settings.operator_prefix", OPERATOR_PREFIX
    )
    paths: list[str] = []
    for key, value in update.items():
        if isinstance(key, str) and key.startswith(prefix):
            touched = list(value.keys()) if isinstance(value, Mapping) else []
        else:
            touched = [key]
        for path in map(str, touched):
            if path not in paths:
                paths.append(path)
    return paths
