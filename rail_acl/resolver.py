"""
Permission level resolution.

Turns request options into the ordered, deduplicated list of level names
that apply to a request.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from .types import as_options

if TYPE_CHECKING:
    from .engine import PermissionEngine

logger = logging.getLogger(__name__)


def _as_level_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def resolve_levels(
    engine: "PermissionEngine", options: Any, doc: Optional[Any] = None
) -> list[str]:
    """
    Resolve the permission levels applying to a request.

    An explicit ``auth_level`` always wins over levels computed by the
    schema's ``get_auth_level``. The defaults level is appended last, then
    the list is filtered to levels declared in the permission table and
    deduplicated in first-occurrence order.

    Args:
        engine: Engine holding the permission table and schema capabilities.
        options: RequestOptions, a mapping of options, or None.
        doc: Document the levels are computed for, if any.

    Returns:
        Ordered list of level names.

    Example:
        >>> resolve_levels(engine, RequestOptions(auth_level="admin"))
        ["admin", "defaults"]
    """
    options = as_options(options)

    levels: list[Any] = []
    if options is not None:
        if options.auth_level:
            levels = _as_level_list(options.auth_level)
        elif engine.get_auth_level is not None:
            levels = _as_level_list(engine.get_auth_level(options.auth_payload, doc))
    levels.append(engine.defaults_level)

    resolved: list[str] = []
    for level in levels:
        if isinstance(level, str) and level in engine.table and level not in resolved:
            resolved.append(level)

    logger.debug("Resolved permission levels %s for %s", resolved, engine)
    return resolved
