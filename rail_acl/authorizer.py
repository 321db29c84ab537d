"""
Field authorization.

Computes the field paths and action grants a set of resolved levels
collectively allows.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from .constants import ADHOC_OR_UNDEFINED, Action
from .resolver import resolve_levels
from .types import PermissionSummary, is_auth_disabled
from .updates import extract_update_paths

if TYPE_CHECKING:
    from .engine import PermissionEngine

logger = logging.getLogger(__name__)

ActionLike = Union[Action, str]


def authorized_fields(
    engine: "PermissionEngine",
    options: Any,
    action: ActionLike,
    doc: Optional[Any] = None,
) -> list[str]:
    """
    Get the field paths the resolved levels grant for ``action``.

    The result is the union of every resolved level's field list, in
    first-seen order, without paths the schema does not declare. Levels
    whose entry for the action is missing or boolean contribute nothing.

    Args:
        engine: Engine holding the permission table and schema capabilities.
        options: Request options.
        action: Usually ``read`` or ``write``.
        doc: Document the levels are computed for, if any.

    Returns:
        List of authorized field paths.
    """
    action = Action(action)
    fields: list[str] = []
    for level in resolve_levels(engine, options, doc):
        entry = engine.table[level].get(action.value)
        if not isinstance(entry, tuple):
            continue
        for path in entry:
            if path in fields:
                continue
            if engine.path_type(path) == ADHOC_OR_UNDEFINED:
                continue
            fields.append(path)
    return fields


def has_permission(
    engine: "PermissionEngine",
    options: Any,
    action: ActionLike,
    doc: Optional[Any] = None,
) -> bool:
    """True if any resolved level has a truthy entry for ``action``."""
    action = Action(action)
    return any(
        engine.table[level].get(action.value)
        for level in resolve_levels(engine, options, doc)
    )


def embed_permissions(
    engine: "PermissionEngine", options: Any, doc: Optional[Any] = None
) -> PermissionSummary:
    """Summarize what the request may do with ``doc`` for every action."""
    return PermissionSummary(
        read=authorized_fields(engine, options, Action.READ, doc),
        write=authorized_fields(engine, options, Action.WRITE, doc),
        remove=has_permission(engine, options, Action.REMOVE, doc),
        find=has_permission(engine, options, Action.FIND, doc),
    )


def unauthorized_update_paths(
    engine: "PermissionEngine",
    options: Any,
    update: Mapping[str, Any],
    doc: Optional[Any] = None,
) -> list[str]:
    """
    Get the paths touched by ``update`` that the request may not write.

    A touched path is writable when it is authorized itself or lies below
    an authorized path (``"address.city"`` under ``"address"``). Nothing is
    rejected here; callers decide what to do with the returned paths.
    """
    if is_auth_disabled(options):
        return []

    writable = authorized_fields(engine, options, Action.WRITE, doc)
    denied = [
        path
        for path in extract_update_paths(update, engine.operator_prefix)
        if not any(path == field or path.startswith(f"{field}.") for field in writable)
    ]
    if denied:
        logger.debug("Update touches unwritable paths %s on %s", denied, engine)
    return denied
