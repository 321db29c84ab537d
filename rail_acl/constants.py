"""
Constants shared by the access-control engine.
"""

from enum import Enum


class Action(str, Enum):
    """Actions a permission table grants."""

    READ = "read"
    WRITE = "write"
    REMOVE = "remove"
    FIND = "find"


# Actions whose table entries are lists of field paths
FIELD_ACTIONS = (Action.READ, Action.WRITE)

# Actions whose table entries are booleans
BOOLEAN_ACTIONS = (Action.REMOVE, Action.FIND)

DEFAULTS_LEVEL = "defaults"
OPERATOR_PREFIX = "$"
PERMISSIONS_FIELD = "permissions"

# Path types reported by a schema capability
PATH_REAL = "real"
PATH_NESTED = "nested"
PATH_VIRTUAL = "virtual"
ADHOC_OR_UNDEFINED = "adhocOrUndefined"
