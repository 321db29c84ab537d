"""
Permission engine.

``PermissionEngine`` bundles a permission table with the schema
capabilities it is evaluated against. It is built once at setup time,
treated as read-only afterwards, and passed explicitly to every call.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Type, Union

from django.db import models

from .authorizer import (
    authorized_fields,
    embed_permissions,
    has_permission,
    unauthorized_update_paths,
)
from .config_proxy import get_setting
from .constants import BOOLEAN_ACTIONS, DEFAULTS_LEVEL, OPERATOR_PREFIX, Action
from .exceptions import AclConfigurationError, PermissionDenied
from .resolver import resolve_levels
from .sanitizer import sanitize_many, sanitize_one
from .schema import GetAuthLevel, ModelSchema, SchemaCapability
from .types import PermissionSummary, PermissionTable, SanitizeResult
from .updates import extract_update_paths

logger = logging.getLogger(__name__)


class PermissionEngine:
    """
    Field-level access control over one permission table.

    Args:
        table: Mapping of level name to action map. ``read``/``write``
            map to lists of field paths, ``remove``/``find`` to booleans.
        path_type: Field-existence oracle returning ``"adhocOrUndefined"``
            for paths the schema does not declare.
        get_auth_level: Optional ``(auth_payload, doc) -> level | levels``.
        name: Label used in logs and errors.

    Example:
        >>> engine = PermissionEngine.from_model(
        ...     Employee,
        ...     {
        ...         "defaults": {"read": ["name"], "find": True},
        ...         "hr": {"read": ["salary"], "write": ["salary"]},
        ...     },
        ... )
        >>> engine.sanitize_many(RequestOptions(auth_level="hr"), docs)
    """

    def __init__(
        self,
        table: PermissionTable,
        path_type: Callable[[str], str],
        get_auth_level: Optional[GetAuthLevel] = None,
        name: Optional[str] = None,
    ):
        self.name = name
        self.path_type = path_type
        self.get_auth_level = get_auth_level
        self.defaults_level = get_setting("acl_settings.defaults_level", DEFAULTS_LEVEL)
        self.operator_prefix = get_setting(
            "acl_settings.operator_prefix", OPERATOR_PREFIX
        )
        self._strict = bool(get_setting("acl_settings.strict_table_validation", False))
        self.table = self._freeze_table(table)
        logger.info(
            "Permission engine built for %s with levels %s",
            name or "<anonymous>",
            list(self.table),
        )

    @classmethod
    def from_schema(
        cls,
        table: PermissionTable,
        schema: SchemaCapability,
        name: Optional[str] = None,
    ) -> "PermissionEngine":
        return cls(
            table,
            schema.path_type,
            getattr(schema, "get_auth_level", None),
            name=name,
        )

    @classmethod
    def from_model(
        cls,
        model: Type[models.Model],
        table: PermissionTable,
        get_auth_level: Optional[GetAuthLevel] = None,
    ) -> "PermissionEngine":
        """Build an engine whose schema capability is a Django model."""
        schema = ModelSchema(model, get_auth_level=get_auth_level)
        return cls.from_schema(table, schema, name=model._meta.label_lower)

    # ------------------------------------------------------------------ #
    # Table validation
    # ------------------------------------------------------------------ #

    def _report(
        self, message: str, level: Optional[str] = None, action: Optional[str] = None
    ) -> None:
        if self._strict:
            raise AclConfigurationError(message, level=level, action=action)
        logger.warning("Ignoring permission table entry: %s", message)

    def _freeze_action_value(self, level: str, action: Action, value: Any) -> Any:
        if action in BOOLEAN_ACTIONS:
            if not isinstance(value, bool):
                self._report(
                    f"'{level}.{action.value}' should be a boolean",
                    level=level,
                    action=action.value,
                )
            return bool(value)

        if isinstance(value, bool):
            return value
        if not isinstance(value, (list, tuple)):
            self._report(
                f"'{level}.{action.value}' should be a list of field paths",
                level=level,
                action=action.value,
            )
            return ()
        paths = []
        for path in value:
            if not isinstance(path, str):
                self._report(
                    f"'{level}.{action.value}' contains non-string path {path!r}",
                    level=level,
                    action=action.value,
                )
                continue
            paths.append(path)
        return tuple(paths)

    def _freeze_table(self, table: PermissionTable) -> Mapping[str, Mapping[str, Any]]:
        if not isinstance(table, Mapping):
            raise AclConfigurationError(
                f"Permission table must be a mapping, got {type(table).__name__}"
            )

        frozen: dict[str, Mapping[str, Any]] = {}
        for level, action_map in table.items():
            if not isinstance(level, str):
                self._report(f"level name {level!r} is not a string")
                continue
            if action_map is None:
                action_map = {}
            if not isinstance(action_map, Mapping):
                self._report(f"level '{level}' is not a mapping", level=level)
                continue

            actions: dict[str, Any] = {}
            for action_name, value in action_map.items():
                try:
                    action = Action(action_name)
                except ValueError:
                    self._report(
                        f"unknown action '{action_name}' in level '{level}'",
                        level=level,
                        action=str(action_name),
                    )
                    continue
                actions[action.value] = self._freeze_action_value(level, action, value)
            frozen[level] = MappingProxyType(actions)

        return MappingProxyType(frozen)

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def resolve_levels(self, options: Any, doc: Optional[Any] = None) -> list[str]:
        return resolve_levels(self, options, doc)

    def authorized_fields(
        self, options: Any, action: Union[Action, str], doc: Optional[Any] = None
    ) -> list[str]:
        return authorized_fields(self, options, action, doc)

    def has_permission(
        self, options: Any, action: Union[Action, str], doc: Optional[Any] = None
    ) -> bool:
        return has_permission(self, options, action, doc)

    def check_permission(
        self, options: Any, action: Union[Action, str], doc: Optional[Any] = None
    ) -> None:
        """
        Raise ``PermissionDenied`` unless some resolved level grants ``action``.
        """
        if self.has_permission(options, action, doc):
            return
        action = Action(action)
        if get_setting("acl_settings.log_denials", True):
            logger.warning(
                "Permission denied for action '%s' on %s", action.value, self
            )
        raise PermissionDenied(action.value, model_name=self.name)

    def embed_permissions(
        self, options: Any, doc: Optional[Any] = None
    ) -> PermissionSummary:
        return embed_permissions(self, options, doc)

    def sanitize_one(self, options: Any, doc: Any) -> SanitizeResult:
        return sanitize_one(self, options, doc)

    def sanitize_many(self, options: Any, docs: Any) -> Any:
        return sanitize_many(self, options, docs)

    def extract_update_paths(self, update: Mapping[str, Any]) -> list[str]:
        return extract_update_paths(update, self.operator_prefix)

    def unauthorized_update_paths(
        self, options: Any, update: Mapping[str, Any], doc: Optional[Any] = None
    ) -> list[str]:
        return unauthorized_update_paths(self, options, update, doc)

    def __repr__(self) -> str:
        return f"PermissionEngine({self.name or '<anonymous>'})"
