"""
Schema capabilities consumed by the engine.

The engine only needs two things from a host schema: a field-existence
oracle (``path_type``) and, optionally, a function computing permission
levels from an identity payload and a document (``get_auth_level``).
"""

from typing import Any, Callable, Iterable, Optional, Protocol, Type

from django.core.exceptions import FieldDoesNotExist
from django.db import models

from .constants import ADHOC_OR_UNDEFINED, PATH_NESTED, PATH_REAL, PATH_VIRTUAL


GetAuthLevel = Callable[[Any, Any], Any]


class SchemaCapability(Protocol):
    """What a host schema exposes to the engine."""

    get_auth_level: Optional[GetAuthLevel]

    def path_type(self, path: str) -> str:
        ...


class ModelSchema:
    """
    Schema capability backed by a Django model.

    Only paths a model-backed document can hold are declared: concrete
    fields, properties, and dotted paths through foreign keys and
    one-to-one fields, so ``"department.name"`` is declared on
    ``Employee`` when ``department`` is a foreign key to a model with a
    ``name`` field. Reverse and many-to-many relations are not.

    Example:
        >>> schema = ModelSchema(Employee)
        >>> schema.path_type("salary")
        "real"
        >>> schema.path_type("nickname")
        "adhocOrUndefined"
    """

    def __init__(
        self,
        model: Type[models.Model],
        get_auth_level: Optional[GetAuthLevel] = None,
    ):
        self.model = model
        self.get_auth_level = get_auth_level

    def path_type(self, path: str) -> str:
        if not path or not isinstance(path, str):
            return ADHOC_OR_UNDEFINED

        current_model = self.model
        segments = path.split(".")
        for index, segment in enumerate(segments):
            is_last = index == len(segments) - 1
            try:
                model_field = current_model._meta.get_field(segment)
            except FieldDoesNotExist:
                if is_last and isinstance(
                    getattr(current_model, segment, None), property
                ):
                    return PATH_VIRTUAL
                return ADHOC_OR_UNDEFINED

            # Reverse and many-to-many relations hold no value on the row.
            if not model_field.concrete:
                return ADHOC_OR_UNDEFINED
            if is_last:
                return PATH_REAL

            related_model = getattr(model_field, "related_model", None)
            if not model_field.is_relation or related_model is None:
                return ADHOC_OR_UNDEFINED
            current_model = related_model

        return ADHOC_OR_UNDEFINED

    def __repr__(self) -> str:
        return f"ModelSchema({self.model._meta.label})"


class DeclaredSchema:
    """Schema capability over an explicit collection of declared paths."""

    def __init__(
        self,
        paths: Iterable[str],
        get_auth_level: Optional[GetAuthLevel] = None,
    ):
        self.paths = frozenset(paths)
        self.get_auth_level = get_auth_level

    def path_type(self, path: str) -> str:
        if path in self.paths:
            return PATH_REAL
        prefix = f"{path}."
        if any(declared.startswith(prefix) for declared in self.paths):
            return PATH_NESTED
        return ADHOC_OR_UNDEFINED
