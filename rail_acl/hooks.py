"""
Query-side integration of the engine.

Provides the post-find hook (``apply_find_acl``) and a Django QuerySet
that carries per-request options through the query chain:

    >>> Employee.objects.set_auth_level("hr").filter(active=True).acl_find()
"""

import logging
from typing import Any, Type

from django.db import models

from .constants import Action
from .engine import PermissionEngine
from .exceptions import AclConfigurationError
from .records import AclDocument
from .types import AuthLevel, RequestOptions, as_options, is_auth_disabled

logger = logging.getLogger(__name__)

_ENGINES: dict[str, PermissionEngine] = {}


def register_acl_engine(
    model: Type[models.Model], engine: PermissionEngine
) -> PermissionEngine:
    """Attach an engine to a model so its AclQuerySet can find it."""
    label = model._meta.label_lower
    if label in _ENGINES:
        logger.debug("Replacing permission engine for %s", label)
    _ENGINES[label] = engine
    logger.info("Permission engine registered for %s", label)
    return engine


def unregister_acl_engine(model: Type[models.Model]) -> None:
    _ENGINES.pop(model._meta.label_lower, None)


def get_acl_engine(model: Type[models.Model]) -> PermissionEngine:
    try:
        return _ENGINES[model._meta.label_lower]
    except KeyError:
        raise AclConfigurationError(
            f"No permission engine registered for {model._meta.label}"
        ) from None


def to_documents(result: Any) -> Any:
    """Convert model instances (or collections of them) into AclDocuments."""
    if isinstance(result, models.Model):
        return AclDocument.from_instance(result)
    if isinstance(result, (models.QuerySet, list, tuple)):
        return [
            AclDocument.from_instance(item) if isinstance(item, models.Model) else item
            for item in result
        ]
    return result


def apply_find_acl(engine: PermissionEngine, options: Any, docs: Any) -> Any:
    """
    Run the find hook over a result.

    Disabled authorization passes ``docs`` through untouched. Otherwise
    the ``find`` action is checked before anything is sanitized.

    Raises:
        PermissionDenied: If no resolved level grants ``find``.
    """
    options = as_options(options)
    if is_auth_disabled(options):
        return docs

    engine.check_permission(options, Action.FIND)
    return engine.sanitize_many(options, to_documents(docs))


class AclQuerySet(models.QuerySet):
    """QuerySet carrying the request options of the engine."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._acl_options = RequestOptions()

    def _clone(self):
        clone = super()._clone()
        clone._acl_options = self._acl_options
        return clone

    @property
    def acl_options(self) -> RequestOptions:
        return self._acl_options

    def _with_options(self, options: RequestOptions) -> "AclQuerySet":
        clone = self._chain()
        clone._acl_options = options
        return clone

    def with_acl_options(self, options: Any) -> "AclQuerySet":
        return self._with_options(as_options(options) or RequestOptions())

    def set_auth_level(self, auth_level: AuthLevel) -> "AclQuerySet":
        return self._with_options(self._acl_options.with_auth_level(auth_level))

    def set_auth_payload(self, auth_payload: Any) -> "AclQuerySet":
        return self._with_options(self._acl_options.with_auth_payload(auth_payload))

    def with_permissions(self, enabled: bool = True) -> "AclQuerySet":
        return self._with_options(self._acl_options.with_permissions(enabled))

    def acl_engine(self) -> PermissionEngine:
        return get_acl_engine(self.model)

    def acl_find(self) -> list[Any]:
        """
        Evaluate the queryset through the find hook.

        Returns model instances untouched when authorization is disabled,
        otherwise the visible rows as sanitized AclDocuments.
        """
        options = self._acl_options
        if options.auth_disabled:
            return list(self)

        engine = self.acl_engine()
        engine.check_permission(options, Action.FIND)
        return engine.sanitize_many(options, to_documents(list(self)))

    def acl_get(self, *args, **kwargs) -> Any:
        """
        ``get()`` through the find hook.

        Returns the sanitized AclDocument, or ``DENIED`` when nothing on the
        row is readable.
        """
        options = self._acl_options
        if options.auth_disabled:
            return self.get(*args, **kwargs)

        engine = self.acl_engine()
        engine.check_permission(options, Action.FIND)
        return engine.sanitize_many(options, to_documents(self.get(*args, **kwargs)))


class AclManager(models.Manager):
    def get_queryset(self):
        return AclQuerySet(self.model, using=self._db)

    def set_auth_level(self, auth_level: AuthLevel) -> AclQuerySet:
        return self.get_queryset().set_auth_level(auth_level)

    def set_auth_payload(self, auth_payload: Any) -> AclQuerySet:
        return self.get_queryset().set_auth_payload(auth_payload)

    def with_acl_options(self, options: Any) -> AclQuerySet:
        return self.get_queryset().with_acl_options(options)
