"""
GraphQL integration for the access-control engine.

This module provides:
- PermissionSummaryType, the graphene type of the embedded summary
- acl_resolver, a decorator running resolver results through the find hook
"""

from functools import wraps
from typing import Any, Callable, Optional

import graphene
from graphql import GraphQLError

from .constants import Action
from .engine import PermissionEngine
from .exceptions import PermissionDenied
from .hooks import to_documents
from .types import DENIED, AuthLevel, RequestOptions


class PermissionSummaryType(graphene.ObjectType):
    """Permissions the current request holds on a document."""

    read = graphene.List(graphene.String, description="Readable field paths")
    write = graphene.List(graphene.String, description="Writable field paths")
    remove = graphene.Boolean(description="Whether the document may be removed")
    find = graphene.Boolean(description="Whether documents may be queried")


def _default_payload(info: Any) -> Any:
    return getattr(getattr(info, "context", None), "user", None)


def acl_resolver(
    engine: PermissionEngine,
    auth_level: AuthLevel = None,
    embed_permissions: bool = False,
    payload_getter: Optional[Callable[[Any], Any]] = None,
):
    """
    Decorator running a resolver's result through the find hook.

    The request options are built from the decorator arguments, with the
    identity payload taken from ``info.context.user`` unless a
    ``payload_getter`` is given. The ``find`` permission is checked before
    the resolver runs; model instances it returns become AclDocuments.

    Args:
        engine: Engine for the resolved type.
        auth_level: Explicit level override (``False`` disables checks).
        embed_permissions: Attach the permission summary to each document.
        payload_getter: ``info -> auth_payload``.

    Raises:
        GraphQLError: If the request may not query the type at all.

    Example:
        >>> @acl_resolver(employee_engine, embed_permissions=True)
        ... def resolve_employees(root, info):
        ...     return Employee.objects.all()
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(root, info, *args, **kwargs):
            getter = payload_getter or _default_payload
            options = RequestOptions(
                auth_level=auth_level,
                auth_payload=getter(info),
                permissions=embed_permissions,
            )
            if options.auth_disabled:
                return func(root, info, *args, **kwargs)

            try:
                engine.check_permission(options, Action.FIND)
            except PermissionDenied as exc:
                raise GraphQLError(
                    str(exc),
                    extensions={"code": "PERMISSION_DENIED", "action": exc.action},
                ) from exc

            result = func(root, info, *args, **kwargs)
            sanitized = engine.sanitize_many(options, to_documents(result))
            if sanitized is DENIED:
                return None
            return sanitized

        return wrapper

    return decorator
