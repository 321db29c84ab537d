"""
Document sanitization.

Redacts documents down to the fields the request may read. Unauthorized
data disappears silently: a document with nothing visible becomes the
``DENIED`` marker and is dropped from collections.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Union

from .authorizer import authorized_fields, embed_permissions
from .constants import PERMISSIONS_FIELD, Action
from .records import Unwrappable, as_record
from .types import DENIED, Denied, SanitizeResult, Visible, as_options

if TYPE_CHECKING:
    from .engine import PermissionEngine

logger = logging.getLogger(__name__)


def sanitize_one(
    engine: "PermissionEngine", options: Any, doc: Any
) -> SanitizeResult:
    """
    Restrict one document to its readable fields.

    The document keeps its shape: a plain mapping is cleared and refilled
    in place, a wrapped record receives the restricted data through
    ``rewrap``. The reference passed in is therefore modified.

    Args:
        engine: Engine holding the permission table and schema capabilities.
        options: Request options; ``permissions=True`` embeds a summary
            under the ``permissions`` field.
        doc: A mutable mapping or an ``Unwrappable`` record.

    Returns:
        ``Visible(document)`` or ``DENIED`` when nothing may be read.
    """
    options = as_options(options)
    fields = authorized_fields(engine, options, Action.READ, doc)
    if doc is None or not fields:
        return DENIED

    record = as_record(doc)
    restricted = record.restrict(fields)
    if not restricted:
        return DENIED

    summary = None
    if options is not None and options.permissions:
        # Computed before rewrapping so get_auth_level sees the full document.
        summary = embed_permissions(engine, options, doc)

    document = record.rewrap(restricted)
    if summary is not None:
        record.attach(PERMISSIONS_FIELD, summary.as_dict())
    return Visible(document)


def _is_collection(docs: Any) -> bool:
    if docs is None or isinstance(docs, (Mapping, Unwrappable, str, bytes)):
        return False
    return isinstance(docs, Iterable)


def sanitize_many(
    engine: "PermissionEngine", options: Any, docs: Any
) -> Union[list[Any], Any, Denied]:
    """
    Sanitize a single document or a collection of documents.

    A collection yields a list holding the visible documents only. A single
    document yields the sanitized document itself, or ``DENIED``.
    """
    multi = _is_collection(docs)
    doc_list = list(docs) if multi else [docs]

    visible = []
    for doc in doc_list:
        result = sanitize_one(engine, options, doc)
        if isinstance(result, Visible):
            visible.append(result.document)

    dropped = len(doc_list) - len(visible)
    if dropped:
        logger.debug("Dropped %d of %d documents on %s", dropped, len(doc_list), engine)

    if multi:
        return visible
    return visible[0] if visible else DENIED
