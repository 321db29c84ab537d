"""
Unit tests for document sanitization.
"""

import pytest

from rail_acl import (
    DENIED,
    AclDocument,
    Action,
    DeclaredSchema,
    PermissionEngine,
    RequestOptions,
    Visible,
    authorized_fields,
    has_permission,
    sanitize_many,
    sanitize_one,
)

pytestmark = pytest.mark.unit

TABLE = {
    "defaults": {"read": ["name"], "find": True},
    "hr": {"read": ["salary", "address.city"], "write": ["salary"], "remove": True},
    "blind": {},
}


@pytest.fixture
def engine():
    schema = DeclaredSchema(["name", "salary", "email", "address.city"])
    return PermissionEngine.from_schema(TABLE, schema, name="employee")


def test_sanitize_one_drops_unauthorized_fields_in_place(engine):
    doc = {"name": "Ada", "salary": 10, "email": "ada@example.com"}
    result = sanitize_one(engine, RequestOptions(auth_level="hr"), doc)

    assert isinstance(result, Visible)
    assert result.document is doc
    assert doc == {"salary": 10, "name": "Ada"}


def test_sanitize_one_picks_nested_paths(engine):
    doc = {"name": "Ada", "address": {"city": "Oran", "zip": "31000"}}
    result = sanitize_one(engine, RequestOptions(auth_level="hr"), doc)

    assert result.document == {"name": "Ada", "address": {"city": "Oran"}}


def test_zero_authorized_fields_yields_denied_not_empty():
    schema = DeclaredSchema(["name"])
    engine = PermissionEngine.from_schema({"defaults": {"find": True}}, schema)
    doc = {"name": "Ada"}

    result = sanitize_one(engine, None, doc)

    assert result is DENIED
    assert not result
    assert doc == {"name": "Ada"}


def test_no_authorized_field_present_yields_denied(engine):
    assert sanitize_one(engine, None, {"email": "ada@example.com"}) is DENIED


def test_missing_document_yields_denied(engine):
    assert sanitize_one(engine, None, None) is DENIED


def test_wrapped_document_keeps_its_shape(engine):
    doc = AclDocument({"name": "Ada", "salary": 10, "email": "x"})
    result = sanitize_one(engine, RequestOptions(auth_level="hr"), doc)

    assert result.document is doc
    assert doc.unwrap() == {"salary": 10, "name": "Ada"}
    assert doc.name == "Ada"
    with pytest.raises(AttributeError):
        doc.email


def test_permissions_embedded_on_plain_document(engine):
    options = RequestOptions(auth_level="hr", permissions=True)
    doc = {"name": "Ada", "salary": 10}

    result = sanitize_one(engine, options, doc)
    summary = result.document["permissions"]

    assert summary["read"] == authorized_fields(engine, options, Action.READ)
    assert summary["write"] == authorized_fields(engine, options, Action.WRITE)
    assert summary["remove"] is has_permission(engine, options, Action.REMOVE)
    assert summary["find"] is True


def test_permissions_embedded_on_wrapped_document(engine):
    options = RequestOptions(permissions=True)
    doc = AclDocument({"name": "Ada", "salary": 10})

    sanitize_one(engine, options, doc)

    assert doc.permissions == {
        "read": ["name"],
        "write": [],
        "remove": False,
        "find": True,
    }
    assert doc.to_dict() == {"name": "Ada", "permissions": doc.permissions}
    assert "permissions" not in doc.unwrap()


def test_summary_computed_against_unredacted_document():
    seen = []

    def get_auth_level(payload, doc):
        seen.append(dict(doc) if doc is not None else None)
        return "owner" if doc and doc.get("owner_id") == payload else None

    schema = DeclaredSchema(["name", "owner_id"], get_auth_level=get_auth_level)
    engine = PermissionEngine.from_schema(
        {"defaults": {"read": ["name"]}, "owner": {"remove": True}}, schema
    )
    doc = {"name": "Ada", "owner_id": 7}

    sanitize_one(engine, RequestOptions(auth_payload=7, permissions=True), doc)

    assert doc["permissions"]["remove"] is True
    assert all("owner_id" in snapshot for snapshot in seen)


def test_sanitize_many_single_document_returns_single(engine):
    doc = {"name": "Ada", "email": "x"}
    assert sanitize_many(engine, None, doc) == {"name": "Ada"}


def test_sanitize_many_single_denied_returns_marker(engine):
    assert sanitize_many(engine, None, {"email": "x"}) is DENIED


def test_sanitize_many_collection_filters_denied(engine):
    docs = [{"name": "Ada"}, {"email": "x"}, AclDocument({"name": "Bob", "email": "y"})]
    result = sanitize_many(engine, None, docs)

    assert isinstance(result, list)
    assert len(result) == 2
    assert result[0] == {"name": "Ada"}
    assert result[1].unwrap() == {"name": "Bob"}


def test_sanitize_many_empty_collection(engine):
    assert sanitize_many(engine, None, []) == []
    assert sanitize_many(engine, None, ()) == []


def test_sanitize_many_level_without_read_hides_everything(engine):
    options = RequestOptions(auth_level="blind")
    assert sanitize_many(engine, options, [{"salary": 1}]) == []


def test_unsupported_document_raises_type_error(engine):
    with pytest.raises(TypeError):
        sanitize_one(engine, None, object())
