"""
Unit tests for document shapes and path picking.
"""

import pytest

from rail_acl import AclDocument, PlainRecord, WrappedRecord, as_record
from rail_acl.records import pick_paths

pytestmark = pytest.mark.unit


def test_as_record_probes_capability():
    assert isinstance(as_record({"a": 1}), PlainRecord)
    assert isinstance(as_record(AclDocument({"a": 1})), WrappedRecord)
    with pytest.raises(TypeError):
        as_record(("a", 1))


def test_plain_record_rewrap_mutates_mapping():
    doc = {"a": 1, "b": 2}
    record = PlainRecord(doc)

    assert record.rewrap({"a": 1}) is doc
    assert doc == {"a": 1}


def test_pick_paths_literal_and_dotted():
    data = {"a": 1, "b": {"c": 2, "d": 3}, "e.f": 4}
    assert pick_paths(data, ["a", "b.c", "e.f", "x", "a.z"]) == {
        "a": 1,
        "b": {"c": 2},
        "e.f": 4,
    }


def test_pick_paths_merges_siblings_under_same_parent():
    data = {"b": {"c": 2, "d": 3, "e": 4}}
    assert pick_paths(data, ["b.c", "b.e"]) == {"b": {"c": 2, "e": 4}}


def test_acl_document_access():
    doc = AclDocument({"name": "Ada"})
    doc.email = "ada@example.com"

    assert doc["name"] == "Ada"
    assert doc.email == "ada@example.com"
    assert "email" in doc
    assert sorted(doc) == ["email", "name"]
    assert len(doc) == 2
    assert doc == AclDocument({"name": "Ada", "email": "ada@example.com"})
    assert doc.permissions is None
    assert doc.instance is None
