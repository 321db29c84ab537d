"""
Unit tests for the GraphQL resolver integration.
"""

from types import SimpleNamespace

import graphene
import pytest

from rail_acl import DeclaredSchema, PermissionEngine
from rail_acl.graphql import PermissionSummaryType, acl_resolver

pytestmark = pytest.mark.unit

ROWS = [
    {"name": "Ada", "salary": 100, "owner": "ada"},
    {"name": "Bob", "salary": 90, "owner": "bob"},
]


def _level_for(user, doc):
    if user is None or doc is None:
        return None
    return "owner" if doc.get("owner") == user.username else None


def _engine(table):
    schema = DeclaredSchema(["name", "salary", "owner"], get_auth_level=_level_for)
    return PermissionEngine.from_schema(table, schema, name="employee")


def _schema(engine, **decorator_kwargs):
    class EmployeeNode(graphene.ObjectType):
        name = graphene.String()
        salary = graphene.Int()
        permissions = graphene.Field(PermissionSummaryType)

    class Query(graphene.ObjectType):
        employees = graphene.List(EmployeeNode)
        employee = graphene.Field(EmployeeNode, name=graphene.String())

        @acl_resolver(engine, **decorator_kwargs)
        def resolve_employees(root, info):
            return [dict(row) for row in ROWS]

        @acl_resolver(engine, **decorator_kwargs)
        def resolve_employee(root, info, name):
            return next((dict(row) for row in ROWS if row["name"] == name), None)

    return graphene.Schema(query=Query)


def _context(username=None):
    user = SimpleNamespace(username=username) if username else None
    return SimpleNamespace(user=user)


def test_resolver_results_are_redacted_per_document():
    engine = _engine(
        {"defaults": {"read": ["name"], "find": True}, "owner": {"read": ["salary"]}}
    )
    result = _schema(engine).execute(
        "{ employees { name salary } }", context_value=_context("ada")
    )

    assert result.errors is None
    assert result.data["employees"] == [
        {"name": "Ada", "salary": 100},
        {"name": "Bob", "salary": None},
    ]


def test_permission_summary_is_exposed():
    engine = _engine(
        {"defaults": {"read": ["name"], "find": True}, "owner": {"remove": True}}
    )
    result = _schema(engine, embed_permissions=True).execute(
        '{ employee(name: "Ada") { name permissions { read write remove find } } }',
        context_value=_context("ada"),
    )

    assert result.errors is None
    assert result.data["employee"] == {
        "name": "Ada",
        "permissions": {"read": ["name"], "write": [], "remove": True, "find": True},
    }


def test_invisible_single_result_resolves_to_null():
    engine = _engine({"defaults": {"read": ["salary"], "find": True}})
    result = _schema(engine).execute(
        '{ employee(name: "Nobody") { name } }', context_value=_context()
    )

    assert result.errors is None
    assert result.data["employee"] is None


def test_find_denial_becomes_graphql_error():
    engine = _engine({"defaults": {"read": ["name"], "find": False}})
    result = _schema(engine).execute("{ employees { name } }", context_value=_context())

    assert result.data["employees"] is None
    error = result.errors[0]
    assert error.extensions == {"code": "PERMISSION_DENIED", "action": "find"}


def test_disabled_auth_skips_the_engine():
    engine = _engine({"defaults": {"find": False}})
    result = _schema(engine, auth_level=False).execute(
        "{ employees { name salary } }", context_value=_context()
    )

    assert result.errors is None
    assert result.data["employees"][0] == {"name": "Ada", "salary": 100}
