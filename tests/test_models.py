"""Tests for data models."""

import dataclasses

import pytest

from routemap.models import (
    ConstantId,
    ConstantRef,
    HttpVerb,
    Language,
    Literal,
    PathExpr,
    RouteEntry,
    Scope,
)


class TestHttpVerb:
    def test_values(self):
        assert [v.value for v in HttpVerb] == [
            "GET",
            "POST",
            "PUT",
            "DELETE",
            "PATCH",
            "HEAD",
            "OPTIONS",
        ]

    def test_is_str(self):
        assert isinstance(HttpVerb.GET, str)

    def test_from_annotation(self):
        assert HttpVerb.from_annotation("GET") == HttpVerb.GET
        assert HttpVerb.from_annotation("jakarta.ws.rs.PATCH") == HttpVerb.PATCH
        assert HttpVerb.from_annotation("Path") is None
        assert HttpVerb.from_annotation("GetMapping") is None


class TestLanguage:
    def test_from_extension(self):
        assert Language.from_extension(".java") == Language.JAVA
        assert Language.from_extension(".JAVA") == Language.JAVA
        assert Language.from_extension(".kt") == Language.UNKNOWN


class TestConstantRef:
    def test_equality(self):
        assert ConstantRef("X", "A") == ConstantRef("X", "A")
        assert ConstantRef("X", "A") != ConstantRef("X", "B")

    def test_absent_qualifier_differs_from_empty(self):
        assert ConstantRef("X") != ConstantRef("X", "")

    def test_str(self):
        assert str(ConstantRef("X")) == "X"
        assert str(ConstantRef("X", "com.example.A")) == "com.example.A.X"


class TestPathExpr:
    def test_of_wraps_strings(self):
        expr = PathExpr.of("/a", ConstantRef("B"))
        assert expr.terms == (Literal("/a"), ConstantRef("B"))

    def test_scope_not_part_of_equality(self):
        assert PathExpr.of("/a", scope=Scope(owner="X")) == PathExpr.of("/a")

    def test_references(self):
        expr = PathExpr.of(ConstantRef("A"), "/x", ConstantRef("B", "Q"))
        assert expr.references == [ConstantRef("A"), ConstantRef("B", "Q")]

    def test_add(self):
        scope = Scope(owner="X")
        combined = PathExpr.of("/a", scope=scope) + PathExpr.of("/b")
        assert combined.terms == (Literal("/a"), Literal("/b"))
        assert combined.scope == scope

    def test_str(self):
        assert str(PathExpr()) == '""'
        assert str(PathExpr.of(ConstantRef("BASE"), "/orders")) == 'BASE + "/orders"'


def test_constant_id_str():
    assert str(ConstantId("com.example.Constants", "API_VERSION")) == (
        "com.example.Constants.API_VERSION"
    )


class TestRouteEntry:
    def test_key(self):
        entry = RouteEntry(HttpVerb.GET, "/x", "A", "m")
        assert entry.key == (HttpVerb.GET, "/x")

    def test_to_dict(self):
        entry = RouteEntry(
            HttpVerb.POST,
            "/x",
            "com.example.A",
            "create",
            produces=frozenset({"application/xml", "application/json"}),
            line_number=7,
        )
        data = entry.to_dict()
        assert data == {
            "method": "POST",
            "path": "/x",
            "class": "com.example.A",
            "handler": "create",
            "consumes": [],
            "produces": ["application/json", "application/xml"],
            "line": 7,
        }
        assert entry.to_dict("/y")["path"] == "/y"

    def test_frozen(self):
        entry = RouteEntry(HttpVerb.GET, "/x", "A", "m")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.full_path = "/y"
