"""Tests for the analysis entry point."""

import pytest

from routemap.engine import AnalysisResult, analyze
from routemap.errors import CyclicConstantError, MultipleVerbsError
from routemap.models import (
    AnnotationRecord,
    ClassDecl,
    ConstantDecl,
    ConstantId,
    ConstantRef,
    HttpVerb,
    MethodDecl,
    PathExpr,
    Scope,
)


def resource(name, base, *methods):
    record = AnnotationRecord(path=PathExpr.of(base)) if base is not None else None
    return ClassDecl(name=name, record=record, methods=tuple(methods))


def route(name, verb, path=None, scope=None):
    path_expr = PathExpr.of(*path, scope=scope) if path else None
    return MethodDecl(name=name, records=(AnnotationRecord(verb=verb, path=path_expr),))


@pytest.fixture
def constants():
    return [ConstantDecl(ConstantId("com.example.Api", "BASE"), PathExpr.of("/api/v1"))]


def test_analyze_constant_in_method_path(constants):
    scope = Scope(owner="com.example.Api")
    classes = [
        resource(
            "com.example.Api",
            None,
            route("orders", HttpVerb.GET, (ConstantRef("BASE"), "/orders"), scope),
        )
    ]
    result = analyze(classes, constants)
    assert [e.full_path for e in result.routes.entries()] == ["/api/v1/orders"]
    assert result.ok


def test_analyze_collects_recoverable_errors(constants):
    both = MethodDecl(
        name="both",
        records=(AnnotationRecord(verb=HttpVerb.GET), AnnotationRecord(verb=HttpVerb.POST)),
    )
    classes = [
        resource("com.example.A", "/a", both, route("fine", HttpVerb.GET, ("/fine",))),
        resource("com.example.B", "/b", route("list", HttpVerb.GET)),
    ]
    result = analyze(classes, constants)

    assert [e.full_path for e in result.routes.entries()] == ["/a/fine", "/b"]
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], MultipleVerbsError)
    assert not result.ok


def test_analyze_cyclic_constants_abort():
    cyclic = [
        ConstantDecl(ConstantId("A", "X"), PathExpr.of(ConstantRef("Y"))),
        ConstantDecl(ConstantId("A", "Y"), PathExpr.of(ConstantRef("X"))),
    ]
    with pytest.raises(CyclicConstantError):
        analyze([resource("A", "/a", route("m", HttpVerb.GET))], cyclic)


def test_analyze_duplicates_are_reported_not_removed(constants):
    classes = [
        resource("com.example.A", "/items", route("list", HttpVerb.GET)),
        resource("com.example.B", "/items", route("all", HttpVerb.GET)),
    ]
    result = analyze(classes, constants)
    assert len(list(result.routes.entries())) == 2
    assert [e.source_class for e in result.routes.duplicates()] == [
        "com.example.A",
        "com.example.B",
    ]


@pytest.mark.parametrize("workers", [1, 2, 8])
def test_analyze_order_is_deterministic(constants, workers):
    classes = [
        resource(
            f"com.example.R{i}",
            f"/r{i}",
            route("a", HttpVerb.GET),
            route("b", HttpVerb.POST, ("/b",)),
        )
        for i in range(20)
    ]
    result = analyze(classes, constants, max_workers=workers)
    expected = []
    for i in range(20):
        expected += [(HttpVerb.GET, f"/r{i}"), (HttpVerb.POST, f"/r{i}/b")]
    assert [e.key for e in result.routes.entries()] == expected


def test_analyze_empty():
    result = analyze([], [])
    assert isinstance(result, AnalysisResult)
    assert len(result.routes) == 0
    assert result.errors == []


def test_analyze_exposes_constant_table(constants):
    result = analyze([], constants)
    assert result.constants.get(ConstantId("com.example.Api", "BASE")) == "/api/v1"
