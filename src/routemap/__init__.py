"""Routemap - static discovery of the HTTP routes declared by resource classes."""

__version__ = "0.1.0"

from routemap.engine import AnalysisResult, analyze
from routemap.models import (
    AnnotationRecord,
    ClassDecl,
    ConstantDecl,
    ConstantId,
    ConstantRef,
    HttpVerb,
    Literal,
    MethodDecl,
    PathExpr,
    RouteEntry,
    Scope,
)
from routemap.resolver import ConstantTable, RouteComposer, normalize_path, resolve
from routemap.routes import RouteTable

__all__ = [
    "AnalysisResult",
    "AnnotationRecord",
    "ClassDecl",
    "ConstantDecl",
    "ConstantId",
    "ConstantRef",
    "ConstantTable",
    "HttpVerb",
    "Literal",
    "MethodDecl",
    "PathExpr",
    "RouteComposer",
    "RouteEntry",
    "RouteTable",
    "Scope",
    "analyze",
    "normalize_path",
    "resolve",
]
