"""Constant and path resolution."""

from routemap.resolver.composer import Composition, RouteComposer, normalize_path
from routemap.resolver.constants import ConstantTable
from routemap.resolver.expressions import resolve

__all__ = [
    "Composition",
    "ConstantTable",
    "RouteComposer",
    "normalize_path",
    "resolve",
]
