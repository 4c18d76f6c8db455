"""Analysis entry point: builds the constant table and composes every class."""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from routemap.errors import RouteError
from routemap.models import ClassDecl, ConstantDecl
from routemap.resolver.composer import Composition, RouteComposer
from routemap.resolver.constants import DEFAULT_MAX_DEPTH, ConstantTable
from routemap.routes import RouteTable

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Routes found by one analysis run plus the recoverable errors."""

    routes: RouteTable = field(default_factory=RouteTable)
    errors: list[RouteError] = field(default_factory=list)
    constants: ConstantTable = field(default_factory=ConstantTable)

    @property
    def ok(self) -> bool:
        return not self.errors


def analyze(
    classes: Iterable[ClassDecl],
    constants: Iterable[ConstantDecl],
    max_workers: int = 4,
    max_constant_depth: int = DEFAULT_MAX_DEPTH,
) -> AnalysisResult:
    """Discover every route declared by ``classes``.

    Constant table errors propagate and abort the run. Per-method errors
    are collected on the result. Classes are composed in parallel, but the
    routes are merged in the order the classes were given.
    """
    table = ConstantTable.build(constants, max_depth=max_constant_depth)
    composer = RouteComposer(table)
    classes = list(classes)

    logger.debug(f"Composing {len(classes)} classes against {len(table)} constants")

    if max_workers > 1 and len(classes) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            compositions: list[Composition] = list(pool.map(composer.compose_class, classes))
    else:
        compositions = [composer.compose_class(decl) for decl in classes]

    result = AnalysisResult(constants=table)
    for composition in compositions:
        result.routes.extend(composition.entries)
        result.errors.extend(composition.errors)

    duplicates = result.routes.duplicates()
    if duplicates:
        logger.debug(f"{len(duplicates)} routes share a method and path with another route")

    return result
