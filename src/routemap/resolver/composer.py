"""Route composition: class base path + method annotations -> route entries."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from routemap.errors import (
    ConstantError,
    MultiplePathsError,
    MultipleVerbsError,
    RouteError,
    UnresolvedPathError,
)
from routemap.models import AnnotationRecord, ClassDecl, MethodDecl, PathExpr, RouteEntry
from routemap.resolver.constants import ConstantTable
from routemap.resolver.expressions import resolve

logger = logging.getLogger(__name__)

_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and ensure a single leading slash.

    Composition never calls this; it is an explicit presentation step.
    """
    return "/" + _SLASHES.sub("/", path).lstrip("/")


@dataclass
class Composition:
    """Routes and recoverable errors produced for one class."""

    entries: list[RouteEntry] = field(default_factory=list)
    errors: list[RouteError] = field(default_factory=list)


class RouteComposer:
    """Combines class and method annotation records into route entries.

    Paths are concatenated byte for byte; no slash is inserted or removed.
    """

    def __init__(self, table: ConstantTable):
        self.table = table

    def compose_class(self, decl: ClassDecl) -> Composition:
        """Compose every method of a class declaration."""
        return self.compose(decl.record, decl.methods, decl.name)

    def compose(
        self,
        class_record: AnnotationRecord | None,
        methods: Sequence[MethodDecl],
        class_name: str = "",
    ) -> Composition:
        """Compose the routes of one class from its record and method declarations."""
        result = Composition()

        try:
            base_path = self._resolve_optional(class_record.path if class_record else None)
        except ConstantError as e:
            # Without a base path none of the methods can be placed.
            for method in methods:
                if self._find_verbs(method.records):
                    result.errors.append(UnresolvedPathError(class_name, method.name, e))
            return result

        for method in methods:
            try:
                entry = self.compose_method(class_record, base_path, method, class_name)
            except RouteError as e:
                logger.debug(f"Skipping {class_name}.{method.name}: {e}")
                result.errors.append(e)
                continue
            if entry is not None:
                result.entries.append(entry)

        return result

    def compose_method(
        self,
        class_record: AnnotationRecord | None,
        base_path: str,
        method: MethodDecl,
        class_name: str = "",
    ) -> RouteEntry | None:
        """Build the route for one method, or None if it declares no verb."""
        verbs = self._find_verbs(method.records)
        if not verbs:
            return None
        if len(verbs) > 1:
            raise MultipleVerbsError(class_name, method.name, [v.value for v in verbs])

        paths = {r.path for r in method.records if r.path is not None}
        if len(paths) > 1:
            raise MultiplePathsError(class_name, method.name)

        try:
            method_path = self._resolve_optional(next(iter(paths), None))
        except ConstantError as e:
            raise UnresolvedPathError(class_name, method.name, e) from e

        consumes = self._media_types(method.records, class_record, "consumes")
        produces = self._media_types(method.records, class_record, "produces")

        return RouteEntry(
            verb=verbs[0],
            full_path=base_path + method_path,
            source_class=class_name,
            source_method=method.name,
            consumes=consumes,
            produces=produces,
            line_number=method.line_number,
        )

    def _resolve_optional(self, expr: PathExpr | None) -> str:
        if expr is None:
            return ""
        return resolve(expr, self.table)

    def _find_verbs(self, records: Sequence[AnnotationRecord]) -> list:
        return [r.verb for r in records if r.verb is not None]

    def _media_types(
        self,
        records: Sequence[AnnotationRecord],
        class_record: AnnotationRecord | None,
        attr: str,
    ) -> frozenset[str]:
        """Method-level media types override the class defaults."""
        declared = [getattr(r, attr) for r in records if getattr(r, attr) is not None]
        if declared:
            return frozenset().union(*declared)
        if class_record is not None and getattr(class_record, attr) is not None:
            return getattr(class_record, attr)
        return frozenset()
