"""Constant table: resolves constant declarations in dependency order."""

import logging
from collections.abc import Iterable, Iterator

from routemap.errors import (
    AmbiguousConstantError,
    ConstantDepthError,
    CyclicConstantError,
    DuplicateConstantError,
    UnknownConstantError,
)
from routemap.models import ConstantDecl, ConstantId, ConstantRef, Literal, Scope

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


class _NameIndex:
    """Finds the constant a reference points at, following scoping rules."""

    def __init__(self, identities: Iterable[ConstantId]):
        self._identities: set[ConstantId] = set()
        self._by_name: dict[str, list[ConstantId]] = {}
        for identity in identities:
            self._identities.add(identity)
            self._by_name.setdefault(identity.name, []).append(identity)

    def find(
        self, ref: ConstantRef, scope: Scope | None = None, referrer: str | None = None
    ) -> ConstantId:
        if ref.qualifier is not None:
            identity = self._member(ref.qualifier, ref, scope)
            if identity is None:
                raise UnknownConstantError(ref, referrer)
            return identity

        same_name = self._by_name.get(ref.name, [])

        if scope is None:
            candidates = same_name
        else:
            if scope.owner is not None:
                own = ConstantId(scope.owner, ref.name)
                if own in self._identities:
                    return own
            for owner in scope.owners:
                identity = self._member(owner, ref, scope)
                if identity is not None:
                    return identity
            candidates = [c for c in same_name if c.owner in scope.visible]

        if not candidates:
            raise UnknownConstantError(ref, referrer)
        if len(candidates) > 1:
            raise AmbiguousConstantError(ref, sorted(candidates, key=str))
        return candidates[0]

    def _member(self, type_name: str, ref: ConstantRef, scope: Scope | None) -> ConstantId | None:
        """Find ``ref.name`` declared by ``type_name``.

        The name is tried as written first. With a scope, a type written
        without its package is then looked up in the current package and
        finally in the wildcard-imported packages, where more than one hit
        is ambiguous.
        """
        exact = ConstantId(type_name, ref.name)
        if exact in self._identities:
            return exact
        if scope is None:
            return None

        if scope.package:
            local = ConstantId(f"{scope.package}.{type_name}", ref.name)
            if local in self._identities:
                return local

        matches = [
            identity
            for identity in (ConstantId(f"{p}.{type_name}", ref.name) for p in scope.on_demand)
            if identity in self._identities
        ]
        if len(matches) > 1:
            raise AmbiguousConstantError(ref, sorted(matches, key=str))
        return matches[0] if matches else None


class ConstantTable:
    """Read-only mapping from constant identity to its resolved string value."""

    def __init__(self, values: dict[ConstantId, str] | None = None):
        self._values: dict[ConstantId, str] = dict(values or {})
        self._index = _NameIndex(self._values)

    @classmethod
    def build(
        cls, declarations: Iterable[ConstantDecl], max_depth: int = DEFAULT_MAX_DEPTH
    ) -> "ConstantTable":
        """Resolve every declaration and return the finished table.

        Raises a ConstantError subclass on duplicates, cycles, unknown or
        ambiguous references; no partial table is ever returned.
        """
        decls: dict[ConstantId, ConstantDecl] = {}
        for decl in declarations:
            existing = decls.get(decl.identity)
            if existing is None:
                decls[decl.identity] = decl
            elif existing.expr.terms != decl.expr.terms:
                raise DuplicateConstantError(decl.identity, str(existing.expr), str(decl.expr))
            else:
                logger.debug(f"Ignoring repeated declaration of {decl.identity}")

        index = _NameIndex(decls)
        resolved: dict[ConstantId, str] = {}
        visiting: list[ConstantId] = []

        def visit(identity: ConstantId, depth: int) -> str:
            if identity in resolved:
                return resolved[identity]
            if identity in visiting:
                start = visiting.index(identity)
                raise CyclicConstantError(visiting[start:] + [identity])
            if depth > max_depth:
                raise ConstantDepthError(identity, max_depth)

            visiting.append(identity)
            decl = decls[identity]
            scope = decl.expr.scope or Scope(owner=identity.owner)
            parts = []
            for term in decl.expr.terms:
                if isinstance(term, Literal):
                    parts.append(term.value)
                else:
                    target = index.find(term, scope, referrer=str(identity))
                    parts.append(visit(target, depth + 1))
            visiting.pop()

            resolved[identity] = "".join(parts)
            return resolved[identity]

        for identity in decls:
            visit(identity, 0)

        logger.debug(f"Resolved {len(resolved)} constants")
        return cls(resolved)

    def lookup(self, ref: ConstantRef, scope: Scope | None = None) -> str:
        """Return the resolved value a reference points at."""
        return self._values[self._index.find(ref, scope)]

    def get(self, identity: ConstantId) -> str | None:
        """Return the value of a fully qualified constant, if declared."""
        return self._values.get(identity)

    def items(self) -> Iterator[tuple[ConstantId, str]]:
        return iter(self._values.items())

    def __contains__(self, identity: object) -> bool:
        return identity in self._values

    def __len__(self) -> int:
        return len(self._values)
