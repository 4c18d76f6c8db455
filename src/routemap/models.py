"""Data models for routemap."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class HttpVerb(str, Enum):
    """HTTP methods recognized on resource methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def from_annotation(cls, name: str) -> "HttpVerb | None":
        """Map an annotation name (simple or fully qualified) to a verb."""
        simple = name.rsplit(".", 1)[-1]
        try:
            return cls(simple)
        except ValueError:
            return None


class Language(str, Enum):
    """Source languages the front-end understands."""

    JAVA = "java"
    UNKNOWN = "unknown"

    @classmethod
    def from_extension(cls, ext: str) -> "Language":
        """Determine language from file extension."""
        if ext.lower() == ".java":
            return cls.JAVA
        return cls.UNKNOWN


@dataclass
class SourceFile:
    """Represents a source file in the repository."""

    path: Path
    relative_path: Path
    language: Language
    size_bytes: int = 0


@dataclass(frozen=True)
class Literal:
    """A literal string segment of a path expression."""

    value: str


@dataclass(frozen=True)
class ConstantRef:
    """A reference to a named constant, optionally scoped to a declaring type.

    A missing qualifier is distinct from an empty one.
    """

    name: str
    qualifier: str | None = None

    def __str__(self) -> str:
        if self.qualifier is None:
            return self.name
        return f"{self.qualifier}.{self.name}"


PathTerm = Literal | ConstantRef


@dataclass(frozen=True)
class Scope:
    """Where an expression was written.

    ``owner`` is the qualified name of the declaring type. ``owners`` lists
    the other types whose members are in scope without a qualifier, in
    lookup order: direct supertypes, then each enclosing type followed by
    its supertypes. ``visible`` lists the types whose members are
    statically imported into that file. ``package`` and ``on_demand``
    (wildcard-imported packages) expand type names that were written
    without their package.
    """

    owner: str | None = None
    visible: tuple[str, ...] = ()
    owners: tuple[str, ...] = ()
    package: str | None = None
    on_demand: tuple[str, ...] = ()


@dataclass(frozen=True)
class PathExpr:
    """An ordered sequence of literal and constant-reference terms."""

    terms: tuple[PathTerm, ...] = ()
    scope: Scope | None = field(default=None, compare=False)

    @classmethod
    def of(cls, *terms: "PathTerm | str", scope: Scope | None = None) -> "PathExpr":
        """Build an expression, wrapping bare strings as literals."""
        return cls(
            terms=tuple(Literal(t) if isinstance(t, str) else t for t in terms),
            scope=scope,
        )

    @property
    def references(self) -> list[ConstantRef]:
        """Constant references in term order."""
        return [t for t in self.terms if isinstance(t, ConstantRef)]

    def __add__(self, other: "PathExpr") -> "PathExpr":
        return PathExpr(terms=self.terms + other.terms, scope=self.scope or other.scope)

    def __str__(self) -> str:
        if not self.terms:
            return '""'
        return " + ".join(f'"{t.value}"' if isinstance(t, Literal) else str(t) for t in self.terms)


@dataclass(frozen=True)
class ConstantId:
    """Fully qualified identity of a constant."""

    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass(frozen=True)
class ConstantDecl:
    """A constant declaration as reported by the front-end."""

    identity: ConstantId
    expr: PathExpr
    line_number: int = 0


@dataclass(frozen=True)
class AnnotationRecord:
    """Normalized routing metadata of one class or method annotation set."""

    verb: HttpVerb | None = None
    path: PathExpr | None = None
    consumes: frozenset[str] | None = None
    produces: frozenset[str] | None = None


@dataclass(frozen=True)
class MethodDecl:
    """A method and the annotation records attached to it."""

    name: str
    records: tuple[AnnotationRecord, ...] = ()
    line_number: int = 0


@dataclass(frozen=True)
class ClassDecl:
    """A resource class declaration."""

    name: str
    record: AnnotationRecord | None = None
    methods: tuple[MethodDecl, ...] = ()
    file_path: Path | None = None


@dataclass(frozen=True)
class RouteEntry:
    """A resolved route exposed by a resource method."""

    verb: HttpVerb
    full_path: str
    source_class: str
    source_method: str
    consumes: frozenset[str] = frozenset()
    produces: frozenset[str] = frozenset()
    line_number: int = 0

    @property
    def key(self) -> tuple[HttpVerb, str]:
        """Identity used for duplicate detection."""
        return (self.verb, self.full_path)

    def to_dict(self, path: str | None = None) -> dict:
        """Serialize for presentation, optionally overriding the path."""
        return {
            "method": self.verb.value,
            "path": self.full_path if path is None else path,
            "class": self.source_class,
            "handler": self.source_method,
            "consumes": sorted(self.consumes),
            "produces": sorted(self.produces),
            "line": self.line_number,
        }


@dataclass
class FileDeclarations:
    """All routing declarations extracted from a single file."""

    file: SourceFile
    package: str | None = None
    classes: list[ClassDecl] = field(default_factory=list)
    constants: list[ConstantDecl] = field(default_factory=list)
