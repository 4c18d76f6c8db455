"""Routemap exception hierarchy.

Constant errors are fatal: no route can be trusted without a valid
constant table. Route errors are recoverable and collected per method.
"""

from routemap.models import ConstantId, ConstantRef


class RouteMapError(Exception):
    """Base for all routemap errors."""


class ConstantError(RouteMapError):
    """A constant table could not be built or queried."""


class CyclicConstantError(ConstantError):
    """A constant's definition depends on itself."""

    def __init__(self, cycle: list[ConstantId]):
        self.cycle = cycle
        chain = " -> ".join(str(c) for c in cycle)
        super().__init__(f"Cyclic constant definition: {chain}")


class DuplicateConstantError(ConstantError):
    """The same constant identity was declared with conflicting values."""

    def __init__(self, identity: ConstantId, first: str, second: str):
        self.identity = identity
        super().__init__(f"Constant {identity} declared twice: {first} vs {second}")


class UnknownConstantError(ConstantError):
    """A reference does not match any declared constant."""

    def __init__(self, ref: ConstantRef, referrer: str | None = None):
        self.ref = ref
        self.referrer = referrer
        msg = f"Unknown constant {ref}"
        if referrer:
            msg += f" referenced from {referrer}"
        super().__init__(msg)


class AmbiguousConstantError(ConstantError):
    """An unqualified reference matches constants in several scopes."""

    def __init__(self, ref: ConstantRef, candidates: list[ConstantId]):
        self.ref = ref
        self.candidates = candidates
        names = ", ".join(str(c) for c in candidates)
        super().__init__(f"Ambiguous constant {ref}: matches {names}")


class ConstantDepthError(ConstantError):
    """Constant resolution nested deeper than the configured bound."""

    def __init__(self, identity: ConstantId, limit: int):
        self.identity = identity
        self.limit = limit
        super().__init__(f"Resolving {identity} exceeded depth {limit}")


class RouteError(RouteMapError):
    """A single method could not be turned into a route."""

    def __init__(self, class_name: str, method_name: str, message: str):
        self.class_name = class_name
        self.method_name = method_name
        super().__init__(f"{class_name}.{method_name}: {message}")


class MultipleVerbsError(RouteError):
    """A method carries more than one HTTP verb annotation."""

    def __init__(self, class_name: str, method_name: str, verbs: list[str]):
        self.verbs = verbs
        super().__init__(class_name, method_name, f"multiple HTTP verbs ({', '.join(verbs)})")


class MultiplePathsError(RouteError):
    """A method carries more than one path annotation."""

    def __init__(self, class_name: str, method_name: str):
        super().__init__(class_name, method_name, "multiple path annotations")


class UnresolvedPathError(RouteError):
    """A class or method path references a constant that cannot be resolved."""

    def __init__(self, class_name: str, method_name: str, cause: ConstantError):
        self.cause = cause
        super().__init__(class_name, method_name, str(cause))


class UnsupportedExpressionError(RouteMapError):
    """A path expression uses syntax outside literals, '+' and constants."""

    def __init__(self, node_type: str, text: str):
        self.node_type = node_type
        self.text = text
        super().__init__(f"Unsupported path expression ({node_type}): {text}")
