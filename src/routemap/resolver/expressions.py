"""Path expression evaluation."""

from routemap.models import Literal, PathExpr
from routemap.resolver.constants import ConstantTable


def resolve(expr: PathExpr, table: ConstantTable) -> str:
    """Concatenate the resolved terms of an expression, left to right.

    No separator is inserted between terms. Lookup failures propagate.
    """
    parts = []
    for term in expr.terms:
        if isinstance(term, Literal):
            parts.append(term.value)
        else:
            parts.append(table.lookup(term, expr.scope))
    return "".join(parts)
