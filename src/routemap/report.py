"""Presentation of analysis results as a rich table or JSON."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from routemap.engine import AnalysisResult
from routemap.models import RouteEntry
from routemap.resolver.composer import normalize_path


def _path_for(entry: RouteEntry, normalize: bool) -> str:
    return normalize_path(entry.full_path) if normalize else entry.full_path


def _duplicates(result: AnalysisResult, normalize: bool) -> list[RouteEntry]:
    if normalize:
        return result.routes.duplicates(key=lambda e: (e.verb, normalize_path(e.full_path)))
    return result.routes.duplicates()


def to_dict(result: AnalysisResult, normalize: bool = False) -> dict[str, Any]:
    """Convert an analysis result to plain data."""
    return {
        "routes": [e.to_dict(_path_for(e, normalize)) for e in result.routes.entries()],
        "duplicates": [e.to_dict(_path_for(e, normalize)) for e in _duplicates(result, normalize)],
        "errors": [
            {
                "type": type(err).__name__,
                "class": err.class_name,
                "method": err.method_name,
                "message": str(err),
            }
            for err in result.errors
        ],
    }


def to_json(result: AnalysisResult, normalize: bool = False) -> str:
    """Serialize an analysis result as indented JSON."""
    return json.dumps(to_dict(result, normalize), indent=2)


def build_table(result: AnalysisResult, normalize: bool = False) -> Table:
    """Build a rich table of routes, flagging duplicates."""
    duplicate_keys = {
        (e.verb, _path_for(e, normalize)) for e in _duplicates(result, normalize)
    }

    table = Table(title="Routes")
    table.add_column("Method", style="bold cyan")
    table.add_column("Path")
    table.add_column("Handler", style="dim")
    table.add_column("Produces", style="dim")

    for entry in result.routes.entries():
        path = _path_for(entry, normalize)
        shown = escape(path)
        if (entry.verb, path) in duplicate_keys:
            shown = f"[yellow]{shown}[/yellow]"
        table.add_row(
            entry.verb.value,
            shown,
            f"{entry.source_class.rsplit('.', 1)[-1]}.{entry.source_method}",
            ", ".join(sorted(entry.produces)),
        )

    return table


def print_report(
    result: AnalysisResult,
    console: Console,
    normalize: bool = False,
    show_duplicates: bool = True,
) -> None:
    """Print routes, duplicates and errors to the console."""
    console.print(build_table(result, normalize))

    duplicates = _duplicates(result, normalize)
    if show_duplicates and duplicates:
        console.print(f"\n[yellow]{len(duplicates)} routes share a method and path:[/yellow]")
        for entry in duplicates:
            console.print(
                f"  {entry.verb.value} {_path_for(entry, normalize)} "
                f"({entry.source_class}.{entry.source_method})"
            )

    if result.errors:
        console.print(f"\n[red]{len(result.errors)} methods could not be resolved:[/red]")
        for err in result.errors:
            console.print(f"  [red]-[/red] {err}")
