"""Command-line interface for routemap."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from routemap import __version__
from routemap.config import OUTPUT_FORMATS, RoutemapConfig
from routemap.errors import ConstantError
from routemap.pipeline import Pipeline
from routemap.report import print_report, to_json

console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """Routemap - Discover the HTTP routes declared by JAX-RS resources."""
    pass


@main.command()
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: table)",
)
@click.option(
    "--normalize",
    is_flag=True,
    default=False,
    help="Collapse repeated slashes and force a leading slash when printing",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit with an error if any method could not be resolved",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
def scan(
    source_dir: Path,
    config: Path | None,
    output_format: str | None,
    normalize: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """Scan a codebase and list its HTTP routes.

    SOURCE_DIR is the path to the source code repository.
    """
    setup_logging(verbose)

    try:
        cfg = RoutemapConfig.load(config)
        cfg.source_dir = source_dir.resolve()
        if output_format:
            cfg.output.format = output_format
        if normalize:
            cfg.output.normalize = True
        if strict:
            cfg.output.fail_on_errors = True

        result = Pipeline(cfg, console).run()

    except ConstantError as e:
        console.print(f"[bold red]Constant resolution failed:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)

    if cfg.output.format == "json":
        click.echo(to_json(result, normalize=cfg.output.normalize))
    else:
        print_report(
            result,
            Console(),
            normalize=cfg.output.normalize,
            show_duplicates=cfg.output.show_duplicates,
        )

    if result.errors and cfg.output.fail_on_errors:
        sys.exit(1)


@main.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("routemap.yaml"),
    help="Output path for configuration file",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite existing configuration file",
)
def init(output: Path, force: bool) -> None:
    """Initialize a new routemap configuration file."""
    if output.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {output}[/yellow]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    RoutemapConfig().save(output)

    console.print(f"[green]OK[/green] Created configuration file: {output}")
    console.print("\nEdit this file to customize your settings, then run:")
    console.print("  [cyan]routemap scan <source_dir>[/cyan]")


if __name__ == "__main__":
    main()
