"""Main pipeline orchestrator for routemap."""

import logging

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from routemap.config import RoutemapConfig
from routemap.crawler import FileCrawler
from routemap.engine import AnalysisResult, analyze
from routemap.models import ClassDecl, ConstantDecl, FileDeclarations, SourceFile
from routemap.parser.java_parser import JavaParser

logger = logging.getLogger(__name__)


class Pipeline:
    """Crawls a source tree, extracts declarations and resolves routes."""

    def __init__(self, config: RoutemapConfig, console: Console | None = None):
        self.config = config
        self.console = console or Console(stderr=True)
        self.crawler = FileCrawler(config)
        self.parser = JavaParser()
        self.declarations: list[FileDeclarations] = []

    def run(self) -> AnalysisResult:
        """Run the complete pipeline.

        Constant table errors propagate to the caller.
        """
        files = self._crawl_files()
        if not files:
            self.console.print("[yellow]No source files found.[/yellow]")
            return AnalysisResult()

        self._parse_files(files)

        classes: list[ClassDecl] = []
        constants: list[ConstantDecl] = []
        for decls in self.declarations:
            classes.extend(decls.classes)
            constants.extend(decls.constants)

        with self.console.status("[bold green]Resolving routes..."):
            result = analyze(
                classes,
                constants,
                max_workers=self.config.analysis.max_workers,
                max_constant_depth=self.config.analysis.max_constant_depth,
            )

        self.console.print(
            f"[green]OK[/green] Resolved {len(result.routes)} routes from "
            f"{len(classes)} resource classes and {len(result.constants)} constants"
        )
        return result

    def _crawl_files(self) -> list[SourceFile]:
        """Crawl the source directory for files."""
        with self.console.status("[bold green]Scanning repository..."):
            files = self.crawler.crawl()
        self.console.print(f"[green]OK[/green] Found {len(files)} source files")
        return files

    def _parse_files(self, files: list[SourceFile]) -> None:
        """Parse files and collect their declarations."""
        parseable = [f for f in files if self.parser.can_parse(f)]

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
        ) as progress:
            task = progress.add_task("Parsing files...", total=len(parseable))

            for file in parseable:
                try:
                    self.declarations.append(self.parser.parse(file))
                except OSError as e:
                    logger.error(f"Failed to read {file.path}: {e}")
                progress.advance(task)
