"""File crawler for locating resource sources in a repository."""

import os
from pathlib import Path

import pathspec

from routemap.config import RoutemapConfig
from routemap.models import Language, SourceFile

ALWAYS_IGNORE = [
    ".git",
    ".git/**",
    ".idea",
    ".idea/**",
    ".vscode",
    ".vscode/**",
    "target",
    "target/**",
    "build",
    "build/**",
    "out",
    "out/**",
    ".gradle",
    ".gradle/**",
    "node_modules",
    "node_modules/**",
]

TEST_DIRS = ["/src/test/", "/test/", "/tests/"]
TEST_SUFFIXES = ("Test.java", "Tests.java", "IT.java")


class FileCrawler:
    """Crawls a repository and collects source files to analyze."""

    def __init__(self, config: RoutemapConfig):
        self.config = config
        self.source_dir = config.source_dir.resolve()
        self._gitignore_spec: pathspec.PathSpec | None = None
        self._custom_spec: pathspec.PathSpec | None = None
        self._load_ignore_patterns()

    def _load_ignore_patterns(self) -> None:
        """Load .gitignore and custom ignore patterns."""
        patterns: list[str] = []

        if self.config.crawler.respect_gitignore:
            gitignore_path = self.source_dir / ".gitignore"
            if gitignore_path.exists():
                with open(gitignore_path) as f:
                    patterns.extend(
                        line.strip() for line in f if line.strip() and not line.startswith("#")
                    )

        patterns.extend(ALWAYS_IGNORE)
        self._gitignore_spec = pathspec.PathSpec.from_lines("gitignore", patterns)

        if self.config.crawler.custom_ignore_patterns:
            self._custom_spec = pathspec.PathSpec.from_lines(
                "gitignore", self.config.crawler.custom_ignore_patterns
            )

    def _should_ignore(self, path: Path) -> bool:
        """Check if a path should be ignored based on patterns."""
        try:
            relative_str = str(path.relative_to(self.source_dir)).replace("\\", "/")
        except ValueError:
            return True

        if self._gitignore_spec and self._gitignore_spec.match_file(relative_str):
            return True

        if self._custom_spec and self._custom_spec.match_file(relative_str):
            return True

        return False

    def _is_relevant_extension(self, path: Path) -> bool:
        return path.suffix.lower() in self.config.crawler.include_extensions

    def _is_test_source(self, relative_path: Path) -> bool:
        if relative_path.name.endswith(TEST_SUFFIXES):
            return True
        path_str = "/" + str(relative_path.parent).lower().replace("\\", "/") + "/"
        return any(pattern in path_str for pattern in TEST_DIRS)

    def crawl(self) -> list[SourceFile]:
        """Crawl the source directory and return relevant files in path order."""
        files: list[SourceFile] = []
        max_size = self.config.crawler.max_file_size_kb * 1024

        for root, dirs, filenames in os.walk(self.source_dir):
            root_path = Path(root)

            dirs[:] = [d for d in dirs if not self._should_ignore(root_path / d)]

            for filename in filenames:
                file_path = root_path / filename

                if self._should_ignore(file_path) or not self._is_relevant_extension(file_path):
                    continue

                relative_path = file_path.relative_to(self.source_dir)
                if not self.config.crawler.include_tests and self._is_test_source(relative_path):
                    continue

                try:
                    size_bytes = file_path.stat().st_size
                except OSError:
                    continue
                if size_bytes > max_size:
                    continue

                files.append(
                    SourceFile(
                        path=file_path,
                        relative_path=relative_path,
                        language=Language.from_extension(file_path.suffix),
                        size_bytes=size_bytes,
                    )
                )

        files.sort(key=lambda f: str(f.relative_path))
        return files
