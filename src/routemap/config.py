"""Configuration management for routemap."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from routemap.resolver.constants import DEFAULT_MAX_DEPTH

OUTPUT_FORMATS = ("table", "json")


@dataclass
class CrawlerConfig:
    """Configuration for the file crawler."""

    respect_gitignore: bool = True
    custom_ignore_patterns: list[str] = field(default_factory=list)
    include_extensions: list[str] = field(default_factory=lambda: [".java"])
    max_file_size_kb: int = 500
    include_tests: bool = False


@dataclass
class AnalysisConfig:
    """Configuration for the resolution engine."""

    max_workers: int = 4
    max_constant_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class OutputConfig:
    """Configuration for presenting results."""

    format: str = "table"
    normalize: bool = False
    show_duplicates: bool = True
    fail_on_errors: bool = False

    def __post_init__(self):
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format {self.format!r}, expected one of {OUTPUT_FORMATS}"
            )


@dataclass
class RoutemapConfig:
    """Main configuration for routemap."""

    source_dir: Path = field(default_factory=lambda: Path("."))
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoutemapConfig":
        """Create configuration from a dictionary."""
        crawler_data = data.get("crawler", {})
        analysis_data = data.get("analysis", {})
        output_data = data.get("output", {})

        crawler_config = CrawlerConfig(
            respect_gitignore=crawler_data.get("respect_gitignore", True),
            custom_ignore_patterns=crawler_data.get("custom_ignore_patterns", []),
            include_extensions=crawler_data.get("include_extensions", [".java"]),
            max_file_size_kb=crawler_data.get("max_file_size_kb", 500),
            include_tests=crawler_data.get("include_tests", False),
        )

        analysis_config = AnalysisConfig(
            max_workers=analysis_data.get("max_workers", 4),
            max_constant_depth=analysis_data.get("max_constant_depth", DEFAULT_MAX_DEPTH),
        )

        output_config = OutputConfig(
            format=output_data.get("format", "table"),
            normalize=output_data.get("normalize", False),
            show_duplicates=output_data.get("show_duplicates", True),
            fail_on_errors=output_data.get("fail_on_errors", False),
        )

        return cls(
            source_dir=Path(data.get("source_dir", ".")),
            crawler=crawler_config,
            analysis=analysis_config,
            output=output_config,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "RoutemapConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "RoutemapConfig":
        """Load configuration from file or return defaults."""
        if config_path and config_path.exists():
            return cls.from_yaml(config_path)

        default_paths = [
            Path("routemap.yaml"),
            Path("routemap.yml"),
            Path(".routemap.yaml"),
            Path(".routemap.yml"),
        ]

        for path in default_paths:
            if path.exists():
                return cls.from_yaml(path)

        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "source_dir": str(self.source_dir),
            "crawler": {
                "respect_gitignore": self.crawler.respect_gitignore,
                "custom_ignore_patterns": self.crawler.custom_ignore_patterns,
                "include_extensions": self.crawler.include_extensions,
                "max_file_size_kb": self.crawler.max_file_size_kb,
                "include_tests": self.crawler.include_tests,
            },
            "analysis": {
                "max_workers": self.analysis.max_workers,
                "max_constant_depth": self.analysis.max_constant_depth,
            },
            "output": {
                "format": self.output.format,
                "normalize": self.output.normalize,
                "show_duplicates": self.output.show_duplicates,
                "fail_on_errors": self.output.fail_on_errors,
            },
        }

    def save(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
