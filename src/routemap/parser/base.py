"""Base parser interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from routemap.models import FileDeclarations, Language, SourceFile


class BaseParser(ABC):
    """Abstract base class for language-specific front-ends."""

    @property
    @abstractmethod
    def language(self) -> Language:
        """The language this parser handles."""
        pass

    @abstractmethod
    def parse(self, file: SourceFile) -> FileDeclarations:
        """Parse a source file and extract routing declarations."""
        pass

    def can_parse(self, file: SourceFile) -> bool:
        """Check if this parser can handle the given file."""
        return file.language == self.language

    def read_file_content(self, path: Path) -> str:
        """Read the content of a file."""
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
