"""Front-ends that turn source files into routing declarations."""

from routemap.parser.base import BaseParser
from routemap.parser.java_parser import JavaParser

__all__ = ["BaseParser", "JavaParser"]
