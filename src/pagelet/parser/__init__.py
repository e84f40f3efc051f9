"""pagelet parser: template source to immutable syntax tree."""

from pagelet.parser.core import Parser, parse

__all__ = ["Parser", "parse"]
