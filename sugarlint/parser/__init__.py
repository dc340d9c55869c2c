"""
Swift-subset parser used by sugarlint.

`parse_source` turns source text into `ast.SourceTree` nodes carrying UTF-8
byte offsets; `try_parse` is the non-raising variant the rules use.
"""

from __future__ import annotations

from typing import Optional

from . import ast
from .parser import SwiftParseError, iter_comments, parse_source
from .visitor import SyntaxVisitor, iter_children


def try_parse(source: str) -> Optional[ast.SourceTree]:
	"""Parse `source`, returning None instead of raising when it is not parseable."""
	try:
		return parse_source(source)
	except SwiftParseError:
		return None


__all__ = [
	"SwiftParseError",
	"SyntaxVisitor",
	"ast",
	"iter_children",
	"iter_comments",
	"parse_source",
	"try_parse",
]
