# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
In-memory view of one Swift source file.

Rules see a file through this object: its text, a lazily parsed syntax tree
(None when the text cannot be parsed), byte offset to line/column mapping,
inline directive lookups and a `write` hook for corrected text.
"""

from __future__ import annotations

import bisect
from pathlib import Path
from typing import List, Optional, Tuple

from sugarlint.parser import try_parse
from sugarlint.parser.ast import SourceTree

from .directives import Directives
from .span import Span


class SourceFile:
	def __init__(self, contents: str, path: Path | str | None = None) -> None:
		self.path = Path(path) if path is not None else None
		self._set_contents(contents)

	@classmethod
	def from_path(cls, path: Path | str) -> "SourceFile":
		# Bytes in, bytes out: keep line endings exactly as they are on disk.
		path = Path(path)
		return cls(path.read_bytes().decode("utf-8"), path)

	def _set_contents(self, contents: str) -> None:
		self.contents = contents
		self._line_starts: Optional[List[int]] = None
		self._tree: Optional[SourceTree] = None
		self._parsed = False
		self._directives: Optional[Directives] = None

	@property
	def display_name(self) -> str:
		return str(self.path) if self.path is not None else "<stdin>"

	@property
	def syntax_tree(self) -> Optional[SourceTree]:
		"""The parsed tree, or None if the contents are not parseable. Parsed once."""
		if not self._parsed:
			self._tree = try_parse(self.contents)
			self._parsed = True
		return self._tree

	@property
	def directives(self) -> Directives:
		if self._directives is None:
			self._directives = Directives.from_source(self.contents)
		return self._directives

	def line_column(self, byte_offset: int) -> Tuple[int, int]:
		"""1-based line and 1-based byte column of `byte_offset`."""
		if self._line_starts is None:
			data = self.contents.encode("utf-8")
			starts = [0]
			pos = data.find(b"\n")
			while pos != -1:
				starts.append(pos + 1)
				pos = data.find(b"\n", pos + 1)
			self._line_starts = starts
		index = bisect.bisect_right(self._line_starts, byte_offset) - 1
		return index + 1, byte_offset - self._line_starts[index] + 1

	def span_at(self, byte_offset: int) -> Span:
		line, column = self.line_column(byte_offset)
		return Span(file=self.display_name, line=line, column=column, offset=byte_offset)

	def rule_enabled(self, rule_id: str, byte_offset: int) -> bool:
		line, _column = self.line_column(byte_offset)
		return self.directives.is_enabled(rule_id, line)

	def write(self, text: str) -> None:
		"""Replace the contents (persisting them when the file has a path)."""
		if text == self.contents:
			return
		if self.path is not None:
			self.path.write_bytes(text.encode("utf-8"))
		self._set_contents(text)
