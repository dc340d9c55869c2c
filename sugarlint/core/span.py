# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

Lines are 1-based; columns are 1-based and counted in UTF-8 bytes, matching
the byte offsets the rules report. `offset` keeps the raw byte offset so
renderers and tests can recover it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source location (best-effort file/line/column plus byte offset)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	offset: Optional[int] = None

	def render(self) -> str:
		"""`file:line:col`, with `?` for unknown parts."""
		file = self.file if self.file is not None else "<stdin>"
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
