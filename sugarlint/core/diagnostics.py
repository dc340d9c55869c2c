# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structures shared by rules and the CLI.

A rule reports `Diagnostic`s from a lint pass and `Correction`s from a fix
pass; both carry a `Span` into the file they came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span

SEVERITIES = ("warning", "error")


@dataclass
class Diagnostic:
	"""Represents a lint diagnostic (warning/error)."""

	message: str
	code: str | None = None
	severity: str = "warning"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


@dataclass(frozen=True)
class Correction:
	"""One rewrite applied by a fix pass."""

	rule_id: str
	span: Span
	description: str


__all__ = ["Correction", "Diagnostic", "SEVERITIES"]
