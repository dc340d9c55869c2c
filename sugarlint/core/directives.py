# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Inline rule enablement directives.

A comment of the form

	// sugarlint:disable syntactic_sugar
	// sugarlint:enable all
	// sugarlint:disable:next syntactic_sugar
	// sugarlint:disable:this syntactic_sugar
	// sugarlint:disable:previous syntactic_sugar

switches rules off or on. Without a modifier the change holds from the
directive's line to the end of the file (or the next opposite directive);
`next`, `this` and `previous` only affect a single line. `all` matches every
rule. Directives are read from comment tokens only, so the same text inside a
string literal has no effect.

Enablement is tracked per line: a directive placed at the end of a line also
affects code earlier on that line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from sugarlint.parser import SwiftParseError, iter_comments

logger = logging.getLogger(__name__)

ALL_RULES = "all"

_DIRECTIVE_RE = re.compile(
	r"\bsugarlint:(?P<action>[A-Za-z]+)(?::(?P<scope>[A-Za-z]+))?(?P<rules>(?:[ \t]+[A-Za-z_][\w-]*)+)"
)

_ACTIONS = ("enable", "disable")
_SCOPE_OFFSETS = {"previous": -1, "this": 0, "next": 1}


@dataclass(frozen=True)
class Directive:
	action: str
	rules: Tuple[str, ...]
	line: int
	scope: str | None = None

	@property
	def enables(self) -> bool:
		return self.action == "enable"

	def matches(self, rule_id: str) -> bool:
		return ALL_RULES in self.rules or rule_id in self.rules


def parse_directives(comments: Iterable[Tuple[int, str]]) -> List[Directive]:
	"""Extract directives from `(line, comment_text)` pairs; unknown verbs are skipped."""
	directives: List[Directive] = []
	for line, text in comments:
		for m in _DIRECTIVE_RE.finditer(text):
			action = m.group("action")
			scope = m.group("scope")
			if action not in _ACTIONS or (scope is not None and scope not in _SCOPE_OFFSETS):
				logger.debug("ignoring unknown directive %r on line %d", m.group(0), line)
				continue
			rules = tuple(m.group("rules").split())
			directives.append(Directive(action=action, rules=rules, line=line, scope=scope))
	return directives


class Directives:
	"""Answers whether a rule is enabled on a given line."""

	def __init__(self, directives: Iterable[Directive] = ()) -> None:
		self._regions: List[Directive] = []
		self._single_lines: dict[int, List[Directive]] = {}
		for directive in directives:
			if directive.scope is None:
				self._regions.append(directive)
			else:
				target = directive.line + _SCOPE_OFFSETS[directive.scope]
				self._single_lines.setdefault(target, []).append(directive)
		self._regions.sort(key=lambda d: d.line)

	@classmethod
	def from_source(cls, source: str) -> "Directives":
		try:
			comments = [(tok.line, tok.value) for tok in iter_comments(source)]
		except SwiftParseError:
			# Unlexable sources have no syntax tree either, so no rule runs.
			return cls()
		return cls(parse_directives(comments))

	def __bool__(self) -> bool:
		return bool(self._regions or self._single_lines)

	def is_enabled(self, rule_id: str, line: int) -> bool:
		enabled = True
		for directive in self._regions:
			if directive.line > line:
				break
			if directive.matches(rule_id):
				enabled = directive.enables
		for directive in self._single_lines.get(line, ()):
			if directive.matches(rule_id):
				enabled = directive.enables
		return enabled


__all__ = ["ALL_RULES", "Directive", "Directives", "parse_directives"]
