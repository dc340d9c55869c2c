"""
`syntactic_sugar`: prefer `[T]`, `[K: V]`, `T?` and `T!` over `Array<T>`,
`Dictionary<K, V>`, `Optional<T>` and `ImplicitlyUnwrappedOptional<T>`.

`detect` and `correct` work on an already parsed tree; `SyntacticSugarRule`
wires them to a `SourceFile` (directives, diagnostics, writing fixes back).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sugarlint.core.diagnostics import Correction, Diagnostic
from sugarlint.core.source_file import SourceFile
from sugarlint.parser.ast import SourceTree

from .corrector import EnabledCheck, apply_corrections
from .model import EditSpan, TargetKind, Violation
from .scanner import scan

logger = logging.getLogger(__name__)

IDENTIFIER = "syntactic_sugar"
DESCRIPTION = "Shorthand syntactic sugar should be used, i.e. [Int] instead of Array<Int>."

# Process-wide: the parse failure warning is emitted at most once.
_warned_parse_failure = False


def _warn_parse_failure_once() -> None:
	global _warned_parse_failure
	if _warned_parse_failure:
		return
	_warned_parse_failure = True
	logger.warning("The %s rule is disabled because the Swift syntax tree could not be parsed", IDENTIFIER)


def reset_parse_warning() -> None:
	"""Forget that the parse failure warning was emitted (test isolation only)."""
	global _warned_parse_failure
	_warned_parse_failure = False


def message_for(kind: TargetKind) -> str:
	return f"Shorthand syntactic sugar should be used, i.e. {kind.short_example} instead of {kind.long_example}."


def detect(tree: Optional[SourceTree]) -> List[Violation]:
	"""Violations in `tree`, ordered by position; empty (with a one-time warning) when there is no tree."""
	if tree is None:
		_warn_parse_failure_once()
		return []
	return scan(tree)


def correct(
	tree: Optional[SourceTree],
	source_text: str,
	is_enabled: Optional[EnabledCheck] = None,
) -> Tuple[str, List[Violation]]:
	"""
	Rewrite every correctable violation in `source_text` (the text `tree` was parsed from).

	`is_enabled(position)` is consulted right before each edit; rejected edits
	are skipped. Nested long forms are rewritten one level per call.
	"""
	if tree is None:
		_warn_parse_failure_once()
		return source_text, []
	return apply_corrections(source_text, scan(tree), is_enabled)


class SyntacticSugarRule:
	identifier = IDENTIFIER
	description = DESCRIPTION

	def __init__(self, severity: str = "warning") -> None:
		self.severity = severity

	def validate(self, file: SourceFile) -> List[Diagnostic]:
		diagnostics: List[Diagnostic] = []
		for violation in detect(file.syntax_tree):
			if not file.rule_enabled(self.identifier, violation.position):
				continue
			diagnostics.append(
				Diagnostic(
					message=message_for(violation.kind),
					code=self.identifier,
					severity=self.severity,
					span=file.span_at(violation.position),
				)
			)
		logger.debug("%s: %d %s violation(s)", file.display_name, len(diagnostics), self.identifier)
		return diagnostics

	def correct(self, file: SourceFile) -> List[Correction]:
		new_text, applied = correct(
			file.syntax_tree,
			file.contents,
			lambda position: file.rule_enabled(self.identifier, position),
		)
		# Spans refer to the text before the rewrite.
		corrections = [
			Correction(
				rule_id=self.identifier,
				span=file.span_at(violation.position),
				description=message_for(violation.kind),
			)
			for violation in applied
		]
		if corrections:
			file.write(new_text)
		logger.debug("%s: applied %d %s correction(s)", file.display_name, len(corrections), self.identifier)
		return corrections


__all__ = [
	"DESCRIPTION",
	"EditSpan",
	"IDENTIFIER",
	"SyntacticSugarRule",
	"TargetKind",
	"Violation",
	"correct",
	"detect",
	"message_for",
	"reset_parse_warning",
]
