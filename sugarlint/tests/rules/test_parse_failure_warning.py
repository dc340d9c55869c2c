# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging

from sugarlint.core import SourceFile
from sugarlint.parser import try_parse
from sugarlint.rules.syntactic_sugar import SyntacticSugarRule, correct, detect

UNPARSABLE = "let x: Array<Int> = (\n"


def _warnings(caplog) -> list[str]:
	return [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]


def test_unparsable_source_has_no_tree() -> None:
	assert try_parse(UNPARSABLE) is None


def test_warning_is_logged_once_per_process(caplog) -> None:
	caplog.set_level(logging.WARNING, logger="sugarlint")
	assert detect(None) == []
	assert detect(None) == []
	assert correct(None, UNPARSABLE) == (UNPARSABLE, [])
	assert _warnings(caplog) == [
		"The syntactic_sugar rule is disabled because the Swift syntax tree could not be parsed"
	]


def test_unparsable_file_is_skipped_not_fatal(caplog) -> None:
	caplog.set_level(logging.WARNING, logger="sugarlint")
	rule = SyntacticSugarRule()
	broken = SourceFile(UNPARSABLE, "Broken.swift")
	assert rule.validate(broken) == []
	assert rule.correct(broken) == []
	assert broken.contents == UNPARSABLE

	# Other files keep being checked after the failure.
	fine = SourceFile("let x: Array<Int>\n", "Fine.swift")
	assert len(rule.validate(fine)) == 1
	assert len(_warnings(caplog)) == 1
