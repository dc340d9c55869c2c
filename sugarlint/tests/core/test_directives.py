# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from sugarlint.core.directives import Directive, Directives, parse_directives


def test_parse_directives_reads_action_scope_and_rules() -> None:
	directives = parse_directives(
		[
			(1, "// sugarlint:disable syntactic_sugar other_rule"),
			(4, "/* sugarlint:enable:next all */"),
			(7, "// sugarlint:frobnicate syntactic_sugar"),
			(8, "// sugarlint:disable:sometimes syntactic_sugar"),
		]
	)
	assert directives == [
		Directive(action="disable", rules=("syntactic_sugar", "other_rule"), line=1),
		Directive(action="enable", rules=("all",), line=4, scope="next"),
	]


def test_regions_hold_until_the_opposite_directive() -> None:
	source = (
		"let a = 1\n"
		"// sugarlint:disable syntactic_sugar\n"
		"let b = 2\n"
		"// sugarlint:enable syntactic_sugar\n"
		"let c = 3\n"
	)
	directives = Directives.from_source(source)
	assert [directives.is_enabled("syntactic_sugar", line) for line in range(1, 6)] == [True, False, False, True, True]
	assert directives.is_enabled("other_rule", 3)


def test_single_line_scopes() -> None:
	source = (
		"let a = 1 // sugarlint:disable:this syntactic_sugar\n"
		"let b = 2\n"
		"// sugarlint:disable:previous all\n"
	)
	directives = Directives.from_source(source)
	assert not directives.is_enabled("syntactic_sugar", 1)
	assert not directives.is_enabled("syntactic_sugar", 2)
	assert directives.is_enabled("syntactic_sugar", 3)


def test_single_line_enable_inside_disabled_region() -> None:
	source = (
		"// sugarlint:disable all\n"
		"// sugarlint:enable:next syntactic_sugar\n"
		"let a = 1\n"
		"let b = 2\n"
	)
	directives = Directives.from_source(source)
	assert directives.is_enabled("syntactic_sugar", 3)
	assert not directives.is_enabled("syntactic_sugar", 4)


def test_directive_text_inside_a_string_is_ignored() -> None:
	directives = Directives.from_source('let s = "// sugarlint:disable all"\n')
	assert not directives
	assert directives.is_enabled("syntactic_sugar", 1)


def test_unlexable_source_has_no_directives() -> None:
	assert not Directives.from_source("let s = \"unterminated\n")
