# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

from sugarlint.core import SourceFile, Span


def test_line_column_counts_utf8_bytes() -> None:
	file = SourceFile("let é = 1\nlet x = 2\n")
	assert file.line_column(0) == (1, 1)
	# `=` follows a two-byte character.
	assert file.line_column(7) == (1, 8)
	assert file.line_column(11) == (2, 1)
	assert file.line_column(15) == (2, 5)


def test_span_at_uses_display_name() -> None:
	assert SourceFile("let x = 1\n").span_at(4) == Span(file="<stdin>", line=1, column=5, offset=4)
	assert SourceFile("let x = 1\n", "A.swift").span_at(4).render() == "A.swift:1:5"


def test_syntax_tree_is_parsed_lazily_and_none_when_unparsable() -> None:
	good = SourceFile("let x: Int\n")
	assert good.syntax_tree is good.syntax_tree
	assert SourceFile("let = \n").syntax_tree is None


def test_write_refreshes_contents_and_tree(tmp_path: Path) -> None:
	path = tmp_path / "A.swift"
	path.write_text("let x: Array<Int>\n", encoding="utf-8")
	file = SourceFile.from_path(path)
	old_tree = file.syntax_tree
	file.write("// sugarlint:disable all\nlet x: [Int]\n")
	assert path.read_text(encoding="utf-8") == "// sugarlint:disable all\nlet x: [Int]\n"
	assert file.syntax_tree is not old_tree
	assert not file.rule_enabled("syntactic_sugar", 30)
	assert file.line_column(30) == (2, 6)


def test_span_render_defaults() -> None:
	assert Span().render() == "<stdin>:?:?"
