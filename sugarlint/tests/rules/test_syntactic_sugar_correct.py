# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from sugarlint.parser import parse_source
from sugarlint.rules.syntactic_sugar import EditSpan, TargetKind, Violation, correct
from sugarlint.rules.syntactic_sugar.corrector import apply_corrections


def _correct_once(source: str) -> str:
	text, _applied = correct(parse_source(source), source)
	return text


def _correct_fully(source: str, max_passes: int = 10) -> str:
	for _ in range(max_passes):
		text, applied = correct(parse_source(source), source)
		if not applied:
			return text
		source = text
	raise AssertionError("correction did not reach a fixed point")


@pytest.mark.parametrize(
	("before", "after"),
	[
		("let x: Array<String>", "let x: [String]"),
		("let x: Array< String >", "let x: [String]"),
		("let x: Dictionary<Int, String>", "let x: [Int: String]"),
		("let x: Dictionary<Int , String>", "let x: [Int: String]"),
		("let x: Optional<Int>", "let x: Int?"),
		("let x: Optional< Int >", "let x: Int?"),
		("let x: ImplicitlyUnwrappedOptional<Int>", "let x: Int!"),
		("let x: ImplicitlyUnwrappedOptional< Int >", "let x: Int!"),
		("func x(a: Array<Int>, b: Int) -> [Int: Any]", "func x(a: [Int], b: Int) -> [Int: Any]"),
		("func x(a: [Int], b: Int) -> Dictionary<Int, String>", "func x(a: [Int], b: Int) -> [Int: String]"),
		("let x: Swift.Optional<String>", "let x: String?"),
		("let x: Swift.Array<String>", "let x: [String]"),
		("func x(_ y: inout Array<T>)", "func x(_ y: inout [T])"),
		("let x = y as? Array<[String: Any]>", "let x = y as? [[String: Any]]"),
		("func x() -> Dictionary<String, Any>?", "func x() -> [String: Any]?"),
		("typealias Document = Dictionary<String, T?>", "typealias Document = [String: T?]"),
		("let x = Array<Int>()", "let x = [Int]()"),
		("let x: Optional<() -> Void>", "let x: (() -> Void)?"),
		("let x: Optional<A & B>", "let x: (A & B)?"),
		("let café: Array<Int> = []", "let café: [Int] = []"),
	],
)
def test_single_pass_corrections(before: str, after: str) -> None:
	assert _correct_once(before) == after


def test_nested_value_needs_a_second_pass() -> None:
	source = "let x:Dictionary<String, Dictionary<Int, Int>>"
	assert _correct_once(source) == "let x:[String: Dictionary<Int, Int>]"
	assert _correct_fully(source) == "let x:[String: [Int: Int]]"


def test_nested_key_reaches_fixed_point() -> None:
	assert _correct_fully("let x:Dictionary<Dictionary<Int, Int>, String>") == "let x:[[Int: Int]: String]"


def test_user_generic_arguments_are_kept() -> None:
	source = "enum Box<T> {}\nlet x:Dictionary<Box<String>, Box<Bool>>"
	assert _correct_fully(source) == "enum Box<T> {}\nlet x:[Box<String>: Box<Bool>]"


def test_excluded_expressions_are_left_alone() -> None:
	source = "let x = Array<String>.array(of: object)\nlet y = Optional<Int>(5)\n"
	text, applied = correct(parse_source(source), source)
	assert text == source
	assert applied == []


def test_two_independent_edits_in_one_pass() -> None:
	source = "let a: Array<Int>\nlet b: Dictionary<String, Int>\nlet c: Optional<Bool>\n"
	text, applied = correct(parse_source(source), source)
	assert text == "let a: [Int]\nlet b: [String: Int]\nlet c: Bool?\n"
	assert [v.position for v in applied] == [7, 25, 56]


def test_edit_order_does_not_depend_on_input_order() -> None:
	source = "let a: Array<Int>\nlet b: Array<Bool>\n"
	first = Violation(position=7, kind=TargetKind.ARRAY, edit=EditSpan(start=7, open_bracket=12, close_bracket=16))
	second = Violation(position=25, kind=TargetKind.ARRAY, edit=EditSpan(start=25, open_bracket=30, close_bracket=35))
	expected = "let a: [Int]\nlet b: [Bool]\n"
	assert apply_corrections(source, [first, second])[0] == expected
	assert apply_corrections(source, [second, first])[0] == expected


def test_zero_violations_is_identity() -> None:
	source = "let x: [Int]\nlet y: Int?\n"
	assert correct(parse_source(source), source) == (source, [])


def test_disabled_positions_are_skipped() -> None:
	source = "let a: Array<Int>\nlet b: Array<Bool>\n"
	text, applied = correct(parse_source(source), source, lambda position: position != 7)
	assert text == "let a: Array<Int>\nlet b: [Bool]\n"
	assert [v.position for v in applied] == [25]


def test_stale_anchor_drops_only_that_edit() -> None:
	source = "let a: Array<Int>\nlet b: Array<Bool>\n"
	stale = Violation(position=7, kind=TargetKind.ARRAY, edit=EditSpan(start=7, open_bracket=11, close_bracket=16))
	good = Violation(position=25, kind=TargetKind.ARRAY, edit=EditSpan(start=25, open_bracket=30, close_bracket=35))
	text, applied = apply_corrections(source, [stale, good])
	assert text == "let a: Array<Int>\nlet b: [Bool]\n"
	assert applied == [good]


def test_overlapping_edit_is_dropped() -> None:
	source = "let x: Array<Array<Int>>"
	outer = Violation(position=7, kind=TargetKind.ARRAY, edit=EditSpan(start=7, open_bracket=12, close_bracket=23))
	inner = Violation(position=13, kind=TargetKind.ARRAY, edit=EditSpan(start=13, open_bracket=18, close_bracket=22))
	text, applied = apply_corrections(source, [outer, inner])
	assert text == "let x: Array<[Int]>"
	assert applied == [inner]


def test_unparsable_source_is_returned_unchanged() -> None:
	text, applied = correct(None, "let = Array<Int>")
	assert text == "let = Array<Int>"
	assert applied == []
