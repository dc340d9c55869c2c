# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from sugarlint.parser import parse_source
from sugarlint.rules.syntactic_sugar import TargetKind, detect, message_for

MARKER = "↓"


def _split_markers(example: str) -> tuple[str, list[int]]:
	"""Strip `↓` markers, returning the source and the byte offsets they pointed at."""
	pieces = example.split(MARKER)
	positions = []
	offset = 0
	for piece in pieces[:-1]:
		offset += len(piece.encode("utf-8"))
		positions.append(offset)
	return "".join(pieces), positions


NON_TRIGGERING = [
	"let x: [Int]",
	"let x: [Int: String]",
	"let x: Int?",
	"func x(a: [Int], b: Int) -> [Int: Any]",
	"let x: Int!",
	"extension Array {\n  func x() { }\n}",
	"extension Dictionary {\n  func x() { }\n}",
	"let x: CustomArray<String>",
	"var currentIndex: Array<OnboardingPage>.Index?",
	"func x(a: [Int], b: Int) -> Array<Int>.Index",
	"unsafeBitCast(nonOptionalT, to: Optional<T>.self)",
	"unsafeBitCast(someType, to: Swift.Array<T>.self)",
	"let a = Swift.Optional<String?>.none",
	"let x = Array<String>.array(of: object)",
	"let x = Swift.Array<String>.array(of: object)",
	"type is Optional<String>.Type",
	"let x: Foo.Optional<String>",
	'let s = "let x: Array<String>" // Array<Int>',
	"if count < limit, other > 2 { }",
]

TRIGGERING = [
	"let x: ↓Array<String>",
	"let x: ↓Dictionary<Int, String>",
	"let x: ↓Optional<Int>",
	"let x: ↓ImplicitlyUnwrappedOptional<Int>",
	"let x: ↓Swift.Array<String>",
	"func x(a: ↓Array<Int>, b: Int) -> [Int: Any]",
	"func x(a: ↓Swift.Array<Int>, b: Int) -> [Int: Any]",
	"func x(a: [Int], b: Int) -> ↓Dictionary<Int, String>",
	"let x = y as? ↓Array<[String: Any]>",
	"let x = Box<↓Array<T>>()",
	"func x() -> Box<↓Array<T>>",
	"func x() -> ↓Dictionary<String, Any>?",
	"typealias Document = ↓Dictionary<String, T?>",
	"func x(_ y: inout ↓Array<T>)",
	"let x = ↓Array<Int>()",
	"let x: [↓Optional<Int>]",
	"let café: ↓Array<Int>",
	"let a: ↓Array<Int>\nlet b: Box<Int, ↓Optional<String>>",
	"let y = foo { (a: ↓Array<Int>) in a }",
	"let y = xs.map { (a: Int) -> ↓Optional<Int> in nil }",
	"run(queue) { let x: ↓Optional<Int> = nil }",
	"func f(_ c: @escaping @Sendable () -> Void, a: inout ↓Array<Int>)",
	"if #available(iOS 13, *) { let x: ↓Array<Int> = [] }",
]


@pytest.mark.parametrize("example", NON_TRIGGERING)
def test_non_triggering_examples(example: str) -> None:
	assert detect(parse_source(example)) == []


@pytest.mark.parametrize("example", TRIGGERING)
def test_triggering_examples(example: str) -> None:
	source, expected = _split_markers(example)
	assert [v.position for v in detect(parse_source(source))] == expected


def test_kinds_follow_the_container_name() -> None:
	source = "let a: Optional<Int>\nlet b: ImplicitlyUnwrappedOptional<Int>\nlet c: Array<Int>\nlet d: Dictionary<Int, Int>\n"
	assert [v.kind for v in detect(parse_source(source))] == [
		TargetKind.OPTIONAL,
		TargetKind.IMPLICITLY_UNWRAPPED_OPTIONAL,
		TargetKind.ARRAY,
		TargetKind.DICTIONARY,
	]


def test_outer_violation_hides_nested_ones() -> None:
	violations = detect(parse_source("let x: Dictionary<String, Dictionary<Int, Int>>"))
	assert [(v.position, v.kind) for v in violations] == [(7, TargetKind.DICTIONARY)]


def test_same_position_is_reported_once() -> None:
	# Reached both through the parameter and through its `inout` wrapper.
	violations = detect(parse_source("func x(_ y: inout Array<T>)"))
	assert len(violations) == 1


def test_names_declared_in_the_file_are_not_the_standard_containers() -> None:
	source = "struct Array<Element> {}\nlet x: Array<Int>\nlet y: Swift.Array<Int>\n"
	violations = detect(parse_source(source))
	assert [v.position for v in violations] == [source.index("Swift")]


def test_generic_parameter_named_like_a_container() -> None:
	source = "func f<Optional>(x: Optional<Int>) -> Dictionary<Int, Int>"
	violations = detect(parse_source(source))
	assert [v.kind for v in violations] == [TargetKind.DICTIONARY]


def test_declared_names_only_hide_uses_in_their_own_scope() -> None:
	source = (
		"struct Outer {\n"
		"  struct Array<T> {}\n"
		"}\n"
		"let x: Array<Int> = []\n"
		"func f<Optional>(_ a: Optional) {}\n"
		"let y: Optional<Int> = nil\n"
	)
	violations = detect(parse_source(source))
	assert [v.position for v in violations] == [source.index("Array<Int>"), source.index("Optional<Int>")]


def test_nested_type_hides_the_name_inside_its_enclosing_body() -> None:
	source = "struct Outer {\n\tstruct Array<T> {}\n\tlet inner: Array<Int>\n}\nlet outer: Array<Int>\n"
	violations = detect(parse_source(source))
	assert [v.position for v in violations] == [source.rindex("Array<Int>")]


def test_generic_parameter_covers_the_whole_declaration() -> None:
	source = (
		"func wrap<Optional>(_ value: Optional) -> Box<Optional<Int>> {\n"
		"\tlet boxed: Optional<Int> = value\n"
		"}\n"
		"let plain: Optional<Int> = nil\n"
	)
	violations = detect(parse_source(source))
	assert [v.position for v in violations] == [source.rindex("Optional<Int>")]


def test_local_typealias_is_scoped_to_its_block() -> None:
	source = "func make() {\n\ttypealias Array = Box\n\tlet a: Array<Int>\n}\nlet b: Array<Int>\n"
	violations = detect(parse_source(source))
	assert [v.position for v in violations] == [source.rindex("Array<Int>")]


def test_optional_constructor_expression_has_no_edit() -> None:
	(violation,) = detect(parse_source("let x = Optional<Int>(5)"))
	assert violation.kind is TargetKind.OPTIONAL
	assert violation.position == 8
	assert violation.edit is None


def test_dictionary_edit_anchors_use_the_top_level_comma() -> None:
	source = "let x: Dictionary<Box<Int, Int>, String>"
	(violation,) = detect(parse_source(source))
	edit = violation.edit
	assert source[edit.open_bracket] == "<"
	assert source[edit.close_bracket] == ">"
	assert edit.close_bracket == len(source) - 1
	assert edit.separator == source.index(", String")


def test_wrong_arity_is_reported_without_an_edit() -> None:
	(violation,) = detect(parse_source("let x: Dictionary<Int>"))
	assert violation.kind is TargetKind.DICTIONARY
	assert violation.edit is None


def test_function_inner_type_is_wrapped_for_optional_suffix() -> None:
	(violation,) = detect(parse_source("let x: Optional<() -> Void>"))
	assert violation.edit.wrap


def test_detect_on_corrected_text_finds_nothing() -> None:
	assert detect(parse_source("let x: [String: [Int: Int]]\nlet y: Int?\nlet z: Int!\n")) == []


@pytest.mark.parametrize(
	("kind", "message"),
	[
		(TargetKind.OPTIONAL, "Shorthand syntactic sugar should be used, i.e. Int? instead of Optional<Int>."),
		(
			TargetKind.IMPLICITLY_UNWRAPPED_OPTIONAL,
			"Shorthand syntactic sugar should be used, i.e. Int! instead of ImplicitlyUnwrappedOptional<Int>.",
		),
		(TargetKind.ARRAY, "Shorthand syntactic sugar should be used, i.e. [Int] instead of Array<Int>."),
		(
			TargetKind.DICTIONARY,
			"Shorthand syntactic sugar should be used, i.e. [String: Int] instead of Dictionary<String, Int>.",
		),
	],
)
def test_message_per_kind(kind: TargetKind, message: str) -> None:
	assert message_for(kind) == message
