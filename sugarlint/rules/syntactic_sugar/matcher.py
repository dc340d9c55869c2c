"""
Decide whether a single type node is a rewritable long-form container.

`match_type` is total: any node shape it does not recognise yields None.
"""

from __future__ import annotations

from typing import AbstractSet, Optional

from sugarlint.parser.ast import (
	ArrayType,
	AttributedType,
	CompositionType,
	DictionaryType,
	FunctionType,
	GenericArgs,
	MemberType,
	OptionalType,
	SimpleType,
	SomeOrAnyType,
)

from .model import EditSpan, TargetKind, Violation

STANDARD_MODULE = "Swift"

# Inner types that need parentheses before a `?`/`!` suffix.
_WRAPPED_SHAPES = (FunctionType, CompositionType, SomeOrAnyType, AttributedType)


def build_violation(start: int, kind: TargetKind, clause: GenericArgs) -> Violation:
	"""
	Record a violation at `start` anchored on `clause`.

	Clauses whose arity does not fit the container (`Dictionary<K>`) are still
	reported, but carry no edit.
	"""
	expected = 2 if kind is TargetKind.DICTIONARY else 1
	if len(clause.args) != expected:
		return Violation(position=start, kind=kind)
	separator = clause.commas[0] if kind is TargetKind.DICTIONARY else None
	wrap = kind.is_optional and isinstance(clause.args[0], _WRAPPED_SHAPES)
	edit = EditSpan(
		start=start,
		open_bracket=clause.open,
		close_bracket=clause.close,
		separator=separator,
		wrap=wrap,
	)
	return Violation(position=start, kind=kind, edit=edit)


def first_inner_violation(clause: GenericArgs, shadowed: AbstractSet[str] = frozenset()) -> Optional[Violation]:
	for arg in clause.args:
		violation = match_type(arg, shadowed)
		if violation is not None:
			return violation
	return None


def match_type(node, shadowed: AbstractSet[str] = frozenset()) -> Optional[Violation]:
	"""
	Return the violation for the type at `node`, or None.

	- `T?`, `T!`, `[T]` and `[K: V]` are seen through, so a later pass finds
	  what an earlier rewrite of the enclosing container left behind.
	- `Name<...>` is a violation when `Name` is a target (and not a name the
	  file declares itself); otherwise the first violation among its generic
	  arguments is returned.
	- `Swift.Name<...>` is a violation when `Name` is a target.
	"""
	if isinstance(node, OptionalType):
		return match_type(node.wrapped, shadowed)

	if isinstance(node, ArrayType):
		return match_type(node.element, shadowed)

	if isinstance(node, DictionaryType):
		return match_type(node.key, shadowed) or match_type(node.value, shadowed)

	if isinstance(node, SimpleType):
		if node.generic_args is None:
			return None
		kind = TargetKind.from_name(node.name)
		if kind is not None and node.name not in shadowed:
			return build_violation(node.loc.start, kind, node.generic_args)
		return first_inner_violation(node.generic_args, shadowed)

	if isinstance(node, MemberType):
		base = node.base
		if not (isinstance(base, SimpleType) and base.name == STANDARD_MODULE and base.generic_args is None):
			return None
		kind = TargetKind.from_name(node.name)
		if kind is None or node.generic_args is None:
			return None
		return build_violation(node.loc.start, kind, node.generic_args)

	return None
