"""
Violation records produced by the scanner and consumed by the corrector.

All positions are UTF-8 byte offsets into the text the tree was parsed from;
they are never recomputed after edits, which is why the corrector applies
edits from the end of the file backwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TargetKind(Enum):
	"""The four standard containers that have a shorthand spelling."""

	OPTIONAL = "Optional"
	IMPLICITLY_UNWRAPPED_OPTIONAL = "ImplicitlyUnwrappedOptional"
	ARRAY = "Array"
	DICTIONARY = "Dictionary"

	@classmethod
	def from_name(cls, name: str) -> Optional["TargetKind"]:
		try:
			return cls(name)
		except ValueError:
			return None

	@property
	def is_optional(self) -> bool:
		return self in (TargetKind.OPTIONAL, TargetKind.IMPLICITLY_UNWRAPPED_OPTIONAL)

	@property
	def long_example(self) -> str:
		return _EXAMPLES[self][0]

	@property
	def short_example(self) -> str:
		return _EXAMPLES[self][1]


_EXAMPLES = {
	TargetKind.OPTIONAL: ("Optional<Int>", "Int?"),
	TargetKind.IMPLICITLY_UNWRAPPED_OPTIONAL: ("ImplicitlyUnwrappedOptional<Int>", "Int!"),
	TargetKind.ARRAY: ("Array<Int>", "[Int]"),
	TargetKind.DICTIONARY: ("Dictionary<String, Int>", "[String: Int]"),
}


@dataclass(frozen=True)
class EditSpan:
	"""
	Anchors of one structural rewrite.

	`start` is the first byte of the long-form spelling (the `Swift` qualifier
	when present), `open_bracket`/`close_bracket` are the `<` and `>` of its
	generic clause and `separator` is the top-level `,` between a dictionary's
	key and value. `wrap` asks for the inner type to be parenthesized before
	the `?`/`!` suffix (function and composition types).
	"""

	start: int
	open_bracket: int
	close_bracket: int
	separator: Optional[int] = None
	wrap: bool = False


@dataclass(frozen=True)
class Violation:
	position: int
	kind: TargetKind
	edit: Optional[EditSpan] = None
