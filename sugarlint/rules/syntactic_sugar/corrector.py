"""
Rewrite long-form containers into their shorthand.

Each violation's `EditSpan` replaces the bytes from `start` through the
closing `>` with the shorthand spelling built from the original argument
text. Edits are applied from the end of the file backwards so the anchors of
the edits still pending stay valid.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .model import EditSpan, TargetKind, Violation

logger = logging.getLogger(__name__)

EnabledCheck = Callable[[int], bool]


class EditAnchorError(ValueError):
	"""An edit's anchors do not point at the brackets/separator they describe."""


def _check_anchors(data: bytearray, edit: EditSpan) -> None:
	if not 0 <= edit.start < edit.open_bracket < edit.close_bracket < len(data):
		raise EditAnchorError(f"edit range {edit.start}..{edit.close_bracket} is outside the text")
	if data[edit.open_bracket] != ord("<"):
		raise EditAnchorError(f"no '<' at byte {edit.open_bracket}")
	if data[edit.close_bracket] != ord(">"):
		raise EditAnchorError(f"no '>' at byte {edit.close_bracket}")
	if edit.separator is not None:
		if not edit.open_bracket < edit.separator < edit.close_bracket or data[edit.separator] != ord(","):
			raise EditAnchorError(f"no ',' at byte {edit.separator}")


def shorthand(data: bytes, kind: TargetKind, edit: EditSpan) -> bytes:
	"""Build the shorthand spelling for one edit from the original argument bytes."""
	if kind is TargetKind.DICTIONARY:
		if edit.separator is None:
			raise EditAnchorError("dictionary edit without a separator")
		key = data[edit.open_bracket + 1 : edit.separator].strip()
		value = data[edit.separator + 1 : edit.close_bracket].strip()
		return b"[" + key + b": " + value + b"]"
	inner = data[edit.open_bracket + 1 : edit.close_bracket].strip()
	if kind is TargetKind.ARRAY:
		return b"[" + inner + b"]"
	suffix = b"?" if kind is TargetKind.OPTIONAL else b"!"
	if edit.wrap:
		return b"(" + inner + b")" + suffix
	return inner + suffix


def apply_corrections(
	source: str,
	violations: Iterable[Violation],
	is_enabled: Optional[EnabledCheck] = None,
) -> Tuple[str, List[Violation]]:
	"""
	Apply the edits of `violations` to `source`.

	Returns the rewritten text and the violations that were actually applied,
	in source order. Violations without an edit, those `is_enabled` rejects,
	those overlapping an edit already applied and those whose anchors do not
	match the text are dropped individually.
	"""
	data = bytearray(source.encode("utf-8"))
	applied: List[Violation] = []
	limit = len(data)

	pending = [v for v in violations if v.edit is not None]
	for violation in sorted(pending, key=lambda v: v.edit.start, reverse=True):
		edit = violation.edit
		if is_enabled is not None and not is_enabled(violation.position):
			continue
		if edit.close_bracket >= limit:
			logger.debug("dropping overlapping %s edit at byte %d", violation.kind.value, edit.start)
			continue
		try:
			_check_anchors(data, edit)
			replacement = shorthand(data, violation.kind, edit)
		except EditAnchorError as err:
			logger.debug("dropping %s edit at byte %d: %s", violation.kind.value, edit.start, err)
			continue
		data[edit.start : edit.close_bracket + 1] = replacement
		limit = edit.start
		applied.append(violation)

	applied.reverse()
	return data.decode("utf-8"), applied
