"""
Depth-first walker over `sugarlint.parser.ast` nodes.

Subclasses define `visit_<NodeClass>(node)` hooks; `self.parent` is the node
that contains the one currently being visited (None at the root).
"""

from __future__ import annotations

from dataclasses import fields
from typing import Iterator, List, Optional

from .ast import Node


def iter_children(node: Node) -> Iterator[Node]:
	"""Yield the direct child nodes of `node` in field (source) order."""
	for f in fields(node):
		value = getattr(node, f.name)
		if isinstance(value, Node):
			yield value
		elif isinstance(value, list):
			for item in value:
				if isinstance(item, Node):
					yield item


class SyntaxVisitor:
	def __init__(self) -> None:
		self._parents: List[Node] = []

	@property
	def parent(self) -> Optional[Node]:
		return self._parents[-1] if self._parents else None

	def walk(self, node: Node) -> None:
		hook = getattr(self, f"visit_{type(node).__name__}", None)
		if hook is not None:
			hook(node)
		self._parents.append(node)
		try:
			for child in iter_children(node):
				self.walk(child)
		finally:
			self._parents.pop()
