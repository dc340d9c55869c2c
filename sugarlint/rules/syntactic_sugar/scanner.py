"""
Walk a syntax tree and collect long-form container violations.

Visited positions: type annotations, parameter types, return clauses, the
target of `as`/`as?`/`as!`, typealias/associatedtype initializers, the base
of attributed types (`inout Array<T>`) and generic-specialized expressions
(`Array<String>()`).

A target name declared in the file (`struct Array<T>`, `func f<Optional>`)
hides the standard type only inside the scope that declares it: the
enclosing file, type body or code block for nominal types and typealiases,
the declaration itself for generic parameters.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional

from sugarlint.parser import SyntaxVisitor
from sugarlint.parser.ast import (
	AssociatedTypeDecl,
	AttributedType,
	Block,
	Cast,
	Closure,
	Expr,
	FuncDecl,
	InitDecl,
	MemberAccess,
	NameExpr,
	Node,
	NominalDecl,
	Param,
	ReturnClause,
	SourceTree,
	Specialize,
	SubscriptDecl,
	SwitchCase,
	TypeAliasDecl,
	TypeAnnotation,
	TypeInitializer,
)

from .matcher import STANDARD_MODULE, build_violation, first_inner_violation, match_type
from .model import TargetKind, Violation

_CODE_BLOCKS = (SourceTree, Block, Closure, SwitchCase)
_GENERIC_DECLS = (NominalDecl, FuncDecl, InitDecl, SubscriptDecl, TypeAliasDecl)
_TYPE_DECLS = (NominalDecl, TypeAliasDecl, AssociatedTypeDecl)


def _joined_name(expr: Expr) -> Optional[str]:
	"""`Swift.Array` for a dotted name expression, None for anything else."""
	if isinstance(expr, NameExpr):
		return expr.name
	if isinstance(expr, MemberAccess):
		base = _joined_name(expr.base)
		if base is None:
			return None
		return f"{base}.{expr.name}"
	return None


def _declared_names(node: Node) -> FrozenSet[str]:
	"""Target names that `node` opens a scope for."""
	names: List[str] = []
	if isinstance(node, _CODE_BLOCKS):
		names.extend(stmt.name for stmt in node.statements if isinstance(stmt, _TYPE_DECLS))
	if isinstance(node, _GENERIC_DECLS):
		names.extend(param.name for param in node.generic_params)
	return frozenset(name for name in names if TargetKind.from_name(name) is not None)


class SugarScanner(SyntaxVisitor):
	def __init__(self) -> None:
		super().__init__()
		self._scopes: List[FrozenSet[str]] = []
		self.violations: List[Violation] = []

	@property
	def _shadowed(self) -> FrozenSet[str]:
		return frozenset().union(*self._scopes)

	def walk(self, node: Node) -> None:
		names = _declared_names(node)
		if not names:
			super().walk(node)
			return
		self._scopes.append(names)
		try:
			super().walk(node)
		finally:
			self._scopes.pop()

	def _check(self, type_node) -> None:
		violation = match_type(type_node, self._shadowed)
		if violation is not None:
			self.violations.append(violation)

	def visit_TypeAnnotation(self, node: TypeAnnotation) -> None:
		self._check(node.type)

	def visit_Param(self, node: Param) -> None:
		self._check(node.type)

	def visit_ReturnClause(self, node: ReturnClause) -> None:
		self._check(node.type)

	def visit_Cast(self, node: Cast) -> None:
		if node.op != "is":
			self._check(node.type)

	def visit_TypeInitializer(self, node: TypeInitializer) -> None:
		self._check(node.value)

	def visit_AttributedType(self, node: AttributedType) -> None:
		self._check(node.base)

	def visit_Specialize(self, node: Specialize) -> None:
		name = _joined_name(node.base)
		qualified = False
		if name is not None and name.startswith(STANDARD_MODULE + "."):
			name = name[len(STANDARD_MODULE) + 1 :]
			qualified = True
		kind = TargetKind.from_name(name) if name is not None else None
		if kind is not None and (qualified or name not in self._shadowed):
			# `Optional<T>.none`, `Array<T>.self`, `Array<T>.Index`: metatype or
			# static member access, not a construction.
			if isinstance(self.parent, MemberAccess):
				return
			violation = build_violation(node.loc.start, kind, node.generic_args)
			if kind.is_optional:
				violation = Violation(position=violation.position, kind=kind)
			self.violations.append(violation)
			return

		violation = first_inner_violation(node.generic_args, self._shadowed)
		if violation is not None:
			self.violations.append(violation)


def scan(tree: SourceTree) -> List[Violation]:
	"""Return the violations in `tree`, ordered by position."""
	scanner = SugarScanner()
	scanner.walk(tree)
	unique = {(v.position, v.kind): v for v in scanner.violations}
	return sorted(unique.values(), key=lambda v: v.position)
