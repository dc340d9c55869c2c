"""
Syntax tree for the Swift subset understood by sugarlint.

Every node carries a `Located` with the 1-based line/column of its first
character and the half-open UTF-8 byte range it covers in the source. Byte
offsets (not character offsets) are what the rules report and edit, so they
stay correct for sources containing non-ASCII identifiers or strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
    line: int
    column: int
    start: int
    end: int


class Node:
    """Base class for every syntax node; the visitor walks dataclass fields of these."""

    loc: Located


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass
class GenericArgs(Node):
    """A `<T, U>` clause. `open`/`close` are the byte offsets of the brackets."""

    loc: Located
    args: List["TypeNode"]
    commas: List[int] = field(default_factory=list)

    @property
    def open(self) -> int:
        return self.loc.start

    @property
    def close(self) -> int:
        return self.loc.end - 1


@dataclass
class SimpleType(Node):
    loc: Located
    name: str
    generic_args: Optional[GenericArgs] = None


@dataclass
class MemberType(Node):
    loc: Located
    base: "TypeNode"
    name: str
    generic_args: Optional[GenericArgs] = None


@dataclass
class OptionalType(Node):
    loc: Located
    wrapped: "TypeNode"
    implicit: bool = False


@dataclass
class ArrayType(Node):
    loc: Located
    element: "TypeNode"


@dataclass
class DictionaryType(Node):
    loc: Located
    key: "TypeNode"
    value: "TypeNode"


@dataclass
class TupleTypeElement(Node):
    loc: Located
    type: "TypeNode"
    label: Optional[str] = None


@dataclass
class TupleType(Node):
    loc: Located
    elements: List[TupleTypeElement] = field(default_factory=list)


@dataclass
class FunctionType(Node):
    loc: Located
    params: TupleType
    result: "TypeNode"
    throws: bool = False


@dataclass
class AttributedType(Node):
    """`inout T`, `@escaping () -> Void` and friends."""

    loc: Located
    attributes: List[str]
    base: "TypeNode"


@dataclass
class CompositionType(Node):
    loc: Located
    members: List["TypeNode"]


@dataclass
class SomeOrAnyType(Node):
    loc: Located
    keyword: str
    base: "TypeNode"


TypeNode = Union[
    SimpleType,
    MemberType,
    OptionalType,
    ArrayType,
    DictionaryType,
    TupleType,
    FunctionType,
    AttributedType,
    CompositionType,
    SomeOrAnyType,
]


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class Expr(Node):
    pass


@dataclass
class NameExpr(Expr):
    loc: Located
    name: str


@dataclass
class Literal(Expr):
    loc: Located
    text: str


@dataclass
class PoundExpr(Expr):
    loc: Located
    name: str


@dataclass
class ImplicitMember(Expr):
    loc: Located
    name: str


@dataclass
class MemberAccess(Expr):
    loc: Located
    base: Expr
    name: str


@dataclass
class Argument(Node):
    loc: Located
    value: Expr
    label: Optional[str] = None


@dataclass
class Call(Expr):
    loc: Located
    callee: Expr
    args: List[Argument] = field(default_factory=list)


@dataclass
class Subscript(Expr):
    loc: Located
    base: Expr
    args: List[Argument] = field(default_factory=list)


@dataclass
class OptionalChain(Expr):
    loc: Located
    base: Expr


@dataclass
class ForceUnwrap(Expr):
    loc: Located
    base: Expr


@dataclass
class Specialize(Expr):
    """An expression followed by explicit generic arguments, e.g. `Array<Int>`."""

    loc: Located
    base: Expr
    generic_args: GenericArgs


@dataclass
class TupleExpr(Expr):
    loc: Located
    elements: List[Argument] = field(default_factory=list)


@dataclass
class ArrayLiteral(Expr):
    loc: Located
    elements: List[Expr] = field(default_factory=list)


@dataclass
class DictEntry(Node):
    loc: Located
    key: Expr
    value: Expr


@dataclass
class DictLiteral(Expr):
    loc: Located
    entries: List[DictEntry] = field(default_factory=list)


@dataclass
class Capture(Node):
    loc: Located
    specifier: str
    name: str
    value: Optional[Expr] = None


@dataclass
class ClosureSignature(Node):
    loc: Located
    captures: List[Capture] = field(default_factory=list)
    params: List[Expr] = field(default_factory=list)
    return_clause: Optional["ReturnClause"] = None


@dataclass
class Closure(Expr):
    loc: Located
    signature: Optional[ClosureSignature]
    statements: List["Stmt"] = field(default_factory=list)


@dataclass
class Binary(Expr):
    loc: Located
    op: str
    left: Expr
    right: Expr


@dataclass
class Prefix(Expr):
    loc: Located
    op: str
    operand: Expr


@dataclass
class Ternary(Expr):
    loc: Located
    condition: Expr
    then_expr: Expr
    else_expr: Expr


@dataclass
class Cast(Expr):
    """`expr as T`, `as?`, `as!` and `is`."""

    loc: Located
    op: str
    expr: Expr
    type: TypeNode


@dataclass
class TryExpr(Expr):
    loc: Located
    kind: str
    expr: Expr


@dataclass
class AwaitExpr(Expr):
    loc: Located
    expr: Expr


@dataclass
class BindingPattern(Expr):
    loc: Located
    pattern: Expr


@dataclass
class IsPattern(Expr):
    loc: Located
    type: TypeNode


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class Stmt(Node):
    pass


@dataclass
class TypeAnnotation(Node):
    loc: Located
    type: TypeNode


@dataclass
class ReturnClause(Node):
    loc: Located
    type: TypeNode


@dataclass
class TypeInitializer(Node):
    """The `= T` of a typealias or associatedtype."""

    loc: Located
    value: TypeNode


@dataclass
class GenericParam(Node):
    loc: Located
    name: str
    constraint: Optional[TypeNode] = None


@dataclass
class Requirement(Node):
    loc: Located
    left: TypeNode
    relation: str
    right: TypeNode


@dataclass
class Param(Node):
    loc: Located
    label: str
    name: Optional[str]
    type: TypeNode
    variadic: bool = False
    default: Optional[Expr] = None


@dataclass
class Block(Node):
    loc: Located
    statements: List[Stmt] = field(default_factory=list)


@dataclass
class ImportDecl(Stmt):
    loc: Located
    path: List[str]


@dataclass
class Binding(Node):
    loc: Located
    names: List[str]
    annotation: Optional[TypeAnnotation] = None
    initializer: Optional[Expr] = None
    accessors: Optional[Block] = None


@dataclass
class VarDecl(Stmt):
    loc: Located
    modifiers: List[str]
    bindings: List[Binding]


@dataclass
class FuncDecl(Stmt):
    loc: Located
    name: str
    modifiers: List[str]
    generic_params: List[GenericParam]
    params: List[Param]
    return_clause: Optional[ReturnClause] = None
    requirements: List[Requirement] = field(default_factory=list)
    body: Optional[Block] = None


@dataclass
class InitDecl(Stmt):
    loc: Located
    modifiers: List[str]
    generic_params: List[GenericParam]
    params: List[Param]
    requirements: List[Requirement] = field(default_factory=list)
    body: Optional[Block] = None
    failable: bool = False


@dataclass
class DeinitDecl(Stmt):
    loc: Located
    body: Block


@dataclass
class SubscriptDecl(Stmt):
    loc: Located
    modifiers: List[str]
    generic_params: List[GenericParam]
    params: List[Param]
    return_clause: ReturnClause
    requirements: List[Requirement] = field(default_factory=list)
    body: Optional[Block] = None


@dataclass
class TypeAliasDecl(Stmt):
    loc: Located
    name: str
    generic_params: List[GenericParam]
    initializer: TypeInitializer


@dataclass
class AssociatedTypeDecl(Stmt):
    loc: Located
    name: str
    inheritance: List[TypeNode] = field(default_factory=list)
    initializer: Optional[TypeInitializer] = None
    requirements: List[Requirement] = field(default_factory=list)


@dataclass
class NominalDecl(Stmt):
    """struct, class, enum or protocol declaration."""

    loc: Located
    kind: str
    name: str
    generic_params: List[GenericParam]
    inheritance: List[TypeNode]
    requirements: List[Requirement]
    body: Block


@dataclass
class ExtensionDecl(Stmt):
    loc: Located
    extended: TypeNode
    inheritance: List[TypeNode]
    requirements: List[Requirement]
    body: Block


@dataclass
class EnumCase(Node):
    loc: Located
    name: str
    associated: Optional[TupleType] = None
    raw_value: Optional[Expr] = None


@dataclass
class EnumCaseDecl(Stmt):
    loc: Located
    cases: List[EnumCase]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass
class OptionalBinding(Node):
    loc: Located
    name: str
    annotation: Optional[TypeAnnotation] = None
    initializer: Optional[Expr] = None


@dataclass
class CaseCondition(Node):
    loc: Located
    pattern: Expr
    initializer: Expr


@dataclass
class AvailabilityCondition(Node):
    """`#available(iOS 13, *)`; `platforms` keeps each spec as written."""

    loc: Located
    platforms: List[str]
    negated: bool = False


Condition = Union[Expr, OptionalBinding, CaseCondition, AvailabilityCondition]


@dataclass
class IfStmt(Stmt):
    loc: Located
    conditions: List[Condition]
    body: Block
    else_branch: Optional[Union[Block, "IfStmt"]] = None


@dataclass
class GuardStmt(Stmt):
    loc: Located
    conditions: List[Condition]
    body: Block


@dataclass
class WhileStmt(Stmt):
    loc: Located
    conditions: List[Condition]
    body: Block


@dataclass
class RepeatStmt(Stmt):
    loc: Located
    body: Block
    condition: Expr


@dataclass
class ForStmt(Stmt):
    loc: Located
    names: List[str]
    sequence: Expr
    guard: Optional[Expr]
    body: Block


@dataclass
class CaseItem(Node):
    loc: Located
    pattern: Expr
    guard: Optional[Expr] = None


@dataclass
class SwitchCase(Node):
    """One `case ...:` or `default:` arm; `items` is empty for `default`."""

    loc: Located
    items: List[CaseItem]
    statements: List[Stmt] = field(default_factory=list)


@dataclass
class SwitchStmt(Stmt):
    loc: Located
    subject: Expr
    cases: List[SwitchCase] = field(default_factory=list)


@dataclass
class CatchClause(Node):
    loc: Located
    pattern: Optional[Expr]
    guard: Optional[Expr]
    body: Block


@dataclass
class DoStmt(Stmt):
    loc: Located
    body: Block
    catches: List[CatchClause] = field(default_factory=list)


@dataclass
class DeferStmt(Stmt):
    loc: Located
    body: Block


@dataclass
class ReturnStmt(Stmt):
    loc: Located
    value: Optional[Expr] = None


@dataclass
class ThrowStmt(Stmt):
    loc: Located
    value: Expr


@dataclass
class JumpStmt(Stmt):
    """break / continue / fallthrough."""

    loc: Located
    keyword: str
    label: Optional[str] = None


@dataclass
class ExprStmt(Stmt):
    loc: Located
    expr: Expr
    op: Optional[str] = None
    value: Optional[Expr] = None


@dataclass
class SourceTree(Node):
    loc: Located
    statements: List[Stmt] = field(default_factory=list)
