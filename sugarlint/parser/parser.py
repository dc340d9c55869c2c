from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from .ast import (
	Argument,
	ArrayLiteral,
	ArrayType,
	AssociatedTypeDecl,
	AttributedType,
	AvailabilityCondition,
	AwaitExpr,
	Binary,
	Binding,
	BindingPattern,
	Block,
	Call,
	Capture,
	CaseCondition,
	CaseItem,
	Cast,
	CatchClause,
	Closure,
	ClosureSignature,
	CompositionType,
	DeferStmt,
	DeinitDecl,
	DictEntry,
	DictLiteral,
	DictionaryType,
	DoStmt,
	EnumCase,
	EnumCaseDecl,
	Expr,
	ExprStmt,
	ExtensionDecl,
	ForceUnwrap,
	ForStmt,
	FuncDecl,
	FunctionType,
	GenericArgs,
	GenericParam,
	GuardStmt,
	IfStmt,
	ImplicitMember,
	ImportDecl,
	InitDecl,
	IsPattern,
	JumpStmt,
	Literal,
	Located,
	MemberAccess,
	MemberType,
	NameExpr,
	Node,
	NominalDecl,
	OptionalBinding,
	OptionalChain,
	OptionalType,
	Param,
	PoundExpr,
	Prefix,
	RepeatStmt,
	Requirement,
	ReturnClause,
	ReturnStmt,
	SimpleType,
	SomeOrAnyType,
	SourceTree,
	Specialize,
	Subscript,
	SubscriptDecl,
	SwitchCase,
	SwitchStmt,
	Ternary,
	ThrowStmt,
	TryExpr,
	TupleExpr,
	TupleType,
	TupleTypeElement,
	TypeAliasDecl,
	TypeAnnotation,
	TypeInitializer,
	VarDecl,
	WhileStmt,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class SwiftParseError(ValueError):
	"""
	Raised when source text falls outside the Swift subset the grammar accepts.

	`line`/`column` point at the offending token when the lexer or parser could
	locate it.
	"""

	def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
		super().__init__(message)
		self.line = line
		self.column = column


def _spanning_token(type_: str, value: str, first: Token, last: Token) -> Token:
	return Token(
		type_,
		value,
		first.start_pos,
		first.line,
		first.column,
		last.end_line,
		last.end_column,
		last.end_pos,
	)


def _split_shift(token: Token) -> tuple[Token, Token]:
	"""Split a `>>` token into two adjacent `>` tokens."""
	first = Token("GT", ">", token.start_pos, token.line, token.column, token.line, token.column + 1, token.start_pos + 1)
	second = Token(
		"GT",
		">",
		token.start_pos + 1,
		token.line,
		token.column + 1,
		token.end_line,
		token.end_column,
		token.end_pos,
	)
	return first, second


class ModifierTagger:
	"""
	Retag contextual declaration modifiers as `MODIFIER`.

	Words like `private`, `static` or `weak` are ordinary identifiers in Swift
	unless they precede a declaration, so a run of them is only retagged when
	the token following the run starts a declaration. Modifier arguments such
	as `private(set)` or `unowned(unsafe)` are folded into a single token.
	"""

	MODIFIERS = {
		"public",
		"private",
		"fileprivate",
		"internal",
		"open",
		"package",
		"static",
		"final",
		"override",
		"mutating",
		"nonmutating",
		"lazy",
		"weak",
		"unowned",
		"required",
		"convenience",
		"indirect",
		"nonisolated",
		"dynamic",
		"optional",
		"prefix",
		"postfix",
		"infix",
	}

	ARGUMENT_OWNERS = {"public", "private", "fileprivate", "internal", "open", "package", "unowned", "nonisolated"}

	DECL_STARTERS = {
		"FUNC",
		"LET",
		"VAR",
		"CLASS",
		"STRUCT",
		"ENUM",
		"PROTOCOL",
		"EXTENSION",
		"TYPEALIAS",
		"INIT",
		"DEINIT",
		"SUBSCRIPT",
		"CASE",
		"ASSOCIATEDTYPE",
		"IMPORT",
	}

	def process(self, stream):
		it = iter(stream)
		pushback: list[Token] = []
		run: list[list[Token]] = []

		def _next() -> Token | None:
			if pushback:
				return pushback.pop()
			return next(it, None)

		while True:
			token = _next()
			if token is None:
				break

			if token.type == "NAME" and token.value in self.MODIFIERS:
				run.append([token])
				continue

			if run and token.type == "_LPAR" and len(run[-1]) == 1 and run[-1][0].value in self.ARGUMENT_OWNERS:
				arg = _next()
				close = _next() if arg is not None else None
				if arg is not None and close is not None and arg.type == "NAME" and close.type == "_RPAR":
					run[-1].extend((token, arg, close))
					continue
				# Not an argument group; replay what was read.
				for tok in (close, arg):
					if tok is not None:
						pushback.append(tok)

			if run:
				if token.type in self.DECL_STARTERS:
					for group in run:
						value = "".join(tok.value for tok in group)
						yield _spanning_token("MODIFIER", value, group[0], group[-1])
				else:
					for group in run:
						yield from group
				run = []

			yield token

		for group in run:
			yield from group


class GenericArgInserter:
	"""
	Disambiguate `<...>` as generic brackets.

	`<` directly after a name is buffered together with the following
	type-shaped tokens. When the matching `>` is followed by a token that can
	only continue a type or an expression operand (`(`, `.`, `?`, newline, ...)
	the brackets are rewritten to `TYPE_LT`/`TYPE_GT`; otherwise the buffered
	tokens are replayed unchanged and `<` stays a comparison operator.
	"""

	OPENERS = {"NAME", "INIT", "SUBSCRIPT"}

	ALLOWED = {
		"NAME",
		"_DOT",
		"COMMA",
		"LT",
		"GT",
		"_LSQB",
		"_RSQB",
		"_COLON",
		"QMARK",
		"BANG",
		"_LPAR",
		"_RPAR",
		"_ARROW",
		"AMP",
		"ELLIPSIS",
		"THROWS",
		"RETHROWS",
		"ASYNC",
		"SOME",
		"ANY",
		"INOUT",
		"ATTRIBUTE",
		"NEWLINE",
	}

	COMMIT = {
		"_LPAR",
		"_RPAR",
		"_RSQB",
		"_LBRACE",
		"_RBRACE",
		"COMMA",
		"SEMI",
		"_COLON",
		"_DOT",
		"QMARK",
		"BANG",
		"_EQUAL",
		"_ARROW",
		"NEWLINE",
		"WHERE",
		"IN",
		"AMP",
		"ELLIPSIS",
		"EQEQ",
		"NOTEQ",
	}

	def process(self, stream):
		it = iter(stream)
		pushback: list[Token] = []
		prev_type: str | None = None

		def _next() -> Token | None:
			if pushback:
				return pushback.pop()
			return next(it, None)

		while True:
			token = _next()
			if token is None:
				break

			if token.type != "LT" or prev_type not in self.OPENERS:
				yield token
				prev_type = token.type
				continue

			group = [token]
			depth = 1
			follower: Token | None = None
			committed = False
			while True:
				nxt = _next()
				if nxt is None:
					break
				if nxt.type == "SHR":
					# `Box<Array<T>>` lexes the closing brackets as a shift.
					nxt, second = _split_shift(nxt)
					pushback.append(second)
				if nxt.type not in self.ALLOWED:
					follower = nxt
					break
				group.append(nxt)
				if nxt.type == "LT":
					depth += 1
				elif nxt.type == "GT":
					depth -= 1
					if depth == 0:
						follower = _next()
						committed = follower is None or follower.type in self.COMMIT
						break

			if committed:
				for tok in group:
					if tok.type == "LT":
						tok = Token.new_borrow_pos("TYPE_LT", tok.value, tok)
					elif tok.type == "GT":
						tok = Token.new_borrow_pos("TYPE_GT", tok.value, tok)
					yield tok
				prev_type = "TYPE_GT"
				if follower is not None:
					pushback.append(follower)
				continue

			# Plain comparison; replay everything after `<`.
			if follower is not None:
				pushback.append(follower)
			for tok in reversed(group[1:]):
				pushback.append(tok)
			yield token
			prev_type = token.type


class PostfixTagger:
	"""
	Retag `?`/`!` attached to the preceding token as postfix operators.

	`Int?`, `value!` and `foo()?.bar` attach the operator without whitespace;
	a spaced `?` is the ternary operator and a leading `!` is logical not.
	"""

	ATTACHABLE = {
		"NAME",
		"_RPAR",
		"_RSQB",
		"TYPE_GT",
		"POSTFIX_QMARK",
		"POSTFIX_BANG",
		"STRING",
		"MLSTRING",
		"INT",
		"FLOAT",
		"POUND_IDENT",
		"INIT",
	}

	def process(self, stream):
		prev: Token | None = None
		for token in stream:
			if (
				token.type in ("QMARK", "BANG")
				and prev is not None
				and prev.type in self.ATTACHABLE
				and prev.end_pos == token.start_pos
			):
				kind = "POSTFIX_QMARK" if token.type == "QMARK" else "POSTFIX_BANG"
				token = Token.new_borrow_pos(kind, token.value, token)
			yield token
			prev = token


class TerminatorInserter:
	always_accept = ("NEWLINE", "SEMI")

	TERMINABLE = {
		"NAME",
		"INT",
		"FLOAT",
		"STRING",
		"MLSTRING",
		"POUND_IDENT",
		"_RPAR",
		"_RSQB",
		"_RBRACE",
		"TYPE_GT",
		"POSTFIX_QMARK",
		"POSTFIX_BANG",
		"RETURN",
		"BREAK",
		"CONTINUE",
		"FALLTHROUGH",
		"INIT",
		"DEFAULT",
		"ASYNC",
		"THROWS",
		"RETHROWS",
	}

	# Tokens that continue the previous line instead of starting a statement.
	CONTINUATIONS = {
		"_DOT",
		"_LBRACE",
		"ELSE",
		"CATCH",
		"WHERE",
		"ANDAND",
		"OROR",
		"NILCOAL",
		"EQEQ",
		"NOTEQ",
		"IDENT_EQ",
		"IDENT_NE",
		"LTE",
		"GTE",
		"_ARROW",
		"_COLON",
		"QMARK",
		"AS",
		"AS_OPT",
		"AS_FORCE",
		"IS",
		"PLUS",
		"MINUS",
		"STAR",
		"SLASH",
		"PERCENT",
		"PIPE",
		"CARET",
		"ASSIGN_OP",
		"_EQUAL",
		"HALF_OPEN",
	}

	CLOSERS = {"_RPAR": "_LPAR", "_RSQB": "_LSQB", "_RBRACE": "_LBRACE", "TYPE_GT": "TYPE_LT"}

	def process(self, stream):
		"""
		Insert `_TERM` tokens for statement boundaries.

		`;` always terminates. A newline terminates only when the previous token
		can end a statement, the innermost open delimiter is a brace (or there is
		none), and the next token does not continue the expression.
		"""
		stack: list[str] = []
		can_terminate = False
		pending_newline: Token | None = None

		for token in stream:
			ttype = token.type

			if ttype == "NEWLINE":
				pending_newline = token
				continue

			if ttype == "SEMI":
				pending_newline = None
				yield Token.new_borrow_pos("_TERM", token.value, token)
				can_terminate = False
				continue

			if pending_newline is not None:
				at_statement_level = not stack or stack[-1] == "_LBRACE"
				if can_terminate and at_statement_level and ttype not in self.CONTINUATIONS:
					yield Token.new_borrow_pos("_TERM", pending_newline.value, pending_newline)
				pending_newline = None

			yield token
			self._track(stack, ttype)
			can_terminate = ttype in self.TERMINABLE

	def _track(self, stack: list[str], ttype: str) -> None:
		if ttype in ("_LPAR", "_LSQB", "_LBRACE", "TYPE_LT"):
			stack.append(ttype)
		elif ttype in self.CLOSERS and stack and stack[-1] == self.CLOSERS[ttype]:
			stack.pop()


class _BraceFrame:
	__slots__ = ("depth", "header", "declaration")

	def __init__(self) -> None:
		self.depth = 0
		self.header = False
		self.declaration = False


class TrailingClosureTagger:
	"""
	Retag `{` as `_TRAILING_LBRACE` when it opens a trailing closure.

	A brace right after a name, `)` or `>` is a trailing closure unless it opens
	the body of a statement or declaration whose header is still open at the
	same nesting level (`if ready {`, `func f() -> Int {`), or the accessor
	block of a property that has no initializer (`var x: Int {`). Runs after
	terminator insertion so `_TERM` closes a header that never got a body.
	"""

	ATTACHABLE = {"NAME", "_RPAR", "TYPE_GT"}

	HEADERS = {
		"IF",
		"GUARD",
		"WHILE",
		"FOR",
		"SWITCH",
		"CATCH",
		"FUNC",
		"INIT",
		"DEINIT",
		"SUBSCRIPT",
		"STRUCT",
		"CLASS",
		"ENUM",
		"PROTOCOL",
		"EXTENSION",
	}

	def process(self, stream):
		frames = [_BraceFrame()]
		prev_type: str | None = None

		for token in stream:
			ttype = token.type
			frame = frames[-1]

			if ttype == "_LBRACE":
				if frame.depth == 0 and (frame.header or frame.declaration):
					frame.header = frame.declaration = False
				elif prev_type in self.ATTACHABLE:
					token = Token.new_borrow_pos("_TRAILING_LBRACE", token.value, token)
				frames.append(_BraceFrame())
			elif ttype == "_RBRACE":
				if len(frames) > 1:
					frames.pop()
			elif ttype in ("_LPAR", "_LSQB", "TYPE_LT"):
				frame.depth += 1
			elif ttype in ("_RPAR", "_RSQB", "TYPE_GT"):
				frame.depth = max(frame.depth - 1, 0)
			elif frame.depth == 0:
				if ttype == "_TERM":
					frame.header = frame.declaration = False
				elif ttype in self.HEADERS and prev_type != "_DOT":
					# `self.init(...)` is a call, not an initializer declaration.
					frame.header = True
				elif ttype in ("LET", "VAR") and prev_type != "CASE":
					frame.declaration = True
				elif ttype == "_EQUAL":
					frame.declaration = False

			yield token
			prev_type = ttype


class SwiftPostLex:
	"""Combined post-lexer: modifiers, generic brackets, postfix operators, terminators, then trailing closures."""

	# Newlines and semicolons are not grammar terminals; ask Lark to keep them
	# so terminator insertion can see them.
	always_accept = TerminatorInserter.always_accept

	def __init__(self) -> None:
		self._modifiers = ModifierTagger()
		self._generics = GenericArgInserter()
		self._postfix = PostfixTagger()
		self._terminators = TerminatorInserter()
		self._closures = TrailingClosureTagger()

	def process(self, stream):
		stream = self._generics.process(self._modifiers.process(stream))
		stream = self._terminators.process(self._postfix.process(stream))
		return self._closures.process(stream)


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=SwiftPostLex(),
)


def parse_source(source: str) -> SourceTree:
	"""Parse Swift source text into a `SourceTree`, raising `SwiftParseError` on failure."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise SwiftParseError(
			str(err),
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
		) from err
	return _TreeBuilder(source).build(tree)


def iter_comments(source: str) -> Iterator[Token]:
	"""
	Yield the `COMMENT` tokens of `source` in order.

	Comments are ignored by the parser, so they are recovered by re-lexing with
	ignored terminals kept.
	"""
	try:
		for token in _PARSER.lex(source, dont_ignore=True):
			if token.type == "COMMENT":
				yield token
	except UnexpectedInput as err:
		raise SwiftParseError(
			str(err),
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
		) from err


class _ByteOffsets:
	"""Map character offsets into UTF-8 byte offsets."""

	def __init__(self, text: str) -> None:
		self._table: list[int] | None = None
		if not text.isascii():
			table = [0]
			total = 0
			for ch in text:
				total += len(ch.encode("utf-8"))
				table.append(total)
			self._table = table

	def __call__(self, pos: int) -> int:
		if self._table is None:
			return pos
		return self._table[pos]


def _trees(children) -> List[Tree]:
	return [c for c in children if isinstance(c, Tree)]


def _names(children) -> List[str]:
	return [c.value for c in children if isinstance(c, Token) and c.type == "NAME"]


class _TreeBuilder:
	"""Convert a Lark parse tree into `sugarlint.parser.ast` nodes."""

	def __init__(self, source: str) -> None:
		self._source = source
		self._offsets = _ByteOffsets(source)

	def build(self, tree: Tree) -> SourceTree:
		if tree.meta.empty:
			loc = Located(line=1, column=1, start=0, end=self._offsets(len(self._source)))
		else:
			loc = self._loc(tree)
		return SourceTree(loc=loc, statements=self._statements(tree.children))

	# -- helpers ---------------------------------------------------------

	def _build(self, tree: Tree):
		builder: Callable[[Tree], Node] = getattr(self, f"_build_{tree.data}")
		return builder(tree)

	def _loc(self, node: Tree | Token) -> Located:
		if isinstance(node, Token):
			return Located(
				line=node.line,
				column=node.column,
				start=self._offsets(node.start_pos),
				end=self._offsets(node.end_pos),
			)
		meta = node.meta
		return Located(
			line=meta.line,
			column=meta.column,
			start=self._offsets(meta.start_pos),
			end=self._offsets(meta.end_pos),
		)

	@staticmethod
	def _join(first: Node, last: Node) -> Located:
		return Located(line=first.loc.line, column=first.loc.column, start=first.loc.start, end=last.loc.end)

	def _statements(self, children) -> list:
		return [self._build(c) for c in _trees(children)]

	def _split_prefix(self, children) -> tuple[List[str], list]:
		children = list(children)
		if children and isinstance(children[0], Tree) and children[0].data == "decl_prefix":
			modifiers = [tok.value for tok in children[0].children if tok.type == "MODIFIER"]
			return modifiers, children[1:]
		return [], children

	def _decl_parts(self, children) -> dict:
		parts: dict = {
			"generic_params": [],
			"params": [],
			"return_clause": None,
			"requirements": [],
			"inheritance": [],
			"initializer": None,
			"body": None,
			"throws": False,
			"failable": False,
		}
		for child in children:
			if isinstance(child, Token):
				if child.type in ("THROWS", "RETHROWS"):
					parts["throws"] = True
				elif child.type in ("POSTFIX_QMARK", "POSTFIX_BANG", "QMARK", "BANG"):
					parts["failable"] = True
				continue
			if child.data == "generic_params":
				parts["generic_params"] = self._generic_params(child)
			elif child.data == "param_clause":
				parts["params"] = [self._build_param(p) for p in _trees(child.children)]
			elif child.data == "return_clause":
				parts["return_clause"] = self._build_return_clause(child)
			elif child.data == "where_clause":
				parts["requirements"] = [self._build_requirement(r) for r in _trees(child.children)]
			elif child.data == "inheritance":
				parts["inheritance"] = [self._build(t) for t in _trees(child.children)]
			elif child.data == "type_initializer":
				parts["initializer"] = self._build_type_initializer(child)
			elif child.data == "block":
				parts["body"] = self._build_block(child)
		return parts

	def _pattern_names(self, node: Tree | Token) -> List[str]:
		if isinstance(node, Token):
			return [node.value]
		names: List[str] = []
		for child in node.children:
			if isinstance(child, Token) and child.type == "COMMA":
				continue
			names.extend(self._pattern_names(child))
		return names

	def _label(self, node: Tree | Token) -> str:
		if isinstance(node, Token):
			return node.value
		return node.children[0].value

	def _arguments(self, children) -> List[Argument]:
		return [self._build_argument(c) for c in _trees(children)]

	# -- declarations ----------------------------------------------------

	def _build_block(self, tree: Tree) -> Block:
		return Block(loc=self._loc(tree), statements=self._statements(tree.children))

	def _build_import_decl(self, tree: Tree) -> ImportDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		return ImportDecl(loc=self._loc(tree), path=_names(rest))

	def _build_var_decl(self, tree: Tree) -> VarDecl:
		modifiers, rest = self._split_prefix(tree.children)
		bindings = [self._build_binding(c) for c in _trees(rest)]
		return VarDecl(loc=self._loc(tree), modifiers=modifiers, bindings=bindings)

	def _build_binding(self, tree: Tree) -> Binding:
		first, *rest = tree.children
		binding = Binding(loc=self._loc(tree), names=self._pattern_names(first))
		for child in rest:
			if child.data == "type_annotation":
				binding.annotation = self._build_type_annotation(child)
			elif child.data == "initializer":
				binding.initializer = self._build(child.children[0])
			elif child.data == "block":
				binding.accessors = self._build_block(child)
		return binding

	def _build_type_annotation(self, tree: Tree) -> TypeAnnotation:
		return TypeAnnotation(loc=self._loc(tree), type=self._build(tree.children[0]))

	def _build_return_clause(self, tree: Tree) -> ReturnClause:
		return ReturnClause(loc=self._loc(tree), type=self._build(tree.children[0]))

	def _build_type_initializer(self, tree: Tree) -> TypeInitializer:
		return TypeInitializer(loc=self._loc(tree), value=self._build(tree.children[0]))

	def _build_func_decl(self, tree: Tree) -> FuncDecl:
		modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest[1:])
		return FuncDecl(
			loc=self._loc(tree),
			name=rest[0].value,
			modifiers=modifiers,
			generic_params=parts["generic_params"],
			params=parts["params"],
			return_clause=parts["return_clause"],
			requirements=parts["requirements"],
			body=parts["body"],
		)

	def _build_init_decl(self, tree: Tree) -> InitDecl:
		modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest)
		return InitDecl(
			loc=self._loc(tree),
			modifiers=modifiers,
			generic_params=parts["generic_params"],
			params=parts["params"],
			requirements=parts["requirements"],
			body=parts["body"],
			failable=parts["failable"],
		)

	def _build_deinit_decl(self, tree: Tree) -> DeinitDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		return DeinitDecl(loc=self._loc(tree), body=self._build_block(rest[0]))

	def _build_subscript_decl(self, tree: Tree) -> SubscriptDecl:
		modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest)
		return SubscriptDecl(
			loc=self._loc(tree),
			modifiers=modifiers,
			generic_params=parts["generic_params"],
			params=parts["params"],
			return_clause=parts["return_clause"],
			requirements=parts["requirements"],
			body=parts["body"],
		)

	def _build_param(self, tree: Tree) -> Param:
		children = list(tree.children)
		label = self._label(children.pop(0))
		name = None
		if isinstance(children[0], Token) and children[0].type == "NAME":
			name = children.pop(0).value
		param = Param(loc=self._loc(tree), label=label, name=name, type=self._build(children.pop(0)))
		for child in children:
			if isinstance(child, Token) and child.type == "ELLIPSIS":
				param.variadic = True
			elif isinstance(child, Tree) and child.data == "initializer":
				param.default = self._build(child.children[0])
		return param

	def _build_typealias_decl(self, tree: Tree) -> TypeAliasDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest[1:])
		return TypeAliasDecl(
			loc=self._loc(tree),
			name=rest[0].value,
			generic_params=parts["generic_params"],
			initializer=parts["initializer"],
		)

	def _build_associatedtype_decl(self, tree: Tree) -> AssociatedTypeDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest[1:])
		return AssociatedTypeDecl(
			loc=self._loc(tree),
			name=rest[0].value,
			inheritance=parts["inheritance"],
			initializer=parts["initializer"],
			requirements=parts["requirements"],
		)

	def _build_nominal(self, tree: Tree) -> NominalDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest[1:])
		return NominalDecl(
			loc=self._loc(tree),
			kind=tree.data[: -len("_decl")],
			name=rest[0].value,
			generic_params=parts["generic_params"],
			inheritance=parts["inheritance"],
			requirements=parts["requirements"],
			body=parts["body"],
		)

	_build_struct_decl = _build_nominal
	_build_class_decl = _build_nominal
	_build_enum_decl = _build_nominal
	_build_protocol_decl = _build_nominal

	def _build_extension_decl(self, tree: Tree) -> ExtensionDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		parts = self._decl_parts(rest[1:])
		return ExtensionDecl(
			loc=self._loc(tree),
			extended=self._build(rest[0]),
			inheritance=parts["inheritance"],
			requirements=parts["requirements"],
			body=parts["body"],
		)

	def _generic_params(self, tree: Tree) -> List[GenericParam]:
		params: List[GenericParam] = []
		for child in _trees(tree.children):
			name_tok = child.children[0]
			constraint = self._build(child.children[1]) if len(child.children) > 1 else None
			params.append(GenericParam(loc=self._loc(child), name=name_tok.value, constraint=constraint))
		return params

	def _build_requirement(self, tree: Tree) -> Requirement:
		left, right = _trees(tree.children)
		relation = "==" if any(isinstance(c, Token) and c.type == "EQEQ" for c in tree.children) else ":"
		return Requirement(loc=self._loc(tree), left=self._build(left), relation=relation, right=self._build(right))

	def _build_enum_case_decl(self, tree: Tree) -> EnumCaseDecl:
		_modifiers, rest = self._split_prefix(tree.children)
		cases: List[EnumCase] = []
		for child in _trees(rest):
			case = EnumCase(loc=self._loc(child), name=child.children[0].value)
			for part in child.children[1:]:
				if part.data == "tuple_type":
					case.associated = self._build_tuple_type(part)
				elif part.data == "initializer":
					case.raw_value = self._build(part.children[0])
			cases.append(case)
		return EnumCaseDecl(loc=self._loc(tree), cases=cases)

	# -- statements ------------------------------------------------------

	def _conditions(self, tree: Tree) -> list:
		return [self._build(c) for c in _trees(tree.children)]

	def _build_optional_binding(self, tree: Tree) -> OptionalBinding:
		binding = OptionalBinding(loc=self._loc(tree), name=tree.children[0].value)
		for child in tree.children[1:]:
			if child.data == "type_annotation":
				binding.annotation = self._build_type_annotation(child)
			elif child.data == "initializer":
				binding.initializer = self._build(child.children[0])
		return binding

	def _build_case_condition(self, tree: Tree) -> CaseCondition:
		pattern, initializer = tree.children
		return CaseCondition(
			loc=self._loc(tree),
			pattern=self._build(pattern),
			initializer=self._build(initializer.children[0]),
		)

	def _build_availability_condition(self, tree: Tree) -> AvailabilityCondition:
		keyword, *rest = tree.children
		platforms = [self._source[spec.meta.start_pos : spec.meta.end_pos] for spec in _trees(rest)]
		return AvailabilityCondition(
			loc=self._loc(tree),
			platforms=platforms,
			negated=keyword.value == "#unavailable",
		)

	def _build_if_stmt(self, tree: Tree) -> IfStmt:
		conditions, body, *rest = tree.children
		else_branch = None
		if rest:
			else_branch = self._build(rest[0].children[0])
		return IfStmt(
			loc=self._loc(tree),
			conditions=self._conditions(conditions),
			body=self._build_block(body),
			else_branch=else_branch,
		)

	def _build_guard_stmt(self, tree: Tree) -> GuardStmt:
		conditions, body = tree.children
		return GuardStmt(loc=self._loc(tree), conditions=self._conditions(conditions), body=self._build_block(body))

	def _build_while_stmt(self, tree: Tree) -> WhileStmt:
		conditions, body = tree.children
		return WhileStmt(loc=self._loc(tree), conditions=self._conditions(conditions), body=self._build_block(body))

	def _build_repeat_stmt(self, tree: Tree) -> RepeatStmt:
		body, condition = tree.children
		return RepeatStmt(loc=self._loc(tree), body=self._build_block(body), condition=self._build(condition))

	def _build_for_stmt(self, tree: Tree) -> ForStmt:
		pattern, sequence, *rest = tree.children
		guard = None
		for child in rest[:-1]:
			guard = self._build(child.children[0])
		return ForStmt(
			loc=self._loc(tree),
			names=self._pattern_names(pattern),
			sequence=self._build(sequence),
			guard=guard,
			body=self._build_block(rest[-1]),
		)

	def _build_switch_stmt(self, tree: Tree) -> SwitchStmt:
		subject, *cases = _trees(tree.children)
		return SwitchStmt(
			loc=self._loc(tree),
			subject=self._build(subject),
			cases=[self._build_switch_case(c) for c in cases],
		)

	def _build_switch_case(self, tree: Tree) -> SwitchCase:
		label, *statements = _trees(tree.children)
		items: List[CaseItem] = []
		if label.data == "case_label":
			for item in _trees(label.children):
				pattern, *guard = item.children
				items.append(
					CaseItem(
						loc=self._loc(item),
						pattern=self._build(pattern),
						guard=self._build(guard[0].children[0]) if guard else None,
					)
				)
		return SwitchCase(loc=self._loc(tree), items=items, statements=[self._build(s) for s in statements])

	def _build_do_stmt(self, tree: Tree) -> DoStmt:
		body, *catches = tree.children
		return DoStmt(
			loc=self._loc(tree),
			body=self._build_block(body),
			catches=[self._build_catch_clause(c) for c in catches],
		)

	def _build_catch_clause(self, tree: Tree) -> CatchClause:
		*parts, body = tree.children
		pattern = guard = None
		for part in parts:
			if part.data == "where_guard":
				guard = self._build(part.children[0])
			else:
				pattern = self._build(part)
		return CatchClause(loc=self._loc(tree), pattern=pattern, guard=guard, body=self._build_block(body))

	def _build_catch_path(self, tree: Tree) -> Expr:
		tokens = [c for c in tree.children if isinstance(c, Token)]
		head = tokens[0]
		expr: Expr
		if tree.meta.start_pos < head.start_pos:
			expr = ImplicitMember(loc=self._loc(tree), name=head.value)
		else:
			expr = NameExpr(loc=self._loc(head), name=head.value)
		for tok in tokens[1:]:
			loc = Located(line=expr.loc.line, column=expr.loc.column, start=expr.loc.start, end=self._offsets(tok.end_pos))
			expr = MemberAccess(loc=loc, base=expr, name=tok.value)
		return expr

	def _build_defer_stmt(self, tree: Tree) -> DeferStmt:
		return DeferStmt(loc=self._loc(tree), body=self._build_block(tree.children[0]))

	def _build_return_stmt(self, tree: Tree) -> ReturnStmt:
		value = self._build(tree.children[0]) if tree.children else None
		return ReturnStmt(loc=self._loc(tree), value=value)

	def _build_throw_stmt(self, tree: Tree) -> ThrowStmt:
		return ThrowStmt(loc=self._loc(tree), value=self._build(tree.children[0]))

	def _build_break_stmt(self, tree: Tree) -> JumpStmt:
		label = tree.children[0].value if tree.children else None
		return JumpStmt(loc=self._loc(tree), keyword="break", label=label)

	def _build_continue_stmt(self, tree: Tree) -> JumpStmt:
		label = tree.children[0].value if tree.children else None
		return JumpStmt(loc=self._loc(tree), keyword="continue", label=label)

	def _build_fallthrough_stmt(self, tree: Tree) -> JumpStmt:
		return JumpStmt(loc=self._loc(tree), keyword="fallthrough")

	def _build_expr_stmt(self, tree: Tree) -> ExprStmt:
		children = tree.children
		stmt = ExprStmt(loc=self._loc(tree), expr=self._build(children[0]))
		if len(children) == 2:
			stmt.op = "="
			stmt.value = self._build(children[1])
		elif len(children) == 3:
			stmt.op = children[1].value
			stmt.value = self._build(children[2])
		return stmt

	# -- expressions -----------------------------------------------------

	def _build_try_expr(self, tree: Tree) -> TryExpr:
		kind, expr = tree.children
		return TryExpr(loc=self._loc(tree), kind=kind.value, expr=self._build(expr))

	def _build_await_expr(self, tree: Tree) -> AwaitExpr:
		return AwaitExpr(loc=self._loc(tree), expr=self._build(tree.children[0]))

	def _build_ternary_expr(self, tree: Tree) -> Ternary:
		condition, then_expr, else_expr = _trees(tree.children)
		return Ternary(
			loc=self._loc(tree),
			condition=self._build(condition),
			then_expr=self._build(then_expr),
			else_expr=self._build(else_expr),
		)

	def _build_binary_chain(self, tree: Tree) -> Expr:
		children = tree.children
		left = self._build(children[0])
		for i in range(1, len(children), 2):
			right = self._build(children[i + 1])
			left = Binary(loc=self._join(left, right), op=children[i].value, left=left, right=right)
		return left

	_build_disjunction = _build_binary_chain
	_build_conjunction = _build_binary_chain
	_build_comparison = _build_binary_chain
	_build_nil_coalescing = _build_binary_chain
	_build_range_expr = _build_binary_chain
	_build_additive = _build_binary_chain
	_build_multiplicative = _build_binary_chain

	def _cast(self, tree: Tree, op: str) -> Cast:
		expr, type_node = _trees(tree.children)
		return Cast(loc=self._loc(tree), op=op, expr=self._build(expr), type=self._build(type_node))

	def _build_as_cast(self, tree: Tree) -> Cast:
		return self._cast(tree, "as")

	def _build_as_opt_cast(self, tree: Tree) -> Cast:
		return self._cast(tree, "as?")

	def _build_as_force_cast(self, tree: Tree) -> Cast:
		return self._cast(tree, "as!")

	def _build_is_check(self, tree: Tree) -> Cast:
		return self._cast(tree, "is")

	def _build_prefix_expr(self, tree: Tree) -> Prefix:
		op, operand = tree.children
		return Prefix(loc=self._loc(tree), op=op.value, operand=self._build(operand))

	def _build_member_access(self, tree: Tree) -> MemberAccess:
		base, member = tree.children
		name = member.value if isinstance(member, Token) else member.children[0].value
		return MemberAccess(loc=self._loc(tree), base=self._build(base), name=name)

	def _build_call(self, tree: Tree) -> Call:
		callee, *args = tree.children
		return Call(loc=self._loc(tree), callee=self._build(callee), args=self._arguments(args))

	def _build_trailing_call(self, tree: Tree) -> Call:
		callee, closure_tree = tree.children
		base = self._build(callee)
		closure = self._build_closure(closure_tree)
		argument = Argument(loc=closure.loc, value=closure)
		if isinstance(base, Call):
			# `run(queue) { ... }` passes the closure as the last argument.
			return Call(loc=self._loc(tree), callee=base.callee, args=base.args + [argument])
		return Call(loc=self._loc(tree), callee=base, args=[argument])

	def _build_subscript(self, tree: Tree) -> Subscript:
		base, *args = tree.children
		return Subscript(loc=self._loc(tree), base=self._build(base), args=self._arguments(args))

	def _build_optional_chain(self, tree: Tree) -> OptionalChain:
		return OptionalChain(loc=self._loc(tree), base=self._build(tree.children[0]))

	def _build_force_unwrap(self, tree: Tree) -> ForceUnwrap:
		return ForceUnwrap(loc=self._loc(tree), base=self._build(tree.children[0]))

	def _build_specialize(self, tree: Tree) -> Specialize:
		base, generic_args = tree.children
		return Specialize(
			loc=self._loc(tree),
			base=self._build(base),
			generic_args=self._build_generic_args(generic_args),
		)

	def _build_name_expr(self, tree: Tree) -> NameExpr:
		return NameExpr(loc=self._loc(tree), name=tree.children[0].value)

	def _build_literal(self, tree: Tree) -> Literal:
		return Literal(loc=self._loc(tree), text=tree.children[0].value)

	def _build_pound_expr(self, tree: Tree) -> PoundExpr:
		return PoundExpr(loc=self._loc(tree), name=tree.children[0].value)

	def _build_implicit_member(self, tree: Tree) -> ImplicitMember:
		return ImplicitMember(loc=self._loc(tree), name=tree.children[0].children[0].value)

	def _build_tuple_expr(self, tree: Tree) -> TupleExpr:
		return TupleExpr(loc=self._loc(tree), elements=self._arguments(tree.children))

	def _build_array_literal(self, tree: Tree) -> ArrayLiteral:
		return ArrayLiteral(loc=self._loc(tree), elements=[self._build(c) for c in _trees(tree.children)])

	def _build_dict_literal(self, tree: Tree) -> DictLiteral:
		entries = []
		for entry in _trees(tree.children):
			key, value = entry.children
			entries.append(DictEntry(loc=self._loc(entry), key=self._build(key), value=self._build(value)))
		return DictLiteral(loc=self._loc(tree), entries=entries)

	def _build_argument(self, tree: Tree) -> Argument:
		if tree.data == "binding_pattern":
			value = self._build_binding_pattern(tree)
			return Argument(loc=value.loc, value=value)
		if len(tree.children) == 2:
			label, value = tree.children
			return Argument(loc=self._loc(tree), value=self._build(value), label=self._label(label))
		return Argument(loc=self._loc(tree), value=self._build(tree.children[0]))

	def _build_binding_pattern(self, tree: Tree) -> BindingPattern:
		return BindingPattern(loc=self._loc(tree), pattern=self._build(tree.children[0]))

	def _build_is_pattern(self, tree: Tree) -> IsPattern:
		return IsPattern(loc=self._loc(tree), type=self._build(tree.children[0]))

	def _build_closure(self, tree: Tree) -> Closure:
		children = _trees(tree.children)
		signature = None
		if children and children[0].data == "closure_sig":
			signature = self._closure_signature(children.pop(0))
		return Closure(loc=self._loc(tree), signature=signature, statements=[self._build(c) for c in children])

	def _closure_signature(self, tree: Tree) -> ClosureSignature:
		signature = ClosureSignature(loc=self._loc(tree))
		for child in _trees(tree.children):
			if child.data == "capture_list":
				for capture in _trees(child.children):
					specifier, name, *value = capture.children
					signature.captures.append(
						Capture(
							loc=self._loc(capture),
							specifier=specifier.value,
							name=name.value,
							value=self._build(value[0]) if value else None,
						)
					)
			elif child.data == "return_clause":
				signature.return_clause = self._build_return_clause(child)
			else:
				signature.params.append(self._build(child))
		return signature

	def _build_generic_args(self, tree: Tree) -> GenericArgs:
		args = []
		commas: List[int] = []
		for child in tree.children:
			if isinstance(child, Tree):
				args.append(self._build(child))
			elif child.type == "COMMA":
				commas.append(self._offsets(child.start_pos))
		return GenericArgs(loc=self._loc(tree), args=args, commas=commas)

	# -- types -----------------------------------------------------------

	def _build_simple_type(self, tree: Tree) -> SimpleType:
		name, *rest = tree.children
		generic_args = self._build_generic_args(rest[0]) if rest else None
		return SimpleType(loc=self._loc(tree), name=name.value, generic_args=generic_args)

	def _build_member_type(self, tree: Tree) -> MemberType:
		base, name, *rest = tree.children
		generic_args = self._build_generic_args(rest[0]) if rest else None
		return MemberType(loc=self._loc(tree), base=self._build(base), name=name.value, generic_args=generic_args)

	def _build_optional_type(self, tree: Tree) -> OptionalType:
		return OptionalType(loc=self._loc(tree), wrapped=self._build(tree.children[0]))

	def _build_iuo_type(self, tree: Tree) -> OptionalType:
		return OptionalType(loc=self._loc(tree), wrapped=self._build(tree.children[0]), implicit=True)

	def _build_array_type(self, tree: Tree) -> ArrayType:
		return ArrayType(loc=self._loc(tree), element=self._build(tree.children[0]))

	def _build_dictionary_type(self, tree: Tree) -> DictionaryType:
		key, value = tree.children
		return DictionaryType(loc=self._loc(tree), key=self._build(key), value=self._build(value))

	def _build_tuple_type(self, tree: Tree) -> TupleType:
		elements: List[TupleTypeElement] = []
		for child in _trees(tree.children):
			*labels, type_node = child.children
			label = labels[0].value if labels else None
			elements.append(TupleTypeElement(loc=self._loc(child), type=self._build(type_node), label=label))
		return TupleType(loc=self._loc(tree), elements=elements)

	def _build_function_type(self, tree: Tree) -> FunctionType:
		params, result = _trees(tree.children)
		throws = any(isinstance(c, Token) and c.type in ("THROWS", "RETHROWS") for c in tree.children)
		return FunctionType(
			loc=self._loc(tree),
			params=self._build_tuple_type(params),
			result=self._build(result),
			throws=throws,
		)

	def _build_attributed_type(self, tree: Tree) -> AttributedType:
		*attributes, base = tree.children
		return AttributedType(loc=self._loc(tree), attributes=[a.value for a in attributes], base=self._build(base))

	def _build_composition_type(self, tree: Tree) -> CompositionType:
		return CompositionType(loc=self._loc(tree), members=[self._build(c) for c in _trees(tree.children)])

	def _build_some_any_type(self, tree: Tree) -> SomeOrAnyType:
		keyword, base = tree.children
		return SomeOrAnyType(loc=self._loc(tree), keyword=keyword.value, base=self._build(base))
