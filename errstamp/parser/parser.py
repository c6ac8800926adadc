# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark parse tree -> errstamp AST.

The grammar (`grammar.lark`) covers the JavaScript subset the error-code pass
needs to see: statements, operators, calls, `new`, template literals and
object literals. Template literal holes are re-parsed with the same grammar
using `expr` as the start symbol.
"""

from __future__ import annotations

import re
from dataclasses import fields, replace
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from .ast import (
	ArrayLiteral,
	Arrow,
	Assign,
	Binary,
	Block,
	BreakStmt,
	Call,
	Conditional,
	ContinueStmt,
	Declarator,
	Expr,
	ExprStmt,
	FunctionDecl,
	FunctionExpr,
	Identifier,
	IfStmt,
	Index,
	KeywordLiteral,
	Located,
	Member,
	New,
	Node,
	NumberLiteral,
	ObjectLiteral,
	Paren,
	Program,
	Property,
	ReturnStmt,
	Spread,
	Stmt,
	StringLiteral,
	TemplateLiteral,
	ThrowStmt,
	TryStmt,
	Unary,
	Update,
	VarDecl,
	WhileStmt,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text(encoding="utf-8")

# Earley resolves the few genuine ambiguities of the subset (block vs. empty
# object after `=>`, dangling `else`) instead of requiring an LALR-clean grammar.
_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="program",
	propagate_positions=True,
	maybe_placeholders=False,
)

_EXPR_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="expr",
	propagate_positions=True,
	maybe_placeholders=False,
)

_JS_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
	"n": "\n",
	"t": "\t",
	"r": "\r",
	"b": "\b",
	"f": "\f",
	"v": "\v",
}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


class TemplateParseError(ValueError):
	"""
	Error raised while splitting a template literal into chunks and holes.

	A `ValueError` subclass carrying a best-effort location so callers can
	turn it into a parser diagnostic.
	"""

	def __init__(self, message: str, *, loc: Located) -> None:
		super().__init__(message)
		self.loc = loc


def parse_program(source: str, filename: Optional[str] = None) -> Program:
	tree = _PARSER.parse(source)
	program = _build_program(tree)
	program.filename = filename
	return program


def parse_expr(source: str) -> Expr:
	"""Parse a single expression (used for template holes and by tests)."""
	tree = _EXPR_PARSER.parse(source)
	return _build_expr(tree)


def decode_string_literal(raw: str) -> str:
	"""
	Decode a quoted JavaScript string literal to its value.

	Surrogate pairs written as two `\\uXXXX` escapes are joined; lone
	surrogates become U+FFFD so the value is always valid UTF-8.
	"""

	def _unescape(m: re.Match) -> str:
		esc = m.group(1)
		if esc[0] == "u" and len(esc) > 1:
			digits = esc[2:-1] if esc[1] == "{" else esc[1:]
			return chr(int(digits, 16))
		if esc[0] == "x" and len(esc) == 3:
			return chr(int(esc[1:], 16))
		if esc[0] in "01234567":
			return chr(int(esc, 8))
		if esc in _LINE_CONTINUATIONS:
			return ""
		return _SIMPLE_ESCAPES.get(esc, esc)

	value = _JS_ESCAPE.sub(_unescape, raw[1:-1])
	return value.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def _build_program(tree: Tree) -> Program:
	return Program(body=[_build_stmt(child) for child in tree.children])


def _build_stmt(tree: Tree) -> Stmt:
	name = _name(tree)
	if name == "block":
		return _build_block(tree)
	if name == "function_decl":
		is_async, rest = _split_async(tree.children)
		fn_name = rest[0]
		params, body = _params_and_block(rest[1:])
		return FunctionDecl(loc=_loc(tree), name=str(fn_name), params=params, body=body, is_async=is_async)
	if name == "var_decl":
		kind_tree, *declarators = tree.children
		return VarDecl(
			loc=_loc(tree),
			kind=str(kind_tree.children[0]),
			declarations=[_build_declarator(d) for d in declarators],
		)
	if name == "if_stmt":
		test, consequent, *rest = tree.children
		stmt = IfStmt(loc=_loc(tree), test=_build_expr(test), consequent=_build_stmt(consequent))
		if rest:
			alternate = _build_stmt(rest[0])
			# `else` binds to the nearest open `if`, whichever derivation Earley kept.
			(_open_if(stmt.consequent) or stmt).alternate = alternate
		return stmt
	if name == "while_stmt":
		test, body = tree.children
		return WhileStmt(loc=_loc(tree), test=_build_expr(test), body=_build_stmt(body))
	if name == "try_stmt":
		return _build_try_stmt(tree)
	if name == "throw_stmt":
		return ThrowStmt(loc=_loc(tree), value=_build_expr(tree.children[0]))
	if name == "return_stmt":
		value = _build_expr(tree.children[0]) if tree.children else None
		return ReturnStmt(loc=_loc(tree), value=value)
	if name == "break_stmt":
		return BreakStmt(loc=_loc(tree))
	if name == "continue_stmt":
		return ContinueStmt(loc=_loc(tree))
	if name == "expr_stmt":
		return ExprStmt(loc=_loc(tree), expr=_build_expr(tree.children[0]))
	raise TypeError(f"Unexpected statement node: {name}")


def _open_if(stmt: Stmt) -> Optional[IfStmt]:
	"""Innermost `if` without an `else` that ends `stmt`, if any."""
	if isinstance(stmt, IfStmt):
		if stmt.alternate is not None:
			return _open_if(stmt.alternate)
		return _open_if(stmt.consequent) or stmt
	if isinstance(stmt, WhileStmt):
		return _open_if(stmt.body)
	return None


def _build_block(tree: Tree) -> Block:
	return Block(loc=_loc(tree), body=[_build_stmt(child) for child in tree.children])


def _build_declarator(tree: Tree) -> Declarator:
	name_tok, *rest = tree.children
	init = _build_expr(rest[0]) if rest else None
	return Declarator(loc=_loc_from_token(name_tok), name=str(name_tok), init=init)


def _build_try_stmt(tree: Tree) -> TryStmt:
	block_tree, *clauses = tree.children
	stmt = TryStmt(loc=_loc(tree), block=_build_block(block_tree))
	for clause in clauses:
		if _name(clause) == "catch_clause":
			if len(clause.children) == 2:
				stmt.param = str(clause.children[0])
			stmt.handler = _build_block(clause.children[-1])
		elif _name(clause) == "finally_clause":
			stmt.finalizer = _build_block(clause.children[0])
	return stmt


def _split_async(children: list) -> tuple[bool, list]:
	if children and isinstance(children[0], Token) and children[0].type == "ASYNC":
		return True, list(children[1:])
	return False, list(children)


def _params_and_block(children: list) -> tuple[List[str], Block]:
	"""`params? block` tail shared by declarations and function expressions."""
	params: List[str] = []
	if len(children) == 2:
		params = [str(tok) for tok in children[0].children]
	return params, _build_block(children[-1])


def _build_expr(node) -> Expr:
	if isinstance(node, Token):
		# Inlined `?prop_key` alternatives and bare NAME tokens in odd corners.
		if node.type == "NAME":
			return Identifier(loc=_loc_from_token(node), name=str(node))
		raise TypeError(f"Unexpected token in expression position: {node.type}")
	name = _name(node)

	if name == "identifier":
		return Identifier(loc=_loc(node), name=str(node.children[0]))
	if name == "string":
		raw = str(node.children[0])
		return StringLiteral(loc=_loc(node), value=decode_string_literal(raw), raw=raw)
	if name == "number":
		return NumberLiteral(loc=_loc(node), raw=str(node.children[0]))
	if name == "template":
		return _parse_template(_loc(node), node.children[0])
	if name == "keyword_literal":
		return KeywordLiteral(loc=_loc(node), word=str(node.children[0]))
	if name == "paren":
		return Paren(loc=_loc(node), expr=_build_expr(node.children[0]))
	if name == "array":
		return ArrayLiteral(loc=_loc(node), elements=[_build_expr(c) for c in node.children])
	if name == "object":
		return ObjectLiteral(loc=_loc(node), properties=[_build_property(c) for c in node.children])
	if name == "spread":
		return Spread(loc=_loc(node), value=_build_expr(node.children[0]))
	if name == "member":
		obj, prop = node.children
		return Member(loc=_loc(node), obj=_build_expr(obj), prop=str(prop.children[0]))
	if name == "index":
		obj, index = node.children
		return Index(loc=_loc(node), obj=_build_expr(obj), index=_build_expr(index))
	if name == "call":
		callee, args = node.children
		return Call(loc=_loc(node), callee=_build_expr(callee), args=_build_args(args))
	if name == "new_call":
		callee, args = node.children
		return New(loc=_loc(node), callee=_build_expr(callee), args=_build_args(args))
	if name == "new_bare":
		return New(loc=_loc(node), callee=_build_expr(node.children[0]), args=None)
	if name == "unary":
		op, operand = node.children
		return Unary(loc=_loc(node), op=_op(op), operand=_build_expr(operand))
	if name == "update":
		operand, op = node.children
		return Update(loc=_loc(node), op=_op(op), operand=_build_expr(operand))
	if name == "binary":
		left, op, right = node.children
		return Binary(loc=_loc(node), op=_op(op), left=_build_expr(left), right=_build_expr(right))
	if name == "conditional":
		test, consequent, alternate = node.children
		return Conditional(
			loc=_loc(node),
			test=_build_expr(test),
			consequent=_build_expr(consequent),
			alternate=_build_expr(alternate),
		)
	if name == "assign":
		target, op, value = node.children
		return Assign(loc=_loc(node), op=_op(op), target=_build_expr(target), value=_build_expr(value))
	if name == "arrow":
		return _build_arrow(node)
	if name == "function_expr":
		is_async, rest = _split_async(node.children)
		fn_name: Optional[str] = None
		if rest and isinstance(rest[0], Token) and rest[0].type == "NAME":
			fn_name = str(rest[0])
			rest = rest[1:]
		params, body = _params_and_block(rest)
		return FunctionExpr(loc=_loc(node), name=fn_name, params=params, body=body, is_async=is_async)
	raise TypeError(f"Unexpected expression node: {name}")


def _build_args(tree: Tree) -> List[Expr]:
	return [_build_expr(child) for child in tree.children]


def _build_property(node) -> Property | Spread:
	name = _name(node)
	if name == "spread":
		return Spread(loc=_loc(node), value=_build_expr(node.children[0]))
	if name == "shorthand_property":
		tok = node.children[0]
		return Property(
			loc=_loc(node),
			key=str(tok),
			value=Identifier(loc=_loc_from_token(tok), name=str(tok)),
			shorthand=True,
		)
	if name == "keyed_property":
		key, value = node.children
		key_text = str(key.children[0]) if isinstance(key, Tree) else str(key)
		return Property(loc=_loc(node), key=key_text, value=_build_expr(value))
	raise TypeError(f"Unexpected object property node: {name}")


def _build_arrow(tree: Tree) -> Arrow:
	is_async, rest = _split_async(tree.children)
	params_tree, body_node = rest
	params: List[str] = []
	for child in params_tree.children:
		if isinstance(child, Token):
			params.append(str(child))
		else:
			params.extend(str(tok) for tok in child.children)
	if isinstance(body_node, Tree) and _name(body_node) == "arrow_block":
		body: Block | Expr = Block(loc=_loc(body_node), body=[_build_stmt(c) for c in body_node.children])
	else:
		body = _build_expr(body_node)
	return Arrow(loc=_loc(tree), params=params, body=body, is_async=is_async)


def _parse_template(loc: Located, token: Token) -> TemplateLiteral:
	"""
	Split a TEMPLATE token into raw text chunks and `${...}` holes.

	Chunks keep their escapes untouched (the raw form). Hole sources are parsed
	with the expression grammar and their locations shifted to the position of
	the hole inside the file.
	"""
	text = token.value
	raw = text[1:-1]  # strip backticks
	quasis: list[str] = []
	exprs: list[Expr] = []
	buf: list[str] = []

	def _pos(offset: int) -> Located:
		# `offset` indexes `raw`; +1 for the opening backtick.
		before = text[: offset + 1]
		newlines = before.count("\n")
		if newlines == 0:
			return Located(line=loc.line, column=loc.column + offset + 1)
		return Located(line=loc.line + newlines, column=len(before) - before.rfind("\n"))

	i = 0
	while i < len(raw):
		ch = raw[i]
		if ch == "\\":
			buf.append(raw[i : i + 2])
			i += 2
			continue
		if not raw.startswith("${", i):
			buf.append(ch)
			i += 1
			continue

		hole_start = i
		quasis.append("".join(buf))
		buf.clear()
		i += 2  # consume '${'
		depth = 0
		quote: str | None = None
		expr_buf: list[str] = []
		while i < len(raw):
			c = raw[i]
			if quote is not None:
				expr_buf.append(c)
				if c == "\\" and i + 1 < len(raw):
					expr_buf.append(raw[i + 1])
					i += 2
					continue
				if c == quote:
					quote = None
				i += 1
				continue
			if c in "\"'`":
				quote = c
			elif c == "{":
				depth += 1
			elif c == "}":
				if depth == 0:
					i += 1
					break
				depth -= 1
			expr_buf.append(c)
			i += 1
		else:
			raise TemplateParseError("E-TPL-UNTERMINATED-HOLE: unterminated '${' in template literal", loc=_pos(hole_start))

		source = "".join(expr_buf)
		if not source.strip():
			raise TemplateParseError("E-TPL-EMPTY-HOLE: '${}' must contain an expression", loc=_pos(hole_start))
		lead = len(source) - len(source.lstrip())
		exprs.append(_shift_locs(parse_expr(source.strip()), _pos(hole_start + 2 + lead)))

	quasis.append("".join(buf))
	if len(quasis) != len(exprs) + 1:
		raise AssertionError("template parser bug: quasis/exprs shape mismatch")
	return TemplateLiteral(loc=loc, quasis=quasis, exprs=exprs)


def _shift_locs(node: Node, origin: Located) -> Node:
	"""Rebase fragment-relative locations (1:1 based) onto `origin`."""
	for f in fields(node):
		value = getattr(node, f.name)
		if isinstance(value, Located):
			if value.line == 1:
				shifted = Located(line=origin.line, column=origin.column + value.column - 1)
			else:
				shifted = replace(value, line=origin.line + value.line - 1)
			setattr(node, f.name, shifted)
		elif isinstance(value, Node):
			_shift_locs(value, origin)
		elif isinstance(value, list):
			for item in value:
				if isinstance(item, Node):
					_shift_locs(item, origin)
	return node


def _op(tree: Tree) -> str:
	return str(tree.children[0])


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	return Located(line=getattr(meta, "line", 0), column=getattr(meta, "column", 0))


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)
