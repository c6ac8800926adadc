# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
errstamp AST -> JavaScript source.

Output is deterministic: four space indentation, one statement per line,
literals printed from their raw source text. Parenthesized expressions are
explicit `Paren` nodes, so no precedence analysis happens here.
"""

from __future__ import annotations

import json

from errstamp.parser import ast

INDENT = "    "
WORD_OPERATORS = {"typeof", "void", "delete", "await"}


def format_program(program: ast.Program) -> str:
	if not program.body:
		return ""
	return "\n".join(format_stmt(stmt, 0) for stmt in program.body) + "\n"


def format_stmt(stmt: ast.Stmt, level: int = 0) -> str:
	pad = INDENT * level
	if isinstance(stmt, ast.Block):
		return pad + format_block(stmt, level)
	if isinstance(stmt, ast.ExprStmt):
		return f"{pad}{format_expr(stmt.expr, level)};"
	if isinstance(stmt, ast.VarDecl):
		decls = ", ".join(_format_declarator(d, level) for d in stmt.declarations)
		return f"{pad}{stmt.kind} {decls};"
	if isinstance(stmt, ast.FunctionDecl):
		prefix = "async " if stmt.is_async else ""
		params = ", ".join(stmt.params)
		return f"{pad}{prefix}function {stmt.name}({params}) {format_block(stmt.body, level)}"
	if isinstance(stmt, ast.IfStmt):
		text = f"{pad}if ({format_expr(stmt.test, level)}) {_format_clause(stmt.consequent, level)}"
		if stmt.alternate is not None:
			joiner = " " if isinstance(stmt.consequent, ast.Block) else f"\n{pad}"
			text += f"{joiner}else {_format_clause(stmt.alternate, level)}"
		return text
	if isinstance(stmt, ast.WhileStmt):
		return f"{pad}while ({format_expr(stmt.test, level)}) {_format_clause(stmt.body, level)}"
	if isinstance(stmt, ast.TryStmt):
		text = f"{pad}try {format_block(stmt.block, level)}"
		if stmt.handler is not None:
			param = f"({stmt.param}) " if stmt.param is not None else ""
			text += f" catch {param}{format_block(stmt.handler, level)}"
		if stmt.finalizer is not None:
			text += f" finally {format_block(stmt.finalizer, level)}"
		return text
	if isinstance(stmt, ast.ThrowStmt):
		return f"{pad}throw {format_expr(stmt.value, level)};"
	if isinstance(stmt, ast.ReturnStmt):
		if stmt.value is None:
			return f"{pad}return;"
		return f"{pad}return {format_expr(stmt.value, level)};"
	if isinstance(stmt, ast.BreakStmt):
		return f"{pad}break;"
	if isinstance(stmt, ast.ContinueStmt):
		return f"{pad}continue;"
	raise TypeError(f"cannot print statement {type(stmt).__name__}")


def format_block(block: ast.Block, level: int) -> str:
	"""Braced block whose closing brace sits at `level`; no leading indent."""
	if not block.body:
		return "{}"
	inner = "\n".join(format_stmt(s, level + 1) for s in block.body)
	return "{\n" + inner + "\n" + INDENT * level + "}"


def _format_clause(stmt: ast.Stmt, level: int) -> str:
	# Clause bodies start on the header line.
	return format_stmt(stmt, level).lstrip()


def _format_declarator(decl: ast.Declarator, level: int) -> str:
	if decl.init is None:
		return decl.name
	return f"{decl.name} = {format_expr(decl.init, level)}"


def format_expr(expr: ast.Expr, level: int = 0) -> str:
	if isinstance(expr, ast.Identifier):
		return expr.name
	if isinstance(expr, ast.StringLiteral):
		if expr.raw is not None:
			return expr.raw
		return json.dumps(expr.value, ensure_ascii=False)
	if isinstance(expr, ast.NumberLiteral):
		return expr.raw
	if isinstance(expr, ast.KeywordLiteral):
		return expr.word
	if isinstance(expr, ast.TemplateLiteral):
		parts = [expr.quasis[0]]
		for hole, chunk in zip(expr.exprs, expr.quasis[1:]):
			parts.append("${" + format_expr(hole, level) + "}")
			parts.append(chunk)
		return "`" + "".join(parts) + "`"
	if isinstance(expr, ast.ArrayLiteral):
		return "[" + ", ".join(format_expr(e, level) for e in expr.elements) + "]"
	if isinstance(expr, ast.ObjectLiteral):
		if not expr.properties:
			return "{}"
		return "{ " + ", ".join(_format_property(p, level) for p in expr.properties) + " }"
	if isinstance(expr, ast.Spread):
		return "..." + format_expr(expr.value, level)
	if isinstance(expr, ast.Paren):
		return "(" + format_expr(expr.expr, level) + ")"
	if isinstance(expr, ast.Member):
		return f"{format_expr(expr.obj, level)}.{expr.prop}"
	if isinstance(expr, ast.Index):
		return f"{format_expr(expr.obj, level)}[{format_expr(expr.index, level)}]"
	if isinstance(expr, ast.Call):
		return f"{format_expr(expr.callee, level)}({_format_args(expr.args, level)})"
	if isinstance(expr, ast.New):
		callee = format_expr(expr.callee, level)
		if expr.args is None:
			return f"new {callee}"
		return f"new {callee}({_format_args(expr.args, level)})"
	if isinstance(expr, ast.Unary):
		operand = format_expr(expr.operand, level)
		if expr.op in WORD_OPERATORS:
			return f"{expr.op} {operand}"
		if expr.op in ("+", "-") and operand.startswith(expr.op):
			# `- -x` must not collapse into `--x`
			return f"{expr.op} {operand}"
		return f"{expr.op}{operand}"
	if isinstance(expr, ast.Update):
		return f"{format_expr(expr.operand, level)}{expr.op}"
	if isinstance(expr, ast.Binary):
		return f"{format_expr(expr.left, level)} {expr.op} {format_expr(expr.right, level)}"
	if isinstance(expr, ast.Conditional):
		test = format_expr(expr.test, level)
		return f"{test} ? {format_expr(expr.consequent, level)} : {format_expr(expr.alternate, level)}"
	if isinstance(expr, ast.Assign):
		return f"{format_expr(expr.target, level)} {expr.op} {format_expr(expr.value, level)}"
	if isinstance(expr, ast.Arrow):
		prefix = "async " if expr.is_async else ""
		params = ", ".join(expr.params)
		if isinstance(expr.body, ast.Block):
			body = format_block(expr.body, level)
		else:
			body = format_expr(expr.body, level)
		return f"{prefix}({params}) => {body}"
	if isinstance(expr, ast.FunctionExpr):
		prefix = "async " if expr.is_async else ""
		name = f" {expr.name}" if expr.name else ""
		params = ", ".join(expr.params)
		return f"{prefix}function{name}({params}) {format_block(expr.body, level)}"
	raise TypeError(f"cannot print expression {type(expr).__name__}")


def _format_args(args: list[ast.Expr], level: int) -> str:
	return ", ".join(format_expr(a, level) for a in args)


def _format_property(prop: ast.Property | ast.Spread, level: int) -> str:
	if isinstance(prop, ast.Spread):
		return format_expr(prop, level)
	if prop.shorthand:
		return prop.key
	return f"{prop.key}: {format_expr(prop.value, level)}"
