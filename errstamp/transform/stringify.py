# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Message stringifier: best-effort text of an error message argument.

Literal text is kept, every dynamic part collapses to `PLACEHOLDER`. Nothing
is evaluated.
"""

from __future__ import annotations

from errstamp.parser import ast

PLACEHOLDER = "%s"


def stringify_message(expr: ast.Expr) -> str:
	if isinstance(expr, ast.StringLiteral):
		return expr.value
	if isinstance(expr, ast.TemplateLiteral):
		parts: list[str] = [expr.quasis[0]]
		for hole, chunk in zip(expr.exprs, expr.quasis[1:]):
			parts.append(stringify_message(hole))
			parts.append(chunk)
		return "".join(parts)
	if isinstance(expr, ast.Binary):
		# Any binary operator is read as concatenation; operand types are not checked.
		return stringify_message(expr.left) + stringify_message(expr.right)
	return PLACEHOLDER
