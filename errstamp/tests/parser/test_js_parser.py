# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from errstamp.parser import ast, decode_string_literal, parse_expr, parse_source


def _parse(src: str) -> ast.Program:
	program, diags = parse_source(src, filename="t.js")
	assert diags == []
	assert program is not None
	return program


def test_parse_throw_new_error() -> None:
	prog = _parse('throw new Error("boom");')
	(stmt,) = prog.body
	assert isinstance(stmt, ast.ThrowStmt)
	new = stmt.value
	assert isinstance(new, ast.New)
	assert isinstance(new.callee, ast.Identifier) and new.callee.name == "Error"
	assert len(new.args) == 1
	arg = new.args[0]
	assert isinstance(arg, ast.StringLiteral)
	assert arg.value == "boom"
	assert arg.raw == '"boom"'
	assert new.loc.line == 1


def test_parse_new_without_arguments_is_distinct_from_empty_call() -> None:
	bare = parse_expr("new Error")
	empty = parse_expr("new Error()")
	assert isinstance(bare, ast.New) and bare.args is None
	assert isinstance(empty, ast.New) and empty.args == []


def test_parse_new_member_callee() -> None:
	expr = parse_expr('new errors.Error("x")')
	assert isinstance(expr, ast.New)
	assert isinstance(expr.callee, ast.Member)
	assert expr.callee.prop == "Error"


def test_binary_precedence_and_left_associativity() -> None:
	expr = parse_expr('"a" + b * 2 + "c"')
	assert isinstance(expr, ast.Binary) and expr.op == "+"
	assert isinstance(expr.right, ast.StringLiteral)
	left = expr.left
	assert isinstance(left, ast.Binary) and left.op == "+"
	assert isinstance(left.right, ast.Binary) and left.right.op == "*"


def test_parenthesized_expression_is_kept() -> None:
	expr = parse_expr('("a" + b)')
	assert isinstance(expr, ast.Paren)
	assert isinstance(expr.expr, ast.Binary)


def test_template_literal_splits_raw_chunks_and_holes() -> None:
	expr = parse_expr(r"`Failed \n to fetch ${userId}: ${response.statusText}`")
	assert isinstance(expr, ast.TemplateLiteral)
	assert expr.quasis == [r"Failed \n to fetch ", ": ", ""]
	assert isinstance(expr.exprs[0], ast.Identifier)
	member = expr.exprs[1]
	assert isinstance(member, ast.Member)
	assert member.prop == "statusText"


def test_template_hole_with_string_containing_brace() -> None:
	expr = parse_expr('`a${"}"}b`')
	assert isinstance(expr, ast.TemplateLiteral)
	assert expr.quasis == ["a", "b"]
	assert isinstance(expr.exprs[0], ast.StringLiteral)
	assert expr.exprs[0].value == "}"


def test_template_hole_locations_point_into_the_file() -> None:
	prog = _parse("const m =\n  `x ${value}`;")
	decl = prog.body[0]
	assert isinstance(decl, ast.VarDecl)
	tpl = decl.declarations[0].init
	assert isinstance(tpl, ast.TemplateLiteral)
	hole = tpl.exprs[0]
	assert hole.loc.line == 2
	assert hole.loc.column == 8


def test_parse_statements_and_functions() -> None:
	src = """
// helper
async function load(id, opts) {
	let n = 0;
	while (n < 3) {
		n += 1;
		if (n === 2) continue;
		else break;
	}
	try {
		return await fetch(`/x/${id}`, { ...opts, method: "GET" });
	} catch (err) {
		throw err;
	} finally {
		n--;
	}
}
const f = async (a) => ({ a });
const g = function named() { return; };
"""
	prog = _parse(src)
	fn, f_decl, g_decl = prog.body
	assert isinstance(fn, ast.FunctionDecl)
	assert fn.is_async and fn.params == ["id", "opts"]
	try_stmt = fn.body.body[2]
	assert isinstance(try_stmt, ast.TryStmt)
	assert try_stmt.param == "err"
	assert try_stmt.finalizer is not None
	arrow = f_decl.declarations[0].init
	assert isinstance(arrow, ast.Arrow) and arrow.is_async
	assert isinstance(arrow.body, ast.Paren)
	func = g_decl.declarations[0].init
	assert isinstance(func, ast.FunctionExpr) and func.name == "named"


def test_arrow_with_block_body() -> None:
	expr = parse_expr("(a, b) => { return a; }")
	assert isinstance(expr, ast.Arrow)
	assert expr.params == ["a", "b"]
	assert isinstance(expr.body, ast.Block)


def test_object_keys_may_be_keywords() -> None:
	expr = parse_expr('{ default: 1, "quoted": 2, new: 3 }')
	assert isinstance(expr, ast.ObjectLiteral)
	assert [p.key for p in expr.properties] == ["default", '"quoted"', "new"]


@pytest.mark.parametrize(
	"raw,value",
	[
		(r'"plain"', "plain"),
		(r"'single \'q\''", "single 'q'"),
		(r'"tab\tnew\nline"', "tab\tnew\nline"),
		(r'"\x41B\u{43}"', "ABC"),
		(r'"😀"', "\U0001F600"),
		(r'"\ud83d"', "\ufffd"),
		(r'"\q"', "q"),
		(r'"a\1b"', "a\x01b"),
		(r'"\0"', "\0"),
		(r'"\101\62"', "A2"),
		(r'"\477"', "\x277"),
		(r'"\8"', "8"),
	],
)
def test_decode_string_literal(raw: str, value: str) -> None:
	assert decode_string_literal(raw) == value


def test_syntax_error_becomes_parser_diagnostic() -> None:
	program, diags = parse_source("throw new Error(;", filename="bad.js")
	assert program is None
	assert len(diags) == 1
	diag = diags[0]
	assert diag.phase == "parser"
	assert diag.message.startswith("syntax error")
	assert diag.span.file == "bad.js"
	assert diag.span.line == 1


def test_empty_template_hole_is_a_diagnostic() -> None:
	program, diags = parse_source("const a = `x ${ }`;", filename="t.js")
	assert program is None
	assert diags[0].phase == "parser"
	assert "E-TPL-EMPTY-HOLE" in diags[0].message


def test_dangling_else_binds_to_nearest_if() -> None:
	(outer,) = _parse("if (a) if (b) x(); else y();").body
	assert isinstance(outer, ast.IfStmt)
	assert outer.alternate is None
	inner = outer.consequent
	assert isinstance(inner, ast.IfStmt)
	assert isinstance(inner.alternate, ast.ExprStmt)


def test_dangling_else_reaches_through_loop_body() -> None:
	(outer,) = _parse("if (a) while (c) if (b) x(); else y();").body
	assert outer.alternate is None
	inner = outer.consequent.body
	assert isinstance(inner, ast.IfStmt)
	assert inner.alternate is not None


def test_else_after_block_stays_on_outer_if() -> None:
	(outer,) = _parse("if (a) { if (b) x(); } else y();").body
	assert outer.alternate is not None
	assert outer.consequent.body[0].alternate is None


def test_else_if_chain_keeps_each_else() -> None:
	(outer,) = _parse("if (a) x(); else if (b) y(); else z();").body
	assert isinstance(outer.alternate, ast.IfStmt)
	assert outer.alternate.alternate is not None
