# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from errstamp.parser import parse_expr
from errstamp.transform.stringify import PLACEHOLDER, stringify_message


def test_string_literal_is_its_decoded_text() -> None:
	assert stringify_message(parse_expr('"plain text"')) == "plain text"
	assert stringify_message(parse_expr(r"'it\'s'")) == "it's"


def test_template_interleaves_chunks_and_placeholders() -> None:
	assert stringify_message(parse_expr("`a${x}b`")) == "a" + PLACEHOLDER + "b"
	expr = parse_expr("`Failed to fetch user ${userId}: ${response.statusText}`")
	assert stringify_message(expr) == "Failed to fetch user %s: %s"


def test_template_chunks_stay_raw() -> None:
	assert stringify_message(parse_expr(r"`line\nbreak`")) == r"line\nbreak"


def test_template_holes_recurse() -> None:
	assert stringify_message(parse_expr('`a${"lit"}b`')) == "alitb"
	assert stringify_message(parse_expr("`a${`in`}b`")) == "ainb"


def test_concatenation() -> None:
	assert stringify_message(parse_expr('"x" + "y"')) == "xy"
	assert stringify_message(parse_expr('ident + "y"')) == "%sy"
	assert stringify_message(parse_expr('"a" + b + `c${d}`')) == "a%sc%s"


def test_every_binary_operator_is_read_as_concatenation() -> None:
	assert stringify_message(parse_expr('"n=" + 1 * 2')) == "n=%s%s"
	assert stringify_message(parse_expr('"a" - "b"')) == "ab"


@pytest.mark.parametrize(
	"src",
	[
		"err",
		"err.message",
		"format(msg)",
		"42",
		"null",
		'("wrapped")',
		'cond ? "a" : "b"',
		'["a"]',
		'new Error("inner")',
	],
)
def test_other_shapes_are_opaque(src: str) -> None:
	assert stringify_message(parse_expr(src)) == PLACEHOLDER
