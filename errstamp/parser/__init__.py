# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
JavaScript-subset front end.

`parse_source`/`parse_file` never raise on malformed input: syntax problems
come back as parser-phase diagnostics and no program.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from errstamp.core.diagnostics import Diagnostic
from errstamp.core.span import Span

from . import ast
from .parser import TemplateParseError, decode_string_literal, parse_expr, parse_program


def parse_source(source: str, filename: Optional[str] = None) -> Tuple[Optional[ast.Program], List[Diagnostic]]:
	"""
	Parse `source` into a Program.

	Returns `(program, diagnostics)`; `program` is None whenever a diagnostic
	was produced.
	"""
	try:
		return parse_program(source, filename=filename), []
	except TemplateParseError as err:
		return None, [Diagnostic(message=str(err), phase="parser", span=Span.from_loc(err.loc, file=filename))]
	except UnexpectedInput as err:
		span = Span(
			file=filename,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		lines = str(err).strip().splitlines()
		message = f"syntax error: {lines[0] if lines else err.__class__.__name__}"
		context = _error_context(source, err)
		notes = [context] if context else []
		return None, [Diagnostic(message=message, phase="parser", span=span, notes=notes)]


def parse_file(path: Path, filename: Optional[str] = None) -> Tuple[Optional[ast.Program], List[Diagnostic]]:
	return parse_source(path.read_text(encoding="utf-8"), filename=filename or str(path))


def _error_context(source: str, err: UnexpectedInput) -> str:
	try:
		return err.get_context(source).rstrip()
	except (AttributeError, IndexError, TypeError):
		return ""


__all__ = [
	"TemplateParseError",
	"ast",
	"decode_string_literal",
	"parse_expr",
	"parse_file",
	"parse_source",
	"parse_program",
]
