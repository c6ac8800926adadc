# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error-code pass: attach a stable code to every `new Error(message, ...)`.

The walk is post-order over the dataclass fields of the AST and mutates the
tree in place. A matched site

	new Error(`Failed to fetch user ${id}`)

is replaced by

	Object.assign(new Error(`Failed to fetch user ${id}`), { __NEXT_ERROR_CODE: "E<commit><hash>" })

which keeps the constructor, its arguments and their evaluation order, and
returns the same error object with the extra property set.

Only `new` with the bare `Error` identifier and at least one argument
matches. Sites already in wrapper form are left alone, so running the pass
twice changes nothing.

Because children are rewritten before their parent, a construction nested
in another construction's message argument is already a wrapper when the
outer message is stringified and shows up there as a placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import List, Optional

from errstamp.core.diagnostics import Diagnostic
from errstamp.core.error_codes import ERROR_CODE_PROPERTY
from errstamp.core.span import Span
from errstamp.parser import ast

from .codegen import ErrorCodeGenerator
from .config import TransformConfig
from .errors import ErrorCodeError
from .registry import RegistryGateway, open_registry
from .stringify import stringify_message

logger = logging.getLogger(__name__)

ERROR_CONSTRUCTOR = "Error"


@dataclass(frozen=True)
class AssignedCode:
	code: str
	key: str
	message: str
	occurrence_count: int
	line: int
	column: int

	def to_dict(self) -> dict:
		return {
			"code": self.code,
			"key": self.key,
			"message": self.message,
			"occurrence_count": self.occurrence_count,
			"line": self.line,
			"column": self.column,
		}


@dataclass
class PassResult:
	"""
	Outcome of the pass over one compilation unit.

	On failure `program` is None and `error` holds the fatal error; the tree
	handed to the pass may be partially rewritten and must be discarded.
	"""

	program: Optional[ast.Program]
	codes: List[AssignedCode] = field(default_factory=list)
	error: Optional[ErrorCodeError] = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def diagnostics(self) -> List[Diagnostic]:
		if self.error is None:
			return []
		return [
			Diagnostic(
				message=self.error.message,
				code=self.error.reason_code,
				phase="errcode",
				span=Span(file=self.error.file_path),
			)
		]


def is_error_site(node: ast.Node) -> bool:
	return (
		isinstance(node, ast.New)
		and isinstance(node.callee, ast.Identifier)
		and node.callee.name == ERROR_CONSTRUCTOR
		and bool(node.args)
	)


def is_wrapped_site(node: ast.Node) -> bool:
	"""`Object.assign(new Error(...), { __NEXT_ERROR_CODE: ... })`."""
	if not isinstance(node, ast.Call) or len(node.args) != 2:
		return False
	callee = node.callee
	if not (
		isinstance(callee, ast.Member)
		and callee.prop == "assign"
		and isinstance(callee.obj, ast.Identifier)
		and callee.obj.name == "Object"
	):
		return False
	target, extra = node.args
	if not is_error_site(target) or not isinstance(extra, ast.ObjectLiteral):
		return False
	return any(
		isinstance(p, ast.Property) and p.key == ERROR_CODE_PROPERTY
		for p in extra.properties
	)


class ErrorCodeRewriter:
	"""Post-order rewriter for one compilation unit."""

	def __init__(self, generator: ErrorCodeGenerator) -> None:
		self.generator = generator
		self.assigned: List[AssignedCode] = []

	def rewrite_program(self, program: ast.Program) -> ast.Program:
		program.body = [self.visit(stmt) for stmt in program.body]
		return program

	def visit(self, node: ast.Node) -> ast.Node:
		if is_wrapped_site(node):
			inner = node.args[0]
			inner.args = [self.visit(arg) for arg in inner.args]
			node.args[1] = self.visit(node.args[1])
			return node
		self._visit_children(node)
		if is_error_site(node):
			return self._wrap(node)
		return node

	def _visit_children(self, node: ast.Node) -> None:
		for f in fields(node):
			value = getattr(node, f.name)
			if isinstance(value, ast.Node):
				setattr(node, f.name, self.visit(value))
			elif isinstance(value, list):
				setattr(
					node,
					f.name,
					[self.visit(item) if isinstance(item, ast.Node) else item for item in value],
				)

	def _wrap(self, site: ast.New) -> ast.Call:
		message = stringify_message(site.args[0])
		generated = self.generator.code_for(message)
		loc = site.loc
		self.assigned.append(
			AssignedCode(
				code=generated.code,
				key=generated.key,
				message=message,
				occurrence_count=generated.record.occurrence_count,
				line=loc.line,
				column=loc.column,
			)
		)
		logger.debug(
			"%s:%d:%d: %s -> %s",
			self.generator.file_path,
			loc.line,
			loc.column,
			message,
			generated.code,
		)
		code_prop = ast.Property(
			loc=loc,
			key=ERROR_CODE_PROPERTY,
			value=ast.StringLiteral(loc=loc, value=generated.code),
		)
		return ast.Call(
			loc=loc,
			callee=ast.Member(loc=loc, obj=ast.Identifier(loc=loc, name="Object"), prop="assign"),
			args=[site, ast.ObjectLiteral(loc=loc, properties=[code_prop])],
		)


def run_error_code_pass(
	program: ast.Program,
	config: TransformConfig,
	gateway: Optional[RegistryGateway] = None,
) -> PassResult:
	"""
	Run the error-code pass over one parsed unit.

	Configuration is validated before the tree is touched. A fresh occurrence
	counter is created per call, so units never share counts. `gateway`
	overrides the registry chosen from `config` (tests pass a dry run or a
	fake here).
	"""
	try:
		config.validate()
		if gateway is None:
			gateway = open_registry(config)
		generator = ErrorCodeGenerator(
			commit_hash=config.commit_hash,
			file_path=config.file_path,
			gateway=gateway,
		)
		rewriter = ErrorCodeRewriter(generator)
		rewriter.rewrite_program(program)
	except ErrorCodeError as err:
		logger.debug("error-code pass aborted for %s: %s", config.file_path, err.reason_code)
		return PassResult(program=None, error=err)
	return PassResult(program=program, codes=rewriter.assigned)
