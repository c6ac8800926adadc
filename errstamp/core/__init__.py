# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared building blocks: source spans, diagnostics and the stable code hash.
"""

from .diagnostics import Diagnostic
from .error_codes import (
	ERROR_CODE_PROPERTY,
	ErrorCodeRecord,
	canonical_json,
	compose_code,
	error_code_for,
	format_hash,
	record_hash,
)
from .span import Span

__all__ = [
	"ERROR_CODE_PROPERTY",
	"Diagnostic",
	"ErrorCodeRecord",
	"Span",
	"canonical_json",
	"compose_code",
	"error_code_for",
	"format_hash",
	"record_hash",
]
