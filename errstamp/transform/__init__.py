# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The error-code pass and its collaborators.
"""

from .codegen import ErrorCodeGenerator, GeneratedCode
from .config import MODE_CHECK, MODE_GENERATE, MODES, TransformConfig
from .errors import ConfigurationError, ErrorCodeError, PersistenceIOError, RegistryMissingError
from .occurrences import OccurrenceCounter
from .registry import (
	CheckRegistry,
	DryRunRegistry,
	GenerateRegistry,
	RegistryGateway,
	find_entry_for_code,
	open_registry,
	read_entry,
)
from .rewriter import AssignedCode, ErrorCodeRewriter, PassResult, run_error_code_pass
from .stringify import PLACEHOLDER, stringify_message

__all__ = [
	"AssignedCode",
	"CheckRegistry",
	"ConfigurationError",
	"DryRunRegistry",
	"ErrorCodeError",
	"ErrorCodeGenerator",
	"ErrorCodeRewriter",
	"GenerateRegistry",
	"GeneratedCode",
	"MODES",
	"MODE_CHECK",
	"MODE_GENERATE",
	"OccurrenceCounter",
	"PLACEHOLDER",
	"PassResult",
	"PersistenceIOError",
	"RegistryGateway",
	"RegistryMissingError",
	"TransformConfig",
	"find_entry_for_code",
	"open_registry",
	"read_entry",
	"run_error_code_pass",
	"stringify_message",
]
