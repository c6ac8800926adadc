# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field

from errstamp.core.error_codes import ErrorCodeRecord, error_code_for

from .occurrences import OccurrenceCounter
from .registry import RegistryGateway


@dataclass(frozen=True)
class GeneratedCode:
	code: str
	key: str
	record: ErrorCodeRecord


@dataclass
class ErrorCodeGenerator:
	"""
	Hands out codes for the message templates of one compilation unit.

	Each call bumps the template's occurrence count, derives the code from
	`(file_path, message, occurrence)` and persists the record through the
	gateway exactly once. Gateway errors propagate unchanged.
	"""

	commit_hash: str
	file_path: str
	gateway: RegistryGateway
	occurrences: OccurrenceCounter = field(default_factory=OccurrenceCounter)

	def code_for(self, message: str) -> GeneratedCode:
		record = ErrorCodeRecord(
			file_path=self.file_path,
			error_message=message,
			occurrence_count=self.occurrences.next_occurrence(message),
		)
		code, key = error_code_for(self.commit_hash, record)
		self.gateway.persist(key, record)
		return GeneratedCode(code=code, key=key, record=record)
