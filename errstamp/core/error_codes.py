# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error-code derivation helpers shared by the pass, the registry and the CLI.

A code is `E<commit><hash>` where `<hash>` is the SipHash-1-3 of the canonical
JSON form of `{file_path, error_message, occurrence_count}`. Collisions are an
accepted risk; this module only computes codes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from errstamp.core.siphash import hash_str

CODE_PREFIX = "E"
MIN_HASH_DIGITS = 8
# Property carrying the code on a thrown error object.
ERROR_CODE_PROPERTY = "__NEXT_ERROR_CODE"


@dataclass(frozen=True)
class ErrorCodeRecord:
	"""The (file, message, occurrence) triple a code is derived from."""

	file_path: str
	error_message: str
	occurrence_count: int

	def to_dict(self) -> dict[str, Any]:
		return {
			"file_path": self.file_path,
			"error_message": self.error_message,
			"occurrence_count": self.occurrence_count,
		}

	@classmethod
	def from_dict(cls, data: Any) -> "ErrorCodeRecord":
		if not isinstance(data, dict):
			raise ValueError("error code record must be a JSON object")
		file_path = data.get("file_path")
		message = data.get("error_message")
		count = data.get("occurrence_count")
		if not isinstance(file_path, str) or not isinstance(message, str):
			raise ValueError("error code record needs string 'file_path' and 'error_message'")
		if not isinstance(count, int) or isinstance(count, bool) or count < 1:
			raise ValueError("error code record needs a positive integer 'occurrence_count'")
		return cls(file_path=file_path, error_message=message, occurrence_count=count)

	def canonical(self) -> str:
		return canonical_json(self.to_dict())


def canonical_json(obj: Any) -> str:
	"""
	Render JSON deterministically.

	Rules:
	- no insignificant whitespace
	- stable (sorted) key ordering
	- non-ASCII characters emitted as-is
	"""
	return json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def format_hash(value: int) -> str:
	"""Lowercase hex, at least MIN_HASH_DIGITS wide, never truncated."""
	return f"{value:0{MIN_HASH_DIGITS}x}"


def record_hash(record: ErrorCodeRecord) -> str:
	return format_hash(hash_str(record.canonical()))


def compose_code(commit_hash: str, digest: str) -> str:
	return f"{CODE_PREFIX}{commit_hash}{digest}"


def error_code_for(commit_hash: str, record: ErrorCodeRecord) -> tuple[str, str]:
	"""
	Compute the code for one record.

	Returns `(code, digest)`; the digest doubles as the registry key.
	"""
	digest = record_hash(record)
	return compose_code(commit_hash, digest), digest
