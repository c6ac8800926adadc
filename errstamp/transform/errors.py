# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorCodeError(Exception):
	"""
	A structured, serializable error raised by the error-code pass.

	Every error of this family is fatal for the compilation unit being
	processed: the pass never continues past one.
	"""

	reason_code: str
	message: str
	file_path: str | None = None
	key: str | None = None
	registry_path: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"file_path": self.file_path,
			"key": self.key,
			"registry_path": self.registry_path,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.file_path:
			parts.append(f"file_path={self.file_path}")
		if self.key:
			parts.append(f"key={self.key}")
		if self.registry_path:
			parts.append(f"registry_path={self.registry_path}")
		return " ".join(parts)


@dataclass(frozen=True)
class ConfigurationError(ErrorCodeError):
	"""Missing required field, unknown mode or undecodable configuration."""


@dataclass(frozen=True)
class RegistryMissingError(ErrorCodeError):
	"""Check mode found no persisted entry for a computed key."""


@dataclass(frozen=True)
class PersistenceIOError(ErrorCodeError):
	"""Generate mode could not write an entry; the last `OSError` is chained."""

	attempts: int = 0

	def to_dict(self) -> dict[str, Any]:
		obj = super().to_dict()
		obj["attempts"] = self.attempts
		cause = self.__cause__
		obj["cause"] = str(cause) if cause is not None else None
		return obj
