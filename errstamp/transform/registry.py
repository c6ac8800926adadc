# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
On-disk error-code registry.

One JSON file per key: `<root>/<key>.json` holds the canonical record the key
was hashed from. The pass talks to the registry through a `RegistryGateway`:

- generate: create the directory and (over)write the entry, retrying
  failed writes up to `WRITE_ATTEMPTS` times in total;
- check: require the entry to exist (content is not re-validated);
- dry run: no filesystem access at all.

Concurrent generate runs may write the same key; the last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

from errstamp.core.error_codes import CODE_PREFIX, MIN_HASH_DIGITS, ErrorCodeRecord

from .config import MODE_CHECK, MODE_GENERATE, TransformConfig
from .errors import ConfigurationError, PersistenceIOError, RegistryMissingError

logger = logging.getLogger(__name__)

WRITE_ATTEMPTS = 3
ENTRY_SUFFIX = ".json"

_KEY_RE = re.compile(r"[0-9a-f]{%d,}" % MIN_HASH_DIGITS)


def entry_path(root: Path, key: str) -> Path:
	return Path(root) / f"{key}{ENTRY_SUFFIX}"


def remediation_message(path: Path) -> str:
	return (
		f"registry entry {path} does not exist.\n\n"
		"REQUIRED ACTION:\n"
		"1. Run the build with mode 'generate'\n"
		f"2. Commit all file changes under {path.parent}\n\n"
		"Error codes must stay consistent with the committed registry."
	)


class RegistryGateway(ABC):
	"""Where computed codes are persisted or verified."""

	mode: str = ""

	@abstractmethod
	def persist(self, key: str, record: ErrorCodeRecord) -> None:
		"""Record (or verify) the entry for `key`; raise `ErrorCodeError` on failure."""


class DryRunRegistry(RegistryGateway):
	mode = "dry-run"

	def persist(self, key: str, record: ErrorCodeRecord) -> None:
		return None


class CheckRegistry(RegistryGateway):
	mode = MODE_CHECK

	def __init__(self, root: Path) -> None:
		self.root = Path(root)

	def persist(self, key: str, record: ErrorCodeRecord) -> None:
		path = entry_path(self.root, key)
		if not path.is_file():
			raise RegistryMissingError(
				reason_code="E-REGISTRY-MISSING",
				message=remediation_message(path),
				file_path=record.file_path,
				key=key,
				registry_path=str(path),
			)
		logger.debug("registry entry %s present for %s", key, record.file_path)


class GenerateRegistry(RegistryGateway):
	mode = MODE_GENERATE

	def __init__(self, root: Path, attempts: int = WRITE_ATTEMPTS) -> None:
		if attempts < 1:
			raise ValueError("attempts must be >= 1")
		self.root = Path(root)
		self.attempts = attempts

	def persist(self, key: str, record: ErrorCodeRecord) -> None:
		path = entry_path(self.root, key)
		try:
			self.root.mkdir(parents=True, exist_ok=True)
		except OSError as err:
			raise PersistenceIOError(
				reason_code="E-REGISTRY-WRITE",
				message=f"failed to create registry directory {self.root}: {err}",
				file_path=record.file_path,
				key=key,
				registry_path=str(self.root),
			) from err

		text = record.canonical()
		last_err: OSError | None = None
		for attempt in range(1, self.attempts + 1):
			try:
				self._write_entry(path, text)
			except OSError as err:
				last_err = err
				logger.warning("writing %s failed (attempt %d/%d): %s", path, attempt, self.attempts, err)
				continue
			logger.debug("wrote registry entry %s for %s", key, record.file_path)
			return
		raise PersistenceIOError(
			reason_code="E-REGISTRY-WRITE",
			message=f"failed to write registry entry after {self.attempts} attempts: {last_err}",
			file_path=record.file_path,
			key=key,
			registry_path=str(path),
			attempts=self.attempts,
		) from last_err

	def _write_entry(self, path: Path, text: str) -> None:
		tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
		try:
			tmp.write_text(text, encoding="utf-8")
			os.replace(tmp, path)
		except OSError:
			tmp.unlink(missing_ok=True)
			raise


def open_registry(config: TransformConfig) -> RegistryGateway:
	config.validate()
	if config.dry_run:
		return DryRunRegistry()
	if config.mode == MODE_CHECK:
		return CheckRegistry(config.registry_dir)
	if config.mode == MODE_GENERATE:
		return GenerateRegistry(config.registry_dir)
	raise ConfigurationError(reason_code="E-CONFIG-MODE", message=f"unknown mode '{config.mode}'")


def read_entry(root: Path, key: str) -> ErrorCodeRecord:
	"""
	Load one persisted entry.

	Raises `RegistryMissingError` when there is no entry for `key` and
	`ValueError` when the file does not hold a valid record.
	"""
	path = entry_path(root, key)
	try:
		text = path.read_text(encoding="utf-8")
	except FileNotFoundError as err:
		raise RegistryMissingError(
			reason_code="E-REGISTRY-MISSING",
			message=f"no registry entry for key {key}",
			key=key,
			registry_path=str(path),
		) from err
	return ErrorCodeRecord.from_dict(json.loads(text))


def find_entry_for_code(root: Path, code: str) -> tuple[str, ErrorCodeRecord] | None:
	"""
	Resolve a full code (`E<commit><key>`) to its registry entry.

	The commit part has no fixed length, so the entry is the registry key the
	code ends with; the longest such key wins.
	"""
	if not code.startswith(CODE_PREFIX):
		return None
	body = code[len(CODE_PREFIX):]
	root = Path(root)
	if not root.is_dir():
		return None
	keys = [
		p.name[: -len(ENTRY_SUFFIX)]
		for p in root.iterdir()
		if p.name.endswith(ENTRY_SUFFIX) and p.is_file()
	]
	matches = [k for k in keys if _KEY_RE.fullmatch(k) and body.endswith(k)]
	if not matches:
		return None
	key = max(matches, key=len)
	return key, read_entry(root, key)
