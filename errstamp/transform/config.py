# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-unit configuration of the error-code pass.

The build orchestration hands the pass a small record naming the commit, the
logical path of the unit and the registry mode. It arrives either as keyword
arguments or as the plugin style mapping (`commitHash`, `filePath`, `mode`,
optional `registryDir` and `dryRun`).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigurationError

MODE_CHECK = "check"
MODE_GENERATE = "generate"
MODES = (MODE_CHECK, MODE_GENERATE)

DEFAULT_REGISTRY_DIR = Path("error_codes")

_REQUIRED_KEYS = (
	("commitHash", "commit_hash"),
	("filePath", "file_path"),
	("mode", "mode"),
)


@dataclass(frozen=True)
class TransformConfig:
	commit_hash: str
	file_path: str
	mode: str
	registry_dir: Path = DEFAULT_REGISTRY_DIR
	dry_run: bool = False

	@staticmethod
	def from_mapping(data: Mapping[str, Any]) -> "TransformConfig":
		if not isinstance(data, Mapping):
			raise ConfigurationError(
				reason_code="E-CONFIG-INVALID",
				message=f"configuration must be an object, got {type(data).__name__}",
			)
		values: dict[str, str] = {}
		for key, attr in _REQUIRED_KEYS:
			value = data.get(key)
			if value is None:
				raise ConfigurationError(
					reason_code="E-CONFIG-MISSING-FIELD",
					message=f"missing required configuration field '{key}'",
				)
			if not isinstance(value, str):
				raise ConfigurationError(
					reason_code="E-CONFIG-INVALID",
					message=f"configuration field '{key}' must be a string",
				)
			values[attr] = value
		registry_dir = data.get("registryDir")
		dry_run = data.get("dryRun", False)
		if not isinstance(dry_run, bool):
			raise ConfigurationError(
				reason_code="E-CONFIG-INVALID",
				message="configuration field 'dryRun' must be a boolean",
			)
		cfg = TransformConfig(
			registry_dir=Path(registry_dir) if registry_dir is not None else DEFAULT_REGISTRY_DIR,
			dry_run=dry_run,
			**values,
		)
		cfg.validate()
		return cfg

	@staticmethod
	def from_json(text: str) -> "TransformConfig":
		try:
			obj = json.loads(text)
		except json.JSONDecodeError as err:
			raise ConfigurationError(
				reason_code="E-CONFIG-INVALID",
				message=f"configuration is not valid JSON: {err}",
			) from err
		return TransformConfig.from_mapping(obj)

	def validate(self) -> None:
		"""
		Reject unusable configurations before any tree is touched.

		The mode is checked even for dry runs; an unknown mode is never
		silently treated as one of the known ones.
		"""
		for key, attr in _REQUIRED_KEYS:
			if getattr(self, attr) is None:
				raise ConfigurationError(
					reason_code="E-CONFIG-MISSING-FIELD",
					message=f"missing required configuration field '{key}'",
					file_path=self.file_path or None,
				)
		if self.mode not in MODES:
			raise ConfigurationError(
				reason_code="E-CONFIG-MODE",
				message=f"unknown mode '{self.mode}' (expected one of: {', '.join(MODES)})",
				file_path=self.file_path,
			)

	def to_dict(self) -> dict[str, Any]:
		return {
			"commitHash": self.commit_hash,
			"filePath": self.file_path,
			"mode": self.mode,
			"registryDir": str(self.registry_dir),
			"dryRun": self.dry_run,
		}
