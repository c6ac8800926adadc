# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from errstamp.transform.config import DEFAULT_REGISTRY_DIR, TransformConfig
from errstamp.transform.errors import ConfigurationError


def test_from_mapping_reads_plugin_keys() -> None:
	cfg = TransformConfig.from_mapping(
		{"commitHash": "abc", "filePath": "src/a.js", "mode": "check", "registryDir": "codes", "dryRun": True}
	)
	assert cfg.commit_hash == "abc"
	assert cfg.file_path == "src/a.js"
	assert cfg.mode == "check"
	assert cfg.registry_dir == Path("codes")
	assert cfg.dry_run is True


def test_from_mapping_defaults() -> None:
	cfg = TransformConfig.from_mapping({"commitHash": "abc", "filePath": "a.js", "mode": "generate"})
	assert cfg.registry_dir == DEFAULT_REGISTRY_DIR
	assert cfg.dry_run is False


@pytest.mark.parametrize("missing", ["commitHash", "filePath", "mode"])
def test_missing_field_is_named(missing: str) -> None:
	data = {"commitHash": "abc", "filePath": "a.js", "mode": "generate"}
	del data[missing]
	with pytest.raises(ConfigurationError) as excinfo:
		TransformConfig.from_mapping(data)
	assert excinfo.value.reason_code == "E-CONFIG-MISSING-FIELD"
	assert missing in excinfo.value.message


def test_unknown_mode_is_rejected_even_for_dry_runs() -> None:
	with pytest.raises(ConfigurationError) as excinfo:
		TransformConfig.from_mapping({"commitHash": "abc", "filePath": "a.js", "mode": "verify", "dryRun": True})
	assert excinfo.value.reason_code == "E-CONFIG-MODE"
	assert "verify" in str(excinfo.value)


def test_validate_catches_direct_construction() -> None:
	with pytest.raises(ConfigurationError):
		TransformConfig(commit_hash="abc", file_path="a.js", mode="Generate").validate()
	with pytest.raises(ConfigurationError) as excinfo:
		TransformConfig(commit_hash=None, file_path="a.js", mode="check").validate()
	assert excinfo.value.reason_code == "E-CONFIG-MISSING-FIELD"
	assert "'commitHash'" in excinfo.value.message


def test_empty_commit_and_path_are_present() -> None:
	TransformConfig(commit_hash="", file_path="", mode="generate").validate()
	cfg = TransformConfig.from_mapping({"commitHash": "", "filePath": "a.js", "mode": "check"})
	assert cfg.commit_hash == ""


def test_from_json_wraps_decode_errors() -> None:
	with pytest.raises(ConfigurationError) as excinfo:
		TransformConfig.from_json("{not json")
	assert excinfo.value.reason_code == "E-CONFIG-INVALID"
	assert isinstance(excinfo.value.__cause__, ValueError)


def test_from_json_rejects_non_objects_and_bad_types() -> None:
	with pytest.raises(ConfigurationError):
		TransformConfig.from_json("[1, 2]")
	with pytest.raises(ConfigurationError):
		TransformConfig.from_json('{"commitHash": 1, "filePath": "a.js", "mode": "check"}')
	with pytest.raises(ConfigurationError):
		TransformConfig.from_json('{"commitHash": "c", "filePath": "a.js", "mode": "check", "dryRun": "yes"}')


def test_to_dict_round_trips() -> None:
	cfg = TransformConfig(commit_hash="c", file_path="a.js", mode="check", registry_dir=Path("r"), dry_run=True)
	assert TransformConfig.from_mapping(cfg.to_dict()) == cfg
