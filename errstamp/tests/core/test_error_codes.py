# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from errstamp.core.error_codes import (
	ErrorCodeRecord,
	canonical_json,
	compose_code,
	error_code_for,
	format_hash,
	record_hash,
)


def test_canonical_json_sorts_keys_without_whitespace() -> None:
	rec = ErrorCodeRecord(file_path="/test/file.js", error_message="Request failed: %s", occurrence_count=1)
	assert rec.canonical() == (
		'{"error_message":"Request failed: %s","file_path":"/test/file.js","occurrence_count":1}'
	)


def test_canonical_json_keeps_non_ascii() -> None:
	assert canonical_json({"b": "é", "a": 1}) == '{"a":1,"b":"é"}'


def test_format_hash_pads_but_never_truncates() -> None:
	assert format_hash(0) == "00000000"
	assert format_hash(0xABC) == "00000abc"
	assert format_hash(0x26C63D53D605F848) == "26c63d53d605f848"


def test_record_hash_matches_known_registry_keys() -> None:
	first = ErrorCodeRecord("/test/file.js", "Failed to fetch user %s: %s", 1)
	second = ErrorCodeRecord("/test/file.js", "Failed to fetch user %s: %s", 2)
	other = ErrorCodeRecord("/test/file.js", "Request failed: %s", 1)
	moved = ErrorCodeRecord("/other/file.js", "Request failed: %s", 1)
	assert record_hash(first) == "26c63d53d605f848"
	assert record_hash(second) == "d0976c95c4305a87"
	assert record_hash(other) == "a5151f4ce82c5c79"
	assert record_hash(moved) == "595a1876036c5997"


def test_error_code_for_composes_prefix_commit_and_hash() -> None:
	rec = ErrorCodeRecord("/test/file.js", "Failed to fetch user %s: %s", 1)
	code, digest = error_code_for("0000000000", rec)
	assert digest == "26c63d53d605f848"
	assert code == "E000000000026c63d53d605f848"
	assert compose_code("abc", digest) == "Eabc" + digest


def test_record_round_trips_through_dict() -> None:
	rec = ErrorCodeRecord("src/a.js", "boom %s", 3)
	assert ErrorCodeRecord.from_dict(rec.to_dict()) == rec


@pytest.mark.parametrize(
	"data",
	[
		[],
		{"file_path": "a.js", "error_message": "m"},
		{"file_path": "a.js", "error_message": "m", "occurrence_count": 0},
		{"file_path": "a.js", "error_message": "m", "occurrence_count": True},
		{"file_path": 1, "error_message": "m", "occurrence_count": 1},
	],
)
def test_record_from_dict_rejects_malformed(data) -> None:
	with pytest.raises(ValueError):
		ErrorCodeRecord.from_dict(data)
