# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from types import SimpleNamespace

from errstamp.telemetry import (
	ERROR_CODE_PROPERTY,
	append_error_code_to_digest,
	extract_error_code,
	remove_error_code,
)


def _coded(code: str) -> SimpleNamespace:
	err = SimpleNamespace(message="boom")
	setattr(err, ERROR_CODE_PROPERTY, code)
	return err


def test_append_to_digest_only_when_coded() -> None:
	assert append_error_code_to_digest(_coded("E12"), "123") == "123;E12"
	assert append_error_code_to_digest({ERROR_CODE_PROPERTY: "E9"}, "d") == "d;E9"
	assert append_error_code_to_digest(SimpleNamespace(), "123") == "123"
	assert append_error_code_to_digest(None, "123") == "123"
	assert append_error_code_to_digest("text", "123") == "123"


def test_extract_prefers_property_then_digest() -> None:
	assert extract_error_code(_coded("E42")) == "E42"
	assert extract_error_code({"digest": "2918;E7;x"}) == "E7"
	assert extract_error_code(SimpleNamespace(digest="NEXT_REDIRECT;E3")) == "E3"
	assert extract_error_code({"digest": "123;456"}) is None
	assert extract_error_code({ERROR_CODE_PROPERTY: 5, "digest": "1;E8"}) == "E8"
	assert extract_error_code(None) is None


def test_remove_error_code() -> None:
	err = _coded("E1")
	remove_error_code(err)
	assert not hasattr(err, ERROR_CODE_PROPERTY)
	payload = {ERROR_CODE_PROPERTY: "E1", "message": "m"}
	remove_error_code(payload)
	assert payload == {"message": "m"}
	remove_error_code(SimpleNamespace())
	remove_error_code(None)
