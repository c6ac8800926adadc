# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Helpers for error values that may carry an attached error code.

Thrown values reach Python either as objects (the code is an attribute) or as
decoded JSON payloads (the code is a key). Both shapes are accepted.
Error digests carry codes as `;` separated segments: `<digest>;<code>`.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from errstamp.core.error_codes import CODE_PREFIX, ERROR_CODE_PROPERTY

DIGEST_SEPARATOR = ";"

_MISSING = object()


def _lookup(value: Any, name: str) -> Any:
	if isinstance(value, Mapping):
		return value.get(name, _MISSING)
	if value is None:
		return _MISSING
	return getattr(value, name, _MISSING)


def append_error_code_to_digest(thrown: Any, digest: str) -> str:
	code = _lookup(thrown, ERROR_CODE_PROPERTY)
	if code is _MISSING:
		return digest
	return f"{digest}{DIGEST_SEPARATOR}{code}"


def extract_error_code(error: Any) -> Optional[str]:
	"""
	The code attached to `error`, else the first digest segment that looks
	like a code, else None.
	"""
	code = _lookup(error, ERROR_CODE_PROPERTY)
	if isinstance(code, str):
		return code
	digest = _lookup(error, "digest")
	if isinstance(digest, str):
		for segment in digest.split(DIGEST_SEPARATOR):
			if segment.startswith(CODE_PREFIX):
				return segment
	return None


def remove_error_code(error: Any) -> None:
	if isinstance(error, MutableMapping):
		error.pop(ERROR_CODE_PROPERTY, None)
		return
	if error is not None and hasattr(error, ERROR_CODE_PROPERTY):
		delattr(error, ERROR_CODE_PROPERTY)
