# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from errstamp.core.siphash import MASK64, STR_TERMINATOR, hash_str, sip_hash13


def test_hash_str_known_vectors() -> None:
	assert hash_str("") == 0x30406EA523C53DEF
	assert hash_str("hello") == 0xE037876B880B8ED9
	assert hash_str("café \U0001F600 abcdefghijklmnop") == 0xC5305B69C4D7059A


def test_hash_str_appends_terminator() -> None:
	assert hash_str("hello") == sip_hash13("hello".encode("utf-8") + STR_TERMINATOR)
	assert hash_str("hello") != sip_hash13(b"hello")


def test_sip_hash13_is_64_bit_and_key_sensitive() -> None:
	data = b"error codes"
	h = sip_hash13(data)
	assert 0 <= h <= MASK64
	assert sip_hash13(data, 1, 0) != h
	assert sip_hash13(data, 0, 1) != h


def test_hash_depends_on_every_byte_length() -> None:
	# Exercise tail handling for every length modulo 8.
	seen = {sip_hash13(b"x" * n) for n in range(17)}
	assert len(seen) == 17
