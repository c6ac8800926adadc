# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Pure-Python SipHash-1-3 for deterministic error-code derivation.

SipHash-1-3 with zero keys is the hasher existing error-code registries were
generated with, so codes computed here match those registries byte for byte.
One compression round and three finalization rounds, 64-bit modular
arithmetic.
"""

from __future__ import annotations

MASK64 = 0xFFFFFFFFFFFFFFFF

# "somepseudorandomlygeneratedbytes"
INIT0 = 0x736F6D6570736575
INIT1 = 0x646F72616E646F6D
INIT2 = 0x6C7967656E657261
INIT3 = 0x7465646279746573

C_ROUNDS = 1
D_ROUNDS = 3

# Written after the bytes of every hashed string.
STR_TERMINATOR = b"\xff"


def _rotl(x: int, r: int) -> int:
	return ((x << r) & MASK64) | (x >> (64 - r))


def _sip_round(v0: int, v1: int, v2: int, v3: int) -> tuple[int, int, int, int]:
	v0 = (v0 + v1) & MASK64
	v1 = _rotl(v1, 13)
	v1 ^= v0
	v0 = _rotl(v0, 32)
	v2 = (v2 + v3) & MASK64
	v3 = _rotl(v3, 16)
	v3 ^= v2
	v0 = (v0 + v3) & MASK64
	v3 = _rotl(v3, 21)
	v3 ^= v0
	v2 = (v2 + v1) & MASK64
	v1 = _rotl(v1, 17)
	v1 ^= v2
	v2 = _rotl(v2, 32)
	return v0, v1, v2, v3


def sip_hash13(data: bytes, k0: int = 0, k1: int = 0) -> int:
	"""Compute SipHash-1-3 of `data` under the 128-bit key (k0, k1)."""
	v0 = (k0 ^ INIT0) & MASK64
	v1 = (k1 ^ INIT1) & MASK64
	v2 = (k0 ^ INIT2) & MASK64
	v3 = (k1 ^ INIT3) & MASK64

	length = len(data)
	tail_start = length - (length % 8)
	for idx in range(0, tail_start, 8):
		m = int.from_bytes(data[idx:idx + 8], "little")
		v3 ^= m
		for _ in range(C_ROUNDS):
			v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
		v0 ^= m

	# Last block: remaining bytes plus the message length in the top byte.
	b = ((length & 0xFF) << 56) | int.from_bytes(data[tail_start:], "little")
	v3 ^= b
	for _ in range(C_ROUNDS):
		v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
	v0 ^= b

	v2 ^= 0xFF
	for _ in range(D_ROUNDS):
		v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
	return (v0 ^ v1 ^ v2 ^ v3) & MASK64


def hash_str(text: str) -> int:
	"""Hash a string value: UTF-8 bytes plus the 0xff terminator, zero key."""
	return sip_hash13(text.encode("utf-8") + STR_TERMINATOR)
