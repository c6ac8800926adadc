# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class OccurrenceCounter:
	"""
	Per-unit count of how often each message template has been seen.

	Keys are the rendered templates compared by exact string equality. One
	instance belongs to one compilation unit and is dropped with it.
	"""

	counts: Dict[str, int] = field(default_factory=dict)

	def next_occurrence(self, message: str) -> int:
		count = self.counts.get(message, 0) + 1
		self.counts[message] = count
		return count

	def __len__(self) -> int:
		return len(self.counts)
