# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Grammar match protocol and shape classification.

The factory never looks at a concrete grammar engine. It consumes anything that
quacks like a match (`from_`, `to`, `orig`, `Str`, `hash`, `list`) and, before
deciding what to build, reduces the match's named captures to a `Shape`:

  - keys whose capture has content (a non-empty match or a non-empty list);
  - keys that are present but empty (None, `[]` or a zero-width match).

Absent keys are simply not in either set. The `O` capture (operator precedence
metadata) is ignored everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

IGNORED_KEYS = frozenset({"O"})


class Match(Protocol):
	"""Accessors the factory needs from a grammar match."""

	from_: int
	to: int
	orig: str

	@property
	def Str(self) -> str: ...

	@property
	def hash(self) -> Mapping[str, Any]: ...

	@property
	def list(self) -> Sequence[Any]: ...


Capture = Union["MatchNode", List["MatchNode"], None]


@dataclass
class MatchNode:
	"""
	Plain in-memory match.

	Used by tests and by adapters that materialize another parser's output.
	`hash` and `list` mirror the grammar engine's named and positional captures.
	"""

	orig: str
	from_: int
	to: int
	hash: Dict[str, Capture] = field(default_factory=dict)
	list: List["MatchNode"] = field(default_factory=list)

	@property
	def Str(self) -> str:
		return self.orig[self.from_ : self.to]

	def __repr__(self) -> str:
		keys = ",".join(sorted(self.hash))
		return f"MatchNode({self.from_}..{self.to} {self.Str!r} {{{keys}}})"


def has_content(value: Any) -> bool:
	"""True for a non-empty match or a non-empty list of captures."""
	if value is None:
		return False
	if isinstance(value, (list, tuple)):
		return len(value) > 0
	return value.to > value.from_


@dataclass(frozen=True)
class Shape:
	"""Which named captures of one match have content and which are present but empty."""

	content: FrozenSet[str]
	empty: FrozenSet[str]

	@classmethod
	def of(cls, m: Match) -> "Shape":
		content = set()
		empty = set()
		for key, value in m.hash.items():
			if key in IGNORED_KEYS:
				continue
			if has_content(value):
				content.add(key)
			else:
				empty.add(key)
		return cls(frozenset(content), frozenset(empty))

	def is_(self, *keys: str, empty: Iterable[str] = ()) -> bool:
		"""Exactly `keys` have content and every key in `empty` is present without content."""
		if self.content != frozenset(keys):
			return False
		return all(key in self.empty for key in empty)

	def is_any(self, *alternatives: Sequence[str]) -> bool:
		return any(self.is_(*keys) for keys in alternatives)

	def fits(self, required: Iterable[str], optional: Iterable[str] = ()) -> bool:
		"""All of `required` have content and nothing outside `required | optional` does."""
		required = frozenset(required)
		return required <= self.content <= required | frozenset(optional)

	def has(self, key: str) -> bool:
		return key in self.content

	def present(self, key: str) -> bool:
		return key in self.content or key in self.empty

	def __str__(self) -> str:
		return f"content={sorted(self.content)} empty={sorted(self.empty)}"


def captures(m: Match, key: str) -> List[Any]:
	"""Normalize a capture to a list: absent or None gives [], a single match gives [m]."""
	value = m.hash.get(key)
	if value is None:
		return []
	if isinstance(value, (list, tuple)):
		return list(value)
	return [value]


def capture(m: Match, key: str) -> Optional[Any]:
	"""The single capture under `key` (the first one if the grammar produced a list)."""
	found = captures(m, key)
	return found[0] if found else None


__all__ = ["Match", "MatchNode", "Shape", "has_content", "captures", "capture", "IGNORED_KEYS"]
