# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark parse trees as grammar matches.

Any lark grammar whose rule names follow the capture names the factory
expects can feed `build`: parse with `propagate_positions=True` and wrap the
tree in `LarkMatch`. Lark rule names are lower case, so an alias table maps
them onto capture keys that are not (`expr` → `EXPR`).

Only rules become captures by default. A named token becomes a capture when
its type is listed in `aliases` (`{"SYM": "sym"}`), which keeps punctuation
out of the shape tests the way the grammar engine does.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from lark import Lark, Token, Tree

LarkNode = Union[Tree, Token]


def _span(node: LarkNode, at: int) -> Tuple[int, int]:
	"""Source range of `node`; rules that matched nothing sit at `at`."""
	if isinstance(node, Token):
		return node.start_pos, node.end_pos
	meta = node.meta
	if getattr(meta, "empty", True):
		return at, at
	return meta.start_pos, meta.end_pos


class LarkMatch:
	"""
	Read-only match over a lark `Tree` or `Token`.

	`list_keys` names captures that are always lists (a rule that may repeat
	but matched once); a key seen more than once under one rule becomes a list
	anyway. `positional` names captures that go to `list` instead of `hash`,
	for operands of operator rules.
	"""

	def __init__(
		self,
		node: LarkNode,
		orig: str,
		*,
		aliases: Optional[Mapping[str, str]] = None,
		list_keys: Iterable[str] = (),
		positional: Iterable[str] = (),
		at: int = 0,
	) -> None:
		self.node = node
		self.orig = orig
		self.aliases = dict(aliases or {})
		self.list_keys = frozenset(list_keys)
		self.positional = frozenset(positional)
		self.from_, self.to = _span(node, at)

	@property
	def Str(self) -> str:
		return self.orig[self.from_ : self.to]

	@property
	def name(self) -> str:
		if isinstance(self.node, Token):
			return self.node.type
		return str(self.node.data)

	@property
	def hash(self) -> Dict[str, Any]:
		return self._captures[0]

	@property
	def list(self) -> List["LarkMatch"]:
		return self._captures[1]

	def _wrap(self, node: LarkNode, at: int) -> "LarkMatch":
		return LarkMatch(
			node,
			self.orig,
			aliases=self.aliases,
			list_keys=self.list_keys,
			positional=self.positional,
			at=at,
		)

	@cached_property
	def _captures(self) -> Tuple[Dict[str, Any], List["LarkMatch"]]:
		named: Dict[str, Any] = {}
		operands: List[LarkMatch] = []
		if isinstance(self.node, Token):
			return named, operands
		cursor = self.from_
		for child in self.node.children:
			if isinstance(child, Token):
				cursor = child.end_pos
				if child.type not in self.aliases:
					continue
				name = child.type
			elif isinstance(child, Tree):
				name = str(child.data)
			else:
				# maybe_placeholders leaves None for a missing optional
				continue
			wrapped = self._wrap(child, cursor)
			cursor = max(cursor, wrapped.to)
			key = self.aliases.get(name, name)
			if key in self.positional:
				operands.append(wrapped)
			elif key in named:
				existing = named[key]
				named[key] = [*existing, wrapped] if isinstance(existing, list) else [existing, wrapped]
			else:
				named[key] = [wrapped] if key in self.list_keys else wrapped
		return named, operands

	def __repr__(self) -> str:
		return f"LarkMatch({self.name} {self.from_}..{self.to} {self.Str!r})"


def parse_with(parser: Lark, source: str, **kwargs) -> LarkMatch:
	"""Parse `source` with a lark parser and wrap the tree; `kwargs` go to `LarkMatch`."""
	return LarkMatch(parser.parse(source), source, **kwargs)


__all__ = ["LarkMatch", "parse_with"]
