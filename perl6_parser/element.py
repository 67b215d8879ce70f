# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Element: the base AST node, its three shapes and the navigation links.

Every element covers `[from_, to)` of the original source and carries three
links. Links are self-loops instead of None:

  - `next is self`      → last token of the stream (`is_end`)
  - `previous is self`  → first token of the stream (`is_start`)
  - `parent is self`    → document root, or a node not attached to a tree

The linear stream (`next`/`previous`) threads leaves and contextualizers in
document order; branches are reachable through `parent`/`children`. A non-empty
branch points `next` at its first token and `previous` at the token before its
subtree, so walking forward from any node enters the stream at the right place.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterator, List, Optional, Sequence, Tuple


class NodeKind(Enum):
	"""Shape of a node class, fixed per class."""

	LEAF = auto()
	BRANCH = auto()
	# Token-like and child-bearing at once (`$( ... )`). The only dual shape.
	CONTEXTUALIZER = auto()


class Element:
	kind: Optional[NodeKind] = None
	# Present for range completeness only (here-doc bodies).
	is_semantic = True
	# Whitespace, comments and pod.
	is_visible = True

	def __init__(self, from_: int, to: int, *, origin: Optional[str] = None) -> None:
		if from_ < 0 or to < from_:
			raise ValueError(f"{type(self).__name__}: invalid range [{from_}, {to})")
		self.from_ = from_
		self.to = to
		self.factory_origin = origin
		self.next: Element = self
		self.previous: Element = self
		self.parent: Element = self

	# --- predicates -------------------------------------------------------

	@property
	def is_root(self) -> bool:
		return self.parent is self

	@property
	def is_start(self) -> bool:
		return self.previous is self

	@property
	def is_end(self) -> bool:
		return self.next is self

	@property
	def is_leaf(self) -> bool:
		return self.kind is NodeKind.LEAF

	@property
	def is_twig(self) -> bool:
		return self.kind is NodeKind.BRANCH

	@property
	def outer_to(self) -> int:
		"""End of everything this node covers, children included."""
		return self.to

	@property
	def text(self) -> str:
		raise NotImplementedError

	# --- tree helpers -----------------------------------------------------

	@property
	def child_nodes(self) -> Sequence["Element"]:
		return ()

	def root(self) -> "Element":
		node = self
		while not node.is_root:
			node = node.parent
		return node

	def walk(self) -> Iterator["Element"]:
		"""Pre-order walk over this node and its descendants."""
		yield self
		for child in self.child_nodes:
			yield from child.walk()

	def tokens(self) -> Iterator["Element"]:
		"""Members of the linear stream under this node, in document order."""
		if self.kind is not NodeKind.BRANCH:
			yield self
		for child in self.child_nodes:
			yield from child.tokens()

	def _token_span(self) -> Tuple[Optional["Element"], Optional["Element"]]:
		tokens = list(self.tokens())
		if not tokens:
			return None, None
		for left, right in zip(tokens, tokens[1:]):
			left.next = right
			right.previous = left
		return tokens[0], tokens[-1]

	# --- editing ----------------------------------------------------------

	def remove(self, *, update_ranges: bool = False) -> "Element":
		"""
		Splice this node (and its subtree) out of the stream and its parent.

		With `update_ranges`, every node after it shifts left by its width so
		the no-gap invariant still holds. The removed node is left detached:
		its own links point at itself.
		"""
		first, last = self._token_span()
		if first is not None:
			before = None if first.is_start else first.previous
			after = None if last.is_end else last.next
			if before is not None and after is not None:
				before.next = after
				after.previous = before
			elif before is not None:
				before.next = before
			elif after is not None:
				after.previous = after
			first.previous = first
			last.next = last
		root = self.root()
		ancestors = _ancestors(self)
		if not self.is_root:
			siblings = self.parent.child_nodes
			if isinstance(siblings, list) and self in siblings:
				siblings.remove(self)
			self.parent = self
		self.next = self.previous = self
		if update_ranges and root is not self:
			_shift_ranges(root, self.outer_to, self.from_ - self.outer_to, ancestors=ancestors)
		if root is not self:
			_relink(root)
		return self

	def insert_before(self, node: "Element", *, update_ranges: bool = False) -> "Element":
		"""Insert `node` immediately before this node in the stream and the parent's children."""
		first, last = node._token_span()
		mine, _ = self._token_span_in_place()
		if update_ranges:
			_place(node, self.from_, self)
		if first is not None and mine is not None:
			before = None if mine.is_start else mine.previous
			last.next = mine
			mine.previous = last
			if before is not None:
				before.next = first
				first.previous = before
			else:
				first.previous = first
		self._attach(node, offset=0)
		if not self.is_root:
			_relink(self.root())
		return node

	def insert_after(self, node: "Element", *, update_ranges: bool = False) -> "Element":
		"""Insert `node` immediately after this node in the stream and the parent's children."""
		first, last = node._token_span()
		_, mine = self._token_span_in_place()
		if update_ranges:
			_place(node, self.outer_to, self)
		if first is not None and mine is not None:
			after = None if mine.is_end else mine.next
			mine.next = first
			first.previous = mine
			if after is not None:
				last.next = after
				after.previous = last
			else:
				last.next = last
		self._attach(node, offset=1)
		if not self.is_root:
			_relink(self.root())
		return node

	def _token_span_in_place(self) -> Tuple[Optional["Element"], Optional["Element"]]:
		tokens = list(self.tokens())
		if not tokens:
			return None, None
		return tokens[0], tokens[-1]

	def _attach(self, node: "Element", *, offset: int) -> None:
		if self.is_root:
			return
		siblings = self.parent.child_nodes
		if isinstance(siblings, list):
			siblings.insert(siblings.index(self) + offset, node)
		node.parent = self.parent


def _place(node: Element, at: int, anchor: Element) -> None:
	"""Move `node` to start at `at` and open a gap of its width after `at` in anchor's tree."""
	width = node.outer_to - node.from_
	_shift_ranges(anchor.root(), at, width, ancestors=_ancestors(anchor))
	delta = at - node.from_
	for inner in node.walk():
		inner.from_ += delta
		inner.to += delta


def _relink(root: Element) -> None:
	"""Re-thread every link under `root` after a splice, the same way `linker.thread` does."""
	tail: Optional[Element] = None
	pending: List[Element] = []
	for node in root.walk():
		for child in node.child_nodes:
			child.parent = node
		if node.kind is NodeKind.BRANCH:
			node.previous = tail if tail is not None else node
			node.next = node
			pending.append(node)
			continue
		node.previous = tail if tail is not None else node
		node.next = node
		if tail is not None:
			tail.next = node
		for branch in pending:
			branch.next = node
		pending.clear()
		tail = node


def _ancestors(node: Element) -> List[Element]:
	found: List[Element] = []
	while not node.is_root:
		node = node.parent
		found.append(node)
	return found


def _shift_ranges(root: Element, at: int, delta: int, *, ancestors: Sequence[Element]) -> None:
	"""Shift every node starting at or after `at` by `delta`; resize the enclosing nodes."""
	if delta == 0:
		return
	enclosing = {id(node) for node in ancestors}
	for node in root.walk():
		if id(node) in enclosing:
			# A contextualizer's own range covers its sigil only.
			if node.kind is not NodeKind.CONTEXTUALIZER:
				node.to += delta
		elif node.from_ >= at:
			node.from_ += delta
			node.to += delta


class Leaf(Element):
	"""Atomic token; `content` is the exact source slice."""

	kind = NodeKind.LEAF

	def __init__(self, from_: int, to: int, content: str, *, origin: Optional[str] = None) -> None:
		super().__init__(from_, to, origin=origin)
		self.content = content

	@property
	def text(self) -> str:
		return self.content

	@classmethod
	def from_match(cls, m, *, origin: Optional[str] = None, **attrs):
		return cls(m.from_, m.to, m.Str, origin=origin, **attrs)

	@classmethod
	def from_match_trimmed(cls, m, *, origin: Optional[str] = None, **attrs):
		"""Like `from_match`, with surrounding whitespace cut off both content and range."""
		raw = m.Str
		lead = len(raw) - len(raw.lstrip())
		content = raw.strip()
		start = m.from_ + lead
		return cls(start, start + len(content), content, origin=origin, **attrs)

	@classmethod
	def from_int(cls, offset: int, content: str, *, origin: Optional[str] = None, **attrs):
		"""A token not backed by a match of its own (delimiters, synthesized keywords)."""
		return cls(offset, offset + len(content), content, origin=origin, **attrs)

	@classmethod
	def from_sample(cls, m, token: str, *, origin: Optional[str] = None, **attrs):
		"""The first occurrence of `token` inside the match text."""
		index = m.Str.find(token)
		if index < 0:
			raise ValueError(f"{token!r} does not occur in {m.Str!r}")
		return cls.from_int(m.from_ + index, token, origin=origin, **attrs)

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self.from_}..{self.to} {self.content!r})"


class Branch(Element):
	"""Ordered, possibly empty, sequence of children; no content of its own."""

	kind = NodeKind.BRANCH

	def __init__(
		self,
		from_: int,
		to: int,
		children: Optional[List[Element]] = None,
		*,
		origin: Optional[str] = None,
	) -> None:
		super().__init__(from_, to, origin=origin)
		self.children: List[Element] = list(children or [])

	@property
	def child_nodes(self) -> List[Element]:
		return self.children

	@property
	def text(self) -> str:
		return "".join(child.text for child in self.children)

	@classmethod
	def from_list(cls, children: Sequence[Element], *, at: Optional[int] = None, origin: Optional[str] = None):
		"""Span the children; an empty branch needs an explicit `at`."""
		if children:
			return cls(children[0].from_, children[-1].outer_to, list(children), origin=origin)
		if at is None:
			raise ValueError(f"{cls.__name__}: empty branch needs an explicit offset")
		return cls(at, at, [], origin=origin)

	def semantic_children(self) -> List[Element]:
		"""Children minus layout-only and ghost nodes."""
		return [child for child in self.children if child.is_semantic and child.is_visible]

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self.from_}..{self.to} [{len(self.children)}])"


class Contextualizer(Element):
	"""
	`$( ... )`, `@[ ... ]` and friends.

	`content` and `[from_, to)` cover the sigil only; `children` hold the
	delimited body, starting with the opening delimiter at `to`. In the stream
	the contextualizer is one token followed by its children's tokens.
	"""

	kind = NodeKind.CONTEXTUALIZER
	sigil = ""

	def __init__(
		self,
		from_: int,
		to: int,
		content: str,
		children: Optional[List[Element]] = None,
		*,
		origin: Optional[str] = None,
	) -> None:
		super().__init__(from_, to, origin=origin)
		self.content = content
		self.children: List[Element] = list(children or [])

	@property
	def child_nodes(self) -> List[Element]:
		return self.children

	@property
	def outer_to(self) -> int:
		if self.children:
			return self.children[-1].outer_to
		return self.to

	@property
	def text(self) -> str:
		return self.content + "".join(child.text for child in self.children)

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self.from_}..{self.outer_to} {self.content!r} [{len(self.children)}])"


__all__ = ["NodeKind", "Element", "Leaf", "Branch", "Contextualizer"]
