# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Gap filling and threading over a freshly built element tree.

Pipeline placement:
  factory (raw tree) → fill_gaps (layout leaves) → thread (links) → client

`fill_gaps` works bottom-up so a parent only ever compares finished child
boundaries, and walks each child list back to front so inserting tokens never
shifts an index that is still to be visited.

`thread` is a pure function of tree shape: it can be run again after edits and
produces the same links for the same tree.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Mapping, Optional

from perl6_parser.element import Element, NodeKind
from perl6_parser.errors import InternalConsistencyError
from perl6_parser.tokenizer import string_to_tokens

logger = logging.getLogger(__name__)


class GapFiller:
	"""Inserts whitespace, comment, pod and here-doc leaves between siblings."""

	def __init__(self, orig: str, here_docs: Optional[Mapping[int, int]] = None, *, strict: bool = False) -> None:
		self.orig = orig
		self.here_docs = here_docs or {}
		self.strict = strict

	def fill(self, node: Element) -> None:
		children = node.child_nodes
		if not children:
			return
		for child in children:
			self.fill(child)
		for index in range(len(children) - 1, 0, -1):
			self._fill_between(children, index, children[index - 1].outer_to, children[index].from_)
		if node.kind is NodeKind.BRANCH:
			self._fill_between(children, len(children), children[-1].outer_to, node.to)
			self._fill_between(children, 0, node.from_, children[0].from_)

	def _fill_between(self, children: List[Element], index: int, start: int, end: int) -> None:
		if start == end:
			return
		if start < 0 or end < 0 or start > end:
			message = f"Skipping malformed gap [{start}, {end})"
			if self.strict:
				raise InternalConsistencyError(message)
			logger.warning(message)
			return
		tokens = string_to_tokens(
			start,
			self.orig[start:end],
			self.here_docs,
			strict=self.strict,
			line_start=start == 0 or self.orig[start - 1] == "\n",
		)
		children[index:index] = tokens


def fill_gaps(
	node: Element,
	orig: str,
	here_docs: Optional[Mapping[int, int]] = None,
	*,
	strict: bool = False,
) -> Element:
	GapFiller(orig, here_docs, strict=strict).fill(node)
	return node


class _Threader:
	def __init__(self) -> None:
		self.tail: Optional[Element] = None
		# Branches waiting to learn which token follows them.
		self.pending: List[Element] = []

	def link(self, token: Element) -> None:
		if self.tail is None:
			token.previous = token
		else:
			self.tail.next = token
			token.previous = self.tail
		token.next = token
		for branch in self.pending:
			branch.next = token
		self.pending.clear()
		self.tail = token

	def visit(self, node: Element) -> None:
		kind = node.kind
		if kind is NodeKind.LEAF:
			self.link(node)
			return
		if kind is NodeKind.CONTEXTUALIZER:
			self.link(node)
		elif kind is NodeKind.BRANCH:
			node.previous = self.tail if self.tail is not None else node
			node.next = node
			self.pending.append(node)
		else:
			raise InternalConsistencyError(f"{type(node).__name__} at {node.from_} is neither leaf nor branch")
		for child in node.child_nodes:
			child.parent = node
		for child in node.child_nodes:
			self.visit(child)


def thread(root: Element) -> Element:
	"""Set `parent` for every child and link all tokens into one stream."""
	root.parent = root
	_Threader().visit(root)
	return root


def stream(root: Element) -> Iterator[Element]:
	"""Tokens of the linear stream, first to last."""
	node = next(root.tokens(), None)
	while node is not None:
		yield node
		node = None if node.is_end else node.next


def validate(root: Element, source: str) -> None:
	"""Raise InternalConsistencyError unless the stream covers `source` without gaps."""
	position = 0
	for token in stream(root):
		if token.from_ != position:
			raise InternalConsistencyError(f"{token!r} starts at {token.from_}, expected {position}")
		if token.content != source[token.from_ : token.to]:
			raise InternalConsistencyError(f"{token!r} does not match the source text")
		position = token.to
	if position != len(source):
		raise InternalConsistencyError(f"Stream ends at {position}, source has {len(source)} characters")


__all__ = ["GapFiller", "fill_gaps", "thread", "stream", "validate"]
