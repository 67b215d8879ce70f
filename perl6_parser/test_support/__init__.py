# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hand-made match trees for tests.

Spelling out `MatchNode(orig, from_, to, hash={...})` for every capture level
of a Rakudo parse buries the interesting part of a test. `MatchBuilder`
locates each capture by its text in the source and provides chains for the
common shapes (a number term, a scalar term, a statement, a document).
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from perl6_parser.element import Element, NodeKind
from perl6_parser.linker import stream, thread, validate
from perl6_parser.match import MatchNode


class MatchBuilder:
	"""Builds matches over one source string."""

	def __init__(self, source: str) -> None:
		self.source = source

	# --- raw matches ------------------------------------------------------

	def span(self, from_: int, to: int, *, operands: Sequence[MatchNode] = (), **captures) -> MatchNode:
		return MatchNode(self.source, from_, to, hash=dict(captures), list=list(operands))

	def at(self, text: str, start: int = 0, *, operands: Sequence[MatchNode] = (), **captures) -> MatchNode:
		"""Match over the first occurrence of `text` at or after `start`."""
		index = self.source.find(text, start)
		if index < 0:
			raise ValueError(f"{text!r} not found in {self.source!r} after {start}")
		return self.span(index, index + len(text), operands=operands, **captures)

	def empty(self, offset: int) -> MatchNode:
		"""Zero-width match: a capture that is present but has no content."""
		return self.span(offset, offset)

	def around(self, *parts: MatchNode, **captures) -> MatchNode:
		"""Match spanning `parts`, first start to last end."""
		return self.span(parts[0].from_, parts[-1].to, **captures)

	# --- chains -----------------------------------------------------------

	def decint(self, text: str, start: int = 0) -> MatchNode:
		"""`integer` match of a plain decimal literal."""
		return self.at(text, start, decint=self.at(text, start))

	def number(self, text: str, start: int = 0, *, kind: str = "integer", **parts) -> MatchNode:
		"""EXPR → value → number → numish → `kind`, all over `text`."""
		if kind == "integer" and not parts:
			inner = self.decint(text, start)
		else:
			inner = self.at(text, start, **parts)
		numish = self.at(text, start, **{kind: inner})
		number = self.at(text, start, numish=numish)
		return self.at(text, start, value=self.at(text, start, number=number))

	def scalar(self, text: str, start: int = 0) -> MatchNode:
		"""EXPR → variable with sigil and name."""
		variable = self.at(text, start)
		sigil = self.span(variable.from_, variable.from_ + 1)
		name = self.span(variable.from_ + 1, variable.to)
		return self.at(text, start, variable=self.at(text, start, sigil=sigil, desigilname=name))

	def identifier(self, text: str, start: int = 0) -> MatchNode:
		return self.at(text, start)

	def longname(self, text: str, start: int = 0) -> MatchNode:
		name = self.at(text, start, identifier=self.at(text, start))
		return self.at(text, start, name=name)

	def infix(self, operator: str, left: MatchNode, right: MatchNode) -> MatchNode:
		"""EXPR with `infix` and two operands."""
		op = self.at(operator, left.to)
		return self.span(left.from_, right.to, operands=[left, right], infix=op, OPER=op)

	def call(self, name: str, expr: Optional[MatchNode], start: int = 0) -> MatchNode:
		"""`name args` listop call, e.g. `say 42`."""
		identifier = self.at(name, start)
		if expr is None:
			args = self.empty(identifier.to)
			return self.span(identifier.from_, identifier.to, identifier=identifier, args=args)
		args = self.span(identifier.to, expr.to, arglist=self.around(expr, EXPR=expr))
		return self.span(identifier.from_, expr.to, identifier=identifier, args=args)

	def statement(self, expr: MatchNode, **modifiers) -> MatchNode:
		return self.span(expr.from_, expr.to, EXPR=expr, **modifiers)

	def statementlist(self, *statements: MatchNode, from_: int = 0, to: Optional[int] = None) -> MatchNode:
		to = len(self.source) if to is None else to
		if not statements:
			return self.span(from_, to)
		return self.span(from_, to, statement=list(statements))

	def document(self, *statements: MatchNode) -> MatchNode:
		"""TOP match over the whole source."""
		statementlist = self.statementlist(*statements)
		if not statements:
			statementlist = self.empty(0)
		return self.span(0, len(self.source), statementlist=statementlist)


def check_invariants(document: Element, source: str) -> List[Element]:
	"""
	Assert the properties every built document has and return its token stream.

	  - tokens tile the source with no gap and reproduce it exactly;
	  - next/previous agree between neighbouring tokens;
	  - every child points back at its parent;
	  - threading again changes nothing.
	"""
	validate(document, source)
	tokens = list(stream(document))
	assert "".join(token.content for token in tokens) == source
	for left, right in zip(tokens, tokens[1:]):
		assert left.next is right
		assert right.previous is left
	if tokens:
		assert tokens[0].is_start
		assert tokens[-1].is_end
	for node in document.walk():
		if node.kind is not NodeKind.LEAF:
			assert all(child.parent is node for child in node.child_nodes)
	links = [(node.next, node.previous, node.parent) for node in document.walk()]
	thread(document)
	assert [(node.next, node.previous, node.parent) for node in document.walk()] == links
	assert list(stream(document)) == tokens
	return tokens


__all__ = ["MatchBuilder", "check_invariants"]
