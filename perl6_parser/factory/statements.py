# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Statement-level productions: statement lists, control statements, blocks.

A statement list yields one `Statement` branch per statement; the `;` after a
statement is not captured by the grammar and is picked up from the source.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from perl6_parser.factory.base import Elements, keyword, production
from perl6_parser.match import Match, Shape
from perl6_parser.nodes import (
	BalancedEnter,
	BalancedExit,
	Bareword,
	Block,
	BlockEnter,
	BlockExit,
	CircumfixOperator,
	Label,
	PostCircumfixOperator,
	PrefixOperator,
	Semicolon,
	Statement,
)

_SEMICOLON = re.compile(r"\s*;")
_LOOP_PARTS = ("e1", "e2", "e3")


class StatementsMixin:
	@production
	def _TOP(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("statementlist"):
			return self._statementlist(self.get(m, "statementlist"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _statementlist(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("statement"):
			return self.statements(self.each(m, "statement"), len(self.orig))
		if shape.is_():
			return []
		self.unhandled(m)

	def statements(self, statements: Sequence[Match], end: int) -> Elements:
		"""Wrap each statement and the `;` right after it in a `Statement`."""
		result: Elements = []
		for index, statement in enumerate(statements):
			nodes = self._statement(statement)
			limit = statements[index + 1].from_ if index + 1 < len(statements) else end
			cursor = nodes[-1].outer_to if nodes else statement.from_
			semi = _SEMICOLON.match(self.orig, cursor, max(limit, cursor))
			if semi:
				nodes.append(self.at(Semicolon, semi.end() - 1, ";"))
			if nodes:
				result.append(self.branch(Statement, nodes))
		return result

	@production
	def _statement(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("label", "statement"):
			return [*self._label(self.get(m, "label")), *self._statement(self.get(m, "statement"))]
		if shape.is_("statement_control"):
			return self._statement_control(self.get(m, "statement_control"))
		if shape.fits(("EXPR",), ("statement_mod_cond", "statement_mod_loop")):
			nodes = self._EXPR(self.get(m, "EXPR"))
			for key, modifier in self.each_of(m, "statement_mod_cond", "statement_mod_loop"):
				nodes.extend(self.dispatch(key, modifier))
			return nodes
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _label(self, m: Match) -> Elements:
		if Shape.of(m).is_("identifier"):
			return [self.trimmed(Label, m)]
		self.unhandled(m)

	@production
	def _statement_control(self, m: Match) -> Elements:
		shape = Shape.of(m)
		sym = self.get(m, "sym")
		if shape.fits(("sym", "xblock"), ("else",)):
			return self._conditional(m, shape)
		if all(shape.present(key) for key in _LOOP_PARTS) and shape.fits(("sym", "block"), _LOOP_PARTS):
			return self._c_style_loop(m, shape)
		if shape.is_("sym", "block"):
			return [self.trimmed(Bareword, sym), *self._block(self.get(m, "block"))]
		if shape.is_("sym", "block", "wu", "EXPR"):
			nodes: Elements = []
			for key, part in self.each_of(m, "sym", "block", "wu", "EXPR"):
				if key in ("sym", "wu"):
					nodes.append(self.trimmed(Bareword, part))
				else:
					nodes.extend(self.dispatch(key, part))
			return nodes
		if shape.fits(("sym", "module_name"), ("arglist",)):
			nodes = [self.trimmed(Bareword, sym), *self._module_name(self.get(m, "module_name"))]
			if shape.has("arglist"):
				nodes.extend(self._arglist(self.get(m, "arglist")))
			return nodes
		if shape.is_("sym", "version"):
			return [self.trimmed(Bareword, sym), *self._version(self.get(m, "version"))]
		if shape.is_("sym", "EXPR"):
			return [self.trimmed(Bareword, sym), *self._EXPR(self.get(m, "EXPR"))]
		self.unhandled(m)

	def _conditional(self, m: Match, shape: Shape) -> Elements:
		"""`if`/`with` chains; `elsif`/`orwith` come as a list of `sym` captures."""
		syms = self.each(m, "sym")
		xblocks = self.each(m, "xblock")
		nodes: Elements = []
		for index, xblock in enumerate(xblocks):
			if index < len(syms):
				nodes.append(self.trimmed(Bareword, syms[index]))
			else:
				nodes.append(self.expect(Bareword, nodes[-1].outer_to, xblock.from_, keyword("elsif", "orwith"), m))
			nodes.extend(self._xblock(xblock))
		if shape.has("else"):
			otherwise = self.get(m, "else")
			nodes.append(self.expect(Bareword, nodes[-1].outer_to, otherwise.from_, keyword("else"), m))
			nodes.extend(self._pblock(otherwise))
		return nodes

	def _c_style_loop(self, m: Match, shape: Shape) -> Elements:
		sym = self.get(m, "sym")
		block = self.get(m, "block")
		opening = self.expect(BalancedEnter, sym.to, block.from_, "(", m)
		inner: Elements = []
		cursor = opening.to
		for index, key in enumerate(_LOOP_PARTS):
			if shape.has(key):
				built = self._EXPR(self.get(m, key))
				inner.extend(built)
				if built:
					cursor = built[-1].outer_to
			if index < len(_LOOP_PARTS) - 1:
				semi = self.expect(Semicolon, cursor, block.from_, ";", m)
				inner.append(semi)
				cursor = semi.to
		closing = self.expect(BalancedExit, cursor, block.from_, ")", m)
		parens = self.branch(CircumfixOperator, [opening, *inner, closing])
		return [self.trimmed(Bareword, sym), parens, *self._block(block)]

	@production
	def _xblock(self, m: Match) -> Elements:
		if Shape.of(m).is_("EXPR", "pblock"):
			return [*self._EXPR(self.get(m, "EXPR")), *self._pblock(self.get(m, "pblock"))]
		self.unhandled(m)

	@production
	def _pblock(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("lambda", "signature", "blockoid"):
			return [
				self.trimmed(PrefixOperator, self.get(m, "lambda")),
				*self._signature(self.get(m, "signature")),
				*self._blockoid(self.get(m, "blockoid")),
			]
		if shape.is_("lambda", "blockoid"):
			return [self.trimmed(PrefixOperator, self.get(m, "lambda")), *self._blockoid(self.get(m, "blockoid"))]
		if shape.is_("blockoid"):
			return self._blockoid(self.get(m, "blockoid"))
		self.unhandled(m)

	@production
	def _block(self, m: Match) -> Elements:
		if Shape.of(m).is_("blockoid"):
			return self._blockoid(self.get(m, "blockoid"))
		self.unhandled(m)

	@production
	def _blockoid(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("statementlist"):
			children = self._statementlist(self.get(m, "statementlist"))
			return [self.balanced(Block, m, children, front="{", back="}", enter=BlockEnter, exit=BlockExit)]
		if shape.is_():
			return [self.balanced(Block, m, [], front="{", back="}", enter=BlockEnter, exit=BlockExit)]
		self.unhandled(m)

	@production
	def _statement_mod_cond(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "modifier_expr"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._modifier_expr(self.get(m, "modifier_expr"))]
		self.unhandled(m)

	@production
	def _statement_mod_loop(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "smexpr"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._smexpr(self.get(m, "smexpr"))]
		self.unhandled(m)

	@production
	def _modifier_expr(self, m: Match) -> Elements:
		if Shape.of(m).is_("EXPR"):
			return self._EXPR(self.get(m, "EXPR"))
		self.unhandled(m)

	@production
	def _smexpr(self, m: Match) -> Elements:
		if Shape.of(m).is_("EXPR"):
			return self._EXPR(self.get(m, "EXPR"))
		self.unhandled(m)

	@production
	def _statement_prefix(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "blorst"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._blorst(self.get(m, "blorst"))]
		self.unhandled(m)

	@production
	def _blorst(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("block"):
			return self._block(self.get(m, "block"))
		if shape.is_("statement"):
			return self._statement(self.get(m, "statement"))
		self.unhandled(m)

	@production
	def _semilist(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("statement"):
			return self.statements(self.each(m, "statement"), m.to)
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _module_name(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("longname"):
			return self._longname(self.get(m, "longname"))
		if shape.is_("longname", "arglist"):
			longname = self.get(m, "longname")
			opening = self.expect(BalancedEnter, longname.to, m.to, "[", m)
			args = self._arglist(self.get(m, "arglist"))
			return [*self._longname(longname), self.delimited(PostCircumfixOperator, opening.from_, m.to, args)]
		self.unhandled(m)


__all__ = ["StatementsMixin"]
