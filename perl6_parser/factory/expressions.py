# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expression productions.

`EXPR` is the operator-precedence result: operands arrive as the match's
positional captures and the operator under `infix`/`prefix`/`postfix`/... .
Infix chains come out flat (`a`, `+`, `b`, `+`, `c`). The infix capture does
not always carry a usable offset once meta operators wrap it, so the operator
leaf is located by searching the gap between the operands it joins.
"""

from __future__ import annotations

from typing import Type

from perl6_parser.balanced import closer_for
from perl6_parser.element import Leaf
from perl6_parser.factory.base import Elements, production
from perl6_parser.match import Match, MatchNode, Shape
from perl6_parser.nodes import (
	Bareword,
	ColonBareword,
	CircumfixOperator,
	EscapingWordQuoting,
	HyperOperator,
	ImaginaryNumber,
	InfixOperator,
	InterpolatingWordQuoting,
	Number,
	PostCircumfixOperator,
	PostfixOperator,
	PrefixOperator,
	Semicolon,
)

# Captures that make up a whole term by themselves, tried in this order.
_TERMS = (
	"value",
	"variable",
	"circumfix",
	"colonpair",
	"fatarrow",
	"scope_declarator",
	"package_declarator",
	"routine_declarator",
	"regex_declarator",
	"type_declarator",
	"multi_declarator",
	"statement_prefix",
	"sigterm",
	"capterm",
	"dotty",
	"pblock",
)

_INFIX_PARTS = ("infix_prefix_meta_operator", "infix", "infix_postfix_meta_operator")


class ExpressionsMixin:
	@production
	def _EXPR(self, m: Match) -> Elements:
		shape = Shape.of(m)
		# Operators.
		if shape.fits(("infix",), ("OPER",)) and Shape.of(self.get(m, "infix")).has("EXPR"):
			return self._ternary(m)
		if shape.fits(("infix",), ("OPER", "infix_prefix_meta_operator", "infix_postfix_meta_operator")):
			return self._infix_chain(m, InfixOperator, _INFIX_PARTS)
		if shape.fits(("infix_circumfix_meta_operator",), ("OPER", "infix")):
			return self._infix_chain(m, HyperOperator, ("infix_circumfix_meta_operator",))
		if shape.fits(("prefix",), ("OPER",)):
			return [*self._prefix(self.get(m, "prefix")), *self._operand(m)]
		if shape.fits(("prefix", "prefix_postfix_meta_operator"), ("OPER",)):
			nodes: Elements = []
			for key, part in self.each_of(m, "prefix", "prefix_postfix_meta_operator"):
				if key == "prefix":
					nodes.extend(self._prefix(part))
				else:
					nodes.append(self.trimmed(HyperOperator, part))
			return [*nodes, *self._operand(m)]
		if shape.fits(("postfix",), ("OPER",)):
			return self._postfixed(self._operand(m), self._postfix(self.get(m, "postfix")))
		if shape.fits(("postcircumfix",), ("OPER",)):
			return [*self._operand(m), *self._postcircumfix(self.get(m, "postcircumfix"))]
		if shape.fits(("dotty",), ("OPER",)) and m.list:
			return [*self._operand(m), *self._dotty(self.get(m, "dotty"))]
		for key in ("postfix", "postcircumfix", "dotty"):
			if shape.fits((key, "postfix_prefix_meta_operator"), ("OPER",)):
				hyper = self.trimmed(HyperOperator, self.get(m, "postfix_prefix_meta_operator"))
				return [*self._operand(m), hyper, *self.dispatch(key, self.get(m, key))]
		if shape.fits(("op",), ("args", "triangle")):
			return self._reduction(m, shape)
		# Terms.
		for key in _TERMS:
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		if shape.is_("identifier", "args"):
			return [*self._identifier(self.get(m, "identifier")), *self._args(self.get(m, "args"))]
		if shape.is_("identifier"):
			return self._identifier(self.get(m, "identifier"))
		if shape.is_("longname", "args"):
			return [*self._longname(self.get(m, "longname")), *self._args(self.get(m, "args"))]
		if shape.is_("longname"):
			return self._longname(self.get(m, "longname"))
		if shape.is_("sym", "args"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._args(self.get(m, "args"))]
		if shape.is_("sym"):
			return [self.trimmed(Bareword, self.get(m, "sym"))]
		self.unhandled(m)

	def _operand(self, m: Match, index: int = 0) -> Elements:
		if len(m.list) <= index:
			self.unhandled(m, f"missing operand {index}")
		built = self._EXPR(m.list[index])
		if not built:
			self.unhandled(m, f"operand {index} is empty")
		return built

	def _operator(self, m: Match, cls: Type[Leaf], keys) -> Leaf:
		"""Operator leaf spanning the captures in `keys` (or OPER when none are present)."""
		parts = [c for key in keys for c in self.each(m, key) if c.to > c.from_]
		if not parts:
			parts = self.each(m, "OPER")
		if not parts:
			self.unhandled(m, "operator without text")
		return self.trimmed(cls, MatchNode(self.orig, min(p.from_ for p in parts), max(p.to for p in parts)))

	def _place_operator(self, operator: Leaf, left: Elements, right: Elements, cls: Type[Leaf], m: Match) -> Leaf:
		start = left[-1].outer_to if left else m.from_
		end = right[0].from_ if right else m.to
		if start <= operator.from_ and operator.to <= end:
			return operator
		return self.expect(cls, start, end, operator.content, m)

	def _infix_chain(self, m: Match, cls: Type[Leaf], keys) -> Elements:
		if cls is InfixOperator and Shape.of(m).fits(("infix",), ("OPER",)):
			operator = self._infix(self.get(m, "infix"))[0]
		else:
			operator = self._operator(m, cls, keys)
		if not m.list:
			self.unhandled(m, "infix without operands")
		nodes: Elements = []
		for index in range(len(m.list)):
			built = self._operand(m, index)
			if index:
				nodes.append(self._place_operator(operator, nodes, built, cls, m))
			nodes.extend(built)
		# `1, 2,` keeps its trailing comma.
		trailing = self.find(cls, nodes[-1].outer_to, m.to, operator.content)
		if trailing is not None:
			nodes.append(trailing)
		return nodes

	def _ternary(self, m: Match) -> Elements:
		condition = self._operand(m, 0)
		middle = self._EXPR(self.get(self.get(m, "infix"), "EXPR"))
		otherwise = self._operand(m, 1)
		then_op = self.between(InfixOperator, condition, middle, "??", m)
		else_op = self.between(InfixOperator, middle, otherwise, "!!", m)
		return [*condition, then_op, *middle, else_op, *otherwise]

	def _postfixed(self, operand: Elements, postfix: Elements) -> Elements:
		"""`2i` is one imaginary number, not a number with a postfix."""
		if (
			len(operand) == 1
			and isinstance(operand[0], Number)
			and not isinstance(operand[0], ImaginaryNumber)
			and postfix[0].content == "i"
			and operand[0].to == postfix[0].from_
		):
			number = operand[0]
			return [self.at(ImaginaryNumber, number.from_, number.content + "i")]
		return [*operand, *postfix]

	def _reduction(self, m: Match, shape: Shape) -> Elements:
		"""`[+] @a`, `[\\+] @a`: the bracketed operator is one prefix token."""
		op = self.get(m, "op")
		start = self.orig.rfind("[", m.from_, op.from_ + 1)
		end = self.orig.find("]", op.to, m.to)
		if start < 0 or end < 0:
			self.unhandled(m, "reduction brackets not found")
		nodes: Elements = [self.span(PrefixOperator, start, end + 1)]
		if shape.has("args"):
			nodes.extend(self._args(self.get(m, "args")))
		return nodes

	@production
	def _infix(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("sym",)):
			return [self.trimmed(InfixOperator, m)]
		self.unhandled(m)

	@production
	def _prefix(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("sym",)):
			return [self.trimmed(PrefixOperator, m)]
		self.unhandled(m)

	@production
	def _postfix(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("sym", "dig")):
			return [self.trimmed(PostfixOperator, m)]
		self.unhandled(m)

	@production
	def _postcircumfix(self, m: Match) -> Elements:
		shape = Shape.of(m)
		opener = m.Str.lstrip()[:1]
		if shape.fits((), ("semilist",)) and opener in ("[", "{"):
			children = self._semilist(self.get(m, "semilist")) if shape.has("semilist") else []
			return [self.balanced(PostCircumfixOperator, m, children)]
		if shape.fits((), ("arglist",)) and opener == "(":
			children = self._arglist(self.get(m, "arglist")) if shape.has("arglist") else []
			return [self.balanced(PostCircumfixOperator, m, children)]
		if shape.fits((), ("nibble",)) and opener in ("<", "«"):
			front = "<<" if m.Str.lstrip().startswith("<<") else opener
			children = self._nibble(self.get(m, "nibble")) if shape.has("nibble") else []
			return [self.balanced(PostCircumfixOperator, m, children, front=front, back=closer_for(front))]
		self.unhandled(m)

	@production
	def _circumfix(self, m: Match) -> Elements:
		shape = Shape.of(m)
		text = m.Str.strip()
		opener = text[:1]
		if shape.fits((), ("semilist",)) and opener in ("(", "["):
			children = self._semilist(self.get(m, "semilist")) if shape.has("semilist") else []
			return [self.balanced(CircumfixOperator, m, children)]
		if shape.is_("pblock"):
			return self._pblock(self.get(m, "pblock"))
		if shape.fits((), ("nibble",)) and opener in ("<", "«"):
			front = "<<" if text.startswith("<<") else opener
			back = closer_for(front)
			cls = EscapingWordQuoting if front == "<" else InterpolatingWordQuoting
			return [
				self.trimmed(
					cls,
					m,
					delimiter_start=front,
					delimiter_end=back,
					body=text[len(front) : len(text) - len(back)],
				)
			]
		self.unhandled(m)

	@production
	def _args(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("semiarglist"):
			children = self._semiarglist(self.get(m, "semiarglist"))
			return [self.balanced(PostCircumfixOperator, m, children, front="(", back=")")]
		if shape.is_("arglist"):
			return self._arglist(self.get(m, "arglist"))
		if shape.is_():
			if m.Str.strip().startswith("("):
				return [self.balanced(PostCircumfixOperator, m, [], front="(", back=")")]
			return []
		self.unhandled(m)

	@production
	def _semiarglist(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("arglist"):
			nodes: Elements = []
			for index, arglist in enumerate(self.each(m, "arglist")):
				built = self._arglist(arglist)
				if index:
					nodes.append(self.between(Semicolon, nodes, built, ";", m))
				nodes.extend(built)
			return nodes
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _arglist(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("EXPR"):
			return self._EXPR(self.get(m, "EXPR"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _dotty(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "dottyop"):
			return [self.trimmed(InfixOperator, self.get(m, "sym")), *self._dottyop(self.get(m, "dottyop"))]
		self.unhandled(m)

	@production
	def _dottyop(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("methodop", "colonpair", "postop"):
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		self.unhandled(m)

	@production
	def _postop(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("postfix"):
			return self._postfix(self.get(m, "postfix"))
		if shape.is_("postcircumfix"):
			return self._postcircumfix(self.get(m, "postcircumfix"))
		self.unhandled(m)

	@production
	def _methodop(self, m: Match) -> Elements:
		shape = Shape.of(m)
		args = self._args(self.get(m, "args")) if shape.has("args") else []
		if shape.fits(("longname",), ("args",)):
			return [*self._longname(self.get(m, "longname")), *args]
		if shape.fits(("variable",), ("args",)):
			return [*self._variable(self.get(m, "variable")), *args]
		if shape.fits(("quote",), ("args",)):
			return [*self._quote(self.get(m, "quote")), *args]
		self.unhandled(m)

	@production
	def _fatarrow(self, m: Match) -> Elements:
		if Shape.of(m).is_("key", "val"):
			key = [self.trimmed(Bareword, self.get(m, "key"))]
			value = self._EXPR(self.get(m, "val"))
			return [*key, self.between(InfixOperator, key, value, "=>", m), *value]
		self.unhandled(m)

	@production
	def _colonpair(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("identifier", "coloncircumfix"):
			identifier = self.get(m, "identifier")
			return [self.span(ColonBareword, m.from_, identifier.to), *self._coloncircumfix(self.get(m, "coloncircumfix"))]
		if shape.fits(("identifier",), ("num",)):
			return [self.trimmed(ColonBareword, m)]
		if shape.is_("coloncircumfix"):
			circumfix = self.get(m, "coloncircumfix")
			return [self.span(ColonBareword, m.from_, circumfix.from_), *self._coloncircumfix(circumfix)]
		if shape.is_("var"):
			var = self.get(m, "var")
			return [self.span(PrefixOperator, m.from_, var.from_), *self._variable(var)]
		if shape.is_("fakesignature"):
			return [self.delimited(CircumfixOperator, m.from_, m.to, self._fakesignature(self.get(m, "fakesignature")), front=2)]
		self.unhandled(m)

	@production
	def _coloncircumfix(self, m: Match) -> Elements:
		if Shape.of(m).is_("circumfix"):
			return self._circumfix(self.get(m, "circumfix"))
		self.unhandled(m)

	@production
	def _sigterm(self, m: Match) -> Elements:
		if Shape.of(m).is_("fakesignature"):
			children = self._fakesignature(self.get(m, "fakesignature"))
			return [self.delimited(CircumfixOperator, m.from_, m.to, children, front=2)]
		self.unhandled(m)

	@production
	def _fakesignature(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("signature"):
			return self._signature(self.get(m, "signature"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _capterm(self, m: Match) -> Elements:
		shape = Shape.of(m)
		backslash = self.at(PrefixOperator, m.from_, "\\")
		if shape.fits((), ("semiarglist",)) and m.Str.startswith("\\("):
			children = self._semiarglist(self.get(m, "semiarglist")) if shape.has("semiarglist") else []
			return [backslash, self.delimited(CircumfixOperator, m.from_ + 1, m.to, children)]
		if shape.is_("termish"):
			return [backslash, *self._EXPR(self.get(m, "termish"))]
		if shape.is_("value"):
			return [backslash, *self._value(self.get(m, "value"))]
		self.unhandled(m)


__all__ = ["ExpressionsMixin"]
