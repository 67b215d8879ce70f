# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Variable and name productions.

Variables are leaves whose class comes from `VARIABLE_CLASSES[sigil + twigil]`.
Contextualizers (`$( ... )`) are the one dual-shaped node: the sigil is their
content, the bracketed body their children.
"""

from __future__ import annotations

from perl6_parser.factory.base import Elements, production
from perl6_parser.match import Match, Shape
from perl6_parser.nodes import (
	CONTEXTUALIZER_CLASSES,
	VARIABLE_CLASSES,
	BalancedEnter,
	BalancedExit,
	Bareword,
	Variable,
)


class VariablesMixin:
	def variable_class(self, m: Match, sigil: str, twigil: str = "") -> type:
		cls = VARIABLE_CLASSES.get(sigil + twigil)
		if cls is None:
			self.unhandled(m, f"unknown sigil/twigil {sigil + twigil!r}")
		return cls

	def variable_leaf(self, m: Match, sigil: str, twigil: str, name: str) -> Variable:
		"""Content is rebuilt as sigil ~ twigil ~ name, starting where the match starts."""
		cls = self.variable_class(m, sigil, twigil)
		start = m.from_ + len(m.Str) - len(m.Str.lstrip())
		return self.at(cls, start, sigil + twigil + name)

	@production
	def _variable(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("contextualizer"):
			return self._contextualizer(self.get(m, "contextualizer"))
		if shape.is_("sigil", "twigil", "desigilname"):
			return [self.variable_leaf(m, self.text(m, "sigil"), self.text(m, "twigil"), self.text(m, "desigilname"))]
		if shape.is_("sigil", "desigilname"):
			return [self.variable_leaf(m, self.text(m, "sigil"), "", self.text(m, "desigilname"))]
		if shape.is_("sigil", "index"):
			# $0, @1: positional captures of the last match.
			return [self.trimmed(self.variable_class(m, self.text(m, "sigil"), "<"), m)]
		if shape.is_("sigil", "postcircumfix"):
			# $<name>: named captures of the last match.
			return [self.trimmed(self.variable_class(m, self.text(m, "sigil"), "<"), m)]
		if shape.is_("special_variable"):
			return [self.trimmed(self.variable_class(m, m.Str.strip()[:1]), m)]
		if shape.is_("sigil"):
			return [self.trimmed(self.variable_class(m, self.text(m, "sigil")), m)]
		self.unhandled(m)

	@production
	def _contextualizer(self, m: Match) -> Elements:
		if Shape.of(m).fits(("sigil",), ("coercee",)):
			sigil = self.get(m, "sigil")
			cls = CONTEXTUALIZER_CLASSES.get(sigil.Str)
			if cls is None:
				self.unhandled(m, f"unknown contextualizer sigil {sigil.Str!r}")
			coercee = self.get(m, "coercee")
			body = self._coercee(coercee) if coercee is not None else []
			opening = self.at(BalancedEnter, sigil.to, self.orig[sigil.to])
			closing = self.at(BalancedExit, m.to - 1, self.orig[m.to - 1])
			return [cls(sigil.from_, sigil.to, sigil.Str, [opening, *body, closing], origin=self.origin)]
		self.unhandled(m)

	@production
	def _coercee(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("semilist"):
			return self._semilist(self.get(m, "semilist"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _longname(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("name",), ("colonpair",)):
			nodes = self._name(self.get(m, "name"))
			for colonpair in self.each(m, "colonpair"):
				nodes.extend(self._colonpair(colonpair))
			return nodes
		if shape.is_():
			return [self.name_leaf(m)]
		self.unhandled(m)

	@production
	def _deflongname(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("name",), ("colonpair",)) or shape.is_():
			return [self.trimmed(Bareword, m)]
		self.unhandled(m)

	@production
	def _name(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("identifier",), ("morename",)) or shape.is_("morename") or shape.is_():
			return [self.name_leaf(m)]
		self.unhandled(m)

	@production
	def _identifier(self, m: Match) -> Elements:
		if Shape.of(m).is_():
			return [self.trimmed(Bareword, m)]
		self.unhandled(m)


__all__ = ["VariablesMixin"]
