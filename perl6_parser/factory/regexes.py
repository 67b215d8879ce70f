# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Regex productions for `regex`/`token`/`rule` declarations.

Pipeline placement:
  regex_declarator → regex_def → nibble → termseq → ... → quantified_atom

Quoted regexes (`rx/.../`, `m/.../`) stay single string leaves; only declared
regexes are broken down. The alternation and conjunction levels
(`||`, `&&`, `|`, `&`) all come out flat: items with an `InfixOperator` leaf
between each pair, the separator located in the source between items.
"""

from __future__ import annotations

from typing import Optional

from perl6_parser.factory.base import Elements, production
from perl6_parser.match import Match, Shape, has_content
from perl6_parser.nodes import (
	Bareword,
	Block,
	BlockEnter,
	BlockExit,
	CircumfixOperator,
	InfixOperator,
	PostfixOperator,
	PrefixOperator,
	RegexAssertion,
	RegexCharClass,
	RegexLiteral,
	RegexMetachar,
	ScalarMatchIndex,
	Semicolon,
	Signature,
)

_QUANTIFIER_PARTS = ("sym", "backmod", "min", "max", "from", "upto", "quantified_atom", "codeblock", "normspace")
_BACKSLASH_PARTS = ("sym", "charspec", "hexint", "octint", "charnames")
_CCLASS_PARTS = ("sign", "charspec", "name", "uniprop", "invert")


class RegexesMixin:
	@production
	def _regex_declarator(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "regex_def"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._regex_def(self.get(m, "regex_def"))]
		self.unhandled(m)

	@production
	def _regex_def(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("deflongname", "signature", "trait", "nibble")):
			return self._regex_parts(m)
		self.unhandled(m)

	def _regex_parts(self, m: Match) -> Elements:
		nodes: Elements = []
		for key, part in self.each_of(m, "deflongname", "signature", "trait"):
			if key == "signature":
				nodes.append(self.balanced_outer(Signature, part, self._signature(part), expect="("))
			else:
				nodes.extend(self.dispatch(key, part))
		nibble = self.get(m, "nibble")
		start = nodes[-1].outer_to if nodes else m.from_
		end = nibble.from_ if nibble is not None else m.to
		opening = self.orig.rfind("{", start, end)
		closing = self.orig.rfind("}", opening + 1, m.to)
		if opening < 0 or closing < 0:
			self.unhandled(m, "regex body braces not found")
		body = self._nibble(nibble) if nibble is not None else []
		nodes.append(self.delimited(Block, opening, closing + 1, body, enter=BlockEnter, exit=BlockExit))
		return nodes

	@production
	def _nibbler(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("termseq"):
			return self._termseq(self.get(m, "termseq"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _termseq(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("termaltseq"):
			return self._termaltseq(self.get(m, "termaltseq"))
		if shape.is_():
			return []
		self.unhandled(m)

	def separated(self, m: Match, key: str, separator: str) -> Elements:
		"""
		Items under `key` with `separator` between them.

		A separator before the first item (`|| a || b`) is kept; a missing
		separator between two items is an unhandled shape.
		"""
		nodes: Elements = []
		cursor = m.from_
		for index, item in enumerate(self.each(m, key)):
			found = self.find(InfixOperator, cursor, item.from_, separator)
			if found is None and index:
				self.unhandled(m, f"expected {separator!r} before item {index}")
			if found is not None:
				nodes.append(found)
				cursor = found.to
			built = self.dispatch(key, item)
			nodes.extend(built)
			cursor = max(cursor, built[-1].outer_to if built else item.to)
		return nodes

	@production
	def _termaltseq(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("termconjseq",)):
			return self.separated(m, "termconjseq", "||")
		self.unhandled(m)

	@production
	def _termconjseq(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("termalt",)):
			return self.separated(m, "termalt", "&&")
		self.unhandled(m)

	@production
	def _termalt(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("termconj",)):
			return self.separated(m, "termconj", "|")
		self.unhandled(m)

	@production
	def _termconj(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("termish",)):
			return self.separated(m, "termish", "&")
		self.unhandled(m)

	@production
	def _termish(self, m: Match) -> Elements:
		if Shape.of(m).fits((), ("noun",)):
			return [node for noun in self.each(m, "noun") for node in self._quantified_atom(noun)]
		self.unhandled(m)

	@production
	def _quantified_atom(self, m: Match) -> Elements:
		if Shape.of(m).fits(("atom",), ("quantifier", "backmod", "separator", "sigfinal")):
			nodes: Elements = []
			for key, part in self.each_of(m, "atom", "quantifier", "backmod", "separator"):
				nodes.extend(self.dispatch(key, part))
			return nodes
		self.unhandled(m)

	@production
	def _separator(self, m: Match) -> Elements:
		"""`%` and `%%` between repetitions."""
		if Shape.of(m).is_("septype", "quantified_atom"):
			return [
				self.trimmed(InfixOperator, self.get(m, "septype")),
				*self._quantified_atom(self.get(m, "quantified_atom")),
			]
		self.unhandled(m)

	@production
	def _atom(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("metachar"):
			return self._metachar(self.get(m, "metachar"))
		if shape.is_():
			return [self.trimmed(RegexLiteral, m)] if m.Str.strip() else []
		self.unhandled(m)

	@production
	def _metachar(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_() or shape.is_("sym"):
			# `.`, `^`, `$$`, `::`; whitespace is insignificant
			return [self.trimmed(RegexMetachar, m)] if m.Str.strip() else []
		if shape.is_("backslash"):
			return self._backslash(self.get(m, "backslash"))
		if shape.is_("assertion"):
			inner = self._assertion(self.get(m, "assertion"))
			return [self.balanced(RegexAssertion, m, inner, front="<", back=">")]
		if shape.is_("nibbler"):
			# `[ ... ]` and `( ... )`
			return [self.balanced(CircumfixOperator, m, self._nibbler(self.get(m, "nibbler")))]
		if shape.is_("quote"):
			return self._quote(self.get(m, "quote"))
		if shape.is_("codeblock"):
			return self._codeblock(self.get(m, "codeblock"))
		if shape.fits(("var",), ("quantified_atom",)):
			return self._binding(m, self._variable(self.get(m, "var")))
		if shape.fits(("name",), ("quantified_atom",)):
			# $<name>=...
			name = self.get(m, "name")
			closing = self.orig.find(">", name.to, m.to)
			if closing < 0:
				self.unhandled(m, "unterminated capture name")
			return self._binding(m, [self.span(ScalarMatchIndex, m.from_, closing + 1)])
		if shape.is_("statement"):
			# `:my $x = 1;`
			statement = self.get(m, "statement")
			head = self.expect(Bareword, m.from_, statement.from_, ":my", m)
			nodes = [head, *self._statement(statement)]
			semi = self.find(Semicolon, nodes[-1].outer_to, m.to, ";")
			if semi is not None:
				nodes.append(semi)
			return nodes
		self.unhandled(m)

	def _binding(self, m: Match, target: Elements) -> Elements:
		atom: Optional[Match] = self.get(m, "quantified_atom")
		if atom is None or not has_content(atom):
			return target
		equals = self.expect(InfixOperator, target[-1].outer_to, atom.from_, "=", m)
		return [*target, equals, *self._quantified_atom(atom)]

	@production
	def _backslash(self, m: Match) -> Elements:
		if Shape.of(m).fits((), _BACKSLASH_PARTS):
			return [self.trimmed(RegexMetachar, m)]
		self.unhandled(m)

	@production
	def _assertion(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("assertion"):
			# `<?before x>`, `<!after y>`, `<.ws>`
			inner = self.get(m, "assertion")
			return [self.span(PrefixOperator, m.from_, inner.from_), *self._assertion(inner)]
		if shape.fits(("longname",), ("arglist", "nibbler", "assertion")):
			return self._named_assertion(m, shape)
		if shape.fits(("cclass_elem",)):
			return [node for elem in self.each(m, "cclass_elem") for node in self._cclass_elem(elem)]
		if shape.is_("codeblock"):
			# <{ ... }>, <?{ ... }>, <!{ ... }>
			nodes = self._codeblock(self.get(m, "codeblock"))
			text = m.Str.lstrip()
			if text[:1] in ("?", "!"):
				return [self.at(PrefixOperator, m.to - len(text), text[0]), *nodes]
			return nodes
		if shape.is_():
			text = m.Str.strip()
			if not text:
				return []
			cls = PrefixOperator if text in ("?", "!") else RegexMetachar
			return [self.trimmed(cls, m)]
		self.unhandled(m)

	def _named_assertion(self, m: Match, shape: Shape) -> Elements:
		longname = self.get(m, "longname")
		nodes = self._longname(longname)
		if shape.has("arglist"):
			arglist = self.get(m, "arglist")
			args = self._arglist(arglist)
			opening = self.orig.find("(", longname.to, arglist.from_ + 1)
			if opening >= 0:
				closing = self.orig.find(")", args[-1].outer_to if args else opening + 1)
				if closing < 0:
					self.unhandled(m, "unterminated assertion arguments")
				nodes.append(self.delimited(CircumfixOperator, opening, closing + 1, args))
			else:
				# <foo: 1, 2>
				nodes.append(self.between(InfixOperator, nodes, args, ":", m))
				nodes.extend(args)
		if shape.has("nibbler"):
			nodes.extend(self._nibbler(self.get(m, "nibbler")))
		if shape.has("assertion"):
			inner = self.get(m, "assertion")
			nodes.append(self.expect(InfixOperator, nodes[-1].outer_to, inner.from_, "=", m))
			nodes.extend(self._assertion(inner))
		return nodes

	@production
	def _cclass_elem(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits((), _CCLASS_PARTS):
			return self._cclass_parts(m, shape)
		self.unhandled(m)

	def _cclass_parts(self, m: Match, shape: Shape) -> Elements:
		nodes: Elements = []
		sign = self.get(m, "sign")
		if sign is not None and sign.Str.strip():
			nodes.append(self.trimmed(PrefixOperator, sign))
		start = nodes[-1].to if nodes else m.from_
		if shape.has("name"):
			nodes.append(self.trimmed(Bareword, self.get(m, "name")))
		elif shape.has("uniprop"):
			# <:Letter>, <:!Digit>
			colon = self.expect(Bareword, start, m.to, ":", m)
			nodes.append(self.span(Bareword, colon.from_, self.get(m, "uniprop").to))
		else:
			opening = self.orig.find("[", start, m.to)
			closing = self.orig.rfind("]", start, m.to)
			if opening < 0 or closing < opening:
				self.unhandled(m, "character class brackets not found")
			nodes.append(self.span(RegexCharClass, opening, closing + 1))
		return nodes

	@production
	def _quantifier(self, m: Match) -> Elements:
		"""`*`, `+?`, `** 2..5` and friends are one postfix leaf."""
		if Shape.of(m).fits((), _QUANTIFIER_PARTS) and m.Str.strip():
			return [self.trimmed(PostfixOperator, m)]
		self.unhandled(m)

	@production
	def _backmod(self, m: Match) -> Elements:
		if Shape.of(m).is_():
			return [self.trimmed(PostfixOperator, m)] if m.Str.strip() else []
		self.unhandled(m)

	@production
	def _codeblock(self, m: Match) -> Elements:
		if Shape.of(m).is_("block"):
			return self._block(self.get(m, "block"))
		self.unhandled(m)


__all__ = ["RegexesMixin"]
