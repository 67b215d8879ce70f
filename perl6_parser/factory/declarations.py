# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration productions: variables, packages, routines, signatures, types.

`my $x = 1` comes out as a `ScopeDeclarator` branch holding `my` and `$x`,
followed by the initializer's elements as siblings. Parenthesized signatures
become `Signature` branches; the parentheses sit outside the grammar's
signature match and are found by scanning outward.
"""

from __future__ import annotations

from typing import Optional

from perl6_parser.factory.base import Elements, keyword, production
from perl6_parser.match import Match, Shape, has_content
from perl6_parser.nodes import (
	BalancedEnter,
	Bareword,
	CircumfixOperator,
	ColonBareword,
	InfixOperator,
	PostCircumfixOperator,
	PostfixOperator,
	PrefixOperator,
	ScopeDeclarator,
	Semicolon,
	Signature,
)

_PARAMETER_EXTRAS = ("type_constraint", "quant", "default_value", "trait", "post_constraint")

# sym → (required, optional) captures of a type declarator.
_TYPE_DECLARATORS = {
	"enum": (("sym", "term"), ("longname", "variable", "trait")),
	"subset": (("sym", "longname"), ("trait", "EXPR")),
	"constant": (("sym", "initializer"), ("defterm", "variable", "trait")),
}


class DeclarationsMixin:
	@production
	def _scope_declarator(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "scoped"):
			scoped = self.get(m, "scoped")
			nodes = [self.trimmed(Bareword, self.get(m, "sym")), *self._scoped(scoped)]
			split = self._initializer_offset(scoped)
			head: Elements = []
			for node in nodes:
				if split is not None and node.from_ >= split:
					break
				head.append(node)
			return [self.branch(ScopeDeclarator, head), *nodes[len(head) :]]
		self.unhandled(m)

	def _initializer_offset(self, scoped: Match) -> Optional[int]:
		declarator = self.get(scoped, "declarator")
		if declarator is None:
			return None
		initializer = self.get(declarator, "initializer")
		if initializer is None or not has_content(initializer):
			return None
		return initializer.from_

	@production
	def _scoped(self, m: Match) -> Elements:
		shape = Shape.of(m)
		# Rakudo captures the declarator twice, once as DECL.
		for key in ("declarator", "multi_declarator", "package_declarator"):
			if shape.is_(key) or shape.is_("DECL", key):
				return self.dispatch(key, self.get(m, key))
		if shape.is_("typename", "declarator") or shape.is_("DECL", "typename", "declarator"):
			nodes = [node for typename in self.each(m, "typename") for node in self._typename(typename)]
			return [*nodes, *self._declarator(self.get(m, "declarator"))]
		self.unhandled(m)

	@production
	def _declarator(self, m: Match) -> Elements:
		shape = Shape.of(m)
		initializer = self._initializer(self.get(m, "initializer")) if shape.has("initializer") else []
		if shape.fits(("variable_declarator",), ("initializer",)):
			return [*self._variable_declarator(self.get(m, "variable_declarator")), *initializer]
		if shape.fits(("signature",), ("initializer",)):
			signature = self.get(m, "signature")
			parens = self.balanced_outer(Signature, signature, self._signature(signature), expect="(")
			return [parens, *initializer]
		if shape.fits(("defterm",), ("initializer",)):
			defterm = self.get(m, "defterm")
			backslash = self.find(PrefixOperator, m.from_, defterm.from_, "\\")
			nodes = [backslash] if backslash is not None else []
			return [*nodes, *self._defterm(defterm), *initializer]
		for key in ("routine_declarator", "regex_declarator", "type_declarator"):
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		self.unhandled(m)

	@production
	def _variable_declarator(self, m: Match) -> Elements:
		if Shape.of(m).fits(("variable",), ("shape", "trait", "post_constraint")):
			nodes: Elements = []
			for key, part in self.each_of(m, "variable", "shape", "trait", "post_constraint"):
				nodes.extend(self.dispatch(key, part))
			return nodes
		self.unhandled(m)

	@production
	def _shape(self, m: Match) -> Elements:
		"""`my @a[3]`, `my %h{Str}`, `my &f:(Int)`."""
		shape = Shape.of(m)
		if shape.is_("semilist"):
			return [self.balanced(PostCircumfixOperator, m, self._semilist(self.get(m, "semilist")))]
		if shape.is_("signature"):
			return [self.balanced(PostCircumfixOperator, m, self._signature(self.get(m, "signature")))]
		if shape.is_():
			return [self.balanced(PostCircumfixOperator, m, [])]
		self.unhandled(m)

	@production
	def _initializer(self, m: Match) -> Elements:
		shape = Shape.of(m)
		sym = self.get(m, "sym")
		if shape.is_("sym", "EXPR"):
			return [self.trimmed(InfixOperator, sym), *self._EXPR(self.get(m, "EXPR"))]
		if shape.is_("sym", "dottyopish"):
			return [self.trimmed(InfixOperator, sym), *self._dottyop(self.get(self.get(m, "dottyopish"), "term"))]
		self.unhandled(m)

	@production
	def _typename(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("longname"):
			return self._longname(self.get(m, "longname"))
		if shape.is_("longname", "arglist"):
			longname = self.get(m, "longname")
			opening = self.expect(BalancedEnter, longname.to, m.to, "[", m)
			closing = self.orig.rfind("]", opening.to, m.to)
			if closing < 0:
				self.unhandled(m, "unterminated type arguments")
			args = self._arglist(self.get(m, "arglist"))
			return [*self._longname(longname), self.delimited(PostCircumfixOperator, opening.from_, closing + 1, args)]
		if shape.is_("longname", "typename"):
			longname = self.get(m, "longname")
			inner = self.get(m, "typename")
			of = self.expect(Bareword, longname.to, inner.from_, keyword("of"), m)
			return [*self._longname(longname), of, *self._typename(inner)]
		if shape.fits(("identifier",), ("colonpair",)):
			# ::?CLASS
			return [self.trimmed(Bareword, m)]
		self.unhandled(m)

	@production
	def _trait(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("trait_mod"):
			return self._trait_mod(self.get(m, "trait_mod"))
		if shape.is_("colonpair"):
			return self._colonpair(self.get(m, "colonpair"))
		self.unhandled(m)

	@production
	def _trait_mod(self, m: Match) -> Elements:
		shape = Shape.of(m)
		head = [self.trimmed(Bareword, self.get(m, "sym"))]
		if shape.fits(("sym", "longname"), ("circumfix",)):
			nodes = [*head, *self._longname(self.get(m, "longname"))]
			if shape.has("circumfix"):
				nodes.extend(self._circumfix(self.get(m, "circumfix")))
			return nodes
		if shape.is_("sym", "typename"):
			return [*head, *self._typename(self.get(m, "typename"))]
		if shape.is_("sym", "identifier", "pblock"):
			return [*head, *self._identifier(self.get(m, "identifier")), *self._pblock(self.get(m, "pblock"))]
		if shape.is_("sym", "term"):
			return [*head, *self._EXPR(self.get(m, "term"))]
		self.unhandled(m)

	@production
	def _post_constraint(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("EXPR"):
			expr = self.get(m, "EXPR")
			where = self.expect(Bareword, m.from_, expr.from_, keyword("where"), m)
			return [where, *self._EXPR(expr)]
		if shape.is_("signature"):
			return [self.balanced(CircumfixOperator, m, self._signature(self.get(m, "signature")))]
		self.unhandled(m)

	# --- packages and routines --------------------------------------------

	@production
	def _package_declarator(self, m: Match) -> Elements:
		if Shape.of(m).is_("sym", "package_def"):
			return [self.trimmed(Bareword, self.get(m, "sym")), *self._package_def(self.get(m, "package_def"))]
		self.unhandled(m)

	@production
	def _package_def(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.content and shape.fits((), ("longname", "trait", "blockoid")):
			nodes: Elements = []
			for key, part in self.each_of(m, "longname", "trait", "blockoid"):
				nodes.extend(self.dispatch(key, part))
			return nodes
		if shape.fits(("statementlist",), ("longname", "trait")):
			# `unit class Foo;` owns the rest of the file.
			nodes = []
			for key, part in self.each_of(m, "longname", "trait"):
				nodes.extend(self.dispatch(key, part))
			statementlist = self.get(m, "statementlist")
			start = nodes[-1].outer_to if nodes else m.from_
			nodes.append(self.expect(Semicolon, start, statementlist.to, ";", m))
			return [*nodes, *self._statementlist(statementlist)]
		self.unhandled(m)

	@production
	def _routine_declarator(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("routine_def", "method_def"):
			if shape.is_("sym", key):
				return [self.trimmed(Bareword, self.get(m, "sym")), *self.dispatch(key, self.get(m, key))]
		self.unhandled(m)

	@production
	def _routine_def(self, m: Match) -> Elements:
		if Shape.of(m).fits(("blockoid",), ("deflongname", "multisig", "trait")):
			return self._routine_parts(m)
		self.unhandled(m)

	@production
	def _method_def(self, m: Match) -> Elements:
		if Shape.of(m).fits(("blockoid",), ("specials", "longname", "multisig", "trait")):
			return self._routine_parts(m)
		self.unhandled(m)

	def _routine_parts(self, m: Match) -> Elements:
		"""Name, `( signature )`, traits and body, in source order."""
		nodes: Elements = []
		specials: Optional[Match] = None
		for key, part in self.each_of(m, "specials", "deflongname", "longname", "multisig", "trait", "blockoid"):
			if key == "specials":
				specials = part
			elif key == "longname" and specials is not None:
				# `method !private`
				nodes.append(self.span(Bareword, specials.from_, part.to))
			elif key == "multisig":
				children = self._multisig(part) if has_content(part) else []
				nodes.append(self.balanced_outer(Signature, part, children, expect="("))
			else:
				nodes.extend(self.dispatch(key, part))
		return nodes

	@production
	def _multi_declarator(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("declarator", "routine_def"):
			if shape.is_("sym", key):
				return [self.trimmed(Bareword, self.get(m, "sym")), *self.dispatch(key, self.get(m, key))]
		if shape.is_("declarator"):
			return self._declarator(self.get(m, "declarator"))
		self.unhandled(m)

	@production
	def _multisig(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("signature"):
			return self._signature(self.get(m, "signature"))
		if shape.is_():
			return []
		self.unhandled(m)

	@production
	def _signature(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits((), ("parameter", "param_sep", "typename", "value")):
			nodes: Elements = []
			for key, part in self.each_of(m, "parameter", "param_sep"):
				if key == "parameter":
					nodes.extend(self._parameter(part))
				elif part.Str.strip():
					nodes.append(self.trimmed(InfixOperator, part))
			for key in ("typename", "value"):
				if shape.has(key):
					returns = self.get(m, key)
					start = nodes[-1].outer_to if nodes else m.from_
					nodes.append(self.expect(InfixOperator, start, returns.from_, "-->", m))
					nodes.extend(self.dispatch(key, returns))
			return nodes
		self.unhandled(m)

	@production
	def _parameter(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("type_constraint",), _PARAMETER_EXTRAS) or any(
			shape.fits((key,), _PARAMETER_EXTRAS) for key in ("param_var", "named_param", "defterm")
		):
			anchor = self.get(m, "param_var") or self.get(m, "named_param")
			nodes: Elements = []
			parts = self.each_of(m, "param_var", "named_param", "defterm", *_PARAMETER_EXTRAS)
			for key, part in parts:
				if key != "quant":
					nodes.extend(self.dispatch(key, part))
				elif part.Str.strip():
					# `*@a`, `|c` before the variable; `$x?`, `$x!` after it.
					after = anchor is not None and part.from_ >= anchor.to
					nodes.append(self.trimmed(PostfixOperator if after else PrefixOperator, part))
			return nodes
		self.unhandled(m)

	@production
	def _param_var(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("signature"):
			return [self.balanced(CircumfixOperator, m, self._signature(self.get(m, "signature")))]
		if shape.fits(("sigil", "name"), ("twigil",)):
			return [self.variable_leaf(m, self.text(m, "sigil"), self.text(m, "twigil"), self.text(m, "name"))]
		if shape.fits(("sigil",), ("twigil",)):
			return [self.trimmed(self.variable_class(m, self.text(m, "sigil"), self.text(m, "twigil")), m)]
		self.unhandled(m)

	@production
	def _named_param(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.is_("param_var"):
			param_var = self.get(m, "param_var")
			return [self.span(PrefixOperator, m.from_, param_var.from_), *self._param_var(param_var)]
		for key in ("param_var", "named_param"):
			if shape.is_("name", key):
				name = self.get(m, "name")
				opening = self.expect(BalancedEnter, name.to, m.to, "(", m)
				inner = self.dispatch(key, self.get(m, key))
				return [self.span(ColonBareword, m.from_, name.to), self.delimited(CircumfixOperator, opening.from_, m.to, inner)]
		self.unhandled(m)

	@production
	def _type_constraint(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("typename", "value"):
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		if shape.is_("EXPR"):
			expr = self.get(m, "EXPR")
			where = self.expect(Bareword, m.from_, expr.from_, keyword("where"), m)
			return [where, *self._EXPR(expr)]
		self.unhandled(m)

	@production
	def _default_value(self, m: Match) -> Elements:
		if Shape.of(m).is_("EXPR"):
			return [self.sample(InfixOperator, m, "="), *self._EXPR(self.get(m, "EXPR"))]
		self.unhandled(m)

	@production
	def _type_declarator(self, m: Match) -> Elements:
		shape = Shape.of(m)
		family = _TYPE_DECLARATORS.get(self.text(m, "sym"))
		if family is not None and shape.fits(*family):
			nodes: Elements = []
			for key, part in self.each_of(m, "sym", "longname", "variable", "defterm", "trait", "EXPR", "term", "initializer"):
				if key == "sym":
					nodes.append(self.trimmed(Bareword, part))
				elif key == "EXPR":
					nodes.append(self.expect(Bareword, nodes[-1].outer_to, part.from_, keyword("where"), m))
					nodes.extend(self._EXPR(part))
				elif key == "term":
					nodes.extend(self._EXPR(part))
				else:
					nodes.extend(self.dispatch(key, part))
			return nodes
		self.unhandled(m)

	@production
	def _defterm(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("identifier",), ("colonpair",)) or shape.is_():
			return [self.trimmed(Bareword, m)]
		self.unhandled(m)


__all__ = ["DeclarationsMixin"]
