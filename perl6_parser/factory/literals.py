# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Literal productions: numbers, versions, quotes and here-docs.

A quote is a single leaf. Its class comes from the quoting lexeme (the `sym`
plus any `quote_mod`, e.g. `q` + `w` → `qw`) or, for bare quotes, from the
opening delimiter.

Here-docs (`q:to/END/`) are resolved as soon as the quote is seen: the body is
located in the source after the end of the current line, and its span is
recorded in `here_docs` so the gap filler later turns it into one ghost node
instead of tokenizing it as code.
"""

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Type

from perl6_parser.balanced import closer_for
from perl6_parser.errors import HereDocError
from perl6_parser.factory.base import Elements, production
from perl6_parser.match import Match, Shape
from perl6_parser.nodes import (
	Adverb,
	Bareword,
	BinaryNumber,
	DecimalNumber,
	EscapingShell,
	EscapingString,
	EscapingWordQuoting,
	EscapingWordQuotingQuoteProtection,
	ExplicitDecimalNumber,
	FloatingPointNumber,
	HexadecimalNumber,
	InfinityNumber,
	InterpolatingShell,
	InterpolatingString,
	InterpolatingWordQuoting,
	InterpolatingWordQuotingQuoteProtection,
	LiteralShell,
	LiteralString,
	LiteralWordQuoting,
	NaNNumber,
	OctalNumber,
	RadixNumber,
	Regex,
	String,
	Substitution,
	Transliteration,
	Version,
)

QUOTE_CLASSES: Dict[str, Type[String]] = {
	"q": EscapingString,
	"qq": InterpolatingString,
	"Q": LiteralString,
	"qw": EscapingWordQuoting,
	"qqw": InterpolatingWordQuoting,
	"Qw": LiteralWordQuoting,
	"qww": EscapingWordQuotingQuoteProtection,
	"qqww": InterpolatingWordQuotingQuoteProtection,
	"qx": EscapingShell,
	"qqx": InterpolatingShell,
	"Qx": LiteralShell,
}

# Bare quotes, keyed by opening delimiter.
DELIMITED_CLASSES: Dict[str, Type[String]] = {
	"'": EscapingString,
	"‘": EscapingString,
	'"': InterpolatingString,
	"“": InterpolatingString,
	"｢": LiteralString,
	"/": Regex,
}

REGEX_CLASSES: Dict[str, Type[String]] = {
	"rx": Regex,
	"m": Regex,
	"ms": Regex,
	"s": Substitution,
	"S": Substitution,
	"ss": Substitution,
	"tr": Transliteration,
	"TR": Transliteration,
}

HERE_DOC_ADVERBS = frozenset({":to", ":heredoc"})

_ADVERB = re.compile(r"\s*(:!?\w+(?:\([^)]*\))?)")
_WORD = re.compile(r"\S+")
_INTEGER_KINDS = (
	("binint", BinaryNumber),
	("octint", OctalNumber),
	("hexint", HexadecimalNumber),
)


class LiteralsMixin:
	@production
	def _value(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("number", "quote", "version"):
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		self.unhandled(m)

	@production
	def _number(self, m: Match) -> Elements:
		if Shape.of(m).is_("numish"):
			return self._numish(self.get(m, "numish"))
		self.unhandled(m)

	@production
	def _numish(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key in ("integer", "dec_number", "rad_number"):
			if shape.is_(key):
				return self.dispatch(key, self.get(m, key))
		if shape.is_():
			text = m.Str.strip()
			if text == "NaN":
				return [self.trimmed(NaNNumber, m)]
			if text in ("Inf", "∞"):
				return [self.trimmed(InfinityNumber, m)]
		self.unhandled(m)

	@production
	def _integer(self, m: Match) -> Elements:
		shape = Shape.of(m)
		for key, cls in _INTEGER_KINDS:
			if shape.fits((key,), ("VALUE",)):
				return [self.trimmed(cls, m)]
		if shape.fits(("decint",), ("VALUE",)):
			cls = ExplicitDecimalNumber if m.Str.strip().startswith("0d") else DecimalNumber
			return [self.trimmed(cls, m)]
		self.unhandled(m)

	@production
	def _dec_number(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("coeff",), ("int", "frac", "escale")):
			cls = FloatingPointNumber if shape.has("escale") else DecimalNumber
			return [self.trimmed(cls, m)]
		self.unhandled(m)

	@production
	def _rad_number(self, m: Match) -> Elements:
		if Shape.of(m).fits(("radix",), ("circumfix", "bracket", "intpart", "fracpart", "base", "exp")):
			return [self.trimmed(RadixNumber, m)]
		self.unhandled(m)

	@production
	def _version(self, m: Match) -> Elements:
		if Shape.of(m).fits(("vstr",), ("vnum",)):
			return [self.trimmed(Version, m)]
		self.unhandled(m)

	# --- quotes -----------------------------------------------------------

	@production
	def _quote(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits((), ("nibble",)):
			cls = DELIMITED_CLASSES.get(m.Str[:1])
			if cls is None:
				self.unhandled(m, f"unknown quote delimiter {m.Str[:1]!r}")
			return [self.quoted(cls, m, "", [])]
		sym = self.text(m, "sym")
		if shape.fits(("sym", "quibble"), ("quote_mod",)) and sym not in REGEX_CLASSES:
			lexeme = sym + self.text(m, "quote_mod")
			cls = QUOTE_CLASSES.get(lexeme)
			if cls is None:
				self.unhandled(m, f"unknown quoting lexeme {lexeme!r}")
			adverbs = [adverb.content for adverb in self._quibble(self.get(m, "quibble"))]
			return [self.quoted(cls, m, lexeme, adverbs)]
		if sym in REGEX_CLASSES and (
			shape.fits(("sym", "quibble"), ("rx_adverbs",))
			or shape.fits(("sym", "sibble"), ("rx_adverbs",))
			or shape.fits(("sym", "tribble"), ("rx_adverbs",))
		):
			return [self.quoted(REGEX_CLASSES[sym], m, sym, [])]
		self.unhandled(m)

	def quoted(self, cls: Type[String], m: Match, lexeme: str, adverbs: Sequence[str]) -> String:
		"""
		Build a string leaf over the whole quote.

		Adverbs not supplied by the caller are read from the text between the
		lexeme and the opening delimiter.
		"""
		text = m.Str
		pos = len(lexeme)
		scanned: List[str] = []
		while True:
			found = _ADVERB.match(text, pos)
			if found is None:
				break
			scanned.append(found.group(1))
			pos = found.end()
		adverbs = list(adverbs) or scanned
		while pos < len(text) and text[pos].isspace():
			pos += 1
		front = "<<" if text.startswith("<<", pos) else text[pos : pos + 1]
		back = closer_for(front)
		end = len(text) - len(back) if text.endswith(back) and len(text) - len(back) >= pos + len(front) else len(text)
		body = text[pos + len(front) : end]
		here_doc = None
		if HERE_DOC_ADVERBS.intersection(adverbs):
			here_doc = self.here_doc(m, body.strip())
		return self.leaf(
			cls,
			m,
			quote=lexeme,
			delimiter_start=front,
			delimiter_end=back,
			adverbs=adverbs,
			body=body,
			here_doc=here_doc,
		)

	def here_doc(self, m: Match, terminator: str) -> str:
		"""
		Locate the body of a here-doc opened by `m` and record its span.

		The body starts on the line after the quote, or after the previous
		here-doc's terminator when several open on one line. It ends before a
		line holding only the terminator (indentation allowed).
		"""
		if not terminator:
			self.unhandled(m, "here-doc without terminator", error=HereDocError)
		line_end = self.orig.find("\n", max(m.to, self._here_doc_tail))
		if line_end < 0:
			self.unhandled(m, "here-doc body missing", error=HereDocError)
		start = line_end + 1
		pattern = re.compile(r"^[ \t]*" + re.escape(terminator) + r"[ \t]*$", re.M)
		found = pattern.search(self.orig, start)
		if found is None:
			self.unhandled(m, f"here-doc terminator {terminator!r} not found", error=HereDocError)
		self.here_docs[start] = found.end()
		self._here_doc_tail = found.end()
		return self.orig[start : found.start()]

	@production
	def _quibble(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("babble",), ("nibble",)):
			return self._babble(self.get(m, "babble"))
		if shape.fits((), ("nibble",)):
			return []
		self.unhandled(m)

	@production
	def _babble(self, m: Match) -> Elements:
		shape = Shape.of(m)
		if shape.fits(("quotepair",), ("B",)):
			return [adverb for pair in self.each(m, "quotepair") for adverb in self._quotepair(pair)]
		if shape.fits((), ("B",)):
			return []
		self.unhandled(m)

	@production
	def _quotepair(self, m: Match) -> Elements:
		if Shape.of(m).fits(("identifier",), ("circumfix", "num")):
			return [self.trimmed(Adverb, m)]
		self.unhandled(m)

	@production
	def _nibble(self, m: Match) -> Elements:
		"""Word lists (`<a b c>`) split into barewords; regex bodies go to the regex rules."""
		shape = Shape.of(m)
		if shape.is_("termseq"):
			return self._termseq(self.get(m, "termseq"))
		if shape.is_():
			return [self.at(Bareword, m.from_ + word.start(), word.group(0)) for word in _WORD.finditer(m.Str)]
		self.unhandled(m)


__all__ = ["LiteralsMixin", "QUOTE_CLASSES", "DELIMITED_CLASSES", "REGEX_CLASSES"]
