# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Concrete element classes.

The taxonomy is closed: the factory, the gap tokenizer and the root builder
only ever instantiate classes from this module. Each class inherits its shape
(leaf, branch or contextualizer) from one of the bases in `element`.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, Type

from perl6_parser.element import Branch, Contextualizer, Leaf

# --- structure --------------------------------------------------------------


class Semicolon(Leaf):
	pass


class BalancedEnter(Leaf):
	"""Opening delimiter of a bracketed construct."""


class BalancedExit(Leaf):
	"""Closing delimiter of a bracketed construct."""


class BlockEnter(BalancedEnter):
	pass


class BlockExit(BalancedExit):
	pass


class WS(Leaf):
	is_visible = False


class Comment(Leaf):
	is_visible = False


class Pod(Leaf):
	"""`=begin NAME ... =end NAME` block, or everything after `=finish`."""

	is_visible = False


class HereDocBody(Leaf):
	"""
	Body text of a here-doc.

	It sits wherever the body sits in the source (after the line holding the
	opening token), so it lands among unrelated statements. The owning string
	leaf carries the same text in `here_doc`; this node only keeps the stream
	gap-free.
	"""

	is_semantic = False


class Document(Branch):
	pass


class Statement(Branch):
	pass


class Block(Branch):
	pass


class ScopeDeclarator(Branch):
	"""`my`/`our`/`has`/... and the declared variable(s), without the initializer."""


class Signature(Branch):
	"""Parenthesized parameter list, delimiters included."""


# --- operators --------------------------------------------------------------


class Operator:
	"""Marker shared by all operator classes."""


class PrefixOperator(Operator, Leaf):
	pass


class InfixOperator(Operator, Leaf):
	pass


class PostfixOperator(Operator, Leaf):
	pass


class HyperOperator(Operator, Leaf):
	pass


class CircumfixOperator(Operator, Branch):
	pass


class PostCircumfixOperator(Operator, Branch):
	pass


# --- names ------------------------------------------------------------------


class Bareword(Leaf):
	pass


class PackageName(Leaf):
	pass


class ColonBareword(Bareword):
	pass


class Adverb(Leaf):
	pass


class Label(Leaf):
	pass


class Version(Leaf):
	pass


# --- numbers ----------------------------------------------------------------


class Number(Leaf):
	base: Optional[int] = None


class BinaryNumber(Number):
	base = 2


class OctalNumber(Number):
	base = 8


class DecimalNumber(Number):
	base = 10


class ExplicitDecimalNumber(DecimalNumber):
	"""`0d` prefixed decimal."""


class HexadecimalNumber(Number):
	base = 16


class RadixNumber(Number):
	"""`:36<zz>`; the radix is read from the content."""

	@property
	def radix(self) -> int:
		digits = self.content.lstrip(":").split("<", 1)[0].split("[", 1)[0].split("(", 1)[0]
		return int(digits)


class FloatingPointNumber(Number):
	base = 10


class ImaginaryNumber(Number):
	pass


class NaNNumber(Number):
	pass


class InfinityNumber(Number):
	pass


# --- strings ----------------------------------------------------------------


class String(Leaf):
	"""
	Quoted string.

	`quote` is the quoting prefix (`q`, `qq:w`, ... or empty for bare
	delimiters), `adverbs` the colon modifiers, `body` the text between the
	delimiters. For a here-doc `here_doc` holds the body lines and `body` the
	terminator.
	"""

	def __init__(
		self,
		from_: int,
		to: int,
		content: str,
		*,
		origin: Optional[str] = None,
		quote: str = "",
		delimiter_start: str = "",
		delimiter_end: str = "",
		adverbs: Sequence[str] = (),
		body: str = "",
		here_doc: Optional[str] = None,
	) -> None:
		super().__init__(from_, to, content, origin=origin)
		self.quote = quote
		self.delimiter_start = delimiter_start
		self.delimiter_end = delimiter_end
		self.adverbs: Tuple[str, ...] = tuple(adverbs)
		self.body = body
		self.here_doc = here_doc

	@property
	def is_here_doc(self) -> bool:
		return self.here_doc is not None


class EscapingString(String):
	pass


class EscapingWordQuoting(EscapingString):
	pass


class EscapingWordQuotingQuoteProtection(EscapingWordQuoting):
	pass


class EscapingShell(EscapingString):
	pass


class InterpolatingString(String):
	pass


class InterpolatingWordQuoting(InterpolatingString):
	pass


class InterpolatingWordQuotingQuoteProtection(InterpolatingWordQuoting):
	pass


class InterpolatingShell(InterpolatingString):
	pass


class LiteralString(String):
	pass


class LiteralWordQuoting(LiteralString):
	pass


class LiteralShell(LiteralString):
	pass


# --- regexes ----------------------------------------------------------------


class Regex(String):
	pass


class Substitution(Regex):
	pass


class Transliteration(Regex):
	pass


class RegexLiteral(Leaf):
	pass


class RegexMetachar(Leaf):
	pass


class RegexCharClass(Leaf):
	pass


class RegexAssertion(Branch):
	pass


# --- variables --------------------------------------------------------------


class Variable(Leaf):
	sigil = ""
	twigil = ""

	@property
	def headless(self) -> str:
		"""Name without sigil and twigil."""
		rest = self.content[len(self.sigil) :]
		if self.twigil and rest.startswith(self.twigil):
			rest = rest[len(self.twigil) :]
		return rest


class Scalar(Variable):
	sigil = "$"


class ScalarDynamic(Scalar):
	twigil = "*"


class ScalarAttribute(Scalar):
	twigil = "!"


class ScalarAccessor(Scalar):
	twigil = "."


class ScalarCompileTime(Scalar):
	twigil = "?"


class ScalarMatchIndex(Scalar):
	twigil = "<"


class ScalarPositional(Scalar):
	twigil = "^"


class ScalarNamed(Scalar):
	twigil = ":"


class ScalarPod(Scalar):
	twigil = "="


class ScalarSubLanguage(Scalar):
	twigil = "~"


class Array(Variable):
	sigil = "@"


class ArrayDynamic(Array):
	twigil = "*"


class ArrayAttribute(Array):
	twigil = "!"


class ArrayAccessor(Array):
	twigil = "."


class ArrayCompileTime(Array):
	twigil = "?"


class ArrayMatchIndex(Array):
	twigil = "<"


class ArrayPositional(Array):
	twigil = "^"


class ArrayNamed(Array):
	twigil = ":"


class ArrayPod(Array):
	twigil = "="


class ArraySubLanguage(Array):
	twigil = "~"


class Hash(Variable):
	sigil = "%"


class HashDynamic(Hash):
	twigil = "*"


class HashAttribute(Hash):
	twigil = "!"


class HashAccessor(Hash):
	twigil = "."


class HashCompileTime(Hash):
	twigil = "?"


class HashMatchIndex(Hash):
	twigil = "<"


class HashPositional(Hash):
	twigil = "^"


class HashNamed(Hash):
	twigil = ":"


class HashPod(Hash):
	twigil = "="


class HashSubLanguage(Hash):
	twigil = "~"


class Callable(Variable):
	sigil = "&"


class CallableDynamic(Callable):
	twigil = "*"


class CallableAttribute(Callable):
	twigil = "!"


class CallableAccessor(Callable):
	twigil = "."


class CallableCompileTime(Callable):
	twigil = "?"


class CallableMatchIndex(Callable):
	twigil = "<"


class CallablePositional(Callable):
	twigil = "^"


class CallableNamed(Callable):
	twigil = ":"


class CallablePod(Callable):
	twigil = "="


class CallableSubLanguage(Callable):
	twigil = "~"


# sigil + twigil → class, e.g. "$" → Scalar, "@!" → ArrayAttribute.
VARIABLE_CLASSES: Dict[str, Type[Variable]] = {
	cls.sigil + cls.twigil: cls
	for family in (Scalar, Array, Hash, Callable)
	for cls in (family, *family.__subclasses__())
}


class ScalarContextualizer(Contextualizer):
	sigil = "$"


class ArrayContextualizer(Contextualizer):
	sigil = "@"


class HashContextualizer(Contextualizer):
	sigil = "%"


class CallableContextualizer(Contextualizer):
	sigil = "&"


CONTEXTUALIZER_CLASSES: Dict[str, Type[Contextualizer]] = {
	cls.sigil: cls
	for cls in (ScalarContextualizer, ArrayContextualizer, HashContextualizer, CallableContextualizer)
}
