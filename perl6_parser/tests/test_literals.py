from __future__ import annotations

import pytest

from perl6_parser.config import FactoryOptions
from perl6_parser.errors import HereDocError, UnhandledMatchError
from perl6_parser.factory import Factory
from perl6_parser.nodes import (
	Adverb,
	Bareword,
	BinaryNumber,
	DecimalNumber,
	EscapingString,
	EscapingWordQuoting,
	ExplicitDecimalNumber,
	FloatingPointNumber,
	HexadecimalNumber,
	InfinityNumber,
	InterpolatingString,
	LiteralString,
	NaNNumber,
	OctalNumber,
	RadixNumber,
	Regex,
	Substitution,
	Transliteration,
	Version,
)
from perl6_parser.test_support import MatchBuilder


def _factory(source):
	return Factory(source, FactoryOptions())


def _one(nodes):
	(node,) = nodes
	return node


@pytest.mark.parametrize(
	"text, key, digits, cls",
	[
		("0b101", "binint", "101", BinaryNumber),
		("0o17", "octint", "17", OctalNumber),
		("0x1F", "hexint", "1F", HexadecimalNumber),
		("0d12", "decint", "12", ExplicitDecimalNumber),
		("1_000", "decint", "1_000", DecimalNumber),
	],
)
def test_integer_kinds(text, key, digits, cls):
	b = MatchBuilder(text)
	m = b.at(text, **{key: b.at(digits), "VALUE": b.at(digits)})
	node = _one(_factory(text)._integer(m))
	assert type(node) is cls
	assert node.content == text
	assert node.base == cls.base


def test_fraction_is_decimal_and_exponent_is_floating_point():
	b = MatchBuilder("1.5 2e10")
	fraction = b.at("1.5", coeff=b.at("1.5"), int=b.at("1"), frac=b.at("5"))
	exponent = b.at("2e10", coeff=b.at("2"), int=b.at("2"), escale=b.at("e10"))
	factory = _factory(b.source)

	assert type(_one(factory._dec_number(fraction))) is DecimalNumber
	assert type(_one(factory._dec_number(exponent))) is FloatingPointNumber


def test_radix_number():
	b = MatchBuilder(":16<FF>")
	m = b.at(":16<FF>", radix=b.at("16"), intpart=b.at("FF"))
	node = _one(_factory(b.source)._rad_number(m))
	assert type(node) is RadixNumber
	assert node.radix == 16


@pytest.mark.parametrize("text, cls", [("NaN", NaNNumber), ("Inf", InfinityNumber), ("∞", InfinityNumber)])
def test_special_numbers(text, cls):
	b = MatchBuilder(text)
	assert type(_one(_factory(text)._numish(b.at(text)))) is cls


def test_number_chain_from_expr():
	b = MatchBuilder("  42 ")
	node = _one(_factory(b.source)._EXPR(b.number("42")))
	assert type(node) is DecimalNumber
	assert (node.from_, node.to) == (2, 4)


def test_version_literal():
	b = MatchBuilder("use v6.c;")
	m = b.at("v6.c", vstr=b.at("6.c"), vnum=[b.at("6"), b.at("c")])
	node = _one(_factory(b.source)._version(m))
	assert type(node) is Version
	assert node.content == "v6.c"


def test_unknown_integer_shape_is_fatal(caplog):
	b = MatchBuilder("0z9")
	with pytest.raises(UnhandledMatchError) as info:
		_factory(b.source)._integer(b.at("0z9", zedint=b.at("9")))
	assert info.value.production == "integer"
	assert info.value.content_keys == ("zedint",)
	assert info.value.offset == 0
	assert "Unhandled match in integer" in caplog.text


def test_unknown_numish_text_is_fatal():
	b = MatchBuilder("Nope")
	with pytest.raises(UnhandledMatchError):
		_factory(b.source)._numish(b.at("Nope"))


# --- strings ----------------------------------------------------------------


def test_bare_quotes_are_classified_by_delimiter():
	b = MatchBuilder("'hi' \"x\" ｢raw｣")
	factory = _factory(b.source)

	single = _one(factory._quote(b.at("'hi'", nibble=b.at("hi"))))
	double = _one(factory._quote(b.at('"x"', nibble=b.at("x"))))
	corner = _one(factory._quote(b.at("｢raw｣", nibble=b.at("raw"))))

	assert type(single) is EscapingString
	assert (single.delimiter_start, single.delimiter_end, single.body) == ("'", "'", "hi")
	assert type(double) is InterpolatingString
	assert type(corner) is LiteralString
	assert corner.delimiter_end == "｣"
	assert single.factory_origin == "quote"


def test_word_quote_with_quote_mod():
	b = MatchBuilder("qw<a b>")
	m = b.at("qw<a b>", sym=b.at("q"), quote_mod=b.at("w"), quibble=b.at("<a b>", nibble=b.at("a b")))
	node = _one(_factory(b.source)._quote(m))
	assert type(node) is EscapingWordQuoting
	assert node.quote == "qw"
	assert (node.delimiter_start, node.delimiter_end, node.body) == ("<", ">", "a b")
	assert not node.is_here_doc


def test_adverbs_are_read_from_the_source_when_not_captured():
	b = MatchBuilder("qq:s{x}")
	m = b.at("qq:s{x}", sym=b.at("qq"), quibble=b.at(":s{x}", nibble=b.at("x")))
	node = _one(_factory(b.source)._quote(m))
	assert type(node) is InterpolatingString
	assert node.adverbs == (":s",)
	assert node.body == "x"


def test_quote_pairs_become_adverbs():
	b = MatchBuilder(":to :!c")
	babble = b.at(":to :!c", quotepair=[b.at(":to", identifier=b.at("to")), b.at(":!c", identifier=b.at("c"))])
	adverbs = _factory(b.source)._babble(babble)
	assert [type(node) for node in adverbs] == [Adverb, Adverb]
	assert [node.content for node in adverbs] == [":to", ":!c"]


@pytest.mark.parametrize(
	"text, sym, part, cls",
	[
		("rx/a+/", "rx", "quibble", Regex),
		("m:i/abc/", "m", "quibble", Regex),
		("s/a/b/", "s", "sibble", Substitution),
		("tr/a/b/", "tr", "tribble", Transliteration),
	],
)
def test_regex_quotes(text, sym, part, cls):
	b = MatchBuilder(text)
	m = b.at(text, sym=b.at(sym), **{part: b.at(text[len(sym) :])})
	node = _one(_factory(text)._quote(m))
	assert type(node) is cls
	assert node.quote == sym
	assert node.content == text


def test_unknown_delimiter_is_fatal():
	b = MatchBuilder("~x~")
	with pytest.raises(UnhandledMatchError, match="unknown quote delimiter"):
		_factory(b.source)._quote(b.at("~x~", nibble=b.at("x")))


def test_nibble_words():
	b = MatchBuilder("<foo  bar>")
	words = _factory(b.source)._nibble(b.at("foo  bar"))
	assert [(type(w), w.from_, w.content) for w in words] == [(Bareword, 1, "foo"), (Bareword, 6, "bar")]


# --- here-docs ----------------------------------------------------------------


def _here_doc(b, text, start, terminator):
	quote = b.at(text, start)
	quibble_text = text[1:]
	babble = b.at(":to", quote.from_, quotepair=b.at(":to", quote.from_, identifier=b.at("to", quote.from_)))
	quibble = b.at(quibble_text, quote.from_, babble=babble, nibble=b.at(terminator, quote.from_))
	return b.at(text, start, sym=b.at(text[0], quote.from_), quibble=quibble)


def test_two_here_docs_on_one_line():
	source = "say q:to/A/, q:to/B/;\na\nA\nb\nB\n"
	b = MatchBuilder(source)
	factory = _factory(source)

	first = _one(factory._quote(_here_doc(b, "q:to/A/", 0, "A")))
	second = _one(factory._quote(_here_doc(b, "q:to/B/", 12, "B")))

	assert first.here_doc == "a\n"
	assert second.here_doc == "b\n"
	assert first.body == "A"
	assert factory.here_docs == {22: 25, 26: 29}


def test_indented_terminator():
	source = "q:to/END/;\n  x\n  END\n"
	b = MatchBuilder(source)
	factory = _factory(source)
	node = _one(factory._quote(_here_doc(b, "q:to/END/", 0, "END")))
	assert node.here_doc == "  x\n"
	assert factory.here_docs == {11: 20}


def test_missing_terminator_is_a_here_doc_error():
	source = "say q:to/EOT/;\nbody\n"
	b = MatchBuilder(source)
	with pytest.raises(HereDocError, match="'EOT' not found") as info:
		_factory(source)._quote(_here_doc(b, "q:to/EOT/", 0, "EOT"))
	assert info.value.production == "quote"
	assert isinstance(info.value, UnhandledMatchError)


def test_here_doc_without_following_line():
	source = "q:to/EOT/"
	b = MatchBuilder(source)
	with pytest.raises(HereDocError, match="body missing"):
		_factory(source)._quote(_here_doc(b, "q:to/EOT/", 0, "EOT"))
