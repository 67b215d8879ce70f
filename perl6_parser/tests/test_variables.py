from __future__ import annotations

import pytest

from perl6_parser.config import FactoryOptions
from perl6_parser.errors import UnhandledMatchError
from perl6_parser.factory import Factory
from perl6_parser.nodes import (
	VARIABLE_CLASSES,
	ArrayAttribute,
	BalancedEnter,
	BalancedExit,
	Bareword,
	CallablePositional,
	ColonBareword,
	DecimalNumber,
	EscapingWordQuoting,
	HashDynamic,
	PackageName,
	Scalar,
	ScalarAccessor,
	ScalarContextualizer,
	ScalarMatchIndex,
	Statement,
)
from perl6_parser.test_support import MatchBuilder


def _factory(source):
	return Factory(source, FactoryOptions())


def _variable(text, twigil=""):
	b = MatchBuilder(text)
	sigil = b.span(0, 1)
	captures = {"sigil": sigil, "desigilname": b.span(1 + len(twigil), len(text))}
	if twigil:
		captures["twigil"] = b.span(1, 1 + len(twigil))
	(node,) = _factory(text)._variable(b.span(0, len(text), **captures))
	return node


def test_every_sigil_and_twigil_has_a_class():
	assert len(VARIABLE_CLASSES) == 4 * 10
	for key, cls in VARIABLE_CLASSES.items():
		assert cls.sigil + cls.twigil == key


@pytest.mark.parametrize(
	"text, twigil, cls",
	[
		("$x", "", Scalar),
		("@!items", "!", ArrayAttribute),
		("%*ENV", "*", HashDynamic),
		("&^f", "^", CallablePositional),
		("$.name", ".", ScalarAccessor),
	],
)
def test_variable_classes(text, twigil, cls):
	node = _variable(text, twigil)
	assert type(node) is cls
	assert node.content == text
	assert node.headless == text[1 + len(twigil) :]
	assert node.factory_origin == "variable"


def test_match_variables():
	b = MatchBuilder("$0 $<name>")
	factory = _factory(b.source)
	(positional,) = factory._variable(b.at("$0", sigil=b.at("$"), index=b.at("0")))
	(named,) = factory._variable(b.at("$<name>", sigil=b.at("$", 3), postcircumfix=b.at("<name>")))

	assert type(positional) is ScalarMatchIndex
	assert type(named) is ScalarMatchIndex
	assert named.content == "$<name>"


def test_anonymous_sigil():
	b = MatchBuilder("$")
	(node,) = _factory("$")._variable(b.at("$", sigil=b.at("$")))
	assert type(node) is Scalar


def test_special_variable():
	b = MatchBuilder("$/")
	(node,) = _factory("$/")._variable(b.at("$/", special_variable=b.at("$/")))
	assert type(node) is Scalar
	assert node.content == "$/"


def test_unknown_sigil_is_fatal():
	b = MatchBuilder("^x")
	with pytest.raises(UnhandledMatchError, match="unknown sigil"):
		_factory("^x")._variable(b.at("^x", sigil=b.at("^"), desigilname=b.at("x")))


def test_contextualizer_wraps_its_body():
	source = "$(1)"
	b = MatchBuilder(source)
	statement = b.statement(b.number("1"))
	coercee = b.at("1", semilist=b.at("1", statement=[statement]))
	m = b.at(source, contextualizer=b.at(source, sigil=b.at("$"), coercee=coercee))
	(ctx,) = _factory(source)._variable(m)

	assert type(ctx) is ScalarContextualizer
	assert (ctx.from_, ctx.to, ctx.outer_to) == (0, 1, 4)
	assert ctx.content == "$"
	opening, body, closing = ctx.children
	assert type(opening) is BalancedEnter and opening.from_ == 1
	assert type(body) is Statement
	assert type(body.children[0]) is DecimalNumber
	assert type(closing) is BalancedExit and closing.from_ == 3


def test_empty_contextualizer():
	source = "@()"
	b = MatchBuilder(source)
	m = b.at(source, sigil=b.at("@"), coercee=b.empty(2))
	(ctx,) = _factory(source)._contextualizer(m)
	assert [child.content for child in ctx.children] == ["(", ")"]


def test_names():
	b = MatchBuilder("Foo::Bar baz")
	factory = _factory(b.source)
	(package,) = factory._longname(b.at("Foo::Bar", name=b.at("Foo::Bar", identifier=b.at("Foo"), morename=[b.at("::Bar")])))
	(word,) = factory._longname(b.longname("baz"))

	assert type(package) is PackageName
	assert package.content == "Foo::Bar"
	assert type(word) is Bareword
	assert word.factory_origin == "name"


def test_longname_with_colonpair():
	b = MatchBuilder("infix:<+>")
	circumfix = b.at("<+>", nibble=b.at("+"))
	colonpair = b.at(":<+>", coloncircumfix=b.at("<+>", circumfix=circumfix))
	m = b.at("infix:<+>", name=b.at("infix", identifier=b.at("infix")), colonpair=[colonpair])
	name, colon, word = _factory(b.source)._longname(m)

	assert (type(name), name.content) == (Bareword, "infix")
	assert (type(colon), colon.from_, colon.content) == (ColonBareword, 5, ":")
	assert type(word) is EscapingWordQuoting
	assert word.body == "+"
