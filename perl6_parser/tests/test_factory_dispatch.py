from __future__ import annotations

import logging

import pytest

from perl6_parser.config import FactoryOptions
from perl6_parser.errors import UnhandledMatchError, UnknownProductionError
from perl6_parser.factory import PRODUCTIONS, Factory, keyword
from perl6_parser.nodes import DecimalNumber
from perl6_parser.test_support import MatchBuilder


def test_dispatch_finds_the_production():
	b = MatchBuilder("42")
	(node,) = Factory("42", FactoryOptions()).dispatch("integer", b.decint("42"))
	assert type(node) is DecimalNumber


def test_dispatch_rejects_unknown_names():
	factory = Factory("", FactoryOptions())
	with pytest.raises(UnknownProductionError, match="'nope'") as info:
		factory.dispatch("nope", MatchBuilder("").empty(0))
	assert info.value.production == "nope"


def test_dispatch_rejects_helpers_that_are_not_productions():
	factory = Factory("", FactoryOptions())
	with pytest.raises(UnknownProductionError):
		factory.dispatch("regex_parts", MatchBuilder("").empty(0))


def test_registry_covers_every_family():
	for name in ("TOP", "statementlist", "EXPR", "integer", "quote", "variable", "signature", "regex_def", "quantifier"):
		assert name in PRODUCTIONS
		assert getattr(Factory, f"_{name}").production == name


def test_trace_logs_each_production(caplog):
	b = MatchBuilder("42")
	factory = Factory("42", FactoryOptions(trace=True))
	with caplog.at_level(logging.DEBUG, logger="perl6_parser.factory.base"):
		factory._numish(b.at("42", integer=b.decint("42")))

	messages = [record.getMessage() for record in caplog.records]
	assert messages == [
		"numish [0, 2) content=['integer'] empty=[]",
		"integer [0, 2) content=['decint'] empty=[]",
	]


def test_no_trace_by_default(caplog):
	b = MatchBuilder("42")
	with caplog.at_level(logging.DEBUG, logger="perl6_parser.factory.base"):
		Factory("42", FactoryOptions())._integer(b.decint("42"))
	assert caplog.records == []


def test_origin_follows_the_production_stack():
	b = MatchBuilder("0z9")
	factory = Factory(b.source, FactoryOptions())
	assert factory.origin is None
	with pytest.raises(UnhandledMatchError):
		factory._numish(b.at("0z9", integer=b.at("0z9", zedint=b.at("9"))))
	assert factory.origin is None


def test_unhandled_reports_the_innermost_production(caplog):
	b = MatchBuilder("0z9")
	factory = Factory(b.source, FactoryOptions())
	with pytest.raises(UnhandledMatchError) as info:
		factory._numish(b.at("0z9", integer=b.at("0z9", zedint=b.at("9"))))

	assert info.value.production == "integer"
	assert info.value.empty_keys == ()
	(record,) = caplog.records
	assert record.levelno == logging.ERROR
	assert record.getMessage() == "Unhandled match in integer at 0..3 '0z9': content=['zedint'] empty=[]"


def test_unhandled_shortens_long_text():
	source = "x" * 100
	b = MatchBuilder(source)
	with pytest.raises(UnhandledMatchError) as info:
		Factory(source, FactoryOptions())._identifier(b.span(0, 100, junk=b.span(0, 1)))
	assert info.value.text == "x" * 57 + "..."
	assert info.value.content_keys == ("junk",)


def test_each_of_sorts_by_position():
	b = MatchBuilder("a b c")
	m = b.at("a b c", trait=[b.at("c")], longname=b.at("a"), signature=b.at("b"))
	pairs = Factory(b.source, FactoryOptions()).each_of(m, "trait", "longname", "signature")
	assert [key for key, _ in pairs] == ["longname", "signature", "trait"]


@pytest.mark.parametrize(
	"text, found",
	[
		("where", True),
		("x where y", True),
		("nowhere", False),
		("where-ever", False),
		("wherever", False),
	],
)
def test_keyword_stands_alone(text, found):
	assert (keyword("where").search(text) is not None) is found
