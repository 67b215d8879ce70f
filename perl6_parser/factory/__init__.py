# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rule dispatch factory.

`Factory` combines one mixin per production family over `FactoryBase`. Build
a fresh instance per document: it carries the here-doc map for that source.
"""

from __future__ import annotations

from perl6_parser.factory.base import PRODUCTIONS, Elements, FactoryBase, keyword, production
from perl6_parser.factory.declarations import DeclarationsMixin
from perl6_parser.factory.expressions import ExpressionsMixin
from perl6_parser.factory.literals import LiteralsMixin
from perl6_parser.factory.regexes import RegexesMixin
from perl6_parser.factory.statements import StatementsMixin
from perl6_parser.factory.variables import VariablesMixin


class Factory(
	StatementsMixin,
	ExpressionsMixin,
	LiteralsMixin,
	VariablesMixin,
	DeclarationsMixin,
	RegexesMixin,
	FactoryBase,
):
	pass


__all__ = ["Factory", "FactoryBase", "PRODUCTIONS", "Elements", "production", "keyword"]
