# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
perl6_parser: Perl 6 grammar matches to a navigable element tree.

Stages:
  factory: match tree → raw element lists (one rule per production)
  builder: raw elements → Document root
  linker:  gap filling (layout leaves) and next/previous/parent threading
"""

from perl6_parser.builder import build
from perl6_parser.config import FactoryOptions
from perl6_parser.element import Branch, Contextualizer, Element, Leaf, NodeKind
from perl6_parser.errors import (
	FactoryError,
	HereDocError,
	InternalConsistencyError,
	UnhandledMatchError,
	UnknownProductionError,
)
from perl6_parser.factory import Factory
from perl6_parser.linker import fill_gaps, stream, thread, validate
from perl6_parser.match import MatchNode, Shape

__all__ = [
	"build",
	"Factory",
	"FactoryOptions",
	"Element",
	"Leaf",
	"Branch",
	"Contextualizer",
	"NodeKind",
	"MatchNode",
	"Shape",
	"fill_gaps",
	"thread",
	"stream",
	"validate",
	"FactoryError",
	"UnhandledMatchError",
	"UnknownProductionError",
	"HereDocError",
	"InternalConsistencyError",
]
