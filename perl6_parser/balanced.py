# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Matched-delimiter helpers.

Builds `[enter, *children, exit]` branches for bracketed constructs. The
delimiters come from one of three places:

  - the first and last character of the match (`balanced`);
  - explicit front/back strings located inside the match (`balanced` with
    `front=`/`back=`);
  - the nearest non-whitespace characters just outside the match
    (`balanced_outer`), for grammar rules whose range excludes the brackets.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Type

from perl6_parser.element import Branch, Element, Leaf
from perl6_parser.nodes import BalancedEnter, BalancedExit

CLOSERS = {
	"(": ")",
	"[": "]",
	"{": "}",
	"<": ">",
	"«": "»",
	"｢": "｣",
	"“": "”",
	"‘": "’",
	"<<": ">>",
}


def closer_for(opener: str) -> str:
	"""Closing delimiter for `opener`; non-bracketing delimiters close themselves."""
	return CLOSERS.get(opener, opener)


def delimited(
	cls: Type[Branch],
	start: int,
	end: int,
	front: str,
	back: str,
	children: Sequence[Element],
	*,
	enter: Type[Leaf] = BalancedEnter,
	exit: Type[Leaf] = BalancedExit,
	origin: Optional[str] = None,
) -> Branch:
	"""`front` starts at `start`, `back` ends at `end`."""
	opening = enter.from_int(start, front, origin=origin)
	closing = exit.from_int(end - len(back), back, origin=origin)
	return cls(start, end, [opening, *children, closing], origin=origin)


def balanced(
	cls: Type[Branch],
	m,
	children: Sequence[Element],
	*,
	front: Optional[str] = None,
	back: Optional[str] = None,
	enter: Type[Leaf] = BalancedEnter,
	exit: Type[Leaf] = BalancedExit,
	origin: Optional[str] = None,
) -> Branch:
	text = m.Str
	if front is None and back is None:
		stripped = text.strip()
		if not stripped:
			raise ValueError(f"no delimiters in empty match at {m.from_}")
		front, back = stripped[0], stripped[-1]
	front_at = text.find(front)
	back_at = text.rfind(back)
	if front_at < 0 or back_at < 0 or back_at < front_at + len(front):
		raise ValueError(f"delimiters {front!r}/{back!r} not found in {text!r}")
	return delimited(
		cls,
		m.from_ + front_at,
		m.from_ + back_at + len(back),
		front,
		back,
		children,
		enter=enter,
		exit=exit,
		origin=origin,
	)


def scan_outward(orig: str, start: int, end: int) -> Tuple[int, int]:
	"""Offsets of the nearest non-whitespace characters before `start` and at/after `end`."""
	left = start - 1
	while left >= 0 and orig[left].isspace():
		left -= 1
	right = end
	while right < len(orig) and orig[right].isspace():
		right += 1
	if left < 0 or right >= len(orig):
		raise ValueError(f"no delimiters around [{start}, {end})")
	return left, right


def balanced_outer(
	cls: Type[Branch],
	m,
	children: Sequence[Element],
	*,
	enter: Type[Leaf] = BalancedEnter,
	exit: Type[Leaf] = BalancedExit,
	expect: Optional[str] = None,
	origin: Optional[str] = None,
) -> Branch:
	"""
	Wrap `children` in the delimiters surrounding the match.

	With `expect` (an opener such as "("), a mismatch between the characters
	found and that pair raises ValueError.
	"""
	left, right = scan_outward(m.orig, m.from_, m.to)
	front, back = m.orig[left], m.orig[right]
	if expect is not None and (front != expect or back != closer_for(expect)):
		raise ValueError(f"expected {expect!r} around [{m.from_}, {m.to}), found {front!r}/{back!r}")
	return delimited(cls, left, right + 1, front, back, children, enter=enter, exit=exit, origin=origin)


__all__ = ["CLOSERS", "closer_for", "delimited", "balanced", "balanced_outer", "scan_outward"]
