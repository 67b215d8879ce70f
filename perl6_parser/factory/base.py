# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared machinery for the rule dispatch factory.

Every grammar production has one method named `_<production>` decorated with
`@production`. A production method:

  1. computes the match's `Shape` once;
  2. runs its shape tests in a fixed order, first hit wins;
  3. returns the list of elements the match desugars to;
  4. ends in `self.unhandled(m)`, which logs and raises.

Tokens the grammar does not capture on their own (`;` after a statement, the
`??`/`!!` of a ternary, `else`, ...) are found by scanning the source between
elements that were already built.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Callable, Dict, List, NoReturn, Optional, Pattern, Sequence, Type, Union

from perl6_parser import balanced as B
from perl6_parser.config import FactoryOptions
from perl6_parser.element import Branch, Element, Leaf
from perl6_parser.errors import UnhandledMatchError, UnknownProductionError
from perl6_parser.match import Match, Shape, capture, captures
from perl6_parser.nodes import BalancedEnter, BalancedExit, Bareword, PackageName

logger = logging.getLogger(__name__)

Elements = List[Element]

# Production name → unbound method, filled in by `@production`.
PRODUCTIONS: Dict[str, Callable[..., Elements]] = {}


def production(fn: Callable[..., Elements]) -> Callable[..., Elements]:
	"""Register a `_name` method as the rule for production `name`."""
	name = fn.__name__[1:]

	@functools.wraps(fn)
	def wrapper(self: "FactoryBase", m: Match) -> Elements:
		self._origins.append(name)
		try:
			if self.options.trace:
				logger.debug(f"{name} [{m.from_}, {m.to}) {Shape.of(m)}")
			return fn(self, m)
		finally:
			self._origins.pop()

	wrapper.production = name
	PRODUCTIONS[name] = wrapper
	return wrapper


class FactoryBase:
	"""
	State for one build.

	`here_docs` maps a here-doc body start to the end of its terminator. It is
	filled while strings are classified and read by the gap filler; a factory
	instance therefore belongs to exactly one document.
	"""

	def __init__(self, orig: str, options: Optional[FactoryOptions] = None) -> None:
		self.orig = orig
		self.options = options or FactoryOptions.from_env()
		self.here_docs: Dict[int, int] = {}
		self._here_doc_tail = 0
		self._origins: List[str] = []

	# --- dispatch ---------------------------------------------------------

	@property
	def origin(self) -> Optional[str]:
		"""Production currently being built."""
		return self._origins[-1] if self._origins else None

	def dispatch(self, name: str, m: Match) -> Elements:
		method = getattr(self, f"_{name}", None)
		if method is None or getattr(method, "production", None) != name:
			raise UnknownProductionError(name)
		return method(m)

	def unhandled(self, m: Match, note: Optional[str] = None, *, error: Type[UnhandledMatchError] = UnhandledMatchError) -> NoReturn:
		shape = Shape.of(m)
		text = m.Str
		if len(text) > 60:
			text = text[:57] + "..."
		logger.error(
			f"Unhandled match in {self.origin} at {m.from_}..{m.to} {text!r}: {shape}"
			+ (f" ({note})" if note else "")
		)
		raise error(self.origin, shape.content, shape.empty, offset=m.from_, text=text, note=note)

	# --- capture access ---------------------------------------------------

	@staticmethod
	def get(m: Match, key: str):
		return capture(m, key)

	@staticmethod
	def each(m: Match, key: str) -> List[Match]:
		return captures(m, key)

	@staticmethod
	def text(m: Match, key: str) -> str:
		found = capture(m, key)
		return found.Str.strip() if found is not None else ""

	def each_of(self, m: Match, *keys: str) -> List[tuple]:
		"""(key, capture) pairs for `keys`, in source order."""
		found = [(key, c) for key in keys for c in captures(m, key)]
		return sorted(found, key=lambda pair: pair[1].from_)

	# --- leaf construction ------------------------------------------------

	def leaf(self, cls: Type[Leaf], m: Match, **attrs) -> Leaf:
		return cls.from_match(m, origin=self.origin, **attrs)

	def trimmed(self, cls: Type[Leaf], m: Match, **attrs) -> Leaf:
		return cls.from_match_trimmed(m, origin=self.origin, **attrs)

	def at(self, cls: Type[Leaf], offset: int, content: str, **attrs) -> Leaf:
		return cls.from_int(offset, content, origin=self.origin, **attrs)

	def sample(self, cls: Type[Leaf], m: Match, token: str) -> Leaf:
		return cls.from_sample(m, token, origin=self.origin)

	def span(self, cls: Type[Leaf], start: int, end: int) -> Leaf:
		return cls.from_int(start, self.orig[start:end], origin=self.origin)

	def name_leaf(self, m: Match) -> Leaf:
		"""`Foo::Bar` is a package name, `foo` a bareword."""
		cls = PackageName if "::" in m.Str else Bareword
		return self.trimmed(cls, m)

	# --- scanning ---------------------------------------------------------

	def find(self, cls: Type[Leaf], start: int, end: int, token: Union[str, Pattern]) -> Optional[Leaf]:
		"""First occurrence of `token` (text or compiled pattern) in orig[start:end]."""
		if isinstance(token, str):
			index = self.orig.find(token, start, end)
			if index < 0:
				return None
			return self.at(cls, index, token)
		found = token.search(self.orig, start, end)
		if found is None:
			return None
		return self.at(cls, found.start(), found.group(0))

	def expect(self, cls: Type[Leaf], start: int, end: int, token: Union[str, Pattern], m: Match) -> Leaf:
		found = self.find(cls, start, end, token)
		if found is None:
			wanted = token if isinstance(token, str) else token.pattern
			self.unhandled(m, f"expected {wanted!r} in [{start}, {end})")
		return found

	def between(self, cls: Type[Leaf], left: Elements, right: Elements, token: Union[str, Pattern], m: Match) -> Leaf:
		"""Locate `token` in the gap after `left`'s last element and before `right`'s first."""
		start = left[-1].outer_to if left else m.from_
		end = right[0].from_ if right else m.to
		return self.expect(cls, start, end, token, m)

	# --- branch construction ----------------------------------------------

	def branch(self, cls: Type[Branch], children: Sequence[Element], at: Optional[int] = None) -> Branch:
		return cls.from_list(children, at=at, origin=self.origin)

	def balanced(self, cls: Type[Branch], m: Match, children: Sequence[Element], **kwargs) -> Branch:
		try:
			return B.balanced(cls, m, children, origin=self.origin, **kwargs)
		except ValueError as exc:
			self.unhandled(m, str(exc))

	def balanced_outer(self, cls: Type[Branch], m: Match, children: Sequence[Element], **kwargs) -> Branch:
		try:
			return B.balanced_outer(cls, m, children, origin=self.origin, **kwargs)
		except ValueError as exc:
			self.unhandled(m, str(exc))

	def delimited(
		self,
		cls: Type[Branch],
		start: int,
		end: int,
		children: Sequence[Element],
		*,
		front: int = 1,
		back: int = 1,
		enter: Type[Leaf] = BalancedEnter,
		exit: Type[Leaf] = BalancedExit,
	) -> Branch:
		"""Bracketed branch over orig[start:end]; `front`/`back` are delimiter widths."""
		return B.delimited(
			cls,
			start,
			end,
			self.orig[start : start + front],
			self.orig[end - back : end],
			children,
			enter=enter,
			exit=exit,
			origin=self.origin,
		)


@functools.lru_cache(maxsize=None)
def keyword(*words: str) -> Pattern:
	"""Pattern for any of `words` standing alone (not inside an identifier)."""
	return re.compile(r"(?<![\w-])(?:" + "|".join(re.escape(w) for w in words) + r")(?![\w-])")


__all__ = ["FactoryBase", "production", "keyword", "PRODUCTIONS", "Elements"]
