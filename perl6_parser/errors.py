# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exceptions raised while turning a match tree into elements.

None of these keep a reference to a grammar match object: only the production
name, key names, offsets and text survive into the exception.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


class FactoryError(RuntimeError):
	"""Base class for build failures."""


class UnhandledMatchError(FactoryError):
	"""
	A production received a match whose capture shape no rule accepts.

	The factory is tied to one grammar version; an unknown shape stops the
	build instead of producing a guessed tree.
	"""

	def __init__(
		self,
		production: Optional[str],
		content_keys: Iterable[str],
		empty_keys: Iterable[str],
		*,
		offset: int = 0,
		text: str = "",
		note: Optional[str] = None,
	) -> None:
		self.production = production
		self.content_keys: Tuple[str, ...] = tuple(sorted(content_keys))
		self.empty_keys: Tuple[str, ...] = tuple(sorted(empty_keys))
		self.offset = offset
		self.text = text
		self.note = note
		message = (
			f"Unhandled match in {production or '<unknown>'} at offset {offset}: "
			f"content keys {list(self.content_keys)}, empty keys {list(self.empty_keys)}"
		)
		if note:
			message = f"{message} ({note})"
		super().__init__(message)


class HereDocError(UnhandledMatchError):
	"""A `:to` quote whose terminator line is missing from the source."""


class UnknownProductionError(FactoryError):
	"""Dispatch was asked for a production the factory has no rule for."""

	def __init__(self, production: str) -> None:
		self.production = production
		super().__init__(f"No factory rule for production {production!r}")


class InternalConsistencyError(FactoryError):
	"""The element tree broke a taxonomy or range invariant after construction."""


__all__ = [
	"FactoryError",
	"UnhandledMatchError",
	"HereDocError",
	"UnknownProductionError",
	"InternalConsistencyError",
]
