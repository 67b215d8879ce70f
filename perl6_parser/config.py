# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Factory options.

Options are read from the environment by default so a driver can flip tracing
on without plumbing flags through every call site:

  PERL6_PARSER_TRACE=1        log every production at debug level
  PERL6_PARSER_STRICT_GAPS=1  raise instead of logging on malformed gaps
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

TRACE_ENV = "PERL6_PARSER_TRACE"
STRICT_GAPS_ENV = "PERL6_PARSER_STRICT_GAPS"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


def _flag(environ: Mapping[str, str], name: str) -> bool:
	raw = environ.get(name, "").strip().lower()
	if raw in _TRUTHY:
		return True
	if raw not in _FALSY:
		logger.warning(f"Ignoring unrecognized value {raw!r} for {name}")
	return False


@dataclass(frozen=True)
class FactoryOptions:
	"""Switches that change how a build reports problems, never what it builds."""

	trace: bool = False
	strict_gaps: bool = False

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FactoryOptions":
		"""Create options from environment variables (defaults to `os.environ`)."""
		if environ is None:
			environ = os.environ
		return cls(
			trace=_flag(environ, TRACE_ENV),
			strict_gaps=_flag(environ, STRICT_GAPS_ENV),
		)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "FactoryOptions":
		"""Create options from a plain mapping (e.g. a driver's JSON config)."""
		return cls(
			trace=bool(data.get("trace", False)),
			strict_gaps=bool(data.get("strict_gaps", False)),
		)


__all__ = ["FactoryOptions", "TRACE_ENV", "STRICT_GAPS_ENV"]
