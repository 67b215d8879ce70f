# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Root builder: the public entry point.

Pipeline placement:
  grammar match → Factory._TOP → Document → fill_gaps → thread → client

`build` owns one `Factory` per call, so the here-doc map never outlives the
document it was collected from.
"""

from __future__ import annotations

import logging
from typing import Optional

from perl6_parser.config import FactoryOptions
from perl6_parser.factory import Factory
from perl6_parser.linker import fill_gaps, thread
from perl6_parser.match import Match
from perl6_parser.nodes import Document
from perl6_parser.tokenizer import string_to_tokens

logger = logging.getLogger(__name__)


def build(root_match: Match, options: Optional[FactoryOptions] = None) -> Document:
	"""
	Turn the grammar's TOP match into a threaded `Document`.

	Text outside the statements (a shebang line, trailing pod, comments after
	the last statement) is tokenized onto the front and back of the document,
	so the result always covers the whole source.
	"""
	options = options or FactoryOptions.from_env()
	orig = root_match.orig
	factory = Factory(orig, options)
	children = factory._TOP(root_match)

	start = children[0].from_ if children else len(orig)
	end = children[-1].outer_to if children else len(orig)
	leading = string_to_tokens(0, orig[:start], factory.here_docs, strict=options.strict_gaps)
	trailing = string_to_tokens(
		end,
		orig[end:],
		factory.here_docs,
		strict=options.strict_gaps,
		line_start=end == 0 or orig[end - 1] == "\n",
	)
	document = Document(0, len(orig), [*leading, *children, *trailing], origin="TOP")

	fill_gaps(document, orig, factory.here_docs, strict=options.strict_gaps)
	thread(document)
	logger.debug(f"Built document of {len(orig)} characters, {len(document.children)} top-level nodes")
	return document


__all__ = ["build"]
