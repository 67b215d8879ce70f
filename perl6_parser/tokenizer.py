# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tokenizer for text the grammar matched but the factory did not claim.

Gaps between sibling elements only ever hold layout: whitespace, comments,
pod, and here-doc bodies (which sit on the lines after their opening token).
`string_to_tokens` turns such a slice into leaves covering it exactly.
"""

from __future__ import annotations

import logging
import re
from typing import List, Mapping, Optional

from perl6_parser.balanced import closer_for
from perl6_parser.element import Leaf
from perl6_parser.errors import InternalConsistencyError
from perl6_parser.nodes import WS, Comment, HereDocBody, Pod

logger = logging.getLogger(__name__)

_POD_BEGIN = re.compile(r"=begin[ \t]+([\w:-]+)")
_POD_FINISH = re.compile(r"=(?:finish|END)\b")
_POD_ABBREVIATED = re.compile(r"=(?:for[ \t]+)?[A-Za-z][\w-]*")
_BLANK_LINE = re.compile(r"\n[ \t]*(?:\n|$)")
_EMBEDDED_COMMENT = re.compile(r"#`(\(+|\[+|\{+|<+|«|｢)")


def _pod_end(text: str, start: int) -> int:
	begin = _POD_BEGIN.match(text, start)
	if begin:
		end = re.compile(r"^[ \t]*=end[ \t]+" + re.escape(begin.group(1)) + r"\b[^\n]*", re.M)
		found = end.search(text, begin.end())
		return found.end() if found else len(text)
	if _POD_FINISH.match(text, start):
		return len(text)
	blank = _BLANK_LINE.search(text, start)
	return blank.start() if blank else len(text)


def _comment_end(text: str, start: int) -> int:
	embedded = _EMBEDDED_COMMENT.match(text, start)
	if embedded:
		opener = embedded.group(1)
		closer = "".join(closer_for(ch) for ch in opener)
		depth = 1
		i = embedded.end()
		while i < len(text):
			if text.startswith(closer, i):
				depth -= 1
				i += len(closer)
				if depth == 0:
					return i
				continue
			if text.startswith(opener, i):
				depth += 1
				i += len(opener)
				continue
			i += 1
		return len(text)
	newline = text.find("\n", start)
	return len(text) if newline < 0 else newline


def string_to_tokens(
	offset: int,
	text: str,
	here_docs: Optional[Mapping[int, int]] = None,
	*,
	strict: bool = False,
	line_start: bool = True,
) -> List[Leaf]:
	"""
	Classify `text`, which starts at absolute `offset`, into layout leaves.

	`here_docs` maps a here-doc body start to the end of its terminator; a body
	start inside `text` becomes one `HereDocBody` and whitespace runs stop in
	front of it. Anything else that is not layout is skipped with a warning,
	leaving a hole, unless `strict` is set.

	Pod only opens at a line start; `line_start` says whether `text` begins one.
	"""
	here_docs = here_docs or {}
	tokens: List[Leaf] = []
	i = 0
	n = len(text)
	while i < n:
		pos = offset + i
		if pos in here_docs:
			end = min(here_docs[pos] - offset, n)
			if end <= i:
				logger.warning(f"Here-doc at {pos} ends at {here_docs[pos]}, before it starts")
			else:
				tokens.append(HereDocBody.from_int(pos, text[i:end]))
				i = end
				continue
		ch = text[i]
		if ch.isspace():
			j = i + 1
			while j < n and text[j].isspace() and offset + j not in here_docs:
				j += 1
			tokens.append(WS.from_int(pos, text[i:j]))
			i = j
		elif ch == "#":
			j = _comment_end(text, i)
			tokens.append(Comment.from_int(pos, text[i:j]))
			i = j
		elif ch == "=" and (text[i - 1] == "\n" if i else line_start) and _POD_ABBREVIATED.match(text, i):
			j = _pod_end(text, i)
			tokens.append(Pod.from_int(pos, text[i:j]))
			i = j
		else:
			j = i + 1
			while j < n and not text[j].isspace() and text[j] != "#" and offset + j not in here_docs:
				j += 1
			message = f"Unclassified text {text[i:j]!r} at offset {pos}"
			if strict:
				raise InternalConsistencyError(message)
			logger.warning(message)
			i = j
	return tokens


__all__ = ["string_to_tokens"]
