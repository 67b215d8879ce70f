from __future__ import annotations

import logging

import pytest

from perl6_parser.errors import InternalConsistencyError
from perl6_parser.linker import fill_gaps
from perl6_parser.nodes import WS, Comment, DecimalNumber, Document, HereDocBody, Pod
from perl6_parser.tokenizer import string_to_tokens


def _pieces(tokens):
	return [(type(token), token.from_, token.content) for token in tokens]


def test_whitespace_run_is_one_token():
	assert _pieces(string_to_tokens(10, " \n\t ")) == [(WS, 10, " \n\t ")]


def test_comment_stops_before_newline():
	tokens = string_to_tokens(2, "\n# hi\n")
	assert _pieces(tokens) == [(WS, 2, "\n"), (Comment, 3, "# hi"), (WS, 7, "\n")]


def test_comment_at_end_of_text():
	assert _pieces(string_to_tokens(0, "  # tail")) == [(WS, 0, "  "), (Comment, 2, "# tail")]


def test_embedded_comment_nests():
	text = "#`( a ( b ) c ) "
	tokens = string_to_tokens(0, text)
	assert _pieces(tokens) == [(Comment, 0, "#`( a ( b ) c )"), (WS, 15, " ")]


def test_embedded_comment_with_doubled_brackets():
	text = "#`{{ x } y }}\n"
	assert _pieces(string_to_tokens(0, text)) == [(Comment, 0, "#`{{ x } y }}"), (WS, 13, "\n")]


def test_delimited_pod_block():
	text = "\n=begin pod\nSome text\n=end pod\n"
	tokens = string_to_tokens(0, text)
	assert _pieces(tokens) == [
		(WS, 0, "\n"),
		(Pod, 1, "=begin pod\nSome text\n=end pod"),
		(WS, 30, "\n"),
	]
	assert not tokens[1].is_visible


def test_abbreviated_pod_runs_to_blank_line():
	text = "=head1 Title\nmore\n\n"
	assert _pieces(string_to_tokens(0, text)) == [(Pod, 0, "=head1 Title\nmore"), (WS, 17, "\n\n")]


def test_finish_swallows_the_rest():
	text = "\n=finish\nanything ; goes\n"
	assert _pieces(string_to_tokens(5, text)) == [(WS, 5, "\n"), (Pod, 6, "=finish\nanything ; goes\n")]


def test_equals_inside_a_line_is_not_pod(caplog):
	with caplog.at_level(logging.WARNING, logger="perl6_parser.tokenizer"):
		tokens = string_to_tokens(0, " =head1")
	assert _pieces(tokens) == [(WS, 0, " ")]
	assert "Unclassified text '=head1' at offset 1" in caplog.text


def test_here_doc_start_becomes_ghost():
	text = "\nline one\nEND\n"
	tokens = string_to_tokens(20, text, {21: 33})
	assert _pieces(tokens) == [(WS, 20, "\n"), (HereDocBody, 21, "line one\nEND"), (WS, 33, "\n")]
	assert not tokens[1].is_semantic


def test_here_doc_body_is_cut_at_the_gap_end():
	tokens = string_to_tokens(0, "\nabc", {1: 99})
	assert _pieces(tokens) == [(WS, 0, "\n"), (HereDocBody, 1, "abc")]


def test_unclassified_text_leaves_a_hole(caplog):
	with caplog.at_level(logging.WARNING, logger="perl6_parser.tokenizer"):
		tokens = string_to_tokens(0, " junk ")
	assert _pieces(tokens) == [(WS, 0, " "), (WS, 5, " ")]
	assert "junk" in caplog.text


def test_unclassified_text_raises_when_strict():
	with pytest.raises(InternalConsistencyError):
		string_to_tokens(0, " junk ", strict=True)


def test_empty_text():
	assert string_to_tokens(4, "") == []


def test_gap_starting_mid_line_is_not_pod(caplog):
	with caplog.at_level(logging.WARNING, logger="perl6_parser.tokenizer"):
		tokens = string_to_tokens(1, "=head1 x", line_start=False)
	assert _pieces(tokens) == [(WS, 7, " ")]
	assert "Unclassified text '=head1' at offset 1" in caplog.text


@pytest.mark.parametrize(
	"source, pod",
	[
		("1=head1 x", False),
		("1\n=head1 x", True),
	],
)
def test_gap_filler_checks_the_character_before_the_gap(source, pod, caplog):
	one = DecimalNumber.from_int(0, "1")
	doc = Document(0, len(source), [one])
	with caplog.at_level(logging.WARNING, logger="perl6_parser.tokenizer"):
		fill_gaps(doc, source)
	assert any(isinstance(node, Pod) for node in doc.children) is pod
	assert ("Unclassified" in caplog.text) is not pod
