from __future__ import annotations

from perl6_parser import FactoryOptions, build
from perl6_parser.nodes import (
	WS,
	Bareword,
	Comment,
	DecimalNumber,
	Document,
	HereDocBody,
	InfixOperator,
	LiteralString,
	Pod,
	Scalar,
	ScopeDeclarator,
	Semicolon,
	Statement,
)
from perl6_parser.test_support import MatchBuilder, check_invariants

OPTIONS = FactoryOptions()


def _types(nodes):
	return [type(node) for node in nodes]


def test_single_number_statement():
	b = MatchBuilder("42")
	doc = build(b.document(b.statement(b.number("42"))), OPTIONS)

	assert isinstance(doc, Document)
	assert (doc.from_, doc.to) == (0, 2)
	(statement,) = doc.children
	assert isinstance(statement, Statement)
	(number,) = statement.children
	assert type(number) is DecimalNumber
	assert number.content == "42"
	assert (number.from_, number.to) == (0, 2)
	assert number.factory_origin == "integer"
	check_invariants(doc, "42")


def test_scope_declaration_with_initializer():
	source = "my $x = 1;"
	b = MatchBuilder(source)
	variable = b.scalar("$x").hash["variable"]
	initializer = b.at("= 1", sym=b.at("="), EXPR=b.number("1"))
	declarator = b.at("$x = 1", variable_declarator=b.at("$x", variable=variable), initializer=initializer)
	scoped = b.at("$x = 1", declarator=declarator)
	expr = b.at("my $x = 1", scope_declarator=b.at("my $x = 1", sym=b.at("my"), scoped=scoped))
	doc = build(b.document(b.statement(expr)), OPTIONS)

	(statement,) = doc.children
	semantic = statement.semantic_children()
	assert _types(semantic) == [ScopeDeclarator, InfixOperator, DecimalNumber, Semicolon]
	scope, equals, one, semi = semantic
	assert _types(scope.semantic_children()) == [Bareword, Scalar]
	assert scope.children[-1].content == "$x"
	assert (scope.from_, scope.to) == (0, 5)
	assert equals.content == "="
	assert one.content == "1"
	assert (semi.from_, semi.to) == (9, 10)
	tokens = check_invariants(doc, source)
	assert [token.content for token in tokens] == ["my", " ", "$x", " ", "=", " ", "1", ";"]


def test_here_doc_body_becomes_ghost_between_statements():
	# The body starts on the line after the quote. Text after `;` on the
	# quote's own line would be ordinary source, not body.
	source ="say Q:to[END];\nFirst line\nEND\n5;"
	b = MatchBuilder(source)
	quibble = b.at(
		":to[END]",
		babble=b.at(":to", quotepair=[b.at(":to", identifier=b.at("to"))]),
		nibble=b.at("END"),
	)
	quote = b.at("Q:to[END]", sym=b.at("Q"), quibble=quibble)
	say = b.call("say", b.at("Q:to[END]", value=b.at("Q:to[END]", quote=quote)))
	doc = build(b.document(b.statement(say), b.statement(b.number("5", 15))), OPTIONS)

	first, second = [node for node in doc.children if isinstance(node, Statement)]
	string = first.semantic_children()[1]
	assert type(string) is LiteralString
	assert string.to == 13
	assert string.is_here_doc
	assert string.adverbs == (":to",)
	assert string.here_doc == "First line\n"

	ghosts = [node for node in doc.children if isinstance(node, HereDocBody)]
	assert len(ghosts) == 1
	ghost = ghosts[0]
	assert (ghost.from_, ghost.to) == (15, 29)
	assert ghost.content == "First line\nEND"
	assert not ghost.is_semantic
	assert second.from_ == 30
	assert second.children[0].content == "5"
	check_invariants(doc, source)


def test_comment_between_statements():
	source = "1;\n# hi\n2;"
	b = MatchBuilder(source)
	doc = build(b.document(b.statement(b.number("1")), b.statement(b.number("2"))), OPTIONS)

	assert _types(doc.children) == [Statement, WS, Comment, WS, Statement]
	comment = doc.children[2]
	assert comment.content == "# hi"
	assert (comment.from_, comment.to) == (3, 7)
	assert not comment.is_visible
	check_invariants(doc, source)


def test_empty_program():
	b = MatchBuilder("")
	doc = build(b.document(), OPTIONS)

	assert (doc.from_, doc.to) == (0, 0)
	assert doc.children == []
	assert doc.is_root
	assert check_invariants(doc, "") == []


def test_comment_only_program():
	source = "# nothing here\n"
	b = MatchBuilder(source)
	doc = build(b.document(), OPTIONS)

	assert _types(doc.children) == [Comment, WS]
	check_invariants(doc, source)


def test_leading_shebang_and_trailing_pod():
	source = "#!/usr/bin/env raku\n42;\n=begin pod\nhi\n=end pod\n"
	b = MatchBuilder(source)
	doc = build(b.document(b.statement(b.number("42"))), OPTIONS)

	kinds = _types(doc.children)
	assert kinds[:3] == [Comment, WS, Statement]
	assert doc.children[0].content == "#!/usr/bin/env raku"
	pod = [node for node in doc.children if isinstance(node, Pod)]
	assert [node.content for node in pod] == ["=begin pod\nhi\n=end pod"]
	check_invariants(doc, source)


def test_build_reads_options_from_environment(monkeypatch):
	monkeypatch.setenv("PERL6_PARSER_TRACE", "1")
	b = MatchBuilder("7")
	doc = build(b.document(b.statement(b.number("7"))))

	assert doc.children[0].children[0].content == "7"


def test_each_build_has_its_own_here_doc_map():
	source = "say q:to/X/;\nbody\nX\n"
	b = MatchBuilder(source)

	def tree():
		quibble = b.at(":to/X/", babble=b.at(":to", quotepair=b.at(":to", identifier=b.at("to"))), nibble=b.at("X"))
		quote = b.at("q:to/X/", sym=b.at("q"), quibble=quibble)
		return b.document(b.statement(b.call("say", b.at("q:to/X/", value=b.at("q:to/X/", quote=quote)))))

	first = build(tree(), OPTIONS)
	second = build(tree(), OPTIONS)

	for doc in (first, second):
		ghosts = [node for node in doc.walk() if isinstance(node, HereDocBody)]
		assert [ghost.content for ghost in ghosts] == ["body\nX"]
		check_invariants(doc, source)
