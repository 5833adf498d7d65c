from __future__ import annotations

import pytest

from tagindent.document import read_document
from tagindent.indent import CONTENT, STRUCTURAL, WHITESPACE, TokenStream, classify


def test_classify_splits_whitespace_content_and_structure() -> None:
    document = read_document("<p>\n  hi\n</p>")
    by_text = {token.text: classify(token) for token in document.tokens}

    assert by_text["<"] == STRUCTURAL
    assert by_text["p"] == CONTENT
    assert by_text["\n  "] == WHITESPACE
    assert by_text["hi"] == CONTENT


def test_adjacency_queries_skip_whitespace() -> None:
    document = read_document("<p>\n  hi\n</p>")
    stream = TokenStream(document.tokens)
    close = document.tokens[2]
    closer = next(token for token in document.tokens if token.text == "</")

    following = stream.next_significant(close)
    assert following is not None
    assert following.text == "hi"
    preceding = stream.previous_significant(closer)
    assert preceding is not None
    assert preceding.text == "hi"
    assert stream.previous_significant(document.tokens[0]) is None
    assert stream.next_significant(document.tokens[-1]) is None


def test_line_heads_are_first_significant_token_per_line() -> None:
    document = read_document("<div>\n  <p>x</p>\n</div>")
    stream = TokenStream(document.tokens)

    heads = [(token.line, token.text) for token in stream.line_heads()]
    assert heads == [(1, "<"), (2, "<"), (3, "</")]


def test_tokens_after_multiline_comment_belong_to_its_line() -> None:
    document = read_document("<!-- a\nb --><p>x</p>\n<br>")
    stream = TokenStream(document.tokens)
    comment = document.tokens[0]
    p_open = document.tokens[1]

    assert stream.is_line_head(comment)
    assert not stream.is_line_head(p_open)
    assert stream.head_of(p_open) is comment
    assert [token.line for token in stream.line_heads()] == [1, 3]


def test_head_of_rejects_whitespace() -> None:
    document = read_document("<p>\n  x\n</p>")
    stream = TokenStream(document.tokens)

    with pytest.raises(ValueError, match="no line head"):
        stream.head_of(document.tokens[3])
