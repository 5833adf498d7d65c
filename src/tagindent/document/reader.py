"""Reference reader turning hybrid markup text into tokens and a node tree."""

from __future__ import annotations

import re
from bisect import bisect_right

from tagindent.document.nodes import (
    Attribute,
    BlockBranch,
    BlockTag,
    Comment,
    ControlBlock,
    Document,
    Element,
    EndTag,
    MustacheTag,
    Node,
    ScriptBlock,
    StartTag,
    StyleBlock,
    Text,
)
from tagindent.document.tokens import (
    COMMENT,
    EXPRESSION,
    HTML_TEXT,
    LITERAL,
    NAME,
    PUNCTUATOR,
    RAW_TEXT,
    Token,
)

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
DEFAULT_LANGUAGES = {"script": "js", "style": "css"}

_TAG_NAME_RE = re.compile(r"[A-Za-z][\w:.\-]*")
_ATTRIBUTE_NAME_RE = re.compile(r"[^\s=/>\"'{}]+")
_UNQUOTED_VALUE_RE = re.compile(r"[^\s>\"'=`{]+?(?=\s|/>|>|$)")
_BLOCK_KEYWORD_RE = re.compile(r"[A-Za-z]+")
_TEXT_PIECE_RE = re.compile(r"\s+|\S(?:[^\n]*\S)?")
_LINE_CONTENT_RE = re.compile(r"\S(?:[^\n]*\S)?")
_WHITESPACE_RE = re.compile(r"\s*")
_EXPRESSION_TOKEN_RE = re.compile(
    r"""
    (?P<string>'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`(?:\\.|[^`\\])*`)
    |(?P<number>\d[\w.]*)
    |(?P<name>[A-Za-z_$][\w$]*)
    |(?P<punct>=>|\.\.\.|===|!==|==|!=|<=|>=|&&|\|\||\?\?|\?\.|[-+*/%<>=!&|^~?:;,.()\[\]{}@\#])
    """,
    re.VERBOSE | re.DOTALL,
)


class ParseError(ValueError):
    """Raised when the reader cannot build a tree from the source text."""

    def __init__(self, message: str, line: int, column: int) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} ({line}:{column})")


def read_document(text: str) -> Document:
    """Tokenize and parse a hybrid markup document."""
    reader = _Reader(text)
    children = reader.parse_children(stop_on_close=False)
    if reader.pos < len(text):
        raise reader.error("Unexpected closing tag")
    return Document(text=text, tokens=tuple(reader.tokens), children=tuple(children))


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []
        self._line_starts = [0] + [
            index + 1 for index, char in enumerate(text) if char == "\n"
        ]

    def error(self, message: str, offset: int | None = None) -> ParseError:
        at = self.pos if offset is None else offset
        line = bisect_right(self._line_starts, at)
        return ParseError(message=message, line=line, column=at - self._line_starts[line - 1])

    def emit(self, kind: str, start: int, end: int) -> int:
        line = bisect_right(self._line_starts, start)
        token = Token(
            index=len(self.tokens),
            kind=kind,
            text=self.text[start:end],
            start=start,
            end=end,
            line=line,
            column=start - self._line_starts[line - 1],
        )
        self.tokens.append(token)
        return token.index

    def emit_literal(self, literal: str) -> int:
        if not self.text.startswith(literal, self.pos):
            raise self.error(f"Expected {literal!r}")
        index = self.emit(PUNCTUATOR, self.pos, self.pos + len(literal))
        self.pos += len(literal)
        return index

    def skip_whitespace(self) -> None:
        match = _WHITESPACE_RE.match(self.text, self.pos)
        if match is not None:
            self.pos = match.end()

    def at(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    # -- content ---------------------------------------------------------

    def parse_children(self, stop_on_close: bool) -> list[Node]:
        children: list[Node] = []
        while not self.at_end():
            if self.at("</") or self.at("{:") or self.at("{/"):
                if not stop_on_close:
                    raise self.error("Unexpected closing tag")
                break
            if self.at("<!--"):
                children.append(self.parse_comment())
            elif self.at("<") and self._tag_name_follows():
                children.append(self.parse_element())
            elif self.at("{#"):
                children.append(self.parse_control_block())
            elif self.at("{"):
                children.append(self.parse_mustache())
            else:
                children.append(self.parse_text())
        return children

    def _tag_name_follows(self) -> bool:
        return _TAG_NAME_RE.match(self.text, self.pos + 1) is not None

    def parse_text(self) -> Text:
        start = self.pos
        end = start + 1
        while end < len(self.text):
            char = self.text[end]
            if char == "{":
                break
            if char == "<" and (
                self.text.startswith("</", end)
                or self.text.startswith("<!--", end)
                or _TAG_NAME_RE.match(self.text, end + 1) is not None
            ):
                break
            end += 1
        first = len(self.tokens)
        for piece in _TEXT_PIECE_RE.finditer(self.text, start, end):
            self.emit(HTML_TEXT, piece.start(), piece.end())
        self.pos = end
        return Text(first=first, last=len(self.tokens) - 1)

    def parse_comment(self) -> Comment:
        end = self.text.find("-->", self.pos + 4)
        if end < 0:
            raise self.error("Unterminated comment")
        index = self.emit(COMMENT, self.pos, end + 3)
        self.pos = end + 3
        return Comment(first=index, last=index)

    # -- tags ------------------------------------------------------------

    def parse_element(self) -> Node:
        start_tag = self.parse_start_tag()
        name = self.tokens[start_tag.name].text
        lowered = name.lower()
        if lowered in DEFAULT_LANGUAGES and not start_tag.self_closing:
            return self.parse_raw_text_block(start_tag, lowered)
        if start_tag.self_closing or lowered in VOID_ELEMENTS:
            return Element(
                name=name,
                first=start_tag.first,
                last=start_tag.last,
                start_tag=start_tag,
                children=(),
                end_tag=None,
            )
        children = self.parse_children(stop_on_close=True)
        if not self.at("</"):
            raise self.error(f"Unclosed element <{name}>", self.tokens[start_tag.first].start)
        end_tag = self.parse_end_tag(name)
        return Element(
            name=name,
            first=start_tag.first,
            last=end_tag.last,
            start_tag=start_tag,
            children=tuple(children),
            end_tag=end_tag,
        )

    def parse_start_tag(self) -> StartTag:
        first = self.emit_literal("<")
        name_match = _TAG_NAME_RE.match(self.text, self.pos)
        if name_match is None:
            raise self.error("Expected tag name")
        name = self.emit(NAME, self.pos, name_match.end())
        self.pos = name_match.end()
        attributes: list[Attribute] = []
        while True:
            self.skip_whitespace()
            if self.at_end():
                raise self.error("Unterminated start tag")
            if self.at("/>"):
                last = self.emit_literal("/>")
                return StartTag(
                    first=first,
                    last=last,
                    name=name,
                    attributes=tuple(attributes),
                    self_closing=True,
                )
            if self.at(">"):
                last = self.emit_literal(">")
                return StartTag(
                    first=first,
                    last=last,
                    name=name,
                    attributes=tuple(attributes),
                    self_closing=False,
                )
            attributes.append(self.parse_attribute())

    def parse_attribute(self) -> Attribute:
        if self.at("{"):
            mustache = self.parse_mustache()
            return Attribute(first=mustache.first, last=mustache.last, key=None, values=(mustache,))
        key_match = _ATTRIBUTE_NAME_RE.match(self.text, self.pos)
        if key_match is None:
            raise self.error("Expected attribute name")
        key = self.emit(NAME, self.pos, key_match.end())
        self.pos = key_match.end()
        save = self.pos
        self.skip_whitespace()
        if not self.at("="):
            self.pos = save
            return Attribute(first=key, last=key, key=key)
        self.emit_literal("=")
        self.skip_whitespace()
        values: list[MustacheTag] = []
        quote = self.text[self.pos] if not self.at_end() else ""
        if quote in {'"', "'"}:
            self.emit_literal(quote)
            while not self.at(quote):
                if self.at_end():
                    raise self.error("Unterminated attribute value")
                if self.at("{"):
                    values.append(self.parse_mustache())
                    continue
                self._emit_literal_run(quote)
            last = self.emit_literal(quote)
        elif self.at("{"):
            mustache = self.parse_mustache()
            values.append(mustache)
            last = mustache.last
        else:
            value_match = _UNQUOTED_VALUE_RE.match(self.text, self.pos)
            if value_match is None:
                raise self.error("Expected attribute value")
            last = self.emit(LITERAL, self.pos, value_match.end())
            self.pos = value_match.end()
        return Attribute(first=key, last=last, key=key, values=tuple(values))

    def _emit_literal_run(self, quote: str) -> None:
        end = self.pos
        while end < len(self.text) and self.text[end] not in {quote, "{"}:
            end += 1
        for piece in _LINE_CONTENT_RE.finditer(self.text, self.pos, end):
            self.emit(LITERAL, piece.start(), piece.end())
        self.pos = end

    def parse_end_tag(self, name: str) -> EndTag:
        first = self.emit_literal("</")
        self.skip_whitespace()
        name_match = _TAG_NAME_RE.match(self.text, self.pos)
        if name_match is None or name_match.group(0) != name:
            raise self.error(f"Expected </{name}>")
        self.emit(NAME, self.pos, name_match.end())
        self.pos = name_match.end()
        self.skip_whitespace()
        last = self.emit_literal(">")
        return EndTag(first=first, last=last)

    def parse_raw_text_block(self, start_tag: StartTag, name: str) -> Node:
        closing = re.compile(rf"</\s*{name}\s*>", re.IGNORECASE)
        match = closing.search(self.text, self.pos)
        if match is None:
            raise self.error(f"Unclosed element <{name}>", self.tokens[start_tag.first].start)
        content: list[int] = []
        for piece in _LINE_CONTENT_RE.finditer(self.text, self.pos, match.start()):
            content.append(self.emit(RAW_TEXT, piece.start(), piece.end()))
        self.pos = match.start()
        end_tag = self.parse_end_tag(self.tokens[start_tag.name].text)
        block_type = ScriptBlock if name == "script" else StyleBlock
        return block_type(
            first=start_tag.first,
            last=end_tag.last,
            start_tag=start_tag,
            content=tuple(content),
            end_tag=end_tag,
            lang=self._block_language(start_tag, name),
        )

    def _block_language(self, start_tag: StartTag, name: str) -> str:
        for attribute in start_tag.attributes:
            if attribute.key is None:
                continue
            key = self.tokens[attribute.key].text.lower()
            if key not in {"lang", "type"} or attribute.last == attribute.key:
                continue
            values = [
                self.tokens[index].text
                for index in range(attribute.key + 1, attribute.last + 1)
                if self.tokens[index].kind == LITERAL
            ]
            if values:
                return values[0].rsplit("/", 1)[-1].lower()
        return DEFAULT_LANGUAGES[name]

    # -- mustaches -------------------------------------------------------

    def parse_mustache(self) -> MustacheTag:
        first = self.pos
        if self.at("{@"):
            start = self.emit_literal("{@")
            keyword = self._emit_keyword()
            kind = self.tokens[keyword].text
        else:
            start = self.emit_literal("{")
            kind = "text"
        last = self._parse_expression(first)
        return MustacheTag(kind=kind, first=start, last=last)

    def parse_control_block(self) -> ControlBlock:
        open_tag = self._parse_block_tag("{#")
        branches: list[BlockBranch] = []
        tag = open_tag
        while True:
            children = self.parse_children(stop_on_close=True)
            branches.append(BlockBranch(tag=tag, children=tuple(children)))
            if self.at("{:"):
                tag = self._parse_block_tag("{:")
                continue
            if self.at("{/"):
                close_tag = self._parse_block_tag("{/")
                if close_tag.keyword != open_tag.keyword:
                    raise self.error(
                        f"Expected {{/{open_tag.keyword}}}",
                        self.tokens[close_tag.first].start,
                    )
                return ControlBlock(
                    kind=open_tag.keyword,
                    first=open_tag.first,
                    last=close_tag.last,
                    branches=tuple(branches),
                    close_tag=close_tag,
                )
            raise self.error(
                f"Unclosed {{#{open_tag.keyword}}} block",
                self.tokens[open_tag.first].start,
            )

    def _parse_block_tag(self, opener: str) -> BlockTag:
        begin = self.pos
        first = self.emit_literal(opener)
        keyword = self._emit_keyword()
        last = self._parse_expression(begin)
        return BlockTag(keyword=self.tokens[keyword].text, first=first, last=last)

    def _emit_keyword(self) -> int:
        self.skip_whitespace()
        match = _BLOCK_KEYWORD_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Expected block keyword")
        index = self.emit(NAME, self.pos, match.end())
        self.pos = match.end()
        return index

    def _parse_expression(self, begin: int) -> int:
        """Emit expression tokens up to and including the balancing ``}``."""
        depth = 0
        while True:
            self.skip_whitespace()
            if self.at_end():
                raise self.error("Unterminated mustache", begin)
            if self.at("}") and depth == 0:
                return self.emit_literal("}")
            match = _EXPRESSION_TOKEN_RE.match(self.text, self.pos)
            if match is None:
                self.emit(EXPRESSION, self.pos, self.pos + 1)
                self.pos += 1
                continue
            if match.lastgroup == "punct":
                value = match.group(0)
                if value == "{":
                    depth += 1
                elif value == "}":
                    depth -= 1
                self.emit(PUNCTUATOR, match.start(), match.end())
            else:
                self.emit(EXPRESSION, match.start(), match.end())
            self.pos = match.end()
