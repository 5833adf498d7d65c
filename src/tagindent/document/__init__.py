"""Parser interface: tokens, structural nodes and the reference reader."""

from .nodes import (
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
from .reader import ParseError, read_document
from .tokens import (
    COMMENT,
    EXPRESSION,
    HTML_TEXT,
    LITERAL,
    NAME,
    PUNCTUATOR,
    RAW_TEXT,
    TOKEN_KINDS,
    Token,
)

__all__ = [
    "Attribute",
    "BlockBranch",
    "BlockTag",
    "COMMENT",
    "Comment",
    "ControlBlock",
    "Document",
    "EXPRESSION",
    "Element",
    "EndTag",
    "HTML_TEXT",
    "LITERAL",
    "MustacheTag",
    "NAME",
    "Node",
    "PUNCTUATOR",
    "ParseError",
    "RAW_TEXT",
    "ScriptBlock",
    "StartTag",
    "StyleBlock",
    "TOKEN_KINDS",
    "Text",
    "Token",
    "read_document",
]
