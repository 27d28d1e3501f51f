"""Token definitions for the lexer.

A `Token` is a view into the source buffer: it records the start and end
offsets of a lexeme and a reference to the text it came from, without
copying characters. The `TokenType` enum categorizes a token by its content
and is what the parser dispatches on. A zero-length token only ever marks
the end of input.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from enum import Enum, auto


class TokenType(Enum):
    # Literals
    INTEGER = auto()
    IDENTIFIER = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    COLON = auto()
    COMMA = auto()

    # Special
    UNKNOWN = auto()
    EOF = auto()

    def __str__(self) -> str:
        return self.name


INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_PUNCTUATION = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}


def classify(text: str) -> TokenType:
    """Return the category of a lexeme."""
    if not text:
        return TokenType.EOF
    if text in _PUNCTUATION:
        return _PUNCTUATION[text]
    if INTEGER_PATTERN.fullmatch(text):
        return TokenType.INTEGER
    if IDENTIFIER_PATTERN.fullmatch(text):
        return TokenType.IDENTIFIER
    return TokenType.UNKNOWN


@dataclass(frozen=True, eq=False)
class Token:
    source: str = field(repr=False)
    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Token end {self.end} precedes start {self.start}")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.text!r}, {self.start}:{self.end})"

    def __len__(self) -> int:
        return self.end - self.start

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.text == other
        if isinstance(other, Token):
            return (self.start, self.end, self.text) == (
                other.start,
                other.end,
                other.text,
            )
        return NotImplemented

    def __hash__(self) -> int:
        # hash(token) == hash(token.text), consistent with __eq__ against str
        return hash(self.text)

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]

    @property
    def lexeme(self) -> str:
        if self.is_eof:
            return str(TokenType.EOF)
        return self.text

    @property
    def type(self) -> TokenType:
        return classify(self.text)

    @property
    def is_eof(self) -> bool:
        return self.end == self.start

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    @property
    def line(self) -> int:
        return self.source.count("\n", 0, self.start) + 1

    @property
    def column(self) -> int:
        return self.start - self.source.rfind("\n", 0, self.start)

    def matches(self, literal: str) -> bool:
        """Compare the token's content against a literal string."""
        return self.text == literal
