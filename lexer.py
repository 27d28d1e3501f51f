"""
Lexer for the parenthesized expression language.

Overview:
- `lex(source, position)` is a pure function: given the source text and the
    offset where the previous token ended, it returns the next `Token` span.
    The returned token's `end` is the position to resume from.
- Leading whitespace (space, carriage return, newline) is skipped. Tabs and
    other characters are not whitespace and end up inside tokens.
- A token runs until the next delimiter: whitespace, `,`, `(`, `)` or `:`.
    When the very next character is itself a delimiter the token is exactly
    that one character, so punctuation is always tokenized on its own and the
    lexer always makes progress.
- At end of input a zero-length token is returned; it is the sentinel that
    stops stream assembly.

Examples:
    Input:  "(x: 5)"
    Tokens: ["(", "x", ":", "5", ")"]

`Lexer` wraps the function with the object interface the rest of the
toolchain uses (`get_next_token()` / `tokenize()`).
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
from errors import ArgumentError
from tokens import Token

if TYPE_CHECKING:
    from token_stream import TokenStream

WHITESPACE = " \r\n"
DELIMITERS = " \r\n,():"


def lex(source: Optional[str], position: int = 0) -> Token:
    """Return the next token starting the scan at `position`."""
    if source is None or not isinstance(source, str):
        raise ArgumentError("Cannot lex empty source.")
    if (
        not isinstance(position, int)
        or isinstance(position, bool)
        or not 0 <= position <= len(source)
    ):
        raise ArgumentError(f"Lex position {position!r} is outside the source.")

    length = len(source)
    start = position
    while start < length and source[start] in WHITESPACE:
        start += 1

    if start == length:
        return Token(source, start, start)

    end = start
    while end < length and source[end] not in DELIMITERS:
        end += 1

    # A delimiter right at the start becomes a one-character token.
    if end == start:
        end += 1

    return Token(source, start, end)


class Lexer:
    def __init__(self, text: str):
        if text is None or not isinstance(text, str):
            raise ArgumentError("Cannot lex empty source.")
        self.text = text
        self.pos = 0

    def get_next_token(self) -> Token:
        """Return tokens one at a time; a zero-length token marks the end."""
        token = lex(self.text, self.pos)
        self.pos = token.end
        return token

    def tokenize(self) -> TokenStream:
        """Return the whole token stream for the input string."""
        from token_stream import assemble

        return assemble(self.text)
