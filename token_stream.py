"""Ordered token sequence produced by repeatedly invoking the lexer.

`assemble(source)` lexes from the end of each token until the zero-length
end-of-input token appears. Tokens are kept in a list in source order; the
end-of-input sentinel is stored separately as `stream.eof` so indexing only
ever sees real tokens, while `peek()` past the end yields the sentinel.

A stream can be released explicitly or used as a context manager; a stream
whose assembly failed is released before the error propagates.
"""

from __future__ import annotations
from typing import Iterator, List, Optional, Tuple
from errors import ArgumentError, LangError
from lexer import lex
from tokens import Token


class TokenStream:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.eof: Optional[Token] = None
        self.released = False

    def __repr__(self) -> str:
        return f"TokenStream({len(self.tokens)} tokens)"

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def __enter__(self) -> TokenStream:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def append(self, token: Token) -> None:
        """Append a token at the tail, keeping source order."""
        if self.released:
            raise ArgumentError("Cannot append to a released token stream.")
        if token.is_eof:
            raise ArgumentError("End-of-input tokens are not stored in the stream.")
        if token.source is not self.source and token.source != self.source:
            raise ArgumentError("Token does not belong to this stream's source.")
        if self.tokens and token.start < self.tokens[-1].end:
            raise ArgumentError(
                f"Token at {token.start} overlaps the previous token ending at "
                f"{self.tokens[-1].end}."
            )
        self.tokens.append(token)

    def end_of_input(self) -> Token:
        """Return the end-of-input sentinel, synthesizing one if needed."""
        if self.eof is not None:
            return self.eof
        end = len(self.source)
        return Token(self.source, end, end)

    def peek(self, offset: int = 0) -> Token:
        """Return the token `offset` positions ahead, or the EOF sentinel."""
        if 0 <= offset < len(self.tokens):
            return self.tokens[offset]
        return self.end_of_input()

    def spans(self) -> List[Tuple[int, int]]:
        return [t.span for t in self.tokens]

    def texts(self) -> List[str]:
        return [t.text for t in self.tokens]

    def release(self) -> None:
        """Drop every accumulated token."""
        self.tokens.clear()
        self.eof = None
        self.released = True


def assemble(source: Optional[str]) -> TokenStream:
    """Lex `source` into a `TokenStream`."""
    if source is None or not isinstance(source, str) or source == "":
        raise ArgumentError("Cannot lex empty source.")

    stream = TokenStream(source)
    position = 0
    try:
        while True:
            token = lex(source, position)
            if token.is_eof:
                stream.eof = token
                break
            stream.append(token)
            position = token.end
    except LangError:
        stream.release()
        raise
    return stream
