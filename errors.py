"""Error taxonomy for the front end.

Every failure raised by the lexer, the token stream and the parser is a
`LangError` carrying an `ErrorKind`, an optional message and, when the
failure is tied to a lexeme, the offending `Token`. Each concrete class
also derives from the closest builtin exception so callers can catch
either (`except SyntaxError` keeps working for parse failures).

Presentation is left to the caller; `format_error` renders the one-line
classification plus the detail message used by the command line driver.
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tokens import Token


class ErrorKind(Enum):
    NONE = auto()
    ARGUMENTS = auto()
    TYPE = auto()
    GENERIC = auto()
    SYNTAX = auto()
    TODO = auto()

    def __str__(self) -> str:
        return self.name

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorKind.NONE: "",
    ErrorKind.ARGUMENTS: "Invalid arguments",
    ErrorKind.TYPE: "Mismatched types",
    ErrorKind.GENERIC: "",
    ErrorKind.SYNTAX: "Invalid syntax",
    ErrorKind.TODO: "TODO (not implemented)",
}


class LangError(Exception):
    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: Optional[str] = None, token: Optional[Token] = None):
        super().__init__(message or "")
        self.message = message
        self.token = token

    @property
    def text(self) -> Optional[str]:
        """Text of the offending token, if any."""
        return self.token.text if self.token is not None else None

    def __str__(self) -> str:
        msg = self.message or self.kind.description
        if self.token is not None:
            return f"{msg} at line {self.token.line}, column {self.token.column}"
        return msg


class ArgumentError(LangError, ValueError):
    """Invalid or missing input handed to a core operation."""

    kind = ErrorKind.ARGUMENTS


class NodeTypeError(LangError, TypeError):
    """A node payload was read under the wrong node kind."""

    kind = ErrorKind.TYPE


class ParseError(LangError, SyntaxError):
    """The token stream does not match the grammar."""

    kind = ErrorKind.SYNTAX


class UnsupportedError(LangError, NotImplementedError):
    """A recognized construct the grammar does not support yet."""

    kind = ErrorKind.TODO


class GenericError(LangError):
    kind = ErrorKind.GENERIC


def format_error(err: Optional[LangError]) -> str:
    """Render an error the way the console driver prints it.

    The first line is the classification of the error kind; the detail
    message, when there is one, follows on its own line prefixed by `: `.
    A `None` error renders as an empty string.
    """
    if err is None:
        return ""
    lines = [f"ERROR: {err.kind.description}".rstrip()]
    if err.message:
        lines.append(f": {err}")
    return "\n".join(lines)
