from lexer import Lexer
from parser import Parser


def lex(text: str):
    """Return the token stream for the given source text."""
    return Lexer(text).tokenize()


def parse_tokens(tokens, **kwargs):
    """Parse a token stream into a Program."""
    return Parser(tokens, **kwargs).parse()


def parse_text(text: str, **kwargs):
    """Convenience: lex+parse a source text into a Program."""
    return Parser(Lexer(text).tokenize(), **kwargs).parse()
