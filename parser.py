"""
Parser for the parenthesized expression language.

Grammar:
    program  := expr*
    expr     := INTEGER | IDENTIFIER | group | binding
    group    := '(' expr* ')'
    binding  := IDENTIFIER ':' expr

Overview and approach:
- The parser consumes tokens strictly left to right with one token of
    lookahead and never backtracks. An identifier followed by `:` starts a
    binding; any other identifier is a reference.
- Nesting is handled with an explicit stack of open groups instead of
    recursion, so deep input cannot exhaust the Python call stack. The depth
    is still capped by `max_depth`.
- The parser is a small state machine (`ParserState`). `state` reflects
    what the next token is expected to be: any expression at the top level,
    an expression inside a group (`depth` > 0), or the value of a pending
    binding. `parse()` ends in `DONE` or, when it raises, in `FAILED`.

Scoping:
- The program has a top-level environment frame. Each group opens a new
    frame whose parent is the frame of the enclosing group.
- A binding's value is parsed before the name is bound, then
    `Binding(name, value)` is inserted into the current frame and a
    `BindingNode` takes the value's place in the enclosing sequence.
- References are resolved while parsing, like declarations in a C-like
    front end: an unbound identifier is a syntax error, and the resulting
    `SymbolNode` records the frame and slot it refers to.

Examples:
    `(1 2 3)`       -> Program[List[Integer(1), Integer(2), Integer(3)]]
    `x: 5 (y: x y)` -> Program[Binding(x), List[Binding(y), Symbol(y)]]
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Union
from ast_nodes import *
from environment import Environment, EnvironmentArena
from errors import ArgumentError, LangError, ParseError, UnsupportedError
from token_stream import TokenStream
from tokens import Token, TokenType

DEFAULT_MAX_DEPTH = 256


class ParserState(Enum):
    AWAITING_EXPR = auto()
    IN_GROUP = auto()
    AWAITING_BINDING_VALUE = auto()
    DONE = auto()
    FAILED = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class _OpenGroup:
    node: Union[ProgramNode, ListNode]
    scope: Environment
    token: Optional[Token] = None


@dataclass
class _PendingBinding:
    name: str
    token: Token
    depth: int


class Parser:
    def __init__(
        self,
        tokens: Union[TokenStream, Iterable[Token]],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if tokens is None:
            raise ArgumentError("Parser requires a token stream.")
        if max_depth < 1:
            raise ArgumentError(f"max_depth must be positive, got {max_depth}")

        if isinstance(tokens, TokenStream):
            self.tokens: List[Token] = list(tokens)
            self.eof = tokens.end_of_input()
        else:
            self.tokens = [t for t in tokens if not t.is_eof]
            source = self.tokens[0].source if self.tokens else ""
            self.eof = Token(source, len(source), len(source))

        self.max_depth = max_depth
        self.pos = 0
        self.current = self.tokens[0] if self.tokens else self.eof
        self.state = ParserState.AWAITING_EXPR
        self.error: Optional[LangError] = None

        self.environments = EnvironmentArena()
        self.groups: List[_OpenGroup] = []
        self.pending: List[_PendingBinding] = []

    @property
    def depth(self) -> int:
        """Number of currently open groups."""
        return max(len(self.groups) - 1, 0)

    @property
    def scope(self) -> Environment:
        return self.groups[-1].scope

    def peek(self) -> Token:
        """Return next token without consuming it."""
        next_pos = self.pos + 1
        return self.tokens[next_pos] if next_pos < len(self.tokens) else self.eof

    def advance(self) -> Token:
        """Move to next token."""
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = self.eof
        return self.current

    def parse(self) -> Program:
        """Parse the whole token stream into a `Program`."""
        if self.state in (ParserState.DONE, ParserState.FAILED):
            raise ArgumentError("Parser has already run; create a new one.")
        try:
            return self._parse_program()
        except LangError as e:
            self.state = ParserState.FAILED
            self.error = e
            self.groups.clear()
            self.pending.clear()
            self.environments.release()
            raise

    def _parse_program(self) -> Program:
        globals_ = self.environments.new_frame()
        root = ProgramNode(line=1, column=1)
        self.groups.append(_OpenGroup(root, globals_))

        while not self.current.is_eof:
            self.parse_token(self.current)
            self._update_state()

        if len(self.groups) > 1:
            opener = self.groups[-1].token
            raise ParseError("Unclosed '(' at end of input", opener)
        if self.pending:
            pending = self.pending[-1]
            raise ParseError(
                f"Expected a value for binding '{pending.name}' before end of input",
                pending.token,
            )

        self.state = ParserState.DONE
        return Program(root=root, environment=globals_)

    def parse_token(self, token: Token) -> None:
        """Consume the construct starting at `token`."""
        match token.type:
            case TokenType.INTEGER:
                self.advance()
                self._emit(
                    IntegerNode(
                        value=self.parse_integer(token),
                        line=token.line,
                        column=token.column,
                    )
                )

            case TokenType.LPAREN:
                self.open_group(token)

            case TokenType.RPAREN:
                self.close_group(token)

            case TokenType.IDENTIFIER:
                if self.peek().type == TokenType.COLON:
                    self.start_binding(token)
                else:
                    self.advance()
                    self._emit(self.parse_reference(token))

            case TokenType.COLON:
                raise ParseError("Unexpected ':' without a name to bind", token)

            case TokenType.COMMA:
                raise UnsupportedError("',' separators are not supported", token)

            case _:
                raise ParseError(f"Unrecognized token '{token.text}'", token)

    def parse_integer(self, token: Token) -> int:
        """Parse an integer literal token into a signed 64-bit value."""
        value = int(token.text)
        if not INT64_MIN <= value <= INT64_MAX:
            raise ParseError(
                f"Integer literal '{token.text}' does not fit in 64 bits", token
            )
        return value

    def parse_reference(self, token: Token) -> SymbolNode:
        name = token.text
        found = self.scope.resolve(name)
        if found is None:
            raise ParseError(f"Undeclared identifier '{name}'", token)
        frame, slot = found
        return SymbolNode(
            name=name,
            scope=frame.index,
            slot=slot,
            line=token.line,
            column=token.column,
        )

    def open_group(self, token: Token) -> None:
        if self.depth >= self.max_depth:
            raise ParseError(f"Groups nested deeper than {self.max_depth}", token)
        self.advance()
        frame = self.environments.new_frame(self.scope)
        node = ListNode(scope=frame.index, line=token.line, column=token.column)
        self.groups.append(_OpenGroup(node, frame, token))

    def close_group(self, token: Token) -> None:
        if len(self.groups) == 1:
            raise ParseError("Unmatched ')'", token)
        if self._awaiting_value():
            pending = self.pending[-1]
            raise ParseError(
                f"Expected a value for binding '{pending.name}' before ')'", token
            )
        self.advance()
        group = self.groups.pop()
        self._emit(group.node)

    def start_binding(self, token: Token) -> None:
        if self._awaiting_value():
            raise UnsupportedError(
                f"Binding '{token.text}' cannot be the value of binding "
                f"'{self.pending[-1].name}'",
                token,
            )
        self.advance()  # name
        self.advance()  # ':'
        self.pending.append(_PendingBinding(token.text, token, len(self.groups)))

    def _awaiting_value(self) -> bool:
        return bool(self.pending) and self.pending[-1].depth == len(self.groups)

    def _emit(self, node: ASTNode) -> None:
        """Attach a finished expression to the innermost open sequence."""
        group = self.groups[-1]
        if self._awaiting_value():
            pending = self.pending.pop()
            slot = group.scope.bind(pending.name, node)
            node = BindingNode(
                name=pending.name,
                scope=group.scope.index,
                slot=slot,
                line=pending.token.line,
                column=pending.token.column,
            )
        group.node.children.append(node)

    def _update_state(self) -> None:
        if self._awaiting_value():
            self.state = ParserState.AWAITING_BINDING_VALUE
        elif len(self.groups) > 1:
            self.state = ParserState.IN_GROUP
        else:
            self.state = ParserState.AWAITING_EXPR
