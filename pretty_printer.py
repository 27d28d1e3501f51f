"""Pretty-printer for tokens, the AST and environments.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line string, `print_surface` for the compact
parenthesized form, and helpers for token streams and environment frames.
The printer is intended for debugging, tests and the command line driver.

Examples:
    PrettyPrinter.print_ast(program.root)
    PrettyPrinter.print_surface(program.root)
"""

from __future__ import annotations
from typing import Iterable, Optional
from ast_nodes import *
from environment import Environment, EnvironmentArena
from tokens import Token


class PrettyPrinter:
    @staticmethod
    def print_tokens(tokens: Iterable[Token], limit: Optional[int] = None) -> str:
        """One line per token: index, span and text."""
        lines = []
        tokens = list(tokens)
        shown = tokens if limit is None else tokens[:limit]
        for i, token in enumerate(shown):
            lines.append(f"Token {i}: {token.text}")
        if limit is not None and len(tokens) > limit:
            lines.append(f"... and {len(tokens) - limit} more")
        return "\n".join(lines)

    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string.

        Walks the tree with an explicit stack so deeply nested groups print
        without recursion.
        """
        lines = []
        stack = [(node, indent, prefix)]

        while stack:
            current, depth, label = stack.pop()
            indent_str = " " * depth

            if not isinstance(current, ASTNode):
                lines.append(f"{indent_str}{label}{current}")
                continue

            match current:
                case NoneNode():
                    lines.append(f"{indent_str}{label}None")

                case IntegerNode(value=v):
                    lines.append(f"{indent_str}{label}Integer({v})")

                case SymbolNode(name=n, scope=scope, slot=slot):
                    lines.append(f"{indent_str}{label}Symbol({n} -> env{scope}[{slot}])")

                case BindingNode(name=n, scope=scope, slot=slot):
                    lines.append(f"{indent_str}{label}Binding({n} in env{scope}[{slot}])")

                case ListNode(children=children, scope=scope):
                    lines.append(f"{indent_str}{label}List(env{scope})")
                    for i in range(len(children) - 1, -1, -1):
                        stack.append((children[i], depth + 4, f"[{i}]: "))

                case ProgramNode(children=children):
                    lines.append(f"{indent_str}{label}Program")
                    for i in range(len(children) - 1, -1, -1):
                        stack.append((children[i], depth + 4, f"expr[{i}]: "))

                case _:
                    lines.append(f"{indent_str}{label}Unknown node type: {type(current)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a one-line, source-like representation of an AST node.

        Binding definitions print as `name:` since their value lives in the
        environment rather than in the tree.
        """
        if node is None:
            return ""

        out = []
        # Items are nodes or the literal ")" closing an open group.
        stack = [node]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(")")
                continue

            match item:
                case ListNode(children=children):
                    piece = "("
                    stack.append(")")
                    stack.extend(reversed(children))
                case ProgramNode(children=children):
                    stack.extend(reversed(children))
                    continue
                case NoneNode():
                    piece = "<none>"
                case IntegerNode(value=v):
                    piece = str(v)
                case SymbolNode(name=n):
                    piece = n
                case BindingNode(name=n):
                    piece = f"{n}:"
                case ASTNode():
                    s = PrettyPrinter.print_ast(item)
                    piece = " ".join(line.strip() for line in s.splitlines())
                case _:
                    piece = str(item)

            if out and out[-1] != "(":
                out.append(" ")
            out.append(piece)

        return "".join(out)

    @staticmethod
    def print_environment(env: Environment, indent: int = 0) -> str:
        """Render a frame's bindings, most recent last."""
        indent_str = " " * indent
        parent = f" parent=env{env.parent}" if env.parent is not None else ""
        lines = [f"{indent_str}env{env.index}{parent}"]
        for slot, binding in enumerate(env.bindings):
            value = PrettyPrinter.print_surface(binding.value)
            lines.append(f"{indent_str}  [{slot}] {binding.name} = {value}")
        return "\n".join(lines)

    @staticmethod
    def print_environments(arena: EnvironmentArena) -> str:
        """Render every frame, nested under its parent."""
        lines = []
        roots = [f for f in arena if f.parent is None]
        stack = [(f, 0) for f in reversed(roots)]
        while stack:
            frame, depth = stack.pop()
            lines.append(PrettyPrinter.print_environment(frame, indent=depth * 2))
            for child in reversed(arena.children_of(frame)):
                stack.append((child, depth + 1))
        return "\n".join(lines)
