"""Graphviz visualization helpers for parsed programs.

Provides `render_ast_dot(program)` which returns a `graphviz.Digraph`
object (not rendered). Optionally `write_and_render` can write the file to
disk.

Layout: every AST node is a box labelled with its kind and payload, with
edges from parents to children in source order. Each environment frame is
an HTML-like table node listing its bindings; binding and symbol nodes get
a dashed edge to the frame they live in or refer to.
"""

from typing import Dict
import html
from graphviz import Digraph
from ast_nodes import *
from environment import Environment
from pretty_printer import PrettyPrinter


def _node_label(node: ASTNode) -> str:
    match node:
        case IntegerNode(value=v):
            return f"Integer\\n{v}"
        case SymbolNode(name=n):
            return f"Symbol\\n{n}"
        case BindingNode(name=n):
            return f"Binding\\n{n}"
        case ListNode():
            return "List"
        case ProgramNode():
            return "Program"
        case _:
            return str(node.type)


def _env_html(env: Environment) -> str:
    rows = [f'<TR><TD BGCOLOR="#e8e8ff"><B>env{env.index}</B></TD></TR>']
    for slot, binding in enumerate(env.bindings):
        value = html.escape(PrettyPrinter.print_surface(binding.value))
        name = html.escape(binding.name)
        rows.append(f'<TR><TD><FONT POINT-SIZE="10">[{slot}] {name} = {value}</FONT></TD></TR>')
    return '<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">' + "".join(rows) + "</TABLE>>"


def render_ast_dot(program: Program, include_environments: bool = True) -> Digraph:
    """Return a graphviz.Digraph for the given program.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")
    dot.attr("node", shape="box", fontname="Helvetica")

    ids: Dict[int, str] = {}
    stack = [(program.root, None)]
    while stack:
        node, parent_id = stack.pop()
        node_id = f"n{len(ids)}"
        ids[id(node)] = node_id
        dot.node(node_id, _node_label(node))
        if parent_id is not None:
            dot.edge(parent_id, node_id)
        if include_environments and isinstance(node, (SymbolNode, BindingNode)):
            dot.edge(node_id, f"env{node.scope}", style="dashed", arrowhead="none")
        for child in reversed(node.child_nodes()):
            stack.append((child, node_id))

    if include_environments:
        for frame in program.environments:
            dot.node(f"env{frame.index}", _env_html(frame), shape="plaintext")
            if frame.parent is not None:
                dot.edge(f"env{frame.index}", f"env{frame.parent}", style="dotted")

    return dot


def write_and_render(
    program: Program,
    out_path: str,
    fmt: str = "svg",
    include_environments: bool = True,
) -> None:
    """Write and render the AST to the given path (without extension). Returns when rendered.

    Example: write_and_render(program, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz)."""
    dot = render_ast_dot(program, include_environments=include_environments)
    dot.format = fmt
    # Note: render will append extension automatically
    dot.render(out_path, cleanup=True)
