"""Convert AST nodes and environments into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node, `environment_to_json`
for a single frame and `program_to_json` for a whole parsed program. It
encodes the node kind and the fields valid for that kind.
"""

import json
from typing import Any, Dict, List, Optional
from ast_nodes import *
from environment import Environment


def ast_to_json(node: Optional[ASTNode]) -> Any:
    """Encode `node` and its subtree.

    Composite nodes are expanded with an explicit stack, so nesting depth is
    not limited by the interpreter's recursion limit.
    """
    if node is None:
        return None

    result = _node_json(node)
    stack = [(node, result)]
    while stack:
        current, data = stack.pop()
        if not isinstance(current, (ListNode, ProgramNode)):
            continue
        for child in current.child_nodes():
            child_data = _node_json(child)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return result


def _node_json(node: ASTNode) -> Dict[str, Any]:
    """Encode a single node; composite `children` are left empty."""
    t = node.type
    if t == NodeType.NONE:
        return {"node_type": "None"}
    if t == NodeType.INTEGER and isinstance(node, IntegerNode):
        return {"node_type": "Integer", "value": node.value}
    if t == NodeType.SYMBOL and isinstance(node, SymbolNode):
        return {
            "node_type": "Symbol",
            "name": node.name,
            "scope": node.scope,
            "slot": node.slot,
        }
    if t == NodeType.BINDING and isinstance(node, BindingNode):
        return {
            "node_type": "Binding",
            "name": node.name,
            "scope": node.scope,
            "slot": node.slot,
        }
    if t == NodeType.LIST and isinstance(node, ListNode):
        return {"node_type": "List", "scope": node.scope, "children": []}
    if t == NodeType.PROGRAM and isinstance(node, ProgramNode):
        return {"node_type": "Program", "children": []}

    # Fallback: try to serialize accessible fields
    data: Dict[str, Any] = {"node_type": getattr(t, "name", str(t))}
    for k, v in getattr(node, "__dict__", {}).items():
        if k == "type":
            continue
        if isinstance(v, ASTNode):
            data[k] = ast_to_json(v)
        elif isinstance(v, list):
            data[k] = [ast_to_json(x) if isinstance(x, ASTNode) else x for x in v]
        else:
            try:
                json.dumps(v)
                data[k] = v
            except TypeError:
                data[k] = str(v)
    return data


def environment_to_json(env: Environment) -> Dict[str, Any]:
    return {
        "index": env.index,
        "parent": env.parent,
        "bindings": [
            {"name": b.name, "value": ast_to_json(b.value)} for b in env.bindings
        ],
    }


def program_to_json(program: Program) -> Dict[str, Any]:
    """Program tree plus every environment frame it created."""
    environments: List[Dict[str, Any]] = [
        environment_to_json(frame) for frame in program.environments
    ]
    return {
        "program": ast_to_json(program.root),
        "environment": program.environment.index,
        "environments": environments,
    }
