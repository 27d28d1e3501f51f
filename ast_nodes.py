"""AST node definitions for the parenthesized expression language.

Each node kind is its own dataclass carrying only the fields valid for that
kind, and every node records its `NodeType` and the source `line`/`column`
of the token it was built from.

Conventions:
- Composite kinds (`ListNode`, `ProgramNode`) own an ordered `children` list;
    `child_nodes()` returns it and is empty for leaf kinds.
- The tree is strict: a node has exactly one parent. A binding's value is
    owned by its `Binding` in the environment; the tree records the
    definition site with a `BindingNode` that names the frame and slot.
- `NoneNode` is the placeholder for "not parsed yet". It is never produced
    for a failed parse; failures raise.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, TYPE_CHECKING
from errors import NodeTypeError

if TYPE_CHECKING:
    from environment import Environment, EnvironmentArena

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class NodeType(Enum):
    NONE = auto()
    INTEGER = auto()
    SYMBOL = auto()
    BINDING = auto()
    LIST = auto()
    PROGRAM = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    line: int = 0
    column: int = 0

    def child_nodes(self) -> List[ASTNode]:
        return []


@dataclass
class NoneNode(ASTNode):
    type: NodeType = NodeType.NONE


# Leaf Nodes
@dataclass
class IntegerNode(ASTNode):
    type: NodeType = NodeType.INTEGER
    value: int = 0


@dataclass
class SymbolNode(ASTNode):
    # Reference to a binding, resolved when parsed
    type: NodeType = NodeType.SYMBOL
    name: str = ""
    scope: int = 0
    slot: int = 0


@dataclass
class BindingNode(ASTNode):
    # Definition site of a binding; the value lives in the environment
    type: NodeType = NodeType.BINDING
    name: str = ""
    scope: int = 0
    slot: int = 0


# Composite Nodes
@dataclass
class ListNode(ASTNode):
    type: NodeType = NodeType.LIST
    children: List[ASTNode] = field(default_factory=list)
    scope: int = 0

    def child_nodes(self) -> List[ASTNode]:
        return self.children


@dataclass
class ProgramNode(ASTNode):
    type: NodeType = NodeType.PROGRAM
    children: List[ASTNode] = field(default_factory=list)

    def child_nodes(self) -> List[ASTNode]:
        return self.children


@dataclass
class Program:
    """A parsed source unit: the root node plus its top-level frame."""

    root: ProgramNode
    environment: Environment

    @property
    def environments(self) -> EnvironmentArena:
        return self.environment.arena

    @property
    def children(self) -> List[ASTNode]:
        return self.root.children


def integer_value(node: ASTNode) -> int:
    """Return the payload of an Integer node."""
    if node.type != NodeType.INTEGER or not isinstance(node, IntegerNode):
        raise NodeTypeError(f"Expected an {NodeType.INTEGER} node, got {node.type}")
    return node.value


def is_none(node: ASTNode) -> bool:
    return node.type == NodeType.NONE


def is_integer(node: ASTNode) -> bool:
    return node.type == NodeType.INTEGER


def walk(node: ASTNode):
    """Yield `node` and its descendants in pre-order without recursing."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.child_nodes()))
