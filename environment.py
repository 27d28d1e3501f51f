"""Environment frames and bindings.

This module defines `Binding`, the `Environment` scope frame and the
`EnvironmentArena` that owns every frame created while building a program.
A frame refers to its parent by index into the arena rather than holding
the parent itself, so a frame never keeps another alive and releasing the
arena drops all of them together.

Within one frame a name may be bound more than once; lookups return the
most recently inserted binding. Lookups walk outward through the parent
chain.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
from ast_nodes import ASTNode
from errors import ArgumentError, ParseError


@dataclass
class Binding:
    name: str
    value: ASTNode

    def __repr__(self) -> str:
        return f"Binding({self.name}, {self.value.type})"


class Environment:
    def __init__(self, arena: EnvironmentArena, index: int, parent: Optional[int] = None):
        self.arena = arena
        self.index = index
        self.parent = parent
        self.bindings: List[Binding] = []

    def __repr__(self) -> str:
        return f"Environment(index={self.index}, parent={self.parent}, bindings={self.bindings})"

    def __iter__(self) -> Iterator[Binding]:
        return iter(self.bindings)

    @property
    def parent_frame(self) -> Optional[Environment]:
        if self.parent is None:
            return None
        return self.arena.frame(self.parent)

    def bind(self, name: str, value: ASTNode) -> int:
        """Insert a binding into this frame and return its slot."""
        if not name or not isinstance(name, str):
            raise ArgumentError("Binding name must be a non-empty string.")
        if not isinstance(value, ASTNode):
            raise ArgumentError(f"Cannot bind '{name}' to {value!r}.")
        self.bindings.append(Binding(name, value))
        return len(self.bindings) - 1

    def binding_at(self, slot: int) -> Binding:
        return self.bindings[slot]

    def lookup_local(self, name: str) -> Optional[Binding]:
        """Most recent binding of `name` in this frame only."""
        slot = self._local_slot(name)
        return self.bindings[slot] if slot is not None else None

    def resolve(self, name: str) -> Optional[Tuple[Environment, int]]:
        """Find the frame and slot that `name` refers to from this frame."""
        frame: Optional[Environment] = self
        while frame is not None:
            slot = frame._local_slot(name)
            if slot is not None:
                return frame, slot
            frame = frame.parent_frame
        return None

    def lookup(self, name: str) -> ASTNode:
        """Look up a name in the current and parent frames."""
        found = self.resolve(name)
        if found is None:
            raise ParseError(f"Undeclared identifier '{name}'")
        frame, slot = found
        return frame.bindings[slot].value

    def exists_in_current_scope(self, name: str) -> bool:
        return self._local_slot(name) is not None

    def exists(self, name: str) -> bool:
        return self.resolve(name) is not None

    def _local_slot(self, name: str) -> Optional[int]:
        for slot in range(len(self.bindings) - 1, -1, -1):
            if self.bindings[slot].name == name:
                return slot
        return None


class EnvironmentArena:
    """Owns all frames; frames refer to each other by index."""

    def __init__(self):
        self.frames: List[Environment] = []

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[Environment]:
        return iter(self.frames)

    def new_frame(self, parent: Optional[Environment] = None) -> Environment:
        if parent is not None and parent.arena is not self:
            raise ArgumentError("Parent frame belongs to a different arena.")
        frame = Environment(
            self, len(self.frames), parent.index if parent is not None else None
        )
        self.frames.append(frame)
        return frame

    def frame(self, index: int) -> Environment:
        if not 0 <= index < len(self.frames):
            raise ArgumentError(f"No environment frame with index {index}.")
        return self.frames[index]

    def children_of(self, frame: Environment) -> List[Environment]:
        return [f for f in self.frames if f.parent == frame.index]

    def release(self) -> None:
        """Drop every frame and the bindings they hold."""
        for frame in self.frames:
            frame.bindings.clear()
        self.frames.clear()
