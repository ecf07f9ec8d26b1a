"""
Cancellable depth-first traversal of the document tree.

Used by validation, rendering and printing. The visitor controls the walk
through the returned WalkControl.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .nodes import Node


class WalkControl(enum.Enum):
    """Visitor verdict for the current node."""
    CONTINUE = "continue"   # descend into children, then next sibling
    SKIP = "skip"           # do not descend, proceed to next sibling
    STOP = "stop"           # abort the whole traversal


Visitor = Callable[[Node, int], WalkControl]
Hook = Callable[[], object]


@dataclass
class _Frame:
    nodes: Sequence[Node]
    depth: int
    index: int = 0
    on_enter: Optional[Hook] = None
    on_exit: Optional[Hook] = None
    entered: bool = False


class TreeWalker:
    """
    Explicit-stack walker that lets the visitor queue extra walks.

    While handling a node, the visitor may call ``descend`` to queue a walk
    over a list of nodes, optionally with hooks run when that walk starts
    and when it ends. Queued walks run right after the current node's own
    children and before its next sibling, in the order they were queued.

    Exit hooks of walks that were started always run, also when the visitor
    stops the traversal or raises.
    """

    def __init__(self, visitor: Visitor):
        self.visitor = visitor
        self._stack: List[_Frame] = []
        self._queued: List[_Frame] = []

    def descend(self, nodes: Sequence[Node], depth: int,
                on_enter: Optional[Hook] = None, on_exit: Optional[Hook] = None) -> None:
        """
        Queues a walk over ``nodes``, reported to the visitor at ``depth``.

        Only valid from inside the visitor.
        """
        self._queued.append(_Frame(nodes, depth, on_enter=on_enter, on_exit=on_exit))

    def run(self, root: Node) -> WalkControl:
        """
        Pre-order traversal over the children of ``root`` (depth 0).

        Returns:
            WalkControl.STOP if the visitor stopped the walk, otherwise CONTINUE
        """
        self._stack = [_Frame(root.children, 0)]
        try:
            return self._loop()
        finally:
            self._unwind()

    def _loop(self) -> WalkControl:
        stack = self._stack
        while stack:
            frame = stack[-1]
            if not frame.entered:
                if frame.on_enter is not None:
                    frame.on_enter()
                frame.entered = True

            if frame.index >= len(frame.nodes):
                stack.pop()
                if frame.on_exit is not None:
                    frame.on_exit()
                continue

            node = frame.nodes[frame.index]
            frame.index += 1

            self._queued = []
            control = self.visitor(node, frame.depth)
            if control is WalkControl.STOP:
                return WalkControl.STOP

            stack.extend(reversed(self._queued))
            self._queued = []
            if control is WalkControl.CONTINUE and node.children:
                stack.append(_Frame(node.children, frame.depth + 1))

        return WalkControl.CONTINUE

    def _unwind(self) -> None:
        while self._stack:
            frame = self._stack.pop()
            if frame.entered and frame.on_exit is not None:
                frame.on_exit()
        self._queued = []


def walk(root: Node, visitor: Visitor) -> WalkControl:
    """
    Pre-order traversal over the children of ``root``.

    Uses an explicit stack instead of recursion, so nesting depth is not
    bounded by the interpreter recursion limit.

    Args:
        root: Node whose children are walked (depth 0)
        visitor: Callback receiving the node and its depth

    Returns:
        WalkControl.STOP if the visitor stopped the walk, otherwise CONTINUE
    """
    return TreeWalker(visitor).run(root)


def iter_nodes(root: Node) -> Iterator[Tuple[Node, int]]:
    """Yields ``(node, depth)`` for every node below ``root`` in pre-order."""
    stack: List[Tuple[Node, int]] = [(child, 0) for child in reversed(root.children)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


__all__ = ["WalkControl", "Visitor", "TreeWalker", "walk", "iter_nodes"]
