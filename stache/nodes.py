"""
Document tree nodes.

A parsed template is a synthetic root node owning the top-level ordered
sequence of text and tag nodes. Section tags own the nodes of their body.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .tags import Tag, TagType


class NodeKind(enum.Enum):
    """Explicit node discriminant."""
    ROOT = "root"
    TEXT = "text"
    TAG = "tag"


@dataclass
class Node:
    """
    Node of the document tree.

    Only the field matching ``kind`` is meaningful: ``text`` for text nodes,
    ``tag`` for tag nodes. Only section-begin tags (and the root) have children.
    """
    kind: NodeKind
    text: str = ""
    tag: Optional[Tag] = None
    position: int = 0
    children: List[Node] = field(default_factory=list)

    @classmethod
    def root(cls) -> Node:
        return cls(NodeKind.ROOT)

    @classmethod
    def text_node(cls, text: str, position: int) -> Node:
        return cls(NodeKind.TEXT, text=text, position=position)

    @classmethod
    def tag_node(cls, tag: Tag) -> Node:
        return cls(NodeKind.TAG, tag=tag, position=tag.position)

    @property
    def is_text(self) -> bool:
        return self.kind is NodeKind.TEXT

    @property
    def is_tag(self) -> bool:
        return self.kind is NodeKind.TAG

    @property
    def is_section_begin(self) -> bool:
        return self.tag is not None and self.tag.is_section_begin

    @property
    def is_section_end(self) -> bool:
        return self.tag is not None and self.tag.is_section_end

    def __repr__(self) -> str:
        if self.kind is NodeKind.TEXT:
            return f"Node(TEXT, {self.text!r}, pos={self.position})"
        if self.kind is NodeKind.TAG:
            return f"Node({self.tag!r}, children={len(self.children)})"
        return f"Node(ROOT, children={len(self.children)})"


class Document:
    """
    Result of a successful parse.

    Owns the root node; nothing mutates the tree after construction.
    """

    def __init__(self, root: Node, source: str):
        self.root = root
        self.source = source

    @property
    def nodes(self) -> List[Node]:
        """Top-level nodes."""
        return self.root.children

    def __iter__(self) -> Iterator[Node]:
        return iter(self.root.children)

    def __len__(self) -> int:
        return len(self.root.children)

    def tag_sequence(self) -> List[Tuple[int, TagType, str]]:
        """
        Ordered ``(depth, type, name)`` for every tag node in pre-order.

        Two documents with equal tag sequences are structurally equivalent
        as far as tags and nesting are concerned.
        """
        from .walker import iter_nodes

        return [
            (depth, node.tag.type, node.tag.name)
            for node, depth in iter_nodes(self.root)
            if node.is_tag and node.tag is not None
        ]

    def __repr__(self) -> str:
        return f"Document(nodes={len(self.root.children)})"


__all__ = ["NodeKind", "Node", "Document"]
