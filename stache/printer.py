"""
Diagnostic listing of a document tree.
"""

from __future__ import annotations

import io

from .nodes import Document, Node
from .renderer import Sink
from .walker import WalkControl, walk


def print_tree(document: Document, sink: Sink) -> None:
    """
    Writes one line per node, indented by depth:
    ``TAG: {{name}}`` for tags and ``TXT: <text>`` for text.
    """
    def visit(node: Node, depth: int) -> WalkControl:
        indent = " " * depth
        if node.is_tag:
            sink.write(f"{indent}TAG: {{{{{node.tag.name}}}}}\n")
        else:
            sink.write(f"{indent}TXT: {node.text}\n")
        return WalkControl.CONTINUE

    walk(document.root, visit)


def format_tree(document: Document) -> str:
    buf = io.StringIO()
    print_tree(document, buf)
    return buf.getvalue()


__all__ = ["print_tree", "format_tree"]
