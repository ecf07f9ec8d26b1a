"""
Document renderer.

Walks the document tree and writes output text to a sink, pulling values
from a Context. Sections are gated through the walker's control signals
and their bodies are queued on the same walker.
"""

from __future__ import annotations

import functools
import html
import io
import logging
from typing import Dict, Optional, Protocol

from .config import RenderOptions
from .context import Context, ScopedContext, Value, ValueKind
from .errors import PartialRecursionError
from .nodes import Document, Node
from .parser import TemplateParser
from .partials import DictPartialLoader, PartialLoader
from .tags import TagType
from .walker import TreeWalker, WalkControl

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, text: str) -> object:
        ...


class Renderer:
    """
    Renders parsed documents.

    A renderer is reusable: it never mutates documents or contexts it is
    given (scopes pushed for sections are popped again).
    Parsed partials are cached per renderer.
    """

    def __init__(self, options: Optional[RenderOptions] = None,
                 partials: Optional[PartialLoader] = None):
        """
        Args:
            options: Render options (defaults if omitted)
            partials: Source of partial templates (none if omitted)
        """
        self.options = options or RenderOptions()
        self.partials: PartialLoader = partials if partials is not None else DictPartialLoader()
        self._partial_cache: Dict[str, Optional[Document]] = {}

    def render(self, document: Document, context: Context, sink: Sink) -> None:
        """
        Renders a document into a sink.

        Args:
            document: Parsed template
            context: Value resolution for tag names
            sink: Any object with a ``write(str)`` method

        Raises:
            PartialRecursionError: If partial inclusion nests too deep
            TemplateSyntaxError: If an included partial fails to parse
        """
        _RenderPass(self, context, sink).run(document)

    def render_to_string(self, document: Document, context: Context) -> str:
        buf = io.StringIO()
        self.render(document, context, buf)
        return buf.getvalue()

    def _load_partial(self, name: str) -> Optional[Document]:
        if name not in self._partial_cache:
            source = self.partials.get(name)
            if source is None:
                logger.debug(f"Partial '{name}' not found, rendering nothing")
                self._partial_cache[name] = None
            else:
                self._partial_cache[name] = TemplateParser(source).parse()
                logger.debug(f"Parsed partial '{name}'")
        return self._partial_cache[name]


class _RenderPass:
    """
    State of a single render call.

    Section bodies and partials are queued on one TreeWalker instead of
    being rendered recursively, so neither template nesting nor data
    nesting is bounded by the interpreter recursion limit.
    """

    def __init__(self, renderer: Renderer, context: Context, sink: Sink):
        self.renderer = renderer
        self.options = renderer.options
        self.context = context
        self.sink = sink
        self.scoped = isinstance(context, ScopedContext)
        self.partial_depth = 0
        self.walker = TreeWalker(self.visit)

    def run(self, document: Document) -> None:
        self.walker.run(document.root)

    def visit(self, node: Node, depth: int) -> WalkControl:
        if node.is_text:
            self.sink.write(node.text)
            return WalkControl.CONTINUE

        tag = node.tag
        if tag is None:
            return WalkControl.CONTINUE

        if tag.type is TagType.VARIABLE:
            self._write_variable(tag.name, self.options.escape)
        elif tag.type is TagType.UNESCAPED_VARIABLE:
            self._write_variable(tag.name, False)
        elif tag.type is TagType.SECTION_BEGIN:
            return self._section(node, depth)
        elif tag.type is TagType.SECTION_BEGIN_INVERTED:
            return self._inverted(node)
        elif tag.type is TagType.PARTIAL:
            self._partial(tag.name, depth)
        # COMMENT, SECTION_END and SET_DELIMITER produce no output
        return WalkControl.CONTINUE

    def _write_variable(self, name: str, escape: bool) -> None:
        if not name:
            return
        result = self.context.lookup(name)
        if not result.found:
            return
        text = result.text
        self.sink.write(html.escape(text) if escape else text)

    def _section(self, node: Node, depth: int) -> WalkControl:
        result = self.context.lookup(node.tag.name)
        if not result.found:
            return WalkControl.SKIP

        if not self.scoped:
            # Plain contexts only answer found/not found
            return WalkControl.CONTINUE

        value = result.value
        if not value.is_truthy():
            return WalkControl.SKIP

        if value.kind is ValueKind.LIST:
            for item in value.items():
                self._descend_scoped(node, depth, item)
            return WalkControl.SKIP

        if value.kind is ValueKind.OBJECT:
            self._descend_scoped(node, depth, value)
            return WalkControl.SKIP

        return WalkControl.CONTINUE

    def _descend_scoped(self, node: Node, depth: int, value: Value) -> None:
        context = self.context
        self.walker.descend(
            node.children, depth + 1,
            on_enter=functools.partial(context.push, value),
            on_exit=context.pop,
        )

    def _inverted(self, node: Node) -> WalkControl:
        result = self.context.lookup(node.tag.name)
        if not result.found:
            return WalkControl.CONTINUE
        if self.scoped and not result.value.is_truthy():
            return WalkControl.CONTINUE
        return WalkControl.SKIP

    def _partial(self, name: str, depth: int) -> None:
        if self.partial_depth >= self.options.max_partial_depth:
            raise PartialRecursionError(name, self.options.max_partial_depth)

        document = self.renderer._load_partial(name)
        if document is None:
            return
        self.walker.descend(
            document.root.children, depth + 1,
            on_enter=self._enter_partial,
            on_exit=self._exit_partial,
        )

    def _enter_partial(self) -> None:
        self.partial_depth += 1

    def _exit_partial(self) -> None:
        self.partial_depth -= 1


def render_document(document: Document, context: Context,
                    options: Optional[RenderOptions] = None,
                    partials: Optional[PartialLoader] = None) -> str:
    """Renders a document to a string with a one-off renderer."""
    return Renderer(options, partials).render_to_string(document, context)


__all__ = ["Sink", "Renderer", "render_document"]
