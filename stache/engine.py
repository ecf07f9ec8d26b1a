"""
Public engine surface.

A Mustache instance owns one parse attempt: either a document or the
syntax error that prevented it. Render and print are read-only and may be
called any number of times on a valid instance.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Optional

from .config import RenderOptions
from .context import Context, ContextStack
from .errors import TemplateNotValid, TemplateSyntaxError
from .nodes import Document
from .parser import parse_template
from .partials import PartialLoader
from .printer import print_tree
from .renderer import Renderer, Sink

logger = logging.getLogger(__name__)


class Mustache:
    """
    Parsed template with its render and print operations.
    """

    def __init__(self, source: str, options: Optional[RenderOptions] = None,
                 partials: Optional[PartialLoader] = None):
        """
        Parses the template. Syntax errors do not raise here;
        check is_valid() before rendering.

        Args:
            source: Template text
            options: Render options
            partials: Source of partial templates
        """
        self.source = source
        self.renderer = Renderer(options, partials)
        result = parse_template(source)
        self._document = result.document
        self._error = result.error

    @classmethod
    def from_file(cls, path: Path, options: Optional[RenderOptions] = None,
                  partials: Optional[PartialLoader] = None) -> Mustache:
        return cls(Path(path).read_text(encoding="utf-8"), options, partials)

    def is_valid(self) -> bool:
        return self._error is None

    def error_message(self) -> str:
        """Human-readable parse error, empty if the template is valid."""
        return str(self._error) if self._error is not None else ""

    @property
    def error(self) -> Optional[TemplateSyntaxError]:
        return self._error

    @property
    def document(self) -> Document:
        """
        Raises:
            TemplateNotValid: If parsing failed
        """
        if self._document is None:
            raise TemplateNotValid(self._error)
        return self._document

    def render(self, sink: Sink, context: Context) -> None:
        self.renderer.render(self.document, context, sink)

    def render_to_string(self, context: Context) -> str:
        buf = io.StringIO()
        self.render(buf, context)
        return buf.getvalue()

    def print(self, sink: Sink) -> None:
        print_tree(self.document, sink)


def render(source: str, data: Any = None, options: Optional[RenderOptions] = None,
           partials: Optional[PartialLoader] = None) -> str:
    """
    Parses and renders a template against plain Python data.

    Raises:
        TemplateSyntaxError: If the template does not parse
    """
    template = Mustache(source, options, partials)
    if not template.is_valid():
        raise template.error
    return template.render_to_string(ContextStack(data))


__all__ = ["Mustache", "render"]
