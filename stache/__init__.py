"""
Mustache-style template engine.

Parses tag-delimited templates into a document tree and renders the tree
against a variable-lookup context.
"""

from __future__ import annotations

from .config import RenderOptions, load_config
from .context import Context, ContextStack, LookupResult, MappingContext, ScopedContext, Value, ValueKind
from .engine import Mustache, render
from .errors import (
    ConfigError,
    ErrorKind,
    InvalidDelimiters,
    PartialRecursionError,
    StacheUserError,
    TemplateNotValid,
    TemplateSyntaxError,
    UnclosedSection,
    UnmatchedSectionEnd,
    UnterminatedTag,
)
from .nodes import Document, Node, NodeKind
from .parser import ParseResult, TemplateParser, parse_template
from .partials import DictPartialLoader, DirectoryPartialLoader, PartialLoader
from .printer import format_tree, print_tree
from .renderer import Renderer
from .tags import Tag, TagType, classify_tag
from .walker import TreeWalker, WalkControl, walk

__all__ = [
    "Mustache",
    "render",
    "RenderOptions",
    "load_config",
    "Context",
    "ContextStack",
    "ScopedContext",
    "MappingContext",
    "LookupResult",
    "Value",
    "ValueKind",
    "ErrorKind",
    "StacheUserError",
    "TemplateSyntaxError",
    "TemplateNotValid",
    "UnterminatedTag",
    "UnmatchedSectionEnd",
    "UnclosedSection",
    "InvalidDelimiters",
    "PartialRecursionError",
    "ConfigError",
    "Document",
    "Node",
    "NodeKind",
    "TemplateParser",
    "ParseResult",
    "parse_template",
    "PartialLoader",
    "DictPartialLoader",
    "DirectoryPartialLoader",
    "Renderer",
    "print_tree",
    "format_tree",
    "Tag",
    "TagType",
    "classify_tag",
    "TreeWalker",
    "WalkControl",
    "walk",
]
