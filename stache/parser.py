"""
Template parser.

Scans the source for delimiter-bounded tags, classifies them and builds the
document tree, keeping a stack of open sections. A validation pass then
checks that every section is closed by an end tag with the same name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import TemplateSyntaxError, UnclosedSection, UnmatchedSectionEnd, UnterminatedTag
from .nodes import Document, Node
from .tags import TagType, classify_tag, parse_delimiters, trim
from .walker import WalkControl, walk

logger = logging.getLogger(__name__)

DEFAULT_BEGIN = "{{"
DEFAULT_END = "}}"
UNESCAPED_END = "}}}"


class TemplateParser:
    """
    Single-use parser for one template source.

    The active delimiter pair starts as ``{{ }}`` and can be switched by
    set-delimiter tags (``{{=<% %>=}}``) for the rest of the source.
    """

    def __init__(self, source: str):
        self.source = source
        self.begin = DEFAULT_BEGIN
        self.end = DEFAULT_END

    @property
    def delimiters_are_braces(self) -> bool:
        return self.begin == DEFAULT_BEGIN and self.end == DEFAULT_END

    def parse(self) -> Document:
        """
        Parses the source into a document.

        Returns:
            Document tree with section end tags removed

        Raises:
            TemplateSyntaxError: On the first structural defect
        """
        root = Node.root()
        self._scan(root)
        self._validate(root)
        logger.debug(f"Parsed template of length {len(self.source)} into {len(root.children)} top-level nodes")
        return Document(root, self.source)

    def _scan(self, root: Node) -> None:
        source = self.source
        size = len(source)
        sections: List[Node] = [root]
        pos = 0

        while pos < size:
            tag_start = source.find(self.begin, pos)
            if tag_start == -1:
                sections[-1].children.append(Node.text_node(source[pos:], pos))
                break
            if tag_start != pos:
                sections[-1].children.append(Node.text_node(source[pos:tag_start], pos))

            contents_start = tag_start + len(self.begin)
            unescaped = (
                self.delimiters_are_braces
                and contents_start < size
                and source[contents_start] == DEFAULT_BEGIN[0]
            )
            tag_end_delimiter = UNESCAPED_END if unescaped else self.end
            if unescaped:
                contents_start += 1

            tag_end = source.find(tag_end_delimiter, contents_start)
            if tag_end == -1:
                raise UnterminatedTag(tag_start)

            tag = classify_tag(trim(source[contents_start:tag_end]), unescaped, tag_start)
            node = Node.tag_node(tag)
            sections[-1].children.append(node)

            if tag.is_section_begin:
                sections.append(node)
            elif tag.is_section_end:
                if len(sections) == 1:
                    raise UnmatchedSectionEnd(tag.name, tag_start)
                sections.pop()
            elif tag.type is TagType.SET_DELIMITER:
                self.begin, self.end = parse_delimiters(tag.name, tag_start)
                logger.debug(f"Switched delimiters to {self.begin!r} {self.end!r} at {tag_start}")

            pos = tag_end + len(tag_end_delimiter)

    def _validate(self, root: Node) -> None:
        invalid: List[Node] = []

        def check_section(node: Node, depth: int) -> WalkControl:
            if not node.is_section_begin:
                return WalkControl.CONTINUE
            last = node.children[-1] if node.children else None
            if last is None or not last.is_section_end or last.tag.name != node.tag.name:
                invalid.append(node)
                return WalkControl.STOP
            # matching end tag carries nothing once confirmed
            node.children.pop()
            return WalkControl.CONTINUE

        walk(root, check_section)
        if invalid:
            node = invalid[0]
            raise UnclosedSection(node.tag.name, node.position)


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed document or the error that prevented it."""
    document: Optional[Document] = None
    error: Optional[TemplateSyntaxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_template(source: str) -> ParseResult:
    """
    Parses a template without raising on syntax errors.

    Args:
        source: Template text

    Returns:
        ParseResult holding the document or the syntax error
    """
    try:
        return ParseResult(document=TemplateParser(source).parse())
    except TemplateSyntaxError as e:
        logger.debug(f"Template parse failed: {e}")
        return ParseResult(error=e)


__all__ = ["TemplateParser", "ParseResult", "parse_template", "DEFAULT_BEGIN", "DEFAULT_END"]
