"""
Tag types and the tag classifier.

Maps the trimmed interior text of a tag to its type and cleaned name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidDelimiters

# ASCII whitespace only: str.strip() without arguments also strips Unicode spaces
ASCII_WHITESPACE = " \t\n\v\f\r"


class TagType(enum.Enum):
    """Types of tags recognised by the parser."""
    INVALID = "invalid"
    VARIABLE = "variable"
    UNESCAPED_VARIABLE = "unescaped_variable"
    SECTION_BEGIN = "section_begin"
    SECTION_END = "section_end"
    SECTION_BEGIN_INVERTED = "section_begin_inverted"
    COMMENT = "comment"
    PARTIAL = "partial"
    SET_DELIMITER = "set_delimiter"


# Leading sigil -> tag type
SIGILS = {
    "#": TagType.SECTION_BEGIN,
    "^": TagType.SECTION_BEGIN_INVERTED,
    "/": TagType.SECTION_END,
    ">": TagType.PARTIAL,
    "&": TagType.UNESCAPED_VARIABLE,
    "!": TagType.COMMENT,
}


@dataclass(frozen=True)
class Tag:
    """
    A classified tag.

    Attributes:
        name: Cleaned tag name (sigil removed, trimmed)
        type: Tag type
        position: Offset of the tag's begin delimiter in the source
    """
    name: str
    type: TagType = TagType.INVALID
    position: int = 0

    @property
    def is_section_begin(self) -> bool:
        return self.type in (TagType.SECTION_BEGIN, TagType.SECTION_BEGIN_INVERTED)

    @property
    def is_section_end(self) -> bool:
        return self.type is TagType.SECTION_END

    def __repr__(self) -> str:
        return f"Tag({self.type.name}, {self.name!r}, pos={self.position})"


def trim(text: str) -> str:
    """Strips ASCII whitespace from both ends."""
    return text.strip(ASCII_WHITESPACE)


def classify_tag(contents: str, unescaped: bool = False, position: int = 0) -> Tag:
    """
    Classifies the interior text of a tag.

    Args:
        contents: Tag interior, already trimmed
        unescaped: True if the tag used the triple-brace form
        position: Offset of the tag in the source

    Returns:
        Classified tag
    """
    if unescaped:
        return Tag(contents, TagType.UNESCAPED_VARIABLE, position)

    if not contents:
        return Tag("", TagType.VARIABLE, position)

    sigil = contents[0]

    if sigil == "=" and len(contents) > 1 and contents.endswith("="):
        return Tag(trim(contents[1:-1]), TagType.SET_DELIMITER, position)

    tag_type = SIGILS.get(sigil)
    if tag_type is None:
        return Tag(contents, TagType.VARIABLE, position)

    return Tag(trim(contents[1:]), tag_type, position)


def parse_delimiters(text: str, position: int = 0) -> Tuple[str, str]:
    """
    Splits set-delimiter text such as ``"<% %>"`` into a delimiter pair.

    Raises:
        InvalidDelimiters: Unless the text is exactly two delimiters
            without whitespace or '='
    """
    parts = [part for part in _split_ascii(text) if part]
    if len(parts) != 2 or any("=" in part for part in parts):
        raise InvalidDelimiters(text, position)
    return parts[0], parts[1]


def _split_ascii(text: str):
    part = []
    for char in text:
        if char in ASCII_WHITESPACE:
            yield "".join(part)
            part = []
        else:
            part.append(char)
    yield "".join(part)


__all__ = [
    "TagType",
    "Tag",
    "SIGILS",
    "trim",
    "classify_tag",
    "parse_delimiters",
]
