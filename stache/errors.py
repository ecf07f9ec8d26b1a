"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from StacheUserError.

Programming errors and bugs should NOT inherit from StacheUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

import enum
from typing import Optional


class StacheUserError(Exception):
    """
    Base class for all user-facing errors in stache.

    These errors indicate problems that the user can fix:
    malformed templates, invalid configuration, bad data files, etc.
    """
    pass


class ErrorKind(enum.Enum):
    """One kind per structural defect detected while parsing a template."""
    UNTERMINATED_TAG = "unterminated_tag"
    UNMATCHED_SECTION_END = "unmatched_section_end"
    UNCLOSED_SECTION = "unclosed_section"
    INVALID_DELIMITERS = "invalid_delimiters"


class TemplateSyntaxError(StacheUserError):
    """
    Terminal parse failure.

    Carries the offset of the offending tag in the source text and,
    where there is one, the tag name.
    """

    kind: ErrorKind

    def __init__(self, message: str, position: int, name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.position = position
        self.name = name


class UnterminatedTag(TemplateSyntaxError):
    """A begin delimiter without a matching end delimiter."""

    kind = ErrorKind.UNTERMINATED_TAG

    def __init__(self, position: int):
        super().__init__(
            f"no tag end delimiter found for start delimiter at position {position}",
            position,
        )


class UnmatchedSectionEnd(TemplateSyntaxError):
    """A section end tag while no section is open."""

    kind = ErrorKind.UNMATCHED_SECTION_END

    def __init__(self, name: str, position: int):
        super().__init__(
            f"section end tag \"{name}\" found without matching start at position {position}",
            position,
            name,
        )


class UnclosedSection(TemplateSyntaxError):
    """A section whose body does not end with a matching end tag."""

    kind = ErrorKind.UNCLOSED_SECTION

    def __init__(self, name: str, position: int):
        super().__init__(
            f"no section end tag found for section \"{name}\" at position {position}",
            position,
            name,
        )


class InvalidDelimiters(TemplateSyntaxError):
    """A set-delimiter tag whose contents are not two usable delimiters."""

    kind = ErrorKind.INVALID_DELIMITERS

    def __init__(self, text: str, position: int):
        super().__init__(
            f"invalid set delimiter tag \"{text}\" at position {position}",
            position,
            text,
        )


class TemplateNotValid(StacheUserError):
    """Render or print requested on a template that failed to parse."""

    def __init__(self, error: Optional[TemplateSyntaxError]):
        detail = str(error) if error is not None else "unknown error"
        super().__init__(f"template is not valid: {detail}")
        self.error = error


class PartialRecursionError(StacheUserError):
    """Partial inclusion nested deeper than the configured limit."""

    def __init__(self, name: str, depth: int):
        super().__init__(f"partial \"{name}\" exceeds maximum inclusion depth {depth}")
        self.name = name
        self.depth = depth


class ConfigError(StacheUserError):
    """Invalid configuration or data file."""
    pass


__all__ = [
    "StacheUserError",
    "ErrorKind",
    "TemplateSyntaxError",
    "UnterminatedTag",
    "UnmatchedSectionEnd",
    "UnclosedSection",
    "InvalidDelimiters",
    "TemplateNotValid",
    "PartialRecursionError",
    "ConfigError",
]
