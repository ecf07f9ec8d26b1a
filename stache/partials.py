"""
Partial template sources.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class PartialLoader(Protocol):
    """Source of named partial templates."""

    def get(self, name: str) -> Optional[str]:
        """Returns the partial's template text, or None if there is no such partial."""
        ...


class DictPartialLoader:
    """Partials held in memory."""

    def __init__(self, partials: Optional[Mapping[str, str]] = None):
        self.partials: Dict[str, str] = dict(partials or {})

    def get(self, name: str) -> Optional[str]:
        return self.partials.get(name)


class DirectoryPartialLoader:
    """
    Partials stored as files ``<root>/<name><suffix>``.

    Names may contain '/' to reach subdirectories but cannot leave the root.
    """

    def __init__(self, root: Path, suffix: str = ".mustache"):
        self.root = Path(root).resolve()
        self.suffix = suffix

    def get(self, name: str) -> Optional[str]:
        if not name:
            return None
        path = (self.root / f"{name}{self.suffix}").resolve()
        if not path.is_relative_to(self.root):
            logger.warning(f"Partial '{name}' resolves outside {self.root}, ignoring")
            return None
        if not path.is_file():
            logger.debug(f"Partial '{name}' not found at {path}")
            return None
        return path.read_text(encoding="utf-8")


__all__ = ["PartialLoader", "DictPartialLoader", "DirectoryPartialLoader"]
