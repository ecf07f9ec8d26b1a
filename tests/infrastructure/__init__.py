"""
Shared test infrastructure for stache.

Modules:
- file_utils: Utilities for creating files and directories
"""

from .file_utils import write

__all__ = ["write"]
