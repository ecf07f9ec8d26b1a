"""
Variable resolution for rendering.

The renderer only depends on the Context protocol, and on ScopedContext for
section scoping. ContextStack is the standard implementation over plain
Python data. Values wrap data one level at a time: nested fields and list
items are converted when a lookup reaches them, so large or self-referencing
data is never walked up front.
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional, Protocol, Sequence, runtime_checkable


class ValueKind(enum.Enum):
    TEXT = "text"
    LIST = "list"
    BOOL = "bool"
    OBJECT = "object"


_MISSING = object()


@dataclass(frozen=True)
class Value:
    """
    Typed template value.

    ``data`` holds a str for TEXT, a bool for BOOL, a tuple of items for LIST
    and, for OBJECT, either a mapping of field names or an object whose
    public attributes are the fields. List items and fields may be plain
    Python data; ``items()`` and ``field()`` convert them on access.
    """
    kind: ValueKind
    data: Any

    @classmethod
    def text(cls, text: str) -> Value:
        return cls(ValueKind.TEXT, text)

    @classmethod
    def list(cls, items: Sequence[Any]) -> Value:
        return cls(ValueKind.LIST, tuple(items))

    @classmethod
    def bool(cls, flag: bool) -> Value:
        return cls(ValueKind.BOOL, bool(flag))

    @classmethod
    def object(cls, fields: Mapping[str, Any]) -> Value:
        return cls(ValueKind.OBJECT, dict(fields))

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """
        Wraps plain Python data in a Value, one level deep.

        bool -> BOOL, None -> BOOL(False), str and numbers -> TEXT,
        enum members -> TEXT of their value, list/tuple -> LIST,
        mappings -> OBJECT. Other objects become an OBJECT over their public
        attributes, or TEXT of ``str(obj)`` when they have none.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.bool(False)
        if isinstance(obj, bool):
            return cls.bool(obj)
        if isinstance(obj, enum.Enum):
            return cls.text(str(obj.value))
        if isinstance(obj, (str, int, float)):
            return cls.text(str(obj))
        if isinstance(obj, Mapping):
            return cls(ValueKind.OBJECT, obj)
        if isinstance(obj, (list, tuple)):
            return cls.list(obj)
        if not _has_public_attributes(obj):
            # dates, decimals and the like
            return cls.text(str(obj))
        return cls(ValueKind.OBJECT, obj)

    def as_text(self) -> str:
        """Substitution text. Lists and objects substitute as empty."""
        if self.kind is ValueKind.TEXT:
            return self.data
        if self.kind is ValueKind.BOOL:
            return "true" if self.data else "false"
        return ""

    def is_truthy(self) -> bool:
        """False, empty text and empty lists are falsy; objects are always truthy."""
        if self.kind is ValueKind.BOOL:
            return self.data
        if self.kind in (ValueKind.TEXT, ValueKind.LIST):
            return len(self.data) > 0
        return True

    def items(self) -> Iterator[Value]:
        """Items of a LIST; nothing for other kinds."""
        if self.kind is ValueKind.LIST:
            for item in self.data:
                yield Value.from_python(item)

    def field(self, name: str) -> Optional[Value]:
        """Named field of an OBJECT, or item of a LIST for numeric names."""
        if self.kind is ValueKind.OBJECT:
            raw = _get_field(self.data, name)
            return None if raw is _MISSING else Value.from_python(raw)
        if self.kind is ValueKind.LIST and name.isdigit():
            index = int(name)
            if index < len(self.data):
                return Value.from_python(self.data[index])
        return None


def _has_public_attributes(obj: Any) -> bool:
    attrs = getattr(obj, "__dict__", None) or {}
    return any(not k.startswith("_") for k in attrs)


def _get_field(container: Any, name: str) -> Any:
    if isinstance(container, Mapping):
        if name in container:
            return container[name]
        # YAML data may carry non-string keys such as integers
        for key, item in container.items():
            if not isinstance(key, str) and str(key) == name:
                return item
        return _MISSING
    if name.startswith("_"):
        return _MISSING
    return getattr(container, "__dict__", {}).get(name, _MISSING)


@dataclass(frozen=True)
class LookupResult:
    found: bool
    value: Optional[Value] = None

    @property
    def text(self) -> str:
        return self.value.as_text() if self.value is not None else ""


NOT_FOUND = LookupResult(False)


@runtime_checkable
class Context(Protocol):
    """
    Name resolution capability consulted during rendering.
    """

    def lookup(self, name: str) -> LookupResult:
        """
        Resolves a tag name.

        Args:
            name: Exact tag name

        Returns:
            LookupResult, with found=False for unknown names
        """
        ...


@runtime_checkable
class ScopedContext(Context, Protocol):
    """
    Context that can enter and leave section scopes.

    Only scoped contexts get truthiness checks, list iteration and object
    scoping in sections; the renderer pushes the section value before the
    body renders and pops it afterwards, also when rendering fails.
    """

    def push(self, value: Value) -> None:
        """Makes ``value`` the innermost scope."""
        ...

    def pop(self) -> Value:
        """Leaves the innermost scope pushed by ``push``."""
        ...


class MappingContext:
    """
    Read-only context over a flat mapping of names to values.

    No stack and no dotted names: a name is found iff it is a key.
    """

    def __init__(self, values: Mapping[str, Any]):
        self.values = dict(values)

    def lookup(self, name: str) -> LookupResult:
        if name not in self.values:
            return NOT_FOUND
        return LookupResult(True, Value.from_python(self.values[name]))


class ContextStack:
    """
    Stack of value frames used for section scoping.

    Lookups search the frames from the innermost outwards; sections push
    the current item while their body renders. Frames hold shallow Values,
    so nested data is only converted along the names actually looked up.
    """

    def __init__(self, data: Any = None):
        self.frames: List[Value] = [Value.from_python(data if data is not None else {})]

    def push(self, value: Value) -> None:
        self.frames.append(value)

    def pop(self) -> Value:
        if len(self.frames) == 1:
            raise RuntimeError("Cannot pop the root context frame")
        return self.frames.pop()

    @contextmanager
    def scope(self, value: Value) -> Iterator[ContextStack]:
        self.push(value)
        try:
            yield self
        finally:
            self.pop()

    @property
    def top(self) -> Value:
        return self.frames[-1]

    def lookup(self, name: str) -> LookupResult:
        if name == ".":
            return LookupResult(True, self.top)

        head, *rest = name.split(".")
        value = self._find_first(head)
        if value is None:
            return NOT_FOUND

        for segment in rest:
            value = value.field(segment)
            if value is None:
                return NOT_FOUND

        return LookupResult(True, value)

    def _find_first(self, name: str) -> Optional[Value]:
        for frame in reversed(self.frames):
            value = frame.field(name)
            if value is not None:
                return value
        return None


__all__ = [
    "ValueKind",
    "Value",
    "LookupResult",
    "NOT_FOUND",
    "Context",
    "ScopedContext",
    "MappingContext",
    "ContextStack",
]
