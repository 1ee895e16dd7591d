"""
Loosely-typed values produced by metadata deserializers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RawValue:
    """A deserialized value: text, a list, a nested bag, or any mix of them.

    Serialized objects can carry a primitive value and extra properties at the
    same time (a timestamp with a display hint, for example), so the three
    shapes are independent. A value with none of them is nil.
    """

    text: Optional[str] = None
    items: Optional[Tuple["RawValue", ...]] = None
    properties: Optional["PropertyBag"] = None

    @property
    def is_nil(self) -> bool:
        return self.text is None and self.items is None and self.properties is None

    @property
    def kind(self) -> str:
        if self.is_nil:
            return "nil"
        if self.text is not None:
            return "text"
        if self.items is not None:
            return "list"
        return "bag"

    def as_string(self) -> str:
        if self.text is not None:
            return self.text
        if self.is_nil:
            return ""
        raise TypeError(f"{self.kind} value has no string form")

    def as_list(self) -> List["RawValue"]:
        if self.items is None:
            raise TypeError(f"expected a list, got {self.kind} value")
        return list(self.items)

    def as_nested_bag(self) -> "PropertyBag":
        if self.properties is None:
            raise TypeError(f"expected a property bag, got {self.kind} value")
        return self.properties

    @classmethod
    def from_python(cls, value: Any) -> "RawValue":
        """Build a RawValue from plain strings, numbers, lists and dicts."""
        if value is None:
            return cls()
        if isinstance(value, RawValue):
            return value
        if isinstance(value, PropertyBag):
            return cls(properties=value)
        if isinstance(value, Mapping):
            return cls(properties=PropertyBag.from_mapping(value))
        if isinstance(value, (list, tuple)):
            return cls(items=tuple(cls.from_python(item) for item in value))
        if isinstance(value, bool):
            return cls(text="True" if value else "False")
        return cls(text=str(value))


class PropertyBag:
    """Ordered, read-only mapping of property names to RawValues."""

    def __init__(self, entries: Optional[Mapping[str, RawValue]] = None) -> None:
        self._entries: Dict[str, RawValue] = dict(entries or {})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PropertyBag":
        return cls({str(key): RawValue.from_python(value) for key, value in mapping.items()})

    def has(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> RawValue:
        return self._entries[key]

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self) -> List[Tuple[str, RawValue]]:
        return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"PropertyBag({self._entries!r})"
