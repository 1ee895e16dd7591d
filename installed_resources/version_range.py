"""
Version parsing and NuGet-style version ranges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from packaging.version import InvalidVersion, Version

from .errors import ConstraintParseError


def parse_version(value: str) -> Version:
    """Parse a single version token, raising InvalidVersion on failure."""
    text = (value or "").strip()
    if not text:
        raise InvalidVersion("empty version string")
    return Version(text)


def try_parse_version(value: Optional[str]) -> Optional[Version]:
    """Parse a version token, returning None when it is not a version."""
    if value is None:
        return None
    try:
        return parse_version(value)
    except InvalidVersion:
        return None


@dataclass(frozen=True)
class VersionRange:
    """A version interval with optional, independently inclusive bounds."""

    min_version: Optional[Version] = None
    max_version: Optional[Version] = None
    include_min: bool = True
    include_max: bool = True

    @classmethod
    def exact(cls, version: Version) -> "VersionRange":
        return cls(version, version, True, True)

    @property
    def is_exact(self) -> bool:
        return (
            self.min_version is not None
            and self.min_version == self.max_version
            and self.include_min
            and self.include_max
        )

    def satisfies(self, version: Optional[Version]) -> bool:
        if version is None:
            return False
        if self.min_version is not None:
            if self.include_min and version < self.min_version:
                return False
            if not self.include_min and version <= self.min_version:
                return False
        if self.max_version is not None:
            if self.include_max and version > self.max_version:
                return False
            if not self.include_max and version >= self.max_version:
                return False
        return True

    def __str__(self) -> str:
        if self.is_exact:
            return f"[{self.min_version}]"
        lower = "" if self.min_version is None else str(self.min_version)
        upper = "" if self.max_version is None else str(self.max_version)
        return (
            f"{'[' if self.include_min else '('}{lower}, "
            f"{upper}{']' if self.include_max else ')'}"
        )


def parse_version_range(value: str) -> VersionRange:
    """Parse interval notation such as ``[1.0,2.0)``, ``(,1.5]`` or ``[1.0]``.

    Args:
        value: Range expression

    Returns:
        Parsed VersionRange

    Raises:
        ConstraintParseError: If the expression is malformed
    """
    text = (value or "").strip()
    if len(text) < 3:
        raise ConstraintParseError(value, "expected a version or an interval")

    opening, closing = text[0], text[-1]
    if opening not in "[(" or closing not in "])":
        raise ConstraintParseError(value, "interval must start with '[' or '(' and end with ']' or ')'")
    include_min = opening == "["
    include_max = closing == "]"
    body = text[1:-1]

    if "," not in body:
        if not (include_min and include_max):
            raise ConstraintParseError(value, "a single-version interval must use '[' and ']'")
        version = try_parse_version(body)
        if version is None:
            raise ConstraintParseError(value, f"'{body.strip()}' is not a valid version")
        return VersionRange.exact(version)

    parts = body.split(",")
    if len(parts) != 2:
        raise ConstraintParseError(value, "an interval takes exactly two bounds")

    lower_text, upper_text = (part.strip() for part in parts)
    if not lower_text and not upper_text:
        raise ConstraintParseError(value, "at least one bound is required")

    lower = None
    if lower_text:
        lower = try_parse_version(lower_text)
        if lower is None:
            raise ConstraintParseError(value, f"'{lower_text}' is not a valid version")
    upper = None
    if upper_text:
        upper = try_parse_version(upper_text)
        if upper is None:
            raise ConstraintParseError(value, f"'{upper_text}' is not a valid version")

    if lower is not None and upper is not None:
        if lower > upper:
            raise ConstraintParseError(value, "lower bound is greater than upper bound")
        if lower == upper and not (include_min and include_max):
            raise ConstraintParseError(value, "empty interval")

    return VersionRange(lower, upper, include_min, include_max)


def parse_version_argument(value: Optional[str]) -> Optional[VersionRange]:
    """Turn a user version argument into a search range.

    A single version becomes an exact range; anything else is parsed as an
    interval. None means no constraint.
    """
    if value is None:
        return None
    version = try_parse_version(value)
    if version is not None:
        return VersionRange.exact(version)
    return parse_version_range(value)
