"""
Error types and the default error sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List


logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """Category attached to every reported error."""

    PARSER_ERROR = "ParserError"
    READ_ERROR = "ReadError"
    OBJECT_NOT_FOUND = "ObjectNotFound"
    INVALID_ARGUMENT = "InvalidArgument"


class ResourceDiscoveryError(Exception):
    """Base class for discovery failures."""

    error_id = "ResourceDiscoveryError"
    category = ErrorCategory.INVALID_ARGUMENT


class SearchPathNotFoundError(ResourceDiscoveryError):
    """An explicit search root does not exist."""

    error_id = "PathNotFound"
    category = ErrorCategory.OBJECT_NOT_FOUND

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Cannot find path '{path}' because it does not exist")


class ConstraintParseError(ResourceDiscoveryError, ValueError):
    """A version argument is neither a version nor a version range."""

    error_id = "VersionRangeParseFailure"

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot parse version argument '{value}': {reason}")


class MetadataFormatError(ResourceDiscoveryError):
    """A metadata file could not be read or deserialized."""

    error_id = "ErrorDeserializingMetadata"
    category = ErrorCategory.PARSER_ERROR


class FieldParseError(ResourceDiscoveryError):
    """A single metadata field could not be decoded."""

    category = ErrorCategory.PARSER_ERROR

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"{field_name} error: {reason}")

    @property
    def error_id(self) -> str:
        return f"ErrorParsing{self.field_name}"


@dataclass(frozen=True)
class ErrorRecord:
    """A non-fatal error reported during discovery."""

    error_id: str
    category: ErrorCategory
    message: str


class ErrorCollector:
    """Error sink that keeps every record and logs it as a warning."""

    def __init__(self, log: bool = True) -> None:
        self.records: List[ErrorRecord] = []
        self.log = log

    def report(self, error_id: str, category: ErrorCategory, message: str) -> None:
        self.records.append(ErrorRecord(error_id, category, message))
        if self.log:
            logger.warning("%s (%s): %s", error_id, category.value, message)

    def clear(self) -> None:
        self.records.clear()

    def ids(self) -> List[str]:
        return [record.error_id for record in self.records]

    def __len__(self) -> int:
        return len(self.records)
