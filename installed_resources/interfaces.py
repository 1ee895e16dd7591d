"""
Interfaces for the collaborators of the discovery engine.
"""

from __future__ import annotations

from typing import Protocol

from .errors import ErrorCategory
from .property_bag import PropertyBag


class MetadataDeserializer(Protocol):
    """Turn the text of a metadata file into a property bag."""

    def __call__(self, text: str) -> PropertyBag:
        ...


class ErrorSink(Protocol):
    """Receive non-fatal errors raised while discovering resources."""

    def report(self, error_id: str, category: ErrorCategory, message: str) -> None:
        ...


class CancellationToken(Protocol):
    """Cooperative cancellation signal, satisfied by threading.Event."""

    def is_set(self) -> bool:
        ...
