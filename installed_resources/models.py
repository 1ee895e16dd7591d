"""
Core data models for installed resources.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from packaging.version import Version


class ResourceType(str, Enum):
    """Kind of installed resource."""

    MODULE = "Module"
    SCRIPT = "Script"


class VersionType(str, Enum):
    """How a dependency constrains the version it names."""

    UNKNOWN = "Unknown"
    MINIMUM_VERSION = "MinimumVersion"
    REQUIRED_VERSION = "RequiredVersion"
    MAXIMUM_VERSION = "MaximumVersion"


@dataclass(frozen=True)
class VersionInfo:
    """Version constraint declared by a dependency."""

    version_type: VersionType = VersionType.UNKNOWN
    version: Optional[Version] = None

    def __str__(self) -> str:
        version = "" if self.version is None else str(self.version)
        return f"{self.version_type.value}: {version}"


@dataclass(frozen=True)
class Includes:
    """Members exported by a resource."""

    commands: Tuple[str, ...] = ()
    cmdlets: Tuple[str, ...] = ()
    dsc_resources: Tuple[str, ...] = ()
    functions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResourceInfo:
    """An installed module or script reconstructed from its metadata file."""

    name: str = ""
    version: Optional[Version] = None
    type: ResourceType = ResourceType.SCRIPT
    description: str = ""
    author: str = ""
    company_name: str = ""
    copyright: str = ""
    published_date: Optional[datetime] = None
    installed_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None
    license_uri: Optional[str] = None
    project_uri: Optional[str] = None
    icon_uri: Optional[str] = None
    format_version: Optional[Version] = None
    release_notes: str = ""
    repository: str = ""
    is_prerelease: bool = False
    tags: Tuple[str, ...] = ()
    dependencies: Mapping[str, VersionInfo] = field(default_factory=dict, hash=False)
    includes: Optional[Includes] = None
    additional_metadata: str = ""
    installed_location: str = ""

    def __post_init__(self):
        # Read-only view over a private copy.
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))

    @property
    def commands(self) -> Optional[Tuple[str, ...]]:
        return None if self.includes is None else self.includes.commands

    @property
    def cmdlets(self) -> Optional[Tuple[str, ...]]:
        return None if self.includes is None else self.includes.cmdlets

    @property
    def dsc_resources(self) -> Optional[Tuple[str, ...]]:
        return None if self.includes is None else self.includes.dsc_resources

    @property
    def functions(self) -> Optional[Tuple[str, ...]]:
        return None if self.includes is None else self.includes.functions

    def to_dict(self) -> Dict[str, Any]:
        """Render the record with plain JSON-friendly values."""
        def _text(value) -> Optional[str]:
            return None if value is None else str(value)

        def _date(value: Optional[datetime]) -> Optional[str]:
            return None if value is None else value.isoformat()

        return {
            "name": self.name,
            "version": _text(self.version),
            "type": self.type.value,
            "description": self.description,
            "author": self.author,
            "company_name": self.company_name,
            "copyright": self.copyright,
            "published_date": _date(self.published_date),
            "installed_date": _date(self.installed_date),
            "updated_date": _date(self.updated_date),
            "license_uri": self.license_uri,
            "project_uri": self.project_uri,
            "icon_uri": self.icon_uri,
            "format_version": _text(self.format_version),
            "release_notes": self.release_notes,
            "repository": self.repository,
            "is_prerelease": self.is_prerelease,
            "tags": list(self.tags),
            "dependencies": {name: str(info) for name, info in self.dependencies.items()},
            "commands": None if self.commands is None else list(self.commands),
            "cmdlets": None if self.cmdlets is None else list(self.cmdlets),
            "dsc_resources": None if self.dsc_resources is None else list(self.dsc_resources),
            "functions": None if self.functions is None else list(self.functions),
            "additional_metadata": self.additional_metadata,
            "installed_location": self.installed_location,
        }
