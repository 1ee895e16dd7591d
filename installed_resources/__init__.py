"""
Installed Resources

Find PowerShell modules and scripts installed on the local filesystem and read
their PSGet metadata.
"""

__version__ = "0.1.0"

from .errors import (
    ConstraintParseError,
    ErrorCollector,
    FieldParseError,
    MetadataFormatError,
    ResourceDiscoveryError,
    SearchPathNotFoundError,
)
from .finder import InstalledResourceFinder, get_installed_resources
from .models import Includes, ResourceInfo, ResourceType, VersionInfo, VersionType
from .search_paths import SearchPaths, default_search_paths
from .version_range import VersionRange, parse_version_argument

__all__ = [
    "ConstraintParseError",
    "ErrorCollector",
    "FieldParseError",
    "Includes",
    "InstalledResourceFinder",
    "MetadataFormatError",
    "ResourceDiscoveryError",
    "ResourceInfo",
    "ResourceType",
    "SearchPathNotFoundError",
    "SearchPaths",
    "VersionInfo",
    "VersionRange",
    "VersionType",
    "default_search_paths",
    "get_installed_resources",
    "parse_version_argument",
]
