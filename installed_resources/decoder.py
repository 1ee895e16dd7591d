"""
Decoding of metadata property bags into ResourceInfo records.

Every field is decoded on its own through the FIELD_DECODERS table. A field
that fails is reported to the error sink and keeps its default value, so one
bad property never costs the rest of the record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from packaging.version import InvalidVersion, Version

from . import clixml
from .errors import ErrorCollector, FieldParseError, MetadataFormatError
from .interfaces import ErrorSink, MetadataDeserializer
from .models import Includes, ResourceInfo, ResourceType, VersionInfo, VersionType
from .property_bag import PropertyBag, RawValue
from .time_utils import parse_datetime
from .version_range import parse_version


logger = logging.getLogger(__name__)


def decode_string(raw: RawValue) -> str:
    return raw.as_string()


def decode_type(raw: RawValue) -> ResourceType:
    try:
        text = raw.as_string()
    except TypeError:
        return ResourceType.SCRIPT
    if text.strip().lower() == ResourceType.MODULE.value.lower():
        return ResourceType.MODULE
    return ResourceType.SCRIPT


def decode_version(raw: RawValue) -> Version:
    text = raw.as_string()
    try:
        return parse_version(text)
    except InvalidVersion as e:
        raise ValueError(f"'{text}' is not a valid version") from e


def decode_optional_version(raw: RawValue) -> Optional[Version]:
    if raw.is_nil:
        return None
    return decode_version(raw)


def _date_decoder(nested_key: str) -> Callable[[RawValue], Optional[datetime]]:
    """Decode a timestamp that may sit one level down under ``nested_key``."""
    def decode(raw: RawValue) -> Optional[datetime]:
        if raw.is_nil:
            return None
        if raw.properties is not None and raw.properties.has(nested_key):
            nested = raw.properties.get(nested_key)
            try:
                return parse_datetime(nested.as_string())
            except (TypeError, ValueError) as e:
                logger.debug("Nested %s not usable, falling back: %s", nested_key, e)
        return parse_datetime(raw.as_string())

    return decode


def decode_uri(raw: RawValue) -> Optional[str]:
    if raw.is_nil:
        return None
    text = raw.as_string().strip()
    if not text:
        return None
    parts = urlsplit(text)
    if not parts.scheme or not (parts.netloc or parts.path) or " " in text:
        raise ValueError(f"'{text}' is not an absolute URI")
    return text


def decode_bool(raw: RawValue) -> bool:
    try:
        text = raw.as_string()
    except TypeError:
        return False
    return text.strip().lower() == "true"


def decode_tags(raw: RawValue) -> Tuple[str, ...]:
    if raw.items is not None:
        return tuple(tag for item in raw.items for tag in item.as_string().split())
    return tuple(raw.as_string().split())


_CONSTRAINT_KEYS = (
    ("MinimumVersion", VersionType.MINIMUM_VERSION),
    ("RequiredVersion", VersionType.REQUIRED_VERSION),
    ("MaximumVersion", VersionType.MAXIMUM_VERSION),
)


def decode_dependency(entry: PropertyBag) -> Tuple[str, VersionInfo]:
    """Decode one ``{Name, <Minimum|Required|Maximum>Version}`` entry.

    When several version keys are present the last one checked wins.
    """
    name = entry.get("Name").as_string()
    if not name:
        raise ValueError("dependency without a name")

    info = VersionInfo()
    for key, version_type in _CONSTRAINT_KEYS:
        if not entry.has(key) or entry.get(key).is_nil:
            continue
        version = None
        try:
            version = parse_version(entry.get(key).as_string())
        except InvalidVersion:
            logger.debug("Dependency %s has unparsable %s", name, key)
        info = VersionInfo(version_type, version)
    return name, info


def decode_dependencies(raw: RawValue) -> Dict[str, VersionInfo]:
    dependencies: Dict[str, VersionInfo] = {}
    for item in raw.as_list():
        name, info = decode_dependency(item.as_nested_bag())
        if name in dependencies:
            raise ValueError(f"duplicate dependency '{name}'")
        dependencies[name] = info
    return dependencies


def _member_list(includes: PropertyBag, key: str) -> Tuple[str, ...]:
    return tuple(item.as_string() for item in includes.get(key).as_list())


def decode_includes(raw: RawValue) -> Includes:
    includes = raw.as_nested_bag()
    return Includes(
        commands=_member_list(includes, "Command"),
        cmdlets=_member_list(includes, "Cmdlet"),
        dsc_resources=_member_list(includes, "DscResource"),
        functions=_member_list(includes, "Function"),
    )


@dataclass(frozen=True)
class FieldDecoder:
    """One row of the field-decode table."""

    key: str
    attribute: str
    decode: Callable[[RawValue], Any]
    default: Any = None
    required: bool = False


FIELD_DECODERS: List[FieldDecoder] = [
    FieldDecoder("Name", "name", decode_string, ""),
    FieldDecoder("Version", "version", decode_version, None, required=True),
    FieldDecoder("Type", "type", decode_type, ResourceType.SCRIPT),
    FieldDecoder("Description", "description", decode_string, ""),
    FieldDecoder("Author", "author", decode_string, ""),
    FieldDecoder("CompanyName", "company_name", decode_string, ""),
    FieldDecoder("Copyright", "copyright", decode_string, ""),
    FieldDecoder("PublishedDate", "published_date", _date_decoder("DateTime"), None),
    FieldDecoder("InstalledDate", "installed_date", _date_decoder("Date"), None),
    FieldDecoder("UpdatedDate", "updated_date", _date_decoder("DateTime"), None),
    FieldDecoder("LicenseUri", "license_uri", decode_uri, None),
    FieldDecoder("ProjectUri", "project_uri", decode_uri, None),
    FieldDecoder("IconUri", "icon_uri", decode_uri, None),
    FieldDecoder("PowerShellGetFormatVersion", "format_version", decode_optional_version, None),
    FieldDecoder("ReleaseNotes", "release_notes", decode_string, ""),
    FieldDecoder("Repository", "repository", decode_string, ""),
    FieldDecoder("IsPrerelease", "is_prerelease", decode_bool, False),
    FieldDecoder("Tags", "tags", decode_tags, ()),
    FieldDecoder("Dependencies", "dependencies", decode_dependencies, None, required=True),
    FieldDecoder("Includes", "includes", decode_includes, None, required=True),
    FieldDecoder("AdditionalMetadata", "additional_metadata", decode_string, ""),
    FieldDecoder("InstalledLocation", "installed_location", decode_string, ""),
]


class MetadataDecoder:
    """Read metadata files and decode them into ResourceInfo records."""

    def __init__(
        self,
        deserializer: Optional[MetadataDeserializer] = None,
        error_sink: Optional[ErrorSink] = None,
        fields: Optional[List[FieldDecoder]] = None,
    ):
        """Initialize metadata decoder.

        Args:
            deserializer: Turns file text into a PropertyBag (CLIXML by default)
            error_sink: Receives field errors (logged and collected by default)
            fields: Field-decode table (FIELD_DECODERS by default)
        """
        self.deserializer = deserializer or clixml.deserialize
        self.error_sink = error_sink if error_sink is not None else ErrorCollector()
        self.fields = FIELD_DECODERS if fields is None else fields

    def read(self, path: Path) -> Optional[PropertyBag]:
        """Read and deserialize a metadata file.

        Args:
            path: Metadata file path

        Returns:
            The deserialized PropertyBag, or None if the file no longer exists

        Raises:
            MetadataFormatError: If the file cannot be read or deserialized
        """
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("Metadata file %s does not exist, skipping", path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise MetadataFormatError(f"Cannot read '{path}': {e}") from e

        try:
            return self.deserializer(text)
        except Exception as e:
            raise MetadataFormatError(f"Cannot deserialize '{path}': {e}") from e

    def decode(self, bag: PropertyBag, source: Optional[Path] = None) -> ResourceInfo:
        """Build a ResourceInfo from ``bag``, reporting fields that fail."""
        values: Dict[str, Any] = {}
        for field in self.fields:
            try:
                value = self._decode_field(bag, field)
            except FieldParseError as e:
                self._report(e, source)
                continue
            if value is not None:
                values[field.attribute] = value
        return ResourceInfo(**values)

    def decode_file(self, path: Path) -> Optional[ResourceInfo]:
        """Read and decode one metadata file; None if it vanished."""
        logger.debug("Reading package metadata from: '%s'", path)
        bag = self.read(path)
        if bag is None:
            return None
        return self.decode(bag, source=path)

    def _decode_field(self, bag: PropertyBag, field: FieldDecoder) -> Any:
        if not bag.has(field.key):
            if field.required:
                raise FieldParseError(field.key, "property is missing")
            return field.default
        try:
            return field.decode(bag.get(field.key))
        except Exception as e:
            reason = f"missing property {e}" if isinstance(e, KeyError) else str(e)
            raise FieldParseError(field.key, reason) from e

    def _report(self, error: FieldParseError, source: Optional[Path]) -> None:
        message = str(error) if source is None else f"{error} ({source})"
        self.error_sink.report(error.error_id, error.category, message)
