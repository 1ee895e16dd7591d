"""
Candidate enumeration, name filtering and version selection.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from packaging.version import Version

from .interfaces import CancellationToken
from .search_paths import RootKind, SearchRoot
from .version_range import VersionRange, try_parse_version


logger = logging.getLogger(__name__)

MODULE_METADATA_FILE = "PSGetModuleInfo.xml"
SCRIPT_METADATA_SUFFIX = "_InstalledScriptInfo.xml"


def _list_entries(directory: Path, want_dirs: bool) -> List[Path]:
    """List immediate subdirectories (or files), sorted by name.

    A directory that disappears or cannot be listed yields nothing.
    """
    try:
        with os.scandir(directory) as it:
            entries = []
            for entry in it:
                try:
                    if want_dirs and entry.is_dir():
                        entries.append(Path(entry.path))
                    elif not want_dirs and entry.is_file():
                        entries.append(Path(entry.path))
                except OSError:
                    continue
    except (FileNotFoundError, NotADirectoryError):
        return []
    except PermissionError as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return []
    return sorted(entries, key=lambda p: p.name)


def _resolved(path: Path) -> str:
    try:
        return os.path.normcase(str(path.resolve()))
    except OSError:
        return os.path.normcase(os.path.abspath(path))


def enumerate_candidates(
    roots: Iterable[SearchRoot],
    cancel: Optional[CancellationToken] = None,
) -> Iterator[Path]:
    """Yield the package directories and script metadata files under each root.

    Entries reachable through more than one root are yielded once, at their
    first occurrence.
    """
    seen: Set[str] = set()
    for root in roots:
        if cancel is not None and cancel.is_set():
            logger.debug("Cancelled before searching %s", root.path)
            return
        if not root.path.is_dir():
            logger.debug("Search root %s does not exist, skipping", root.path)
            continue
        logger.debug("Searching root '%s' (%s)", root.path, root.kind.value)
        for entry in _list_entries(root.path, want_dirs=root.kind is RootKind.MODULES):
            key = _resolved(entry)
            if key in seen:
                continue
            seen.add(key)
            logger.debug("Candidate: '%s'", entry)
            yield entry


def _is_wildcard(names: Optional[Sequence[str]]) -> bool:
    return names is None or list(names) == ["*"]


def filter_by_name(
    candidates: Iterable[Path],
    names: Optional[Sequence[str]] = None,
) -> Iterator[Path]:
    """Keep candidates named after one of ``names``, ignoring case.

    A module matches on its directory name, a script on its
    ``<name>_InstalledScriptInfo.xml`` file name.
    """
    if _is_wildcard(names):
        yield from candidates
        return

    wanted = {name.lower() for name in names}
    wanted.update((name + SCRIPT_METADATA_SUFFIX).lower() for name in names)
    for candidate in candidates:
        if candidate.name.lower() in wanted:
            yield candidate


def _version_key(item: Tuple[Version, Path]) -> Tuple[Version, str]:
    return item[0], item[1].name


def version_directories(package_dir: Path) -> List[Tuple[Version, Path]]:
    """Parse each subdirectory name as a version, highest first.

    Subdirectories whose names are not versions are left out. Equal versions
    are ordered by name so the lexically-last one comes first.
    """
    parsed = []
    for subdir in _list_entries(package_dir, want_dirs=True):
        version = try_parse_version(subdir.name)
        if version is None:
            logger.debug("Ignoring non-version directory '%s'", subdir)
            continue
        parsed.append((version, subdir))
    return sorted(parsed, key=_version_key, reverse=True)


def _latest_directory(package_dir: Path) -> Optional[Path]:
    versions = version_directories(package_dir)
    if versions:
        return versions[0][1]
    subdirs = _list_entries(package_dir, want_dirs=True)
    if not subdirs:
        return None
    return max(subdirs, key=lambda p: p.name.lower())


def select_metadata_files(
    candidates: Iterable[Path],
    version_range: Optional[VersionRange] = None,
) -> Iterator[Path]:
    """Map each candidate to the metadata file(s) of its selected versions.

    Script metadata files pass straight through. For a module directory,
    every version inside ``version_range`` is selected, or only the latest
    when no range is given.
    """
    for candidate in candidates:
        if candidate.is_file():
            logger.debug("Found script metadata: '%s'", candidate)
            yield candidate
            continue
        if not candidate.is_dir():
            logger.debug("Candidate '%s' disappeared, skipping", candidate)
            continue

        logger.debug("Searching through package path: '%s'", candidate)
        if version_range is None:
            latest = _latest_directory(candidate)
            if latest is not None:
                logger.debug("Found module metadata: '%s'", latest / MODULE_METADATA_FILE)
                yield latest / MODULE_METADATA_FILE
            continue

        for version, subdir in version_directories(candidate):
            if version_range.satisfies(version):
                logger.debug("Version %s satisfies %s", version, version_range)
                yield subdir / MODULE_METADATA_FILE
