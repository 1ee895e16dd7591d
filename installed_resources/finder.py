"""
Discovery of installed resources.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .decoder import MetadataDecoder
from .discovery import enumerate_candidates, filter_by_name, select_metadata_files
from .errors import ErrorCollector, MetadataFormatError, SearchPathNotFoundError
from .interfaces import CancellationToken, ErrorSink
from .models import ResourceInfo
from .search_paths import RootKind, SearchPaths, SearchRoot, default_search_paths
from .version_range import VersionRange, parse_version_argument


logger = logging.getLogger(__name__)


class InstalledResourceFinder:
    """Find installed modules and scripts and read their metadata."""

    def __init__(
        self,
        search_paths: Optional[SearchPaths] = None,
        decoder: Optional[MetadataDecoder] = None,
        error_sink: Optional[ErrorSink] = None,
    ):
        """Initialize resource finder.

        Args:
            search_paths: Default roots to search (platform defaults if omitted)
            decoder: Metadata decoder (CLIXML decoder if omitted)
            error_sink: Receives non-fatal errors (logged and collected by default)

        The sink is shared by every ``find`` call on this finder, so records
        from successive scans accumulate until the caller clears them.
        """
        self.search_paths = search_paths
        self.error_sink = error_sink if error_sink is not None else ErrorCollector()
        self.decoder = decoder or MetadataDecoder(error_sink=self.error_sink)

    def search_roots(self, path: Optional[Path] = None) -> List[SearchRoot]:
        """Roots for a request: the explicit ``path`` or the default ones.

        Raises:
            SearchPathNotFoundError: If an explicit path does not exist
        """
        if path is not None:
            path = Path(path)
            logger.debug("Provided path is: '%s'", path)
            if not path.is_dir():
                raise SearchPathNotFoundError(path)
            return [SearchRoot(path, RootKind.MODULES)]

        search_paths = self.search_paths or default_search_paths()
        return search_paths.roots()

    def find(
        self,
        names: Optional[Sequence[str]] = None,
        version: Optional[str] = None,
        path: Optional[Path] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Iterator[ResourceInfo]:
        """Find installed resources matching ``names`` and ``version``.

        The version argument and explicit path are checked before anything
        is returned, so a bad request fails here rather than on first
        iteration. The result is a lazy iterator that rescans the filesystem
        each time ``find`` is called.

        Args:
            names: Resource names to match, None or ["*"] for all
            version: Exact version or NuGet interval such as "[1.0,2.0)"
            path: Explicit root to search instead of the default ones
            cancel: Token checked between roots and between metadata files

        Returns:
            Iterator of ResourceInfo records

        Raises:
            ConstraintParseError: If ``version`` is not a version or range
            SearchPathNotFoundError: If ``path`` does not exist
        """
        version_range = parse_version_argument(version)
        if version_range is not None:
            logger.debug("Version range to match: %s", version_range)
        roots = self.search_roots(path)
        return self._iter_resources(roots, names, version_range, cancel)

    def _iter_resources(
        self,
        roots: List[SearchRoot],
        names: Optional[Sequence[str]],
        version_range: Optional[VersionRange],
        cancel: Optional[CancellationToken],
    ) -> Iterator[ResourceInfo]:
        candidates = enumerate_candidates(roots, cancel)
        matched = filter_by_name(candidates, names)
        for metadata_path in select_metadata_files(matched, version_range):
            if cancel is not None and cancel.is_set():
                logger.debug("Cancelled before reading %s", metadata_path)
                return
            try:
                resource = self.decoder.decode_file(metadata_path)
            except MetadataFormatError as e:
                self.error_sink.report(e.error_id, e.category, str(e))
                continue
            if resource is not None:
                yield resource


def get_installed_resources(
    names: Optional[Sequence[str]] = None,
    version: Optional[str] = None,
    path: Optional[Path] = None,
    cancel: Optional[CancellationToken] = None,
    search_paths: Optional[SearchPaths] = None,
    error_sink: Optional[ErrorSink] = None,
) -> Iterator[ResourceInfo]:
    """Find installed resources with a one-off InstalledResourceFinder."""
    finder = InstalledResourceFinder(search_paths=search_paths, error_sink=error_sink)
    return finder.find(names=names, version=version, path=path, cancel=cancel)
