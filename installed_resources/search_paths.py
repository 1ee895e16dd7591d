"""
Installation roots searched for resources.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional


logger = logging.getLogger(__name__)


class RootKind(str, Enum):
    """What a root contains: package directories or script metadata files."""

    MODULES = "modules"
    SCRIPTS = "scripts"


@dataclass(frozen=True)
class SearchRoot:
    """A directory whose immediate entries are resource candidates."""

    path: Path
    kind: RootKind = RootKind.MODULES


@dataclass(frozen=True)
class SearchPaths:
    """Module path entries plus the per-user and all-users install roots."""

    module_paths: List[Path] = field(default_factory=list)
    current_user_root: Optional[Path] = None
    all_users_root: Optional[Path] = None

    def roots(self) -> List[SearchRoot]:
        roots = [SearchRoot(Path(path)) for path in self.module_paths]
        scopes = [root for root in (self.all_users_root, self.current_user_root) if root is not None]
        for scope in scopes:
            roots.append(SearchRoot(Path(scope) / "Modules"))
        for scope in scopes:
            roots.append(SearchRoot(Path(scope) / "Scripts" / "InstalledScriptInfos", RootKind.SCRIPTS))
        return roots


def split_module_path(value: Optional[str], separator: str = os.pathsep) -> List[Path]:
    """Split a PSModulePath-style value, dropping blank entries."""
    if not value:
        return []
    return [Path(entry.strip()) for entry in value.split(separator) if entry.strip()]


def default_search_paths(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> SearchPaths:
    """Compute the default search paths for the running platform.

    Args:
        environ: Environment to read (defaults to os.environ)
        platform: Platform name as in sys.platform (defaults to the current one)

    Returns:
        SearchPaths built from PSModulePath and the PowerShell install scopes
    """
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform
    home = Path(environ.get("HOME") or environ.get("USERPROFILE") or Path.home())

    if platform.startswith("win"):
        separator = ";"
        current_user = home / "Documents" / "PowerShell"
        all_users = Path(environ.get("ProgramFiles", r"C:\Program Files")) / "PowerShell"
    else:
        separator = ":"
        data_home = environ.get("XDG_DATA_HOME")
        current_user = (Path(data_home) if data_home else home / ".local" / "share") / "powershell"
        all_users = Path("/usr/local/share/powershell")

    logger.debug("Current user scope path: '%s'", current_user)
    logger.debug("All users scope path: '%s'", all_users)

    return SearchPaths(
        module_paths=split_module_path(environ.get("PSModulePath"), separator),
        current_user_root=current_user,
        all_users_root=all_users,
    )
