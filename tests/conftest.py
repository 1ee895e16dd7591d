"""Shared fixtures: CLIXML metadata files laid out like real install roots."""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from xml.sax.saxutils import escape

import pytest

from installed_resources.clixml import NAMESPACE


DATA_DIR = Path(__file__).parent / "data"


def _element(value: Any, name: Optional[str] = None) -> str:
    attr = "" if name is None else f' N="{escape(name)}"'
    if value is None:
        return f"<Nil{attr} />"
    if isinstance(value, bool):
        return f"<B{attr}>{'true' if value else 'false'}</B>"
    if isinstance(value, datetime):
        return f"<DT{attr}>{value.isoformat()}</DT>"
    if isinstance(value, dict):
        entries = "".join(
            f'<En><S N="Key">{escape(str(key))}</S>{_element(item, "Value")}</En>'
            for key, item in value.items()
        )
        return f"<Obj{attr}><TN><T>System.Collections.Hashtable</T></TN><DCT>{entries}</DCT></Obj>"
    if isinstance(value, (list, tuple)):
        items = "".join(_element(item) for item in value)
        return f"<Obj{attr}><TN><T>System.Collections.ArrayList</T></TN><LST>{items}</LST></Obj>"
    return f"<S{attr}>{escape(str(value))}</S>"


def clixml_document(properties: Dict[str, Any]) -> str:
    """Serialize ``properties`` the way Export-Clixml writes a PSCustomObject."""
    members = "".join(_element(value, key) for key, value in properties.items())
    return (
        f'<Objs Version="1.1.0.1" xmlns="{NAMESPACE}">'
        f'<Obj RefId="0"><TN RefId="0"><T>System.Management.Automation.PSCustomObject</T></TN>'
        f"<MS>{members}</MS></Obj></Objs>"
    )


def metadata_properties(name: str, version: str, resource_type: str = "Module", **overrides) -> Dict[str, Any]:
    properties = {
        "Name": name,
        "Version": version,
        "Type": resource_type,
        "Description": f"{name} description",
        "Author": "Jane Doe",
        "CompanyName": "Contoso",
        "Copyright": "(c) Contoso",
        "PublishedDate": datetime(2021, 5, 1, 12, 30),
        "InstalledDate": datetime(2021, 6, 1, 8, 0),
        "UpdatedDate": None,
        "LicenseUri": "https://example.com/license",
        "ProjectUri": "https://example.com/project",
        "IconUri": None,
        "PowerShellGetFormatVersion": None,
        "ReleaseNotes": "Initial release",
        "Repository": "PSGallery",
        "IsPrerelease": "false",
        "Tags": "PSModule Linux",
        "Dependencies": [],
        "Includes": {"Command": [], "Cmdlet": [], "DscResource": [], "Function": []},
        "AdditionalMetadata": "",
        "InstalledLocation": f"/modules/{name}/{version}",
    }
    properties.update(overrides)
    return properties


@pytest.fixture
def write_module(tmp_path: Path):
    """Create ``<root>/<name>/<version>/PSGetModuleInfo.xml``."""
    def write(name: str, version: str, root: Optional[Path] = None, **overrides) -> Path:
        version_dir = (root or tmp_path / "Modules") / name / version
        version_dir.mkdir(parents=True, exist_ok=True)
        metadata = version_dir / "PSGetModuleInfo.xml"
        metadata.write_text(clixml_document(metadata_properties(name, version, **overrides)), encoding="utf-8")
        return metadata

    return write


@pytest.fixture
def write_script(tmp_path: Path):
    """Create ``<root>/<name>_InstalledScriptInfo.xml``."""
    def write(name: str, version: str, root: Optional[Path] = None, **overrides) -> Path:
        scripts_dir = root or tmp_path / "Scripts" / "InstalledScriptInfos"
        scripts_dir.mkdir(parents=True, exist_ok=True)
        metadata = scripts_dir / f"{name}_InstalledScriptInfo.xml"
        properties = metadata_properties(name, version, resource_type="Script", **overrides)
        metadata.write_text(clixml_document(properties), encoding="utf-8")
        return metadata

    return write
