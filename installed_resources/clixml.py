"""
Deserializer for PowerShell CLIXML metadata files.

PSGetModuleInfo.xml and *_InstalledScriptInfo.xml are written by
Export-Clixml. Only the parts of the format that matter for reading back
properties are handled: primitives become text, collections become lists,
hashtables and member sets become property bags, and references are resolved
against objects seen earlier in the document.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple

from .errors import MetadataFormatError
from .property_bag import PropertyBag, RawValue


NAMESPACE = "http://schemas.microsoft.com/powershell/2004/04"

PRIMITIVE_TAGS = {
    "S", "C", "B", "DT", "TS", "By", "SB", "U16", "I16", "U32", "I32",
    "U64", "I64", "Sg", "Db", "D", "BA", "G", "URI", "Version", "XD", "SBK",
    "SS", "PR",
}
LIST_TAGS = {"LST", "IE", "STK", "QUE"}

_ESCAPE_RE = re.compile(r"_x([0-9A-Fa-f]{4})_")


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _unescape(text: str) -> str:
    return _ESCAPE_RE.sub(lambda match: chr(int(match.group(1), 16)), text)


def _primitive_text(element: ET.Element) -> str:
    tag = _local(element.tag)
    text = element.text or ""
    if tag == "C":
        return chr(int(text))
    if tag == "B":
        return "True" if text.strip().lower() == "true" else "False"
    return _unescape(text)


class _Reader:
    def __init__(self) -> None:
        self.refs: Dict[str, RawValue] = {}

    def value(self, element: ET.Element) -> RawValue:
        tag = _local(element.tag)
        if tag == "Nil":
            return RawValue()
        if tag == "Ref":
            ref_id = element.get("RefId")
            if ref_id not in self.refs:
                raise MetadataFormatError(f"Reference to unknown object RefId={ref_id}")
            return self.refs[ref_id]
        if tag == "Obj":
            return self.obj(element)
        if tag in PRIMITIVE_TAGS:
            return RawValue(text=_primitive_text(element))
        raise MetadataFormatError(f"Unsupported CLIXML element <{tag}>")

    def obj(self, element: ET.Element) -> RawValue:
        text: Optional[str] = None
        to_string: Optional[str] = None
        items: Optional[Tuple[RawValue, ...]] = None
        properties: Dict[str, RawValue] = {}
        has_properties = False

        for child in element:
            tag = _local(child.tag)
            if tag in ("TN", "TNRef"):
                continue
            if tag == "ToString":
                to_string = _unescape(child.text or "")
            elif tag in PRIMITIVE_TAGS:
                text = _primitive_text(child)
            elif tag in LIST_TAGS:
                items = tuple(self.value(item) for item in child)
            elif tag == "DCT":
                has_properties = True
                properties.update(self.dictionary(child))
            elif tag in ("MS", "Props"):
                has_properties = True
                properties.update(self.members(child))
            elif tag == "Nil":
                continue
            else:
                raise MetadataFormatError(f"Unsupported CLIXML element <{tag}> inside <Obj>")

        if text is None and items is None:
            text = to_string
        value = RawValue(
            text=text,
            items=items,
            properties=PropertyBag(properties) if has_properties else None,
        )
        ref_id = element.get("RefId")
        if ref_id is not None:
            self.refs[ref_id] = value
        return value

    def members(self, element: ET.Element) -> List[Tuple[str, RawValue]]:
        members = []
        for child in element:
            name = child.get("N")
            if name is None:
                continue
            members.append((_unescape(name), self.value(child)))
        return members

    def dictionary(self, element: ET.Element) -> List[Tuple[str, RawValue]]:
        entries = []
        for entry in element:
            key: Optional[RawValue] = None
            value = RawValue()
            for child in entry:
                if child.get("N") == "Key":
                    key = self.value(child)
                elif child.get("N") == "Value":
                    value = self.value(child)
            if key is None or key.text is None:
                raise MetadataFormatError("Hashtable entry without a usable key")
            entries.append((key.text, value))
        return entries


def deserialize(text: str) -> PropertyBag:
    """Deserialize CLIXML text into the property bag of its first object.

    Raises:
        MetadataFormatError: If the text is not CLIXML describing an object
    """
    try:
        root = ET.fromstring(text.lstrip("\ufeff"))
    except ET.ParseError as e:
        raise MetadataFormatError(f"Invalid XML: {e}") from e

    if _local(root.tag) != "Objs":
        raise MetadataFormatError(f"Expected <Objs> root element, found <{_local(root.tag)}>")

    reader = _Reader()
    for child in root:
        if _local(child.tag) != "Obj":
            continue
        try:
            value = reader.obj(child)
        except (ValueError, TypeError, OverflowError) as e:
            raise MetadataFormatError(f"Malformed CLIXML object: {e}") from e
        if value.properties is None:
            raise MetadataFormatError("Top-level object has no properties")
        return value.properties

    raise MetadataFormatError("No serialized object found")
