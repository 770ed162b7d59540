"""
Content encoders for JSON and XML responses.

JSON goes through orjson. XML is marshalled from dataclasses, mappings,
sequences and scalars into an ElementTree and written without a declaration.
Element and attribute names must be valid XML names; characters XML cannot
carry are replaced with U+FFFD. Anything else is refused with an EncodingFault.
"""

from __future__ import annotations

import dataclasses
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, List

import orjson

from .faults import EncodingFault


# ============================================================================
# JSON
# ============================================================================

def encode_json(value: Any, *, sort_keys: bool = False) -> bytes:
    """
    Serialize ``value`` to JSON bytes.

    ``None`` encodes to ``b"null"``. Non-string mapping keys (ints, enums,
    dates, ...) are written as strings. Raises EncodingFault for values orjson
    cannot serialize.
    """
    option = orjson.OPT_NON_STR_KEYS
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS
    try:
        return orjson.dumps(value, option=option)
    except (orjson.JSONEncodeError, TypeError) as exc:
        raise EncodingFault("json", str(exc)) from exc


# ============================================================================
# XML
# ============================================================================

_SCALARS = (str, int, float, Decimal)

# XML 1.0 (fifth edition) NameStartChar and NameChar productions
_NAME_START_CHARS = (
    ":A-Z_a-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    "\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_CHARS = _NAME_START_CHARS + ".0-9\u00B7\u0300-\u036F\u203F-\u2040-"
_NAME_RE = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")

_INVALID_CHARS_RE = re.compile("[^\t\n\r\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def _check_name(name: str) -> str:
    if not _NAME_RE.fullmatch(name):
        raise EncodingFault("xml", f"invalid XML name: {name!r}")
    return name


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return _INVALID_CHARS_RE.sub("\uFFFD", str(value))


def _element_name(value: Any) -> str:
    cls = type(value)
    return getattr(cls, "__xml_name__", None) or cls.__name__


def _field_spec(f: dataclasses.Field) -> tuple[str, bool]:
    """Return (name, is_attribute) for a dataclass field."""
    tag = f.metadata.get("xml", "")
    name, _, flags = tag.partition(",")
    return name or f.name, flags == "attr"


def _fill(parent: ET.Element, value: Any) -> None:
    """Fill ``parent`` with the marshalled form of ``value``."""
    if value is None:
        return

    if isinstance(value, bool) or isinstance(value, _SCALARS):
        parent.text = _scalar_text(value)
        return

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            if f.name == "xml_name":
                continue
            name, is_attr = _field_spec(f)
            item = getattr(value, f.name)
            if item is None:
                continue
            if is_attr:
                if not (isinstance(item, bool) or isinstance(item, _SCALARS)):
                    raise EncodingFault("xml", f"attribute '{name}' must be a scalar, got {type(item).__name__}")
                parent.set(_check_name(name), _scalar_text(item))
            else:
                _append(parent, name, item)
        return

    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingFault("xml", f"element names must be strings, got {type(key).__name__}")
            _append(parent, key, item)
        return

    raise EncodingFault("xml", f"unsupported type: {type(value).__name__}")


def _append(parent: ET.Element, name: str, value: Any) -> None:
    if isinstance(value, (list, tuple)):
        for item in value:
            _append(parent, name, item)
        return
    _fill(ET.SubElement(parent, _check_name(name)), value)


def _roots(value: Any) -> List[ET.Element]:
    if isinstance(value, (list, tuple)):
        elements: List[ET.Element] = []
        for item in value:
            elements.extend(_roots(item))
        return elements

    if isinstance(value, Mapping):
        if len(value) != 1:
            raise EncodingFault("xml", f"mapping must have exactly one root element, got {len(value)}")
        (name, item), = value.items()
        if not isinstance(name, str):
            raise EncodingFault("xml", f"element names must be strings, got {type(name).__name__}")
        if isinstance(item, (list, tuple)):
            return [_build(name, sub) for sub in item]
        return [_build(name, item)]

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        xml_name = getattr(value, "xml_name", None)
        return [_build(xml_name or _element_name(value), value)]

    if isinstance(value, bool) or isinstance(value, _SCALARS):
        return [_build(type(value).__name__, value)]

    raise EncodingFault("xml", f"unsupported type: {type(value).__name__}")


def _build(name: str, value: Any) -> ET.Element:
    element = ET.Element(_check_name(name))
    _fill(element, value)
    return element


def encode_xml(value: Any) -> bytes:
    """
    Serialize ``value`` to XML bytes.

    ``None`` encodes to an empty document. Raises EncodingFault for values
    that have no XML form.
    """
    if value is None:
        return b""

    return b"".join(
        ET.tostring(element, encoding="unicode", short_empty_elements=False).encode("utf-8")
        for element in _roots(value)
    )
