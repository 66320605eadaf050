"""
XML Utilities
=============

Conversion between XML documents and nested dictionaries.

Mapping rules:
- Element name becomes the key, namespaces are dropped
- Leaf element text becomes a string value (stripped)
- Element with children becomes a dict
- Repeated sibling elements become a list
- Attributes become ``-name`` keys, text next to children or attributes becomes ``#text``
"""

import re
from typing import Any, Dict, Union
from xml.etree import ElementTree as ET

ATTR_PREFIX = "-"
TEXT_KEY = "#text"

# Element/attribute names (NCName) and characters XML 1.0 cannot carry
NAME_PATTERN = re.compile(r"[^\W\d][\w.\-]*")
INVALID_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[-1]


def _element_to_value(element: ET.Element) -> Any:
    text = (element.text or "").strip()
    children = list(element)

    if not children and not element.attrib:
        return text

    node: Dict[str, Any] = {}
    for attr_key, attr_value in element.attrib.items():
        node[ATTR_PREFIX + _local_name(attr_key)] = attr_value

    for child in children:
        key = _local_name(child.tag)
        value = _element_to_value(child)
        if key in node:
            existing = node[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[key] = [existing, value]
        else:
            node[key] = value

    if text:
        node[TEXT_KEY] = text
    return node


def doc_to_map(document: Union[str, bytes]) -> Dict[str, Any]:
    """
    Convert an XML document into a nested dictionary keyed by the root tag.

    Args:
        document: XML text or raw bytes (the XML declaration decides the encoding)

    Returns:
        ``{root_tag: value}``

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well formed
    """
    root = ET.fromstring(document)
    return {_local_name(root.tag): _element_to_value(root)}


def _check_name(name: str) -> str:
    if not NAME_PATTERN.fullmatch(name):
        raise ValueError(f"{name!r} is not a valid XML name")
    return name


def _check_text(text: Any) -> str:
    text = str(text)
    if INVALID_CHARS.search(text):
        raise ValueError(f"{text!r} contains characters not allowed in XML")
    return text


def _fill_element(element: ET.Element, value: Any):
    if isinstance(value, dict):
        for key, child in value.items():
            if key == TEXT_KEY:
                element.text = _check_text(child)
            elif key.startswith(ATTR_PREFIX):
                element.set(_check_name(key[len(ATTR_PREFIX):]), _check_text(child))
            elif isinstance(child, list):
                for item in child:
                    _fill_element(ET.SubElement(element, _check_name(key)), item)
            else:
                _fill_element(ET.SubElement(element, _check_name(key)), child)
    elif value is not None:
        element.text = _check_text(value)


def map_to_doc(data: Dict[str, Any], root: str = "config", indent: str = "    ") -> bytes:
    """
    Serialize a nested dictionary as an indented UTF-8 XML document.

    Args:
        data: Mapping to serialize as the children of ``root``
        root: Name of the wrapping element
        indent: Indentation unit

    Returns:
        Encoded document including the XML declaration

    Raises:
        ValueError: If a key is not a valid XML name or a value holds characters XML cannot represent
    """
    element = ET.Element(_check_name(root))
    _fill_element(element, data)
    ET.indent(element, space=indent)
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)


__all__ = ["doc_to_map", "map_to_doc", "ATTR_PREFIX", "TEXT_KEY"]
