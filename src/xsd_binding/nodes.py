"""Element-tree accessors used by the readers.

Elements and attributes are matched by local name; namespaces are ignored.
"""

from __future__ import annotations

from typing import Iterator

from lxml import etree


def local_name(node: etree._Element) -> str:
    """Get the local name of an element (the tag without its namespace)."""
    return etree.QName(node).localname


def iter_children(node: etree._Element) -> Iterator[etree._Element]:
    """Yield child elements in document order, skipping comments and PIs."""
    for child in node:
        if isinstance(child.tag, str):
            yield child


def get_attribute(node: etree._Element, name: str) -> str:
    """Get an attribute value by local name, or "" when absent."""
    value = node.get(name)
    if value is not None:
        return value
    for key, value in node.attrib.items():
        if key.startswith("{") and key.rpartition("}")[2] == name:
            return value
    return ""


def node_text(node: etree._Element) -> str:
    """Get the concatenated character data directly under an element.

    Text inside nested elements is not included; text around them is.
    """
    parts = [node.text or ""]
    for child in node:
        parts.append(child.tail or "")
    return "".join(parts)
