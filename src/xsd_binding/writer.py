"""Canonical XML emitter.

Output shape::

    <?xml version="1.0" encoding="utf-8"?>
    <root attr1="v1" attr2="v2">
        <child attr="v">
        </child>
    </root>

Attributes come first in declaration order, then child elements in
declaration order. Every element closes on its own line. Nesting depth is an
explicit parameter, so concurrent writers do not share state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TextIO

from xsd_binding.schema.ir import Multiplicity

if TYPE_CHECKING:
    from xsd_binding.records import FieldSpec, Record

INDENT = "    "
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

_TEXT_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_ATTRIBUTE_ESCAPES = {
    **_TEXT_ESCAPES,
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}


def _escape(text: str, table: dict[str, str]) -> str:
    if not any(c in text for c in table):
        return text
    return "".join(table.get(c, c) for c in text)


def escape_text(text: str) -> str:
    """Escape character content."""
    return _escape(text, _TEXT_ESCAPES)


def escape_attribute(text: str) -> str:
    """Escape an attribute value for a double-quoted attribute."""
    return _escape(text, _ATTRIBUTE_ESCAPES)


def write_attribute(out: TextIO, name: str, text: str) -> None:
    out.write(f' {name}="{escape_attribute(text)}"')


def write_text_element(out: TextIO, name: str, text: str, depth: int) -> None:
    out.write(f"{INDENT * depth}<{name}>{escape_text(text)}</{name}>\n")


def field_values(record: Record, spec: FieldSpec) -> tuple[Any, ...]:
    """Get the values of a field to emit, in internal order."""
    value = getattr(record, spec.name)
    if spec.multiplicity is Multiplicity.ZERO_OR_MORE:
        return tuple(value)
    if spec.multiplicity is Multiplicity.ZERO_OR_ONE and value is None:
        return ()
    return (value,)


def write_record(out: TextIO, record: Record, name: str, depth: int = 0) -> None:
    """Write a record as element ``name`` at the given nesting depth."""
    indent = INDENT * depth
    out.write(f"{indent}<{name}")
    specs = type(record).__xsd_fields__
    for spec in specs:
        if spec.is_attribute:
            for value in field_values(record, spec):
                write_attribute(out, spec.xml_name, spec.codec.format(value))
    out.write(">\n")
    for spec in specs:
        if spec.is_attribute:
            continue
        for value in field_values(record, spec):
            if spec.record is not None:
                value.write(out, spec.xml_name, depth + 1)
            else:
                write_text_element(out, spec.xml_name, spec.codec.format(value), depth + 1)
    out.write(f"{indent}</{name}>\n")
