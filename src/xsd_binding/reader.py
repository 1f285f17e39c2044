"""Generic read algorithm: element node -> record instance."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lxml import etree

from xsd_binding.nodes import get_attribute, iter_children, local_name, node_text
from xsd_binding.schema.ir import Multiplicity

if TYPE_CHECKING:
    from xsd_binding.records import FieldSpec, RecordT


def read_record(record_class: type[RecordT], node: etree._Element) -> RecordT:
    """Read a record from an element node.

    Attributes are looked up by name; an empty value counts as absent. Child
    elements are visited in document order and matched against the declared
    element names; unknown children are ignored.
    """
    values: dict[str, Any] = {}
    for spec in record_class.__xsd_fields__:
        if spec.is_attribute:
            raw = get_attribute(node, spec.xml_name)
            values[spec.name] = spec.codec.parse(raw) if raw != "" else spec.initial()

    elements = {spec.xml_name: spec for spec in record_class.__xsd_fields__ if not spec.is_attribute}
    repeated: dict[str, list[Any]] = {
        spec.name: [] for spec in elements.values()
        if spec.multiplicity is Multiplicity.ZERO_OR_MORE
    }
    for child in iter_children(node):
        spec = elements.get(local_name(child))
        if spec is None:
            continue
        if spec.name in repeated:
            repeated[spec.name].append(_read_element(spec, child, repeated=True))
        else:
            values[spec.name] = _read_element(spec, child, repeated=False)

    for spec in elements.values():
        if spec.name in repeated:
            values[spec.name] = tuple(repeated[spec.name])
        elif spec.name not in values:
            values[spec.name] = spec.initial()
    return record_class(**values)


def _read_element(spec: FieldSpec, child: etree._Element, repeated: bool) -> Any:
    if spec.record is not None:
        return spec.record.read(child)
    raw = node_text(child)
    if raw == "":
        # Empty text: a repeated item still takes a slot.
        return spec.zero() if repeated else spec.initial()
    return spec.codec.parse(raw)
