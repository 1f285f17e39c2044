"""Record binding: one immutable record class per complex type.

Each record is a frozen dataclass. For every field ``f`` it provides:

- ``has_f()``: required fields are always present, optional fields when a
  value was supplied, repeated fields when non-empty.
- ``get_f()``: the value; raises FieldNotPresentError for an absent optional.
- ``get_first_f()`` (repeated fields only): the first item, or None.

Records also expose ``read(node)`` and ``write(out, name, depth)``. Classes
built at runtime by :func:`make_record` use the generic reader and writer
driven by ``__xsd_fields__``; generated modules spell both out explicitly.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, TextIO, TypeVar

from lxml import etree

from xsd_binding.errors import FieldNotPresentError
from xsd_binding.reader import read_record
from xsd_binding.schema.ir import Multiplicity
from xsd_binding.values import ValueCodec
from xsd_binding.writer import write_record

RecordT = TypeVar("RecordT", bound="Record")


@dataclass(frozen=True)
class FieldSpec:
    """Binding metadata of one record field."""

    name: str
    xml_name: str
    is_attribute: bool
    multiplicity: Multiplicity
    codec: ValueCodec | None = None
    record: type[Record] | None = None
    default: Any = None

    def zero(self) -> Any:
        """Get the zero value of the field's type."""
        if self.record is not None:
            return self.record.empty()
        return self.codec.zero()

    def initial(self) -> Any:
        """Get the value of the field when the document does not supply one.

        A default only fills required fields; an absent optional stays absent.
        """
        if self.multiplicity is Multiplicity.EXACTLY_ONE:
            return self.default if self.default is not None else self.zero()
        if self.multiplicity is Multiplicity.ZERO_OR_ONE:
            return None
        return ()


class Record:
    """Base class for bound records."""

    __xsd_name__: ClassVar[str] = ""
    __xsd_fields__: ClassVar[tuple[FieldSpec, ...]] = ()

    @classmethod
    def read(cls: type[RecordT], node: etree._Element) -> RecordT:
        """Read an instance from an element node."""
        return read_record(cls, node)

    @classmethod
    def empty(cls: type[RecordT]) -> RecordT:
        """Get the instance read from an element with no attributes or children."""
        return cls.read(etree.Element("empty"))

    def write(self, out: TextIO, name: str, depth: int = 0) -> None:
        """Write this record as element ``name`` at the given nesting depth."""
        write_record(out, self, name, depth)


def _accessors(record_name: str, spec: FieldSpec) -> dict[str, Callable[..., Any]]:
    name = spec.name

    if spec.multiplicity is Multiplicity.EXACTLY_ONE:

        def has(self: Record) -> bool:
            return True

        def get(self: Record) -> Any:
            return getattr(self, name)

        return {f"has_{name}": has, f"get_{name}": get}

    if spec.multiplicity is Multiplicity.ZERO_OR_ONE:

        def has(self: Record) -> bool:
            return getattr(self, name) is not None

        def get(self: Record) -> Any:
            value = getattr(self, name)
            if value is None:
                raise FieldNotPresentError(record_name, name)
            return value

        return {f"has_{name}": has, f"get_{name}": get}

    def has(self: Record) -> bool:
        return len(getattr(self, name)) > 0

    def get(self: Record) -> Any:
        return getattr(self, name)

    def get_first(self: Record) -> Any:
        values = getattr(self, name)
        return values[0] if values else None

    return {f"has_{name}": has, f"get_{name}": get, f"get_first_{name}": get_first}


def _annotation(spec: FieldSpec) -> str:
    if spec.record is not None:
        item = spec.record.__name__
    else:
        item = spec.codec.python_type
    if spec.multiplicity is Multiplicity.ZERO_OR_MORE:
        return f"tuple[{item}, ...]"
    if spec.multiplicity is Multiplicity.ZERO_OR_ONE:
        return f"{item} | None"
    return item


def make_record(
    class_name: str,
    qualified_name: str,
    specs: list[FieldSpec],
    module: str | None = None,
) -> type[Record]:
    """Create a frozen record class for a complex type.

    Args:
        class_name: Flat class name, e.g. 'ModulesModule'.
        qualified_name: Dotted schema name, e.g. 'Modules.Module'.
        specs: Field metadata in constructor order.
        module: Value for the class ``__module__``.
    """
    namespace: dict[str, Any] = {
        "__xsd_name__": qualified_name,
        "__xsd_fields__": tuple(specs),
        "__doc__": f"Record for complex type '{qualified_name}'.",
    }
    for spec in specs:
        for method_name, method in _accessors(qualified_name, spec).items():
            method.__name__ = method_name
            method.__qualname__ = f"{class_name}.{method_name}"
            namespace[method_name] = method
    record_class = dataclasses.make_dataclass(
        class_name,
        [(spec.name, _annotation(spec)) for spec in specs],
        bases=(Record,),
        namespace=namespace,
        frozen=True,
    )
    if module is not None:
        record_class.__module__ = module
    return record_class
