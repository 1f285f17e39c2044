"""Bind a schema IR to enum and record classes at runtime.

Example:
    from xsd_binding import SchemaBinding, get_schema_registry

    binding = SchemaBinding(get_schema_registry().get("apex_info_list"))
    apex_list = binding.read("/apex/apex-info-list.xml")
    if apex_list is not None:
        for info in apex_list.get_apex_info():
            print(info.module_name, info.version_code)
"""

from __future__ import annotations

import logging
from typing import Any, TextIO

from xsd_binding import document
from xsd_binding.document import DriverOptions, PathLike
from xsd_binding.enums import XsdEnum, make_enum
from xsd_binding.errors import SchemaError
from xsd_binding.records import FieldSpec, Record, make_record
from xsd_binding.schema.ir import AttributeDecl, ComplexType, ElementDecl, Schema
from xsd_binding.values import get_codec

logger = logging.getLogger(__name__)


class SchemaBinding:
    """Enum and record classes for one schema, plus its document entry points."""

    def __init__(self, schema: Schema, options: DriverOptions | None = None):
        """Bind a schema.

        Args:
            schema: The schema IR. It is validated first.
            options: Backend options used by read() and parse().

        Raises:
            SchemaError: If the schema cannot be bound.
        """
        schema.validate()
        self._schema = schema
        self._options = options
        self._enums: dict[str, type[XsdEnum]] = {
            e.name: make_enum(e) for e in schema.enums
        }
        self._records: dict[str, type[Record]] = {}
        for complex_type in schema.dependency_order():
            self._records[complex_type.qualified_name] = self._bind(complex_type)
        logger.debug(
            "Bound schema %s: %d records, %d enums",
            schema.name,
            len(self._records),
            len(self._enums),
        )

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def root_element(self) -> str:
        return self._schema.root_element

    @property
    def root_type(self) -> type[Record]:
        return self._records[self._schema.root_type.qualified_name]

    @property
    def enums(self) -> dict[str, type[XsdEnum]]:
        """Bound enumerations by schema name."""
        return dict(self._enums)

    @property
    def records(self) -> dict[str, type[Record]]:
        """Bound records by qualified type name (e.g. 'Modules.Module')."""
        return dict(self._records)

    def enum(self, name: str) -> type[XsdEnum]:
        try:
            return self._enums[name]
        except KeyError:
            raise KeyError(f"No enumeration '{name}' in schema {self._schema.name}") from None

    def record(self, qualified_name: str) -> type[Record]:
        try:
            return self._records[qualified_name]
        except KeyError:
            raise KeyError(
                f"No complex type '{qualified_name}' in schema {self._schema.name}"
            ) from None

    def read(self, path: PathLike) -> Any:
        """Read a document from a file; None on any load failure or root mismatch."""
        return document.read(path, self.root_element, self.root_type, self._options)

    def parse(self, xml: str | bytes) -> Any:
        """Read a document from text; None on any parse failure or root mismatch."""
        return document.parse(xml, self.root_element, self.root_type, self._options)

    def write(self, out: TextIO, root: Record) -> None:
        """Write a root record as a canonical XML document."""
        document.write(out, root, self.root_element)

    def dumps(self, root: Record) -> str:
        return document.dumps(root, self.root_element)

    def _bind(self, complex_type: ComplexType) -> type[Record]:
        specs = [self._field_spec(decl, complex_type) for decl in complex_type.fields()]
        return make_record(complex_type.class_name, complex_type.qualified_name, specs)

    def _field_spec(self, decl: AttributeDecl | ElementDecl, owner: ComplexType) -> FieldSpec:
        if isinstance(decl, AttributeDecl):
            codec = get_codec(decl.type, self._enums)
            default = codec.parse(decl.default) if decl.default is not None else None
            return FieldSpec(
                name=decl.field_name,
                xml_name=decl.name,
                is_attribute=True,
                multiplicity=decl.multiplicity,
                codec=codec,
                default=default,
            )
        if isinstance(decl.type, ComplexType):
            record = self._records.get(decl.type.qualified_name)
            if record is None:
                raise SchemaError(
                    f"element '{decl.name}' refers to unbound type "
                    f"'{decl.type.qualified_name}'",
                    owner.qualified_name,
                )
            return FieldSpec(
                name=decl.field_name,
                xml_name=decl.name,
                is_attribute=False,
                multiplicity=decl.multiplicity,
                record=record,
            )
        return FieldSpec(
            name=decl.field_name,
            xml_name=decl.name,
            is_attribute=False,
            multiplicity=decl.multiplicity,
            codec=get_codec(decl.type, self._enums),
        )
