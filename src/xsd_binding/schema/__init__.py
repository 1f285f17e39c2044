"""Schema IR and its JSON front-end."""

from xsd_binding.schema.ir import (
    AttributeDecl,
    ComplexType,
    ElementDecl,
    EnumType,
    ListType,
    Multiplicity,
    PrimitiveType,
    Schema,
    SimpleType,
)
from xsd_binding.schema.loader import (
    SchemaRegistry,
    get_registry as get_schema_registry,
    load_schema,
    resolve_schema,
    schema_from_json,
)

__all__ = [
    "AttributeDecl",
    "ComplexType",
    "ElementDecl",
    "EnumType",
    "ListType",
    "Multiplicity",
    "PrimitiveType",
    "Schema",
    "SimpleType",
    "SchemaRegistry",
    "get_schema_registry",
    "load_schema",
    "resolve_schema",
    "schema_from_json",
]
