"""Load schema IR from JSON definitions.

The JSON files are produced by digesting an XSD. They describe enumerations,
complex types (with nested types inline) and the root element:

    {
      "name": "apex_info_list",
      "root": {"element": "apex-info-list", "type": "ApexInfoList"},
      "enums": [{"name": "Role", "values": ["sink", "source"]}],
      "types": [
        {"name": "ApexInfoList",
         "elements": [{"name": "apex-info", "type": "ApexInfo",
                       "minOccurs": 0, "maxOccurs": "unbounded"}]},
        {"name": "ApexInfo",
         "attributes": [{"name": "moduleName", "type": "string", "required": true}]}
      ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from xsd_binding.errors import SchemaError
from xsd_binding.schema.ir import (
    AttributeDecl,
    ComplexType,
    ElementDecl,
    EnumType,
    ListType,
    Multiplicity,
    PrimitiveType,
    Schema,
)

# Bundled schema definitions
DATA_DIR = Path(__file__).parent.parent / "data"

_PRIMITIVES = {p.value: p for p in PrimitiveType}


def _occurs(value: Any, default: int, where: str) -> int:
    if value is None:
        return default
    if value == "unbounded":
        return -1
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaError(f"invalid occurrence bound {value!r}", where)
    return value


class _SchemaBuilder:
    """Two-pass builder: declare every complex type, then resolve references."""

    def __init__(self, data: dict[str, Any], source: str):
        self.data = data
        self.source = source
        self.enums: dict[str, EnumType] = {}
        self.types: list[ComplexType] = []
        self._pending: list[tuple[ComplexType, dict[str, Any]]] = []

    def build(self) -> Schema:
        name = self._require(self.data, "name", self.source)
        for item in self.data.get("enums", []):
            enum_name = self._require(item, "name", self.source)
            values = item.get("values", [])
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise SchemaError(f"values of enumeration '{enum_name}' must be strings", self.source)
            if enum_name in self.enums:
                raise SchemaError(f"duplicate enumeration '{enum_name}'", self.source)
            self.enums[enum_name] = EnumType(enum_name, tuple(values))

        for item in self.data.get("types", []):
            self.types.append(self._declare(item, None))
        for complex_type, item in self._pending:
            self._resolve(complex_type, item)

        root = self._require(self.data, "root", self.source)
        root_element = self._require(root, "element", f"{self.source} root")
        root_type_name = self._require(root, "type", f"{self.source} root")
        root_type = self._find_complex(root_type_name, None)
        if root_type is None:
            raise SchemaError(f"root type '{root_type_name}' is not declared", self.source)

        return Schema(
            name=name,
            root_element=root_element,
            root_type=root_type,
            types=self.types,
            enums=list(self.enums.values()),
            package=self.data.get("package"),
        )

    def _require(self, item: Any, key: str, where: str) -> Any:
        if not isinstance(item, dict) or key not in item:
            raise SchemaError(f"missing required key '{key}'", where)
        return item[key]

    def _declare(self, item: dict[str, Any], parent: ComplexType | None) -> ComplexType:
        where = parent.qualified_name if parent is not None else self.source
        complex_type = ComplexType(self._require(item, "name", where))
        if parent is not None:
            parent.add_nested(complex_type)
        for nested in item.get("types", []):
            self._declare(nested, complex_type)
        self._pending.append((complex_type, item))
        return complex_type

    def _resolve(self, complex_type: ComplexType, item: dict[str, Any]) -> None:
        where = complex_type.qualified_name
        for attr in item.get("attributes", []):
            attr_name = self._require(attr, "name", where)
            type_name = self._require(attr, "type", f"{where}@{attr_name}")
            simple = self._simple_type(type_name, f"{where}@{attr_name}")
            if attr.get("list", False):
                simple = ListType(simple)
            default = attr.get("default")
            if default is not None and not isinstance(default, str):
                raise SchemaError(f"default of attribute '{attr_name}' must be a string", where)
            complex_type.attributes.append(
                AttributeDecl(
                    name=attr_name,
                    type=simple,
                    required=bool(attr.get("required", False)),
                    default=default,
                )
            )

        for elem in item.get("elements", []):
            elem_name = self._require(elem, "name", where)
            type_name = self._require(elem, "type", f"{where}/{elem_name}")
            min_occurs = _occurs(elem.get("minOccurs"), 1, f"{where}/{elem_name}")
            max_occurs = _occurs(elem.get("maxOccurs"), 1, f"{where}/{elem_name}")
            complex_type.elements.append(
                ElementDecl(
                    name=elem_name,
                    type=self._element_type(type_name, complex_type),
                    multiplicity=Multiplicity.from_occurs(min_occurs, max_occurs),
                )
            )

    def _simple_type(self, type_name: str, where: str) -> Union[PrimitiveType, EnumType]:
        primitive = _PRIMITIVES.get(type_name)
        if primitive is not None:
            return primitive
        enum_type = self.enums.get(type_name)
        if enum_type is not None:
            return enum_type
        raise SchemaError(f"unknown simple type '{type_name}'", where)

    def _element_type(
        self, type_name: str, scope: ComplexType
    ) -> Union[PrimitiveType, EnumType, ComplexType]:
        primitive = _PRIMITIVES.get(type_name)
        if primitive is not None:
            return primitive
        complex_type = self._find_complex(type_name, scope)
        if complex_type is not None:
            return complex_type
        enum_type = self.enums.get(type_name)
        if enum_type is not None:
            return enum_type
        raise SchemaError(f"unknown type '{type_name}'", scope.qualified_name)

    def _find_complex(self, type_name: str, scope: ComplexType | None) -> ComplexType | None:
        # Innermost scope first, then outward, then top level.
        while scope is not None:
            for child in scope.nested:
                if child.name == type_name:
                    return child
            scope = scope.parent
        for t in self.types:
            if t.name == type_name:
                return t
        for t in self.types:
            for candidate in t.iter_types():
                if candidate.qualified_name == type_name:
                    return candidate
        return None


def schema_from_json(data: dict[str, Any], source: str = "<json>") -> Schema:
    """Build and validate a schema from its parsed JSON definition.

    Args:
        data: The decoded JSON object.
        source: Name used in error messages.

    Raises:
        SchemaError: If the definition is malformed or does not validate.
    """
    if not isinstance(data, dict):
        raise SchemaError("schema definition must be a JSON object", source)
    schema = _SchemaBuilder(data, source).build()
    schema.validate()
    return schema


def load_schema(path: str | Path) -> Schema:
    """Load a schema from a JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaError(f"invalid JSON: {e}", str(path)) from e
    except OSError as e:
        raise SchemaError(f"cannot read schema: {e}", str(path)) from e
    return schema_from_json(data, str(path))


class SchemaRegistry:
    """Registry of the schemas bundled with the package."""

    def __init__(self, data_dir: Path = DATA_DIR) -> None:
        self._data_dir = data_dir
        self._paths: dict[str, Path] = {}
        self._schemas: dict[str, Schema] = {}
        self._loaded = False

    def load(self) -> None:
        """Index the bundled schema files. Schemas are parsed on first use."""
        if self._loaded:
            return
        if self._data_dir.exists():
            for schema_file in sorted(self._data_dir.glob("*.json")):
                self._paths[schema_file.stem] = schema_file
        self._loaded = True

    def list_schemas(self) -> list[str]:
        """Get the names of all bundled schemas."""
        self.load()
        return sorted(self._paths)

    def get(self, name: str) -> Schema:
        """Get a bundled schema by name.

        Raises:
            KeyError: If no schema of that name is bundled.
        """
        self.load()
        schema = self._schemas.get(name)
        if schema is None:
            path = self._paths.get(name)
            if path is None:
                raise KeyError(f"No bundled schema named '{name}'")
            schema = load_schema(path)
            self._schemas[name] = schema
        return schema

    def __contains__(self, name: object) -> bool:
        self.load()
        return name in self._paths


# Global registry instance
_registry: SchemaRegistry | None = None


def get_registry() -> SchemaRegistry:
    """Get the global schema registry."""
    global _registry
    if _registry is None:
        _registry = SchemaRegistry()
    return _registry


def resolve_schema(name_or_path: str | Path) -> Schema:
    """Get a bundled schema by name, or load one from a JSON file path."""
    registry = get_registry()
    if isinstance(name_or_path, str) and name_or_path in registry:
        return registry.get(name_or_path)
    return load_schema(name_or_path)
