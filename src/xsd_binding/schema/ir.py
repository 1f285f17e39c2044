"""Intermediate representation of a digested XML schema.

The IR is what the binding consumes: enumerations, complex types with their
attribute and child-element declarations, and the root element. It is built by
:mod:`xsd_binding.schema.loader` and checked by :meth:`Schema.validate` before
anything is bound or generated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from xsd_binding import naming
from xsd_binding.errors import SchemaError


class PrimitiveType(Enum):
    """Built-in simple types."""

    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    STRING = "string"
    FLOAT = "float"
    DOUBLE = "double"


class Multiplicity(Enum):
    """Cardinality of a field under its parent."""

    EXACTLY_ONE = "exactly-one"
    ZERO_OR_ONE = "zero-or-one"
    ZERO_OR_MORE = "zero-or-more"

    @classmethod
    def from_occurs(cls, min_occurs: int, max_occurs: int) -> Multiplicity:
        """Derive multiplicity from XSD occurrence bounds (-1 means unbounded)."""
        if max_occurs == -1 or max_occurs > 1:
            return cls.ZERO_OR_MORE
        if min_occurs == 0:
            return cls.ZERO_OR_ONE
        return cls.EXACTLY_ONE


@dataclass(frozen=True)
class EnumType:
    """A closed set of canonical strings."""

    name: str
    values: tuple[str, ...]

    @property
    def class_name(self) -> str:
        return naming.class_name(self.name)

    def tags(self) -> list[tuple[str, str]]:
        """Get (tag identifier, canonical string) pairs in declaration order."""
        return [(naming.enum_tag(value), value) for value in self.values]


@dataclass(frozen=True)
class ListType:
    """Whitespace-separated list of a primitive or enum type."""

    item: Union[PrimitiveType, EnumType]


SimpleType = Union[PrimitiveType, EnumType, ListType]


@dataclass
class AttributeDecl:
    """Attribute declared on a complex type."""

    name: str
    type: SimpleType
    required: bool = False
    default: str | None = None

    @property
    def field_name(self) -> str:
        return naming.field_name(self.name)

    @property
    def multiplicity(self) -> Multiplicity:
        if self.required:
            return Multiplicity.EXACTLY_ONE
        return Multiplicity.ZERO_OR_ONE


@dataclass
class ElementDecl:
    """Child element declared on a complex type."""

    name: str
    type: Union[PrimitiveType, EnumType, ComplexType]
    multiplicity: Multiplicity = Multiplicity.EXACTLY_ONE

    @property
    def field_name(self) -> str:
        return naming.field_name(self.name)

    @property
    def is_complex(self) -> bool:
        return isinstance(self.type, ComplexType)


@dataclass(eq=False)
class ComplexType:
    """A complex type, bound to one record class."""

    name: str
    attributes: list[AttributeDecl] = field(default_factory=list)
    elements: list[ElementDecl] = field(default_factory=list)
    nested: list[ComplexType] = field(default_factory=list)
    parent: ComplexType | None = field(default=None, repr=False)

    @property
    def qualified_name(self) -> str:
        """Get the dotted name including enclosing types (e.g. 'Modules.Module')."""
        if self.parent is None:
            return self.name
        return f"{self.parent.qualified_name}.{self.name}"

    @property
    def class_name(self) -> str:
        """Get the flat class name (e.g. 'ModulesModule')."""
        return naming.class_name(self.qualified_name)

    def fields(self) -> list[AttributeDecl | ElementDecl]:
        """Get declarations in constructor order: attributes, then elements."""
        return [*self.attributes, *self.elements]

    def add_nested(self, child: ComplexType) -> ComplexType:
        child.parent = self
        self.nested.append(child)
        return child

    def iter_types(self) -> Iterator[ComplexType]:
        """Yield this type and all nested types, enclosing type first."""
        yield self
        for child in self.nested:
            yield from child.iter_types()

    def references(self) -> Iterator[ComplexType]:
        """Yield complex types referenced by child elements."""
        for element in self.elements:
            if isinstance(element.type, ComplexType):
                yield element.type


@dataclass
class Schema:
    """A complete schema: enums, complex types and the root element."""

    name: str
    root_element: str
    root_type: ComplexType
    types: list[ComplexType] = field(default_factory=list)
    enums: list[EnumType] = field(default_factory=list)
    package: str | None = None

    @property
    def module_name(self) -> str:
        return naming.module_name(self.name)

    def iter_types(self) -> Iterator[ComplexType]:
        """Yield every complex type, top-level and nested, in declaration order."""
        for t in self.types:
            yield from t.iter_types()

    def get_type(self, qualified_name: str) -> ComplexType | None:
        """Get a complex type by its qualified name."""
        for t in self.iter_types():
            if t.qualified_name == qualified_name:
                return t
        return None

    def get_enum(self, name: str) -> EnumType | None:
        """Get an enumeration by name."""
        for e in self.enums:
            if e.name == name:
                return e
        return None

    def dependency_order(self) -> list[ComplexType]:
        """Get complex types ordered so that referenced types come first.

        Raises:
            SchemaError: If the reference graph has a cycle.
        """
        ordered: list[ComplexType] = []
        done: set[int] = set()
        active: list[ComplexType] = []

        def visit(t: ComplexType) -> None:
            if id(t) in done:
                return
            if any(a is t for a in active):
                cycle = " -> ".join(a.qualified_name for a in active[active.index(t):])
                raise SchemaError(
                    f"recursive complex types cannot be bound: {cycle} -> {t.qualified_name}",
                    self.name,
                )
            active.append(t)
            for ref in t.references():
                visit(ref)
            active.pop()
            done.add(id(t))
            ordered.append(t)

        for t in self.iter_types():
            visit(t)
        return ordered

    def validate(self) -> None:
        """Check the schema can be bound.

        Raises:
            SchemaError: On the first problem found.
        """
        # Local import: values depends on this module.
        from xsd_binding.values import get_codec

        if not self.root_element:
            raise SchemaError("root element name is empty", self.name)
        if not any(t is self.root_type for t in self.iter_types()):
            raise SchemaError(
                f"root type '{self.root_type.qualified_name}' is not declared", self.name
            )

        enum_names: set[str] = set()
        for e in self.enums:
            if e.class_name in enum_names:
                raise SchemaError(f"duplicate enumeration '{e.name}'", self.name)
            enum_names.add(e.class_name)
            _validate_enum(e, self.name)

        class_names: dict[str, str] = {}
        for t in self.iter_types():
            if t.class_name in class_names or t.class_name in enum_names:
                raise SchemaError(
                    f"type '{t.qualified_name}' maps to class name '{t.class_name}' "
                    f"which is already taken",
                    self.name,
                )
            class_names[t.class_name] = t.qualified_name

            seen: dict[str, str] = {}
            for decl in t.fields():
                other = seen.get(decl.field_name)
                if other is not None:
                    raise SchemaError(
                        f"'{decl.name}' and '{other}' both map to field "
                        f"'{decl.field_name}'",
                        t.qualified_name,
                    )
                seen[decl.field_name] = decl.name

            for attr in t.attributes:
                if attr.default is None or _has_enum_items(attr.type):
                    continue
                codec = get_codec(attr.type)
                try:
                    codec.parse(attr.default)
                except ValueError as e:
                    raise SchemaError(
                        f"default of attribute '{attr.name}' is invalid: {e}",
                        t.qualified_name,
                    ) from e

        self.dependency_order()


def _validate_enum(enum_type: EnumType, location: str) -> None:
    seen_values: set[str] = set()
    seen_tags: dict[str, str] = {}
    for tag, value in enum_type.tags():
        if value in seen_values:
            raise SchemaError(
                f"enumeration '{enum_type.name}' declares '{value}' twice", location
            )
        seen_values.add(value)
        if tag == "UNKNOWN":
            raise SchemaError(
                f"enumeration '{enum_type.name}' cannot declare the reserved tag UNKNOWN",
                location,
            )
        if tag in seen_tags:
            raise SchemaError(
                f"enumeration '{enum_type.name}': '{value}' and '{seen_tags[tag]}' "
                f"both map to tag '{tag}'",
                location,
            )
        seen_tags[tag] = value


def _has_enum_items(simple_type: SimpleType) -> bool:
    if isinstance(simple_type, ListType):
        return isinstance(simple_type.item, EnumType)
    return isinstance(simple_type, EnumType)
