"""Generate Python binding modules from the schema IR.

For a schema named ``apex_info_list`` two modules are produced:

- ``apex_info_list_enums.py``: one :class:`~xsd_binding.enums.XsdEnum`
  subclass per enumeration.
- ``apex_info_list.py``: one frozen record dataclass per complex type, with
  explicit accessors, ``read`` and ``write``, plus the module-level document
  entry points ``read``, ``parse``, ``write`` and ``dumps``.

The generated code depends only on the ``xsd_binding`` runtime and lxml.
Output is deterministic: the same schema always yields the same source.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

from xsd_binding import naming
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
    SimpleType,
)

logger = logging.getLogger(__name__)

I = "    "
II = I * 2
III = I * 3
IIII = I * 4

GENERATED_NOTICE = "Generated by xsd-binding. Do not edit."

# Names the generated records module defines or imports itself.
_MODULE_GLOBALS = frozenset(
    {
        "ROOT_ELEMENT",
        "TextIO",
        "DriverOptions",
        "PathLike",
        "FieldNotPresentError",
        "Record",
        "annotations",
        "dataclass",
        "etree",
        "document",
        "nodes",
        "values",
        "writer",
    }
)

_PYTHON_TYPES = {
    PrimitiveType.BOOL: "bool",
    PrimitiveType.INT32: "int",
    PrimitiveType.INT64: "int",
    PrimitiveType.UINT32: "int",
    PrimitiveType.STRING: "str",
    PrimitiveType.FLOAT: "float",
    PrimitiveType.DOUBLE: "float",
}


def _literal(text: str) -> str:
    """Get a double-quoted Python string literal."""
    return json.dumps(text)


def _python_type(simple_type: Union[SimpleType, ComplexType]) -> str:
    if isinstance(simple_type, PrimitiveType):
        return _PYTHON_TYPES[simple_type]
    if isinstance(simple_type, ListType):
        return f"tuple[{_python_type(simple_type.item)}, ...]"
    return simple_type.class_name


def _field_type(decl: AttributeDecl | ElementDecl) -> str:
    item = _python_type(decl.type)
    if decl.multiplicity is Multiplicity.ZERO_OR_MORE:
        return f"tuple[{item}, ...]"
    if decl.multiplicity is Multiplicity.ZERO_OR_ONE:
        return f"{item} | None"
    return item


class _CodecTable:
    """Module-level codec constants used by the generated readers and writers."""

    def __init__(self) -> None:
        self._names: dict[str, str] = {}  # expression -> constant name
        self._definitions: list[tuple[str, str]] = []

    def ref(self, simple_type: SimpleType) -> str:
        """Get the expression naming the codec of a simple type."""
        if isinstance(simple_type, PrimitiveType):
            return f"values.{simple_type.name}"
        if isinstance(simple_type, EnumType):
            expr = f"values.EnumCodec({simple_type.class_name})"
            hint = naming.field_name(simple_type.class_name).strip("_").upper()
        else:
            item = self.ref(simple_type.item)
            expr = f"values.ListCodec({item})"
            hint = f"LIST_OF_{item.rpartition('.')[2].strip('_')}"
        return self._define(expr, f"_{hint}")

    def _define(self, expr: str, name: str) -> str:
        existing = self._names.get(expr)
        if existing is not None:
            return existing
        taken = set(self._names.values())
        candidate, n = name, 2
        while candidate in taken:
            candidate = f"{name}_{n}"
            n += 1
        self._names[expr] = candidate
        self._definitions.append((candidate, expr))
        return candidate

    def render(self) -> list[str]:
        return [f"{name} = {expr}" for name, expr in self._definitions]


def _initial(decl: AttributeDecl | ElementDecl, codec: str) -> str:
    """Get the expression for a value the document does not supply."""
    if decl.multiplicity is not Multiplicity.EXACTLY_ONE:
        return "None"
    if isinstance(decl, AttributeDecl) and decl.default is not None:
        return f"{codec}.parse({_literal(decl.default)})"
    return f"{codec}.zero()"


def _accessors(t: ComplexType, decl: AttributeDecl | ElementDecl) -> list[str]:
    f = decl.field_name
    item = _python_type(decl.type)
    field_type = _field_type(decl)
    if decl.multiplicity is Multiplicity.EXACTLY_ONE:
        return [
            f"{I}def has_{f}(self) -> bool:",
            f"{II}return True",
            "",
            f"{I}def get_{f}(self) -> {field_type}:",
            f"{II}return self.{f}",
        ]
    if decl.multiplicity is Multiplicity.ZERO_OR_ONE:
        return [
            f"{I}def has_{f}(self) -> bool:",
            f"{II}return self.{f} is not None",
            "",
            f"{I}def get_{f}(self) -> {item}:",
            f"{II}if self.{f} is None:",
            f"{III}raise FieldNotPresentError({_literal(t.qualified_name)}, {_literal(f)})",
            f"{II}return self.{f}",
        ]
    return [
        f"{I}def has_{f}(self) -> bool:",
        f"{II}return len(self.{f}) > 0",
        "",
        f"{I}def get_{f}(self) -> {field_type}:",
        f"{II}return self.{f}",
        "",
        f"{I}def get_first_{f}(self) -> {item} | None:",
        f"{II}return self.{f}[0] if self.{f} else None",
    ]


def _read_method(t: ComplexType, codecs: _CodecTable) -> list[str]:
    lines = [
        f"{I}@classmethod",
        f"{I}def read(cls, node: etree._Element) -> {t.class_name}:",
    ]
    for attr in t.attributes:
        codec = codecs.ref(attr.type)
        lines += [
            f"{II}raw = nodes.get_attribute(node, {_literal(attr.name)})",
            f"{II}{attr.field_name}_ = {codec}.parse(raw) if raw != \"\" else {_initial(attr, codec)}",
        ]

    if t.elements:
        for elem in t.elements:
            if elem.multiplicity is Multiplicity.ZERO_OR_MORE:
                lines.append(f"{II}{elem.field_name}_ = []")
            elif elem.is_complex:
                lines.append(f"{II}{elem.field_name}_ = None")
            else:
                codec = codecs.ref(elem.type)
                lines.append(f"{II}{elem.field_name}_ = {_initial(elem, codec)}")
        lines += [
            f"{II}for child in nodes.iter_children(node):",
            f"{III}tag = nodes.local_name(child)",
        ]
        for index, elem in enumerate(t.elements):
            keyword = "if" if index == 0 else "elif"
            lines.append(f"{III}{keyword} tag == {_literal(elem.name)}:")
            lines += _read_child(elem, codecs)
        for elem in t.elements:
            f = elem.field_name
            if elem.multiplicity is Multiplicity.ZERO_OR_MORE:
                continue
            if elem.is_complex and elem.multiplicity is Multiplicity.EXACTLY_ONE:
                lines += [
                    f"{II}if {f}_ is None:",
                    f"{III}{f}_ = {elem.type.class_name}.empty()",
                ]

    args = []
    for decl in t.fields():
        if isinstance(decl, ElementDecl) and decl.multiplicity is Multiplicity.ZERO_OR_MORE:
            args.append(f"{III}{decl.field_name}=tuple({decl.field_name}_),")
        else:
            args.append(f"{III}{decl.field_name}={decl.field_name}_,")
    if args:
        lines += [f"{II}return cls(", *args, f"{II})"]
    else:
        lines.append(f"{II}return cls()")
    return lines


def _read_child(elem: ElementDecl, codecs: _CodecTable) -> list[str]:
    f = elem.field_name
    repeated = elem.multiplicity is Multiplicity.ZERO_OR_MORE
    if elem.is_complex:
        value = f"{elem.type.class_name}.read(child)"
        if repeated:
            return [f"{IIII}{f}_.append({value})"]
        return [f"{IIII}{f}_ = {value}"]
    codec = codecs.ref(elem.type)
    if_empty = f"{codec}.zero()" if repeated else _initial(elem, codec)
    value = f"{codec}.parse(text) if text != \"\" else {if_empty}"
    if repeated:
        return [f"{IIII}text = nodes.node_text(child)", f"{IIII}{f}_.append({value})"]
    return [f"{IIII}text = nodes.node_text(child)", f"{IIII}{f}_ = {value}"]


def _emit_lines(decl: AttributeDecl | ElementDecl, statement: str) -> list[str]:
    f = decl.field_name
    if decl.multiplicity is Multiplicity.ZERO_OR_MORE:
        return [f"{II}for value in self.{f}:", f"{III}{statement}"]
    if decl.multiplicity is Multiplicity.ZERO_OR_ONE:
        return [f"{II}if self.{f} is not None:", f"{III}{statement}"]
    return [f"{II}{statement}"]


def _write_method(t: ComplexType, codecs: _CodecTable) -> list[str]:
    lines = [
        f"{I}def write(self, out: TextIO, name: str, depth: int = 0) -> None:",
        f"{II}indent = writer.INDENT * depth",
        f'{II}out.write(f"{{indent}}<{{name}}")',
    ]
    for attr in t.attributes:
        codec = codecs.ref(attr.type)
        statement = (
            f"writer.write_attribute(out, {_literal(attr.name)}, "
            f"{codec}.format(self.{attr.field_name}))"
        )
        lines += _emit_lines(attr, statement)
    lines.append(f'{II}out.write(">\\n")')
    for elem in t.elements:
        repeated = elem.multiplicity is Multiplicity.ZERO_OR_MORE
        value = "value" if repeated else f"self.{elem.field_name}"
        if elem.is_complex:
            statement = f"{value}.write(out, {_literal(elem.name)}, depth + 1)"
        else:
            codec = codecs.ref(elem.type)
            statement = (
                f"writer.write_text_element(out, {_literal(elem.name)}, "
                f"{codec}.format({value}), depth + 1)"
            )
        lines += _emit_lines(elem, statement)
    lines.append(f'{II}out.write(f"{{indent}}</{{name}}>\\n")')
    return lines


def _record_class(t: ComplexType, codecs: _CodecTable) -> list[str]:
    lines = [
        "@dataclass(frozen=True)",
        f"class {t.class_name}(Record):",
        f'{I}"""Record for complex type \'{t.qualified_name}\'."""',
        "",
        f"{I}__xsd_name__ = {_literal(t.qualified_name)}",
    ]
    decls = t.fields()
    if decls:
        lines.append("")
        lines += [f"{I}{decl.field_name}: {_field_type(decl)}" for decl in decls]
    for decl in decls:
        lines.append("")
        lines += _accessors(t, decl)
    lines.append("")
    lines += _read_method(t, codecs)
    lines.append("")
    lines += _write_method(t, codecs)
    return lines


def _used_enums(schema: Schema) -> list[str]:
    used: set[str] = set()
    for t in schema.iter_types():
        for decl in t.fields():
            simple = decl.type.item if isinstance(decl.type, ListType) else decl.type
            if isinstance(simple, EnumType):
                used.add(simple.class_name)
    return sorted(used)


def generate_enums_module(schema: Schema) -> str:
    """Get the source of the enumerations module of a schema."""
    lines = [
        f'"""Enumerations of the {schema.name} schema.',
        "",
        GENERATED_NOTICE,
        '"""',
        "",
        "from xsd_binding.enums import XsdEnum",
    ]
    for enum_type in schema.enums:
        tags = enum_type.tags()
        lines += ["", "", f"class {enum_type.class_name}(XsdEnum):"]
        if tags:
            lines.append(f"{I}__canonical__ = {{")
            lines += [f"{II}{_literal(tag)}: {_literal(text)}," for tag, text in tags]
            lines.append(f"{I}}}")
        lines += ["", f"{I}UNKNOWN = -1"]
        lines += [f"{I}{tag} = {index}" for index, (tag, _) in enumerate(tags)]
    return "\n".join(lines) + "\n"


def generate_records_module(schema: Schema, package: str | None = None) -> str:
    """Get the source of the records module of a schema.

    Args:
        schema: A validated schema.
        package: Package the generated modules are installed in, or None
            when they are importable as top-level modules.
    """
    module = schema.module_name
    root = schema.root_type.class_name
    codecs = _CodecTable()

    classes: list[str] = []
    for t in schema.dependency_order():
        classes += ["", ""]
        classes += _record_class(t, codecs)

    lines = [
        f'"""Records of the {schema.name} schema.',
        "",
        f"Document element: <{schema.root_element}>",
        "",
        GENERATED_NOTICE,
        '"""',
        "",
        "from __future__ import annotations",
        "",
        "from dataclasses import dataclass",
        "from typing import TextIO",
        "",
        "from lxml import etree",
        "",
        "from xsd_binding import document, nodes, values, writer",
        "from xsd_binding.document import DriverOptions, PathLike",
        "from xsd_binding.errors import FieldNotPresentError",
        "from xsd_binding.records import Record",
    ]
    enums = _used_enums(schema)
    if enums:
        enums_module = f"{package}.{module}_enums" if package else f"{module}_enums"
        lines += ["", f"from {enums_module} import ("]
        lines += [f"{I}{name}," for name in enums]
        lines.append(")")
    lines += ["", f"ROOT_ELEMENT = {_literal(schema.root_element)}"]
    definitions = codecs.render()
    if definitions:
        lines += [""] + definitions
    lines += classes
    lines += [
        "",
        "",
        f"def read(path: PathLike, options: DriverOptions | None = None) -> {root} | None:",
        f'{I}"""Read a document from a file; None if it cannot be loaded or has another root."""',
        f"{I}return document.read(path, ROOT_ELEMENT, {root}, options)",
        "",
        "",
        f"def parse(xml: str | bytes, options: DriverOptions | None = None) -> {root} | None:",
        f'{I}"""Read a document from text; None if it is malformed or has another root."""',
        f"{I}return document.parse(xml, ROOT_ELEMENT, {root}, options)",
        "",
        "",
        f"def write(out: TextIO, root: {root}) -> None:",
        f"{I}document.write(out, root, ROOT_ELEMENT)",
        "",
        "",
        f"def dumps(root: {root}) -> str:",
        f"{I}return document.dumps(root, ROOT_ELEMENT)",
    ]
    return "\n".join(lines) + "\n"


def _check_generatable(schema: Schema) -> None:
    schema.validate()
    enum_classes = {e.class_name for e in schema.enums}
    for name in [*enum_classes, *(t.class_name for t in schema.iter_types())]:
        if name in _MODULE_GLOBALS:
            raise SchemaError(f"class name '{name}' is reserved in generated modules", schema.name)


def generate(schema: Schema, package: str | None = None) -> dict[str, str]:
    """Generate the binding modules of a schema.

    Args:
        schema: The schema IR.
        package: Package the modules will live in. Defaults to the schema's
            own ``package``; None means top-level modules.

    Returns:
        Mapping of file name to module source.

    Raises:
        SchemaError: If the schema cannot be bound.
    """
    _check_generatable(schema)
    package = package if package is not None else schema.package
    module = schema.module_name
    files = {
        f"{module}_enums.py": generate_enums_module(schema),
        f"{module}.py": generate_records_module(schema, package),
    }
    logger.debug("Generated %s: %s", schema.name, ", ".join(files))
    return files


def write_modules(
    schema: Schema, out_dir: str | Path, package: str | None = None
) -> list[Path]:
    """Generate the binding modules of a schema into a directory.

    Returns:
        Paths of the written files.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, source in generate(schema, package).items():
        path = out_dir / filename
        path.write_text(source, encoding="utf-8")
        written.append(path)
    logger.info("Wrote %d modules to %s", len(written), out_dir)
    return written
