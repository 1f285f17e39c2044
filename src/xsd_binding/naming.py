"""Derive Python identifiers from schema names."""

from __future__ import annotations

import keyword
import re

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Record methods a field must not shadow.
RESERVED_FIELD_NAMES = frozenset({"read", "write", "empty"})


def field_name(xml_name: str) -> str:
    """Map an attribute or element name to a snake_case field name.

    ``halVersion`` -> ``hal_version``, ``apex-info`` -> ``apex_info``,
    ``speaker_drc_enabled`` is kept as is.
    """
    name = _CAMEL_BOUNDARY.sub("_", xml_name)
    name = _NON_IDENTIFIER.sub("_", name).lower()
    if not name or name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name) or name in RESERVED_FIELD_NAMES:
        name = f"{name}_"
    return name


def class_name(name: str) -> str:
    """Map a (possibly nested, dot-qualified) type name to a flat class name.

    ``Modules.Module`` -> ``ModulesModule``.
    """
    parts = [p for p in re.split(r"[.\-_\s]+", name) if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


def enum_tag(canonical: str) -> str:
    """Map a canonical enum string to a tag identifier.

    ``7.0`` -> ``_7_0``; identifiers are kept unchanged.
    """
    tag = _NON_IDENTIFIER.sub("_", canonical)
    if not tag or tag[0].isdigit() or keyword.iskeyword(tag):
        tag = f"_{tag}"
    if tag.startswith("_") and tag.endswith("_") and len(tag) > 1:
        # sunder names are reserved by enum
        tag = f"{tag}x"
    return tag


def module_name(schema_name: str) -> str:
    """Map a schema name to a module name."""
    return field_name(schema_name).strip("_") or "schema"
