"""Enumeration binding: closed tag sets with total string conversion.

Every bound enumeration is an :class:`XsdEnum` subclass whose members are the
schema's tags plus ``UNKNOWN = -1``. The canonical string of each tag lives in
the class-level ``__canonical__`` table (tag name -> canonical string).

Example:
    class Role(XsdEnum):
        __canonical__ = {"sink": "sink", "source": "source"}

        UNKNOWN = -1
        sink = 0
        source = 1

    Role.from_string("source")   # Role.source
    Role.from_string("Source")   # Role.UNKNOWN
    Role.UNKNOWN.to_string()     # "-1"
"""

from __future__ import annotations

from enum import IntEnum

from xsd_binding.schema.ir import EnumType


class XsdEnum(IntEnum):
    """Base class for bound enumerations."""

    __canonical__ = {}

    @classmethod
    def _string_table(cls) -> dict[str, XsdEnum]:
        # Built on first lookup, read-only afterwards.
        table = cls.__dict__.get("__by_string__")
        if table is None:
            table = {text: cls[tag] for tag, text in cls.__canonical__.items()}
            cls.__by_string__ = table
        return table

    @classmethod
    def from_string(cls, value: str) -> XsdEnum:
        """Get the tag whose canonical string is exactly ``value``, else UNKNOWN."""
        return cls._string_table().get(value, cls["UNKNOWN"])

    def to_string(self) -> str:
        """Get the canonical string, or the decimal value for UNKNOWN."""
        text = type(self).__canonical__.get(self.name)
        if text is None:
            return str(int(self))
        return text

    def __str__(self) -> str:
        return self.to_string()


def make_enum(enum_type: EnumType, module: str | None = None) -> type[XsdEnum]:
    """Create the XsdEnum subclass for an enumeration of the schema IR."""
    tags = enum_type.tags()
    members = [("UNKNOWN", -1)] + [(tag, index) for index, (tag, _) in enumerate(tags)]
    enum_class = XsdEnum(enum_type.class_name, members, module=module)
    enum_class.__canonical__ = dict(tags)
    return enum_class
