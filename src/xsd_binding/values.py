"""Codecs between attribute/element text and Python values."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Mapping

from xsd_binding.errors import SchemaError, ValueParseError
from xsd_binding.schema.ir import EnumType, ListType, PrimitiveType, SimpleType

if TYPE_CHECKING:
    from xsd_binding.enums import XsdEnum

# ASCII whitespace only; other Unicode spaces stay inside tokens.
_LIST_SEPARATOR = re.compile(r"[ \t\r\n]+")
_DECIMAL = re.compile(r"^\s*[+-]?\d+\s*$")


def split_list(raw: str) -> list[str]:
    """Split a list value on runs of ASCII whitespace, dropping empty tokens."""
    return [token for token in _LIST_SEPARATOR.split(raw) if token]


class ValueCodec(ABC):
    """Converts between the text form of a simple type and its value."""

    type_name: str = ""
    python_type: str = "object"

    @abstractmethod
    def parse(self, raw: str) -> Any:
        """Parse non-empty text into a value.

        Raises:
            ValueParseError: If the text is not a valid value of the type.
        """

    @abstractmethod
    def format(self, value: Any) -> str:
        """Get the canonical text form of a value."""

    @abstractmethod
    def zero(self) -> Any:
        """Get the value used for a required field missing from the document."""


class BooleanCodec(ValueCodec):
    """Only the literal ``true`` is true; anything else is false."""

    type_name = "bool"
    python_type = "bool"

    def parse(self, raw: str) -> bool:
        return raw == "true"

    def format(self, value: Any) -> str:
        return "true" if value else "false"

    def zero(self) -> bool:
        return False


class IntegerCodec(ValueCodec):
    """Decimal integers bounded to a fixed-width range."""

    def __init__(self, type_name: str, min_value: int, max_value: int):
        self.type_name = type_name
        self.python_type = "int"
        self.min_value = min_value
        self.max_value = max_value

    def parse(self, raw: str) -> int:
        if not _DECIMAL.match(raw):
            raise ValueParseError(self.type_name, raw)
        value = int(raw)
        if not self.min_value <= value <= self.max_value:
            raise ValueParseError(
                self.type_name,
                raw,
                f"out of range [{self.min_value}, {self.max_value}]",
            )
        return value

    def format(self, value: Any) -> str:
        return str(int(value))

    def zero(self) -> int:
        return 0


class FloatCodec(ValueCodec):
    """Floating point numbers."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        self.python_type = "float"

    def parse(self, raw: str) -> float:
        try:
            return float(raw)
        except ValueError:
            raise ValueParseError(self.type_name, raw) from None

    def format(self, value: Any) -> str:
        return repr(float(value))

    def zero(self) -> float:
        return 0.0


class StringCodec(ValueCodec):
    """Raw text, unchanged."""

    type_name = "string"
    python_type = "str"

    def parse(self, raw: str) -> str:
        return raw

    def format(self, value: Any) -> str:
        return str(value)

    def zero(self) -> str:
        return ""


class EnumCodec(ValueCodec):
    """Canonical strings of a bound enumeration."""

    def __init__(self, enum_class: type[XsdEnum]):
        self.enum_class = enum_class
        self.type_name = enum_class.__name__
        self.python_type = enum_class.__name__

    def parse(self, raw: str) -> XsdEnum:
        return self.enum_class.from_string(raw)

    def format(self, value: Any) -> str:
        return value.to_string()

    def zero(self) -> XsdEnum:
        return self.enum_class.UNKNOWN


class ListCodec(ValueCodec):
    """Whitespace-separated list of items, held as a tuple."""

    def __init__(self, item: ValueCodec):
        self.item = item
        self.type_name = f"list of {item.type_name}"
        self.python_type = f"tuple[{item.python_type}, ...]"

    def parse(self, raw: str) -> tuple[Any, ...]:
        return tuple(self.item.parse(token) for token in split_list(raw))

    def format(self, value: Any) -> str:
        return " ".join(self.item.format(v) for v in value)

    def zero(self) -> tuple[Any, ...]:
        return ()


BOOL = BooleanCodec()
INT32 = IntegerCodec("int32", -(2**31), 2**31 - 1)
INT64 = IntegerCodec("int64", -(2**63), 2**63 - 1)
UINT32 = IntegerCodec("uint32", 0, 2**32 - 1)
STRING = StringCodec()
FLOAT = FloatCodec("float")
DOUBLE = FloatCodec("double")

BUILTIN_CODECS: dict[PrimitiveType, ValueCodec] = {
    PrimitiveType.BOOL: BOOL,
    PrimitiveType.INT32: INT32,
    PrimitiveType.INT64: INT64,
    PrimitiveType.UINT32: UINT32,
    PrimitiveType.STRING: STRING,
    PrimitiveType.FLOAT: FLOAT,
    PrimitiveType.DOUBLE: DOUBLE,
}


def get_codec(
    simple_type: SimpleType,
    enum_classes: Mapping[str, type[XsdEnum]] | None = None,
) -> ValueCodec:
    """Get the codec for a simple type.

    Args:
        simple_type: A primitive, enumeration or list type.
        enum_classes: Bound enumeration classes by enum name; required when
            the type is or contains an enumeration.

    Raises:
        SchemaError: If an enumeration has no bound class.
    """
    if isinstance(simple_type, PrimitiveType):
        return BUILTIN_CODECS[simple_type]
    if isinstance(simple_type, ListType):
        return ListCodec(get_codec(simple_type.item, enum_classes))
    if isinstance(simple_type, EnumType):
        enum_class = (enum_classes or {}).get(simple_type.name)
        if enum_class is None:
            raise SchemaError(f"enumeration '{simple_type.name}' is not bound")
        return EnumCodec(enum_class)
    raise SchemaError(f"not a simple type: {simple_type!r}")
