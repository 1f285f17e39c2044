"""Exception types raised by xsd_binding."""


class BindingError(Exception):
    """Base class for all binding errors."""


class SchemaError(BindingError):
    """Raised when a schema cannot be bound or generated.

    These are generation-time faults: unresolved type references, cycles
    between complex types, colliding enum tags or field names.
    """

    def __init__(self, message: str, location: str | None = None):
        super().__init__(f"{location}: {message}" if location else message)
        self.location = location


class FieldNotPresentError(BindingError, LookupError):
    """Raised when reading an optional field that is not present."""

    def __init__(self, record: str, field: str):
        super().__init__(f"{record}.{field} is not present")
        self.record = record
        self.field = field


class ValueParseError(BindingError, ValueError):
    """Raised when attribute or element text does not parse as its type."""

    def __init__(self, type_name: str, raw: str, reason: str = ""):
        message = f"Invalid {type_name} value: '{raw}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.type_name = type_name
        self.raw = raw
