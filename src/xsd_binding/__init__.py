"""xsd-binding - typed, immutable Python bindings for XML schemas.

Read XML documents into frozen record trees, write them back canonically,
and generate standalone binding modules from a schema definition.

Example:
    from xsd_binding import SchemaBinding, get_schema_registry

    binding = SchemaBinding(get_schema_registry().get("audio_policy_configuration_v7_0"))
    config = binding.read("/vendor/etc/audio_policy_configuration.xml")
    if config is not None and config.has_version():
        print(config.get_version())

    # Canonical output
    print(binding.dumps(config))

    # Generated modules
    from xsd_binding import generate

    for filename, source in generate(binding.schema).items():
        print(filename, len(source))
"""

from xsd_binding.binding import SchemaBinding
from xsd_binding.codegen import generate, write_modules
from xsd_binding.document import DriverOptions
from xsd_binding.enums import XsdEnum, make_enum
from xsd_binding.errors import (
    BindingError,
    FieldNotPresentError,
    SchemaError,
    ValueParseError,
)
from xsd_binding.records import FieldSpec, Record, make_record
from xsd_binding.schema import (
    Schema,
    get_schema_registry,
    load_schema,
    resolve_schema,
    schema_from_json,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "SchemaBinding",
    "DriverOptions",
    # Schemas
    "Schema",
    "get_schema_registry",
    "load_schema",
    "resolve_schema",
    "schema_from_json",
    # Code generation
    "generate",
    "write_modules",
    # Runtime types
    "Record",
    "FieldSpec",
    "XsdEnum",
    "make_enum",
    "make_record",
    # Errors
    "BindingError",
    "SchemaError",
    "FieldNotPresentError",
    "ValueParseError",
]
