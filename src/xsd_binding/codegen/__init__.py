"""Source generation for schema bindings.

Generated modules are plain Python: readers and writers are spelled out per
record instead of being driven by field metadata at run time.
"""

from __future__ import annotations

from xsd_binding.codegen.generator import (
    generate,
    generate_enums_module,
    generate_records_module,
    write_modules,
)

__all__ = [
    "generate",
    "generate_enums_module",
    "generate_records_module",
    "write_modules",
]
