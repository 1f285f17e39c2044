"""pytest configuration and fixtures for xsd_binding tests."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable

import pytest

from xsd_binding import SchemaBinding, load_schema
from xsd_binding.codegen import write_modules
from xsd_binding.schema import Schema, get_schema_registry
from tests.fixture_loader import fixture_path


@pytest.fixture
def apex_schema() -> Schema:
    """Provide the bundled apex-info-list schema."""
    return get_schema_registry().get("apex_info_list")


@pytest.fixture
def audio_schema() -> Schema:
    """Provide the bundled audio policy configuration schema."""
    return get_schema_registry().get("audio_policy_configuration_v7_0")


@pytest.fixture
def library_schema() -> Schema:
    """Provide the small test schema with nesting, defaults and lists."""
    return load_schema(fixture_path("schemas", "library.json"))


@pytest.fixture
def apex_binding(apex_schema: Schema) -> SchemaBinding:
    return SchemaBinding(apex_schema)


@pytest.fixture
def audio_binding(audio_schema: Schema) -> SchemaBinding:
    return SchemaBinding(audio_schema)


@pytest.fixture
def library_binding(library_schema: Schema) -> SchemaBinding:
    return SchemaBinding(library_schema)


@pytest.fixture
def import_generated(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[..., ModuleType]:
    """Generate binding modules into a temporary directory and import them.

    Returns a function taking a schema (and optional package name) and
    returning the imported records module.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _import(schema: Schema, package: str | None = None) -> ModuleType:
        out_dir = tmp_path
        if package:
            out_dir = tmp_path.joinpath(*package.split("."))
            out_dir.mkdir(parents=True, exist_ok=True)
            (out_dir / "__init__.py").write_text("")
        write_modules(schema, out_dir, package)

        module_name = schema.module_name
        qualified = f"{package}.{module_name}" if package else module_name
        prefixes = [package.split(".")[0]] if package else [module_name, f"{module_name}_enums"]
        # Modules generated by an earlier test live in another directory.
        for name in list(sys.modules):
            if any(name == p or name.startswith(f"{p}.") for p in prefixes):
                monkeypatch.delitem(sys.modules, name)
        importlib.invalidate_caches()
        return importlib.import_module(qualified)

    return _import
