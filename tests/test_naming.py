"""Tests for identifier derivation."""

from __future__ import annotations

import pytest

from xsd_binding.naming import class_name, enum_tag, field_name, module_name


class TestFieldName:
    """Tests for field_name."""

    @pytest.mark.parametrize(
        ("xml_name", "expected"),
        [
            ("moduleName", "module_name"),
            ("halVersion", "hal_version"),
            ("apex-info", "apex_info"),
            ("speaker_drc_enabled", "speaker_drc_enabled"),
            ("minValueMB", "min_value_mb"),
            ("name", "name"),
        ],
    )
    def test_snake_case(self, xml_name: str, expected: str) -> None:
        """Test camelCase and dashed names become snake_case."""
        assert field_name(xml_name) == expected

    def test_keyword_gets_suffix(self) -> None:
        """Test Python keywords are suffixed."""
        assert field_name("class") == "class_"
        assert field_name("from") == "from_"

    def test_record_methods_are_not_shadowed(self) -> None:
        """Test names of record methods are suffixed."""
        assert field_name("read") == "read_"
        assert field_name("write") == "write_"
        assert field_name("empty") == "empty_"

    def test_leading_digit(self) -> None:
        """Test a leading digit is prefixed."""
        assert field_name("3d") == "_3d"


class TestClassName:
    """Tests for class_name."""

    def test_nested_names_are_flattened(self) -> None:
        """Test dotted names become one class name."""
        assert class_name("Modules.Module") == "ModulesModule"
        assert class_name("MixPorts.MixPort") == "MixPortsMixPort"

    def test_first_letter_is_capitalized(self) -> None:
        """Test each part gets an upper-case first letter, the rest is kept."""
        assert class_name("apex-info-list") == "ApexInfoList"
        assert class_name("globalConfiguration") == "GlobalConfiguration"


class TestEnumTag:
    """Tests for enum_tag."""

    def test_identifier_is_kept(self) -> None:
        """Test canonical strings that are identifiers stay unchanged."""
        assert enum_tag("AUDIO_OUTPUT_FLAG_DIRECT") == "AUDIO_OUTPUT_FLAG_DIRECT"
        assert enum_tag("source") == "source"

    def test_version_strings(self) -> None:
        """Test dotted version strings."""
        assert enum_tag("7.0") == "_7_0"
        assert enum_tag("2.0") == "_2_0"

    def test_keyword(self) -> None:
        """Test keywords are prefixed."""
        assert enum_tag("None") == "_None"

    def test_sunder_names_are_avoided(self) -> None:
        """Test tags never take the form reserved by enum."""
        assert enum_tag("_x_") == "_x_x"


class TestModuleName:
    """Tests for module_name."""

    def test_module_name(self) -> None:
        assert module_name("audio_policy_configuration_v7_0") == "audio_policy_configuration_v7_0"
        assert module_name("apex-info-list") == "apex_info_list"
