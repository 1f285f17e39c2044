"""Tests for the document driver, including the end-to-end scenarios."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from xsd_binding import DriverOptions, SchemaBinding, ValueParseError
from xsd_binding import document
from tests.fixture_loader import fixture_path, load_fixture_bytes, load_fixture_text

AUDIO_CONFIG = fixture_path("audio", "audio_policy_configuration.xml")
APEX_INFO_LIST = fixture_path("apex", "apex-info-list.xml")


def _apex(**attributes: str) -> str:
    attrs = " ".join(f'{k}="{v}"' for k, v in attributes.items())
    return f"<apex-info-list><apex-info {attrs}/></apex-info-list>"


class TestScenarios:
    """End-to-end read scenarios."""

    def test_minimal_document(self, audio_binding: SchemaBinding) -> None:
        version = audio_binding.enum("Version")
        config = audio_binding.parse('<audioPolicyConfiguration version="7.0"/>')

        assert config is not None
        assert config.has_version()
        assert config.get_version() is version._7_0
        assert not config.has_modules()
        assert not config.has_volumes()
        assert not config.has_surround_sound()
        assert not config.has_global_configuration()

    def test_enumerated_list_attribute(self, audio_binding: SchemaBinding) -> None:
        flag = audio_binding.enum("AudioInOutFlag")
        config = audio_binding.parse(
            "<audioPolicyConfiguration><modules><module name='m' halVersion='3.0'>"
            "<mixPorts><mixPort name='p' role='source' "
            "flags='AUDIO_OUTPUT_FLAG_DIRECT AUDIO_OUTPUT_FLAG_PRIMARY'/></mixPorts>"
            "</module></modules></audioPolicyConfiguration>"
        )
        mix_port = (
            config.get_first_modules().get_first_module().get_first_mix_ports().get_first_mix_port()
        )
        assert mix_port.has_flags()
        assert mix_port.get_flags() == (
            flag.AUDIO_OUTPUT_FLAG_DIRECT,
            flag.AUDIO_OUTPUT_FLAG_PRIMARY,
        )

    def test_unknown_enum_token(self, audio_binding: SchemaBinding) -> None:
        role = audio_binding.enum("Role")
        config = audio_binding.parse(
            "<audioPolicyConfiguration><modules><module name='m' halVersion='3.0'>"
            "<mixPorts><mixPort name='p' role='XYZ'/></mixPorts>"
            "</module></modules></audioPolicyConfiguration>"
        )
        mix_port = (
            config.get_first_modules().get_first_module().get_first_mix_ports().get_first_mix_port()
        )
        assert mix_port.has_role()
        assert mix_port.get_role() is role.UNKNOWN

    @pytest.mark.parametrize(
        ("raw", "expected"), [("true", True), ("false", False), ("TRUE", False)]
    )
    def test_boolean_attribute(self, apex_binding: SchemaBinding, raw: str, expected: bool) -> None:
        apex_list = apex_binding.parse(_apex(moduleName="a", isFactory=raw))
        assert apex_list.get_first_apex_info().get_is_factory() is expected

    def test_repeated_child_order(self, apex_binding: SchemaBinding) -> None:
        apex_list = apex_binding.parse(
            '<apex-info-list><apex-info moduleName="a"/><apex-info moduleName="b"/>'
            '<apex-info moduleName="c"/></apex-info-list>'
        )
        assert [i.get_module_name() for i in apex_list.get_apex_info()] == ["a", "b", "c"]
        assert apex_list.get_first_apex_info().get_module_name() == "a"

    def test_round_trip(self, apex_binding: SchemaBinding) -> None:
        xml = (
            "<apex-info-list>"
            + "".join(
                f'<apex-info moduleName="m{n}" modulePath="/p{n}" preinstalledModulePath="/q{n}" '
                f'versionCode="{n}" versionName="v{n}" isFactory="true" isActive="false" '
                f'lastUpdateMillis="{n}000" provideSharedApexLibs="true" partition="SYSTEM"/>'
                for n in (1, 2)
            )
            + "</apex-info-list>"
        )
        first = apex_binding.parse(xml)
        second = apex_binding.parse(apex_binding.dumps(first))

        assert second == first
        assert second.get_apex_info()[1].get_last_update_millis() == 2000


class TestRead:
    """Tests for reading documents from files."""

    def test_apex_info_list(self, apex_binding: SchemaBinding) -> None:
        apex_list = apex_binding.read(APEX_INFO_LIST)

        infos = apex_list.get_apex_info()
        assert len(infos) == 3
        assert infos[0].get_version_code() == 330443000
        assert infos[0].get_last_update_millis() == 1665086117000
        assert not infos[1].has_last_update_millis()
        assert infos[1].get_is_factory() is True
        assert infos[0].get_version_name() == ""

    def test_read_accepts_str_path(self, apex_binding: SchemaBinding) -> None:
        assert apex_binding.read(str(APEX_INFO_LIST)) == apex_binding.read(APEX_INFO_LIST)

    def test_xinclude(self, audio_binding: SchemaBinding) -> None:
        """Test included files are merged before reading."""
        hal_version = audio_binding.enum("HalVersion")
        config = audio_binding.read(AUDIO_CONFIG)

        modules = config.get_first_modules().get_module()
        assert [m.get_name() for m in modules] == ["primary", "usb"]
        assert modules[1].get_hal_version() is hal_version._2_0

        usb_port = modules[1].get_first_device_ports().get_first_device_port()
        assert usb_port.get_tag_name() == "USB Host Out"
        assert not usb_port.has_address()

    def test_xinclude_disabled(self, audio_binding: SchemaBinding) -> None:
        config = document.read(
            AUDIO_CONFIG,
            audio_binding.root_element,
            audio_binding.root_type,
            DriverOptions(xinclude=False),
        )
        assert [m.get_name() for m in config.get_first_modules().get_module()] == ["primary"]

    def test_audio_configuration(self, audio_binding: SchemaBinding) -> None:
        role = audio_binding.enum("Role")
        gain_mode = audio_binding.enum("AudioGainMode")
        channel_mask = audio_binding.enum("AudioChannelMask")
        config = audio_binding.read(AUDIO_CONFIG)

        global_config = config.get_first_global_configuration()
        assert global_config.get_speaker_drc_enabled() is True
        assert global_config.get_call_screen_mode_supported() is False
        assert not global_config.has_engine_library()

        primary = config.get_first_modules().get_first_module()
        assert primary.get_attached_devices()[0].get_item() == ("Speaker", "Built-In Mic")
        assert primary.get_default_output_device() == "Speaker"

        mix_ports = primary.get_first_mix_ports().get_mix_port()
        assert [p.get_name() for p in mix_ports] == ["primary output", "deep_buffer", "primary input"]
        assert mix_ports[1].get_max_open_count() == 1
        assert mix_ports[2].get_role() is role.sink
        assert not mix_ports[0].get_first_profile().has_name()
        assert mix_ports[1].get_first_profile().get_sampling_rates() == (44100, 48000)
        assert mix_ports[2].get_first_profile().get_channel_masks() == (
            channel_mask.AUDIO_CHANNEL_IN_MONO,
            channel_mask.AUDIO_CHANNEL_IN_STEREO,
        )

        speaker, mic = primary.get_first_device_ports().get_device_port()
        gain = speaker.get_first_gains().get_first_gain()
        assert gain.get_mode() == (gain_mode.AUDIO_GAIN_MODE_JOINT,)
        assert gain.get_min_value_mb() == -8400
        assert not gain.has_use_for_volume()
        assert mic.get_default() is True
        assert mic.get_address() == "bottom"

        routes = primary.get_first_routes().get_route()
        assert routes[0].get_sources() == "primary output,deep_buffer"

        volumes = config.get_first_volumes()
        assert volumes.get_volume()[1].get_point() == ("0,-4200", "33,-2800", "66,-1400", "100,0")
        assert volumes.get_first_reference().get_name() == "DEFAULT_MEDIA_VOLUME_CURVE"

        formats = config.get_first_surround_sound().get_first_formats().get_format()
        assert not formats[0].has_subformats()
        assert formats[1].get_subformats() == ("AUDIO_FORMAT_AAC_HE_V1", "AUDIO_FORMAT_AAC_HE_V2")

    def test_audio_round_trip(self, audio_binding: SchemaBinding) -> None:
        config = audio_binding.read(AUDIO_CONFIG)
        text = audio_binding.dumps(config)

        assert audio_binding.parse(text) == config
        assert audio_binding.dumps(audio_binding.parse(text)) == text


class TestFailures:
    """Tests for inputs that collapse to an absent result."""

    def test_missing_file(self, apex_binding: SchemaBinding, tmp_path: Path) -> None:
        assert apex_binding.read(tmp_path / "missing.xml") is None

    def test_malformed(self, apex_binding: SchemaBinding, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="xsd_binding"):
            assert apex_binding.parse("<apex-info-list><apex-info>") is None
        assert "Failed to parse" in caplog.text

    def test_malformed_file(self, apex_binding: SchemaBinding, tmp_path: Path) -> None:
        path = tmp_path / "broken.xml"
        path.write_text("<apex-info-list>")
        assert apex_binding.read(path) is None

    def test_failed_xinclude(
        self, audio_binding: SchemaBinding, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="xsd_binding"):
            assert audio_binding.read(fixture_path("audio", "missing_include.xml")) is None
        assert "XInclude" in caplog.text

    def test_root_mismatch(
        self, audio_binding: SchemaBinding, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="xsd_binding"):
            assert audio_binding.read(APEX_INFO_LIST) is None
        assert "apex-info-list" in caplog.text
        assert "audioPolicyConfiguration" in caplog.text

    def test_numeric_errors_propagate(self, apex_binding: SchemaBinding) -> None:
        with pytest.raises(ValueParseError):
            apex_binding.parse(_apex(moduleName="a", versionCode="9223372036854775808"))


class TestParse:
    """Tests for parsing in-memory documents."""

    def test_bytes_with_encoding_declaration(self, apex_binding: SchemaBinding) -> None:
        xml = (
            b'<?xml version="1.0" encoding="ISO-8859-1"?>'
            b'<apex-info-list><apex-info moduleName="caf\xe9"/></apex-info-list>'
        )
        assert apex_binding.parse(xml).get_first_apex_info().get_module_name() == "café"

    def test_str_with_encoding_declaration(self, apex_binding: SchemaBinding) -> None:
        text = load_fixture_text("apex", "apex-info-list.xml")
        assert apex_binding.parse(text) == apex_binding.read(APEX_INFO_LIST)

    def test_str_with_non_utf8_declaration(self, apex_binding: SchemaBinding) -> None:
        """Test decoded text is not decoded again with its declared encoding."""
        text = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            '<apex-info-list><apex-info moduleName="café"/></apex-info-list>'
        )
        assert apex_binding.parse(text).get_first_apex_info().get_module_name() == "café"

    def test_bytes(self, apex_binding: SchemaBinding) -> None:
        data = load_fixture_bytes("apex", "apex-info-list.xml")
        assert len(apex_binding.parse(data).get_apex_info()) == 3

    def test_base_url_resolves_includes(self, audio_binding: SchemaBinding) -> None:
        options = DriverOptions(base_url=str(AUDIO_CONFIG))
        config = document.parse(
            load_fixture_bytes("audio", "audio_policy_configuration.xml"),
            audio_binding.root_element,
            audio_binding.root_type,
            options,
        )
        assert len(config.get_first_modules().get_module()) == 2


class TestWrite:
    """Tests for the module-level writers."""

    def test_write_and_dumps_agree(self, apex_binding: SchemaBinding) -> None:
        apex_list = apex_binding.read(APEX_INFO_LIST)
        out = io.StringIO()
        document.write(out, apex_list, "apex-info-list")

        assert out.getvalue() == document.dumps(apex_list, "apex-info-list")
        assert out.getvalue().splitlines()[1] == "<apex-info-list>"
