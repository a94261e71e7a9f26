"""Tests for TOML settings persistence in settings.py."""
from __future__ import annotations

import pytest

import settings
from settings import AppSettings, SettingsManager, get_settings


@pytest.fixture()
def config_dir(tmp_path):
    return tmp_path / "pixelarrow"


class TestDefaults:
    def test_missing_file_gives_defaults(self, config_dir):
        sm = SettingsManager(settings_dir=config_dir)
        assert sm.settings == AppSettings()
        assert not sm.get_settings_path().exists()

    def test_documented_defaults(self):
        s = AppSettings()
        assert (s.arrow.width, s.arrow.length, s.arrow.point_angle, s.arrow.point_ratio) == (1.5, 24.0, 36.0, 0.7)
        assert s.arrow.arrow_type == "start"
        assert s.style.edge_style == "none"
        assert s.style.edge_color == "black" and s.style.face_color == "black"
        assert s.style.filled is True
        assert s.debounce.position_delay_ms == 200
        assert s.debounce.style_delay_ms == 100

    def test_ensure_file_complete_creates_file(self, config_dir):
        sm = SettingsManager(settings_dir=config_dir)
        sm.ensure_file_complete()
        assert sm.get_settings_path().is_file()

    def test_get_settings_is_singleton(self, isolated_settings):
        assert get_settings() is isolated_settings
        assert get_settings() is settings.get_settings()


class TestRoundTrip:
    def test_save_and_reload(self, config_dir):
        sm = SettingsManager(settings_dir=config_dir)
        sm.settings.arrow.width = 4.0
        sm.settings.arrow.arrow_type = "both"
        sm.settings.style.face_color = "#336699"
        sm.settings.style.filled = False
        sm.settings.debounce.position_delay_ms = 50
        sm.settings.view.wheel_factor = 1.5
        sm.save()

        reloaded = SettingsManager(settings_dir=config_dir)
        assert reloaded.settings == sm.settings

    def test_to_toml_has_sections(self, config_dir):
        text = SettingsManager(settings_dir=config_dir).to_toml()
        for section in ("[arrow]", "[style.edge]", "[style.face]", "[debounce]", "[view]"):
            assert section in text

    def test_partial_file_keeps_other_defaults(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text(
            "[arrow]\nlength = 40.0\n\n[debounce]\nstyle_delay_ms = 5\n", encoding="utf-8"
        )
        sm = SettingsManager(settings_dir=config_dir)
        assert sm.settings.arrow.length == 40.0
        assert sm.settings.arrow.width == 1.5
        assert sm.settings.debounce.style_delay_ms == 5
        assert sm.settings.debounce.position_delay_ms == 200


class TestCorruptFile:
    def test_invalid_toml_falls_back(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text("[arrow\nwidth = ", encoding="utf-8")
        sm = SettingsManager(settings_dir=config_dir)
        assert sm.settings == AppSettings()

    def test_wrong_section_type_falls_back(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "settings.toml").write_text('arrow = "oops"\n', encoding="utf-8")
        sm = SettingsManager(settings_dir=config_dir)
        assert sm.settings == AppSettings()
