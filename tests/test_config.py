from __future__ import annotations

import pytest

from block_markup.config import DEFAULT_LOCALE, DEFAULT_MAX_DEPTH, MAX_NESTING_DEPTH, EngineSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BLOCK_MARKUP_MAX_DEPTH", "BLOCK_MARKUP_LOCALE", "BLOCK_MARKUP_TIME_ZONE"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_without_environment():
    settings = EngineSettings()

    assert settings.max_depth == DEFAULT_MAX_DEPTH
    assert settings.locale == DEFAULT_LOCALE
    assert settings.time_zone is None


def test_environment_fallbacks(monkeypatch):
    monkeypatch.setenv("BLOCK_MARKUP_MAX_DEPTH", "4")
    monkeypatch.setenv("BLOCK_MARKUP_LOCALE", "fr_FR")
    monkeypatch.setenv("BLOCK_MARKUP_TIME_ZONE", "Europe/Paris")

    settings = EngineSettings()

    assert settings.max_depth == 4
    assert settings.locale == "fr_FR"
    assert settings.time_zone == "Europe/Paris"


def test_explicit_values_beat_environment(monkeypatch):
    monkeypatch.setenv("BLOCK_MARKUP_MAX_DEPTH", "4")

    assert EngineSettings(max_depth=7).max_depth == 7


def test_invalid_depth_in_environment(monkeypatch):
    monkeypatch.setenv("BLOCK_MARKUP_MAX_DEPTH", "deep")

    with pytest.raises(ValueError, match="BLOCK_MARKUP_MAX_DEPTH must be an integer"):
        EngineSettings()


def test_depth_must_be_positive():
    with pytest.raises(ValueError, match="max_depth must be at least 1"):
        EngineSettings(max_depth=0)


def test_depth_is_capped():
    with pytest.raises(ValueError, match=f"max_depth must be at most {MAX_NESTING_DEPTH}"):
        EngineSettings(max_depth=MAX_NESTING_DEPTH + 1)


def test_load_settings_reads_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("BLOCK_MARKUP_MAX_DEPTH=5\nBLOCK_MARKUP_LOCALE=de_DE\n")

    settings = load_settings(env_file)

    assert settings.max_depth == 5
    assert settings.locale == "de_DE"


def test_load_settings_does_not_override_process_env(tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCK_MARKUP_LOCALE", "en_GB")
    env_file = tmp_path / ".env"
    env_file.write_text("BLOCK_MARKUP_LOCALE=de_DE\n")

    settings = load_settings(env_file, max_depth=3)

    assert settings.locale == "en_GB"
    assert settings.max_depth == 3
