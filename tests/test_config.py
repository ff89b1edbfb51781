from pathlib import Path

import pytest

from sessionline.config import ConfigError, SessionLineSettings, load_config


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (
        "SESSIONLINE_CONFIG_PATH",
        "SESSIONLINE_DEBUG",
        "SESSIONLINE_TIMER",
        "SESSIONLINE_ENTITY",
        "SESSIONLINE_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_files():
    result = load_config()

    assert result.source is None
    assert result.settings == SessionLineSettings()
    assert result.settings.interval == 0.1
    assert result.settings.timer


def test_explicit_file_wins(tmp_path: Path):
    config_path = tmp_path / "custom.toml"
    config_path.write_text('debug = true\nentity = "Deploy"\ninterval = 0.25\n')
    (tmp_path / ".sessionline.toml").write_text('entity = "Ignored"\n')

    result = load_config(config_path)

    assert result.source == config_path
    assert result.settings.debug
    assert result.settings.entity == "Deploy"
    assert result.settings.interval == 0.25


def test_table_and_env_overrides(tmp_path: Path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text('[sessionline]\nentity = "Build"\n')
    monkeypatch.setenv("SESSIONLINE_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("SESSIONLINE_DEBUG", "true")
    monkeypatch.setenv("SESSIONLINE_INTERVAL", "0.05")

    settings = load_config().settings

    assert settings.entity == "Build"
    assert settings.debug
    assert settings.interval == 0.05


def test_invalid_values_raise_config_error(tmp_path: Path):
    config_path = tmp_path / "bad.toml"
    config_path.write_text("interval = -1\n")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_invalid_toml_raises_config_error(tmp_path: Path):
    config_path = tmp_path / "broken.toml"
    config_path.write_text("debug = \n")

    with pytest.raises(ConfigError):
        load_config(config_path)
