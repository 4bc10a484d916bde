"""Tests for LocatorSettings and the YAML settings source."""

from pathlib import Path

import pytest
from pytest import MonkeyPatch
import yaml

from locator import ConfigLoadError, LocatorSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: MonkeyPatch):
    """Removes settings environment variables that might interfere."""
    for name in (
        "LOCATOR_HANDLER_PKGS",
        "LOCATOR_CONFIG_FILE",
        "LOG_FORMAT",
        "LOG_LEVEL",
        "LOG_INCLUDE_STACKTRACE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
def test_defaults():
    """Tests the settings defaults."""
    settings = LocatorSettings()

    assert settings.handler_pkgs is None
    assert settings.handler_prefixes == []
    assert settings.log_format == "human"
    assert settings.log_level == "INFO"
    assert settings.log_include_stacktrace is False
    assert settings.config_file is None


@pytest.mark.unit
def test_handler_pkgs_from_env(monkeypatch: MonkeyPatch):
    """Tests reading the search path from the environment."""
    monkeypatch.setenv("LOCATOR_HANDLER_PKGS", "myapp.protocols|vendor.handlers")

    settings = LocatorSettings()

    assert settings.handler_prefixes == ["myapp.protocols", "vendor.handlers"]


@pytest.mark.unit
def test_blank_handler_pkgs_is_unset(monkeypatch: MonkeyPatch):
    """Tests that an empty search path counts as unset."""
    monkeypatch.setenv("LOCATOR_HANDLER_PKGS", "   ")

    assert LocatorSettings().handler_pkgs is None


@pytest.mark.unit
def test_yaml_config_file(monkeypatch: MonkeyPatch, tmp_path: Path):
    """Tests loading settings from the YAML file named in the environment."""
    config_path = tmp_path / "locator.yaml"
    with Path.open(config_path, "w", encoding="utf-8") as f:
        yaml.dump({"handler_pkgs": "from.yaml", "log_level": "DEBUG"}, f)
    monkeypatch.setenv("LOCATOR_CONFIG_FILE", str(config_path))

    settings = LocatorSettings()

    assert settings.config_file == config_path
    assert settings.handler_prefixes == ["from.yaml"]
    assert settings.log_level == "DEBUG"


@pytest.mark.unit
def test_env_overrides_yaml(monkeypatch: MonkeyPatch, tmp_path: Path):
    """Tests that environment variables win over the YAML file."""
    config_path = tmp_path / "locator.yaml"
    config_path.write_text(yaml.dump({"handler_pkgs": "from.yaml"}))
    monkeypatch.setenv("LOCATOR_CONFIG_FILE", str(config_path))
    monkeypatch.setenv("LOCATOR_HANDLER_PKGS", "from.env")

    assert LocatorSettings().handler_prefixes == ["from.env"]


@pytest.mark.unit
def test_empty_yaml_file(monkeypatch: MonkeyPatch, tmp_path: Path):
    """Tests that an empty YAML file leaves the defaults."""
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("")
    monkeypatch.setenv("LOCATOR_CONFIG_FILE", str(config_path))

    assert LocatorSettings().handler_pkgs is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    ["- a\n- b\n", "handler_pkgs: [unclosed\n"],
    ids=["not_a_mapping", "invalid_yaml"],
)
def test_bad_yaml_file(monkeypatch: MonkeyPatch, tmp_path: Path, content: str):
    """Tests that unusable YAML files raise ConfigLoadError."""
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(content)
    monkeypatch.setenv("LOCATOR_CONFIG_FILE", str(config_path))

    with pytest.raises(ConfigLoadError) as exc_info:
        LocatorSettings()

    assert exc_info.value.config_file == str(config_path)


@pytest.mark.unit
def test_missing_yaml_file(monkeypatch: MonkeyPatch, tmp_path: Path):
    """Tests that a missing YAML file raises ConfigLoadError."""
    monkeypatch.setenv("LOCATOR_CONFIG_FILE", str(tmp_path / "absent.yaml"))

    with pytest.raises(ConfigLoadError):
        LocatorSettings()
