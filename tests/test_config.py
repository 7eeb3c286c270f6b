"""Config: defaults <- config.yaml <- environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from reward_checker import config

_ENV_VARS = [
    "REWARD_CHECKER_CONFIG",
    "REWARD_CHECKER_TIMEOUT_MS",
    "REWARD_CHECKER_CORS_RELAY",
    "REWARD_CHECKER_PREFERENCES",
    "REWARD_CHECKER_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def yaml_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    monkeypatch.setenv("REWARD_CHECKER_CONFIG", str(path))
    return path


def test_defaults_when_yaml_missing(yaml_file):
    cfg = config.get_config()
    assert cfg["check"]["timeout_ms"] == 30_000
    assert "strikefinance" not in cfg["providers"]["enabled"]
    assert config.cors_relay_base() == "https://proxy.cors.sh/"
    assert config.log_level() == "WARNING"


def test_yaml_overrides_are_deep_merged(yaml_file):
    yaml_file.write_text(
        "check:\n  timeout_ms: 5000\nproviders:\n  enabled: [minswap, strikefinance]\n",
        encoding="utf-8",
    )
    assert config.check_timeout_ms() == 5000
    assert config.enabled_providers() == ["minswap", "strikefinance"]
    # keys the file does not mention keep their defaults
    assert config.http_timeout_s() == 30.0
    assert config.cors_relay_base() == "https://proxy.cors.sh/"


def test_env_beats_yaml(yaml_file, monkeypatch):
    yaml_file.write_text("check:\n  timeout_ms: 5000\n", encoding="utf-8")
    monkeypatch.setenv("REWARD_CHECKER_TIMEOUT_MS", "750")
    monkeypatch.setenv("REWARD_CHECKER_LOG_LEVEL", "debug")
    assert config.check_timeout_ms() == 750
    assert config.log_level() == "DEBUG"


def test_empty_relay_disables_relaying(yaml_file, monkeypatch):
    monkeypatch.setenv("REWARD_CHECKER_CORS_RELAY", "")
    assert config.cors_relay_base() is None


def test_preferences_path_expands_user(yaml_file, monkeypatch, tmp_path):
    monkeypatch.setenv("REWARD_CHECKER_PREFERENCES", str(tmp_path / "p.json"))
    assert config.preferences_path() == tmp_path / "p.json"
    monkeypatch.delenv("REWARD_CHECKER_PREFERENCES")
    assert "~" not in str(config.preferences_path())


def test_non_mapping_yaml_is_ignored(yaml_file):
    yaml_file.write_text("- just\n- a list\n", encoding="utf-8")
    assert config.check_timeout_ms() == 30_000


def test_explicit_path(tmp_path):
    path = tmp_path / "other.yaml"
    path.write_text("logging:\n  level: INFO\n", encoding="utf-8")
    assert config.get_config(Path(path))["logging"]["level"] == "INFO"


def test_repo_config_yaml_loads():
    cfg = config.get_config()
    assert isinstance(cfg["providers"]["enabled"], list)
