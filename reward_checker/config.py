"""
Load config from config.yaml with optional env overrides.
Single source of truth for the check timeout, enabled providers, relay base,
preferences location and log level.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import yaml

# Defaults if no YAML or env
_DEFAULTS = {
    "check": {"timeout_ms": 30_000},
    "providers": {
        "enabled": [
            "sundae-liqwid",
            "sundae-general",
            "nuvola-digital",
            "minswap",
            "cardano-staking",
        ],
        "cors_relay": "https://proxy.cors.sh/",
        "http_timeout_s": 30.0,
    },
    "preferences": {"path": "~/.reward_checker/preferences.json"},
    "logging": {"level": "WARNING"},
}


def _config_yaml_path() -> Path:
    """REWARD_CHECKER_CONFIG, else config.yaml at repo root (parent of package dir)."""
    override = os.environ.get("REWARD_CHECKER_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Optional[Path] = None) -> dict:
    config_path = path or _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    timeout = os.environ.get("REWARD_CHECKER_TIMEOUT_MS")
    if timeout:
        overrides.setdefault("check", {})["timeout_ms"] = int(timeout)
    relay = os.environ.get("REWARD_CHECKER_CORS_RELAY")
    if relay is not None:
        overrides.setdefault("providers", {})["cors_relay"] = relay
    prefs = os.environ.get("REWARD_CHECKER_PREFERENCES")
    if prefs:
        overrides.setdefault("preferences", {})["path"] = prefs
    level = os.environ.get("REWARD_CHECKER_LOG_LEVEL")
    if level:
        overrides.setdefault("logging", {})["level"] = level
    return overrides


def get_config(path: Optional[Path] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def check_timeout_ms() -> int:
    return int(get_config()["check"]["timeout_ms"])


def enabled_providers() -> List[str]:
    return list(get_config()["providers"]["enabled"])


def cors_relay_base() -> Optional[str]:
    """Relay prefix, or None when relaying is switched off (empty string / null)."""
    return get_config()["providers"].get("cors_relay") or None


def http_timeout_s() -> float:
    return float(get_config()["providers"]["http_timeout_s"])


def preferences_path() -> Path:
    return Path(str(get_config()["preferences"]["path"])).expanduser()


def log_level() -> str:
    return str(get_config()["logging"]["level"]).upper()
