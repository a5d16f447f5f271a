"""Configuration loader for dayplug."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from dayplug.core.errors import ConfigError

log = logging.getLogger(__name__)

DEFAULTS: dict = {
    "root": "/tmp/rplugin",
    "chunk_size": 1024,
    # Test-only hooks for exercising the orchestrator's retry/timeout paths.
    # Typical enabled values: delay_seconds=1, fail_rate=1/32.
    "faults": {
        "delay_seconds": 0,
        "fail_rate": 0,
        "seed": None,
    },
    "logging": {
        "level": "warning",
        "file": None,
    },
    "linger_seconds": 0,
}


@dataclass(frozen=True)
class PluginSettings:
    """Runtime settings, read once at startup and passed to the handlers."""

    root: Path
    chunk_size: int = 1024
    delay_seconds: float = 0.0
    fail_rate: float = 0.0
    seed: int | None = None
    log_level: str = "warning"
    log_file: Path | None = None
    linger_seconds: float = 0.0

    @classmethod
    def from_config(cls, config: dict) -> PluginSettings:
        """Convert a merged config dict, raising ``ConfigError`` on bad values."""
        faults = _section(config, "faults")
        logging_cfg = _section(config, "logging")
        root = config.get("root")
        if not isinstance(root, str) or not root:
            raise ConfigError(f"invalid config value for root: {root!r}")
        chunk_size = _number(config.get("chunk_size") or DEFAULTS["chunk_size"], "chunk_size", int)
        if chunk_size <= 0:
            raise ConfigError(f"invalid config value for chunk_size: {chunk_size!r}")
        seed = faults.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigError(f"invalid config value for faults.seed: {seed!r}")
        log_file = logging_cfg.get("file")
        if log_file is not None and not isinstance(log_file, str):
            raise ConfigError(f"invalid config value for logging.file: {log_file!r}")
        return cls(
            root=Path(root).expanduser(),
            chunk_size=chunk_size,
            delay_seconds=_number(faults.get("delay_seconds"), "faults.delay_seconds"),
            fail_rate=_number(faults.get("fail_rate"), "faults.fail_rate"),
            seed=seed,
            log_level=str(logging_cfg.get("level") or "warning"),
            log_file=Path(log_file).expanduser() if log_file else None,
            linger_seconds=_number(config.get("linger_seconds"), "linger_seconds"),
        )


def _section(config: dict, key: str) -> dict:
    value = config.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"invalid config section {key}: expected a mapping, got {value!r}")
    return value


def _number(value, key: str, kind: type = float):
    try:
        return kind(value or 0)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value for {key}: {value!r}") from e


def load_config(path: Path | None = None) -> dict:
    """Load the plugin config file and merge with defaults.

    Args:
        path: Plugin config file passed by the orchestrator. May be None or
            point to a missing file, in which case defaults are used.

    Returns:
        Merged configuration dict.
    """
    user_config: dict = {}
    if path is not None and path.exists():
        try:
            raw = path.read_text(encoding="utf-8")
            user_config = yaml.safe_load(raw) or {}
        except Exception:
            log.warning("Failed to read config at %s, using defaults", path, exc_info=True)

    if not isinstance(user_config, dict):
        log.warning("Config at %s is not a mapping, using defaults", path)
        user_config = {}

    # Orchestrator plugin configs nest plugin keys under "options"
    options = user_config.get("options")
    if isinstance(options, dict):
        user_config = options

    merged = _deep_merge(DEFAULTS, user_config)

    env_root = os.environ.get("DAYPLUG_ROOT")
    if env_root:
        merged["root"] = env_root

    return merged


def load_settings(path: Path | None = None) -> PluginSettings:
    """Load config and convert it to ``PluginSettings``."""
    return PluginSettings.from_config(load_config(path))


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
