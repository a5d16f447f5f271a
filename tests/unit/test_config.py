"""Tests for dayplug.core.config."""

from pathlib import Path

import pytest

from dayplug.core.config import DEFAULTS, PluginSettings, _deep_merge, load_config, load_settings
from dayplug.core.errors import ConfigError


class TestDeepMerge:
    def test_nested_merge(self):
        base = {"faults": {"delay_seconds": 0, "fail_rate": 0}}
        override = {"faults": {"fail_rate": 0.5}}
        result = _deep_merge(base, override)
        assert result["faults"]["fail_rate"] == 0.5
        assert result["faults"]["delay_seconds"] == 0

    def test_does_not_mutate_base(self):
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestLoadConfig:
    def test_defaults_when_no_path(self):
        config = load_config(None)
        assert config["root"] == DEFAULTS["root"]
        assert config["chunk_size"] == 1024

    def test_defaults_when_file_missing(self, tmp_path: Path):
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config["faults"] == DEFAULTS["faults"]

    def test_top_level_keys(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text("root: /srv/backups\nfaults:\n  delay_seconds: 1\n")

        config = load_config(config_file)
        assert config["root"] == "/srv/backups"
        assert config["faults"]["delay_seconds"] == 1
        assert config["faults"]["fail_rate"] == 0

    def test_options_section(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text(
            "executablepath: /usr/local/bin/dayplug\n"
            "options:\n"
            "  root: /srv/backups\n"
            "  chunk_size: 4096\n"
        )

        config = load_config(config_file)
        assert config["root"] == "/srv/backups"
        assert config["chunk_size"] == 4096
        assert "executablepath" not in config

    def test_handles_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text("")
        assert load_config(config_file)["root"] == DEFAULTS["root"]

    def test_handles_invalid_yaml(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text("root: [unclosed\n")
        assert load_config(config_file)["root"] == DEFAULTS["root"]

    def test_handles_non_mapping(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text("- just\n- a list\n")
        assert load_config(config_file)["root"] == DEFAULTS["root"]

    def test_env_root_override(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text("root: /srv/backups\n")
        monkeypatch.setenv("DAYPLUG_ROOT", str(tmp_path / "store"))

        assert load_config(config_file)["root"] == str(tmp_path / "store")


class TestPluginSettings:
    def test_from_defaults(self):
        settings = PluginSettings.from_config(load_config(None))
        assert settings.root == Path("/tmp/rplugin")
        assert settings.chunk_size == 1024
        assert settings.delay_seconds == 0.0
        assert settings.fail_rate == 0.0
        assert settings.seed is None
        assert settings.log_level == "warning"
        assert settings.log_file is None
        assert settings.linger_seconds == 0.0

    def test_load_settings(self, tmp_path: Path):
        config_file = tmp_path / "plugin.yaml"
        config_file.write_text(
            "options:\n"
            f"  root: {tmp_path / 'store'}\n"
            "  faults:\n"
            "    delay_seconds: 1\n"
            "    fail_rate: 0.03125\n"
            "    seed: 7\n"
            "  logging:\n"
            "    level: debug\n"
            f"    file: {tmp_path / 'plugin.log'}\n"
            "  linger_seconds: 2\n"
        )

        settings = load_settings(config_file)
        assert settings.root == tmp_path / "store"
        assert settings.delay_seconds == 1.0
        assert settings.fail_rate == 0.03125
        assert settings.seed == 7
        assert settings.log_level == "debug"
        assert settings.log_file == tmp_path / "plugin.log"
        assert settings.linger_seconds == 2.0


class TestPluginSettingsValidation:
    def _config(self, **overrides) -> dict:
        config = load_config(None)
        config.update(overrides)
        return config

    def test_non_numeric_chunk_size(self):
        with pytest.raises(ConfigError, match="chunk_size"):
            PluginSettings.from_config(self._config(chunk_size="big"))

    def test_negative_chunk_size(self):
        with pytest.raises(ConfigError, match="chunk_size"):
            PluginSettings.from_config(self._config(chunk_size=-1))

    def test_faults_not_a_mapping(self):
        with pytest.raises(ConfigError, match="faults"):
            PluginSettings.from_config(self._config(faults=1))

    def test_logging_not_a_mapping(self):
        with pytest.raises(ConfigError, match="logging"):
            PluginSettings.from_config(self._config(logging=["debug"]))

    def test_non_numeric_fail_rate(self):
        with pytest.raises(ConfigError, match="faults.fail_rate"):
            PluginSettings.from_config(self._config(faults={"fail_rate": "often"}))

    def test_non_integer_seed(self):
        with pytest.raises(ConfigError, match="faults.seed"):
            PluginSettings.from_config(self._config(faults={"seed": "abc"}))

    def test_root_not_a_string(self):
        with pytest.raises(ConfigError, match="root"):
            PluginSettings.from_config(self._config(root=42))

    def test_log_file_not_a_string(self):
        with pytest.raises(ConfigError, match="logging.file"):
            PluginSettings.from_config(self._config(logging={"file": 3}))
