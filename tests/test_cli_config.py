from __future__ import annotations

import pytest

from move_cli.cli.config import ConfigError, load_cli_config


def test_defaults_when_config_missing(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("MOVE_CLI_LOG_LEVEL", raising=False)
    config = load_cli_config(tmp_path / "missing.toml")
    assert config.log_level == "WARNING"
    assert config.experimental_warning is True
    assert config.config_schema_version == 1


def test_file_log_level_used_when_env_not_set(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('log_level = "info"\n', encoding="utf-8")
    monkeypatch.delenv("MOVE_CLI_LOG_LEVEL", raising=False)
    config = load_cli_config(config_path)
    assert config.log_level == "INFO"


def test_env_log_level_overrides_config_file(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('log_level = "ERROR"\n', encoding="utf-8")
    monkeypatch.setenv("MOVE_CLI_LOG_LEVEL", "debug")
    config = load_cli_config(config_path)
    assert config.log_level == "DEBUG"


def test_invalid_env_log_level_rejected(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MOVE_CLI_LOG_LEVEL", "chatty")
    with pytest.raises(ConfigError, match="MOVE_CLI_LOG_LEVEL"):
        load_cli_config(tmp_path / "missing.toml")


def test_cli_table_is_read(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[cli]\nexperimental_warning = "off"\n', encoding="utf-8")
    monkeypatch.delenv("MOVE_CLI_LOG_LEVEL", raising=False)
    config = load_cli_config(config_path)
    assert config.experimental_warning is False


def test_cli_must_be_a_table(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('cli = "yes"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match=r"\[cli\] must be a table"):
        load_cli_config(config_path)


def test_non_boolean_experimental_warning_rejected(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("experimental_warning = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_cli_config(config_path)


def test_invalid_toml_rejected(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("log_level = \n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid TOML"):
        load_cli_config(config_path)


def test_non_utf8_config_rejected(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_bytes(b'log_level = "\xff"\n')
    with pytest.raises(ConfigError, match="not valid UTF-8"):
        load_cli_config(config_path)


def test_unreadable_config_rejected(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.mkdir()
    with pytest.raises(ConfigError, match="cannot read"):
        load_cli_config(config_path)


def test_config_schema_version_parses_when_present(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("config_schema_version = 2\n", encoding="utf-8")
    config = load_cli_config(config_path)
    assert config.config_schema_version == 2


def test_config_schema_version_rejects_invalid_values(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("config_schema_version = 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_cli_config(config_path)
