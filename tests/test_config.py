"""Tests for guardrail settings loading."""

from pathlib import Path

import pytest
import yaml

from guardrail.core.config import CONFIG_ENV_VAR, GuardrailConfig, load_config

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "guardrail.yaml"


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_config()
    assert config == GuardrailConfig()
    assert config.rewrite.enabled is True
    assert config.scoring.max_suggestions == 5
    assert config.scoring.noise_threshold == 0.1


def test_load_shipped_config():
    config = load_config(CONFIG_PATH)
    assert config.rewrite.model == "qwen3:8b"
    assert config.rewrite.host == "http://localhost:11434"


def test_env_var_points_at_config(tmp_path, monkeypatch):
    path = tmp_path / "guardrail.yaml"
    path.write_text(yaml.safe_dump({"rewrite": {"enabled": False}}))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    config = load_config()
    assert config.rewrite.enabled is False
    assert config.scoring.max_suggestions == 5


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == GuardrailConfig()


def test_invalid_values_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"rewrite": {"temperature": 3}}))
    with pytest.raises(Exception):
        load_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
