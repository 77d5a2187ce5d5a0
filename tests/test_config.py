"""Tests for config loading."""

import os
import tempfile

from hyetaek.config import AppConfig, load_config


def test_load_config_defaults(monkeypatch):
    """Loading with no path returns all defaults."""
    for var in ("GEMINI_API_KEY", "API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)

    config = load_config()
    assert isinstance(config, AppConfig)
    assert config.gateway.backend == "gemini"
    assert config.gateway.gemini.model == "gemini-2.5-flash"
    assert config.gateway.gemini.api_key == ""
    assert config.database.path == "~/.config/hyetaek/hyetaek.db"
    assert config.location.enabled is True
    assert config.location.latitude is None
    assert config.location.timeout == 10.0
    assert config.location.high_accuracy is True


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.gateway.backend == "gemini"


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    toml_content = """\
[gateway]
backend = "claude"

[gateway.claude]
api_key = "test-key-123"
model = "claude-haiku"

[database]
path = "/var/lib/hyetaek.db"

[location]
latitude = 37.5665
longitude = 126.978
timeout = 5.0
""".encode("utf-8")
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)

    assert config.gateway.backend == "claude"
    assert config.gateway.claude.api_key == "test-key-123"
    assert config.gateway.claude.model == "claude-haiku"
    assert config.database.path == "/var/lib/hyetaek.db"
    assert config.location.latitude == 37.5665
    assert config.location.longitude == 126.978
    assert config.location.timeout == 5.0


def test_load_config_env_override(monkeypatch):
    """Environment variables fill empty API keys."""
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")

    config = load_config()
    assert config.gateway.gemini.api_key == "env-gemini-key"
    assert config.gateway.claude.api_key == "env-anthropic-key"


def test_load_config_legacy_api_key_env(monkeypatch):
    """API_KEY is used for Gemini when GEMINI_API_KEY is unset."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")

    config = load_config()
    assert config.gateway.gemini.api_key == "legacy-key"


def test_load_config_file_key_takes_precedence(monkeypatch):
    """Config file API key takes precedence over env var."""
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")

    toml_content = b"""\
[gateway.gemini]
api_key = "file-key"
"""
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)
    assert config.gateway.gemini.api_key == "file-key"


def test_load_config_location_disabled():
    toml_content = b"""\
[location]
enabled = false
"""
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)
    assert config.location.enabled is False
    # Other sections use defaults
    assert config.gateway.backend == "gemini"
