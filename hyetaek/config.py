"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GeminiGatewayConfig:
    api_key: str = ""
    model: str = "gemini-2.5-flash"


@dataclass
class ClaudeGatewayConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GatewayConfig:
    backend: str = "gemini"
    gemini: GeminiGatewayConfig = field(default_factory=GeminiGatewayConfig)
    claude: ClaudeGatewayConfig = field(default_factory=ClaudeGatewayConfig)


@dataclass
class DatabaseConfig:
    path: str = "~/.config/hyetaek/hyetaek.db"


@dataclass
class LocationConfig:
    enabled: bool = True
    latitude: float | None = None
    longitude: float | None = None
    timeout: float = 10.0
    high_accuracy: bool = True


@dataclass
class AppConfig:
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    location: LocationConfig = field(default_factory=LocationConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    gw = raw.get("gateway", {})
    dbs = raw.get("database", {})
    loc = raw.get("location", {})

    gemini_cfg = gw.get("gemini", {})
    claude_cfg = gw.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = (
        gemini_cfg.get("api_key", "")
        or os.environ.get("GEMINI_API_KEY", "")
        or os.environ.get("API_KEY", "")
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return AppConfig(
        gateway=GatewayConfig(
            backend=gw.get("backend", "gemini"),
            gemini=GeminiGatewayConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.5-flash"),
            ),
            claude=ClaudeGatewayConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/hyetaek/hyetaek.db"),
        ),
        location=LocationConfig(
            enabled=loc.get("enabled", True),
            latitude=loc.get("latitude"),
            longitude=loc.get("longitude"),
            timeout=loc.get("timeout", 10.0),
            high_accuracy=loc.get("high_accuracy", True),
        ),
    )
