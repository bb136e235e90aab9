"""Configuration for reddit-mcp.

Settings loaded from (in order of precedence):
1. Environment variables (RMCP_BASE_URL, RMCP_USER_AGENT, RMCP_TIMEOUT, RMCP_LOG_LEVEL)
2. Config file (~/.rmcp/config.toml)
3. Defaults
"""
from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

RMCP_DIR = Path.home() / ".rmcp"

DEFAULT_CONFIG_PATH = RMCP_DIR / "config.toml"
DEFAULT_BASE_URL = "https://old.reddit.com"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    """Application settings. Everything that touches the network is configurable."""

    # Reddit endpoint
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 10.0

    # Logging
    log_level: str = "WARNING"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from config file + environment variable overrides."""
        settings = cls()

        # Load from TOML config file
        path = config_path or DEFAULT_CONFIG_PATH
        if path.exists():
            with open(path, "rb") as f:
                data = tomllib.load(f)

            reddit = data.get("reddit", {})
            settings.base_url = reddit.get("base_url", settings.base_url)
            settings.user_agent = reddit.get("user_agent", settings.user_agent)
            timeout = reddit.get("timeout", settings.timeout)
            try:
                settings.timeout = float(timeout)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric timeout %r in %s", timeout, path)

            log = data.get("logging", {})
            settings.log_level = log.get("level", settings.log_level)

        # Environment variable overrides (highest precedence)
        if v := os.environ.get("RMCP_BASE_URL"):
            settings.base_url = v
        if v := os.environ.get("RMCP_USER_AGENT"):
            settings.user_agent = v
        if v := os.environ.get("RMCP_TIMEOUT"):
            try:
                settings.timeout = float(v)
            except ValueError:
                logger.warning("Ignoring non-numeric RMCP_TIMEOUT=%r", v)
        if v := os.environ.get("RMCP_LOG_LEVEL"):
            settings.log_level = v

        settings.base_url = settings.base_url.rstrip("/")
        settings.log_level = settings.log_level.upper()
        return settings
