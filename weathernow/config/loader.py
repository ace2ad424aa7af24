"""YAML config loader with environment overrides and dotted-key lookup."""

import json
import logging
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from weathernow.config.schema import AppConfig, DisplayConfig

logger = logging.getLogger(__name__)

ENV_API_KEY = "OPENWEATHER_API_KEY"
ENV_BASE_URL = "OPENWEATHER_BASE_URL"


class ConfigError(Exception):
    """Raised when the config file is missing or unreadable."""


def load_config(
    path: str | Path | None = None, environ: dict[str, str] | None = None
) -> AppConfig:
    """Load and validate config from a YAML file.

    Without a path, starts from defaults. OPENWEATHER_API_KEY and
    OPENWEATHER_BASE_URL override the provider section when set.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")

    env = os.environ if environ is None else environ
    provider = raw.setdefault("provider", {}) or {}
    raw["provider"] = provider
    if env.get(ENV_API_KEY):
        provider["api_key"] = env[ENV_API_KEY]
    if env.get(ENV_BASE_URL):
        provider["base_url"] = env[ENV_BASE_URL]

    config = AppConfig(**raw)
    if not config.provider.api_key:
        logger.warning("No API key configured; set %s", ENV_API_KEY)
    return config


def resolve_timezone(display: DisplayConfig) -> ZoneInfo | None:
    """Zone used for date bucketing and labels. None means local time."""
    if display.timezone is None:
        return None
    try:
        return ZoneInfo(display.timezone)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ConfigError(f"Unknown timezone: {display.timezone}") from e


def get_config_value(config: AppConfig | dict, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'display.max_days'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if isinstance(obj, dict) and part in obj:
            obj = obj[part]
        elif not isinstance(obj, dict) and hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def redacted_dict(config: AppConfig) -> dict:
    """Config as plain data with the API key masked."""
    data = json.loads(config.model_dump_json())
    key = data["provider"]["api_key"]
    if key:
        data["provider"]["api_key"] = key[:4] + "*" * max(len(key) - 4, 0)
    return data


def redacted_json(config: AppConfig) -> str:
    return json.dumps(redacted_dict(config), indent=2)
