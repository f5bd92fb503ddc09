"""YAML config loader with environment fallback for the API key."""

import os
from pathlib import Path
from typing import Any

import yaml

from weatherapp.config.defaults import API_KEY_ENV_VAR
from weatherapp.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If the YAML leaves
    provider.api_key empty, OPENWEATHER_API_KEY is used instead.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    provider = raw.setdefault("provider", {}) or {}
    raw["provider"] = provider
    if not provider.get("api_key"):
        env_key = os.environ.get(API_KEY_ENV_VAR, "")
        if env_key:
            provider["api_key"] = env_key

    return AppConfig(**raw)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'provider.units'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def redacted(config: AppConfig) -> AppConfig:
    """Copy of the config with the API key masked."""
    return config.model_copy(
        update={
            "provider": config.provider.model_copy(
                update={"api_key": "***" if config.provider.api_key else ""}
            )
        }
    )


def redacted_json(config: AppConfig) -> str:
    """Config as indented JSON with the API key masked."""
    return redacted(config).model_dump_json(indent=2)
