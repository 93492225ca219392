"""Load configuration from YAML with .env loading and env var substitution."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml

from intelboard.models import DataFeed

DEFAULT_PROVIDER = "gemini"
DEFAULT_LANGUAGE = "English"
DEFAULT_ITEMS_PER_PACKAGE = 10

TASK_DEFAULT_MODELS = {
    "package": "gemini-2.5-flash",
    "verify": "gemini-2.5-flash",
    "briefing": "gemini-2.5-pro",
    "dossier": "gemini-2.5-flash",
}

PROVIDER_DEFAULTS = {
    "gemini": {
        "type": "gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "api_key_env": ("GEMINI_API_KEY", "API_KEY"),
    },
    "anthropic": {
        "type": "anthropic",
        "base_url": "",
        "api_key_env": ("ANTHROPIC_API_KEY",),
    },
}

DEFAULT_FEEDS = [
    DataFeed("global_wires", "Global news wires",
             "Breaking news from reputable international news agencies."),
    DataFeed("social_media", "Social media trends",
             "Sentiment and trending topics from social platforms."),
    DataFeed("financial_markets", "Financial market data",
             "Economic reports and their impact on global markets."),
    DataFeed("cyber_security", "Cyber security alerts",
             "New threats and vulnerabilities."),
    DataFeed("dark_web", "Dark web monitoring",
             "Emerging threats and illicit activity."),
    DataFeed("satellite_imagery", "Satellite imagery analysis",
             "Geopolitical and environmental change detection."),
    DataFeed("govt_publications", "Government publications",
             "Policies, reports and official statements."),
    DataFeed("shipping_logs", "Maritime shipping tracking",
             "Supply chains and global trade activity."),
]


def _load_dotenv(path: str | Path = ".env") -> None:
    """Load a .env file into os.environ (without overwriting existing vars)."""
    env_path = Path(path)
    if not env_path.is_file():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and key not in os.environ:
                os.environ[key] = value


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ${ENV_VAR} patterns in config values."""
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")
        match = pattern.search(value)
        if match:
            env_key = match.group(1)
            env_val = os.environ.get(env_key, "")
            # If the entire string is a single env var, return the resolved value
            if match.group(0) == value:
                return env_val
            return pattern.sub(lambda m: os.environ.get(m.group(1), ""), value)
        return value
    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def load_config(path: str | Path = "config.yaml", required: bool = True) -> dict[str, Any]:
    """Load config from YAML file and resolve environment variables.

    With ``required=False`` a missing file yields an empty config so that
    every accessor falls back to its defaults.
    """
    _load_dotenv()

    path = Path(path)
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return _resolve_env_vars(raw)


def _env_api_key(provider_type: str) -> str:
    for env_key in PROVIDER_DEFAULTS.get(provider_type, {}).get("api_key_env", ()):
        value = os.environ.get(env_key)
        if value:
            return value
    return ""


def get_llm_task_config(config: dict, task: str) -> dict:
    """Get provider settings and model for a capability task."""
    tasks = config.get("llm", {}).get("tasks", {})
    task_cfg = tasks.get(task, {})
    provider_name = task_cfg.get("provider", DEFAULT_PROVIDER)

    providers = config.get("llm", {}).get("providers", {})
    provider_cfg = providers.get(provider_name, {})
    provider_type = provider_cfg.get("type", provider_name)
    defaults = PROVIDER_DEFAULTS.get(provider_type, {})

    model = task_cfg.get("model") or provider_cfg.get("default_model")
    if not model and provider_type == "gemini":
        model = TASK_DEFAULT_MODELS.get(task, TASK_DEFAULT_MODELS["package"])

    return {
        "provider_name": provider_name,
        "provider_type": provider_type,
        "api_key": provider_cfg.get("api_key") or _env_api_key(provider_type),
        "base_url": provider_cfg.get("base_url", defaults.get("base_url", "")),
        "model": model or "",
        "timeout": provider_cfg.get("timeout", 120),
    }


def get_retry_config(config: dict) -> dict:
    """Retry policy settings (delays in seconds)."""
    retry = config.get("retry", {})
    return {
        "max_attempts": int(retry.get("max_attempts", 3)),
        "initial_delay": float(retry.get("initial_delay", 1.0)),
    }


def get_feeds(config: dict) -> list[DataFeed]:
    """Return configured data feeds, or the built-in defaults."""
    feeds = config.get("feeds")
    if not feeds:
        return list(DEFAULT_FEEDS)
    return [
        DataFeed(
            id=f["id"],
            name=f.get("name", f["id"]),
            description=f.get("description", ""),
            enabled=f.get("enabled", True),
        )
        for f in feeds
    ]


def get_active_feed_names(config: dict) -> list[str]:
    """Return names of enabled feeds."""
    return [f.name for f in get_feeds(config) if f.enabled]


def get_language(config: dict) -> str:
    return config.get("pipeline", {}).get("language", DEFAULT_LANGUAGE)


def get_items_per_package(config: dict) -> int:
    return int(config.get("pipeline", {}).get("items_per_package", DEFAULT_ITEMS_PER_PACKAGE))


def get_log_dir(config: dict) -> str:
    return config.get("logging", {}).get("dir", "data")
