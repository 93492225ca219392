"""LLM provider registry and task routing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from intelboard.errors import ConfigError

if TYPE_CHECKING:
    from intelboard.llm.base import BaseLLMProvider

PROVIDERS: dict[str, type[BaseLLMProvider]] = {}

_provider_instances: dict[str, BaseLLMProvider] = {}


def register_provider(name: str):
    """Decorator to register an LLM provider."""

    def decorator(cls):
        PROVIDERS[name] = cls
        return cls

    return decorator


def get_provider_for_task(config: dict, task: str) -> BaseLLMProvider:
    """Get the configured LLM provider instance for a capability task.

    Raises ConfigError when the provider type is unknown or has no API key.
    """
    from intelboard.config import get_llm_task_config

    task_cfg = get_llm_task_config(config, task)
    provider_type = task_cfg["provider_type"]
    provider_name = task_cfg["provider_name"]
    model = task_cfg["model"]

    if not task_cfg["api_key"]:
        raise ConfigError(
            f"No API key configured for provider '{provider_name}' (task: {task})"
        )

    # Cache key is provider_name so we reuse connections
    cache_key = provider_name
    if cache_key not in _provider_instances:
        if provider_type not in PROVIDERS:
            raise ConfigError(f"Unknown LLM provider type: {provider_type}")
        cls = PROVIDERS[provider_type]
        _provider_instances[cache_key] = cls(
            api_key=task_cfg["api_key"],
            base_url=task_cfg["base_url"],
            default_model=model,
            timeout=task_cfg["timeout"],
        )

    provider = _provider_instances[cache_key]
    provider.active_model = model
    return provider


def clear_provider_cache() -> None:
    _provider_instances.clear()


# Import implementations to trigger registration
from intelboard.llm.anthropic_provider import AnthropicProvider  # noqa: E402, F401
from intelboard.llm.gemini import GeminiProvider  # noqa: E402, F401
