"""Request/response types and the abstract base class for LLM providers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from intelboard.models import GroundingChunk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMRequest:
    """A structured request for one capability.

    Either ``response_schema`` (JSON output) or ``web_search`` (grounded free
    text) may be set; plain requests use neither.
    """

    task: str
    prompt: str
    system: str = ""
    response_schema: dict | None = None
    web_search: bool = False
    temperature: float = 0.3
    max_tokens: int = 8192


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    text: str
    grounding: list[GroundingChunk] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""


class BaseLLMProvider(ABC):
    """Base class for LLM providers.

    ``generate`` performs exactly one remote call. Failures are raised as
    RemoteServiceError so the retry policy can classify them.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        default_model: str,
        timeout: int = 120,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.default_model = default_model
        self.active_model = default_model
        self.timeout = timeout

    @abstractmethod
    async def generate(self, request: LLMRequest, model: str | None = None) -> LLMResponse:
        """Send a single request and return the response."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name."""
        ...

    def _log_usage(self, request: LLMRequest, response: LLMResponse) -> None:
        logger.debug(
            "%s/%s %s: %d in, %d out tokens",
            self.provider_name, response.model, request.task,
            response.input_tokens, response.output_tokens,
        )
