"""Anthropic Claude LLM provider."""

from __future__ import annotations

import json
import logging

import anthropic

from intelboard.errors import RemoteServiceError
from intelboard.llm import register_provider
from intelboard.llm.base import BaseLLMProvider, LLMRequest, LLMResponse
from intelboard.llm.prompts import JSON_SCHEMA_SUFFIX
from intelboard.models import GroundingChunk, WebSource

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


def _collect_citations(content) -> list[GroundingChunk]:
    """Turn web search citations on text blocks into grounding chunks."""
    seen = set()
    chunks = []
    for block in content:
        for citation in getattr(block, "citations", None) or []:
            if getattr(citation, "type", "") != "web_search_result_location":
                continue
            if citation.url in seen:
                continue
            seen.add(citation.url)
            chunks.append(GroundingChunk(web=WebSource(uri=citation.url, title=citation.title)))
    return chunks


@register_provider("anthropic")
class AnthropicProvider(BaseLLMProvider):
    """Provider for Anthropic Claude models."""

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def generate(self, request: LLMRequest, model: str | None = None) -> LLMResponse:
        model = model or self.active_model or self.default_model
        # Retries are handled by RetryPolicy, not the SDK
        client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)

        prompt = request.prompt
        if request.response_schema is not None:
            prompt += JSON_SCHEMA_SUFFIX.format(
                schema=json.dumps(request.response_schema, indent=2, ensure_ascii=False),
            )

        kwargs = {
            "model": model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if request.system:
            kwargs["system"] = request.system
        if request.web_search:
            kwargs["tools"] = [WEB_SEARCH_TOOL]

        try:
            response = await client.messages.create(**kwargs)
        except anthropic.APIStatusError as exc:
            raise RemoteServiceError(exc.status_code, exc.message) from exc

        content = response.content or []
        text = "".join(b.text for b in content if getattr(b, "type", "") == "text")

        result = LLMResponse(
            text=text,
            grounding=_collect_citations(content) if request.web_search else [],
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=model,
        )
        self._log_usage(request, result)
        return result
