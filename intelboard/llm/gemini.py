"""Google Gemini provider over the Generative Language REST API."""

from __future__ import annotations

import logging

import httpx

from intelboard.errors import RemoteServiceError
from intelboard.llm import register_provider
from intelboard.llm.base import BaseLLMProvider, LLMRequest, LLMResponse
from intelboard.models import GroundingChunk, WebSource

logger = logging.getLogger(__name__)


def _error_from_response(resp: httpx.Response) -> RemoteServiceError:
    """Build a RemoteServiceError from a non-2xx Gemini response."""
    status = resp.status_code
    message = resp.text[:500]
    try:
        body = resp.json()
    except ValueError:
        body = {}
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err:
        message = f"{err.get('status', '')} {err.get('message', '')}".strip()
        if err.get("status") == "RESOURCE_EXHAUSTED":
            status = 429
    return RemoteServiceError(status, message)


def _parse_grounding(candidate: dict) -> list[GroundingChunk]:
    chunks = candidate.get("groundingMetadata", {}).get("groundingChunks") or []
    result = []
    for chunk in chunks:
        web = chunk.get("web")
        if web is None:
            result.append(GroundingChunk())
        else:
            result.append(GroundingChunk(web=WebSource(uri=web.get("uri"), title=web.get("title"))))
    return result


@register_provider("gemini")
class GeminiProvider(BaseLLMProvider):
    """Provider for Gemini models (structured output and Google Search grounding)."""

    @property
    def provider_name(self) -> str:
        return "gemini"

    def build_payload(self, request: LLMRequest) -> dict:
        generation_config = {
            "temperature": request.temperature,
            "maxOutputTokens": request.max_tokens,
        }
        if request.response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = request.response_schema

        payload = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        if request.system:
            payload["systemInstruction"] = {"parts": [{"text": request.system}]}
        if request.web_search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    async def generate(self, request: LLMRequest, model: str | None = None) -> LLMResponse:
        model = model or self.active_model or self.default_model
        url = f"{self.base_url.rstrip('/')}/models/{model}:generateContent"
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(url, json=self.build_payload(request), headers=headers)
            if resp.status_code >= 400:
                raise _error_from_response(resp)
            data = resp.json()

        candidates = data.get("candidates") or []
        candidate = candidates[0] if candidates else {}
        parts = candidate.get("content", {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)
        if not candidates:
            logger.warning("Gemini returned no candidates for %s", request.task)

        usage = data.get("usageMetadata", {})
        response = LLMResponse(
            text=text,
            grounding=_parse_grounding(candidate),
            input_tokens=usage.get("promptTokenCount", 0),
            output_tokens=usage.get("candidatesTokenCount", 0),
            model=model,
        )
        self._log_usage(request, response)
        return response
