"""Parse and validate remote responses into domain objects.

Each parser returns a tagged ``Parsed`` result instead of raising on the first
shape mismatch, so the failure points stay enumerable. ``Parsed.unwrap()``
turns a failure into MalformedResponse.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

from intelboard.errors import MalformedResponse
from intelboard.llm.base import LLMResponse
from intelboard.llm.schemas import ARTICLE_FIELDS
from intelboard.models import (
    CONFIDENCE_LEVELS,
    SENTIMENTS,
    EntityDossier,
    GraphData,
    GraphLink,
    GraphNode,
    IntelligencePackage,
    NewsArticle,
    SentimentAnalysis,
    VerificationResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NO_ARTICLES_BRIEFING = "There are no articles to prepare a briefing from."
NO_DATA_REASONING = "No data available for analysis."


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Either a parsed value or the reason parsing failed."""

    task: str
    value: T | None = None
    error: str | None = None
    raw: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            logger.warning("Malformed %s response: %s", self.task, self.error)
            raise MalformedResponse(self.task, self.error, raw=self.raw)
        return self.value  # type: ignore[return-value]


class _Invalid(Exception):
    """Internal signal for a failed field check."""


def _normalize_quotes(text: str) -> str:
    """Replace smart/curly quotes with straight quotes for JSON parsing."""
    return (
        text
        .replace("\u201c", '"')   # left double quote
        .replace("\u201d", '"')   # right double quote
        .replace("\u2018", "'")   # left single quote
        .replace("\u2019", "'")   # right single quote
    )


def _try_parse(text: str) -> Any:
    """Try json.loads with and without quote normalization."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        pass
    try:
        return json.loads(_normalize_quotes(text))
    except (json.JSONDecodeError, ValueError):
        pass
    return None


def extract_json(text: str) -> dict | None:
    """Extract a JSON object from output that may contain markdown fences or extra text."""
    if not text:
        return None
    result = _try_parse(text)
    if isinstance(result, dict):
        return result

    fenced = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if fenced:
        result = _try_parse(fenced.group(1))
        if isinstance(result, dict):
            return result

    brace = re.search(r"\{.*\}", text, re.DOTALL)
    if brace:
        result = _try_parse(brace.group(0))
        if isinstance(result, dict):
            return result

    return None


def _require_str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise _Invalid(f"{where}: '{key}' must be a string")
    return value


def _require_str_list(obj: dict, key: str, where: str) -> list[str]:
    value = obj.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _Invalid(f"{where}: '{key}' must be a list of strings")
    return list(value)


def _require_number(obj: dict, key: str, where: str) -> float:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _Invalid(f"{where}: '{key}' must be a number")
    return value


def epoch_millis(timestamp: str) -> int:
    """Milliseconds since the epoch for an ISO 8601 timestamp (naive = UTC)."""
    dt = datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(milliseconds=1)


def article_id(timestamp: str, index: int) -> str:
    """Batch-unique article id: ``{epoch_ms}-{position}``."""
    return f"{epoch_millis(timestamp)}-{index}"


def _normalize_sentiment(value: str) -> str:
    for sentiment in SENTIMENTS:
        if value.strip().lower() == sentiment.lower():
            return sentiment
    return "Neutral"


def _parse_article(item: Any, index: int) -> NewsArticle:
    where = f"news_stream[{index}]"
    if not isinstance(item, dict):
        raise _Invalid(f"{where} must be an object")
    missing = [f for f in ARTICLE_FIELDS if f not in item]
    if missing:
        raise _Invalid(f"{where} missing fields: {', '.join(missing)}")

    timestamp = _require_str(item, "timestamp", where)
    try:
        item_id = article_id(timestamp, index)
    except ValueError:
        raise _Invalid(f"{where}: invalid timestamp {timestamp!r}") from None

    score = _require_number(item, "credibility_score", where)
    return NewsArticle(
        id=item_id,
        headline=_require_str(item, "headline", where),
        summary=_require_str(item, "summary", where),
        topic=_require_str(item, "topic", where),
        region=_require_str(item, "region", where),
        sentiment=_normalize_sentiment(_require_str(item, "sentiment", where)),
        source_name=_require_str(item, "source_name", where),
        credibility_score=min(max(score, 0), 100),
        timestamp=timestamp,
    )


def _parse_graph(graph: Any) -> GraphData:
    if not isinstance(graph, dict):
        raise _Invalid("connections_graph must be an object")
    nodes = graph.get("nodes")
    links = graph.get("links")
    if not isinstance(nodes, list):
        raise _Invalid("connections_graph.nodes missing or not a list")
    if not isinstance(links, list):
        raise _Invalid("connections_graph.links missing or not a list")

    parsed_nodes = []
    for i, node in enumerate(nodes):
        where = f"nodes[{i}]"
        if not isinstance(node, dict):
            raise _Invalid(f"{where} must be an object")
        sentiment = node.get("sentiment")
        parsed_nodes.append(GraphNode(
            id=_require_str(node, "id", where),
            group=_require_str(node, "group", where),
            sentiment=sentiment if isinstance(sentiment, str) else None,
        ))

    parsed_links = []
    for i, link in enumerate(links):
        where = f"links[{i}]"
        if not isinstance(link, dict):
            raise _Invalid(f"{where} must be an object")
        value = link.get("value", 1)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _Invalid(f"{where}: 'value' must be a number")
        parsed_links.append(GraphLink(
            source=_require_str(link, "source", where),
            target=_require_str(link, "target", where),
            value=value,
        ))

    return GraphData(nodes=parsed_nodes, links=parsed_links)


def parse_intelligence_package(text: str) -> Parsed[IntelligencePackage]:
    """Validate a package payload and synthesize article ids.

    The graph is passed through as returned; referential integrity of links
    is left to the renderer.
    """
    data = extract_json(text)
    if data is None:
        return Parsed("package", error="response is not a JSON object", raw=text)
    if not isinstance(data.get("news_stream"), list):
        return Parsed("package", error="'news_stream' missing or not a list", raw=text)
    if "connections_graph" not in data:
        return Parsed("package", error="'connections_graph' missing", raw=text)

    try:
        articles = [_parse_article(item, i) for i, item in enumerate(data["news_stream"])]
        graph = _parse_graph(data["connections_graph"])
    except _Invalid as exc:
        return Parsed("package", error=str(exc), raw=text)

    return Parsed("package", value=IntelligencePackage(articles=articles, graph=graph))


def parse_verification(response: LLMResponse) -> VerificationResult:
    """Free-text analysis plus grounding sources (absent sources -> empty list)."""
    return VerificationResult(
        analysis=response.text or "",
        sources=list(response.grounding or []),
    )


def parse_briefing(response: LLMResponse) -> str:
    return response.text


def _normalize_confidence(value: str) -> str:
    for level in CONFIDENCE_LEVELS:
        if value.strip().lower() == level.lower():
            return level
    raise _Invalid(f"sentiment_analysis: unknown confidence_score {value!r}")


def parse_entity_dossier(text: str) -> Parsed[EntityDossier]:
    data = extract_json(text)
    if data is None:
        return Parsed("dossier", error="response is not a JSON object", raw=text)

    try:
        block = data.get("sentiment_analysis")
        if not isinstance(block, dict):
            raise _Invalid("'sentiment_analysis' missing or not an object")
        where = "sentiment_analysis"
        sentiment = SentimentAnalysis(
            overall=_require_str(block, "overall", where),
            positive_points=_require_str_list(block, "positive_points", where),
            negative_points=_require_str_list(block, "negative_points", where),
            confidence_score=_normalize_confidence(_require_str(block, "confidence_score", where)),
            reasoning=_require_str(block, "reasoning", where),
        )
        dossier = EntityDossier(
            summary=_require_str(data, "summary", "dossier"),
            connections=_require_str_list(data, "connections", "dossier"),
            sentiment_analysis=sentiment,
        )
    except _Invalid as exc:
        return Parsed("dossier", error=str(exc), raw=text)

    return Parsed("dossier", value=dossier)


def empty_dossier(entity_id: str) -> EntityDossier:
    """Canned dossier returned when no article mentions the entity."""
    return EntityDossier(
        summary=f'No direct information about "{entity_id}" was found in the current news stream.',
        connections=[],
        sentiment_analysis=SentimentAnalysis(
            overall="neutral",
            positive_points=[],
            negative_points=[],
            confidence_score="High",
            reasoning=NO_DATA_REASONING,
        ),
    )
