"""Pure request builders: one per capability.

Builders never touch the network. Where a capability has a short-circuit
(empty briefing context, no relevant dossier articles) the builder returns
``None`` and the caller answers without contacting the service.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from intelboard.config import DEFAULT_ITEMS_PER_PACKAGE, DEFAULT_LANGUAGE
from intelboard.llm.base import LLMRequest
from intelboard.llm.prompts import (
    DAILY_BRIEFING,
    ENTITY_DOSSIER,
    INTELLIGENCE_PACKAGE,
    SYSTEM_ANALYST,
    VERIFY_NEWS,
)
from intelboard.llm.schemas import ENTITY_DOSSIER_SCHEMA, INTELLIGENCE_PACKAGE_SCHEMA
from intelboard.models import NewsArticle

DEFAULT_TOPIC = "global events"


def feed_topics(active_feed_names: Iterable[str]) -> str:
    """Comma-joined feed names, or the default topic when none are active."""
    names = [name.strip() for name in active_feed_names if name and name.strip()]
    return ", ".join(names) if names else DEFAULT_TOPIC


def build_intelligence_package_request(
    active_feed_names: Sequence[str],
    count: int = DEFAULT_ITEMS_PER_PACKAGE,
    language: str = DEFAULT_LANGUAGE,
) -> LLMRequest:
    prompt = INTELLIGENCE_PACKAGE.format(
        language=language,
        count=count,
        feeds=feed_topics(active_feed_names),
    )
    return LLMRequest(
        task="package",
        prompt=prompt,
        system=SYSTEM_ANALYST,
        response_schema=INTELLIGENCE_PACKAGE_SCHEMA,
    )


def build_verification_request(
    article: NewsArticle,
    language: str = DEFAULT_LANGUAGE,
) -> LLMRequest:
    prompt = VERIFY_NEWS.format(
        language=language,
        headline=article.headline,
        summary=article.summary,
    )
    return LLMRequest(task="verify", prompt=prompt, web_search=True)


def headlines_context(articles: Iterable[NewsArticle]) -> str:
    """Newline-joined headlines, the compact context sent for a briefing."""
    return "\n".join(a.headline for a in articles)


def build_briefing_request(
    headlines: str,
    language: str = DEFAULT_LANGUAGE,
) -> LLMRequest | None:
    if not headlines or not headlines.strip():
        return None
    prompt = DAILY_BRIEFING.format(language=language, headlines=headlines)
    return LLMRequest(task="briefing", prompt=prompt, system=SYSTEM_ANALYST)


def select_relevant_articles(
    entity_id: str, articles: Iterable[NewsArticle]
) -> list[NewsArticle]:
    """Articles whose headline or summary contains ``entity_id`` verbatim (case-sensitive)."""
    return [a for a in articles if entity_id in a.headline or entity_id in a.summary]


def build_entity_dossier_request(
    entity_id: str,
    relevant_articles: Sequence[NewsArticle],
    language: str = DEFAULT_LANGUAGE,
) -> LLMRequest | None:
    if not relevant_articles:
        return None
    context = "\n".join(f"- {a.headline}: {a.summary}" for a in relevant_articles)
    prompt = ENTITY_DOSSIER.format(language=language, entity=entity_id, context=context)
    return LLMRequest(
        task="dossier",
        prompt=prompt,
        system=SYSTEM_ANALYST,
        response_schema=ENTITY_DOSSIER_SCHEMA,
    )
