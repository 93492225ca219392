"""Capability entry points: retry policy + request builder + response validator.

All four functions are stateless and reentrant. They do not serialize calls;
callers that share a rate-limited key must gate them (see Dashboard).
"""

from __future__ import annotations

import logging
from typing import Sequence

from intelboard.builders import (
    build_briefing_request,
    build_entity_dossier_request,
    build_intelligence_package_request,
    build_verification_request,
    select_relevant_articles,
)
from intelboard.config import get_items_per_package, get_language, get_retry_config
from intelboard.llm import get_provider_for_task
from intelboard.models import EntityDossier, IntelligencePackage, NewsArticle, VerificationResult
from intelboard.retry import RetryPolicy
from intelboard.validators import (
    NO_ARTICLES_BRIEFING,
    empty_dossier,
    parse_briefing,
    parse_entity_dossier,
    parse_intelligence_package,
    parse_verification,
)

logger = logging.getLogger(__name__)


def build_retry_policy(config: dict) -> RetryPolicy:
    return RetryPolicy(**get_retry_config(config))


async def generate_intelligence_package(
    config: dict,
    active_feeds: Sequence[str],
    policy: RetryPolicy | None = None,
) -> IntelligencePackage:
    """Generate a news stream and its connections graph in one call.

    Raises RemoteServiceError once retries are exhausted and
    MalformedResponse when the payload is structurally incomplete.
    """
    provider = get_provider_for_task(config, "package")
    model = provider.active_model

    async def _attempt() -> IntelligencePackage:
        request = build_intelligence_package_request(
            active_feeds,
            count=get_items_per_package(config),
            language=get_language(config),
        )
        response = await provider.generate(request, model=model)
        return parse_intelligence_package(response.text).unwrap()

    package = await (policy or build_retry_policy(config)).run(_attempt)
    logger.info(
        "Intelligence package: %d articles, %d nodes, %d links",
        len(package.articles), len(package.graph.nodes), len(package.graph.links),
    )
    return package


async def verify_news(
    config: dict,
    article: NewsArticle,
    policy: RetryPolicy | None = None,
) -> VerificationResult:
    """Fact-check an article with web-search grounding."""
    provider = get_provider_for_task(config, "verify")
    model = provider.active_model

    async def _attempt() -> VerificationResult:
        request = build_verification_request(article, language=get_language(config))
        response = await provider.generate(request, model=model)
        return parse_verification(response)

    result = await (policy or build_retry_policy(config)).run(_attempt)
    logger.info("Verified article %s with %d sources", article.id, len(result.sources))
    return result


async def generate_daily_briefing(
    config: dict,
    headlines: str,
    policy: RetryPolicy | None = None,
) -> str:
    """Synthesize a daily briefing from newline-joined headlines.

    Empty input returns a canned message without contacting the service.
    """
    request = build_briefing_request(headlines, language=get_language(config))
    if request is None:
        logger.info("No headlines for briefing, skipping remote call")
        return NO_ARTICLES_BRIEFING

    provider = get_provider_for_task(config, "briefing")
    model = provider.active_model

    async def _attempt() -> str:
        response = await provider.generate(request, model=model)
        return parse_briefing(response)

    return await (policy or build_retry_policy(config)).run(_attempt)


async def generate_entity_dossier(
    config: dict,
    entity_id: str,
    articles: Sequence[NewsArticle],
    policy: RetryPolicy | None = None,
) -> EntityDossier:
    """Build a dossier for an entity from the articles that mention it.

    When no article mentions the entity a canned empty dossier is returned
    without contacting the service.
    """
    relevant = select_relevant_articles(entity_id, articles)
    request = build_entity_dossier_request(entity_id, relevant, language=get_language(config))
    if request is None:
        logger.info("No articles mention %r, returning empty dossier", entity_id)
        return empty_dossier(entity_id)

    provider = get_provider_for_task(config, "dossier")
    model = provider.active_model

    async def _attempt() -> EntityDossier:
        response = await provider.generate(request, model=model)
        return parse_entity_dossier(response.text).unwrap()

    dossier = await (policy or build_retry_policy(config)).run(_attempt)
    logger.info("Dossier for %r from %d articles", entity_id, len(relevant))
    return dossier
