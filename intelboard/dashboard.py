"""Caller-side application state for the dashboard.

The capability functions in ``intelboard.service`` are stateless and do not
serialize themselves. The remote service is rate-limited per key, so the
dashboard owns a single capacity-1 gate: every action waits for the previous
one to finish instead of aborting it.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace

from intelboard import service
from intelboard.builders import headlines_context
from intelboard.config import get_feeds
from intelboard.errors import ConfigError, MalformedResponse
from intelboard.models import (
    DataFeed,
    EntityDossier,
    GraphData,
    GraphNode,
    IntelligencePackage,
    NewsArticle,
    VerificationResult,
    WorkflowStage,
)
from intelboard.retry import is_retryable

logger = logging.getLogger(__name__)

WORKFLOW_STAGES = {
    "extraction": "OSINT extraction",
    "ai_ml": "AI/ML processing",
    "knowledge_graph": "Knowledge graph database",
    "api_gateway": "API gateway",
}

RATE_LIMIT_MESSAGE = "Too many requests. Please wait a moment and try again."
MALFORMED_MESSAGE = "The AI service returned an invalid data structure."
PACKAGE_ERROR = "Failed to fetch the intelligence package. Please try again later."
VERIFY_ERROR = "Failed to verify the article. The AI service may be unavailable."
VERIFY_FAILED_ANALYSIS = "Error: verification could not be performed."
DOSSIER_ERROR = "Failed to generate the entity dossier. The AI service may not be responding."
BRIEFING_ERROR = "Failed to prepare the daily briefing. Please try again."


def initial_workflow() -> dict[str, WorkflowStage]:
    return {key: WorkflowStage(name=name) for key, name in WORKFLOW_STAGES.items()}


def error_message(exc: BaseException, default: str) -> str:
    """Map an error kind to the message shown to the user."""
    if isinstance(exc, MalformedResponse):
        return MALFORMED_MESSAGE
    if is_retryable(exc) and (
        getattr(exc, "status_code", None) == 429
        or "429" in str(exc)
        or "RESOURCE_EXHAUSTED" in str(exc)
    ):
        return RATE_LIMIT_MESSAGE
    return default


@dataclass
class DashboardState:
    feeds: list[DataFeed] = field(default_factory=list)
    articles: list[NewsArticle] = field(default_factory=list)
    graph: GraphData | None = None
    selected_article: NewsArticle | None = None
    selected_entity: GraphNode | None = None
    verification: VerificationResult | None = None
    dossier: EntityDossier | None = None
    briefing: str = ""
    error: str | None = None
    dossier_error: str | None = None
    workflow: dict[str, WorkflowStage] = field(default_factory=initial_workflow)
    busy: bool = False

    def active_feed_names(self) -> list[str]:
        return [f.name for f in self.feeds if f.enabled]


class Dashboard:
    """Owns DashboardState and serializes capability calls."""

    def __init__(self, config: dict, state: DashboardState | None = None):
        self.config = config
        self.state = state or DashboardState(feeds=get_feeds(config))
        self._gate = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._gate.locked()

    @asynccontextmanager
    async def _exclusive(self):
        async with self._gate:
            self.state.busy = True
            try:
                yield
            finally:
                self.state.busy = False

    def _set_stage(self, key: str, status: str) -> None:
        self.state.workflow[key].status = status

    def toggle_feed(self, feed_id: str) -> None:
        self.state.feeds = [
            replace(f, enabled=not f.enabled) if f.id == feed_id else f
            for f in self.state.feeds
        ]

    async def refresh(self) -> IntelligencePackage | None:
        """Replace the news stream and graph with a newly generated package."""
        async with self._exclusive():
            s = self.state
            s.error = None
            s.selected_article = None
            s.selected_entity = None
            s.verification = None
            s.dossier = None
            s.dossier_error = None
            s.articles = []
            s.graph = None
            s.workflow = initial_workflow()
            self._set_stage("extraction", "running")

            try:
                package = await service.generate_intelligence_package(
                    self.config, s.active_feed_names(),
                )
            except ConfigError:
                raise
            except Exception as exc:
                logger.exception("Intelligence package generation failed")
                s.error = error_message(exc, PACKAGE_ERROR)
                self._set_stage("extraction", "failed")
                return None

            s.articles = list(package.articles)
            s.graph = package.graph
            for key in WORKFLOW_STAGES:
                self._set_stage(key, "success")
            return package

    def select_article(self, article_id: str) -> NewsArticle | None:
        """Select an article; ignored while a call is in flight."""
        if self.busy:
            return None
        article = next((a for a in self.state.articles if a.id == article_id), None)
        if article is None:
            return None
        s = self.state
        s.selected_article = article
        s.selected_entity = None
        s.verification = None
        s.dossier = None
        s.dossier_error = None
        return article

    async def verify_selected(self) -> VerificationResult | None:
        """Fact-check the selected article (never triggered automatically)."""
        async with self._exclusive():
            s = self.state
            if s.selected_article is None:
                return None
            s.verification = None
            s.error = None
            try:
                s.verification = await service.verify_news(self.config, s.selected_article)
            except ConfigError:
                raise
            except Exception as exc:
                logger.exception("Verification failed for %s", s.selected_article.id)
                s.error = error_message(exc, VERIFY_ERROR)
                s.verification = VerificationResult(analysis=VERIFY_FAILED_ANALYSIS)
            return s.verification

    async def select_entity(self, node_id: str) -> EntityDossier | None:
        """Select a graph node and build its dossier from the current articles."""
        async with self._exclusive():
            s = self.state
            node = None
            if s.graph is not None:
                node = next((n for n in s.graph.nodes if n.id == node_id), None)
            s.selected_entity = node or GraphNode(id=node_id, group="")
            s.selected_article = None
            s.verification = None
            s.error = None
            s.dossier_error = None
            try:
                s.dossier = await service.generate_entity_dossier(
                    self.config, node_id, s.articles,
                )
            except ConfigError:
                raise
            except Exception as exc:
                logger.exception("Dossier generation failed for %r", node_id)
                s.error = s.dossier_error = error_message(exc, DOSSIER_ERROR)
                s.dossier = None
            return s.dossier

    async def generate_briefing(self) -> str:
        """Synthesize a briefing from the current headlines."""
        async with self._exclusive():
            s = self.state
            s.briefing = ""
            s.error = None
            try:
                s.briefing = await service.generate_daily_briefing(
                    self.config, headlines_context(s.articles),
                )
            except ConfigError:
                raise
            except Exception as exc:
                logger.exception("Daily briefing failed")
                s.briefing = error_message(exc, BRIEFING_ERROR)
            return s.briefing
