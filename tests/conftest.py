"""Shared test fixtures."""

from __future__ import annotations

import copy

import pytest

from intelboard.config import load_config
from intelboard.llm import clear_provider_cache
from intelboard.models import NewsArticle


@pytest.fixture(autouse=True)
def _fresh_providers():
    clear_provider_cache()
    yield
    clear_provider_cache()


@pytest.fixture
def sample_config(tmp_path, monkeypatch):
    """Minimal config for testing (no real API keys, no backoff wait)."""
    monkeypatch.setenv("TEST_GEMINI_KEY", "test-key")
    config_text = """
llm:
  providers:
    gemini:
      type: "gemini"
      api_key: "${TEST_GEMINI_KEY}"
      base_url: "http://localhost:9999/v1beta"
  tasks:
    package: { provider: "gemini" }
    verify: { provider: "gemini" }
    briefing: { provider: "gemini", model: "gemini-2.5-pro" }
    dossier: { provider: "gemini" }

retry:
  max_attempts: 3
  initial_delay: 0.0

pipeline:
  language: "English"
  items_per_package: 5

logging:
  dir: "LOG_DIR_PLACEHOLDER"
"""
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(config_text.replace("LOG_DIR_PLACEHOLDER", str(tmp_path)))
    return load_config(str(cfg_path))


@pytest.fixture
def sample_articles():
    """Articles as they come out of a generated package."""
    return [
        NewsArticle(
            id="1714557600000-0",
            headline="Acme Corp signs chip supply deal with Orion Labs",
            summary="Acme Corp agreed a five-year supply contract with Orion Labs.",
            topic="technology",
            region="North America",
            sentiment="Positive",
            source_name="Global Wire",
            credibility_score=90,
            timestamp="2024-05-01T10:00:00Z",
        ),
        NewsArticle(
            id="1714557600000-1",
            headline="Port strike halts container traffic in Rotterdam",
            summary="Dock workers walked out, stalling shipments bound for Acme Corp.",
            topic="economy",
            region="Europe",
            sentiment="Negative",
            source_name="Harbor Daily",
            credibility_score=75,
            timestamp="2024-05-01T10:00:00Z",
        ),
        NewsArticle(
            id="1714561200000-2",
            headline="Ministers meet to discuss climate funding",
            summary="Finance ministers met in Geneva to negotiate a new climate fund.",
            topic="politics",
            region="Europe",
            sentiment="Neutral",
            source_name="Policy Watch",
            credibility_score=82,
            timestamp="2024-05-01T11:00:00Z",
        ),
    ]


_PACKAGE_PAYLOAD = {
    "news_stream": [
        {
            "headline": f"Headline {i}",
            "summary": f"Summary of event {i} involving Entity {i}.",
            "topic": "technology",
            "region": "Asia",
            "sentiment": "Neutral",
            "source_name": "Global Wire",
            "credibility_score": 80 + i,
            "timestamp": "2024-05-01T10:00:00Z" if i < 2 else f"2024-05-01T1{i}:00:00Z",
        }
        for i in range(5)
    ],
    "connections_graph": {
        "nodes": [
            {"id": "technology", "group": "topic"},
            {"id": "Entity 0", "group": "organization", "sentiment": "Positive"},
            {"id": "Entity 1", "group": "person", "sentiment": "Negative"},
        ],
        "links": [
            {"source": "Entity 0", "target": "technology", "value": 1},
            {"source": "Entity 1", "target": "technology", "value": 1},
            {"source": "Entity 0", "target": "Entity 1", "value": 2},
        ],
    },
}


@pytest.fixture
def package_payload():
    """A well-formed package response with five items (first two share a timestamp)."""
    return copy.deepcopy(_PACKAGE_PAYLOAD)
