"""Tests for plain-text rendering and the CLI helpers."""

from __future__ import annotations

from intelboard.__main__ import cmd_feeds, missing_credentials
from intelboard.config import DEFAULT_FEEDS
from intelboard.dashboard import initial_workflow
from intelboard.models import (
    GraphData,
    GraphLink,
    GraphNode,
    GroundingChunk,
    IntelligencePackage,
    VerificationResult,
    WebSource,
)
from intelboard.report import (
    format_dossier,
    format_feeds,
    format_package,
    format_verification,
    format_workflow,
)
from intelboard.validators import empty_dossier


def test_format_package(sample_articles):
    package = IntelligencePackage(
        articles=sample_articles,
        graph=GraphData(
            nodes=[GraphNode("Acme Corp", "organization", "Positive"), GraphNode("technology", "topic")],
            links=[GraphLink("Acme Corp", "technology", 1)],
        ),
    )
    text = format_package(package)
    assert " 0. [+] Acme Corp signs chip supply deal with Orion Labs" in text
    assert "(credibility 90)" in text
    assert "2 nodes, 1 links" in text
    assert "Acme Corp -> technology [1]" in text


def test_format_verification_lists_sources():
    result = VerificationResult(
        analysis="Accurate.",
        sources=[
            GroundingChunk(web=WebSource(uri="https://a.example", title="A")),
            GroundingChunk(web=WebSource(uri="https://b.example")),
            GroundingChunk(),
        ],
    )
    text = format_verification(result)
    assert "  - A <https://a.example>" in text
    assert "  - https://b.example <https://b.example>" in text


def test_format_dossier():
    text = format_dossier("Acme", empty_dossier("Acme"))
    assert text.startswith("DOSSIER: Acme")
    assert "Sentiment: neutral (confidence: High)" in text


def test_format_feeds_and_workflow():
    text = format_feeds(DEFAULT_FEEDS)
    assert "[x] global_wires" in text
    workflow = initial_workflow()
    workflow["extraction"].status = "failed"
    assert "!! OSINT extraction" in format_workflow(workflow)


def test_cmd_feeds(capsys):
    assert cmd_feeds({}, []) == 0
    assert "Maritime shipping tracking" in capsys.readouterr().out


def test_missing_credentials(sample_config, monkeypatch):
    assert missing_credentials(sample_config) == []
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    assert missing_credentials({}) == ["package", "verify", "briefing", "dossier"]
