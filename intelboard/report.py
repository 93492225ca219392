"""Format dashboard results as plain text for the terminal."""

from __future__ import annotations

from intelboard.models import (
    DataFeed,
    EntityDossier,
    IntelligencePackage,
    VerificationResult,
    WorkflowStage,
)

SENTIMENT_BADGE = {
    "Positive": "[+]",
    "Negative": "[-]",
    "Neutral": "[=]",
}

STATUS_BADGE = {
    "pending": "..",
    "running": ">>",
    "success": "ok",
    "failed": "!!",
}


def format_package(package: IntelligencePackage) -> str:
    lines = ["NEWS STREAM", "=" * 60]
    for i, a in enumerate(package.articles):
        badge = SENTIMENT_BADGE.get(a.sentiment, "[?]")
        lines.append(f"{i:>2}. {badge} {a.headline}")
        lines.append(f"    {a.summary}")
        lines.append(
            f"    {a.topic} | {a.region} | {a.source_name} "
            f"(credibility {a.credibility_score:.0f}) | {a.timestamp}"
        )

    graph = package.graph
    lines += ["", f"CONNECTIONS GRAPH ({len(graph.nodes)} nodes, {len(graph.links)} links)", "=" * 60]
    for node in graph.nodes:
        suffix = f" {SENTIMENT_BADGE.get(node.sentiment, '')}" if node.sentiment else ""
        lines.append(f"  ({node.group}) {node.id}{suffix}")
    for link in graph.links:
        lines.append(f"  {link.source} -> {link.target} [{link.value:g}]")
    return "\n".join(lines)


def format_verification(result: VerificationResult) -> str:
    lines = ["VERIFICATION", "=" * 60, result.analysis.strip()]
    if result.sources:
        lines += ["", "Sources:"]
        for chunk in result.sources:
            if chunk.web is None:
                continue
            title = chunk.web.title or chunk.web.uri or "untitled"
            uri = f" <{chunk.web.uri}>" if chunk.web.uri else ""
            lines.append(f"  - {title}{uri}")
    return "\n".join(lines)


def format_dossier(entity_id: str, dossier: EntityDossier) -> str:
    sa = dossier.sentiment_analysis
    lines = [f"DOSSIER: {entity_id}", "=" * 60, dossier.summary.strip(), ""]
    if dossier.connections:
        lines.append("Connections: " + ", ".join(dossier.connections))
    lines.append(f"Sentiment: {sa.overall} (confidence: {sa.confidence_score})")
    for point in sa.positive_points:
        lines.append(f"  + {point}")
    for point in sa.negative_points:
        lines.append(f"  - {point}")
    lines.append(f"Reasoning: {sa.reasoning}")
    return "\n".join(lines)


def format_briefing(text: str) -> str:
    return "\n".join(["DAILY BRIEFING", "=" * 60, text.strip()])


def format_feeds(feeds: list[DataFeed]) -> str:
    lines = []
    for feed in feeds:
        mark = "x" if feed.enabled else " "
        lines.append(f"[{mark}] {feed.id:<20} {feed.name}")
        if feed.description:
            lines.append(f"    {feed.description}")
    return "\n".join(lines)


def format_workflow(workflow: dict[str, WorkflowStage]) -> str:
    return "\n".join(
        f"  {STATUS_BADGE.get(stage.status, '??')} {stage.name}" for stage in workflow.values()
    )
