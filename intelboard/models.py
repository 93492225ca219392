"""Core data models for the intelligence dashboard."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

SENTIMENTS = ("Positive", "Negative", "Neutral")
CONFIDENCE_LEVELS = ("High", "Medium", "Low")


@dataclass(frozen=True)
class NewsArticle:
    """A single generated news item."""

    id: str
    headline: str
    summary: str
    topic: str
    region: str
    sentiment: str  # Positive, Negative, Neutral
    source_name: str
    credibility_score: float  # 0-100
    timestamp: str  # ISO 8601

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GraphNode:
    """An entity or topic in the connections graph."""

    id: str
    group: str  # topic, person, organization, location
    sentiment: str | None = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "group": self.group}
        if self.sentiment is not None:
            data["sentiment"] = self.sentiment
        return data


@dataclass(frozen=True)
class GraphLink:
    """A reported interaction between two nodes."""

    source: str
    target: str
    value: float = 1

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GraphData:
    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


@dataclass(frozen=True)
class IntelligencePackage:
    """News stream plus the connections graph built from it."""

    articles: list[NewsArticle]
    graph: GraphData


@dataclass(frozen=True)
class WebSource:
    uri: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class GroundingChunk:
    """A citation returned alongside a web-search response."""

    web: WebSource | None = None

    def to_dict(self) -> dict:
        if self.web is None:
            return {}
        web = {k: v for k, v in asdict(self.web).items() if v is not None}
        return {"web": web}


@dataclass(frozen=True)
class VerificationResult:
    analysis: str
    sources: list[GroundingChunk] = field(default_factory=list)


@dataclass(frozen=True)
class SentimentAnalysis:
    """Multi-faceted sentiment block of an entity dossier."""

    overall: str
    positive_points: list[str]
    negative_points: list[str]
    confidence_score: str  # High, Medium, Low
    reasoning: str


@dataclass(frozen=True)
class EntityDossier:
    summary: str
    connections: list[str]
    sentiment_analysis: SentimentAnalysis

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DataFeed:
    """A selectable intelligence feed whose name is sent to the generator."""

    id: str
    name: str
    description: str = ""
    enabled: bool = True


@dataclass
class WorkflowStage:
    name: str
    status: str = "pending"  # pending, running, success, failed
