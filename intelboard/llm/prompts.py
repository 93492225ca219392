"""Prompt templates for all capability requests."""

SYSTEM_ANALYST = """You are an elite intelligence analyst working for an advanced OSINT platform.
Be precise, neutral and grounded in reported facts. Never present speculation as fact."""

INTELLIGENCE_PACKAGE = """\
Produce a complete intelligence package in {language}. The package has two \
parts, and both must be produced with great care.

PART 1: NEWS STREAM
Generate a diverse list of {count} very recent news items (from the past few \
hours) covering these intelligence areas: {feeds}.
For each item, follow these rules strictly:
- headline: strictly fact-based, plausible and verifiable, written in a \
neutral tone.
- summary: one concise, accurate sentence that states the core event, points \
to its significance and implications, and names the main actors.
- sentiment: reflect the overall tone of reporting on the event. For complex \
or contested events, use 'Neutral'.
- source_name and credibility_score: the source must be plausible for the item \
(e.g. an official news agency versus a social media rumor). The credibility \
score (0-100) must reflect the nature of the source: high for reputable \
sources, lower for unverified ones.
- timestamp: a recent ISO 8601 publication time.

PART 2: CONNECTIONS GRAPH
Build a knowledge graph based on, and ONLY on, the news items from part 1.
Follow these principles strictly:
- Nodes: define every key entity (people, organizations, places) and every \
main topic from the news as a node. Sentiment of person and organization \
nodes must reflect their overall portrayal across all related items in this \
package.
- Links: a link must represent a DIRECT, meaningful and REPORTED interaction, \
e.g. a diplomatic meeting, a trade agreement, a public accusation or a joint \
operation. Never create links from mere co-occurrence in the same item.
- Every entity must also link to the main topic node of the news item it \
comes from.
- Graph integrity: every node used in a link must exist in the node list.

The final output must be a single JSON object that exactly matches the \
provided schema and contains 'news_stream' and 'connections_graph'. Keep the \
sentiment values 'Positive', 'Negative' and 'Neutral' in English."""

VERIFY_NEWS = """\
Act as an impartial and meticulous fact-checker. Analyze this news claim and \
answer in {language}:
HEADLINE: "{headline}"
SUMMARY: "{summary}"

Your task:
1. Give a short, one-paragraph analysis of the accuracy and likely context of \
this news. Assess the credibility of the claim, look for common \
misinformation patterns, and reach a balanced conclusion.
2. Use web search to find reputable sources that confirm or refute this news."""

DAILY_BRIEFING = """\
As a senior intelligence strategist, prepare a daily intelligence briefing in \
{language}. Your input is the list of today's headlines:
{headlines}

Your analysis must be a high-level SYNTHESIS, not a mere summary.
- Key trends: identify the most important emerging trends.
- Hidden connections: find the links between seemingly unrelated events and \
explain how they influence each other.
- Implications: analyze the potential consequences of the most important events.
- Structure: the briefing must have an engaging introduction, an analytical \
body and a strategic conclusion."""

ENTITY_DOSSIER = """\
As a senior intelligence analyst, prepare a precise analytical dossier in \
{language} for the entity "{entity}", based on the following news context:
{context}

The dossier must be fully impartial and based only on the data provided.
Include these sections:
1. summary: a short, dense analysis of this entity's role, actions and \
influence in recent events.
2. connections: a list of the most important entities that "{entity}" has had \
DIRECT, REPORTED interaction with.
3. sentiment_analysis: a precise, multi-faceted sentiment analysis:
    - overall: an overall sentiment phrase (e.g. 'mostly positive', \
'controversial', 'complex').
    - positive_points: objectively reported positive aspects.
    - negative_points: objectively reported negative or challenging aspects.
    - confidence_score: your confidence in this analysis ('High', 'Medium', 'Low').
    - reasoning: why you chose this confidence score, and how the positive and \
negative points lead to the overall assessment. If the context contains \
contradictory reports, you MUST point them out."""

JSON_SCHEMA_SUFFIX = """

Respond with ONLY a JSON object (no markdown, no extra text) matching this schema:
{schema}"""
