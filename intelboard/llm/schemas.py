"""Declared response schemas (Gemini OpenAPI-subset format)."""

from __future__ import annotations

ARTICLE_FIELDS = (
    "headline", "summary", "topic", "region", "sentiment",
    "source_name", "credibility_score", "timestamp",
)

NEWS_STREAM_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "headline": {"type": "STRING", "description": "A neutral, fact-based news headline."},
            "summary": {"type": "STRING", "description": "One-sentence summary naming the main entity."},
            "topic": {"type": "STRING", "description": "The primary topic (e.g. technology, politics, science)."},
            "region": {"type": "STRING", "description": "The geographical region of the news."},
            "sentiment": {
                "type": "STRING",
                "enum": ["Positive", "Negative", "Neutral"],
                "description": "Sentiment of the news, in English.",
            },
            "source_name": {"type": "STRING", "description": "The simulated source name."},
            "credibility_score": {"type": "NUMBER", "description": "Estimated credibility from 0 to 100."},
            "timestamp": {"type": "STRING", "description": "Recent ISO 8601 publication timestamp."},
        },
        "required": list(ARTICLE_FIELDS),
    },
}

GRAPH_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "nodes": {
            "type": "ARRAY",
            "description": "Unique entities and topics from the news.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING", "description": "Unique name of the entity or topic."},
                    "group": {"type": "STRING", "description": "Node type: topic, person, organization, location."},
                    "sentiment": {
                        "type": "STRING",
                        "enum": ["Positive", "Negative", "Neutral"],
                        "description": "Overall sentiment for person or organization nodes.",
                    },
                },
                "required": ["id", "group"],
            },
        },
        "links": {
            "type": "ARRAY",
            "description": "Direct, reported interactions between nodes.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "source": {"type": "STRING", "description": "Id of the source node."},
                    "target": {"type": "STRING", "description": "Id of the target node."},
                    "value": {"type": "NUMBER", "description": "Connection strength, typically 1."},
                },
                "required": ["source", "target", "value"],
            },
        },
    },
    "required": ["nodes", "links"],
}

INTELLIGENCE_PACKAGE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "news_stream": NEWS_STREAM_SCHEMA,
        "connections_graph": GRAPH_SCHEMA,
    },
    "required": ["news_stream", "connections_graph"],
}

ENTITY_DOSSIER_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING", "description": "Brief summary of the entity's role in recent events."},
        "connections": {
            "type": "ARRAY",
            "description": "Key entities it is directly connected to.",
            "items": {"type": "STRING"},
        },
        "sentiment_analysis": {
            "type": "OBJECT",
            "properties": {
                "overall": {"type": "STRING", "description": "Nuanced overall sentiment (e.g. 'mostly positive')."},
                "positive_points": {"type": "ARRAY", "items": {"type": "STRING"}},
                "negative_points": {"type": "ARRAY", "items": {"type": "STRING"}},
                "confidence_score": {"type": "STRING", "enum": ["High", "Medium", "Low"]},
                "reasoning": {"type": "STRING", "description": "Reasoning, flagging contradictory reports."},
            },
            "required": ["overall", "positive_points", "negative_points", "confidence_score", "reasoning"],
        },
    },
    "required": ["summary", "connections", "sentiment_analysis"],
}
