"""AI-generated intelligence dashboard: news stream, entity graph, fact checks and briefings."""
