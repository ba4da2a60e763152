"""Supplier scoring and retrieval engine for the procurement decision dashboard."""

__all__ = [
    "auditing",
    "comparison",
    "config",
    "context_analysis",
    "db_connector",
    "engine",
    "errors",
    "export",
    "formatter",
    "intents",
    "prediction",
    "providers",
    "records",
    "retrieval",
    "scoring",
]
