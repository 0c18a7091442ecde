"""Hierarchical comment retrieval and moderation engine."""
