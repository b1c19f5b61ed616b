"""Retrieval: vector index search, context assembly, and the model client."""
