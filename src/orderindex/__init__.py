"""orderindex — Incremental indexing of commerce orders into a hosted search index."""

__version__ = "0.1.0"
