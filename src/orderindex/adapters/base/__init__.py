"""Base adapter interface — Abstract classes for remote index connectors."""

from orderindex.adapters.base.adapter import IndexTask, RemoteIndex

__all__ = ["IndexTask", "RemoteIndex"]
