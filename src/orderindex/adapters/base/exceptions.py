"""Adapter-specific exceptions."""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter cannot reach the remote search service."""


class RemoteIndexError(AdapterError):
    """Raised when a remote index operation (write, delete, search) fails."""


class TaskTimeoutError(AdapterError):
    """Raised when a remote task is not published within the wait timeout."""


class ConfigurationError(AdapterError):
    """Raised when adapter configuration is invalid."""
