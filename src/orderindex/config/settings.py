"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (ORDERINDEX_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class AlgoliaSettings(BaseModel):
    """Remote search index configuration.

    ``api_key`` is the admin key used for writes.  ``search_api_key`` is the
    search-only key handed to the browser widget and used for search queries.
    """

    backend: str = Field(default="algolia", description="Index backend: algolia or memory")
    application_id: str = Field(default="", description="Algolia application ID")
    api_key: str = Field(default="", description="Admin API key (writes)")
    search_api_key: str = Field(default="", description="Search-only API key")
    index_name_prefix: str = Field(default="", description="Prefix prepended to every index name")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    wait_on_delete: bool = Field(
        default=False,
        description="Block until stale-record deletes are published before writing",
    )
    wait_poll_interval: float = Field(default=0.5, gt=0, description="Task status poll interval in seconds")
    wait_timeout: float = Field(default=60.0, gt=0, description="Maximum time to wait for a task in seconds")
    hits_per_page: int = Field(default=7, ge=1, le=1000, description="Hits per page for widget searches")

    @field_validator("backend")
    @classmethod
    def _check_backend(cls, v: str) -> str:
        value = v.lower()
        if value not in {"algolia", "memory"}:
            raise ValueError(f"Unknown index backend: {v}")
        return value

    def index_name(self, index_id: str) -> str:
        return f"{self.index_name_prefix}{index_id}"


class PlatformSettings(BaseModel):
    """Host platform wiring."""

    factory: str = Field(
        default="orderindex.host.memory:create_platform",
        description="Dotted 'module:callable' returning a CommercePlatform",
    )
    seed_file: str | None = Field(default=None, description="Orders seed file for the in-memory platform")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the ORDERINDEX_ prefix.
    Nested settings use double underscores: ORDERINDEX_ALGOLIA__APPLICATION_ID=XYZ

    Example:
        ORDERINDEX_ALGOLIA__APPLICATION_ID=LATENCY
        ORDERINDEX_ALGOLIA__API_KEY=...
        ORDERINDEX_ALGOLIA__INDEX_NAME_PREFIX=wp_
    """

    model_config = {
        "env_prefix": "ORDERINDEX_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="orderindex", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    algolia: AlgoliaSettings = Field(default_factory=AlgoliaSettings)
    platform: PlatformSettings = Field(default_factory=PlatformSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
