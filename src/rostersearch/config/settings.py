"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (ROSTERSEARCH_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class IndexSettings(BaseModel):
    """Index backend configuration."""

    backend: str = Field(default="solr", description="Index adapter name: solr, memory")
    base_url: str = Field(default="http://localhost:8983/solr", description="Index base URL")
    collection: str = Field(default="students", description="Collection holding student documents")
    username: str | None = Field(default=None, description="Basic-auth username")
    password: str | None = Field(default=None, description="Basic-auth password")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_results: int = Field(default=1000, ge=1, description="Maximum documents fetched per search")
    reset_allowed: bool = Field(default=False, description="Whether the collection may be wiped")
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra adapter constructor arguments")

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, v: Any) -> str:
        return str(v).strip().lower()


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the ROSTERSEARCH_ prefix.
    Nested settings use double underscores: ROSTERSEARCH_INDEX__BASE_URL=http://solr:8983/solr

    Example:
        ROSTERSEARCH_INDEX__BACKEND=memory
        ROSTERSEARCH_INDEX__RESET_ALLOWED=true
        ROSTERSEARCH_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "ROSTERSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    index:IndexSettings = Field(default_factory=IndexSettings)
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
