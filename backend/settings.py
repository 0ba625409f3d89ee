"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @router.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.supabase_url)
"""

import json
from functools import lru_cache
from typing import Annotated, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the Supabase key.

        Agent functions act on behalf of the caller identified by the
        orchestrator, so service role access is required.
        """
        return self.supabase_service_role_key

    # -------------------------------------------------------------------------
    # Internal API
    # -------------------------------------------------------------------------
    internal_api_key: Optional[str] = Field(
        default=None,
        description="Shared secret the chat orchestrator sends as X-Internal-Key",
    )

    # -------------------------------------------------------------------------
    # Confirmation Protocol
    # -------------------------------------------------------------------------
    confirmation_tickets_enabled: bool = Field(
        default=True,
        description="Issue one-time tickets for destructive actions awaiting confirmation",
    )
    confirmation_ticket_ttl_seconds: int = Field(
        default=300,
        ge=1,
        description="Seconds a confirmation ticket stays valid",
    )

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    # NoDecode: the validator below handles JSON and comma-separated values
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Allowed CORS origins. If empty, defaults to localhost:3000.",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Observability - OpenTelemetry
    # -------------------------------------------------------------------------
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing and metrics",
    )
    otel_service_name: str = Field(
        default="agent-api",
        description="service.name resource attribute",
    )
    otel_exporter_otlp_endpoint: Optional[str] = Field(
        default=None,
        description="OTLP collector endpoint. Console exporter is used when unset.",
    )
    otel_exporter_otlp_protocol: str = Field(
        default="http/protobuf",
        description="OTLP protocol: grpc or http/protobuf",
    )
    otel_traces_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Fraction of traces to sample",
    )
    otel_metrics_export_interval_ms: int = Field(
        default=60000,
        description="Metric export interval in milliseconds",
    )
    otel_log_correlation: bool = Field(
        default=True,
        description="Inject trace/span IDs into log records",
    )

    # -------------------------------------------------------------------------
    # Deployment / Render
    # -------------------------------------------------------------------------
    render_git_commit: Optional[str] = Field(
        default=None,
        description="Git commit SHA provided by Render (RENDER_GIT_COMMIT)",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept JSON array, comma-separated string, or list."""
        if v is None:
            return []
        if isinstance(v, list):
            return v
        v = v.strip()
        if not v:
            return []
        if v.startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("otel_exporter_otlp_protocol")
    @classmethod
    def validate_otlp_protocol(cls, v: str) -> str:
        if v not in ("grpc", "http/protobuf"):
            raise ValueError("otel_exporter_otlp_protocol must be 'grpc' or 'http/protobuf'")
        return v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """CORS origins with the local development default applied."""
        return self.allowed_origins or ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
