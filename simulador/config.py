"""Application configuration via pydantic-settings.

Secrets are loaded from environment variables (.env file).
Business constants live in FinancingRules so the calculator, validators and
wizard receive them explicitly instead of scattering literals.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class FinancingRules(BaseSettings):
    """Fixed financing conditions offered by the simulator."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FINANCING_", extra="ignore")

    annual_rate: Decimal = Field(
        default=Decimal("0.12"),
        description="Nominal annual interest rate as a fraction (not user editable)",
    )
    term_options: tuple[int, ...] = Field(
        default=(120, 180, 240, 300, 360),
        description="Allowed loan terms in months",
    )
    min_down_payment_ratio: Decimal = Field(
        default=Decimal("0.2"),
        description="Minimum down payment as a fraction of the financed amount",
    )

    def is_allowed_term(self, term_months: int) -> bool:
        """Check that a term belongs to the closed set of offered terms."""
        return term_months in self.term_options


class SupabaseSettings(BaseSettings):
    """Hosted backend: object storage bucket and proposals table."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_anon_key: str = Field(default="", description="Supabase anon API key")
    supabase_bucket: str = Field(default="pdfs", description="Storage bucket for signed PDFs")
    supabase_table: str = Field(default="financing_proposals", description="Proposals table")
    request_timeout: float = Field(default=15.0, description="HTTP timeout in seconds")
    signed_url_ttl: int = Field(default=60, description="Lifetime of admin PDF links in seconds")

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


class SecuritySettings(BaseSettings):
    """Admin listing credentials."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    admin_web_user: str = Field(default="", description="HTTP Basic username for /admin")
    admin_web_password: str = Field(default="", description="HTTP Basic password for /admin")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.rules.annual_rate
        settings.supabase.supabase_bucket
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    rules: FinancingRules = Field(default_factory=FinancingRules)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"Invalid log level: {v}. Must be one of {sorted(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton, import this wherever settings are needed.
settings = Settings()
