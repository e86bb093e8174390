"""
Application configuration management.

Following Sandi Metz principles:
- Single Responsibility: Configuration loading and validation
- Small class: < 100 lines
- Clear naming: Descriptive property names
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Application configuration with validation.

    Loads from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="AdviceCache", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # LLM Provider settings
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    default_model: str = Field(
        default="claude-sonnet-4-20250514", description="Default model"
    )
    default_max_tokens: int = Field(default=2000, ge=1, description="Max tokens")
    default_temperature: float = Field(
        default=0.7, ge=0.0, le=1.0, description="Temperature"
    )

    # Retry settings
    llm_max_attempts: int = Field(default=3, ge=1, description="Attempts per call")
    llm_retry_initial_delay: float = Field(
        default=1.0, ge=0.0, description="First backoff in seconds"
    )
    llm_retry_max_delay: float = Field(
        default=30.0, ge=0.0, description="Backoff cap in seconds"
    )

    # Cache tier settings
    fresh_ttl_seconds: int = Field(default=3600, ge=1, description="Fresh entry TTL")
    exact_match_threshold: float = Field(
        default=0.95, ge=0.0, le=1.0, description="Recent-context threshold"
    )
    similarity_threshold: float = Field(
        default=0.7, ge=0.0, le=1.0, description="Adapted-match threshold"
    )
    adapt_similarity_threshold: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Minimum score to adapt"
    )
    adapt_max_age_seconds: int = Field(
        default=4 * 60 * 60, ge=0, description="Maximum age of adapted entries"
    )
    coalesce_fresh_computations: bool = Field(
        default=True, description="Share in-flight fresh computations per key"
    )

    # Cost settings
    daily_budget: float = Field(default=0.10, gt=0.0, description="Per-user USD/day")
    cost_per_token: float = Field(default=0.000015, ge=0.0, description="USD/token")
    base_prompt_tokens: int = Field(default=1500, ge=0, description="Prompt tokens")
    tokens_per_tag: int = Field(default=200, ge=0, description="Tokens per tag")
    response_tokens: int = Field(default=800, ge=0, description="Response tokens")
    default_user_id: str = Field(default="default_user", description="Cost owner")
    enforce_daily_budget: bool = Field(
        default=False, description="Refuse fresh analyses once over budget"
    )
    cost_retention_days: int = Field(
        default=7, ge=1, description="Days of cost trackers to keep"
    )

    @property
    def has_anthropic_key(self) -> bool:
        """Check if an Anthropic API key is configured."""
        return bool(self.anthropic_api_key)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


# Global configuration instance
config = AppConfig()
