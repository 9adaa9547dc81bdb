"""Application configuration management."""
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Anthropic API Configuration
    # Required - set via ANTHROPIC_API_KEY (or API_KEY) env var
    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("anthropic_api_key", "api_key"),
    )

    # Grounded search configuration
    search_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 2048
    web_search_max_uses: int = 5

    # Retry Configuration
    max_retries: int = 3  # Total attempts, including the first one
    initial_retry_delay_ms: int = 1000
    retry_backoff_multiplier: int = 2

    # Session State Configuration
    state_file: str = "scraper-state.json"
    default_morning_query: str = "What are the top 3 latest news in technology?"

    # Logging Configuration
    log_level: str = "WARNING"

    # Browser interpreter configuration
    gradio_server_name: str = "0.0.0.0"
    gradio_server_port: int = 7860
    browser_state_secret: str = "grounded-scraper"  # Keys browser-storage encryption

    # Model Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def state_path(self) -> Path:
        """Get the state file path (relative paths resolve against the CWD)."""
        return Path(self.state_file).expanduser()

    @property
    def has_api_key(self) -> bool:
        """Whether a backend credential is configured."""
        return bool(self.anthropic_api_key.strip())


# Global settings instance
settings = Settings()
