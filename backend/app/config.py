"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Ratio data sources ===
    default_ratios_url: str = Field(
        default="https://raw.githubusercontent.com/xlsrln/urtp/main/avg_ratios.csv",
        description="Default ratio feed (long or wide CSV)"
    )
    eu_winner_url: Optional[str] = Field(
        default=None,
        description="EU winner-times feed (country,event,...,duration CSV)"
    )
    data_fetch_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for feed downloads, seconds"
    )
    load_data_on_startup: bool = Field(
        default=True,
        description="Fetch ratio feeds when the API starts"
    )

    @field_validator('eu_winner_url')
    @classmethod
    def empty_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat EU_WINNER_URL= (empty) as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
