"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    environment: str = "development"
    app_url: str = "http://localhost:3000"
    backend_port: int = 8000
    log_level: str = "INFO"

    # AI (Anthropic)
    anthropic_api_key: str = ""
    ai_enabled: bool = True
    ai_model: str = "sonnet"
    ai_timeout_seconds: float = 30.0
    ai_max_retries: int = 1

    # Compliance score deductions per suggestion
    score_weight_critical: int = 35
    score_weight_high: int = 25
    score_weight_medium: int = 10
    score_weight_low: int = 5

    # Rate limits
    validate_rate_limit_per_hour: int = 300

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def ai_configured(self) -> bool:
        return self.ai_enabled and bool(self.anthropic_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
