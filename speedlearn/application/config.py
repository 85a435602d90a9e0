"""Application configuration using Pydantic Settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "speed-learning"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Study assistant configuration
    study_assistant_type: str = "simple"  # "simple", "http", "bedrock" or "openai"
    study_assistant_base_url: str = "http://localhost:3000/api"
    study_assistant_timeout_seconds: float = 30.0

    # AWS settings for the Bedrock study assistant
    aws_region: str = "us-east-1"
    bedrock_model_id: str = "amazon.nova-lite-v1:0"
    bedrock_max_tokens: int = 1024
    bedrock_temperature: float = 0.7
    bedrock_top_p: float = 0.9

    # AWS credentials (optional, uses default credential chain if not set)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    # OpenAI configuration
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"

    # Session pacing
    quiz_question_count: int = 3
    reading_time_budget_seconds: int = 120
    default_word_delay_ms: int = 400
    countdown_from: int = 3
    go_hold_seconds: float = 1.0
    card_flip_seconds: float = 0.3
    swipe_threshold_px: float = 75


# Create a singleton instance
settings = Settings()
