# backend/tour_planner/core/config_loader.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ANTHROPIC_API_KEY: str = ""

    # Completion endpoint (Anthropic Messages compatible)
    completion_api_url: str = "https://api.anthropic.com/v1/messages"
    completion_model: str = "claude-sonnet-4-20250514"
    completion_max_tokens: int = 10000
    anthropic_version: str = "2023-06-01"
    anthropic_beta: str = "mcp-client-2025-04-04"
    mcp_server_url: str = "https://proud-sparkle-production.up.railway.app/mcp"
    mcp_server_name: str = "headout"

    # Conversation loop
    request_timeout_ms: int = 5000
    pause_turn_delay_seconds: float = 60.0
    pause_turn_max_attempts: int = 5

    # Catalog / inventory
    catalog_base_url: str = "https://api-ho.headout.com"
    catalog_timeout_seconds: float = 15.0
    inventory_window_days: int = 7

    # Pricing
    trip_discount_rate: float = 0.10

    timezone: str = "Europe/Paris"
    log_level: str = "INFO"
    log_file_max_mb: int = 5
    log_file_backups: int = 5
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
