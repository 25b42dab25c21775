"""Configuration management using Pydantic Settings"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Dashboard backend
    backend_api_base: str = "http://localhost:3333/api"
    backend_token: str | None = None
    backend_page_size: int = 500

    # Service
    service_name: str = "loan-ops"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Reconciliation
    counted_payment_statuses: List[str] = ["COMPLETED"]


settings = Settings()
