from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include frontend settings.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Maderas CRM Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    leader_emails: str = Field(default="", alias="LEADER_EMAILS")
    leader_name: str = Field(default="Líder", alias="LEADER_NAME")

    commission_rate: float = Field(default=0.03, alias="COMMISSION_RATE")
    max_process_days: int = Field(default=45, alias="MAX_PROCESS_DAYS")
    min_monthly_sales: float = Field(default=500000.0, alias="MIN_MONTHLY_SALES")
    currency_code: str = Field(default="MXN", alias="CURRENCY_CODE")

    change_feed_secret: Optional[str] = Field(default=None, alias="CHANGE_FEED_SECRET")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]


def get_leader_emails() -> set[str]:
    settings = get_settings()
    return {email.strip().lower() for email in settings.leader_emails.split(",") if email.strip()}
