from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include frontend settings.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Revenue Attainment Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    business_timezone: str = Field(default="America/Chicago", alias="BUSINESS_TIMEZONE")
    default_location_a_daily_target: float = Field(
        default=53000.0, ge=0, alias="DEFAULT_LOCATION_A_DAILY_TARGET"
    )
    default_location_b_daily_target: float = Field(
        default=62500.0, ge=0, alias="DEFAULT_LOCATION_B_DAILY_TARGET"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
