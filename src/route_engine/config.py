"""Engine configuration and settings management."""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_ENGINE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service. Empty disables road-network distances.",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    osrm_timeout_seconds: float = Field(default=10.0, gt=0.0)
    osrm_connect_timeout_seconds: float = Field(default=5.0, gt=0.0)
    fallback_average_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Average travel speed used to derive durations from haversine distances.",
    )

    @field_validator("osrm_base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip().rstrip("/")


settings = Settings()
