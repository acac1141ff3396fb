from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _validate_base_url(v: str, vendor: str) -> str:
    if not v.startswith(("http://", "https://")):
        raise ValueError(f"{vendor} base URL must start with http:// or https://")
    return v.rstrip("/")


class QuoteSettings(BaseSettings):
    timezone: str = Field(
        default="Asia/Manila",
        description="Timezone used to derive hour/day-of-week when no time context is supplied",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    model_config = SettingsConfigDict(env_prefix="QUOTE_")


class RoutingSettings(BaseSettings):
    max_distance_km: float = Field(default=100.0, gt=0)
    min_geometry_points: int = Field(default=5, ge=2)
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=60.0,
        description="Per-vendor request timeout. One attempt per vendor, no retries.",
    )
    country_code: str = Field(
        default="PH",
        min_length=2,
        max_length=2,
        description="ISO 3166-1 alpha-2 country used to bias geocoding",
    )
    geocode_limit: int = Field(default=5, ge=1, le=10)

    model_config = SettingsConfigDict(env_prefix="ROUTING_")


class OpenRouteServiceSettings(BaseSettings):
    base_url: str = "https://api.openrouteservice.org"
    api_key: str = ""

    model_config = SettingsConfigDict(env_prefix="ORS_")

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_base_url(v, "OpenRouteService")


class MapboxSettings(BaseSettings):
    base_url: str = "https://api.mapbox.com"
    token: str = ""

    model_config = SettingsConfigDict(env_prefix="MAPBOX_")

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_base_url(v, "Mapbox")


class CORSSettings(BaseSettings):
    origins: str = "http://localhost:3000"

    model_config = SettingsConfigDict(env_prefix="CORS_")


class Settings(BaseSettings):
    quote: QuoteSettings = Field(default_factory=QuoteSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    ors: OpenRouteServiceSettings = Field(default_factory=OpenRouteServiceSettings)
    mapbox: MapboxSettings = Field(default_factory=MapboxSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
