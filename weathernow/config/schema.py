"""Pydantic v2 configuration schema with strict validation."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from weathernow.models.common import Units

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OPENWEATHER_BASE_URL
    api_key: str = ""
    units: Units = Units.METRIC
    timeout: float = Field(default=30.0, gt=0.0)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_days: int = Field(default=7, ge=1, le=16)
    hourly_count: int = Field(default=8, ge=1, le=40)
    # IANA zone name; None means the machine's local zone
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "127.0.0.1"
    port: int = Field(default=8777, ge=1, le=65535)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    display: DisplayConfig = DisplayConfig()
    server: ServerConfig = ServerConfig()
