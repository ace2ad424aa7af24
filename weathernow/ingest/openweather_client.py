"""OpenWeatherMap 2.5 API client: current conditions and 5-day/3-hour forecast."""

import asyncio
import logging

import httpx

from weathernow.config.schema import OPENWEATHER_BASE_URL, ProviderConfig
from weathernow.models.common import Units
from weathernow.models.weather import (
    CurrentConditions,
    Forecast,
    parse_current,
    parse_forecast,
)

logger = logging.getLogger(__name__)

ICON_BASE_URL = "https://openweathermap.org/img/wn"


class PlaceLookupFailed(Exception):
    """Raised when a place's weather cannot be fetched or parsed.

    Covers unknown places, provider errors and transport failures alike.
    """

    def __init__(self, place: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.place = place
        self.status_code = status_code


def weather_icon_url(icon: str, scale: str = "2x") -> str:
    return f"{ICON_BASE_URL}/{icon}@{scale}.png"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str = "",
        base_url: str = OPENWEATHER_BASE_URL,
        units: Units = Units.METRIC,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.timeout = timeout

    @classmethod
    def from_config(cls, provider: ProviderConfig) -> "OpenWeatherClient":
        return cls(
            api_key=provider.api_key,
            base_url=provider.base_url,
            units=provider.units,
            timeout=provider.timeout,
        )

    def _params(self, place: str) -> dict[str, str]:
        return {"q": place, "appid": self.api_key, "units": str(self.units)}

    async def _get(self, http: httpx.AsyncClient, endpoint: str, place: str) -> dict:
        url = f"{self.base_url}/{endpoint}"
        try:
            resp = await http.get(url, params=self._params(place))
        except httpx.RequestError as e:
            logger.warning("OpenWeather %s request failed for %r: %s", endpoint, place, e)
            raise PlaceLookupFailed(place, f"Request failed: {e}") from e

        if not resp.is_success:
            logger.warning(
                "OpenWeather %s returned %d for %r", endpoint, resp.status_code, place
            )
            raise PlaceLookupFailed(
                place, f"HTTP {resp.status_code} from /{endpoint}", resp.status_code
            )
        try:
            return resp.json()
        except ValueError as e:
            raise PlaceLookupFailed(place, f"Invalid JSON from /{endpoint}") from e

    async def get_current(self, place: str) -> dict:
        """Fetch the raw /weather body for a place."""
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            return await self._get(http, "weather", place)

    async def get_forecast(self, place: str) -> dict:
        """Fetch the raw /forecast body (3-hour samples) for a place."""
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            return await self._get(http, "forecast", place)

    async def fetch_place(self, place: str) -> tuple[dict, dict]:
        """Fetch current conditions and forecast concurrently.

        Both requests are allowed to settle before deciding. If either one
        fails the whole lookup fails; no partial result is returned.
        """
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            current, forecast = await asyncio.gather(
                self._get(http, "weather", place),
                self._get(http, "forecast", place),
                return_exceptions=True,
            )

        for result in (current, forecast):
            if isinstance(result, PlaceLookupFailed):
                raise result
            if isinstance(result, Exception):
                raise PlaceLookupFailed(place, str(result)) from result
            if isinstance(result, BaseException):
                raise result

        logger.debug("Fetched weather for %r", place)
        return current, forecast

    async def fetch_weather(self, place: str) -> tuple[CurrentConditions, Forecast]:
        """fetch_place, then parse both bodies into models."""
        raw_current, raw_forecast = await self.fetch_place(place)
        try:
            return parse_current(raw_current), parse_forecast(raw_forecast)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Malformed OpenWeather payload for %r: %r", place, e)
            raise PlaceLookupFailed(place, f"Malformed payload: {e!r}") from e
