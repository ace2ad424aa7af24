"""OpenWeatherMap payload models and parsers."""

from dataclasses import dataclass

from weathernow.models.common import UnixTime


@dataclass(frozen=True)
class WeatherCondition:
    id: int
    main: str
    description: str
    icon: str


@dataclass(frozen=True)
class CurrentConditions:
    name: str
    country: str
    dt: UnixTime
    temp: float
    feels_like: float
    humidity: int
    wind_speed: float
    pressure: int
    weather: WeatherCondition


@dataclass(frozen=True)
class ForecastSample:
    dt: UnixTime
    temp: float
    weather: WeatherCondition


@dataclass(frozen=True)
class Forecast:
    samples: list[ForecastSample]


@dataclass(frozen=True)
class DailyAggregate:
    dt: UnixTime  # first sample seen for the date
    day: str  # short weekday label, e.g. "Mon"
    min_temp: int
    max_temp: int
    weather: WeatherCondition


def parse_condition(raw: list[dict]) -> WeatherCondition:
    """Take the first entry of a provider `weather` array."""
    first = raw[0]
    return WeatherCondition(
        id=int(first.get("id", 0)),
        main=first.get("main", ""),
        description=first.get("description", ""),
        icon=first["icon"],
    )


def parse_current(raw: dict) -> CurrentConditions:
    """Build CurrentConditions from a /weather response body.

    Raises KeyError/TypeError/IndexError on payloads missing required fields.
    """
    main = raw["main"]
    return CurrentConditions(
        name=raw["name"],
        country=raw.get("sys", {}).get("country", ""),
        dt=int(raw["dt"]),
        temp=float(main["temp"]),
        feels_like=float(main["feels_like"]),
        humidity=int(main["humidity"]),
        wind_speed=float(raw.get("wind", {}).get("speed", 0.0)),
        pressure=int(main["pressure"]),
        weather=parse_condition(raw["weather"]),
    )


def parse_sample(raw: dict) -> ForecastSample:
    return ForecastSample(
        dt=int(raw["dt"]),
        temp=float(raw["main"]["temp"]),
        weather=parse_condition(raw["weather"]),
    )


def parse_forecast(raw: dict) -> Forecast:
    """Build a Forecast from a /forecast response body, keeping sample order."""
    return Forecast(samples=[parse_sample(item) for item in raw["list"]])
