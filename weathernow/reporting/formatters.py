"""Output formatters for the weather page: labels, terminal text and JSON."""

import json
from datetime import tzinfo

from weathernow.app.session import WeatherSession
from weathernow.ingest.openweather_client import weather_icon_url
from weathernow.models.common import Units, UnixTime, from_unix, round_half_up
from weathernow.models.ui_state import Error, Idle, Loading, Success, UIState
from weathernow.models.weather import DailyAggregate, ForecastSample, WeatherCondition

IDLE_PROMPT = "Search for a city to see weather information"
LOADING_TEXT = "Loading weather data..."
HEADLINE = "How's the sky looking today?"


def format_full_date(ts: UnixTime, tz: tzinfo | None = None) -> str:
    """'Monday, January 5'."""
    d = from_unix(ts, tz)
    return f"{d.strftime('%A, %B')} {d.day}"


def format_weekday(ts: UnixTime, tz: tzinfo | None = None) -> str:
    return from_unix(ts, tz).strftime("%A")


def format_short_weekday(ts: UnixTime, tz: tzinfo | None = None) -> str:
    return from_unix(ts, tz).strftime("%a")


def format_time(ts: UnixTime, tz: tzinfo | None = None) -> str:
    """24-hour clock, e.g. '09:00'."""
    return from_unix(ts, tz).strftime("%H:%M")


WIND_UNITS = {Units.METRIC: "m/s", Units.IMPERIAL: "mph", Units.STANDARD: "m/s"}


def format_temperature(value: float, units: Units = Units.METRIC) -> str:
    """Rounded, with a degree sign; Kelvin for standard units."""
    suffix = " K" if units == Units.STANDARD else "°"
    return f"{round_half_up(value)}{suffix}"


def format_wind(speed: float, units: Units = Units.METRIC) -> str:
    return f"{speed} {WIND_UNITS[units]}"


def render_text(session: WeatherSession, state: UIState | None = None) -> str:
    """Plain text rendering of `state`, or of the session's own state."""
    state = session.state if state is None else state
    tz = session.tz
    units = session.units
    if isinstance(state, Idle):
        return "\n".join([HEADLINE, IDLE_PROMPT])
    if isinstance(state, Loading):
        return LOADING_TEXT
    if isinstance(state, Error):
        return state.message

    c = state.current
    lines = [
        f"=== {c.name}, {c.country} ===",
        format_full_date(c.dt, tz),
        f"{format_temperature(c.temp, units)}  {c.weather.description}".rstrip(),
        f"Feels like: {format_temperature(c.feels_like, units)} | "
        f"Humidity: {c.humidity}% | "
        f"Wind: {format_wind(c.wind_speed, units)} | "
        f"Pressure: {c.pressure} mb",
        "",
        "Daily forecast",
    ]
    for day in session.daily_forecast(state):
        lines.append(
            f"  {day.day:<4} {format_temperature(day.max_temp, units):>6} "
            f"{format_temperature(day.min_temp, units):>6}  {day.weather.main}"
        )
    lines += ["", f"Hourly forecast ({format_weekday(c.dt, tz)})"]
    for hour in session.hourly_forecast(state):
        lines.append(
            f"  {format_time(hour.dt, tz)}  {format_temperature(hour.temp, units):>6}  "
            f"{hour.weather.main}"
        )
    return "\n".join(lines)


def _condition_dict(w: WeatherCondition) -> dict:
    return {
        "id": w.id,
        "main": w.main,
        "description": w.description,
        "icon": w.icon,
        "icon_url": weather_icon_url(w.icon),
    }


def _day_dict(day: DailyAggregate) -> dict:
    return {
        "dt": day.dt,
        "day": day.day,
        "min_temp": day.min_temp,
        "max_temp": day.max_temp,
        "weather": _condition_dict(day.weather),
    }


def _hour_dict(hour: ForecastSample, tz: tzinfo | None) -> dict:
    return {
        "dt": hour.dt,
        "time": format_time(hour.dt, tz),
        "temp": round_half_up(hour.temp),
        "weather": _condition_dict(hour.weather),
    }


def session_to_dict(session: WeatherSession) -> dict:
    """JSON-ready view model for the session's current state."""
    state = session.state
    data: dict = {"state": str(state.kind)}
    if isinstance(state, Loading):
        data["query"] = state.query
    elif isinstance(state, Error):
        data["message"] = state.message
    elif isinstance(state, Success):
        c = state.current
        tz = session.tz
        data["current"] = {
            "name": c.name,
            "country": c.country,
            "dt": c.dt,
            "date": format_full_date(c.dt, tz),
            "temp": round_half_up(c.temp),
            "feels_like": round_half_up(c.feels_like),
            "humidity": c.humidity,
            "wind_speed": c.wind_speed,
            "pressure": c.pressure,
            "weather": _condition_dict(c.weather),
        }
        data["daily"] = [_day_dict(d) for d in session.daily_forecast()]
        data["hourly"] = [_hour_dict(h, tz) for h in session.hourly_forecast()]
    return data


def format_session_json(session: WeatherSession) -> str:
    return json.dumps(session_to_dict(session), indent=2, ensure_ascii=False)
