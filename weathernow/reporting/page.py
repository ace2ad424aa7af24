"""HTML rendering of the weather page, one layout per page state."""

from html import escape

from weathernow.app.session import WeatherSession
from weathernow.ingest.openweather_client import weather_icon_url
from weathernow.models.ui_state import Error, Idle, Loading, Success, UIState
from weathernow.reporting.formatters import (
    HEADLINE,
    IDLE_PROMPT,
    LOADING_TEXT,
    format_full_date,
    format_temperature,
    format_time,
    format_weekday,
    format_wind,
)

TITLE = "Weather Now"
FALLBACK_ICON = "\u2601"
LOADING_REFRESH_SECONDS = 2

# hides a broken icon and shows the span right after it
_ICON_ONERROR = (
    "this.style.display='none';this.nextElementSibling.style.display='inline'"
)

_STYLE = """
body { margin: 0; min-height: 100vh; font-family: sans-serif; color: #fff;
  background: linear-gradient(135deg, #1E1B4B, #581C87, #1E1B4B); }
main { max-width: 80rem; margin: 0 auto; padding: 1rem; }
header { display: flex; justify-content: space-between; margin-bottom: 2rem; }
.center { text-align: center; }
.search { display: flex; gap: 1.5rem; max-width: 40rem; margin: 0 auto; }
.search input { flex: 1; padding: .75rem 1rem; border-radius: 8px; color: #fff;
  background: #1F293780; border: 1px solid #ffffff33; }
.search button, .retry button { background: #2563EB; color: #fff; border: 0;
  padding: .75rem 1.5rem; border-radius: 8px; }
.error { color: #F87171; }
.muted { color: #9CA3AF; }
.grid { display: grid; grid-template-columns: 2fr 1fr; gap: 1.5rem; }
.card { background: linear-gradient(135deg, #2563EB, #9333EA); border-radius: 1rem;
  padding: 1.5rem; }
.temp { font-size: 4.5rem; font-weight: 100; }
.stats, .daily { display: flex; gap: 1rem; margin-top: 1.5rem; }
.tile { flex: 1; background: #1F293780; border-radius: 12px; padding: 1rem; }
.fallback { display: none; }
.hourly li { display: flex; justify-content: space-between; padding: .5rem 0;
  border-bottom: 1px solid #4B55634D; list-style: none; }
"""


def _icon(icon: str, size: int = 48) -> str:
    """Provider icon; a cloud glyph takes its place if the image fails to load."""
    return (
        f'<img src="{escape(weather_icon_url(icon))}" alt="Weather icon" '
        f'width="{size}" height="{size}" onerror="{_ICON_ONERROR}">'
        f'<span class="fallback" style="font-size:{size // 2}px">{FALLBACK_ICON}</span>'
    )


def _search_form(query: str) -> str:
    return (
        '<form class="search" action="/search" method="get">'
        f'<input type="text" name="q" value="{escape(query)}" '
        'placeholder="Search for a place...">'
        '<button type="submit">Search</button>'
        "</form>"
    )


def _document(body: str, refresh: int | None = None) -> str:
    meta = f'<meta http-equiv="refresh" content="{refresh}">' if refresh else ""
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="en"><head><meta charset="utf-8">{meta}'
        f"<title>{TITLE}</title><style>{_STYLE}</style></head>"
        f"<body><main><header><strong>{TITLE}</strong></header>{body}</main></body></html>"
    )


def _idle(session: WeatherSession) -> str:
    return (
        f'<section class="center"><h1>{escape(HEADLINE)}</h1>'
        f"{_search_form(session.query)}"
        f'<p class="muted">{IDLE_PROMPT}</p></section>'
    )


def _loading() -> str:
    return f'<section class="center"><p>{LOADING_TEXT}</p></section>'


def _error(state: Error) -> str:
    return (
        f'<section class="center"><p class="error">{escape(state.message)}</p>'
        '<form class="retry" action="/retry" method="post">'
        '<button type="submit">Try Again</button></form></section>'
    )


def _success(session: WeatherSession, state: Success) -> str:
    c = state.current
    tz = session.tz
    units = session.units
    stats = [
        ("Feels like", format_temperature(c.feels_like, units)),
        ("Humidity", f"{c.humidity}%"),
        ("Wind", format_wind(c.wind_speed, units)),
        ("Pressure", f"{c.pressure} mb"),
    ]
    tiles = "".join(
        f'<div class="tile"><div class="muted">{label}</div><div>{value}</div></div>'
        for label, value in stats
    )
    days = "".join(
        f'<div class="tile center"><div class="muted">{escape(d.day)}</div>'
        f"{_icon(d.weather.icon)}<div>{format_temperature(d.max_temp, units)}</div>"
        f'<div class="muted">{format_temperature(d.min_temp, units)}</div></div>'
        for d in session.daily_forecast(state)
    )
    hours = "".join(
        f"<li><span>{_icon(h.weather.icon, 24)} {format_time(h.dt, tz)}</span>"
        f"<span>{format_temperature(h.temp, units)}</span></li>"
        for h in session.hourly_forecast(state)
    )
    return (
        f'<section class="center"><h1>{escape(HEADLINE)}</h1>'
        f"{_search_form(session.query)}</section>"
        '<div class="grid"><div>'
        f'<div class="card"><h2>{escape(c.name)}, {escape(c.country)}</h2>'
        f"<p>{format_full_date(c.dt, tz)}</p>"
        f'{_icon(c.weather.icon)}<span class="temp">{format_temperature(c.temp, units)}</span>'
        "</div>"
        f'<div class="stats">{tiles}</div>'
        f'<h3>Daily forecast</h3><div class="daily">{days}</div>'
        "</div>"
        f'<aside class="tile"><h3>Hourly forecast</h3>'
        f'<p class="muted">{format_weekday(c.dt, tz)}</p>'
        f'<ul class="hourly">{hours}</ul></aside>'
        "</div>"
    )


def render_page(session: WeatherSession, state: UIState | None = None) -> str:
    """Full HTML document for `state`, or for the session's own state.

    The loading page reloads itself until the search settles.
    """
    state = session.state if state is None else state
    if isinstance(state, Idle):
        body = _idle(session)
    elif isinstance(state, Loading):
        return _document(_loading(), refresh=LOADING_REFRESH_SECONDS)
    elif isinstance(state, Error):
        body = _error(state)
    else:
        body = _success(session, state)
    return _document(body)
