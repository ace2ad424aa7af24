"""Weather Now web page: FastAPI app serving the rendered page and JSON views."""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from weathernow.app.session import WeatherSession
from weathernow.config.loader import resolve_timezone
from weathernow.config.schema import AppConfig
from weathernow.ingest.openweather_client import OpenWeatherClient
from weathernow.models.ui_state import Error
from weathernow.reporting.formatters import session_to_dict
from weathernow.reporting.page import render_page

logger = logging.getLogger(__name__)


def build_session(config: AppConfig, client: OpenWeatherClient) -> WeatherSession:
    return WeatherSession(
        client,
        tz=resolve_timezone(config.display),
        max_days=config.display.max_days,
        hourly_count=config.display.hourly_count,
        units=config.provider.units,
    )


def create_app(
    config: AppConfig, client: OpenWeatherClient | None = None
) -> FastAPI:
    """Build the app around a single page session."""
    if client is None:
        client = OpenWeatherClient.from_config(config.provider)
    session = build_session(config, client)

    app = FastAPI(title="Weather Now", version="0.1.0")
    app.state.session = session

    @app.get("/", response_class=HTMLResponse)
    async def show_page():
        return render_page(session)

    @app.get("/search", response_class=HTMLResponse)
    async def search(q: str = ""):
        """Submit a search from the page's text field, then render its outcome.

        Concurrent searches share the page session; each response shows the
        result of its own query even when a newer search owns the session.
        """
        outcome = await session.submit(q)
        return render_page(session, outcome)

    @app.post("/retry")
    async def retry():
        session.retry()
        return RedirectResponse("/", status_code=303)

    @app.get("/api/state")
    async def get_state():
        return session_to_dict(session)

    @app.get("/api/weather")
    async def get_weather(q: str = ""):
        """Stateless lookup; does not touch the page session."""
        if not q.strip():
            raise HTTPException(400, "Query must not be blank")
        lookup = build_session(config, client)
        await lookup.submit(q)
        if isinstance(lookup.state, Error):
            raise HTTPException(404, lookup.state.message)
        return session_to_dict(lookup)

    @app.get("/api/health")
    async def get_health():
        return {"ok": True, "state": str(session.state.kind)}

    return app


def run(config: AppConfig) -> None:
    import uvicorn

    app = create_app(config)
    logger.info("Serving Weather Now on http://%s:%d", config.server.host, config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port)
