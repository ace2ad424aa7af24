"""Tests for the page session state machine with a mocked client."""

import asyncio
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from weathernow.app.session import WeatherSession
from weathernow.ingest.openweather_client import OpenWeatherClient, PlaceLookupFailed
from weathernow.models.common import round_half_up
from weathernow.models.ui_state import (
    PLACE_NOT_FOUND_MESSAGE,
    Error,
    Idle,
    Loading,
    StateKind,
    Success,
)
from weathernow.models.weather import parse_current, parse_forecast


@pytest.fixture
def models(current_payload: dict, forecast_payload: dict):
    return parse_current(current_payload), parse_forecast(forecast_payload)


@pytest.fixture
def ok_client(models) -> MagicMock:
    mock = MagicMock(spec=OpenWeatherClient)
    mock.fetch_weather.return_value = models
    return mock


@pytest.fixture
def failing_client() -> MagicMock:
    mock = MagicMock(spec=OpenWeatherClient)
    mock.fetch_weather.side_effect = PlaceLookupFailed("Nowhere", "HTTP 404", 404)
    return mock


class GatedClient:
    """Fake client whose lookups finish only when the test releases them."""

    def __init__(self, models):
        self.models = models
        self.gates: dict[str, asyncio.Event] = {}

    async def fetch_weather(self, place: str):
        gate = self.gates.setdefault(place, asyncio.Event())
        await gate.wait()
        if place == "Nowhere":
            raise PlaceLookupFailed(place, "HTTP 404", 404)
        return self.models


class TestSubmit:
    def test_success(self, ok_client: MagicMock):
        session = WeatherSession(ok_client)
        outcome = asyncio.run(session.submit("  London "))

        ok_client.fetch_weather.assert_awaited_once_with("London")
        assert isinstance(session.state, Success)
        assert outcome is session.state
        assert session.state.kind == StateKind.SUCCESS
        assert round_half_up(session.state.current.temp) == 8
        assert session.query == ""

    def test_failure(self, failing_client: MagicMock):
        session = WeatherSession(failing_client)
        outcome = asyncio.run(session.submit("Nowhere"))

        assert isinstance(session.state, Error)
        assert outcome is session.state
        assert session.state.message == PLACE_NOT_FOUND_MESSAGE
        assert session.daily_forecast() == []
        assert session.hourly_forecast() == []

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_does_nothing(self, ok_client: MagicMock, query: str):
        session = WeatherSession(ok_client)
        assert asyncio.run(session.submit(query)) is None
        ok_client.fetch_weather.assert_not_called()
        assert isinstance(session.state, Idle)

    def test_blank_query_keeps_success(self, ok_client: MagicMock):
        session = WeatherSession(ok_client)
        asyncio.run(session.submit("London"))
        before = session.state
        asyncio.run(session.submit(" "))
        assert session.state is before
        assert ok_client.fetch_weather.await_count == 1

    def test_uses_typed_query(self, ok_client: MagicMock):
        session = WeatherSession(ok_client)
        session.set_query("Paris ")
        asyncio.run(session.submit())
        ok_client.fetch_weather.assert_awaited_once_with("Paris")

    def test_resubmit_replaces_state(self, ok_client: MagicMock, models):
        session = WeatherSession(ok_client)
        asyncio.run(session.submit("London"))
        first = session.state

        current, forecast = models
        shorter = replace(forecast, samples=forecast.samples[:3])
        ok_client.fetch_weather.return_value = (current, shorter)
        asyncio.run(session.submit("London"))

        assert ok_client.fetch_weather.await_count == 2
        assert session.state is not first
        assert len(session.hourly_forecast()) == 3

    def test_loading_while_in_flight(self, models):
        client = GatedClient(models)
        session = WeatherSession(client)

        async def scenario():
            task = asyncio.create_task(session.submit("London"))
            await asyncio.sleep(0)
            assert session.state == Loading(query="London")
            client.gates["London"].set()
            await task

        asyncio.run(scenario())
        assert isinstance(session.state, Success)


class TestStaleResults:
    def test_older_success_is_dropped(self, models):
        client = GatedClient(models)
        session = WeatherSession(client)

        async def scenario():
            first = asyncio.create_task(session.submit("London"))
            await asyncio.sleep(0)
            second = asyncio.create_task(session.submit("Nowhere"))
            await asyncio.sleep(0)
            client.gates["Nowhere"].set()
            await second
            client.gates["London"].set()
            await first

        asyncio.run(scenario())
        assert isinstance(session.state, Error)

    def test_older_failure_is_dropped(self, models):
        client = GatedClient(models)
        session = WeatherSession(client)

        async def scenario():
            first = asyncio.create_task(session.submit("Nowhere"))
            await asyncio.sleep(0)
            second = asyncio.create_task(session.submit("London"))
            await asyncio.sleep(0)
            client.gates["London"].set()
            await second
            client.gates["Nowhere"].set()
            await first

        asyncio.run(scenario())
        assert isinstance(session.state, Success)


class TestRetry:
    def test_error_to_idle(self, failing_client: MagicMock):
        session = WeatherSession(failing_client)
        asyncio.run(session.submit("Nowhere"))
        session.retry()
        assert isinstance(session.state, Idle)

    def test_noop_outside_error(self, ok_client: MagicMock):
        session = WeatherSession(ok_client)
        session.retry()
        assert isinstance(session.state, Idle)
        asyncio.run(session.submit("London"))
        session.retry()
        assert isinstance(session.state, Success)


class TestViewModels:
    def test_daily_and_hourly(self, ok_client: MagicMock, utc):
        session = WeatherSession(ok_client, tz=utc)
        asyncio.run(session.submit("London"))
        assert len(session.daily_forecast()) == 6
        assert len(session.hourly_forecast()) == 8

    def test_limits(self, ok_client: MagicMock, utc):
        session = WeatherSession(ok_client, tz=utc, max_days=2, hourly_count=4)
        asyncio.run(session.submit("London"))
        assert len(session.daily_forecast()) == 2
        assert len(session.hourly_forecast()) == 4


class TestStaleOutcome:
    def test_stale_submit_returns_its_own_outcome(self, models):
        client = GatedClient(models)
        session = WeatherSession(client)
        outcomes = {}

        async def scenario():
            first = asyncio.create_task(session.submit("London"))
            await asyncio.sleep(0)
            second = asyncio.create_task(session.submit("Nowhere"))
            await asyncio.sleep(0)
            client.gates["London"].set()
            outcomes["London"] = await first
            # the newer search is still in flight
            assert session.state == Loading(query="Nowhere")
            client.gates["Nowhere"].set()
            outcomes["Nowhere"] = await second

        asyncio.run(scenario())
        assert isinstance(outcomes["London"], Success)
        assert outcomes["London"].current.name == "London"
        assert isinstance(outcomes["Nowhere"], Error)
        assert session.state is outcomes["Nowhere"]

    def test_views_of_explicit_state(self, models, ok_client: MagicMock, utc):
        session = WeatherSession(ok_client, tz=utc)
        current, forecast = models
        other = Success(current=current, forecast=forecast)
        assert session.daily_forecast() == []
        assert len(session.daily_forecast(other)) == 6
        assert len(session.hourly_forecast(other)) == 8
