"""Page session: the search box, the fetch, and the four page states."""

import logging
from datetime import tzinfo

from weathernow.forecast.daily import (
    DEFAULT_HOURLY_COUNT,
    DEFAULT_MAX_DAYS,
    build_daily_forecast,
    hourly_slice,
)
from weathernow.ingest.openweather_client import OpenWeatherClient, PlaceLookupFailed
from weathernow.models.common import Units
from weathernow.models.ui_state import Error, Idle, Loading, Success, UIState
from weathernow.models.weather import DailyAggregate, ForecastSample

logger = logging.getLogger(__name__)


class WeatherSession:
    """Drives one page: idle -> loading -> error | success, cycling forever.

    Every submit is numbered. A lookup that completes after a newer submit
    was dispatched does not touch `state`, so the page always shows the
    latest search. The caller that submitted it still gets its own outcome.
    """

    def __init__(
        self,
        client: OpenWeatherClient,
        tz: tzinfo | None = None,
        max_days: int = DEFAULT_MAX_DAYS,
        hourly_count: int = DEFAULT_HOURLY_COUNT,
        units: Units = Units.METRIC,
    ):
        self.client = client
        self.tz = tz
        self.max_days = max_days
        self.hourly_count = hourly_count
        self.units = units
        self.state: UIState = Idle()
        self.query = ""
        self._seq = 0

    def set_query(self, text: str) -> None:
        self.query = text

    async def submit(self, query: str | None = None) -> Error | Success | None:
        """Search for query (or the current text).

        Returns the outcome of this search, or None if the query is blank.
        A blank or whitespace-only query fetches nothing and leaves the
        state alone.
        """
        if query is not None:
            self.query = query
        place = self.query.strip()
        if not place:
            return None

        self._seq += 1
        seq = self._seq
        self.state = Loading(query=place)
        logger.info("Searching weather for %r (#%d)", place, seq)

        try:
            current, forecast = await self.client.fetch_weather(place)
        except PlaceLookupFailed as e:
            logger.info("Lookup for %r failed: %s", place, e)
            outcome: Error | Success = Error()
        else:
            outcome = Success(current=current, forecast=forecast)

        if self._is_stale(seq):
            return outcome
        self.state = outcome
        if isinstance(outcome, Success):
            self.query = ""
        return outcome

    def retry(self) -> None:
        """Leave the error screen for the empty search screen."""
        if isinstance(self.state, Error):
            self.state = Idle()

    def _is_stale(self, seq: int) -> bool:
        if seq != self._seq:
            logger.debug("Dropping result of search #%d; #%d is newer", seq, self._seq)
            return True
        return False

    def daily_forecast(self, state: UIState | None = None) -> list[DailyAggregate]:
        state = self.state if state is None else state
        if not isinstance(state, Success):
            return []
        return build_daily_forecast(
            state.forecast.samples, max_days=self.max_days, tz=self.tz
        )

    def hourly_forecast(self, state: UIState | None = None) -> list[ForecastSample]:
        state = self.state if state is None else state
        if not isinstance(state, Success):
            return []
        return hourly_slice(state.forecast.samples, self.hourly_count)
