"""Forecast view models: per-day aggregates and the hourly strip."""

from datetime import date, tzinfo

from weathernow.models.common import from_unix, round_half_up
from weathernow.models.weather import DailyAggregate, ForecastSample, WeatherCondition

DEFAULT_MAX_DAYS = 7
DEFAULT_HOURLY_COUNT = 8


class _DayBucket:
    def __init__(self, first: ForecastSample, label: str):
        self.dt = first.dt
        self.label = label
        self.weather: WeatherCondition = first.weather
        self.temps: list[float] = [first.temp]

    def reduce(self) -> DailyAggregate:
        return DailyAggregate(
            dt=self.dt,
            day=self.label,
            min_temp=round_half_up(min(self.temps)),
            max_temp=round_half_up(max(self.temps)),
            weather=self.weather,
        )


def build_daily_forecast(
    samples: list[ForecastSample],
    max_days: int = DEFAULT_MAX_DAYS,
    tz: tzinfo | None = None,
) -> list[DailyAggregate]:
    """Group 3-hour samples by calendar date in tz (local time if None).

    The first sample seen for a date supplies the day's condition and label.
    Days come out in first-seen order, capped at max_days. Samples are
    expected in chronological order; nothing is re-sorted.
    """
    buckets: dict[date, _DayBucket] = {}
    for sample in samples:
        when = from_unix(sample.dt, tz)
        key = when.date()
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = _DayBucket(sample, when.strftime("%a"))
        else:
            bucket.temps.append(sample.temp)

    return [b.reduce() for b in list(buckets.values())[:max_days]]


def hourly_slice(
    samples: list[ForecastSample], count: int = DEFAULT_HOURLY_COUNT
) -> list[ForecastSample]:
    return samples[:count]
