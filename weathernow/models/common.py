"""Common types and helpers shared across models."""

import math
from datetime import datetime, tzinfo
from enum import StrEnum
from typing import TypeAlias

UnixTime: TypeAlias = int


class Units(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"
    STANDARD = "standard"


def from_unix(ts: UnixTime, tz: tzinfo | None = None) -> datetime:
    """Convert a provider timestamp to an aware datetime.

    With tz=None the machine's local zone is used.
    """
    if tz is None:
        return datetime.fromtimestamp(ts).astimezone()
    return datetime.fromtimestamp(ts, tz)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)
