"""Page states. Exactly one is active at a time."""

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from weathernow.models.weather import CurrentConditions, Forecast

PLACE_NOT_FOUND_MESSAGE = "City not found. Please try again."


class StateKind(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Idle:
    kind: StateKind = StateKind.IDLE


@dataclass(frozen=True)
class Loading:
    query: str
    kind: StateKind = StateKind.LOADING


@dataclass(frozen=True)
class Error:
    message: str = PLACE_NOT_FOUND_MESSAGE
    kind: StateKind = StateKind.ERROR


@dataclass(frozen=True)
class Success:
    current: CurrentConditions
    forecast: Forecast
    kind: StateKind = StateKind.SUCCESS


UIState: TypeAlias = Idle | Loading | Error | Success
