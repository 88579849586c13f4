"""Load state of one data stream and its pure transitions."""
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success:
    data: Any


@dataclass(frozen=True)
class Error:
    message: str


LoadState = Union[Loading, Success, Error]


@dataclass(frozen=True)
class Started:
    pass


@dataclass(frozen=True)
class Delivered:
    data: Any


@dataclass(frozen=True)
class Failed:
    message: str


Event = Union[Started, Delivered, Failed]


def reduce(state: LoadState, event: Event) -> LoadState:
    """Started -> Loading, Delivered -> Success, Failed -> Error.

    A snapshot arriving after an error does not clear the error; the stream
    has to be restarted first.
    """
    if isinstance(event, Started):
        return Loading()
    if isinstance(event, Delivered):
        if isinstance(state, Error):
            return state
        return Success(event.data)
    if isinstance(event, Failed):
        return Error(event.message or "Something went wrong")
    raise TypeError(f"Unknown event: {event!r}")


def data_or(state: LoadState, default: Any = None) -> Any:
    return state.data if isinstance(state, Success) else default
