from __future__ import annotations

import pytest

from viewmodels.state import (
    Delivered, Error, Failed, Loading, Started, Success, data_or, reduce,
)


def test_happy_path() -> None:
    state = reduce(Loading(), Delivered([1, 2]))
    assert state == Success([1, 2])
    assert reduce(state, Delivered([3])) == Success([3])


def test_error_is_sticky_until_restarted() -> None:
    state = reduce(Success([1]), Failed("offline"))
    assert state == Error("offline")
    assert reduce(state, Delivered([1])) == Error("offline")
    assert reduce(state, Started()) == Loading()


def test_empty_error_message_gets_default() -> None:
    assert reduce(Loading(), Failed("")) == Error("Something went wrong")


def test_unknown_event() -> None:
    with pytest.raises(TypeError):
        reduce(Loading(), object())


def test_data_or() -> None:
    assert data_or(Success([1])) == [1]
    assert data_or(Loading(), []) == []
    assert data_or(Error("x"), "fallback") == "fallback"
