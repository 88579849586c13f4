"""Budget writes and the covering-date live query."""

from __future__ import annotations

from datetime import date

import pytest

from models.budget import Budget
from services.budget_service import month_period


def _budget(category="Food", allocated=100.0, spent=0.0, month=date(2024, 3, 1)) -> Budget:
    start, end = month_period(month)
    return Budget(
        id="", user_id="", category=category,
        allocated_amount=allocated, spent_amount=spent,
        start_date=start, end_date=end,
    )


def _for_date(service, on_date) -> list[Budget]:
    snapshots = []
    service.watch_for_date(on_date, snapshots.append).cancel()
    return snapshots[0]


def test_month_period() -> None:
    assert month_period(date(2024, 2, 14)) == (date(2024, 2, 1), date(2024, 2, 29))


def test_watch_for_date_returns_covering_budgets(user, budget_service) -> None:
    budget_service.add(_budget("Food", month=date(2024, 3, 1)))
    budget_service.add(_budget("Rent", month=date(2024, 4, 1)))
    assert [b.category for b in _for_date(budget_service, date(2024, 3, 31))] == ["Food"]
    assert [b.category for b in _for_date(budget_service, date(2024, 4, 1))] == ["Rent"]


def test_update_changes_spent(user, budget_service) -> None:
    stored = budget_service.add(_budget(spent=10)).value
    stored.spent_amount = 95
    assert budget_service.update(stored).ok
    assert budget_service.get_by_id(stored.id).value.spent_amount == 95


def test_invalid_budgets_rejected(user, budget_service) -> None:
    with pytest.raises(ValueError):
        budget_service.add(_budget(category=" "))
    with pytest.raises(ValueError):
        budget_service.add(_budget(allocated=0))
    with pytest.raises(ValueError):
        budget_service.add(_budget(spent=-1))
    inverted = _budget()
    inverted.start_date, inverted.end_date = inverted.end_date, inverted.start_date
    with pytest.raises(ValueError):
        budget_service.add(inverted)


def test_delete(user, budget_service) -> None:
    stored = budget_service.add(_budget()).value
    assert budget_service.delete(stored.id).ok
    assert _for_date(budget_service, date(2024, 3, 15)) == []
    assert not budget_service.delete(stored.id).ok
