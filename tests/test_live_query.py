"""Live query delivery, error reporting and cancellation."""

from __future__ import annotations

import sqlite3

from database.live_query import Subscription
from utils.constants import BUDGETS, TRANSACTIONS

from conftest import make_tx


def test_initial_snapshot_is_delivered_immediately(db, user, tx_service) -> None:
    tx_service.add(make_tx(12))
    snapshots = []
    sub = tx_service.watch_all(snapshots.append)
    assert len(snapshots) == 1
    assert [tx.amount for tx in snapshots[0]] == [12]
    sub.cancel()


def test_commit_pushes_fresh_snapshot(db, user, tx_service) -> None:
    snapshots = []
    sub = tx_service.watch_all(snapshots.append)
    tx_service.add(make_tx(5))
    tx_service.add(make_tx(7))
    assert [len(s) for s in snapshots] == [0, 1, 2]
    sub.cancel()


def test_other_collections_do_not_trigger(db, user, tx_service) -> None:
    snapshots = []
    sub = tx_service.watch_all(snapshots.append)
    db.notify_changed(BUDGETS)
    assert len(snapshots) == 1
    sub.cancel()


def test_cancel_stops_delivery_and_unregisters(db, user, tx_service) -> None:
    snapshots = []
    sub = tx_service.watch_all(snapshots.append)
    assert db.listener_count(TRANSACTIONS) == 1
    sub.cancel()
    sub.cancel()
    assert not sub.active
    assert db.listener_count(TRANSACTIONS) == 0
    tx_service.add(make_tx(5))
    assert len(snapshots) == 1


def test_context_manager_cancels(db, user, tx_service) -> None:
    with tx_service.watch_all(lambda _: None) as sub:
        assert sub.active
    assert not sub.active
    assert db.listener_count(TRANSACTIONS) == 0


def test_failing_query_reports_once_and_stops(db) -> None:
    calls = {"fetch": 0}
    errors = []

    def fetch():
        calls["fetch"] += 1
        raise sqlite3.OperationalError("no such table: transactions")

    sub = Subscription(db, TRANSACTIONS, fetch, lambda _: None, errors.append)
    db.notify_changed(TRANSACTIONS)
    assert errors == ["no such table: transactions"]
    assert calls["fetch"] == 1
    assert not sub.active


def test_filtered_stream_only_sees_matching_documents(db, user, tx_service) -> None:
    snapshots = []
    sub = tx_service.watch_by_type("income", snapshots.append)
    tx_service.add(make_tx(5, "expense"))
    tx_service.add(make_tx(9, "income", "Salary"))
    assert [tx.amount for tx in snapshots[-1]] == [9]
    sub.cancel()


def test_unreadable_row_stops_only_that_stream(db, user, tx_service) -> None:
    errors = []
    sub = tx_service.watch_all(lambda _: None, errors.append)
    pushes = []
    db.add_listener(TRANSACTIONS, lambda: pushes.append(True))

    db.get_connection().execute(
        "INSERT INTO transactions(id, user_id, amount, type, date) VALUES (?, ?, ?, ?, ?)",
        ("bad", user.id, 5, "expense", "10/03/2024"),
    )
    db.commit(TRANSACTIONS)

    assert errors == ["Invalid timestamp: '10/03/2024'"]
    assert not sub.active
    assert pushes == [True]
