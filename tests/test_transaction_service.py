"""Transaction writes, reads and per-user scoping."""

from __future__ import annotations

from datetime import datetime

import pytest

from services.transaction_service import TransactionService
from utils.errors import NotAuthenticatedError

from conftest import PASSWORD, FlakyTransactionDAO, make_tx


def _current(service) -> list:
    snapshots = []
    service.watch_all(snapshots.append).cancel()
    return snapshots[0]


def test_add_assigns_id_owner_and_month(user, tx_service) -> None:
    result = tx_service.add(make_tx(25, when=datetime(2024, 2, 29, 18, 30)))
    assert result.ok
    stored = result.value
    assert stored.id
    assert stored.user_id == user.id
    assert (stored.month, stored.year) == (2, 2024)

    loaded = tx_service.get_by_id(stored.id)
    assert loaded.ok
    assert loaded.value == stored


def test_blank_category_becomes_other(user, tx_service) -> None:
    result = tx_service.add(make_tx(3, category="   "))
    assert result.value.category == "Other"


def test_invalid_amount_raises_before_store(user, tx_service) -> None:
    with pytest.raises(ValueError):
        tx_service.add(make_tx(-5))
    with pytest.raises(ValueError):
        tx_service.add(make_tx(5, type_="transfer"))
    assert _current(tx_service) == []


def test_list_is_newest_first(user, tx_service) -> None:
    tx_service.add(make_tx(1, when=datetime(2024, 3, 1)))
    tx_service.add(make_tx(2, when=datetime(2024, 3, 20)))
    tx_service.add(make_tx(3, when=datetime(2024, 3, 10)))
    assert [tx.amount for tx in _current(tx_service)] == [2, 3, 1]


def test_recent_is_limited(user, tx_service) -> None:
    for day in range(1, 9):
        tx_service.add(make_tx(day, when=datetime(2024, 3, day)))
    snapshots = []
    tx_service.watch_recent(snapshots.append).cancel()
    assert [tx.amount for tx in snapshots[0]] == [8, 7, 6, 5, 4]


def test_by_month_uses_stored_fields(user, tx_service) -> None:
    tx_service.add(make_tx(1, when=datetime(2024, 3, 31, 23, 0)))
    tx_service.add(make_tx(2, when=datetime(2024, 4, 1, 1, 0)))
    snapshots = []
    tx_service.watch_by_type_and_month("expense", 4, 2024, snapshots.append).cancel()
    assert [tx.amount for tx in snapshots[0]] == [2]


def test_update_replaces_document(user, tx_service) -> None:
    stored = tx_service.add(make_tx(10, description="lunch")).value
    stored.amount = 12.5
    stored.description = "  late lunch "
    result = tx_service.update(stored)
    assert result.ok
    assert tx_service.get_by_id(stored.id).value.description == "late lunch"


def test_update_missing_document_fails(user, tx_service) -> None:
    ghost = make_tx(10)
    ghost.id = "missing"
    result = tx_service.update(ghost)
    assert not result.ok
    assert "not found" in result.error


def test_delete_and_get_missing(user, tx_service) -> None:
    stored = tx_service.add(make_tx(10)).value
    assert tx_service.delete(stored.id).ok
    assert not tx_service.get_by_id(stored.id).ok
    assert not tx_service.delete(stored.id).ok


def test_users_only_see_their_own_transactions(auth, user, tx_service) -> None:
    mine = tx_service.add(make_tx(10)).value
    auth.logout()
    auth.register("bob@example.com", PASSWORD)

    assert _current(tx_service) == []
    assert not tx_service.get_by_id(mine.id).ok
    assert not tx_service.delete(mine.id).ok

    auth.logout()
    auth.login("alice@example.com", PASSWORD)
    assert [tx.id for tx in _current(tx_service)] == [mine.id]


def test_signed_out_calls_fail_hard(auth, tx_service) -> None:
    with pytest.raises(NotAuthenticatedError, match="User not logged in"):
        tx_service.watch_all(lambda _: None)
    with pytest.raises(NotAuthenticatedError):
        tx_service.add(make_tx(5))


def test_delete_many_continues_after_failure(db, auth, user) -> None:
    dao = FlakyTransactionDAO(db)
    service = TransactionService(dao, auth)
    ids = [service.add(make_tx(n)).value.id for n in (1, 2, 3)]
    dao.fail_ids = {ids[1]}

    batch = service.delete_many(ids)

    assert batch.success_count == 2
    assert batch.failure_count == 1
    assert batch.errors == ["database is locked"]
    assert [tx.id for tx in _current(service)] == [ids[1]]
