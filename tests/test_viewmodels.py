"""Screen view-models driven against a real sqlite store."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime

import pytest

from database.transaction_dao import TransactionDAO
from models.budget import Budget
from models.category import Category
from services.budget_service import month_period
from services.notification_service import NotificationCenter, budget_alert_key
from services.transaction_service import TransactionService
from utils.date_helpers import today
from viewmodels.budget_viewmodel import BudgetViewModel
from viewmodels.category_viewmodel import CategoryViewModel
from viewmodels.state import Error, Loading, Success
from viewmodels.statistics_viewmodel import StatisticsViewModel
from viewmodels.transaction_viewmodel import TransactionViewModel

from conftest import FlakyTransactionDAO, make_tx


class BrokenQueryDAO(TransactionDAO):
    def query(self, *args, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")


def test_starts_loading_then_success(user, tx_service) -> None:
    vm = TransactionViewModel(tx_service)
    assert isinstance(vm.state, Loading)
    vm.load_all()
    assert vm.state == Success([])
    tx_service.add(make_tx(10))
    assert [tx.amount for tx in vm.transactions] == [10]
    vm.close()


def test_observers_are_told_about_changes(user, tx_service) -> None:
    vm = TransactionViewModel(tx_service)
    calls = []
    remove = vm.observe(lambda: calls.append(vm.state))
    vm.load_all()
    assert isinstance(calls[0], Loading)
    assert isinstance(calls[-1], Success)
    remove()
    count = len(calls)
    tx_service.add(make_tx(1))
    assert len(calls) == count
    vm.close()


def test_signed_out_load_becomes_error(tx_service) -> None:
    vm = TransactionViewModel(tx_service)
    vm.load_all()
    assert vm.state == Error("User not logged in")
    assert vm.subscription_count == 0


def test_query_failure_becomes_error(db, auth, user) -> None:
    vm = TransactionViewModel(TransactionService(BrokenQueryDAO(db), auth))
    vm.load_all()
    assert vm.state == Error("disk I/O error")


def test_reload_replaces_stream(db, user, tx_service) -> None:
    vm = TransactionViewModel(tx_service)
    vm.load_all()
    vm.load_by_type("income")
    vm.load_by_month(3, 2024)
    assert vm.subscription_count == 1
    assert db.listener_count("transactions") == 1
    vm.close()
    assert db.listener_count("transactions") == 0


def test_search_filters_description_and_category(user, tx_service) -> None:
    tx_service.add(make_tx(5, category="Food", description="Pizza night"))
    tx_service.add(make_tx(7, category="Transport", description="Bus"))
    vm = TransactionViewModel(tx_service)
    vm.load_all()
    vm.set_search("pizza")
    assert [tx.amount for tx in vm.transactions] == [5]
    vm.set_search("TRANS")
    assert [tx.amount for tx in vm.transactions] == [7]
    vm.close()


def test_batch_delete_with_one_failure(db, auth, user) -> None:
    dao = FlakyTransactionDAO(db)
    service = TransactionService(dao, auth)
    ids = [service.add(make_tx(n)).value.id for n in (1, 2, 3)]
    dao.fail_ids = {ids[0]}

    vm = TransactionViewModel(service)
    vm.load_all()
    vm.toggle_selection_mode()
    vm.select_all()
    assert vm.selected_ids == set(ids)

    batch = vm.delete_selected()

    assert batch.success_count == 2
    assert batch.failure_count == 1
    assert not vm.selection_mode
    assert vm.selected_ids == set()
    assert vm.message == "Failed to delete 1 transaction(s)"
    assert [tx.id for tx in vm.transactions] == [ids[0]]
    vm.close()


def test_selection_toggles(user, tx_service) -> None:
    vm = TransactionViewModel(tx_service)
    vm.toggle_selection_mode()
    vm.toggle_selection("a")
    vm.toggle_selection("b")
    vm.toggle_selection("a")
    assert vm.selected_ids == {"b"}
    vm.toggle_selection_mode()
    assert vm.selected_ids == set()


def test_failed_mutation_keeps_list(user, tx_service) -> None:
    tx_service.add(make_tx(10))
    vm = TransactionViewModel(tx_service)
    vm.load_all()
    before = vm.state

    ghost = replace(make_tx(3), id="missing")
    assert not vm.update(ghost).ok
    assert vm.state == before
    assert "not found" in vm.message

    assert not vm.add(make_tx(-1)).ok
    assert vm.message == "Amount must be positive."
    vm.clear_message()
    assert vm.message is None
    vm.close()


def test_load_transaction_for_edit(user, tx_service) -> None:
    stored = tx_service.add(make_tx(42)).value
    vm = TransactionViewModel(tx_service)
    assert vm.load_transaction(stored.id).ok
    assert vm.current_transaction == stored
    assert not vm.load_transaction("missing").ok
    assert vm.current_transaction is None


def test_category_viewmodel_groups_and_choices(user, category_service) -> None:
    vm = CategoryViewModel(category_service)
    vm.load_all()
    assert vm.add("Food", "expense").ok
    food = vm.categories[0]
    assert vm.add("Groceries", "expense", food.id).ok
    assert vm.add("Salary", "income").ok

    assert [g.parent.name for g in vm.groups] == ["Food", "Salary"]
    assert [c.name for c in vm.top_level_choices("expense")] == ["Food"]
    assert not vm.add("", "expense").ok
    assert vm.message == "Category name cannot be empty."
    vm.close()


def test_budget_viewmodel_raises_and_clears_alerts(user, budget_service) -> None:
    center = NotificationCenter()
    vm = BudgetViewModel(budget_service, center)
    vm.load()
    start, end = month_period(today())
    result = vm.save(Budget(
        id="", user_id="", category="Food",
        allocated_amount=100, spent_amount=95, start_date=start, end_date=end,
    ))
    assert result.ok
    key = budget_alert_key(result.value.id)
    assert [n.key for n in center.active] == [key]
    assert center.active[0].severity == "error"

    assert vm.update(replace(result.value, spent_amount=10)).ok
    assert center.active == []
    assert [b.spent_amount for b in vm.budgets] == [10]
    vm.close()


def test_deleting_budget_clears_its_alert(user, budget_service) -> None:
    center = NotificationCenter()
    vm = BudgetViewModel(budget_service, center)
    vm.load()
    start, end = month_period(today())
    saved = vm.save(Budget(
        id="", user_id="", category="Food",
        allocated_amount=100, spent_amount=95, start_date=start, end_date=end,
    )).value
    assert [n.key for n in center.active] == [budget_alert_key(saved.id)]

    assert vm.delete(saved.id).ok
    assert vm.budgets == []
    assert center.active == []
    vm.close()


def test_budget_alerts_can_be_disabled(user, budget_service) -> None:
    center = NotificationCenter()
    vm = BudgetViewModel(budget_service, center, alerts_enabled=False)
    vm.load()
    start, end = month_period(today())
    vm.save(Budget(
        id="", user_id="", category="Food",
        allocated_amount=100, spent_amount=60, start_date=start, end_date=end,
    ))
    assert center.active == []
    vm.close()


def test_statistics_viewmodel_recomputes(user, tx_service) -> None:
    now = datetime(2024, 3, 15, 12, 0)
    tx_service.add(make_tx(100, "expense", "Food"))
    tx_service.add(make_tx(200, "income", "Salary"))
    vm = StatisticsViewModel(tx_service, clock=lambda: now)
    vm.load()

    snap = vm.state.data
    assert snap.period == "Month"
    assert [(t.category, t.amount) for t in snap.totals] == [("Food", 100)]

    tx_service.add(make_tx(50, "expense", "Food"))
    assert vm.state.data.total == 150

    vm.set_type("income")
    assert vm.state.data.total == 200
    vm.set_period("Year")
    assert len(vm.state.data.trend) == 12

    with pytest.raises(ValueError):
        vm.set_period("Decade")
    with pytest.raises(ValueError):
        vm.set_type("transfer")
    vm.close()


def test_recent_and_clear_selection(user, tx_service) -> None:
    for day in range(1, 8):
        tx_service.add(make_tx(day, when=datetime(2024, 3, day)))
    vm = TransactionViewModel(tx_service)
    vm.load_recent()
    assert [tx.amount for tx in vm.transactions] == [7, 6, 5, 4, 3]
    vm.select_all()
    assert len(vm.selected_ids) == 5
    vm.clear_selection()
    assert vm.selected_ids == set()
    vm.close()


def test_top_level_stream(user, category_service) -> None:
    vm = CategoryViewModel(category_service)
    vm.load_top_level("expense")
    food = category_service.add(
        Category(id="", user_id="", name="Food", type="expense")
    ).value
    category_service.add(
        Category(id="", user_id="", name="Dining", type="expense", parent_id=food.id)
    )
    category_service.add(Category(id="", user_id="", name="Salary", type="income"))
    assert [c.name for c in vm.categories] == ["Food"]
    vm.close()
