"""Shared fixtures: a throwaway sqlite store per test and the service stack
wired the same way main.py wires it."""

from __future__ import annotations

import sqlite3
from datetime import datetime

import pytest

from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.user_dao import UserDAO
from models.transaction import Transaction
from services.auth_service import AuthService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.transaction_service import TransactionService

PASSWORD = "secret123"


class FlakyTransactionDAO(TransactionDAO):
    """Deletes fail for the ids in fail_ids."""

    def __init__(self, db, fail_ids=()):
        super().__init__(db)
        self.fail_ids = set(fail_ids)

    def delete(self, tx_id, user_id):
        if tx_id in self.fail_ids:
            raise sqlite3.OperationalError("database is locked")
        super().delete(tx_id, user_id)


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def auth(db) -> AuthService:
    return AuthService(UserDAO(db), db)


@pytest.fixture
def user(auth):
    result = auth.register("alice@example.com", PASSWORD)
    assert result.ok, result.error
    return result.value


@pytest.fixture
def tx_dao(db) -> TransactionDAO:
    return TransactionDAO(db)


@pytest.fixture
def tx_service(tx_dao, auth) -> TransactionService:
    return TransactionService(tx_dao, auth)


@pytest.fixture
def category_service(db, auth) -> CategoryService:
    return CategoryService(CategoryDAO(db), auth)


@pytest.fixture
def budget_service(db, auth) -> BudgetService:
    return BudgetService(BudgetDAO(db), auth)


def make_tx(
    amount: float = 10.0,
    type_: str = "expense",
    category: str = "Food",
    when: datetime | None = None,
    description: str = "",
    month: int = 0,
    year: int = 0,
) -> Transaction:
    return Transaction(
        id="",
        user_id="",
        amount=amount,
        type=type_,
        category=category,
        description=description,
        date=when or datetime(2024, 3, 10, 12, 0),
        month=month,
        year=year,
    )
