import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from database.db_manager import DatabaseManager
from database.live_query import Subscription
from models.budget import Budget
from utils.constants import BUDGETS
from utils.date_helpers import format_date, parse_date
from utils.errors import NotFoundError


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            user_id=row["user_id"],
            category=row["category"],
            allocated_amount=row["allocated_amount"],
            spent_amount=row["spent_amount"],
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row["end_date"]),
        )

    def query(self, user_id: str, on_date: date | None = None) -> list[Budget]:
        """All budgets for the user, or those whose period contains on_date."""
        conn = self._db.get_connection()
        sql = "SELECT * FROM budgets WHERE user_id = ?"
        params: list = [user_id]
        if on_date is not None:
            sql += " AND start_date <= ? AND end_date >= ?"
            params.extend([format_date(on_date), format_date(on_date)])
        sql += " ORDER BY start_date, category COLLATE NOCASE"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def listen(
        self,
        user_id: str,
        on_snapshot: Callable[[list[Budget]], None],
        on_error: Callable[[str], None] | None = None,
        on_date: date | None = None,
    ) -> Subscription:
        return Subscription(
            self._db, BUDGETS,
            lambda: self.query(user_id, on_date),
            on_snapshot, on_error,
        )

    def get_by_id(self, budget_id: str) -> Optional[Budget]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budgets WHERE id = ?", (budget_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, budget: Budget) -> Budget:
        budget = replace(budget, id=uuid.uuid4().hex)
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budgets
               (id, user_id, category, allocated_amount, spent_amount, start_date, end_date)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (budget.id, budget.user_id, budget.category, budget.allocated_amount,
             budget.spent_amount, format_date(budget.start_date), format_date(budget.end_date)),
        )
        self._db.commit(BUDGETS)
        return budget

    def update(self, budget: Budget) -> Budget:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE budgets
               SET category=?, allocated_amount=?, spent_amount=?, start_date=?, end_date=?
               WHERE id=? AND user_id=?""",
            (budget.category, budget.allocated_amount, budget.spent_amount,
             format_date(budget.start_date), format_date(budget.end_date),
             budget.id, budget.user_id),
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(BUDGETS, budget.id)
        self._db.commit(BUDGETS)
        return budget

    def delete(self, budget_id: str, user_id: str):
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM budgets WHERE id = ? AND user_id = ?", (budget_id, user_id)
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(BUDGETS, budget_id)
        self._db.commit(BUDGETS)
