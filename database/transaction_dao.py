import uuid
from dataclasses import replace
from typing import Callable, Optional

from database.db_manager import DatabaseManager
from database.live_query import Subscription
from models.transaction import Transaction
from utils.constants import TRANSACTIONS
from utils.date_helpers import format_timestamp, parse_timestamp
from utils.errors import NotFoundError


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            amount=row["amount"],
            type=row["type"],
            category=row["category"],
            description=row["description"],
            date=parse_timestamp(row["date"]),
            month=row["month"],
            year=row["year"],
        )

    def query(
        self,
        user_id: str,
        type_filter: str | None = None,
        month: int | None = None,
        year: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        """Equality filters on the stored fields, newest first."""
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions WHERE user_id = ?"
        params: list = [user_id]

        if type_filter:
            sql += " AND type = ?"
            params.append(type_filter)
        if month is not None:
            sql += " AND month = ?"
            params.append(month)
        if year is not None:
            sql += " AND year = ?"
            params.append(year)

        sql += " ORDER BY date DESC, created_at DESC"
        if limit:
            sql += " LIMIT ?"
            params.append(limit)
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def listen(
        self,
        user_id: str,
        on_snapshot: Callable[[list[Transaction]], None],
        on_error: Callable[[str], None] | None = None,
        **filters,
    ) -> Subscription:
        return Subscription(
            self._db, TRANSACTIONS,
            lambda: self.query(user_id, **filters),
            on_snapshot, on_error,
        )

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, tx: Transaction) -> Transaction:
        """Insert with a freshly generated id; returns the stored copy."""
        tx = replace(tx, id=uuid.uuid4().hex)
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO transactions
               (id, user_id, amount, type, category, description, date, month, year)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (tx.id, tx.user_id, tx.amount, tx.type, tx.category,
             tx.description, format_timestamp(tx.date), tx.month, tx.year),
        )
        self._db.commit(TRANSACTIONS)
        return tx

    def update(self, tx: Transaction) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE transactions
               SET amount=?, type=?, category=?, description=?, date=?,
                   month=?, year=?, updated_at=datetime('now')
               WHERE id=? AND user_id=?""",
            (tx.amount, tx.type, tx.category, tx.description,
             format_timestamp(tx.date), tx.month, tx.year, tx.id, tx.user_id),
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(TRANSACTIONS, tx.id)
        self._db.commit(TRANSACTIONS)
        return tx

    def delete(self, tx_id: str, user_id: str):
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM transactions WHERE id = ? AND user_id = ?", (tx_id, user_id)
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(TRANSACTIONS, tx_id)
        self._db.commit(TRANSACTIONS)
