import logging
from dataclasses import replace
from typing import Callable

from database.live_query import Subscription
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.auth_service import AuthService
from utils.constants import RECENT_TRANSACTION_LIMIT, TRANSACTIONS
from utils.errors import NotFoundError
from utils.result import BatchResult, Result, capture
from utils.validation import parse_amount, transaction_category, validate_transaction_type

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list[Transaction]], None]
ErrorCallback = Callable[[str], None]


class TransactionService:
    """Transactions of the signed-in user: live queries and Result-returning writes."""

    def __init__(self, tx_dao: TransactionDAO, auth: AuthService):
        self._dao = tx_dao
        self._auth = auth

    # ── Live queries ────────────────────────────────────────────────────────
    def watch_all(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None) -> Subscription:
        return self._dao.listen(self._auth.current_user_id(), on_snapshot, on_error)

    def watch_by_type(
        self, type_: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error, type_filter=type_
        )

    def watch_by_month(
        self, month: int, year: int,
        on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None,
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error, month=month, year=year
        )

    def watch_by_type_and_month(
        self, type_: str, month: int, year: int,
        on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None,
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error,
            type_filter=type_, month=month, year=year,
        )

    def watch_recent(
        self, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None,
        limit: int = RECENT_TRANSACTION_LIMIT,
    ) -> Subscription:
        return self._dao.listen(self._auth.current_user_id(), on_snapshot, on_error, limit=limit)

    # ── Point read ──────────────────────────────────────────────────────────
    def get_by_id(self, tx_id: str) -> Result:
        user_id = self._auth.current_user_id()
        result = capture("Loading transaction", self._dao.get_by_id, tx_id)
        if result.ok and (result.value is None or result.value.user_id != user_id):
            return Result.failure(NotFoundError(TRANSACTIONS, tx_id))
        return result

    # ── Mutations ───────────────────────────────────────────────────────────
    def add(self, tx: Transaction) -> Result:
        """Store a new transaction owned by the current user.

        month/year are always stamped from the timestamp so new records never
        take the legacy fallback path.
        """
        tx = self._normalized(tx)
        tx = replace(tx, user_id=self._auth.current_user_id())
        return capture("Adding transaction", self._dao.create, tx)

    def update(self, tx: Transaction) -> Result:
        """Full replacement of an existing transaction."""
        tx = self._normalized(tx)
        tx = replace(tx, user_id=self._auth.current_user_id())
        return capture("Updating transaction", self._dao.update, tx)

    def delete(self, tx_id: str) -> Result:
        user_id = self._auth.current_user_id()
        return capture("Deleting transaction", self._dao.delete, tx_id, user_id)

    def delete_many(self, tx_ids: list[str]) -> BatchResult:
        """Delete one by one; a failure does not stop the remaining deletes."""
        batch = BatchResult()
        for tx_id in tx_ids:
            batch.record(self.delete(tx_id))
        if batch.failure_count:
            logger.error("Failed to delete %d transaction(s)", batch.failure_count)
        return batch

    def _normalized(self, tx: Transaction) -> Transaction:
        validate_transaction_type(tx.type)
        return replace(
            tx,
            amount=parse_amount(tx.amount),
            category=transaction_category(tx.category),
            description=tx.description.strip(),
            month=tx.date.month,
            year=tx.date.year,
        )
