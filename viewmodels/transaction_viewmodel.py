import logging

from models.transaction import Transaction
from services.transaction_service import TransactionService
from utils.constants import RECENT_TRANSACTION_LIMIT
from utils.errors import NotAuthenticatedError
from utils.result import BatchResult, Result
from viewmodels.base import ViewModel
from viewmodels.state import data_or

logger = logging.getLogger(__name__)

_STREAM = "transactions"


class TransactionViewModel(ViewModel):
    def __init__(self, tx_service: TransactionService):
        super().__init__()
        self._svc = tx_service
        self.current_transaction: Transaction | None = None
        self.search_query = ""
        self.selection_mode = False
        self.selected_ids: set[str] = set()
        self.last_batch: BatchResult | None = None

    # ── Loading ─────────────────────────────────────────────────────────────
    def load_all(self):
        self._start_stream(_STREAM, self._svc.watch_all)

    def load_by_type(self, type_: str):
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_by_type(type_, ok, err)
        )

    def load_by_month(self, month: int, year: int):
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_by_month(month, year, ok, err)
        )

    def load_by_type_and_month(self, type_: str, month: int, year: int):
        self._start_stream(
            _STREAM,
            lambda ok, err: self._svc.watch_by_type_and_month(type_, month, year, ok, err),
        )

    def load_recent(self, limit: int = RECENT_TRANSACTION_LIMIT):
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_recent(ok, err, limit=limit)
        )

    def load_transaction(self, tx_id: str) -> Result:
        """Point read for the edit screen; fills current_transaction."""
        try:
            result = self._svc.get_by_id(tx_id)
        except NotAuthenticatedError as e:
            result = Result.failure(e)
        self.current_transaction = result.value if result.ok else None
        self.message = None if result.ok else result.error
        self._notify()
        return result

    # ── Derived ─────────────────────────────────────────────────────────────
    @property
    def transactions(self) -> list[Transaction]:
        """Current snapshot narrowed by the search query."""
        all_tx = data_or(self.state, [])
        query = self.search_query.strip().lower()
        if not query:
            return list(all_tx)
        return [
            tx for tx in all_tx
            if query in tx.description.lower() or query in tx.category.lower()
        ]

    def set_search(self, query: str):
        self.search_query = query
        self._notify()

    # ── Selection ───────────────────────────────────────────────────────────
    def toggle_selection_mode(self):
        self.selection_mode = not self.selection_mode
        if not self.selection_mode:
            self.selected_ids = set()
        self._notify()

    def toggle_selection(self, tx_id: str):
        if tx_id in self.selected_ids:
            self.selected_ids = self.selected_ids - {tx_id}
        else:
            self.selected_ids = self.selected_ids | {tx_id}
        self._notify()

    def select_all(self, transactions: list[Transaction] | None = None):
        source = self.transactions if transactions is None else transactions
        self.selected_ids = {tx.id for tx in source}
        self._notify()

    def clear_selection(self):
        self.selected_ids = set()
        self._notify()

    def delete_selected(self) -> BatchResult:
        """Delete every selected transaction one at a time, then leave selection mode."""
        ids = sorted(self.selected_ids)
        try:
            batch = self._svc.delete_many(ids)
        except NotAuthenticatedError as e:
            batch = BatchResult(failure_count=len(ids), errors=[str(e)] * len(ids))

        self.selection_mode = False
        self.selected_ids = set()
        self.last_batch = batch
        if batch.failure_count:
            self.message = f"Failed to delete {batch.failure_count} transaction(s)"
        else:
            self.message = None
        self._notify()
        return batch

    # ── Mutations ───────────────────────────────────────────────────────────
    def add(self, tx: Transaction) -> Result:
        return self._mutate(lambda: self._svc.add(tx))

    def update(self, tx: Transaction) -> Result:
        return self._mutate(lambda: self._svc.update(tx))

    def delete(self, tx_id: str) -> Result:
        return self._mutate(lambda: self._svc.delete(tx_id))
