from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from models.transaction import Transaction
from services.statistics_service import (
    CategoryTotal, category_totals, filter_transactions, period_summary, trend_series,
)
from services.transaction_service import TransactionService
from utils.constants import PERIOD_MONTH, PERIODS, TRANSACTION_TYPES
from viewmodels.base import ViewModel
from viewmodels.state import Delivered, Success

_STREAM = "transactions"


@dataclass(frozen=True)
class StatisticsSnapshot:
    period: str
    type: str
    transactions: list[Transaction] = field(default_factory=list)
    totals: list[CategoryTotal] = field(default_factory=list)
    trend: list[tuple[str, float]] = field(default_factory=list)
    total: float = 0.0
    summary: dict = field(default_factory=dict)


def build_snapshot(
    transactions: list[Transaction],
    period: str,
    type_: str,
    now: datetime,
    first_weekday: int = 0,
) -> StatisticsSnapshot:
    filtered = filter_transactions(transactions, period, type_, now, first_weekday)
    return StatisticsSnapshot(
        period=period,
        type=type_,
        transactions=filtered,
        totals=category_totals(filtered),
        trend=trend_series(transactions, period, type_, now),
        total=sum(tx.amount for tx in filtered),
        summary=period_summary(transactions, period, now, first_weekday),
    )


class StatisticsViewModel(ViewModel):
    """Live statistics over all of the user's transactions.

    The clock is injected so the same snapshot is produced for the same
    transactions and the same "now".
    """

    def __init__(
        self,
        tx_service: TransactionService,
        clock: Callable[[], datetime] = datetime.now,
        first_weekday: int = 0,
    ):
        super().__init__()
        self._svc = tx_service
        self._clock = clock
        self._first_weekday = first_weekday
        self._transactions: list[Transaction] = []
        self.period = PERIOD_MONTH
        self.type = "expense"

    def load(self):
        self._start_stream(_STREAM, self._svc.watch_all)

    def _on_snapshot(self, data):
        self._transactions = list(data)
        self._dispatch(Delivered(self._snapshot()))

    def _snapshot(self) -> StatisticsSnapshot:
        return build_snapshot(
            self._transactions, self.period, self.type, self._clock(), self._first_weekday
        )

    def set_period(self, period: str):
        if period not in PERIODS:
            raise ValueError(f"Unknown period: {period}")
        self.period = period
        self._recompute()

    def set_type(self, type_: str):
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        self.type = type_
        self._recompute()

    def _recompute(self):
        if isinstance(self.state, Success):
            self._dispatch(Delivered(self._snapshot()))
        else:
            self._notify()
