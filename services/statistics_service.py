"""Aggregations over a list of transactions for the statistics screen.

All functions are pure: the only hidden input is "now", which callers pass
explicitly (it defaults to the current local time).
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from models.transaction import Transaction
from utils.constants import PERIOD_MONTH, PERIOD_WEEK, PERIOD_YEAR
from utils.date_helpers import start_of_week, week_of_month

MONTH_TREND_WEEKS = 4


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: float
    percentage: float   # share of the set total, 0..1


def resolve_month_year(tx: Transaction) -> tuple[int, int]:
    """Stored month/year when non-zero, else derived from the timestamp."""
    month = tx.month if tx.month != 0 else tx.date.month
    year = tx.year if tx.year != 0 else tx.date.year
    return month, year


def filter_transactions(
    transactions: list[Transaction],
    period: str,
    type_: str,
    now: datetime | None = None,
    first_weekday: int = 0,
) -> list[Transaction]:
    """Transactions of type_ falling in the current Week, Month or Year.

    Week keeps everything from the start of the current week onward; there is
    no upper bound, so future-dated transactions are included.
    """
    now = now or datetime.now()
    of_type = [tx for tx in transactions if tx.type == type_]

    if period == PERIOD_WEEK:
        week_start = datetime.combine(start_of_week(now.date(), first_weekday), time.min)
        return [tx for tx in of_type if tx.date >= week_start]
    if period == PERIOD_MONTH:
        return [tx for tx in of_type if resolve_month_year(tx) == (now.month, now.year)]
    if period == PERIOD_YEAR:
        return [tx for tx in of_type if resolve_month_year(tx)[1] == now.year]
    raise ValueError(f"Unknown period: {period}")


def category_totals(transactions: list[Transaction]) -> list[CategoryTotal]:
    """Sum per category name, largest first."""
    sums: dict[str, float] = defaultdict(float)
    for tx in transactions:
        sums[tx.category] += tx.amount
    total = sum(tx.amount for tx in transactions)
    ranked = sorted(sums.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryTotal(name, amount, amount / total if total else 0.0)
        for name, amount in ranked
    ]


def trend_series(
    transactions: list[Transaction],
    period: str,
    type_: str,
    now: datetime | None = None,
) -> list[tuple[str, float]]:
    """Fixed-length (label, total) series for the trend chart.

    Week: 7 days ending today. Month: W1..W4 of the current month.
    Year: Jan..Dec of the current year.
    """
    now = now or datetime.now()
    of_type = [tx for tx in transactions if tx.type == type_]

    if period == PERIOD_WEEK:
        series = []
        for offset in range(6, -1, -1):
            day = now.date() - timedelta(days=offset)
            total = sum(tx.amount for tx in of_type if tx.date.date() == day)
            series.append((day.strftime("%a"), total))
        return series

    if period == PERIOD_MONTH:
        this_month = [
            tx for tx in of_type if resolve_month_year(tx) == (now.month, now.year)
        ]
        return [
            (f"W{week}", sum(
                tx.amount for tx in this_month if week_of_month(tx.date) == week
            ))
            for week in range(1, MONTH_TREND_WEEKS + 1)
        ]

    if period == PERIOD_YEAR:
        series = []
        for month in range(1, 13):
            label = date(now.year, month, 1).strftime("%b")
            total = sum(
                tx.amount for tx in of_type
                if resolve_month_year(tx) == (month, now.year)
            )
            series.append((label, total))
        return series

    raise ValueError(f"Unknown period: {period}")


def period_summary(
    transactions: list[Transaction],
    period: str,
    now: datetime | None = None,
    first_weekday: int = 0,
) -> dict:
    """Income, expense and net totals for the period."""
    now = now or datetime.now()
    income = sum(
        tx.amount for tx in filter_transactions(transactions, period, "income", now, first_weekday)
    )
    expense = sum(
        tx.amount for tx in filter_transactions(transactions, period, "expense", now, first_weekday)
    )
    return {"income": income, "expense": expense, "net": income - expense}
