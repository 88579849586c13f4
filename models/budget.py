from dataclasses import dataclass
from datetime import date
from enum import Enum

from utils.constants import BUDGET_OVER_RATIO, BUDGET_WARNING_RATIO


class BudgetStatus(Enum):
    NORMAL = "Normal"     # < 50%
    WARNING = "Warning"   # 50% - 90%
    OVER = "Over"         # > 90%


def budget_progress(spent: float, allocated: float) -> float:
    if allocated <= 0:
        return 0.0
    return spent / allocated


def budget_status(spent: float, allocated: float) -> BudgetStatus:
    progress = budget_progress(spent, allocated)
    if progress < BUDGET_WARNING_RATIO:
        return BudgetStatus.NORMAL
    if progress <= BUDGET_OVER_RATIO:
        return BudgetStatus.WARNING
    return BudgetStatus.OVER


@dataclass
class Budget:
    id: str
    user_id: str
    category: str           # category name
    allocated_amount: float
    spent_amount: float = 0.0
    start_date: date | None = None
    end_date: date | None = None

    @property
    def progress(self) -> float:
        return budget_progress(self.spent_amount, self.allocated_amount)

    @property
    def status(self) -> BudgetStatus:
        return budget_status(self.spent_amount, self.allocated_amount)

    @property
    def remaining(self) -> float:
        return self.allocated_amount - self.spent_amount

    def covers(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date
