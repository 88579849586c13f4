from dataclasses import replace
from datetime import date
from typing import Callable

from database.budget_dao import BudgetDAO
from database.live_query import Subscription
from models.budget import Budget
from services.auth_service import AuthService
from utils.constants import BUDGETS
from utils.date_helpers import month_bounds
from utils.errors import NotFoundError
from utils.result import Result, capture
from utils.validation import parse_amount, require_category

SnapshotCallback = Callable[[list[Budget]], None]
ErrorCallback = Callable[[str], None]


def month_period(d: date) -> tuple[date, date]:
    """Coverage period of a budget created for the month containing d."""
    return month_bounds(d)


class BudgetService:
    def __init__(self, budget_dao: BudgetDAO, auth: AuthService):
        self._dao = budget_dao
        self._auth = auth

    def watch_for_date(
        self, on_date: date, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None
    ) -> Subscription:
        """Budgets whose period contains on_date."""
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error, on_date=on_date
        )

    def get_by_id(self, budget_id: str) -> Result:
        user_id = self._auth.current_user_id()
        result = capture("Loading budget", self._dao.get_by_id, budget_id)
        if result.ok and (result.value is None or result.value.user_id != user_id):
            return Result.failure(NotFoundError(BUDGETS, budget_id))
        return result

    def add(self, budget: Budget) -> Result:
        budget = self._validated(budget)
        return capture("Adding budget", self._dao.create, budget)

    def update(self, budget: Budget) -> Result:
        budget = self._validated(budget)
        return capture("Updating budget", self._dao.update, budget)

    def delete(self, budget_id: str) -> Result:
        user_id = self._auth.current_user_id()
        return capture("Deleting budget", self._dao.delete, budget_id, user_id)

    def _validated(self, budget: Budget) -> Budget:
        if budget.start_date is None or budget.end_date is None:
            raise ValueError("Please choose a month.")
        if budget.end_date < budget.start_date:
            raise ValueError("Budget period ends before it starts.")
        if budget.spent_amount < 0:
            raise ValueError("Spent amount cannot be negative.")
        return replace(
            budget,
            user_id=self._auth.current_user_id(),
            category=require_category(budget.category),
            allocated_amount=parse_amount(budget.allocated_amount),
        )
