from datetime import date

from models.budget import Budget
from services.budget_service import BudgetService
from services.notification_service import NotificationCenter
from utils.date_helpers import today
from utils.result import Result
from viewmodels.base import ViewModel
from viewmodels.state import data_or

_STREAM = "budgets"


class BudgetViewModel(ViewModel):
    def __init__(
        self,
        budget_service: BudgetService,
        notifications: NotificationCenter | None = None,
        alerts_enabled: bool = True,
    ):
        super().__init__()
        self._svc = budget_service
        self._notifications = notifications
        self.alerts_enabled = alerts_enabled
        self.on_date: date = today()

    def load(self, on_date: date | None = None):
        """Budgets covering on_date (default: today)."""
        self.on_date = on_date or today()
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_for_date(self.on_date, ok, err)
        )

    def _on_snapshot(self, data):
        if self.alerts_enabled and self._notifications is not None:
            self._notifications.check_budgets(data)
        super()._on_snapshot(data)

    @property
    def budgets(self) -> list[Budget]:
        return list(data_or(self.state, []))

    def save(self, budget: Budget) -> Result:
        return self._mutate(lambda: self._svc.add(budget))

    def update(self, budget: Budget) -> Result:
        return self._mutate(lambda: self._svc.update(budget))

    def delete(self, budget_id: str) -> Result:
        return self._mutate(lambda: self._svc.delete(budget_id))
