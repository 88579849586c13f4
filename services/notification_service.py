import logging
from dataclasses import dataclass
from typing import Callable

from models.budget import Budget, BudgetStatus

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    key: str        # e.g. "budget:<id>"; a new notification with the same key replaces the old one
    severity: str   # 'warning' | 'error'
    title: str
    detail: str


# listener(key, notification); notification is None when dismissed
Listener = Callable[[str, Notification | None], None]


def budget_alert_key(budget_id: str) -> str:
    return f"budget:{budget_id}"


class NotificationCenter:
    """Keyed, non-stacking notifications shown by the GUI banner area."""

    def __init__(self):
        self._active: dict[str, Notification] = {}
        self._budget_keys: set[str] = set()
        self._listeners: list[Listener] = []

    def add_listener(self, callback: Listener):
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener):
        if callback in self._listeners:
            self._listeners.remove(callback)

    @property
    def active(self) -> list[Notification]:
        return list(self._active.values())

    def show(self, notification: Notification):
        self._active[notification.key] = notification
        for callback in list(self._listeners):
            callback(notification.key, notification)

    def dismiss(self, key: str):
        if self._active.pop(key, None) is not None:
            for callback in list(self._listeners):
                callback(key, None)

    def show_budget_alert(self, budget_id: str, budget_name: str, percent: int, over: bool = False):
        logger.info("Budget alert for %s at %d%%", budget_name, percent)
        self.show(Notification(
            key=budget_alert_key(budget_id),
            severity="error" if over else "warning",
            title=f"Budget Alert: {budget_name}",
            detail=f"You have reached {percent}% of your {budget_name} budget.",
        ))

    def check_budgets(self, budgets: list[Budget]) -> int:
        """Alert on every budget past Normal. Alerts of budgets back to Normal,
        or no longer in the list, are dismissed. Returns the number shown."""
        raised: set[str] = set()
        for budget in budgets:
            status = budget.status
            if status is BudgetStatus.NORMAL:
                continue
            self.show_budget_alert(
                budget.id, budget.category, round(budget.progress * 100),
                over=status is BudgetStatus.OVER,
            )
            raised.add(budget_alert_key(budget.id))
        for key in self._budget_keys - raised:
            self.dismiss(key)
        self._budget_keys = raised
        return len(raised)
