import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.budget_dao import BudgetDAO
from database.user_dao import UserDAO

from services.auth_service import AuthService
from services.transaction_service import TransactionService
from services.category_service import CategoryService
from services.budget_service import BudgetService
from services.notification_service import NotificationCenter

from ui.app_window import AppWindow
from ui.components.auth_window import AuthWindow
from utils.app_config import configure_logging, get_db_folder
from utils.date_helpers import resolve_first_weekday
from viewmodels.auth_viewmodel import AuthViewModel

logger = logging.getLogger(__name__)


def main():
    configure_logging()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_in_folder(get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    user_dao = UserDAO(db)
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    budget_dao = BudgetDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    auth_svc = AuthService(user_dao, db)
    tx_svc = TransactionService(tx_dao, auth_svc)
    category_svc = CategoryService(category_dao, auth_svc)
    budget_svc = BudgetService(budget_dao, auth_svc)
    notifications = NotificationCenter()

    auth_svc.restore_session()

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")
    budget_alerts = db.get_setting("budget_alerts", "1") == "1"
    first_weekday = resolve_first_weekday(db.get_setting("first_weekday", ""))

    # ── Launch UI: sign in, run a session, repeat on sign-out ───────────────
    auth_vm = AuthViewModel(auth_svc)
    try:
        while True:
            if not auth_vm.signed_in:
                AuthWindow(auth_vm).mainloop()
                if not auth_vm.signed_in:
                    break

            app = AppWindow(
                auth_vm=auth_vm,
                auth_service=auth_svc,
                tx_service=tx_svc,
                category_service=category_svc,
                budget_service=budget_svc,
                notifications=notifications,
                budget_alerts=budget_alerts,
                first_weekday=first_weekday,
            )
            app.protocol("WM_DELETE_WINDOW", app.close)
            app.mainloop()
            if not app.signed_out:
                break
            for notification in notifications.active:
                notifications.dismiss(notification.key)
    finally:
        db.close()
        logger.info("Closed database")


if __name__ == "__main__":
    main()
