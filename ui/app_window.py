import logging

import customtkinter as ctk
from services.auth_service import AuthService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.notification_service import Notification, NotificationCenter
from services.transaction_service import TransactionService
from ui.components.alert_banner import AlertBanner
from ui.tabs.budgets_tab import BudgetsTab
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.statistics_tab import StatisticsTab
from ui.tabs.transactions_tab import TransactionsTab
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH
from viewmodels.auth_viewmodel import AuthViewModel
from viewmodels.budget_viewmodel import BudgetViewModel
from viewmodels.category_viewmodel import CategoryViewModel
from viewmodels.statistics_viewmodel import StatisticsViewModel
from viewmodels.transaction_viewmodel import TransactionViewModel

logger = logging.getLogger(__name__)


class AppWindow(ctk.CTk):
    """Main window for one signed-in session."""

    def __init__(
        self,
        auth_vm: AuthViewModel,
        auth_service: AuthService,
        tx_service: TransactionService,
        category_service: CategoryService,
        budget_service: BudgetService,
        notifications: NotificationCenter,
        budget_alerts: bool = True,
        first_weekday: int = 0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._auth_vm = auth_vm
        self._auth = auth_service
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._budget_svc = budget_service
        self._notifications = notifications
        self._budget_alerts = budget_alerts
        self._first_weekday = first_weekday
        self._banners: dict[str, AlertBanner] = {}
        self.signed_out = False

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        # Category choices for the transaction and budget forms
        self._choices_vm = CategoryViewModel(category_service)
        self._choices_vm.load_all()

        self._build_user_bar()
        self._build_banner_area()
        self._build_tabs()

        self._notifications.add_listener(self._on_notification)
        for notification in self._notifications.active:
            self._on_notification(notification.key, notification)

    # ── User bar ─────────────────────────────────────────────────────────────
    def _build_user_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        ctk.CTkLabel(
            bar, text=APP_NAME, font=ctk.CTkFont(size=15, weight="bold"),
        ).pack(side="left", padx=(12, 4), pady=8)

        user = self._auth.current_user
        ctk.CTkButton(
            bar, text="Sign Out", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._sign_out,
        ).pack(side="right", padx=(4, 12))
        ctk.CTkLabel(
            bar, text=user.email if user else "", text_color="gray60",
        ).pack(side="right", padx=4)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Transactions", "Statistics", "Budgets", "Categories"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        TransactionsTab(
            self._tabview.tab("Transactions"),
            view_model=TransactionViewModel(self._tx_svc),
            category_vm=self._choices_vm,
        ).grid(row=0, column=0, sticky="nsew")

        StatisticsTab(
            self._tabview.tab("Statistics"),
            view_model=StatisticsViewModel(self._tx_svc, first_weekday=self._first_weekday),
        ).grid(row=0, column=0, sticky="nsew")

        BudgetsTab(
            self._tabview.tab("Budgets"),
            view_model=BudgetViewModel(
                self._budget_svc, self._notifications, alerts_enabled=self._budget_alerts,
            ),
            category_vm=self._choices_vm,
        ).grid(row=0, column=0, sticky="nsew")

        CategoriesTab(
            self._tabview.tab("Categories"),
            view_model=CategoryViewModel(self._cat_svc),
        ).grid(row=0, column=0, sticky="nsew")

    # ── Banners ──────────────────────────────────────────────────────────────
    def _on_notification(self, key: str, notification: Notification | None):
        old = self._banners.pop(key, None)
        if old is not None:
            old.destroy()
        if notification is None:
            return
        banner = AlertBanner(
            self._banner_frame, notification, on_dismiss=self._notifications.dismiss,
        )
        banner.pack(fill="x", pady=2)
        self._banners[key] = banner

    # ── Session ──────────────────────────────────────────────────────────────
    def _sign_out(self):
        self._auth_vm.logout()
        self.signed_out = True
        self.close()

    def close(self):
        self._notifications.remove_listener(self._on_notification)
        self._choices_vm.close()
        self.destroy()
