import customtkinter as ctk
from models.budget import Budget
from ui.components.budget_form import BudgetForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.constants import STATUS_COLORS, STATUS_LABELS
from utils.currency import format_currency
from utils.date_helpers import friendly_month, next_month, prev_month, today
from viewmodels.budget_viewmodel import BudgetViewModel
from viewmodels.category_viewmodel import CategoryViewModel
from viewmodels.state import Error, Loading


class BudgetsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        view_model: BudgetViewModel,
        category_vm: CategoryViewModel,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._vm = view_model
        self._cat_vm = category_vm
        self._month = today().replace(day=1)
        self._month_var = ctk.StringVar(value=friendly_month(self._month))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()

        self._unobserve = self._vm.observe(self._render)
        self.bind("<Destroy>", self._on_destroy, add="+")
        self._load()

    def _on_destroy(self, event):
        if event.widget is self:
            self._unobserve()
            self._vm.close()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(8, 0), pady=6)
        ctk.CTkLabel(
            bar, textvariable=self._month_var, width=130, anchor="center",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 12))

        ctk.CTkButton(bar, text="+ Add Budget", command=self._open_add).pack(side="left", padx=4)

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    def _next_month(self):
        self._month = next_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    def _load(self):
        current = today()
        on_date = current if self._month == current.replace(day=1) else self._month
        self._vm.load(on_date)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=(8, 4))
        self._scroll.grid_columnconfigure(0, weight=1)

        self._status_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._status_var, text_color="#F44336", anchor="w",
        ).grid(row=2, column=0, sticky="ew", padx=12, pady=(0, 8))

    def _render(self):
        if not self.winfo_exists():
            return
        for w in self._scroll.winfo_children():
            w.destroy()
        self._status_var.set(self._vm.message or "")

        state = self._vm.state
        if isinstance(state, Loading):
            self._placeholder("Loading…")
            return
        if isinstance(state, Error):
            self._placeholder(state.message, color="#F44336")
            return

        budgets = self._vm.budgets
        if not budgets:
            self._placeholder("No budgets set for this month. Click '+ Add Budget' to create one.")
            return

        for idx, b in enumerate(budgets):
            self._add_budget_card(idx, b)

    def _placeholder(self, text: str, color="gray60"):
        ctk.CTkLabel(self._scroll, text=text, text_color=color).grid(row=0, column=0, pady=40)

    def _add_budget_card(self, idx: int, b: Budget):
        card = ctk.CTkFrame(
            self._scroll, fg_color=("gray90", "gray20"), corner_radius=8
        )
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        status = b.status.value
        color = STATUS_COLORS[status]

        # Header row
        hdr = ctk.CTkFrame(card, fg_color="transparent")
        hdr.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        hdr.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            hdr, text=b.category,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w")

        ctk.CTkLabel(
            hdr, text=f"{STATUS_LABELS[status]}  {b.progress * 100:.1f}%", text_color=color,
        ).grid(row=0, column=1, padx=(8, 0))

        ctk.CTkButton(
            hdr, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda budget=b: self._open_edit(budget),
        ).grid(row=0, column=2, padx=(8, 0))
        ctk.CTkButton(
            hdr, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda budget=b: self._on_delete(budget),
        ).grid(row=0, column=3, padx=(4, 0))

        ctk.CTkLabel(
            card,
            text=f"Spent: {format_currency(b.spent_amount)}  /  Allocated: {format_currency(b.allocated_amount)}  |  Remaining: {format_currency(b.remaining)}",
            text_color="gray60", anchor="w",
        ).grid(row=1, column=0, padx=12, sticky="ew")

        bar = ctk.CTkProgressBar(card, progress_color=color)
        bar.grid(row=2, column=0, padx=12, pady=(4, 10), sticky="ew")
        bar.set(min(b.progress, 1.0))

    def _category_names(self) -> list[str]:
        return [c.name for c in self._cat_vm.categories if c.type == "expense"]

    def _open_add(self):
        form = BudgetForm(
            self.winfo_toplevel(), self._vm, self._category_names(), month=self._month,
        )
        self.wait_window(form)

    def _open_edit(self, budget: Budget):
        form = BudgetForm(
            self.winfo_toplevel(), self._vm, self._category_names(),
            month=self._month, budget=budget,
        )
        self.wait_window(form)

    def _on_delete(self, budget: Budget):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Budget",
            message=f"Delete the {budget.category} budget?",
        )
        if dlg.result:
            self._vm.delete(budget.id)
