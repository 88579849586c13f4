import customtkinter as ctk
from models.transaction import Transaction
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.transaction_form import TransactionForm
from utils.constants import TYPE_COLORS
from utils.currency import format_currency
from utils.date_helpers import format_display_date, friendly_month, next_month, prev_month, today
from viewmodels.category_viewmodel import CategoryViewModel
from viewmodels.state import Error, Loading
from viewmodels.transaction_viewmodel import TransactionViewModel


_MAX_RENDERED_ROWS = 100


class TransactionsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        view_model: TransactionViewModel,
        category_vm: CategoryViewModel,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._vm = view_model
        self._cat_vm = category_vm

        self._month = today().replace(day=1)
        self._month_var = ctk.StringVar(value=friendly_month(self._month))
        self._type_var = ctk.StringVar(value="all")
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._vm.set_search(self._search_var.get()))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_filter_bar()
        self._build_selection_bar()
        self._build_header()
        self._build_list()

        self._unobserve = self._vm.observe(self._render)
        self.bind("<Destroy>", self._on_destroy, add="+")
        self._load()

    def _on_destroy(self, event):
        if event.widget is self:
            self._unobserve()
            self._vm.close()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(5, weight=1)

        # Month nav
        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).grid(
            row=0, column=0, padx=(8, 0), pady=6
        )
        ctk.CTkLabel(
            bar, textvariable=self._month_var, width=120, anchor="center"
        ).grid(row=0, column=1, padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).grid(
            row=0, column=2, padx=(0, 8)
        )

        # Type filter
        ctk.CTkSegmentedButton(
            bar,
            values=["all", "income", "expense"],
            variable=self._type_var,
            command=lambda _: self._load(),
            width=210,
        ).grid(row=0, column=3, padx=8)

        # Search
        ctk.CTkEntry(
            bar, textvariable=self._search_var,
            placeholder_text="Search…", width=160,
        ).grid(row=0, column=4, padx=8)

        btns = ctk.CTkFrame(bar, fg_color="transparent")
        btns.grid(row=0, column=6, padx=(0, 8))
        ctk.CTkButton(
            btns, text="Select", width=64, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._vm.toggle_selection_mode,
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            btns, text="+ Income", width=88,
            command=lambda: self._open_add_form("income"),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            btns, text="+ Expense", width=88,
            command=lambda: self._open_add_form("expense"),
        ).pack(side="left", padx=2)

    def _build_selection_bar(self):
        self._sel_bar = ctk.CTkFrame(self, fg_color=("gray85", "gray20"), corner_radius=8)
        self._sel_label = ctk.CTkLabel(self._sel_bar, text="", anchor="w")
        self._sel_label.pack(side="left", padx=12, pady=4)
        ctk.CTkButton(
            self._sel_bar, text="Cancel", width=70,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._vm.toggle_selection_mode,
        ).pack(side="right", padx=(2, 8), pady=4)
        self._delete_btn = ctk.CTkButton(
            self._sel_bar, text="Delete", width=90,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._delete_selected,
        )
        self._delete_btn.pack(side="right", padx=2, pady=4)
        ctk.CTkButton(
            self._sel_bar, text="Select All", width=80,
            command=lambda: self._vm.select_all(),
        ).pack(side="right", padx=2, pady=4)

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    def _next_month(self):
        self._month = next_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    def _load(self):
        type_f = self._type_var.get()
        if type_f == "all":
            self._vm.load_by_month(self._month.month, self._month.year)
        else:
            self._vm.load_by_type_and_month(type_f, self._month.month, self._month.year)

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=2, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("", 30), ("Date", 100), ("Type", 72), ("Category", 140),
                ("Description", 220), ("Amount", 100), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    # ── Scrollable list ──────────────────────────────────────────────────────
    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=3, column=0, sticky="nsew", padx=8, pady=(0, 4))
        self._scroll.grid_columnconfigure(0, weight=1)

        self._status_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._status_var, text_color="#F44336", anchor="w",
        ).grid(row=4, column=0, sticky="ew", padx=12, pady=(0, 8))

    def _render(self):
        if not self.winfo_exists():
            return
        for w in self._scroll.winfo_children():
            w.destroy()

        if self._vm.selection_mode:
            self._sel_bar.grid(row=1, column=0, sticky="ew", padx=8, pady=(4, 0))
            count = len(self._vm.selected_ids)
            self._sel_label.configure(text=f"{count} selected")
            self._delete_btn.configure(
                text=f"Delete ({count})", state="normal" if count else "disabled"
            )
        else:
            self._sel_bar.grid_remove()

        self._status_var.set(self._vm.message or "")

        state = self._vm.state
        if isinstance(state, Loading):
            self._placeholder("Loading…")
            return
        if isinstance(state, Error):
            self._placeholder(state.message, color="#F44336")
            return

        rows = self._vm.transactions
        if not rows:
            self._placeholder("No transactions for this period.")
            return

        total = len(rows)
        for idx, tx in enumerate(rows[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, tx)

        if total > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {total} transactions. Use search to narrow results.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _placeholder(self, text: str, color="gray60"):
        ctk.CTkLabel(self._scroll, text=text, text_color=color).grid(row=0, column=0, pady=20)

    def _add_row(self, idx: int, tx: Transaction):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        if self._vm.selection_mode:
            selected = ctk.BooleanVar(value=tx.id in self._vm.selected_ids)
            ctk.CTkCheckBox(
                row, text="", variable=selected, width=30,
                command=lambda t=tx: self._vm.toggle_selection(t.id),
            ).grid(row=0, column=0, padx=(6, 0), pady=4)
        else:
            ctk.CTkLabel(row, text="", width=30).grid(row=0, column=0, padx=(6, 0), pady=4)

        ctk.CTkLabel(
            row, text=format_display_date(tx.date), width=100, anchor="w"
        ).grid(row=0, column=1, padx=4, pady=4)

        color = TYPE_COLORS.get(tx.type, "gray")
        ctk.CTkLabel(
            row, text=tx.type.title(), width=72, anchor="w", text_color=color,
        ).grid(row=0, column=2, padx=4)

        ctk.CTkLabel(row, text=tx.category, width=140, anchor="w").grid(
            row=0, column=3, padx=4
        )
        ctk.CTkLabel(row, text=tx.description or "—", width=220, anchor="w").grid(
            row=0, column=4, padx=4
        )

        sign = "+" if tx.type == "income" else "-"
        ctk.CTkLabel(
            row, text=f"{sign}{format_currency(tx.amount)}", width=100, anchor="e",
            text_color=color,
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    # ── Actions ──────────────────────────────────────────────────────────────
    def _open_add_form(self, type_: str):
        form = TransactionForm(
            self.winfo_toplevel(), self._vm, self._cat_vm.categories, initial_type=type_,
        )
        self.wait_window(form)

    def _open_edit_form(self, tx: Transaction):
        result = self._vm.load_transaction(tx.id)
        if not result.ok:
            return
        form = TransactionForm(
            self.winfo_toplevel(), self._vm, self._cat_vm.categories,
            transaction=self._vm.current_transaction,
        )
        self.wait_window(form)

    def _delete_tx(self, tx: Transaction):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Transaction",
            f"Delete this {tx.type} of {format_currency(tx.amount)}?",
        )
        if dlg.result:
            self._vm.delete(tx.id)

    def _delete_selected(self):
        count = len(self._vm.selected_ids)
        if not count:
            return
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Transactions",
            f"Delete {count} selected transaction(s)?",
        )
        if dlg.result:
            self._vm.delete_selected()
