from dataclasses import replace
from datetime import date

import customtkinter as ctk
from models.budget import Budget
from services.budget_service import month_period
from ui.components.confirm_dialog import center_on_master
from utils.date_helpers import friendly_month, next_month, prev_month
from utils.validation import parse_amount, parse_optional_amount, require_category
from viewmodels.budget_viewmodel import BudgetViewModel


class BudgetForm(ctk.CTkToplevel):
    """Add or edit a category budget for one calendar month."""

    def __init__(
        self,
        master,
        view_model: BudgetViewModel,
        category_names: list[str],
        month: date,
        budget: Budget | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._vm = view_model
        self._budget = budget
        self._month = budget.start_date.replace(day=1) if budget else month.replace(day=1)
        self.saved = False

        self.title("Edit Budget" if budget else "Add Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        # Category selector; fixed once the budget exists
        ctk.CTkLabel(self, text="Category:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        current_cat = budget.category if budget else ""
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=category_names, variable=self._cat_var,
            width=200, state="disabled" if budget else "readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        r += 1

        # Month
        ctk.CTkLabel(self, text="Month:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        ctk.CTkButton(nav, text="◀", width=28, command=lambda: self._shift(-1)).pack(side="left")
        self._month_var = ctk.StringVar(value=friendly_month(self._month))
        ctk.CTkLabel(nav, textvariable=self._month_var, width=130).pack(side="left", padx=4)
        ctk.CTkButton(nav, text="▶", width=28, command=lambda: self._shift(1)).pack(side="left")
        r += 1

        # Allocated amount
        ctk.CTkLabel(self, text="Allocated ($):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._allocated_var = ctk.StringVar(
            value=f"{budget.allocated_amount:.2f}" if budget else ""
        )
        ctk.CTkEntry(self, textvariable=self._allocated_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Spent so far
        ctk.CTkLabel(self, text="Spent ($):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._spent_var = ctk.StringVar(
            value=f"{budget.spent_amount:.2f}" if budget else ""
        )
        ctk.CTkEntry(self, textvariable=self._spent_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Error label
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _shift(self, step: int):
        self._month = next_month(self._month) if step > 0 else prev_month(self._month)
        self._month_var.set(friendly_month(self._month))

    def _on_save(self):
        try:
            category = require_category(self._cat_var.get())
            allocated = parse_amount(self._allocated_var.get())
            spent = parse_optional_amount(self._spent_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return

        start, end = month_period(self._month)
        if self._budget:
            result = self._vm.update(replace(
                self._budget, allocated_amount=allocated, spent_amount=spent,
                start_date=start, end_date=end,
            ))
        else:
            result = self._vm.save(Budget(
                id="", user_id="", category=category,
                allocated_amount=allocated, spent_amount=spent,
                start_date=start, end_date=end,
            ))
        if not result.ok:
            self._error_var.set(result.error)
            return
        self.saved = True
        self.destroy()
