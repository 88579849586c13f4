from datetime import date, datetime

import customtkinter as ctk
from models.category import Category
from models.transaction import Transaction
from services.category_service import group_categories
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_CATEGORY_NAME, TRANSACTION_TYPES
from utils.validation import parse_amount, transaction_category
from viewmodels.transaction_viewmodel import TransactionViewModel


def category_choices(categories: list[Category], type_: str) -> dict[str, str]:
    """Display label -> stored category name, subcategories indented under parents."""
    choices: dict[str, str] = {}
    for group in group_categories([c for c in categories if c.type == type_]):
        choices[group.parent.name] = group.parent.name
        for sub in group.subcategories:
            choices[f"{group.parent.name} › {sub.name}"] = sub.name
    choices.setdefault(DEFAULT_CATEGORY_NAME, DEFAULT_CATEGORY_NAME)
    return choices


class TransactionForm(ctk.CTkToplevel):
    """Add or edit an income or expense transaction."""

    _last_date: date = date.today()  # reset to today on each app launch

    def __init__(
        self,
        master,
        view_model: TransactionViewModel,
        categories: list[Category],
        initial_type: str = "expense",
        transaction: Transaction | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._vm = view_model
        self._categories = categories
        self._transaction = transaction
        self.saved = False

        if transaction:
            initial_type = transaction.type
        self.title(f"{'Edit' if transaction else 'Add'} {initial_type.title()}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=initial_type)
        ctk.CTkSegmentedButton(
            self, values=list(TRANSACTION_TYPES), variable=self._type_var,
            command=lambda _: self._refresh_categories(),
        ).grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="w")
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{transaction.amount:.2f}" if transaction else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Category:", r)
        self._cat_var = ctk.StringVar()
        self._cat_combo = ctk.CTkComboBox(
            self, values=[], variable=self._cat_var, width=220, state="readonly"
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._choices: dict[str, str] = {}
        self._refresh_categories(transaction.category if transaction else None)
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial=transaction.date.date() if transaction else TransactionForm._last_date
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._label("Description:", r)
        self._desc_box = ctk.CTkTextbox(self, width=220, height=70)
        self._desc_box.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        if transaction:
            self._desc_box.insert("1.0", transaction.description)
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

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

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _refresh_categories(self, selected_name: str | None = None):
        self._choices = category_choices(self._categories, self._type_var.get())
        labels = list(self._choices)
        self._cat_combo.configure(values=labels)
        label = next(
            (lbl for lbl, name in self._choices.items() if name == selected_name),
            labels[0],
        )
        self._cat_var.set(label)

    def _on_save(self):
        try:
            amount = parse_amount(self._amount_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return
        day = self._date_picker.get()
        if day is None:
            self._error_var.set("Enter a valid date (YYYY-MM-DD).")
            return

        # Keep the stored time of day when editing so ordering is stable
        if self._transaction and self._transaction.date.date() == day:
            when = self._transaction.date
        else:
            when = datetime.combine(day, datetime.now().time().replace(microsecond=0))

        tx = Transaction(
            id=self._transaction.id if self._transaction else "",
            user_id="",
            amount=amount,
            type=self._type_var.get(),
            category=transaction_category(self._choices.get(self._cat_var.get())),
            description=self._desc_box.get("1.0", "end").strip(),
            date=when,
        )
        if self._transaction:
            result = self._vm.update(tx)
        else:
            result = self._vm.add(tx)
        if not result.ok:
            self._error_var.set(result.error)
            return
        TransactionForm._last_date = day
        self.saved = True
        self.destroy()
