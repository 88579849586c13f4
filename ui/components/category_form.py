from dataclasses import replace

import customtkinter as ctk
from models.category import Category
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from utils.constants import CATEGORY_TYPES
from utils.validation import require_category_name
from viewmodels.category_viewmodel import CategoryViewModel

_NO_PARENT = "(none, top level)"


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category or subcategory."""

    def __init__(
        self,
        master,
        view_model: CategoryViewModel,
        category: Category | None = None,
        initial_type: str = "expense",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._vm = view_model
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Name
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        # Type
        ctk.CTkLabel(self, text="Type:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._type_var = ctk.StringVar(value=category.type if category else initial_type)
        ctk.CTkComboBox(
            self, values=list(CATEGORY_TYPES), variable=self._type_var,
            width=220, state="readonly",
            command=lambda _: self._refresh_parents(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Parent
        ctk.CTkLabel(self, text="Parent:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._parent_var = ctk.StringVar(value=_NO_PARENT)
        self._parent_combo = ctk.CTkComboBox(
            self, values=[_NO_PARENT], variable=self._parent_var,
            width=220, state="readonly",
        )
        self._parent_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._parents: dict[str, str] = {}
        self._refresh_parents()
        r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
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
        if category:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _refresh_parents(self):
        # A category that already has children cannot become a subcategory
        has_children = self._category is not None and any(
            c.parent_id == self._category.id for c in self._vm.categories
        )
        own_id = self._category.id if self._category else None
        self._parents = {} if has_children else {
            c.name: c.id for c in self._vm.top_level_choices(self._type_var.get())
            if c.id != own_id
        }
        self._parent_combo.configure(values=[_NO_PARENT] + list(self._parents))
        current = self._category.parent_id if self._category else None
        label = next((n for n, cid in self._parents.items() if cid == current), _NO_PARENT)
        self._parent_var.set(label)

    def _on_save(self):
        try:
            name = require_category_name(self._name_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return
        type_ = self._type_var.get()
        parent_id = self._parents.get(self._parent_var.get())

        if self._category:
            result = self._vm.update(
                replace(self._category, name=name, type=type_, parent_id=parent_id)
            )
        else:
            result = self._vm.add(name, type_, parent_id)
        if not result.ok:
            self._error_var.set(result.error)
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dlg = ConfirmDialog(
            self,
            title="Delete Category",
            message=f"Delete '{self._category.name}' and all of its subcategories? "
                    "Existing transactions keep their category label.",
        )
        if not dlg.result:
            return
        result = self._vm.delete(self._category.id)
        if not result.ok:
            self._error_var.set(result.error)
            return
        self.saved = True
        self.destroy()
