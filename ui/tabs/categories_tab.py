import customtkinter as ctk
from models.category import Category
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.constants import TYPE_COLORS
from viewmodels.category_viewmodel import CategoryViewModel
from viewmodels.state import Error, Loading


class CategoriesTab(ctk.CTkFrame):
    def __init__(self, master, view_model: CategoryViewModel, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._vm = view_model
        self._type_var = ctk.StringVar(value="all")
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._vm.set_search(self._search_var.get()))

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

        ctk.CTkLabel(
            bar, text="Categories",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)

        ctk.CTkSegmentedButton(
            bar, values=["all", "expense", "income"], variable=self._type_var,
            command=lambda _: self._load(), width=200,
        ).pack(side="left", padx=4)

        ctk.CTkEntry(
            bar, textvariable=self._search_var,
            placeholder_text="Search…", width=160,
        ).pack(side="left", padx=8)

        ctk.CTkButton(
            bar, text="+ Add Category", command=self._open_add,
        ).pack(side="right", padx=8, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=(8, 4))
        self._scroll.grid_columnconfigure(0, weight=1)

        self._status_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._status_var, text_color="#F44336", anchor="w",
        ).grid(row=2, column=0, sticky="ew", padx=12, pady=(0, 8))

    def _load(self):
        type_f = self._type_var.get()
        if type_f == "all":
            self._vm.load_all()
        else:
            self._vm.load_by_type(type_f)

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

        groups = self._vm.groups
        if not groups:
            self._placeholder("No categories found.")
            return

        idx = 0
        for group in groups:
            self._add_row(idx, group.parent, indent=False)
            idx += 1
            for sub in group.subcategories:
                self._add_row(idx, sub, indent=True)
                idx += 1

    def _placeholder(self, text: str, color="gray60"):
        ctk.CTkLabel(self._scroll, text=text, text_color=color).grid(row=0, column=0, pady=40)

    def _add_row(self, idx: int, cat: Category, indent: bool):
        row = ctk.CTkFrame(
            self._scroll,
            fg_color=("gray93", "gray23") if indent else ("gray90", "gray20"),
            corner_radius=8,
        )
        row.grid(row=idx, column=0, sticky="ew", padx=(36 if indent else 4, 4), pady=2)
        row.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            row, text=("↳ " if indent else "") + cat.name,
            font=ctk.CTkFont(size=13, weight="normal" if indent else "bold"),
            anchor="w",
        ).grid(row=0, column=0, padx=12, pady=8, sticky="w")

        ctk.CTkLabel(
            row, text=cat.type, width=70, anchor="center",
            text_color=TYPE_COLORS.get(cat.type, "#888888"),
            font=ctk.CTkFont(size=11, weight="bold"),
        ).grid(row=0, column=1, padx=4)

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=2, padx=(4, 10), pady=6)

        if not indent:
            ctk.CTkButton(
                btn_frame, text="+ Sub", width=56, height=26,
                fg_color="transparent", border_width=1,
                text_color=("gray10", "gray90"),
                command=lambda c=cat: self._open_add_sub(c),
            ).pack(side="left", padx=(0, 4))

        ctk.CTkButton(
            btn_frame, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))

        ctk.CTkButton(
            btn_frame, text="Delete", width=65, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=cat: self._on_delete(c),
        ).pack(side="left")

    def _open_add(self):
        type_f = self._type_var.get()
        form = CategoryForm(
            self.winfo_toplevel(), self._vm,
            initial_type="expense" if type_f == "all" else type_f,
        )
        self.wait_window(form)

    def _open_add_sub(self, parent: Category):
        name = ctk.CTkInputDialog(
            title="New Subcategory", text=f"Subcategory of '{parent.name}':",
        ).get_input()
        if name:
            self._vm.add(name, parent.type, parent.id)

    def _open_edit(self, cat: Category):
        form = CategoryForm(self.winfo_toplevel(), self._vm, category=cat)
        self.wait_window(form)

    def _on_delete(self, cat: Category):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Category",
            message=f"Delete '{cat.name}'? Its subcategories are deleted too. "
                    "Existing transactions keep their category label.",
        )
        if dlg.result:
            self._vm.delete(cat.id)
