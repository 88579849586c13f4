import customtkinter as ctk
from utils.constants import APP_NAME
from viewmodels.auth_viewmodel import AuthError, AuthViewModel

_SIGN_IN = "Sign In"
_REGISTER = "Register"


class AuthWindow(ctk.CTk):
    """Sign-in / registration window shown before the main window."""

    def __init__(self, view_model: AuthViewModel, **kwargs):
        super().__init__(**kwargs)
        self._vm = view_model
        self.title(APP_NAME)
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=APP_NAME, font=ctk.CTkFont(size=22, weight="bold"),
        ).grid(row=0, column=0, padx=32, pady=(24, 4))
        ctk.CTkLabel(
            self, text="Track your income, expenses and budgets", text_color="gray60",
        ).grid(row=1, column=0, padx=32, pady=(0, 12))

        self._mode_var = ctk.StringVar(value=_SIGN_IN)
        ctk.CTkSegmentedButton(
            self, values=[_SIGN_IN, _REGISTER], variable=self._mode_var,
            command=lambda _: self._on_mode_change(),
        ).grid(row=2, column=0, padx=32, pady=(0, 12), sticky="ew")

        self._email_var = ctk.StringVar()
        self._password_var = ctk.StringVar()
        self._confirm_var = ctk.StringVar()

        ctk.CTkEntry(
            self, textvariable=self._email_var, placeholder_text="Email", width=280,
        ).grid(row=3, column=0, padx=32, pady=4)
        ctk.CTkEntry(
            self, textvariable=self._password_var, placeholder_text="Password",
            show="•", width=280,
        ).grid(row=4, column=0, padx=32, pady=4)
        self._confirm_entry = ctk.CTkEntry(
            self, textvariable=self._confirm_var, placeholder_text="Confirm password",
            show="•", width=280,
        )

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280,
        ).grid(row=6, column=0, padx=32, pady=(4, 0))

        self._submit = ctk.CTkButton(self, text=_SIGN_IN, width=280, command=self._on_submit)
        self._submit.grid(row=7, column=0, padx=32, pady=(8, 24))
        self.bind("<Return>", lambda _e: self._on_submit())

    def _on_mode_change(self):
        mode = self._mode_var.get()
        self._submit.configure(text=mode)
        self._error_var.set("")
        if mode == _REGISTER:
            self._confirm_entry.grid(row=5, column=0, padx=32, pady=4)
        else:
            self._confirm_entry.grid_remove()

    def _on_submit(self):
        email = self._email_var.get()
        password = self._password_var.get()
        if self._mode_var.get() == _REGISTER:
            state = self._vm.register(email, password, self._confirm_var.get())
        else:
            state = self._vm.login(email, password)

        if isinstance(state, AuthError):
            self._error_var.set(state.message)
            return
        self.destroy()
