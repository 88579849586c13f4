import customtkinter as ctk
from services.notification_service import Notification
from utils.constants import SEVERITY_COLORS, SEVERITY_ICONS


class AlertBanner(ctk.CTkFrame):
    """A dismissible colored banner showing one keyed notification."""

    def __init__(self, master, notification: Notification, on_dismiss=None, **kwargs):
        color = SEVERITY_COLORS.get(notification.severity, SEVERITY_COLORS["info"])
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.key = notification.key
        self._on_dismiss = on_dismiss
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            self, text=SEVERITY_ICONS.get(notification.severity, ""),
            text_color="white", width=24,
        ).grid(row=0, column=0, rowspan=2, padx=(10, 0))
        ctk.CTkLabel(
            self, text=notification.title, text_color="white", anchor="w",
            font=ctk.CTkFont(weight="bold"), padx=8,
        ).grid(row=0, column=1, sticky="ew", pady=(4, 0))
        ctk.CTkLabel(
            self, text=notification.detail, text_color="white", anchor="w", padx=8,
        ).grid(row=1, column=1, sticky="ew", pady=(0, 4))

        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent",
            hover_color="#ffffff",
            text_color="white",
            command=self._dismiss,
        ).grid(row=0, column=2, rowspan=2, padx=(0, 4))

    def _dismiss(self):
        if self._on_dismiss:
            self._on_dismiss(self.key)
        else:
            self.destroy()
