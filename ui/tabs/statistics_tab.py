import customtkinter as ctk
import tkinter as tk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from utils.constants import CHART_COLORS, PERIODS, TRANSACTION_TYPES, TYPE_COLORS
from utils.currency import format_compact, format_currency
from viewmodels.state import Error, Loading, Success
from viewmodels.statistics_viewmodel import StatisticsSnapshot, StatisticsViewModel


class StatisticsTab(ctk.CTkFrame):
    def __init__(self, master, view_model: StatisticsViewModel, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._vm = view_model
        self._period_var = ctk.StringVar(value=view_model.period)
        self._type_var = ctk.StringVar(value=view_model.type)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_summary()
        self._build_charts()

        self._unobserve = self._vm.observe(self._render)
        self.bind("<Destroy>", self._on_destroy, add="+")
        self._vm.load()

    def _on_destroy(self, event):
        if event.widget is self:
            self._unobserve()
            self._vm.close()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Period:").pack(side="left", padx=(12, 4), pady=8)
        ctk.CTkSegmentedButton(
            bar, values=list(PERIODS), variable=self._period_var,
            command=self._vm.set_period,
        ).pack(side="left", padx=(0, 16))

        ctk.CTkLabel(bar, text="Show:").pack(side="left", padx=(0, 4))
        ctk.CTkSegmentedButton(
            bar, values=list(TRANSACTION_TYPES), variable=self._type_var,
            command=self._vm.set_type,
        ).pack(side="left")

    def _build_summary(self):
        self._summary_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._summary_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._summary_frame.grid_columnconfigure((0, 1, 2), weight=1)

    def _build_charts(self):
        charts = ctk.CTkFrame(self, fg_color="transparent")
        charts.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        charts.grid_columnconfigure(0, weight=2)
        charts.grid_columnconfigure(1, weight=3)
        charts.grid_rowconfigure(0, weight=1)

        # Donut + breakdown
        pie_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        self._pie_title = ctk.CTkLabel(
            pie_outer, text="", font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._pie_title.pack(pady=(10, 0))
        self._pie_fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 4))
        self._legend_frame = ctk.CTkScrollableFrame(pie_outer, fg_color="transparent", height=140)
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

        # Trend
        bar_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        bar_outer.grid(row=0, column=1, sticky="nsew")
        self._bar_title = ctk.CTkLabel(
            bar_outer, text="", font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._bar_title.pack(pady=(10, 0))
        self._bar_fig = Figure(figsize=(5, 3), dpi=80, tight_layout=True)
        self._bar_ax = self._bar_fig.add_subplot(111)
        self._bar_mpl = FigureCanvasTkAgg(self._bar_fig, master=bar_outer)
        self._bar_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    def _render(self):
        if not self.winfo_exists():
            return
        for w in self._summary_frame.winfo_children():
            w.destroy()
        for w in self._legend_frame.winfo_children():
            w.destroy()

        state = self._vm.state
        if isinstance(state, Loading):
            ctk.CTkLabel(self._summary_frame, text="Loading…", text_color="gray60").grid(
                row=0, column=0, columnspan=3, pady=10
            )
            return
        if isinstance(state, Error):
            ctk.CTkLabel(self._summary_frame, text=state.message, text_color="#F44336").grid(
                row=0, column=0, columnspan=3, pady=10
            )
            return
        if isinstance(state, Success):
            self._draw(state.data)

    def _draw(self, snap: StatisticsSnapshot):
        summary = snap.summary
        for i, (label, value, color) in enumerate([
            ("Income", summary["income"], TYPE_COLORS["income"]),
            ("Expenses", summary["expense"], TYPE_COLORS["expense"]),
            ("Net", summary["net"], "#2196F3" if summary["net"] >= 0 else "#FF9800"),
        ]):
            card = ctk.CTkFrame(
                self._summary_frame, fg_color=("gray90", "gray20"), corner_radius=10
            )
            card.grid(row=0, column=i, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=f"{label} this {snap.period.lower()}", text_color="gray60").pack(pady=(10, 0), padx=16)
            ctk.CTkLabel(
                card, text=format_currency(value),
                font=ctk.CTkFont(size=18, weight="bold"),
                text_color=color,
            ).pack(pady=(4, 10), padx=16)

        kind = "Income" if snap.type == "income" else "Expense"
        self._pie_title.configure(text=f"{kind} by Category  ·  {format_currency(snap.total)}")
        self._bar_title.configure(text=f"{kind} Trend")

        for i, item in enumerate(snap.totals):
            row = ctk.CTkFrame(self._legend_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            tk.Label(row, bg=CHART_COLORS[i % len(CHART_COLORS)], width=2).pack(side="left", padx=(0, 4))
            ctk.CTkLabel(
                row, text=f"{item.category}: {format_currency(item.amount)} ({item.percentage * 100:.1f}%)",
                anchor="w", font=ctk.CTkFont(size=11),
            ).pack(side="left")

        self.after(50, lambda s=snap: self._draw_pie_chart(s))
        self.after(50, lambda s=snap: self._draw_bar_chart(s))

    def _draw_pie_chart(self, snap: StatisticsSnapshot):
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)

        if not snap.totals or snap.total == 0:
            ax.text(0.5, 0.5, f"No {snap.type} data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        ax.pie(
            [t.amount for t in snap.totals],
            colors=[CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(snap.totals))],
            startangle=90,
            wedgeprops={"width": 0.4},
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

    def _draw_bar_chart(self, snap: StatisticsSnapshot):
        ax = self._bar_ax
        ax.clear()
        self._style_ax(ax, self._bar_fig)

        labels = [label for label, _ in snap.trend]
        values = [value for _, value in snap.trend]
        x = list(range(len(labels)))
        ax.bar(x, values, 0.6, color=TYPE_COLORS[snap.type])
        ax.set_xticks(x)
        ax.set_xticklabels(labels)
        ax.yaxis.set_major_formatter(lambda v, _: format_compact(abs(v)))
        self._bar_mpl.draw_idle()
