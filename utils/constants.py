APP_NAME = "Money Manager"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "moneymanager.db"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

# Collections in the document store
TRANSACTIONS = "transactions"
CATEGORIES = "categories"
BUDGETS = "budgets"
COLLECTIONS = (TRANSACTIONS, CATEGORIES, BUDGETS)

TRANSACTION_TYPES = ("income", "expense")
CATEGORY_TYPES = ("expense", "income")
DEFAULT_CATEGORY_NAME = "Other"

PERIOD_WEEK = "Week"
PERIOD_MONTH = "Month"
PERIOD_YEAR = "Year"
PERIODS = (PERIOD_WEEK, PERIOD_MONTH, PERIOD_YEAR)

# Budget status thresholds on spent / allocated
BUDGET_WARNING_RATIO = 0.5
BUDGET_OVER_RATIO = 0.9

RECENT_TRANSACTION_LIMIT = 5
MIN_PASSWORD_LENGTH = 6

TYPE_COLORS = {
    "income": "#4CAF50",
    "expense": "#F44336",
}

STATUS_COLORS = {
    "Normal": "#00796B",
    "Warning": "#FFA000",
    "Over": "#D32F2F",
}

STATUS_LABELS = {
    "Normal": "On Track",
    "Warning": "Warning",
    "Over": "Over Budget",
}

CHART_COLORS = [
    "#00796B",
    "#00A79B",
    "#FFC107",
    "#EF5350",
    "#42A5F5",
    "#9C27B0",
    "#795548",
]

DEFAULT_SETTINGS = {
    "appearance_mode": "system",
    "first_weekday": "",
    "budget_alerts": "1",
    "session_user_id": "",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

SEVERITY_ICONS = {
    "error":   "❗",
    "warning": "⚠",
    "info":    "ℹ",
}
