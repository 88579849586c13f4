from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, TIMESTAMP_FORMAT


def today() -> date:
    return date.today()


def resolve_first_weekday(setting: str) -> int:
    """Stored first_weekday setting, 0-6 with 0=Monday. Blank or invalid values
    fall back to calendar.firstweekday(), which is Monday unless the process
    changed it with calendar.setfirstweekday()."""
    text = setting.strip()
    if text.isdigit() and 0 <= int(text) <= 6:
        return int(text)
    return calendar.firstweekday()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp. Date-only strings map to midnight."""
    for fmt in (TIMESTAMP_FORMAT, "%Y-%m-%dT%H:%M:%S", DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid timestamp: {value!r}")


def month_bounds(d: date) -> tuple[date, date]:
    """Return (first_day, last_day) of the month containing d."""
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1), d.replace(day=last_day)


def start_of_week(d: date, first_weekday: int = 0) -> date:
    """First day of the week containing d. first_weekday: 0=Mon..6=Sun."""
    return d - timedelta(days=(d.weekday() - first_weekday) % 7)


def week_of_month(d: date) -> int:
    """1-based week bucket: days 1-7 -> 1, 8-14 -> 2, ..., 29-31 -> 5."""
    return (d.day - 1) // 7 + 1


def friendly_month(d: date) -> str:
    """e.g. 'February 2026'."""
    return d.strftime("%B %Y")


def prev_month(d: date) -> date:
    """First day of the month before d."""
    if d.month == 1:
        return date(d.year - 1, 12, 1)
    return date(d.year, d.month - 1, 1)


def next_month(d: date) -> date:
    """First day of the month after d."""
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def format_display_date(value: date | datetime) -> str:
    return value.strftime("%b %d, %Y")
