from datetime import date, datetime, timedelta
from typing import Optional, Union

TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def get_current_date() -> str:
    """Server-local calendar date as YYYY-MM-DD."""
    return date.today().isoformat()


def get_current_time() -> str:
    """Server-local time of day as HH:MM."""
    return datetime.now().strftime("%H:%M")


def format_long_date(value: date) -> str:
    # Month names are spelled out here so output does not depend on the process locale
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def format_display_date(day: Union[str, date], today: Optional[date] = None) -> str:
    """Label for a diary day: "Today", "Yesterday" or e.g. "October 17, 2026"."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    if today is None:
        today = date.fromisoformat(get_current_date())

    if day == today:
        return TODAY_LABEL
    if day == today - timedelta(days=1):
        return YESTERDAY_LABEL
    return format_long_date(day)
