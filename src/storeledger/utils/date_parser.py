"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates as written in Brazil: "15/01/2024", "15-01-2024"
    - Relative dates: "today"/"hoje", "yesterday"/"ontem", "tomorrow"/"amanha"

    Args:
        date_str: Date string
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "hoje": today,
        "yesterday": today - timedelta(days=1),
        "ontem": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "amanha": today + timedelta(days=1),
        "amanhã": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        if _ISO_DATE.match(date_str):
            return date_parser.isoparse(date_str).date()
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
