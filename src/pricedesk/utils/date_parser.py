"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}")


def parse_date(date_str: str) -> date:
    """Parse a schedule start date.

    Supports:
    - Absolute dates: "2025-01-15", "January 15, 2025", etc.
    - "today", "tomorrow"
    - "next month": first day of next month
    - "in N months": same day N months from today

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "tomorrow":
        return today + timedelta(days=1)
    if date_str == "next month":
        return (today + relativedelta(months=1)).replace(day=1)

    if date_str.startswith("in ") and date_str.endswith((" months", " month")):
        count = date_str[3:].split()[0]
        if count.isdigit():
            return today + relativedelta(months=int(count))

    try:
        # Day-first is the local convention, except for ISO dates.
        dt = date_parser.parse(date_str, dayfirst=not ISO_DATE.match(date_str))
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
