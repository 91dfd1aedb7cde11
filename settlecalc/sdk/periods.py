"""Date helpers for time-based proration."""

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def count_months(start: date, end: date, min_days_per_month: int) -> int:
    """Count months worked from start to end, both days inclusive.

    Whole calendar-length months count as one each; a trailing partial
    month counts when it has at least ``min_days_per_month`` days.

    Example:
        count_months(date(2024, 1, 10), date(2024, 7, 31), 15)  # 7
        count_months(date(2024, 1, 20), date(2024, 7, 31), 15)  # 6
    """
    if end < start:
        return 0
    delta = relativedelta(end + timedelta(days=1), start)
    months = delta.years * 12 + delta.months
    if delta.days >= min_days_per_month:
        months += 1
    return months


def last_anniversary(admission: date, on: date) -> date:
    """Most recent anniversary of admission on or before ``on``."""
    years = relativedelta(on, admission).years
    return admission + relativedelta(years=years)
