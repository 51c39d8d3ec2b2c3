"""
Reporting Periods

Each period maps to a half-open window [start, end) relative to "now".
`None` on either side means unbounded.

    this_month    first day of this month  .. first day of next month
    last_month    first day of last month  .. first day of this month
    last_30_days  now - 30 days            .. open
    last_1_year   same date one year ago   .. open
    all_time      open                     .. open
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Union

from debt_tracker.models.ledger import Transaction
from debt_tracker.models.report import Period


Window = tuple[Optional[datetime], Optional[datetime]]


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _shift_month(month_start: datetime, months: int) -> datetime:
    index = month_start.year * 12 + (month_start.month - 1) + months
    return month_start.replace(year=index // 12, month=index % 12 + 1)


def _one_year_before(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year - 1)
    except ValueError:
        # 29 February
        return moment.replace(year=moment.year - 1, day=28)


def period_window(period: Union[Period, str], now: datetime) -> Window:
    """Resolve a period to its [start, end) window."""
    period = Period(period)
    if now.tzinfo is None:
        now = now.astimezone()

    if period == Period.THIS_MONTH:
        start = _month_start(now)
        return start, _shift_month(start, 1)
    if period == Period.LAST_MONTH:
        this_month = _month_start(now)
        return _shift_month(this_month, -1), this_month
    if period == Period.LAST_30_DAYS:
        return now - timedelta(days=30), None
    if period == Period.LAST_1_YEAR:
        return _one_year_before(now), None
    return None, None


def in_window(transaction: Transaction, window: Window) -> bool:
    start, end = window
    if start is not None and transaction.date < start:
        return False
    if end is not None and transaction.date >= end:
        return False
    return True


def filter_by_period(
    transactions: Iterable[Transaction],
    period: Union[Period, str],
    now: datetime,
) -> list[Transaction]:
    """Transactions inside the period, original order kept."""
    window = period_window(period, now)
    return [t for t in transactions if in_window(t, window)]
