"""Time-window filters over transaction history.

Every filter takes the transactions and an explicit ``now`` and returns a new
list of the records with ``start <= timestamp <= now``, in input order.
Weeks start on Monday at 00:00.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable

from atmbank.models.transaction import Transaction


class HistoryPeriod(Enum):
    """Periods offered by the history menu."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    @classmethod
    def from_choice(cls, choice: str) -> "HistoryPeriod":
        """
        Map a menu choice to a period.

        Accepts the menu numbers "1" to "4" or the period names. Anything else
        falls back to ALL.
        """
        normalized = (choice or "").strip().lower()
        by_number = {"1": cls.DAY, "2": cls.WEEK, "3": cls.MONTH, "4": cls.ALL}
        if normalized in by_number:
            return by_number[normalized]
        for period in cls:
            if period.value == normalized:
                return period
        return cls.ALL


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    return start_of_day(now) - timedelta(days=now.weekday())


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def _within(transactions: Iterable[Transaction], start: datetime, now: datetime) -> list[Transaction]:
    return [txn for txn in transactions if start <= txn.timestamp <= now]


def filter_by_current_day(transactions: Iterable[Transaction], now: datetime) -> list[Transaction]:
    """Transactions made since midnight today."""
    return _within(transactions, start_of_day(now), now)


def filter_by_current_week(transactions: Iterable[Transaction], now: datetime) -> list[Transaction]:
    """Transactions made since Monday 00:00 of the current week."""
    return _within(transactions, start_of_week(now), now)


def filter_by_current_month(transactions: Iterable[Transaction], now: datetime) -> list[Transaction]:
    """Transactions made since the first day of the current month."""
    return _within(transactions, start_of_month(now), now)


def filter_all(transactions: Iterable[Transaction], now: datetime | None = None) -> list[Transaction]:
    """Every transaction, unfiltered."""
    return list(transactions)


_FILTERS = {
    HistoryPeriod.DAY: filter_by_current_day,
    HistoryPeriod.WEEK: filter_by_current_week,
    HistoryPeriod.MONTH: filter_by_current_month,
    HistoryPeriod.ALL: filter_all,
}


def filter_by_period(
    transactions: Iterable[Transaction], period: HistoryPeriod, now: datetime
) -> list[Transaction]:
    """
    Apply the filter for a history period.

    Args:
        transactions: The history to filter
        period: Which window to keep
        now: The reference time the window is anchored to

    Returns:
        The matching transactions in their original order
    """
    return _FILTERS[period](transactions, now)
