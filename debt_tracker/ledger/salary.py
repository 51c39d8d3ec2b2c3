"""
Salary Scheduler

Credits the configured monthly salary once per calendar month.

State is just `last_salary_month`, a "YEAR-MONTH" token with the month
not zero-padded (e.g. "2024-3"). For the current month the scheduler is
either pending (token differs) or fired (token matches).

The salary is credited when all of these hold:
- salary_amount > 0
- last_salary_month != token of the current month
- today's day of month >= salary_day

A salary day past the end of a short month (e.g. 31 in April) is never
reached, so that month is skipped.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from debt_tracker.ledger.clock import Clock, local_now
from debt_tracker.ledger.store import LedgerStore
from debt_tracker.models.ledger import SalarySettings, Transaction, TransactionKind
from debt_tracker.validation.validator import AmountInput, parse_amount, parse_salary_day


AUTO_SALARY_DESCRIPTION = "Monthly Salary (Auto)"


def month_token(moment: datetime) -> str:
    """'2024-3' for any moment in March 2024."""
    return f"{moment.year}-{moment.month}"


class SalaryScheduler:
    """Idempotent monthly salary check for one ledger store."""

    def __init__(self, store: LedgerStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or local_now

    @property
    def settings(self) -> SalarySettings:
        return self._store.settings

    def is_due(self, now: datetime) -> bool:
        settings = self.settings
        return (
            settings.salary_amount > 0
            and settings.last_salary_month != month_token(now)
            and now.day >= settings.salary_day
        )

    def check(self, now: Optional[datetime] = None) -> Optional[Transaction]:
        """
        Credit the salary if it is due.

        Returns:
            The salary transaction, or None when nothing changed
        """
        now = now or self._clock()
        if not self.is_due(now):
            return None

        transaction = Transaction(
            id=self._store.next_id(),
            date=now,
            description=AUTO_SALARY_DESCRIPTION,
            amount=self.settings.salary_amount,
            kind=TransactionKind.SALARY,
        )
        self._store.append(transaction)
        self.settings.last_salary_month = month_token(now)
        return transaction

    def save_settings(
        self,
        amount: AmountInput,
        day: Union[int, str],
        now: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        """
        Update amount and day, then run the check straight away.

        Raises:
            ValidationError: If amount is negative or day is outside 1-31
                (settings are left unchanged)
        """
        salary_amount: Decimal = parse_amount(amount, field="salary_amount", allow_zero=True)
        salary_day = parse_salary_day(day)

        self.settings.salary_amount = salary_amount
        self.settings.salary_day = salary_day
        return self.check(now)
