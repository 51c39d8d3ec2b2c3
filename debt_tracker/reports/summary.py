"""
Report Builder

Deterministic aggregation over the transaction list for the reports and
history views. Nothing here mutates the ledger.

Income vs expense per period:
- income:  income, salary, repayment
- expense: expense, lend (lend is grouped under "Lending")
- split:   not counted, matching the wallet balance
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from debt_tracker.ledger.clock import local_now
from debt_tracker.models.ledger import (
    CASH_IN_KINDS,
    Transaction,
    TransactionKind,
)
from debt_tracker.models.report import CategoryTotal, Period, ReportSummary
from debt_tracker.reports.categories import (
    LENDING_CATEGORY,
    Categorizer,
    description_category,
)
from debt_tracker.reports.periods import filter_by_period, period_window


class ReportBuilder:
    """
    Builds period summaries with a pluggable categorizer.

    GUARANTEES:
    - Only counts transactions that exist in the list given
    - Same input, same output
    """

    def __init__(
        self,
        categorizer: Categorizer = description_category,
        top_n: int = 5,
    ):
        self._categorize = categorizer
        self._top_n = top_n

    def summarize(
        self,
        transactions: Iterable[Transaction],
        period: Union[Period, str] = Period.ALL_TIME,
        now: Optional[datetime] = None,
    ) -> ReportSummary:
        """Income, expense and category breakdown for one period."""
        period = Period(period)
        now = now or local_now()
        start, end = period_window(period, now)
        selected = filter_by_period(transactions, period, now)

        income = Decimal("0")
        expense = Decimal("0")
        category_totals: dict[str, Decimal] = {}

        for transaction in selected:
            if transaction.kind in CASH_IN_KINDS:
                income += transaction.amount
            elif transaction.kind == TransactionKind.EXPENSE:
                expense += transaction.amount
                label = self._categorize(transaction.description)
                category_totals[label] = category_totals.get(label, Decimal("0")) + transaction.amount
            elif transaction.kind == TransactionKind.LEND:
                expense += transaction.amount
                category_totals[LENDING_CATEGORY] = (
                    category_totals.get(LENDING_CATEGORY, Decimal("0")) + transaction.amount
                )

        return ReportSummary(
            period=period,
            start=start,
            end=end,
            income=income,
            expense=expense,
            transaction_count=len(selected),
            category_totals=category_totals,
            top_categories=self._top_categories(category_totals, expense),
        )

    def history(
        self,
        transactions: Iterable[Transaction],
        period: Union[Period, str] = Period.ALL_TIME,
        now: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Transactions in the period, newest first."""
        return filter_by_period(transactions, period, now or local_now())

    def _top_categories(
        self,
        category_totals: dict[str, Decimal],
        expense: Decimal,
    ) -> list[CategoryTotal]:
        if expense <= 0:
            return []

        ranked = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
        return [
            CategoryTotal(
                label=label,
                amount=amount,
                share_percent=min(100.0, float(amount / expense * 100)),
            )
            for label, amount in ranked[:self._top_n]
        ]
