"""
Report Models

Read-only views derived from the ledger for the rendering layer.
Nothing here is persisted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from debt_tracker.models.ledger import Money


class Period(str, Enum):
    """Time windows offered by the reports and history views."""
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    ALL_TIME = "all_time"
    LAST_30_DAYS = "last_30_days"
    LAST_1_YEAR = "last_1_year"


class CategoryTotal(BaseModel):
    """Spending attributed to one category label."""

    label: str
    amount: Money
    share_percent: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of total expense, 0-100"
    )


class ReportSummary(BaseModel):
    """
    Income vs expense for a period.

    Income counts income, salary and repayments. Expense counts expenses
    and money lent. Split transactions are not counted on either side.
    """

    period: Period
    start: Optional[datetime] = Field(
        default=None,
        description="Inclusive lower bound, None for all time"
    )
    end: Optional[datetime] = Field(
        default=None,
        description="Exclusive upper bound, None for open-ended"
    )
    income: Money = Decimal("0")
    expense: Money = Decimal("0")
    transaction_count: int = Field(default=0, ge=0)

    # Full breakdown and the top-N slice shown in charts
    category_totals: dict[str, Money] = Field(default_factory=dict)
    top_categories: list[CategoryTotal] = Field(default_factory=list)

    @property
    def savings(self) -> Decimal:
        """Income minus expense for the period."""
        return self.income - self.expense

    @property
    def has_expenses(self) -> bool:
        return self.expense > 0
