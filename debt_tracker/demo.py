"""
Demo Ledger

A month of sample activity anchored on the current month, used by the
dashboard's "Load demo data" action. One friend, Rahul, borrowed 2000 and
returned 1000.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from debt_tracker.models.ledger import (
    Friend,
    LedgerSnapshot,
    SalarySettings,
    Transaction,
    TransactionKind,
)


DEMO_FRIEND_ID = 1

# (day of month, kind, amount, description)
_DEMO_ENTRIES = [
    (1, TransactionKind.SALARY, "50000", "Salary"),
    (3, TransactionKind.EXPENSE, "12000", "Rent"),
    (5, TransactionKind.EXPENSE, "2500", "Groceries"),
    (7, TransactionKind.EXPENSE, "1500", "Dining Out"),
    (8, TransactionKind.EXPENSE, "800", "Transport"),
    (10, TransactionKind.EXPENSE, "3000", "Shopping"),
    (12, TransactionKind.LEND, "2000", "Lend to Rahul"),
    (15, TransactionKind.REPAYMENT, "1000", "Rahul Returned"),
    (18, TransactionKind.EXPENSE, "450", "Coffee"),
    (20, TransactionKind.EXPENSE, "1200", "Groceries"),
]


def build_demo_snapshot(
    now: datetime,
    settings: Optional[SalarySettings] = None,
) -> LedgerSnapshot:
    """
    Demo ledger for the month containing `now`.

    Existing salary settings are carried over unchanged.
    """
    transactions = []
    for index, (day, kind, amount, description) in enumerate(_DEMO_ENTRIES, start=1):
        transactions.append(Transaction(
            id=index,
            date=now.replace(day=day, hour=0, minute=0, second=0, microsecond=0),
            description=description,
            amount=Decimal(amount),
            kind=kind,
            friend_id=DEMO_FRIEND_ID if kind in (TransactionKind.LEND, TransactionKind.REPAYMENT) else None,
        ))

    # Newest first
    transactions.reverse()

    return LedgerSnapshot(
        transactions=transactions,
        friends=[Friend(id=DEMO_FRIEND_ID, name="Rahul", balance=Decimal("1000"))],
        settings=settings.model_copy() if settings else SalarySettings(),
    )
