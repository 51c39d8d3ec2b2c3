"""
Data Models Package

This package contains all Pydantic models used in the Debt Tracker system.
All data flowing through the system must conform to these schemas.
"""

from debt_tracker.models.ledger import (
    CASH_IN_KINDS,
    CASH_OUT_KINDS,
    COUNTERPARTY_KINDS,
    Friend,
    LedgerSnapshot,
    Money,
    SalarySettings,
    SplitDetails,
    SplitSelection,
    Transaction,
    TransactionKind,
)
from debt_tracker.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)
from debt_tracker.models.report import (
    CategoryTotal,
    Period,
    ReportSummary,
)

__all__ = [
    # Ledger models
    "CASH_IN_KINDS",
    "CASH_OUT_KINDS",
    "COUNTERPARTY_KINDS",
    "Friend",
    "LedgerSnapshot",
    "Money",
    "SalarySettings",
    "SplitDetails",
    "SplitSelection",
    "Transaction",
    "TransactionKind",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
    # Report models
    "CategoryTotal",
    "Period",
    "ReportSummary",
]
