"""
Ledger Package

Store, balance engine and exceptions. The recorder and salary scheduler
depend on the validation package and are imported from their modules:

    from debt_tracker.ledger.recorder import TransactionRecorder
    from debt_tracker.ledger.salary import SalaryScheduler
"""

from debt_tracker.ledger.balance import (
    compute_total_balance,
    debt_effects,
    friend_debt_deltas,
    net_friend_balance,
    total_owed_to_owner,
)
from debt_tracker.ledger.clock import Clock, local_now
from debt_tracker.ledger.errors import LedgerError, NotFoundError, ValidationError
from debt_tracker.ledger.store import IdGenerator, LedgerStore

__all__ = [
    # Balance engine
    "compute_total_balance",
    "debt_effects",
    "friend_debt_deltas",
    "net_friend_balance",
    "total_owed_to_owner",
    # Clock
    "Clock",
    "local_now",
    # Exceptions
    "LedgerError",
    "NotFoundError",
    "ValidationError",
    # Store
    "IdGenerator",
    "LedgerStore",
]
