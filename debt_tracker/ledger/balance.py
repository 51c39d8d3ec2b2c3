"""
Balance Engine

Pure functions over the transaction list and friend records. Nothing is
cached: every call folds the full sequence again.

Wallet balance:
    income + salary + repayment - expense - lend

Split transactions are absent from the wallet balance. Their
whole effect is the debt each selected friend takes on; the payer's own
outlay is not booked by the split itself.
"""

from decimal import Decimal
from typing import Iterable

from debt_tracker.models.ledger import (
    CASH_IN_KINDS,
    CASH_OUT_KINDS,
    Friend,
    Transaction,
    TransactionKind,
)


ZERO = Decimal("0")


def compute_total_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Fold the whole transaction sequence into the wallet balance."""
    balance = ZERO
    for transaction in transactions:
        if transaction.kind in CASH_IN_KINDS:
            balance += transaction.amount
        elif transaction.kind in CASH_OUT_KINDS:
            balance -= transaction.amount
    return balance


def total_owed_to_owner(friends: Iterable[Friend]) -> Decimal:
    """Sum of positive friend balances. Negative balances are ignored."""
    return sum((f.balance for f in friends if f.balance > 0), ZERO)


def net_friend_balance(friends: Iterable[Friend]) -> Decimal:
    """Sum of all friend balances, negative ones included."""
    return sum((f.balance for f in friends), ZERO)


def debt_effects(transaction: Transaction) -> list[tuple[int, Decimal]]:
    """
    Friend balance changes caused by one transaction.

    Returns (friend_id, delta) pairs. A positive delta means the friend
    owes more.
    """
    if transaction.kind == TransactionKind.LEND:
        return [(transaction.friend_id, transaction.amount)]
    if transaction.kind == TransactionKind.REPAYMENT:
        return [(transaction.friend_id, -transaction.amount)]
    if transaction.kind == TransactionKind.SPLIT:
        details = transaction.split_details
        share = transaction.amount / details.total_participants
        return [(friend_id, share) for friend_id in details.involved_friend_ids]
    return []


def friend_debt_deltas(transactions: Iterable[Transaction]) -> dict[int, Decimal]:
    """
    Replay every transaction's debt effect, grouped by friend id.

    For a ledger whose friends all started at zero this equals the
    stored friend balances.
    """
    deltas: dict[int, Decimal] = {}
    for transaction in transactions:
        for friend_id, delta in debt_effects(transaction):
            deltas[friend_id] = deltas.get(friend_id, ZERO) + delta
    return deltas
