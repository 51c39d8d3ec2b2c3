"""
CSV Export

Columns: Date, Description, Type, Amount, Friend

Description and Friend are always wrapped in double quotes with embedded
quotes doubled. The Friend column holds the friend's name for lend and
repayment rows, "Split Group" for splits and is empty otherwise.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Union

from debt_tracker.models.ledger import Friend, Transaction
from debt_tracker.models.report import Period


CSV_HEADER = "Date,Description,Type,Amount,Friend"
SPLIT_GROUP_LABEL = "Split Group"


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def format_amount(amount: Decimal) -> str:
    """Plain decimal notation without trailing zeros: 12000, 0.5, 33.25."""
    return f"{amount.normalize():f}"


def _friend_label(transaction: Transaction, friend_names: dict[int, str]) -> str:
    if transaction.friend_id is not None:
        return friend_names.get(transaction.friend_id, "")
    if transaction.split_details is not None:
        return SPLIT_GROUP_LABEL
    return ""


def export_csv(
    transactions: Iterable[Transaction],
    friends: Iterable[Friend],
) -> str:
    """Render transactions as CSV text, header included."""
    friend_names = {friend.id: friend.name for friend in friends}
    lines = [CSV_HEADER]

    for transaction in transactions:
        lines.append(",".join([
            transaction.date.strftime("%Y-%m-%d"),
            _quote(transaction.description),
            transaction.kind.value,
            format_amount(transaction.amount),
            _quote(_friend_label(transaction, friend_names)),
        ]))

    return "\n".join(lines) + "\n"


def export_filename(period: Union[Period, str], today: date) -> str:
    """e.g. transactions_this_month_2024-05-20.csv"""
    return f"transactions_{Period(period).value}_{today.isoformat()}.csv"
