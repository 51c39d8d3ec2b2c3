"""
Transaction Validation

Every candidate transaction is checked before the ledger is touched.
Checks run in a fixed order and the first failure wins:

1. Kind is one of the known transaction kinds
2. Description is present
3. Amount is a finite number, at least 0.01 and below 1e16
4. Kind-specific checks:
   - lend / repayment: a friend is selected and exists
   - split: at least one participant, every selected friend exists

IMPORTANT: Validation NEVER silently fixes input beyond trimming
whitespace and collapsing duplicate friend selections.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from debt_tracker.ledger.errors import ValidationError
from debt_tracker.ledger.store import LedgerStore
from debt_tracker.models.ledger import (
    MAX_AMOUNT_EXPONENT,
    Money,
    SplitSelection,
    TransactionKind,
)


AmountInput = Union[Decimal, int, float, str]

# One minor currency unit
MIN_AMOUNT = Decimal("0.01")

# Messages for a missing counterparty, per kind
_MISSING_FRIEND_MESSAGES = {
    TransactionKind.LEND: "Please select a friend to lend to",
    TransactionKind.REPAYMENT: "Please select the friend who is paying back",
}


class TransactionDraft(BaseModel):
    """A candidate transaction that passed every check."""
    model_config = ConfigDict(frozen=True)

    kind: TransactionKind
    amount: Money = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    friend_id: Optional[int] = None
    split_friend_ids: tuple[int, ...] = ()
    include_self: bool = False

    @property
    def total_participants(self) -> int:
        return len(self.split_friend_ids) + (1 if self.include_self else 0)


def parse_kind(kind: Union[TransactionKind, str]) -> TransactionKind:
    """Accept an enum member or its string value."""
    try:
        return TransactionKind(kind)
    except ValueError:
        allowed = ", ".join(k.value for k in TransactionKind)
        raise ValidationError(
            f"Unknown transaction type: {kind!r}. Allowed: {allowed}",
            field="kind",
        )


def validate_description(description: object) -> str:
    """Return the trimmed description, rejecting blanks."""
    text = description.strip() if isinstance(description, str) else ""
    if not text:
        raise ValidationError(
            "Please enter a description",
            field="description",
            issue_type="missing",
        )
    return text


def parse_amount(
    amount: AmountInput,
    field: str = "amount",
    allow_zero: bool = False,
) -> Decimal:
    """
    Convert user input to a Decimal amount.

    Floats go through their string form so 0.1 stays 0.1.

    Raises:
        ValidationError: If the value is not a finite number, is not
            positive (non-negative with `allow_zero`), is below one minor
            unit or is too large to store
    """
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number", field=field)

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Amount must be a number", field=field)

    if not value.is_finite():
        raise ValidationError("Amount must be a finite number", field=field)

    if allow_zero:
        if value < 0:
            raise ValidationError("Amount cannot be negative", field=field)
    elif value <= 0:
        raise ValidationError("Amount must be greater than zero", field=field)

    if 0 < value < MIN_AMOUNT:
        raise ValidationError(f"Amount must be at least {MIN_AMOUNT}", field=field)
    if value and value.adjusted() > MAX_AMOUNT_EXPONENT:
        raise ValidationError(
            f"Amount must be below 1e{MAX_AMOUNT_EXPONENT + 1}",
            field=field,
        )

    return value


def parse_salary_day(day: Union[int, str]) -> int:
    """Salary day must be a calendar day number, 1-31."""
    if isinstance(day, bool):
        raise ValidationError("Salary day must be a whole number", field="salary_day")
    try:
        value = int(str(day).strip())
    except ValueError:
        raise ValidationError("Salary day must be a whole number", field="salary_day")
    if not 1 <= value <= 31:
        raise ValidationError("Salary day must be between 1 and 31", field="salary_day")
    return value


class TransactionValidator:
    """
    Validates candidate transactions against the current ledger.

    Friend existence is checked through the store, so a validator is
    bound to one ledger.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def validate(
        self,
        kind: Union[TransactionKind, str],
        amount: AmountInput,
        description: str,
        friend_id: Optional[int] = None,
        split: Optional[SplitSelection] = None,
    ) -> TransactionDraft:
        """
        Run every check in order.

        Returns:
            TransactionDraft with normalized values

        Raises:
            ValidationError: First failed check
            NotFoundError: A selected friend does not exist
        """
        parsed_kind = parse_kind(kind)
        text = validate_description(description)
        value = parse_amount(amount)

        if parsed_kind in _MISSING_FRIEND_MESSAGES:
            return self._validate_counterparty(parsed_kind, value, text, friend_id)

        if parsed_kind == TransactionKind.SPLIT:
            return self._validate_split(value, text, split or SplitSelection())

        # income, salary and expense carry no counterparty
        return TransactionDraft(kind=parsed_kind, amount=value, description=text)

    def _validate_counterparty(
        self,
        kind: TransactionKind,
        amount: Decimal,
        description: str,
        friend_id: Optional[int],
    ) -> TransactionDraft:
        if friend_id is None:
            raise ValidationError(
                _MISSING_FRIEND_MESSAGES[kind],
                field="friend_id",
                issue_type="missing",
            )
        friend = self._store.get_friend(friend_id)
        return TransactionDraft(
            kind=kind,
            amount=amount,
            description=description,
            friend_id=friend.id,
        )

    def _validate_split(
        self,
        amount: Decimal,
        description: str,
        split: SplitSelection,
    ) -> TransactionDraft:
        friend_ids = tuple(dict.fromkeys(split.friend_ids))
        if not friend_ids and not split.include_self:
            raise ValidationError(
                "Please select at least one person to split with",
                field="split",
                issue_type="missing",
            )
        for friend_id in friend_ids:
            self._store.get_friend(friend_id)

        return TransactionDraft(
            kind=TransactionKind.SPLIT,
            amount=amount,
            description=description,
            split_friend_ids=friend_ids,
            include_self=split.include_self,
        )
