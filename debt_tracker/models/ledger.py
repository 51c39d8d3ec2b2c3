"""
Core Data Models for Debt Tracker

These models define the strict schemas for all ledger data.
They are designed to:
1. Enforce the transaction-kind invariants at construction time
2. Provide clear validation error messages
3. Round-trip through the persisted JSON snapshot shape
   (`desc`, `type`, `friendId`, `splitDetails`, `salaryDate`, ...)

DESIGN DECISION: Amounts are Decimal in memory and JSON numbers on disk.
Transactions are frozen; friends and salary settings are mutable with
assignment validation.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)


# Largest power of ten an amount may reach; keeps every value writable as a JSON number
MAX_AMOUNT_EXPONENT = 15


def _check_magnitude(value: Decimal) -> Decimal:
    if not value.is_finite():
        raise ValueError("Amount must be a finite number")
    if value and value.adjusted() > MAX_AMOUNT_EXPONENT:
        raise ValueError(f"Amount must be below 1e{MAX_AMOUNT_EXPONENT + 1}")
    return value


def _to_json_number(value: Decimal) -> Union[int, float]:
    """Whole amounts are written as integers, everything else as floats."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[
    Decimal,
    AfterValidator(_check_magnitude),
    PlainSerializer(_to_json_number, when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """
    Every transaction is exactly one of these.

    Only `lend`, `repayment` and `split` touch friend balances.
    """
    INCOME = "income"
    SALARY = "salary"
    EXPENSE = "expense"
    LEND = "lend"
    REPAYMENT = "repayment"
    SPLIT = "split"


# Kinds that move cash into or out of the wallet. `split` is in neither.
CASH_IN_KINDS = frozenset({
    TransactionKind.INCOME,
    TransactionKind.SALARY,
    TransactionKind.REPAYMENT,
})
CASH_OUT_KINDS = frozenset({
    TransactionKind.EXPENSE,
    TransactionKind.LEND,
})

# Kinds that must name a single friend
COUNTERPARTY_KINDS = frozenset({
    TransactionKind.LEND,
    TransactionKind.REPAYMENT,
})


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class SplitDetails(BaseModel):
    """
    How a split bill was shared.

    `total_participants` counts the selected friends plus the owner
    when `included_self` is set.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_participants: int = Field(
        ...,
        ge=1,
        alias="totalParticipants",
        description="Number of people the bill was divided between"
    )
    amount_per_person: Money = Field(
        ...,
        gt=0,
        alias="amountPerPerson",
        description="Bill amount divided by total participants"
    )
    involved_friend_ids: tuple[int, ...] = Field(
        default=(),
        alias="involvedFriendIds",
        description="Friends who now owe their share"
    )
    included_self: bool = Field(
        default=False,
        alias="includedMe",
        description="Whether the owner took a share"
    )

    @model_validator(mode='after')
    def validate_participants(self) -> 'SplitDetails':
        """Participant count must match the selection."""
        expected = len(self.involved_friend_ids) + (1 if self.included_self else 0)
        if self.total_participants != expected:
            raise ValueError(
                f"Split lists {expected} participants but totalParticipants "
                f"is {self.total_participants}"
            )
        return self


class SplitSelection(BaseModel):
    """Who a new split bill is shared with, as picked by the user."""
    model_config = ConfigDict(frozen=True)

    friend_ids: tuple[int, ...] = Field(
        default=(),
        description="Selected friends, duplicates are ignored"
    )
    include_self: bool = Field(
        default=False,
        description="Whether the owner takes a share too"
    )


class Transaction(BaseModel):
    """
    A single recorded ledger entry.

    CRITICAL: Transactions are never edited or removed once appended.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: int = Field(
        ...,
        ge=0,
        description="Unique, time-based identifier"
    )
    date: datetime = Field(
        ...,
        description="When the transaction was recorded"
    )
    description: str = Field(
        ...,
        min_length=1,
        alias="desc",
        description="Free-text label"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Transaction amount, always positive"
    )
    kind: TransactionKind = Field(
        ...,
        alias="type",
        description="Transaction kind"
    )
    friend_id: Optional[int] = Field(
        default=None,
        alias="friendId",
        description="Counterparty for lend and repayment"
    )
    split_details: Optional[SplitDetails] = Field(
        default=None,
        alias="splitDetails",
        description="Share breakdown for split transactions"
    )

    @field_validator('date')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps from older snapshots are read as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode='after')
    def validate_kind_shape(self) -> 'Transaction':
        """Counterparty and split details must match the kind exactly."""
        if self.kind in COUNTERPARTY_KINDS:
            if self.friend_id is None:
                raise ValueError(f"{self.kind.value} transaction requires a friendId")
        elif self.friend_id is not None:
            raise ValueError(f"{self.kind.value} transaction cannot have a friendId")

        if self.kind == TransactionKind.SPLIT:
            if self.split_details is None:
                raise ValueError("split transaction requires splitDetails")
        elif self.split_details is not None:
            raise ValueError(f"{self.kind.value} transaction cannot have splitDetails")

        return self

    def to_storage_dict(self) -> dict:
        """Convert to the persisted JSON shape (optional keys omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# FRIEND & SETTINGS MODELS
# =============================================================================

class Friend(BaseModel):
    """
    Someone the owner lends to or splits bills with.

    A positive balance means the friend owes the owner. Negative balances
    come from over-repayment and are kept as they are.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: int = Field(..., ge=0)
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    balance: Money = Field(
        default=Decimal("0"),
        description="Signed debt towards the owner"
    )


class SalarySettings(BaseModel):
    """Monthly salary automation settings."""
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    salary_amount: Money = Field(
        default=Decimal("0"),
        ge=0,
        alias="salaryAmount",
        description="Amount credited each month, 0 disables automation"
    )
    salary_day: int = Field(
        default=1,
        ge=1,
        le=31,
        alias="salaryDate",
        description="Day of month from which the salary is credited"
    )
    last_salary_month: Optional[str] = Field(
        default=None,
        alias="lastSalaryMonth",
        pattern=r"^\d{4}-\d{1,2}$",
        description="Year-month token of the last automatic credit, e.g. 2024-3"
    )


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Everything persisted for one user.

    Transactions are ordered newest first.
    """
    model_config = ConfigDict(populate_by_name=True)

    transactions: list[Transaction] = Field(default_factory=list)
    friends: list[Friend] = Field(default_factory=list)
    settings: SalarySettings = Field(default_factory=SalarySettings)

    @model_validator(mode='after')
    def validate_unique_friends(self) -> 'LedgerSnapshot':
        seen = set()
        for friend in self.friends:
            if friend.id in seen:
                raise ValueError(f"Duplicate friend id: {friend.id}")
            seen.add(friend.id)
        return self

    @classmethod
    def empty(cls, salary_day: int = 1) -> 'LedgerSnapshot':
        """A brand new ledger: no transactions, no friends, automation off."""
        return cls(settings=SalarySettings(salary_day=salary_day))

    def to_storage_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        return {
            "transactions": [t.to_storage_dict() for t in self.transactions],
            "friends": [f.model_dump(mode="json", by_alias=True) for f in self.friends],
            "settings": self.settings.model_dump(mode="json", by_alias=True),
        }
