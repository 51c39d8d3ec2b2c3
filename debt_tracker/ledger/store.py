"""
Ledger Store

In-memory home of one user's transactions, friends and salary settings.

The store owns ordering and mutation:
- transactions are prepended, so index 0 is always the newest
- transactions are never changed or removed once appended
- friends are keyed by id and only their balance ever changes

The store does not persist anything. Callers snapshot it after each
mutation.
"""

from decimal import Decimal
from typing import Optional

from debt_tracker.ledger.clock import Clock, local_now
from debt_tracker.ledger.errors import NotFoundError, ValidationError
from debt_tracker.models.ledger import (
    Friend,
    LedgerSnapshot,
    SalarySettings,
    Transaction,
)


MAX_FRIEND_NAME_LENGTH = 200


class IdGenerator:
    """
    Time-based ids (milliseconds since the epoch).

    Two ids requested within the same millisecond still differ: every new
    id is strictly greater than the last one handed out or observed.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or local_now
        self._last = 0

    def observe(self, existing_id: int) -> None:
        """Make sure future ids never collide with an id already in use."""
        self._last = max(self._last, existing_id)

    def __call__(self) -> int:
        candidate = int(self._clock().timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


class LedgerStore:
    """Transactions (newest first), friends (by id) and salary settings."""

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        snapshot = snapshot or LedgerSnapshot.empty()
        self._transactions: list[Transaction] = list(snapshot.transactions)
        self._friends: dict[int, Friend] = {
            friend.id: friend.model_copy() for friend in snapshot.friends
        }
        self.settings: SalarySettings = snapshot.settings.model_copy()

        self._ids = id_generator or IdGenerator()
        for transaction in self._transactions:
            self._ids.observe(transaction.id)
        for friend_id in self._friends:
            self._ids.observe(friend_id)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: LedgerSnapshot,
        id_generator: Optional[IdGenerator] = None,
    ) -> "LedgerStore":
        return cls(snapshot, id_generator=id_generator)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions, newest first."""
        return tuple(self._transactions)

    @property
    def friends(self) -> list[Friend]:
        """Friends in the order they were added."""
        return list(self._friends.values())

    def find_friend(self, friend_id: int) -> Optional[Friend]:
        return self._friends.get(friend_id)

    def get_friend(self, friend_id: int) -> Friend:
        """
        Look up a friend that must exist.

        Raises:
            NotFoundError: If no friend has this id
        """
        friend = self.find_friend(friend_id)
        if friend is None:
            raise NotFoundError("friend", friend_id)
        return friend

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def next_id(self) -> int:
        return self._ids()

    def append(self, transaction: Transaction) -> None:
        """Add a transaction at the top of the list."""
        if not isinstance(transaction, Transaction):
            raise TypeError(f"Expected Transaction, got {type(transaction).__name__}")
        self._transactions.insert(0, transaction)

    def add_friend(self, name: str) -> Friend:
        """
        Create a friend with a zero balance.

        Raises:
            ValidationError: If the name is empty or too long
        """
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise ValidationError(
                "Friend name is required",
                field="name",
                issue_type="missing",
            )
        if len(name) > MAX_FRIEND_NAME_LENGTH:
            raise ValidationError(
                f"Friend name cannot exceed {MAX_FRIEND_NAME_LENGTH} characters",
                field="name",
            )

        friend = Friend(id=self.next_id(), name=name)
        self._friends[friend.id] = friend
        return friend

    def adjust_friend_balance(self, friend_id: int, delta: Decimal) -> Friend:
        """Add `delta` to a friend's balance (negative to reduce the debt)."""
        friend = self.get_friend(friend_id)
        friend.balance = friend.balance + delta
        return friend

    def to_snapshot(self) -> LedgerSnapshot:
        """Copy of the current state, ready to persist."""
        return LedgerSnapshot(
            transactions=list(self._transactions),
            friends=[friend.model_copy() for friend in self._friends.values()],
            settings=self.settings.model_copy(),
        )
