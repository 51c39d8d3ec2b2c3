"""
Transaction Recorder

Turns a validated candidate into a Transaction and applies its side
effects to the store:

    kind        friend balance effect
    ---------   -------------------------------------------
    income      none
    salary      none
    expense     none
    lend        friend += amount
    repayment   friend -= amount
    split       each selected friend += amount / participants

The owner's own share of a split is not tracked anywhere.
"""

from datetime import datetime
from typing import Optional, Union

from debt_tracker.ledger.balance import debt_effects
from debt_tracker.ledger.clock import Clock, local_now
from debt_tracker.ledger.errors import ValidationError
from debt_tracker.ledger.store import LedgerStore
from debt_tracker.models.ledger import (
    SplitDetails,
    SplitSelection,
    Transaction,
    TransactionKind,
)
from debt_tracker.validation.validator import (
    AmountInput,
    TransactionDraft,
    TransactionValidator,
    parse_amount,
)


SETTLEMENT_DESCRIPTION = "Full Settlement from {name}"


class TransactionRecorder:
    """
    Records transactions against one ledger store.

    Validation fully precedes mutation: if any check fails nothing in the
    store changes.
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[TransactionValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator(store)
        self._clock = clock or local_now

    def record_transaction(
        self,
        kind: Union[TransactionKind, str],
        amount: AmountInput,
        description: str,
        friend_id: Optional[int] = None,
        split: Optional[SplitSelection] = None,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """
        Validate, build and apply a transaction.

        Args:
            kind: Transaction kind (enum or its string value)
            amount: Positive amount
            description: Free-text label
            friend_id: Counterparty for lend and repayment, ignored otherwise
            split: Participant selection for split, ignored otherwise
            now: Timestamp to record, defaults to the recorder's clock

        Returns:
            The appended transaction

        Raises:
            ValidationError: If the input is rejected (nothing is mutated)
        """
        draft = self._validator.validate(kind, amount, description, friend_id, split)
        transaction = self._build(draft, now or self._clock())
        self._apply(transaction)
        return transaction

    def settle_debt(
        self,
        friend_id: int,
        amount: Optional[AmountInput] = None,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """
        Record a repayment that clears a friend's debt.

        Args:
            friend_id: Friend who paid back
            amount: Amount repaid, defaults to the full outstanding balance

        Raises:
            NotFoundError: If the friend does not exist
            ValidationError: If there is nothing to settle
        """
        friend = self._store.get_friend(friend_id)

        if amount is None:
            if friend.balance <= 0:
                raise ValidationError(
                    f"{friend.name} has no outstanding debt",
                    field="amount",
                    issue_type="nothing_to_settle",
                )
            value = friend.balance
        else:
            value = parse_amount(amount)

        return self.record_transaction(
            TransactionKind.REPAYMENT,
            value,
            SETTLEMENT_DESCRIPTION.format(name=friend.name),
            friend_id=friend.id,
            now=now,
        )

    def _build(self, draft: TransactionDraft, now: datetime) -> Transaction:
        split_details = None
        if draft.kind == TransactionKind.SPLIT:
            participants = draft.total_participants
            split_details = SplitDetails(
                total_participants=participants,
                amount_per_person=draft.amount / participants,
                involved_friend_ids=draft.split_friend_ids,
                included_self=draft.include_self,
            )

        return Transaction(
            id=self._store.next_id(),
            date=now,
            description=draft.description,
            amount=draft.amount,
            kind=draft.kind,
            friend_id=draft.friend_id,
            split_details=split_details,
        )

    def _apply(self, transaction: Transaction) -> None:
        for friend_id, delta in debt_effects(transaction):
            self._store.adjust_friend_balance(friend_id, delta)
        self._store.append(transaction)

