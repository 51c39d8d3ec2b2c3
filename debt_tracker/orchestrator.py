"""
Main Orchestrator for Debt Tracker

Ties the ledger components together for one user's session:

    load snapshot -> salary check -> [operation -> persist -> notify]*

Every mutating operation follows the same sequence:
1. Validate and apply (recorder / scheduler / store)
2. Log a ledger event
3. Persist the full snapshot synchronously
4. Call the change listener so the UI can redraw

A rejected operation raises ValidationError before step 1 mutates
anything, and none of the later steps run.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Union

import structlog

from debt_tracker.config import get_settings
from debt_tracker.demo import build_demo_snapshot
from debt_tracker.events import EventLogger
from debt_tracker.ledger.balance import (
    compute_total_balance,
    net_friend_balance,
    total_owed_to_owner,
)
from debt_tracker.ledger.clock import Clock, local_now
from debt_tracker.ledger.errors import ValidationError
from debt_tracker.ledger.recorder import TransactionRecorder
from debt_tracker.ledger.salary import SalaryScheduler, month_token
from debt_tracker.ledger.store import IdGenerator, LedgerStore
from debt_tracker.models.ledger import (
    Friend,
    LedgerSnapshot,
    SalarySettings,
    SplitSelection,
    Transaction,
    TransactionKind,
)
from debt_tracker.models.report import Period, ReportSummary
from debt_tracker.reports import ReportBuilder, export_csv, export_filename
from debt_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    SnapshotRepository,
    StorageError,
)
from debt_tracker.validation.validator import AmountInput


ChangeListener = Callable[["LedgerSession"], None]


def _profile_name(user_id: str) -> str:
    user_id = user_id.strip() if isinstance(user_id, str) else ""
    if not user_id:
        raise ValidationError("A profile name is required", field="user_id", issue_type="missing")
    return user_id


class LedgerSession:
    """
    One user's open ledger.

    Holds the store explicitly; there is no module-level ledger state.
    """

    def __init__(
        self,
        user_id: str,
        repository: SnapshotRepository,
        snapshot: Optional[LedgerSnapshot] = None,
        event_logger: Optional[EventLogger] = None,
        clock: Optional[Clock] = None,
        report_builder: Optional[ReportBuilder] = None,
        on_change: Optional[ChangeListener] = None,
        recent_limit: int = 20,
    ):
        self._user_id = _profile_name(user_id)
        self._repository = repository
        self._event_logger = event_logger or EventLogger()
        self._clock = clock or local_now
        self._report_builder = report_builder or ReportBuilder()
        self._on_change = on_change
        self._recent_limit = recent_limit
        self._attach(LedgerStore.from_snapshot(
            snapshot or repository.empty_snapshot(),
            id_generator=IdGenerator(self._clock),
        ))

    @classmethod
    def open(
        cls,
        user_id: str,
        repository: SnapshotRepository,
        event_logger: Optional[EventLogger] = None,
        clock: Optional[Clock] = None,
        report_builder: Optional[ReportBuilder] = None,
        on_change: Optional[ChangeListener] = None,
        recent_limit: int = 20,
    ) -> "LedgerSession":
        """
        Load a user's ledger and run the salary check.

        Unreadable snapshots open as an empty ledger (logged as a warning).

        Raises:
            ValidationError: If user_id is blank
            StorageError: If the storage backend cannot be read
        """
        event_logger = event_logger or EventLogger()
        user_id = _profile_name(user_id)
        load = repository.load(user_id)

        session = cls(
            user_id=user_id,
            repository=repository,
            snapshot=load.snapshot,
            event_logger=event_logger,
            clock=clock,
            report_builder=report_builder,
            on_change=on_change,
            recent_limit=recent_limit,
        )

        if load.recovered:
            event_logger.log_snapshot_recovered(session.user_id, load.key, load.reason)
        event_logger.log_session_opened(
            session.user_id,
            transaction_count=len(session.transactions),
            friend_count=len(session.friends),
        )

        session.check_salary()
        return session

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def repository(self) -> SnapshotRepository:
        return self._repository

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._store.transactions

    @property
    def friends(self) -> list[Friend]:
        return self._store.friends

    @property
    def settings(self) -> SalarySettings:
        return self._store.settings

    @property
    def total_balance(self) -> Decimal:
        """Recomputed from every transaction on each access."""
        return compute_total_balance(self._store.transactions)

    @property
    def total_owed(self) -> Decimal:
        """What friends owe the owner (positive balances only)."""
        return total_owed_to_owner(self._store.friends)

    @property
    def net_friend_balance(self) -> Decimal:
        return net_friend_balance(self._store.friends)

    def recent_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        if limit is None:
            limit = self._recent_limit
        return list(self._store.transactions[:limit])

    def snapshot(self) -> LedgerSnapshot:
        return self._store.to_snapshot()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_friend(self, name: str) -> Friend:
        friend = self._store.add_friend(name)
        self._event_logger.log_friend_added(self._user_id, friend.id, friend.name)
        self._commit()
        return friend

    def record_transaction(
        self,
        kind: Union[TransactionKind, str],
        amount: AmountInput,
        description: str,
        friend_id: Optional[int] = None,
        split: Optional[SplitSelection] = None,
    ) -> Transaction:
        """
        Record a transaction and persist the ledger.

        Raises:
            ValidationError: If the input is rejected (nothing changes)
            StorageError: If the snapshot could not be written
        """
        transaction = self._recorder.record_transaction(
            kind,
            amount,
            description,
            friend_id=friend_id,
            split=split,
            now=self._clock(),
        )
        self._log_recorded(transaction)
        self._commit()
        return transaction

    def settle_debt(
        self,
        friend_id: int,
        amount: Optional[AmountInput] = None,
    ) -> Transaction:
        """Record a repayment for the friend's outstanding balance (or `amount`)."""
        transaction = self._recorder.settle_debt(friend_id, amount, now=self._clock())
        self._event_logger.log_debt_settled(
            self._user_id,
            transaction.id,
            friend_id,
            transaction.amount,
        )
        self._commit()
        return transaction

    def save_salary_settings(
        self,
        amount: AmountInput,
        day: Union[int, str],
    ) -> Optional[Transaction]:
        """
        Update salary settings, then credit the salary if it is now due.

        Returns:
            The salary transaction when one was credited
        """
        now = self._clock()
        transaction = self._scheduler.save_settings(amount, day, now=now)
        self._event_logger.log_salary_settings_saved(
            self._user_id,
            self.settings.salary_amount,
            self.settings.salary_day,
        )
        if transaction:
            self._log_salary(transaction, now)
        self._commit()
        return transaction

    def check_salary(self) -> Optional[Transaction]:
        """Credit this month's salary if due. Safe to call any number of times."""
        now = self._clock()
        transaction = self._scheduler.check(now)
        if transaction is None:
            return None
        self._log_salary(transaction, now)
        self._commit()
        return transaction

    def load_demo_data(self) -> None:
        """Replace the ledger with the demo month (salary settings are kept)."""
        self._attach(LedgerStore.from_snapshot(
            build_demo_snapshot(self._clock(), self.settings),
            id_generator=IdGenerator(self._clock),
        ))
        self._event_logger.log_demo_data_loaded(self._user_id, len(self.transactions))
        self._commit()

    def clear_all_data(self) -> None:
        """Delete the stored snapshot and start over with an empty ledger."""
        try:
            self._repository.clear(self._user_id)
        except StorageError as e:
            self._event_logger.log_storage_failed(self._user_id, "clear", str(e))
            raise
        self._attach(LedgerStore.from_snapshot(
            self._repository.empty_snapshot(),
            id_generator=IdGenerator(self._clock),
        ))
        self._event_logger.log_ledger_cleared(self._user_id)
        self._notify()

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def history(self, period: Union[Period, str] = Period.ALL_TIME) -> list[Transaction]:
        return self._report_builder.history(self._store.transactions, period, self._clock())

    def report(self, period: Union[Period, str] = Period.THIS_MONTH) -> ReportSummary:
        return self._report_builder.summarize(self._store.transactions, period, self._clock())

    def export_csv(self, period: Union[Period, str] = Period.ALL_TIME) -> tuple[str, str]:
        """
        Export the period's transactions.

        Returns:
            (filename, csv_text)
        """
        now = self._clock()
        rows = self._report_builder.history(self._store.transactions, period, now)
        return export_filename(period, now.date()), export_csv(rows, self._store.friends)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _attach(self, store: LedgerStore) -> None:
        self._store = store
        self._recorder = TransactionRecorder(store, clock=self._clock)
        self._scheduler = SalaryScheduler(store, clock=self._clock)

    def _log_recorded(self, transaction: Transaction) -> None:
        if transaction.friend_id is not None:
            friend_ids = [transaction.friend_id]
        elif transaction.split_details is not None:
            friend_ids = list(transaction.split_details.involved_friend_ids)
        else:
            friend_ids = []
        self._event_logger.log_transaction_recorded(
            self._user_id,
            transaction.id,
            transaction.kind.value,
            transaction.amount,
            friend_ids,
        )

    def _log_salary(self, transaction: Transaction, now: datetime) -> None:
        self._event_logger.log_salary_credited(
            self._user_id,
            transaction.id,
            transaction.amount,
            month_token(now),
        )

    def _commit(self) -> None:
        snapshot = self._store.to_snapshot()
        try:
            key = self._repository.save(self._user_id, snapshot)
        except StorageError as e:
            self._event_logger.log_storage_failed(self._user_id, "save", str(e))
            raise
        self._event_logger.log_snapshot_saved(self._user_id, key, len(snapshot.transactions))
        self._notify()

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self)


def create_session(
    user_id: str,
    use_storage: bool = True,
    clock: Optional[Clock] = None,
    on_change: Optional[ChangeListener] = None,
    storage: Optional[KeyValueStorageInterface] = None,
) -> LedgerSession:
    """
    Factory function to open a session with configured components.

    Args:
        user_id: Profile whose ledger is opened
        use_storage: Whether to persist to the configured data directory.
                    Set to False for a throwaway in-memory ledger.
        storage: Explicit storage backend, overrides use_storage

    Returns:
        An open LedgerSession
    """
    settings = get_settings()
    storage_settings = settings.storage
    ledger_settings = settings.ledger

    if storage is None and use_storage:
        try:
            storage = JsonFileStorage(
                storage_settings.data_dir,
                write_attempts=storage_settings.write_attempts,
            )
        except StorageError as e:
            # Storage not available - continue without it
            structlog.get_logger("debt_tracker").warning(
                "storage_unavailable",
                error=str(e),
                data_dir=str(storage_settings.data_dir),
            )
    if storage is None:
        storage = InMemoryStorage()

    repository = SnapshotRepository(
        storage,
        key_prefix=storage_settings.key_prefix,
        default_salary_day=ledger_settings.default_salary_day,
    )

    return LedgerSession.open(
        user_id,
        repository,
        event_logger=EventLogger(),
        clock=clock,
        report_builder=ReportBuilder(top_n=ledger_settings.top_categories),
        on_change=on_change,
        recent_limit=ledger_settings.recent_limit,
    )
