"""
Integration tests for LedgerSession

Each test drives a session the way the dashboard does and checks what was
persisted, logged and reported.
"""

import json

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from debt_tracker.config import get_settings
from debt_tracker.ledger.balance import friend_debt_deltas
from debt_tracker.ledger.errors import NotFoundError, ValidationError
from debt_tracker.models.ledger import SplitSelection, TransactionKind
from debt_tracker.models.report import Period
from debt_tracker.orchestrator import LedgerSession, create_session
from debt_tracker.services.storage import (
    InMemoryStorage,
    SnapshotRepository,
    StorageError,
)


class RecordingEventLogger:
    """Collects logged events instead of writing them."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if not name.startswith("log_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append(name)
        return record


class FailingStorage(InMemoryStorage):
    def write(self, key, payload):
        raise StorageError("disk full")


class TestOpenSession:
    """Tests for opening a session."""

    def test_new_user_starts_empty(self, session):
        assert session.user_id == "alice"
        assert session.transactions == ()
        assert session.friends == []
        assert session.total_balance == Decimal("0")
        assert session.total_owed == Decimal("0")

    @pytest.mark.parametrize("user_id", ["", "   ", None])
    def test_profile_name_is_required(self, repository, user_id):
        with pytest.raises(ValidationError) as exc_info:
            LedgerSession.open(user_id, repository)
        assert exc_info.value.field == "user_id"

    def test_reopen_restores_ledger(self, session, repository, clock):
        friend = session.add_friend("Rahul")
        session.record_transaction(TransactionKind.LEND, 500, "Lend", friend_id=friend.id)

        reopened = LedgerSession.open("alice", repository, clock=clock)

        assert reopened.transactions == session.transactions
        assert reopened.friends[0].balance == Decimal("500")

    def test_corrupt_snapshot_opens_empty_and_is_logged(self, storage, repository, clock):
        storage.write(repository.key_for("alice"), "{broken")
        events = RecordingEventLogger()

        session = LedgerSession.open("alice", repository, event_logger=events, clock=clock)

        assert session.transactions == ()
        assert events.calls[:2] == ["log_snapshot_recovered", "log_session_opened"]

    def test_salary_is_credited_on_open(self, storage, clock):
        repository = SnapshotRepository(storage)
        first = LedgerSession.open("alice", repository, clock=clock)
        first.save_salary_settings(50000, 25)
        assert first.transactions == ()

        clock.set(datetime(2024, 5, 25, 8, 0, tzinfo=timezone.utc))
        reopened = LedgerSession.open("alice", repository, clock=clock)

        assert [t.kind for t in reopened.transactions] == [TransactionKind.SALARY]
        assert repository.load("alice").snapshot.settings.last_salary_month == "2024-5"

        # Opening again in the same month credits nothing
        again = LedgerSession.open("alice", repository, clock=clock)
        assert len(again.transactions) == 1


class TestOperations:
    """Tests for the mutating operations."""

    def test_end_to_end_example(self, session):
        """Rent, lend 2000 to A, A returns 1000."""
        friend = session.add_friend("A")
        session.record_transaction(TransactionKind.EXPENSE, 12000, "Rent")
        session.record_transaction(TransactionKind.LEND, 2000, "Lend to A", friend_id=friend.id)
        assert session.friends[0].balance == Decimal("2000")

        session.record_transaction(TransactionKind.REPAYMENT, 1000, "A returned", friend_id=friend.id)

        assert session.friends[0].balance == Decimal("1000")
        assert session.total_balance == Decimal("-13000")
        assert session.total_owed == Decimal("1000")

    def test_every_change_is_persisted(self, session, repository):
        friend = session.add_friend("A")
        assert repository.load("alice").snapshot.friends[0].id == friend.id

        transaction = session.record_transaction(TransactionKind.INCOME, "99.5", "Refund")
        stored = repository.load("alice").snapshot
        assert stored.transactions[0] == transaction

    @pytest.mark.parametrize("amount", ["1e5000", "1e-400"])
    def test_unstorable_amount_leaves_ledger_saveable(self, session, repository, amount):
        session.record_transaction(TransactionKind.INCOME, 100, "Gift")

        with pytest.raises(ValidationError):
            session.record_transaction(TransactionKind.INCOME, amount, "Odd")
        session.record_transaction(TransactionKind.EXPENSE, 40, "Lunch")

        load = repository.load("alice")
        assert load.recovered is False
        assert [t.description for t in load.snapshot.transactions] == ["Lunch", "Gift"]

    def test_smallest_and_largest_amounts_survive_reload(self, session, repository, clock):
        session.record_transaction(TransactionKind.INCOME, "9999999999999999", "Jackpot")
        session.record_transaction(TransactionKind.EXPENSE, "0.01", "Sweet")

        reopened = LedgerSession.open("alice", repository, clock=clock)

        assert repository.load("alice").recovered is False
        sweet, jackpot = reopened.transactions
        assert jackpot.amount == Decimal("9999999999999999")
        assert float(sweet.amount) == 0.01

    def test_rejected_transaction_is_not_persisted(self, session, storage, repository):
        session.record_transaction(TransactionKind.INCOME, 100, "Gift")
        before = storage.read(repository.key_for("alice"))

        with pytest.raises(ValidationError):
            session.record_transaction(TransactionKind.LEND, 100, "Lend")
        with pytest.raises(NotFoundError):
            session.record_transaction(TransactionKind.LEND, 100, "Lend", friend_id=404)

        assert storage.read(repository.key_for("alice")) == before
        assert len(session.transactions) == 1

    def test_split_charges_friends_but_not_wallet(self, session):
        """A split leaves the owner's wallet untouched while friends owe their share."""
        a = session.add_friend("A")
        b = session.add_friend("B")
        session.record_transaction(TransactionKind.INCOME, 1000, "Pocket money")

        session.record_transaction(
            TransactionKind.SPLIT,
            900,
            "Pizza",
            split=SplitSelection(friend_ids=(a.id, b.id), include_self=True),
        )

        assert session.total_balance == Decimal("1000")
        assert session.total_owed == Decimal("600")

    def test_friend_balances_match_transaction_history(self, session):
        a = session.add_friend("A")
        b = session.add_friend("B")
        session.record_transaction(TransactionKind.LEND, 700, "Lend", friend_id=a.id)
        session.record_transaction(
            TransactionKind.SPLIT, 300, "Cab", split=SplitSelection(friend_ids=(a.id, b.id))
        )
        session.settle_debt(a.id)
        session.record_transaction(TransactionKind.REPAYMENT, 50, "Paid", friend_id=b.id)

        deltas = friend_debt_deltas(session.transactions)
        assert {f.id: f.balance for f in session.friends} == {
            a.id: deltas[a.id],
            b.id: deltas[b.id],
        }
        assert session.friends[0].balance == Decimal("0")
        assert session.friends[1].balance == Decimal("100")

    def test_settle_debt(self, session):
        friend = session.add_friend("Rahul")
        session.record_transaction(TransactionKind.LEND, 800, "Lend", friend_id=friend.id)

        transaction = session.settle_debt(friend.id)

        assert transaction.description == "Full Settlement from Rahul"
        assert session.total_owed == Decimal("0")
        assert session.total_balance == Decimal("0")

    def test_save_salary_settings_credits_when_due(self, session, repository):
        transaction = session.save_salary_settings("50000", 1)

        assert transaction.kind == TransactionKind.SALARY
        assert session.total_balance == Decimal("50000")
        assert repository.load("alice").snapshot.settings.salary_amount == Decimal("50000")
        assert session.check_salary() is None

    def test_check_salary_next_month(self, session, clock):
        session.save_salary_settings(100, 1)
        clock.set(datetime(2024, 6, 2, tzinfo=timezone.utc))

        assert session.check_salary() is not None
        assert session.check_salary() is None
        assert session.total_balance == Decimal("200")

    def test_change_listener_is_called_after_save(self, repository, clock):
        seen = []
        session = LedgerSession.open(
            "alice",
            repository,
            clock=clock,
            on_change=lambda s: seen.append(len(s.transactions)),
        )

        session.record_transaction(TransactionKind.INCOME, 5, "Tip")
        session.add_friend("A")

        assert seen == [1, 1]

    def test_storage_failure_is_raised_and_logged(self, clock):
        events = RecordingEventLogger()
        session = LedgerSession.open(
            "alice",
            SnapshotRepository(FailingStorage()),
            event_logger=events,
            clock=clock,
        )

        with pytest.raises(StorageError):
            session.record_transaction(TransactionKind.INCOME, 5, "Tip")
        assert "log_storage_failed" in events.calls

    def test_recent_transactions_limit(self, repository, clock):
        session = LedgerSession.open("alice", repository, clock=clock, recent_limit=3)
        for i in range(5):
            session.record_transaction(TransactionKind.INCOME, 1, f"Tip {i}")

        assert [t.description for t in session.recent_transactions()] == ["Tip 4", "Tip 3", "Tip 2"]
        assert len(session.recent_transactions(limit=10)) == 5
        assert session.recent_transactions(limit=0) == []


class TestDemoAndClear:
    """Tests for demo data and clearing the ledger."""

    def test_load_demo_data(self, session, repository):
        session.load_demo_data()

        assert len(session.transactions) == 10
        assert session.transactions[0].description == "Groceries"
        assert session.friends[0].name == "Rahul"
        assert session.total_owed == Decimal("1000")
        assert session.total_balance == Decimal("27550")
        assert repository.load("alice").found is True

    def test_demo_summary(self, session):
        session.load_demo_data()
        summary = session.report(Period.THIS_MONTH)
        assert summary.income == Decimal("51000")
        assert summary.expense == Decimal("23450")
        assert summary.top_categories[0].label == "Rent"

    def test_new_ids_after_demo_are_unique(self, session):
        session.load_demo_data()
        transaction = session.record_transaction(TransactionKind.INCOME, 1, "Tip")
        assert transaction.id not in {t.id for t in session.transactions[1:]}

    def test_demo_keeps_salary_settings(self, session):
        session.save_salary_settings(0, 7)
        session.load_demo_data()
        assert session.settings.salary_day == 7

    def test_clear_all_data(self, session, repository):
        session.add_friend("A")
        session.record_transaction(TransactionKind.INCOME, 5, "Tip")

        session.clear_all_data()

        assert session.transactions == ()
        assert session.friends == []
        assert repository.load("alice").found is False


class TestReportsAndExport:
    """Tests for the read-only views."""

    def test_history_and_export(self, session):
        friend = session.add_friend("Rahul")
        session.record_transaction(TransactionKind.LEND, 2000, "Lend to Rahul", friend_id=friend.id)

        assert len(session.history(Period.THIS_MONTH)) == 1

        filename, text = session.export_csv(Period.THIS_MONTH)
        assert filename == "transactions_this_month_2024-05-20.csv"
        assert text.splitlines()[1] == '2024-05-20,"Lend to Rahul",lend,2000,"Rahul"'


class TestCreateSession:
    """Tests for the factory function."""

    @pytest.fixture(autouse=True)
    def data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEBT_TRACKER_STORAGE_DATA_DIR", str(tmp_path / "data"))
        get_settings.cache_clear()
        yield tmp_path / "data"
        get_settings.cache_clear()

    def test_file_backed_session(self, data_dir, clock):
        session = create_session("alice", clock=clock)
        session.record_transaction(TransactionKind.INCOME, 10, "Gift")

        files = list(data_dir.iterdir())
        assert [f.name for f in files] == ["debtTrackerData_alice.json"]
        assert json.loads(files[0].read_text(encoding="utf-8"))["transactions"][0]["desc"] == "Gift"

    def test_in_memory_session(self, data_dir, clock):
        session = create_session("alice", use_storage=False, clock=clock)
        session.record_transaction(TransactionKind.INCOME, 10, "Gift")
        assert not data_dir.exists()

    def test_explicit_storage(self, clock):
        storage = InMemoryStorage()
        create_session("alice", clock=clock, storage=storage).add_friend("A")
        assert storage.keys() == ["debtTrackerData_alice"]

    def test_falls_back_to_memory(self, tmp_path, monkeypatch, clock):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setenv("DEBT_TRACKER_STORAGE_DATA_DIR", str(blocker / "data"))
        get_settings.cache_clear()

        session = create_session("alice", clock=clock)
        session.add_friend("A")

        assert isinstance(session.repository.storage, InMemoryStorage)
        assert session.friends[0].name == "A"
