"""
Tests for recording transactions

Covers validation order, the effect of each kind on friend balances and
the guarantee that a rejected transaction changes nothing.
"""

import pytest
from decimal import Decimal

from debt_tracker.ledger.errors import NotFoundError, ValidationError
from debt_tracker.ledger.recorder import TransactionRecorder
from debt_tracker.ledger.store import IdGenerator, LedgerStore
from debt_tracker.models.ledger import SplitSelection, TransactionKind
from debt_tracker.validation import parse_amount, parse_salary_day


class TestValidation:
    """Tests for input checks before anything is recorded."""

    @pytest.mark.parametrize("amount", ["abc", "", 0, -5, "0", "-0.01", True, None])
    def test_rejects_bad_amounts(self, recorder, store, amount):
        with pytest.raises(ValidationError) as exc_info:
            recorder.record_transaction(TransactionKind.EXPENSE, amount, "Lunch")
        assert exc_info.value.field == "amount"
        assert store.transactions == ()

    @pytest.mark.parametrize("amount", ["nan", "inf", float("inf")])
    def test_rejects_non_finite_amounts(self, amount):
        with pytest.raises(ValidationError, match="finite"):
            parse_amount(amount)

    @pytest.mark.parametrize("amount", ["1e5000", "1e16", 10 ** 20])
    def test_rejects_amounts_too_large_to_store(self, recorder, store, amount):
        with pytest.raises(ValidationError, match="below 1e16"):
            recorder.record_transaction(TransactionKind.INCOME, amount, "Huge")
        assert store.transactions == ()

    @pytest.mark.parametrize("amount", ["1e-400", "0.001", 0.009])
    def test_rejects_amounts_below_one_minor_unit(self, recorder, store, amount):
        with pytest.raises(ValidationError, match="at least 0.01"):
            recorder.record_transaction(TransactionKind.INCOME, amount, "Tiny")
        assert store.transactions == ()

    def test_amount_bounds_are_inclusive(self):
        assert parse_amount("0.01") == Decimal("0.01")
        assert parse_amount("9999999999999999") == Decimal("9999999999999999")
        assert parse_amount("0", allow_zero=True) == Decimal("0")

    def test_float_amount_keeps_its_decimal_value(self):
        assert parse_amount(0.1) == Decimal("0.1")

    def test_blank_description(self, recorder, store):
        with pytest.raises(ValidationError) as exc_info:
            recorder.record_transaction(TransactionKind.EXPENSE, 100, "   ")
        assert exc_info.value.message == "Please enter a description"
        assert exc_info.value.issue_type == "missing"
        assert store.transactions == ()

    def test_description_is_checked_before_amount(self, recorder):
        with pytest.raises(ValidationError, match="description"):
            recorder.record_transaction(TransactionKind.EXPENSE, "abc", "")

    def test_unknown_kind(self, recorder):
        with pytest.raises(ValidationError) as exc_info:
            recorder.record_transaction("gift", 100, "Birthday")
        assert exc_info.value.field == "kind"

    def test_kind_accepts_string_value(self, recorder):
        transaction = recorder.record_transaction("income", 100, "Freelance")
        assert transaction.kind == TransactionKind.INCOME

    def test_salary_day_parsing(self):
        assert parse_salary_day("5") == 5
        for bad in (0, 32, "x", True):
            with pytest.raises(ValidationError):
                parse_salary_day(bad)


class TestRecordTransaction:
    """Tests for recorded transactions and their effects."""

    def test_expense_is_prepended_with_clock_time(self, recorder, store, clock):
        first = recorder.record_transaction(TransactionKind.INCOME, 500, "Gift")
        second = recorder.record_transaction(TransactionKind.EXPENSE, "120.50", "Groceries")

        assert store.transactions == (second, first)
        assert second.date == clock()
        assert second.amount == Decimal("120.50")
        assert second.description == "Groceries"

    def test_ids_are_unique_and_increasing(self, recorder):
        """Test that ids differ even when recorded in the same millisecond."""
        ids = [
            recorder.record_transaction(TransactionKind.INCOME, 1, f"Tip {i}").id
            for i in range(5)
        ]
        assert ids == sorted(set(ids))

    def test_friend_id_is_ignored_for_expense(self, recorder):
        transaction = recorder.record_transaction(
            TransactionKind.EXPENSE, 100, "Dinner", friend_id=999
        )
        assert transaction.friend_id is None

    def test_lend_increases_friend_balance(self, recorder, store):
        friend = store.add_friend("Rahul")
        transaction = recorder.record_transaction(
            TransactionKind.LEND, 2000, "Lend to Rahul", friend_id=friend.id
        )
        assert transaction.friend_id == friend.id
        assert store.get_friend(friend.id).balance == Decimal("2000")

    def test_repayment_can_overshoot(self, recorder, store):
        """Test that repaying more than owed leaves a negative balance."""
        friend = store.add_friend("Rahul")
        recorder.record_transaction(TransactionKind.LEND, 500, "Lend", friend_id=friend.id)
        recorder.record_transaction(TransactionKind.REPAYMENT, 700, "Paid back", friend_id=friend.id)
        assert store.get_friend(friend.id).balance == Decimal("-200")

    def test_lend_requires_friend(self, recorder, store):
        with pytest.raises(ValidationError) as exc_info:
            recorder.record_transaction(TransactionKind.LEND, 100, "Lend")
        assert exc_info.value.message == "Please select a friend to lend to"
        assert exc_info.value.field == "friend_id"
        assert store.transactions == ()

    def test_repayment_requires_friend(self, recorder):
        with pytest.raises(ValidationError, match="paying back"):
            recorder.record_transaction(TransactionKind.REPAYMENT, 100, "Returned")

    def test_lend_to_unknown_friend(self, recorder, store):
        with pytest.raises(NotFoundError) as exc_info:
            recorder.record_transaction(TransactionKind.LEND, 100, "Lend", friend_id=404)
        assert exc_info.value.issue_type == "not_found"
        assert store.transactions == ()


class TestSplit:
    """Tests for split transactions."""

    def test_split_with_owner(self, recorder, store):
        a = store.add_friend("A")
        b = store.add_friend("B")
        transaction = recorder.record_transaction(
            TransactionKind.SPLIT,
            900,
            "Pizza",
            split=SplitSelection(friend_ids=(a.id, b.id), include_self=True),
        )

        details = transaction.split_details
        assert details.total_participants == 3
        assert details.amount_per_person == Decimal("300")
        assert details.involved_friend_ids == (a.id, b.id)
        assert details.included_self is True
        assert store.get_friend(a.id).balance == Decimal("300")
        assert store.get_friend(b.id).balance == Decimal("300")

    def test_split_without_owner(self, recorder, store):
        a = store.add_friend("A")
        b = store.add_friend("B")
        recorder.record_transaction(
            TransactionKind.SPLIT,
            1000,
            "Cab",
            split=SplitSelection(friend_ids=(a.id, b.id)),
        )
        assert store.get_friend(a.id).balance == Decimal("500")
        assert store.get_friend(b.id).balance == Decimal("500")

    def test_duplicate_selection_is_collapsed(self, recorder, store):
        a = store.add_friend("A")
        transaction = recorder.record_transaction(
            TransactionKind.SPLIT,
            100,
            "Snacks",
            split=SplitSelection(friend_ids=(a.id, a.id), include_self=True),
        )
        assert transaction.split_details.total_participants == 2
        assert store.get_friend(a.id).balance == Decimal("50")

    def test_split_needs_a_participant(self, recorder, store):
        with pytest.raises(ValidationError) as exc_info:
            recorder.record_transaction(TransactionKind.SPLIT, 100, "Dinner")
        assert exc_info.value.message == "Please select at least one person to split with"
        assert store.transactions == ()

    def test_unknown_participant_changes_nothing(self, recorder, store):
        """Test that no friend is charged when any selected friend is missing."""
        a = store.add_friend("A")
        with pytest.raises(NotFoundError):
            recorder.record_transaction(
                TransactionKind.SPLIT,
                100,
                "Dinner",
                split=SplitSelection(friend_ids=(a.id, 404)),
            )
        assert store.get_friend(a.id).balance == Decimal("0")
        assert store.transactions == ()


class TestSettleDebt:
    """Tests for one-click settlement."""

    def test_settles_full_balance(self, recorder, store):
        friend = store.add_friend("Rahul")
        recorder.record_transaction(TransactionKind.LEND, 500, "Lend", friend_id=friend.id)

        transaction = recorder.settle_debt(friend.id)

        assert transaction.kind == TransactionKind.REPAYMENT
        assert transaction.amount == Decimal("500")
        assert transaction.description == "Full Settlement from Rahul"
        assert store.get_friend(friend.id).balance == Decimal("0")

    def test_partial_settlement(self, recorder, store):
        friend = store.add_friend("Rahul")
        recorder.record_transaction(TransactionKind.LEND, 500, "Lend", friend_id=friend.id)
        recorder.settle_debt(friend.id, amount=200)
        assert store.get_friend(friend.id).balance == Decimal("300")

    def test_nothing_to_settle(self, recorder, store):
        friend = store.add_friend("Rahul")
        with pytest.raises(ValidationError) as exc_info:
            recorder.settle_debt(friend.id)
        assert exc_info.value.issue_type == "nothing_to_settle"
        assert store.transactions == ()

    def test_unknown_friend(self, recorder):
        with pytest.raises(NotFoundError):
            recorder.settle_debt(404)


class TestLedgerStore:
    """Tests for the store the recorder writes to."""

    def test_add_friend_trims_name(self, store):
        friend = store.add_friend("  Priya  ")
        assert friend.name == "Priya"
        assert store.friends == [friend]

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 201])
    def test_add_friend_rejects_bad_names(self, store, name):
        with pytest.raises(ValidationError):
            store.add_friend(name)
        assert store.friends == []

    def test_new_ids_never_collide_with_loaded_ones(self, clock):
        """Test that ids stay unique after loading a ledger with future ids."""
        future_id = int(clock().timestamp() * 1000) + 10_000
        loaded = LedgerStore(id_generator=IdGenerator(clock))
        loaded.add_friend("A")
        snapshot = loaded.to_snapshot()
        snapshot.friends[0].id = future_id

        store = LedgerStore(snapshot, id_generator=IdGenerator(clock))
        assert store.next_id() > future_id

    def test_append_rejects_non_transactions(self, store):
        with pytest.raises(TypeError):
            store.append({"id": 1})

    def test_recorder_defaults(self, store):
        """Test that a recorder works with its own validator and clock."""
        recorder = TransactionRecorder(store)
        transaction = recorder.record_transaction(TransactionKind.INCOME, 10, "Gift")
        assert transaction.date.tzinfo is not None
