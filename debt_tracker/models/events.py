"""
Ledger Event Models for Debt Tracker

Every mutation of a ledger produces one structured event that is written
to the application log. Events give:
1. A readable trace of what changed and when
2. Debugging information when a snapshot fails to load or save
3. A single place that decides the severity of each kind of change

Events are log records only. They are not stored alongside the ledger.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEventType(str, Enum):
    """Types of events the session emits."""
    # Session lifecycle
    SESSION_OPENED = "session_opened"
    LEDGER_CLEARED = "ledger_cleared"
    DEMO_DATA_LOADED = "demo_data_loaded"

    # Ledger mutations
    FRIEND_ADDED = "friend_added"
    TRANSACTION_RECORDED = "transaction_recorded"
    DEBT_SETTLED = "debt_settled"

    # Salary automation
    SALARY_CREDITED = "salary_credited"
    SALARY_SETTINGS_SAVED = "salary_settings_saved"

    # Persistence
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_RECOVERED = "snapshot_recovered"
    STORAGE_FAILED = "storage_failed"


class EventSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )

    # Which ledger, and which record inside it
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the ledger the event belongs to"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'friend')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.friend_added(user_id, friend_id, name)
        event = LedgerEventBuilder.salary_credited(user_id, tx_id, amount, month)
    """

    @staticmethod
    def session_opened(
        user_id: str,
        transaction_count: int,
        friend_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SESSION_OPENED,
            user_id=user_id,
            description=f"Ledger opened for {user_id}",
            details={
                "transaction_count": transaction_count,
                "friend_count": friend_count,
            },
        )

    @staticmethod
    def friend_added(
        user_id: str,
        friend_id: int,
        name: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.FRIEND_ADDED,
            user_id=user_id,
            entity_type="friend",
            entity_id=friend_id,
            description=f"Friend added: {name}",
            details={"name": name},
        )

    @staticmethod
    def transaction_recorded(
        user_id: str,
        transaction_id: int,
        kind: str,
        amount: Decimal,
        friend_ids: list[int],
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_RECORDED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Recorded {kind} of {amount}",
            details={
                "kind": kind,
                "amount": str(amount),
                "friend_ids": friend_ids,
            },
        )

    @staticmethod
    def debt_settled(
        user_id: str,
        transaction_id: int,
        friend_id: int,
        amount: Decimal,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.DEBT_SETTLED,
            user_id=user_id,
            entity_type="friend",
            entity_id=friend_id,
            description=f"Debt of {amount} settled",
            details={
                "transaction_id": transaction_id,
                "amount": str(amount),
            },
        )

    @staticmethod
    def salary_credited(
        user_id: str,
        transaction_id: int,
        amount: Decimal,
        month: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SALARY_CREDITED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Monthly salary credited for {month}",
            details={
                "amount": str(amount),
                "month": month,
            },
        )

    @staticmethod
    def salary_settings_saved(
        user_id: str,
        amount: Decimal,
        day: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SALARY_SETTINGS_SAVED,
            user_id=user_id,
            description="Salary settings saved",
            details={
                "amount": str(amount),
                "day": day,
            },
        )

    @staticmethod
    def snapshot_saved(
        user_id: str,
        key: str,
        transaction_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_SAVED,
            severity=EventSeverity.DEBUG,
            user_id=user_id,
            description=f"Snapshot written to {key}",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def snapshot_recovered(
        user_id: str,
        key: str,
        reason: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_RECOVERED,
            severity=EventSeverity.WARNING,
            user_id=user_id,
            description=f"Unreadable snapshot at {key}, starting from an empty ledger",
            error_message=reason,
        )

    @staticmethod
    def storage_failed(
        user_id: str,
        operation: str,
        error_message: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORAGE_FAILED,
            severity=EventSeverity.ERROR,
            user_id=user_id,
            description=f"Storage {operation} failed",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def ledger_cleared(user_id: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_CLEARED,
            severity=EventSeverity.WARNING,
            user_id=user_id,
            description="All ledger data cleared",
        )

    @staticmethod
    def demo_data_loaded(user_id: str, transaction_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.DEMO_DATA_LOADED,
            user_id=user_id,
            description="Demo data replaced the ledger",
            details={"transaction_count": transaction_count},
        )
