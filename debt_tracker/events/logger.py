"""
Ledger Event Logger

Every mutation of a ledger is written to the structured application log
as one JSON line. The logger:
- Is synchronous, like the ledger operations it reports on
- Never raises: a broken log handler must not undo a recorded transaction
- Tags every event with the user whose ledger changed
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog

from debt_tracker.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def setup_logging(level: str = "INFO") -> None:
    """Route structlog output through a stdlib handler at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class EventLogger:
    """Writes ledger events to the structured log."""

    def __init__(self, logger_name: str = "debt_tracker"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: LedgerEvent) -> None:
        """Log an event at the level matching its severity."""
        log_dict = event.to_log_dict()

        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error("ledger_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("ledger_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("ledger_event", **log_dict)
            else:
                self._logger.info("ledger_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).error(
                "Failed to log ledger event %s: %s", event.event_id, e
            )

    def log_session_opened(
        self,
        user_id: str,
        transaction_count: int,
        friend_count: int,
    ) -> None:
        self.log(LedgerEventBuilder.session_opened(
            user_id=user_id,
            transaction_count=transaction_count,
            friend_count=friend_count,
        ))

    def log_friend_added(self, user_id: str, friend_id: int, name: str) -> None:
        self.log(LedgerEventBuilder.friend_added(
            user_id=user_id,
            friend_id=friend_id,
            name=name,
        ))

    def log_transaction_recorded(
        self,
        user_id: str,
        transaction_id: int,
        kind: str,
        amount: Decimal,
        friend_ids: list[int],
    ) -> None:
        self.log(LedgerEventBuilder.transaction_recorded(
            user_id=user_id,
            transaction_id=transaction_id,
            kind=kind,
            amount=amount,
            friend_ids=friend_ids,
        ))

    def log_debt_settled(
        self,
        user_id: str,
        transaction_id: int,
        friend_id: int,
        amount: Decimal,
    ) -> None:
        self.log(LedgerEventBuilder.debt_settled(
            user_id=user_id,
            transaction_id=transaction_id,
            friend_id=friend_id,
            amount=amount,
        ))

    def log_salary_credited(
        self,
        user_id: str,
        transaction_id: int,
        amount: Decimal,
        month: str,
    ) -> None:
        self.log(LedgerEventBuilder.salary_credited(
            user_id=user_id,
            transaction_id=transaction_id,
            amount=amount,
            month=month,
        ))

    def log_salary_settings_saved(self, user_id: str, amount: Decimal, day: int) -> None:
        self.log(LedgerEventBuilder.salary_settings_saved(
            user_id=user_id,
            amount=amount,
            day=day,
        ))

    def log_snapshot_saved(self, user_id: str, key: str, transaction_count: int) -> None:
        self.log(LedgerEventBuilder.snapshot_saved(
            user_id=user_id,
            key=key,
            transaction_count=transaction_count,
        ))

    def log_snapshot_recovered(
        self,
        user_id: str,
        key: str,
        reason: Optional[str],
    ) -> None:
        self.log(LedgerEventBuilder.snapshot_recovered(
            user_id=user_id,
            key=key,
            reason=reason or "unknown",
        ))

    def log_storage_failed(self, user_id: str, operation: str, error_message: str) -> None:
        self.log(LedgerEventBuilder.storage_failed(
            user_id=user_id,
            operation=operation,
            error_message=error_message,
        ))

    def log_ledger_cleared(self, user_id: str) -> None:
        self.log(LedgerEventBuilder.ledger_cleared(user_id=user_id))

    def log_demo_data_loaded(self, user_id: str, transaction_count: int) -> None:
        self.log(LedgerEventBuilder.demo_data_loaded(
            user_id=user_id,
            transaction_count=transaction_count,
        ))
