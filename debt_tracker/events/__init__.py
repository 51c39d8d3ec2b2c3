"""Ledger event logging package."""

from debt_tracker.events.logger import EventLogger, setup_logging

__all__ = ["EventLogger", "setup_logging"]
