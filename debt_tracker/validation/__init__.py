"""Transaction validation package."""

from debt_tracker.validation.validator import (
    TransactionDraft,
    TransactionValidator,
    parse_amount,
    parse_kind,
    parse_salary_day,
    validate_description,
)

__all__ = [
    "TransactionDraft",
    "TransactionValidator",
    "parse_amount",
    "parse_kind",
    "parse_salary_day",
    "validate_description",
]
