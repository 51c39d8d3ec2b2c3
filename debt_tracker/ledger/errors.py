"""
Ledger Exceptions

Every failure of a ledger operation is raised before anything is mutated,
so callers can show the message and let the user retry.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """
    User input was rejected.

    `field` names the offending input and `issue_type` says what was
    wrong with it (e.g. 'missing', 'invalid_value', 'not_found').
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        issue_type: str = "invalid_value",
    ):
        self.message = message
        self.field = field
        self.issue_type = issue_type
        super().__init__(message)


class NotFoundError(ValidationError):
    """A referenced friend does not exist in the ledger."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            field=f"{entity}_id",
            issue_type="not_found",
        )
