"""Time helpers shared by the ledger components."""

from datetime import datetime
from typing import Callable

# Returns a timezone-aware "now"
Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()
