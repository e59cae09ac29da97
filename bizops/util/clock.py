"""Time source for domain services."""

from datetime import datetime, timezone


class Clock:
    """System clock returning timezone-aware UTC times.

    Services take a clock instead of calling ``datetime.now`` so expiry
    behaviour can be tested with a controlled time.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
