"""Time source injected into date-dependent components"""

from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC"""

    def today(self) -> date:
        return self.now().date()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant, for deterministic calculations"""

    def __init__(self, instant: datetime | date):
        if not isinstance(instant, datetime):
            instant = datetime(instant.year, instant.month, instant.day, tzinfo=timezone.utc)
        self._instant = instant

    def today(self) -> date:
        return self._instant.date()

    def now(self) -> datetime:
        return self._instant
