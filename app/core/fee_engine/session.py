"""Academic session: the April to March window every ledger is built on."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import List

# Calendar month (1-12) the session opens in
SESSION_START_MONTH = 4
SESSION_LENGTH = 12


@dataclass(frozen=True, order=True)
class SessionMonth:
    """One month of the session. ``month`` is 0-indexed (January = 0, April = 3)."""

    year: int
    month: int

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month}"

    @property
    def calendar_month(self) -> int:
        return self.month + 1

    @property
    def name(self) -> str:
        return calendar.month_name[self.calendar_month]

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.calendar_month)[1]

    @property
    def first_day(self) -> datetime:
        return datetime(self.year, self.calendar_month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.calendar_month, self.days_in_month)

    def has_started(self, now: datetime) -> bool:
        """A month counts towards dues once its first day has been reached."""
        return self.first_day <= now


def session_start_year(now: datetime) -> int:
    return now.year - 1 if now.month < SESSION_START_MONTH else now.year


def session_months(now: datetime) -> List[SessionMonth]:
    """Ordered (year, month) pairs of the session containing ``now``."""
    start_year = session_start_year(now)
    start_index = SESSION_START_MONTH - 1
    months = []
    for offset in range(SESSION_LENGTH):
        month_index = (start_index + offset) % 12
        year = start_year + (start_index + offset) // 12
        months.append(SessionMonth(year=year, month=month_index))
    return months
