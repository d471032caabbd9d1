"""
Weekly meeting times for course sections.
"""

from dataclasses import dataclass
from datetime import datetime, date, time
from typing import Union

from .enums import Weekday
from .exceptions import InvalidDurationError


@dataclass(frozen=True)
class TimeSlot:
    """One weekly meeting: a day plus a start and end time.

    Slots are closed intervals, so two slots that merely touch (one ends at
    the minute the other starts) still conflict.
    """
    day: Weekday
    start_time: time
    end_time: time

    def __post_init__(self):
        object.__setattr__(self, "day", Weekday.parse(self.day))
        if self.end_time <= self.start_time:
            raise InvalidDurationError(details={
                'day': self.day.value,
                'start_time': self.start_time.isoformat(),
                'end_time': self.end_time.isoformat(),
            })

    @classmethod
    def of(cls, day: Union[Weekday, int, str], start: str, end: str) -> "TimeSlot":
        """Build a slot from ``HH:MM`` strings."""
        return cls(Weekday.parse(day), time.fromisoformat(start), time.fromisoformat(end))

    def conflicts_with(self, other: "TimeSlot") -> bool:
        """Check if this slot overlaps another, shared boundaries included."""
        if self.day != other.day:
            return False
        return self.start_time <= other.end_time and other.start_time <= self.end_time

    def duration_minutes(self) -> int:
        """Get duration in minutes."""
        start = datetime.combine(date.min, self.start_time)
        end = datetime.combine(date.min, self.end_time)
        return int((end - start).total_seconds() // 60)

    def __str__(self) -> str:
        return f"{self.day.value.capitalize()} {self.start_time:%H:%M}-{self.end_time:%H:%M}"
