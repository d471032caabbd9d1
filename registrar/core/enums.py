"""
Enumerations and constants for the registrar.
"""

from enum import Enum
from typing import List, Union


class Weekday(Enum):
    """Day of the week a time slot meets on."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def index(self) -> int:
        """0 for Monday through 6 for Sunday, as ``date.weekday()``."""
        return list(Weekday).index(self)

    @classmethod
    def parse(cls, value: Union["Weekday", int, str]) -> "Weekday":
        """Resolve a weekday from a member, a ``date.weekday()`` index or a name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            days = list(cls)
            if not 0 <= value < len(days):
                raise ValueError(f"Weekday index out of range: {value}")
            return days[value]
        return cls(str(value).strip().lower())


class Permission(Enum):
    """Capabilities an admin must hold before a gated action succeeds."""
    COURSE_MANAGEMENT = "COURSE_MANAGEMENT"
    USER_MANAGEMENT = "USER_MANAGEMENT"
    ADMIN_MANAGEMENT = "ADMIN_MANAGEMENT"
    VIEW_COURSES = "VIEW_COURSES"
    VIEW_USERS = "VIEW_USERS"

    @classmethod
    def normalize(cls, value: Union["Permission", str]) -> str:
        """Upper-case a permission name and turn spaces into underscores."""
        if isinstance(value, cls):
            return value.value
        return str(value).strip().upper().replace(" ", "_")

    @classmethod
    def lookup(cls, value: Union["Permission", str]) -> "Permission":
        """Resolve a permission; raises ``ValueError`` for unknown names."""
        return cls(cls.normalize(value))

    @classmethod
    def names(cls) -> List[str]:
        return [permission.value for permission in cls]


class RoleKind(Enum):
    """Closed set of roles an identity can carry."""
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class ResultKind(Enum):
    """Outcome reported by every domain operation."""
    OK = "ok"
    ALREADY_ENROLLED = "already_enrolled"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    NOT_ENROLLED = "not_enrolled"
    ADVISING_HOLD = "advising_hold"
    DUPLICATE_COURSE = "duplicate_course"
    TIME_CONFLICT = "time_conflict"
    ALREADY_ASSIGNED = "already_assigned"
    NOT_ASSIGNED = "not_assigned"
    DUPLICATE_ID = "duplicate_id"
    DUPLICATE_NAME = "duplicate_name"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_NAME = "invalid_name"
    INVALID_DURATION = "invalid_duration"
    ALREADY_EXISTS = "already_exists"
    INVALID = "invalid"
