"""
Core module containing the domain entities and the rules that keep them consistent.
"""

from .abstract_entity import AbstractEntity
from .academics import Course, Section
from .enums import Permission, ResultKind, RoleKind, Weekday
from .exceptions import (
    ConfigurationError,
    InvalidDurationError,
    InvalidNameError,
    RegistrarException,
    ValidationError,
)
from .ledger import RosterLedger
from .people import Account, Admin, Identity, Instructor, Student
from .results import OperationResult
from .sequences import Sequence
from .timeslot import TimeSlot

__all__ = [
    # Entities
    "AbstractEntity",
    "Course",
    "Section",
    "TimeSlot",
    "Identity",
    "Account",
    "Student",
    "Instructor",
    "Admin",

    # Bookkeeping
    "RosterLedger",
    "Sequence",
    "OperationResult",

    # Enums
    "Weekday",
    "Permission",
    "RoleKind",
    "ResultKind",

    # Exceptions
    "RegistrarException",
    "ValidationError",
    "InvalidDurationError",
    "InvalidNameError",
    "ConfigurationError",
]
