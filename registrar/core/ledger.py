"""
Relationship bookkeeping between people and sections.

Enrollment (student <-> section) and teaching assignment
(instructor <-> section) are stored here, keyed by stable identifiers:
student and instructor ids, section reference numbers. Entities never hold
pointers to each other for these relationships; both directions are read
back from the ledger, so a student's schedule and a section's roster are the
same record seen from two sides.
"""

import threading
from typing import TYPE_CHECKING, Dict, List, Optional

from ..logging import get_logger
from .exceptions import ValidationError

if TYPE_CHECKING:
    from .academics import Section
    from .people import Account, Instructor, Student

logger = get_logger("core.ledger")


class RosterLedger:
    """Shared relationship store for one catalog and its registry.

    Every mutation happens under ``lock``. Callers running a check-then-act
    sequence (capacity, conflicts, then enroll) hold the same re-entrant lock
    around the whole sequence.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._sections: Dict[str, 'Section'] = {}  # reference number -> Section
        self._accounts: Dict[str, 'Account'] = {}  # person id -> Account
        self._rosters: Dict[str, List[str]] = {}  # reference number -> [student ids]
        self._enrollments: Dict[str, List[str]] = {}  # student id -> [reference numbers]
        self._instructors: Dict[str, str] = {}  # reference number -> instructor id
        self._assignments: Dict[str, List[str]] = {}  # instructor id -> [reference numbers]

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # Registration

    def register_section(self, section: 'Section') -> None:
        with self._lock:
            self._sections[section.reference_number] = section
            self._rosters.setdefault(section.reference_number, [])

    def register_account(self, account: 'Account') -> None:
        """Bind ``account.id`` to ``account``; an id already bound elsewhere is refused."""
        with self._lock:
            bound = self._accounts.get(account.id)
            if bound is not None and bound is not account:
                raise ValidationError(
                    f"Id {account.id} already belongs to another account",
                    details={'user_id': account.id},
                )
            self._accounts[account.id] = account

    def account(self, account_id: str) -> Optional['Account']:
        with self._lock:
            return self._accounts.get(account_id)

    def holds(self, section: 'Section') -> bool:
        """Whether ``section`` is live here, i.e. created and not yet forgotten."""
        with self._lock:
            return self._sections.get(section.reference_number) is section

    def forget_section(self, section: 'Section') -> None:
        """Drop every trace of a deleted section."""
        with self._lock:
            reference_number = section.reference_number
            for student_id in self._rosters.pop(reference_number, []):
                self._discard(self._enrollments, student_id, reference_number)
            instructor_id = self._instructors.pop(reference_number, None)
            if instructor_id is not None:
                self._discard(self._assignments, instructor_id, reference_number)
            for instructor_id in list(self._assignments):
                self._discard(self._assignments, instructor_id, reference_number)
            self._sections.pop(reference_number, None)
            logger.debug("Forgot section %s", reference_number)

    # Enrollment

    def is_enrolled(self, student: 'Student', section: 'Section') -> bool:
        with self._lock:
            return student.id in self._rosters.get(section.reference_number, [])

    def enroll(self, student: 'Student', section: 'Section') -> None:
        with self._lock:
            self._require_section(section)
            self.register_account(student)
            roster = self._rosters[section.reference_number]
            if student.id not in roster:
                roster.append(student.id)
            schedule = self._enrollments.setdefault(student.id, [])
            if section.reference_number not in schedule:
                schedule.append(section.reference_number)

    def drop(self, student: 'Student', section: 'Section') -> None:
        with self._lock:
            self._discard(self._rosters, section.reference_number, student.id)
            self._discard(self._enrollments, student.id, section.reference_number)

    def roster(self, section: 'Section') -> List['Student']:
        """Students enrolled in ``section``, in enrollment order."""
        with self._lock:
            return [self._accounts[student_id]
                    for student_id in self._rosters.get(section.reference_number, [])]

    def enrolled_count(self, section: 'Section') -> int:
        with self._lock:
            return len(self._rosters.get(section.reference_number, []))

    def enrollments(self, student: 'Student') -> List['Section']:
        """Sections ``student`` is enrolled in, in enrollment order."""
        with self._lock:
            return [self._sections[reference_number]
                    for reference_number in self._enrollments.get(student.id, [])]

    # Teaching assignment

    def instructor_of(self, section: 'Section') -> Optional['Instructor']:
        with self._lock:
            instructor_id = self._instructors.get(section.reference_number)
            if instructor_id is None:
                return None
            return self._accounts.get(instructor_id)

    def set_instructor(self, section: 'Section', instructor: Optional['Instructor']) -> None:
        """Point the section side of the assignment at ``instructor``."""
        with self._lock:
            if instructor is None:
                self._instructors.pop(section.reference_number, None)
                return
            self._require_section(section)
            self.register_account(instructor)
            self._instructors[section.reference_number] = instructor.id

    def is_assigned(self, instructor: 'Instructor', section: 'Section') -> bool:
        """Whether ``section`` is on the instructor side of the assignment."""
        with self._lock:
            return section.reference_number in self._assignments.get(instructor.id, [])

    def add_assignment(self, instructor: 'Instructor', section: 'Section') -> None:
        with self._lock:
            self._require_section(section)
            self.register_account(instructor)
            assigned = self._assignments.setdefault(instructor.id, [])
            if section.reference_number not in assigned:
                assigned.append(section.reference_number)

    def remove_assignment(self, instructor: 'Instructor', section: 'Section') -> None:
        with self._lock:
            self._discard(self._assignments, instructor.id, section.reference_number)

    def assignments(self, instructor: 'Instructor') -> List['Section']:
        with self._lock:
            return [self._sections[reference_number]
                    for reference_number in self._assignments.get(instructor.id, [])]

    def _require_section(self, section: 'Section') -> None:
        if not self.holds(section):
            raise ValidationError(
                f"Section {section.reference_number} has been removed",
                details={'reference_number': section.reference_number},
            )

    @staticmethod
    def _discard(index: Dict[str, List[str]], key: str, value: str) -> None:
        values = index.get(key)
        if values is None:
            return
        if value in values:
            values.remove(value)
        if not values:
            del index[key]
