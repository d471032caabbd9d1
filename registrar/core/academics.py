"""
Courses and their scheduled sections.
"""

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from ..logging import get_logger
from .abstract_entity import AbstractEntity
from .enums import ResultKind
from .exceptions import ValidationError
from .ledger import RosterLedger
from .results import OperationResult
from .sequences import Sequence
from .timeslot import TimeSlot

if TYPE_CHECKING:
    from .people import Instructor, Student

logger = get_logger("core.academics")

DEFAULT_SECTION_NUMBER_WIDTH = 3


class Course(AbstractEntity):
    """Catalog entry owning an ordered collection of sections.

    A course can only open sections once a catalog has attached it, since
    section reference numbers are unique across the whole catalog.
    """

    def __init__(self, course_id: str, name: str, description: str = "",
                 credits: int = 0, section_number_width: int = DEFAULT_SECTION_NUMBER_WIDTH):
        if not course_id or not str(course_id).strip():
            raise ValidationError("Course id cannot be empty")
        if not name or not str(name).strip():
            raise ValidationError("Course name cannot be empty")
        if isinstance(credits, bool) or not isinstance(credits, int) or credits < 0:
            raise ValidationError("Credits must be a non-negative integer", details={'credits': credits})
        super().__init__(str(course_id).strip())
        self._name = str(name).strip()
        self._description = description or ""
        self._credits = credits
        self._sections: List['Section'] = []
        self._section_numbers = Sequence(0, width=section_number_width)
        self._ledger: Optional[RosterLedger] = None
        self._reference_numbers: Optional[Sequence] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def sections(self) -> List['Section']:
        return list(self._sections)

    @property
    def is_attached(self) -> bool:
        return self._ledger is not None

    def attach(self, ledger: RosterLedger, reference_numbers: Sequence) -> None:
        """Bind the course to a catalog's ledger and reference numbers."""
        self._ledger = ledger
        self._reference_numbers = reference_numbers

    def detach(self) -> None:
        self._ledger = None
        self._reference_numbers = None

    def create_section(self, time_slots: Iterable[TimeSlot], capacity: int) -> 'Section':
        """Create and add a section with the next section number.

        The slots are not checked against each other.
        """
        if not self.is_attached:
            raise ValidationError(
                f"Course {self.id} must be added to a catalog before creating sections",
                details={'course_id': self.id},
            )
        with self._ledger.lock:
            section = Section(
                course=self,
                section_number=self._section_numbers.next_formatted(),
                reference_number=self._reference_numbers.next_formatted(),
                time_slots=time_slots,
                capacity=capacity,
                ledger=self._ledger,
            )
            self._sections.append(section)
            self.touch()
        logger.info("Created section %s (CRN %s) of %s", section.section_number,
                    section.reference_number, self.id)
        return section

    def owns(self, section: 'Section') -> bool:
        return any(existing is section for existing in self._sections)

    def find_section(self, section_number: str) -> Optional['Section']:
        for section in self._sections:
            if section.section_number == section_number:
                return section
        return None

    def remove_section(self, section: 'Section') -> OperationResult:
        """Delete a section, dropping its students and unassigning its instructor.

        Best-effort: steps already taken stay committed if a later one fails.
        """
        if not self.owns(section):
            return OperationResult.fail(
                ResultKind.NOT_FOUND,
                f"Section {getattr(section, 'reference_number', section)} does not belong to {self.id}",
            )
        with self._ledger.lock:
            for student in section.roster:
                section.drop(student)
            instructor = section.instructor
            if instructor is not None:
                instructor.remove_course_assignment(section)
            self._sections.remove(section)
            self._ledger.forget_section(section)
            self.touch()
        logger.info("Removed section %s (CRN %s) from %s", section.section_number,
                    section.reference_number, self.id)
        return OperationResult.ok(f"Section {section.section_number} removed from {self.id}", value=section)

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'description': self._description,
            'credits': self._credits,
            'sections': [section.reference_number for section in self._sections],
        })
        return base_dict


class Section(AbstractEntity):
    """One scheduled offering of a course.

    The entity id is the catalog-wide reference number (CRN). Roster and
    instructor are read from the shared ledger.
    """

    def __init__(self, course: Course, section_number: str, reference_number: str,
                 time_slots: Iterable[TimeSlot], capacity: int, ledger: RosterLedger):
        slots: Tuple[TimeSlot, ...] = tuple(time_slots)
        if not slots:
            raise ValidationError("A section needs at least one time slot")
        if not all(isinstance(slot, TimeSlot) for slot in slots):
            raise ValidationError("Time slots must be TimeSlot instances")
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValidationError("Capacity must be a positive integer", details={'capacity': capacity})
        super().__init__(reference_number)
        self._course = course
        self._section_number = section_number
        self._time_slots = slots
        self._capacity = capacity
        self._ledger = ledger
        ledger.register_section(self)

    @property
    def reference_number(self) -> str:
        return self._id

    @property
    def section_number(self) -> str:
        return self._section_number

    @property
    def course(self) -> Course:
        return self._course

    @property
    def time_slots(self) -> Tuple[TimeSlot, ...]:
        return self._time_slots

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def roster(self) -> List['Student']:
        return self._ledger.roster(self)

    @property
    def instructor(self) -> Optional['Instructor']:
        return self._ledger.instructor_of(self)

    @property
    def label(self) -> str:
        return f"{self._course.id}-{self._section_number}"

    @property
    def size(self) -> str:
        return f"{self.enrolled_count()}/{self._capacity}"

    @property
    def is_active(self) -> bool:
        """False once the section has been removed from its course."""
        return self._ledger.holds(self)

    def _removed(self) -> OperationResult:
        return OperationResult.fail(
            ResultKind.NOT_FOUND,
            f"Section {self.label} (CRN {self.reference_number}) has been removed",
            reference_number=self.reference_number,
        )

    def enrolled_count(self) -> int:
        return self._ledger.enrolled_count(self)

    def is_full(self) -> bool:
        return self.enrolled_count() >= self._capacity

    def conflicts_with(self, other: 'Section') -> bool:
        """Check if any meeting of this section overlaps any meeting of ``other``."""
        return any(mine.conflicts_with(theirs)
                   for mine in self._time_slots
                   for theirs in other.time_slots)

    def enroll(self, student: 'Student') -> OperationResult:
        """Add a student to the roster; both sides of the enrollment change together."""
        with self._ledger.lock:
            if not self.is_active:
                return self._removed()
            if self._ledger.is_enrolled(student, self):
                logger.info("%s already enrolled in %s", student.id, self.label)
                return OperationResult.fail(
                    ResultKind.ALREADY_ENROLLED,
                    f"{student.name} is already enrolled in {self.label}",
                    reference_number=self.reference_number,
                )
            if self.is_full():
                logger.info("Section %s at capacity, rejected %s", self.label, student.id)
                return OperationResult.fail(
                    ResultKind.CAPACITY_EXCEEDED,
                    "This section is at capacity",
                    reference_number=self.reference_number,
                    capacity=self._capacity,
                )
            self._ledger.enroll(student, self)
            self.touch()
        logger.info("Enrolled %s in %s (%s)", student.id, self.label, self.size)
        return OperationResult.ok(f"{student.name} enrolled in {self.label}", value=self)

    def drop(self, student: 'Student') -> OperationResult:
        with self._ledger.lock:
            if not self._ledger.is_enrolled(student, self):
                return OperationResult.fail(
                    ResultKind.NOT_ENROLLED,
                    f"{student.name} is not enrolled in {self.label}",
                    reference_number=self.reference_number,
                )
            self._ledger.drop(student, self)
            self.touch()
        logger.info("Dropped %s from %s", student.id, self.label)
        return OperationResult.ok(f"{student.name} removed from {self._course.name} Section: {self._section_number}",
                                  value=self)

    def assign_instructor(self, instructor: Optional['Instructor']) -> OperationResult:
        """Hand the section to ``instructor``; ``None`` leaves it unassigned.

        Giving the section to the instructor who already holds it reports
        ``ALREADY_ASSIGNED`` and changes nothing.
        """
        with self._ledger.lock:
            current = self.instructor
            if instructor is None:
                if current is not None:
                    self._ledger.remove_assignment(current, self)
                self._ledger.set_instructor(self, None)
                self.touch()
                logger.info("Unassigned instructor from %s", self.label)
                return OperationResult.ok(f"{self.label} has no instructor", value=self)
            if not self.is_active:
                return self._removed()
            if current is instructor:
                return OperationResult.fail(
                    ResultKind.ALREADY_ASSIGNED,
                    "Instructor already assigned to this course",
                    reference_number=self.reference_number,
                )
            self._ledger.set_instructor(self, instructor)
            if current is not None:
                self._ledger.remove_assignment(current, self)
            if not self._ledger.is_assigned(instructor, self):
                self._ledger.add_assignment(instructor, self)
            self.touch()
        logger.info("Assigned %s to %s", instructor.id, self.label)
        return OperationResult.ok(f"{instructor.name} assigned to {self.label}", value=self)

    def to_dict(self) -> Dict[str, Any]:
        instructor = self.instructor
        base_dict = super().to_dict()
        base_dict.update({
            'course_id': self._course.id,
            'section_number': self._section_number,
            'time_slots': [str(slot) for slot in self._time_slots],
            'capacity': self._capacity,
            'enrolled': [student.id for student in self.roster],
            'instructor_id': instructor.id if instructor else None,
        })
        return base_dict
