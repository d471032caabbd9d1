"""
Course catalog service.
"""

import threading
from typing import Iterable, List, Optional, Union

from ..config import RegistrarSettings
from ..core.academics import Course, Section
from ..core.enums import ResultKind
from ..core.ledger import RosterLedger
from ..core.results import OperationResult
from ..core.sequences import Sequence
from ..core.timeslot import TimeSlot
from ..logging import get_logger

logger = get_logger("services.catalog")


class Catalog:
    """Store of courses and, through them, every section.

    Course ids and names are unique here, and section reference numbers are
    drawn from one catalog-wide sequence.
    """

    def __init__(self, ledger: RosterLedger, settings: Optional[RegistrarSettings] = None):
        self._settings = settings or RegistrarSettings()
        self._ledger = ledger
        self._reference_numbers = Sequence(
            self._settings.reference_number_base,
            width=self._settings.reference_number_width,
        )
        self._courses: List[Course] = []
        self._lock = threading.RLock()

    @property
    def ledger(self) -> RosterLedger:
        return self._ledger

    @property
    def courses(self) -> List[Course]:
        with self._lock:
            return list(self._courses)

    def add_course(self, course: Course) -> OperationResult:
        """Add a course; ids and names must both be unused."""
        with self._lock:
            for existing in self._courses:
                if existing.id == course.id:
                    return OperationResult.fail(
                        ResultKind.DUPLICATE_ID, f"Course ID {course.id} already exists", course_id=course.id)
                if existing.name == course.name:
                    return OperationResult.fail(
                        ResultKind.DUPLICATE_NAME, f"Course name {course.name} already exists", name=course.name)
            course.attach(self._ledger, self._reference_numbers)
            self._courses.append(course)
        logger.info("Added course %s (%s)", course.id, course.name)
        return OperationResult.ok(f"Course {course.id} created.", value=course)

    def create_course(self, course_id: str, name: str, description: str = "",
                      credits: int = 0) -> OperationResult:
        course = Course(course_id, name, description, credits,
                        section_number_width=self._settings.section_number_width)
        return self.add_course(course)

    def remove_course(self, course: Union[Course, str]) -> OperationResult:
        """Remove a course and cascade into all of its sections."""
        with self._lock:
            target = self._resolve_course(course)
            if target is None:
                return OperationResult.fail(ResultKind.NOT_FOUND, "Course does not exist")
            for section in target.sections:
                target.remove_section(section)
            self._courses.remove(target)
            target.detach()
        logger.info("Deleted course %s and its sections", target.id)
        return OperationResult.ok(f"{target.id} and its sections deleted successfully", value=target)

    def create_section(self, course: Union[Course, str], time_slots: Iterable[TimeSlot],
                       capacity: int) -> OperationResult:
        with self._lock:
            target = self._resolve_course(course)
            if target is None:
                return OperationResult.fail(ResultKind.NOT_FOUND, f"No course {getattr(course, 'id', course)}")
            section = target.create_section(time_slots, capacity)
        return OperationResult.ok("Course section created successfully!", value=section)

    def remove_section(self, section: Union[Section, str]) -> OperationResult:
        with self._lock:
            target = section if isinstance(section, Section) else self.find_section_by_reference(section)
            if target is None or not any(course is target.course for course in self._courses):
                return OperationResult.fail(ResultKind.NOT_FOUND, f"No section {getattr(section, 'reference_number', section)}")
            return target.course.remove_section(target)

    def find_course_by_id(self, course_id: str) -> Optional[Course]:
        with self._lock:
            for course in self._courses:
                if course.id == course_id:
                    return course
            return None

    def find_section_by_reference(self, reference_number: str) -> Optional[Section]:
        with self._lock:
            for course in self._courses:
                for section in course.sections:
                    if section.reference_number == reference_number:
                        return section
            return None

    def sections(self) -> List[Section]:
        """Every section in catalog order."""
        with self._lock:
            return [section for course in self._courses for section in course.sections]

    def open_sections(self) -> List[Section]:
        return [section for section in self.sections() if not section.is_full()]

    def _resolve_course(self, course: Union[Course, str]) -> Optional[Course]:
        if isinstance(course, Course):
            return course if any(existing is course for existing in self._courses) else None
        return self.find_course_by_id(course)
