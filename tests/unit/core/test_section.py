"""Unit tests for Section."""

import pytest

from registrar.core import Course, Instructor, ResultKind, Student, TimeSlot, ValidationError


@pytest.fixture
def section(course: Course, monday_morning: TimeSlot):
    return course.create_section([monday_morning], 2)


@pytest.mark.unit
class TestSectionCreation:
    """Sections get per-course section numbers and catalog-wide CRNs."""

    def test_first_section_numbers(self, section) -> None:
        assert section.section_number == "001"
        assert section.reference_number == "10001"
        assert section.capacity == 2
        assert section.enrolled_count() == 0
        assert section.instructor is None

    def test_reference_numbers_are_catalog_wide(self, course: Course, other_course: Course,
                                                monday_morning: TimeSlot) -> None:
        first = course.create_section([monday_morning], 10)
        second = course.create_section([monday_morning], 10)
        third = other_course.create_section([monday_morning], 10)

        assert [first.section_number, second.section_number, third.section_number] == ["001", "002", "001"]
        assert [first.reference_number, second.reference_number, third.reference_number] == [
            "10001", "10002", "10003"]

    def test_reference_numbers_never_reused(self, course: Course, monday_morning: TimeSlot) -> None:
        first = course.create_section([monday_morning], 10)
        course.remove_section(first)

        replacement = course.create_section([monday_morning], 10)

        assert replacement.reference_number != first.reference_number
        assert replacement.section_number == "002"

    @pytest.mark.parametrize("capacity", [0, -1, 2.5, True])
    def test_capacity_must_be_positive_integer(self, course: Course, monday_morning: TimeSlot,
                                               capacity) -> None:
        with pytest.raises(ValidationError):
            course.create_section([monday_morning], capacity)

    def test_needs_at_least_one_slot(self, course: Course) -> None:
        with pytest.raises(ValidationError):
            course.create_section([], 10)

    def test_self_conflicting_slots_are_accepted(self, course: Course, monday_morning: TimeSlot) -> None:
        section = course.create_section([monday_morning, monday_morning], 10)

        assert len(section.time_slots) == 2


@pytest.mark.unit
class TestSectionEnrollment:
    """Capacity-bounded enrollment with duplicate prevention."""

    def test_enroll_updates_both_sides(self, section, student: Student) -> None:
        result = section.enroll(student)

        assert result.success
        assert result.kind is ResultKind.OK
        assert section.roster == [student]
        assert student.sections == [section]
        assert section.size == "1/2"

    def test_enrolling_twice_reports_already_enrolled(self, section, student: Student) -> None:
        section.enroll(student)

        result = section.enroll(student)

        assert not result
        assert result.kind is ResultKind.ALREADY_ENROLLED
        assert section.enrolled_count() == 1

    def test_full_section_rejects(self, section, registry, student: Student, other_student: Student) -> None:
        third = registry.create_student("Mary Major").value
        section.enroll(student)
        section.enroll(other_student)

        result = section.enroll(third)

        assert result.kind is ResultKind.CAPACITY_EXCEEDED
        assert section.is_full()
        assert section.enrolled_count() == 2
        assert third.sections == []

    def test_drop_updates_both_sides(self, section, student: Student) -> None:
        section.enroll(student)

        result = section.drop(student)

        assert result.success
        assert section.roster == []
        assert student.sections == []

    def test_drop_absent_student_reports_not_enrolled(self, section, student: Student,
                                                      other_student: Student) -> None:
        section.enroll(other_student)

        result = section.drop(student)

        assert result.kind is ResultKind.NOT_ENROLLED
        assert section.roster == [other_student]

    def test_roster_keeps_enrollment_order(self, section, student: Student, other_student: Student) -> None:
        section.enroll(other_student)
        section.enroll(student)

        assert section.roster == [other_student, student]


@pytest.mark.unit
class TestInstructorAssignment:
    """The section and instructor sides of an assignment stay in step."""

    def test_assign_sets_both_sides(self, section, instructor: Instructor) -> None:
        result = section.assign_instructor(instructor)

        assert result.success
        assert section.instructor is instructor
        assert instructor.assigned_sections == [section]

    def test_assign_then_unassign_round_trip(self, section, instructor: Instructor) -> None:
        section.assign_instructor(instructor)

        result = section.assign_instructor(None)

        assert result.success
        assert section.instructor is None
        assert instructor.assigned_sections == []

    def test_reassign_moves_section(self, section, instructor: Instructor,
                                    other_instructor: Instructor) -> None:
        section.assign_instructor(instructor)

        section.assign_instructor(other_instructor)

        assert section.instructor is other_instructor
        assert instructor.assigned_sections == []
        assert other_instructor.assigned_sections == [section]

    def test_reassigning_same_instructor_reports_already_assigned(self, section,
                                                                  instructor: Instructor) -> None:
        section.assign_instructor(instructor)

        result = section.assign_instructor(instructor)

        assert result.kind is ResultKind.ALREADY_ASSIGNED
        assert section.instructor is instructor
        assert instructor.assigned_sections == [section]

    def test_unassign_without_instructor_is_valid(self, section) -> None:
        assert section.assign_instructor(None).success
        assert section.instructor is None

    def test_assign_after_instructor_side_recorded(self, section, instructor: Instructor) -> None:
        instructor.assign_course(section)

        result = section.assign_instructor(instructor)

        assert result.success
        assert section.instructor is instructor
        assert instructor.assigned_sections == [section]

    def test_reassign_to_instructor_already_listing_section(self, section, instructor: Instructor,
                                                            other_instructor: Instructor) -> None:
        section.assign_instructor(instructor)
        other_instructor.assign_course(section)

        result = section.assign_instructor(other_instructor)

        assert result.success
        assert section.instructor is other_instructor
        assert instructor.assigned_sections == []
        assert other_instructor.assigned_sections == [section]


@pytest.mark.unit
class TestRemovedSection:
    """A section removed from its course takes no further enrollments or instructors."""

    @pytest.fixture
    def removed(self, course: Course, section):
        course.remove_section(section)
        return section

    def test_is_inactive(self, removed) -> None:
        assert not removed.is_active

    def test_enroll_reports_not_found(self, removed, student: Student) -> None:
        result = removed.enroll(student)

        assert result.kind is ResultKind.NOT_FOUND
        assert removed.roster == []
        assert student.sections == []

    def test_student_enroll_reports_not_found(self, removed, student: Student) -> None:
        assert student.enroll(removed).kind is ResultKind.NOT_FOUND
        assert student.sections == []

    def test_assign_instructor_reports_not_found(self, removed, instructor: Instructor) -> None:
        result = removed.assign_instructor(instructor)

        assert result.kind is ResultKind.NOT_FOUND
        assert removed.instructor is None
        assert instructor.assigned_sections == []

    def test_instructor_assign_course_reports_not_found(self, removed, instructor: Instructor) -> None:
        assert instructor.assign_course(removed).kind is ResultKind.NOT_FOUND
        assert instructor.assigned_sections == []


@pytest.mark.unit
class TestSectionConflicts:
    def test_sections_conflict_when_any_slot_pair_conflicts(self, course: Course, other_course: Course,
                                                            monday_morning: TimeSlot,
                                                            tuesday_morning: TimeSlot) -> None:
        first = course.create_section([tuesday_morning, monday_morning], 10)
        second = other_course.create_section([TimeSlot.of("monday", "10:15", "11:30")], 10)
        third = other_course.create_section([TimeSlot.of("wednesday", "09:00", "10:15")], 10)

        assert first.conflicts_with(second)
        assert not first.conflicts_with(third)
