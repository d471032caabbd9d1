"""Unit tests for the Catalog service."""

import pytest

from registrar.core import Course, Instructor, ResultKind, Student, TimeSlot, ValidationError


@pytest.mark.unit
class TestAddCourse:
    def test_create_course(self, catalog) -> None:
        result = catalog.create_course("PHYS 2101", "Physics I", "Mechanics", 4)

        assert result.success
        assert result.value.is_attached
        assert catalog.courses == [result.value]

    def test_duplicate_id_rejected(self, catalog, course: Course) -> None:
        result = catalog.create_course("MATH 1241", "Calculus One", credits=3)

        assert result.kind is ResultKind.DUPLICATE_ID
        assert catalog.courses == [course]

    def test_duplicate_name_rejected(self, catalog, course: Course) -> None:
        result = catalog.create_course("MATH 1242", "Calculus I", credits=3)

        assert result.kind is ResultKind.DUPLICATE_NAME

    def test_id_checked_before_name(self, catalog, course: Course) -> None:
        assert catalog.create_course("MATH 1241", "Calculus I").kind is ResultKind.DUPLICATE_ID

    def test_add_prebuilt_course(self, catalog) -> None:
        course = Course("STAT 2122", "Statistics", credits=3)

        assert catalog.add_course(course).success
        assert catalog.find_course_by_id("STAT 2122") is course
        assert catalog.find_course_by_id("STAT 9999") is None


@pytest.mark.unit
class TestSections:
    def test_create_section_by_course_id(self, catalog, course: Course, monday_morning: TimeSlot) -> None:
        result = catalog.create_section("MATH 1241", [monday_morning], 25)

        assert result.success
        assert result.message == "Course section created successfully!"
        assert catalog.find_section_by_reference(result.value.reference_number) is result.value

    def test_create_section_for_unknown_course(self, catalog, monday_morning: TimeSlot) -> None:
        assert catalog.create_section("NOPE 0000", [monday_morning], 25).kind is ResultKind.NOT_FOUND

    def test_create_section_for_foreign_course(self, catalog, monday_morning: TimeSlot) -> None:
        stray = Course("HIST 1120", "World History", credits=3)

        assert catalog.create_section(stray, [monday_morning], 25).kind is ResultKind.NOT_FOUND

    def test_sections_listed_in_catalog_order(self, catalog, course: Course, other_course: Course,
                                              monday_morning: TimeSlot) -> None:
        first = course.create_section([monday_morning], 1)
        second = other_course.create_section([monday_morning], 1)
        third = course.create_section([monday_morning], 1)

        assert catalog.sections() == [first, third, second]

    def test_open_sections_skip_full_ones(self, catalog, course: Course, monday_morning: TimeSlot,
                                          student: Student) -> None:
        full = course.create_section([monday_morning], 1)
        open_section = course.create_section([monday_morning], 1)
        full.enroll(student)

        assert catalog.open_sections() == [open_section]

    def test_remove_section_by_reference(self, catalog, course: Course, monday_morning: TimeSlot) -> None:
        section = course.create_section([monday_morning], 10)

        assert catalog.remove_section(section.reference_number).success
        assert catalog.find_section_by_reference(section.reference_number) is None
        assert catalog.remove_section(section.reference_number).kind is ResultKind.NOT_FOUND


@pytest.mark.unit
class TestRemoveCourse:
    def test_remove_unknown_course(self, catalog) -> None:
        assert catalog.remove_course("NOPE 0000").kind is ResultKind.NOT_FOUND

    def test_remove_cascades_into_sections(self, catalog, course: Course, monday_morning: TimeSlot,
                                           tuesday_morning: TimeSlot, student: Student,
                                           instructor: Instructor) -> None:
        taught = course.create_section([monday_morning], 10)
        course.create_section([tuesday_morning], 10)
        student.enroll(taught)
        taught.assign_instructor(instructor)

        result = catalog.remove_course(course.id)

        assert result.success
        assert catalog.find_course_by_id(course.id) is None
        assert catalog.sections() == []
        assert student.sections == []
        assert instructor.assigned_sections == []

    def test_removed_course_cannot_open_sections(self, catalog, course: Course, other_course: Course,
                                                 monday_morning: TimeSlot) -> None:
        catalog.remove_course(course)

        assert not course.is_attached
        with pytest.raises(ValidationError):
            course.create_section([monday_morning], 10)
        assert other_course.create_section([monday_morning], 10).reference_number == "10001"

    def test_removed_sections_stay_closed(self, catalog, course: Course, monday_morning: TimeSlot,
                                          student: Student) -> None:
        section = course.create_section([monday_morning], 10)
        catalog.remove_course(course)

        assert student.enroll(section).kind is ResultKind.NOT_FOUND
        assert student.sections == []

    def test_course_id_reusable_after_removal(self, catalog, course: Course) -> None:
        catalog.remove_course(course)

        assert catalog.create_course("MATH 1241", "Calculus I", credits=3).success
