"""
Identities and the role records attached to them.

An ``Identity`` is the single value shared by every kind of user: id, name,
email, credential and the forced-reset flag. What a user can do lives in the
role record wrapped around it (``Student``, ``Instructor`` or ``Admin``),
chosen by ``RoleKind``.
"""

import hashlib
import hmac
from abc import ABC
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Union

from ..logging import get_logger
from .abstract_entity import AbstractEntity
from .enums import Permission, ResultKind, RoleKind, Weekday
from .exceptions import ValidationError
from .ledger import RosterLedger
from .results import OperationResult
from .timeslot import TimeSlot

if TYPE_CHECKING:
    from ..services.catalog import Catalog
    from ..services.registry import Registry
    from .academics import Course, Section

logger = get_logger("core.people")

NO_PERMISSION_MESSAGE = "You do not have permission for this action."


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


class Identity(AbstractEntity):
    """Who a user is and how they log in."""

    def __init__(self, identity_id: str, name: str, email: str, password: str,
                 role: RoleKind, needs_password_reset: bool = True):
        if not name or not name.strip():
            raise ValidationError("Name cannot be empty")
        if not email or not email.strip():
            raise ValidationError("Email cannot be empty")
        super().__init__(identity_id)
        self._name = name.strip()
        self._email = email.strip()
        self._password_hash = _hash_password(password)
        self._role = RoleKind(role)
        self._needs_password_reset = needs_password_reset

    @property
    def name(self) -> str:
        return self._name

    @property
    def first_name(self) -> str:
        return self._name.split()[0]

    @property
    def last_name(self) -> str:
        return self._name.split()[-1]

    @property
    def email(self) -> str:
        return self._email

    @property
    def role(self) -> RoleKind:
        return self._role

    @property
    def needs_password_reset(self) -> bool:
        return self._needs_password_reset

    def check_password(self, password: str) -> bool:
        return hmac.compare_digest(self._password_hash, _hash_password(password))

    def change_password(self, new_password: str) -> None:
        """Replace the credential; this is the only way the reset flag clears."""
        if not new_password:
            raise ValidationError("Password cannot be empty")
        self._password_hash = _hash_password(new_password)
        self._needs_password_reset = False
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'email': self._email,
            'role': self._role.value,
            'needs_password_reset': self._needs_password_reset,
        })
        return base_dict


class Account(ABC):
    """Role record attached to an identity."""

    role: RoleKind

    def __init__(self, identity: Identity):
        if identity.role is not self.role:
            raise ValidationError(
                f"{self.__class__.__name__} requires a {self.role.value} identity, got {identity.role.value}"
            )
        self._identity = identity

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def id(self) -> str:
        return self._identity.id

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def email(self) -> str:
        return self._identity.email

    @property
    def needs_password_reset(self) -> bool:
        return self._identity.needs_password_reset

    def to_dict(self) -> Dict[str, Any]:
        return self._identity.to_dict()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id}, email={self.email})"


class Student(Account):
    """A student: enrollment roster plus an advising hold."""

    role = RoleKind.STUDENT

    def __init__(self, identity: Identity, ledger: RosterLedger, advising_hold: bool = False):
        super().__init__(identity)
        self._ledger = ledger
        self._advising_hold = advising_hold

    @property
    def sections(self) -> List['Section']:
        """Sections this student is enrolled in, oldest first."""
        return self._ledger.enrollments(self)

    def has_advising_hold(self) -> bool:
        return self._advising_hold

    def set_advising_hold(self, advising_hold: bool) -> None:
        self._advising_hold = bool(advising_hold)
        self._identity.touch()
        logger.info("Advising hold for %s is now %s", self.id, "on" if self._advising_hold else "off")

    def enroll(self, section: 'Section') -> OperationResult:
        """Enroll in ``section`` if no hold, duplicate course or time conflict blocks it.

        The hold is checked before anything else. Existing sections are then
        scanned in enrollment order; for each one the duplicate-course check
        runs before the time-conflict check, so the first offending section
        decides which failure is reported.
        """
        if self._advising_hold:
            logger.info("Enrollment of %s blocked by advising hold", self.id)
            return OperationResult.fail(
                ResultKind.ADVISING_HOLD,
                f"There is currently an advising hold for: {self.name}",
            )
        with self._ledger.lock:
            for existing in self.sections:
                if existing.course is section.course:
                    return OperationResult.fail(
                        ResultKind.DUPLICATE_COURSE,
                        f"{self.name} is already registered for: {section.course.id}",
                        conflicting_reference_number=existing.reference_number,
                    )
                if existing.conflicts_with(section):
                    logger.info("Time conflict for %s between %s and %s", self.id, existing.label, section.label)
                    return OperationResult.fail(
                        ResultKind.TIME_CONFLICT,
                        "Cannot register due to time conflict.",
                        conflicting_reference_number=existing.reference_number,
                    )
            return section.enroll(self)

    def drop(self, section: 'Section') -> OperationResult:
        return section.drop(self)

    def total_credits(self) -> int:
        return sum(section.course.credits for section in self.sections)

    def schedule_for(self, day: Union[Weekday, int, str]) -> List[TimeSlot]:
        """Meetings on ``day`` across all enrolled sections, earliest first."""
        day = Weekday.parse(day)
        slots = [slot for section in self.sections for slot in section.time_slots if slot.day is day]
        return sorted(slots, key=lambda slot: slot.start_time)

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'advising_hold': self._advising_hold,
            'sections': [section.reference_number for section in self.sections],
        })
        return base_dict


class Instructor(Account):
    """An instructor and the sections they teach."""

    role = RoleKind.INSTRUCTOR

    def __init__(self, identity: Identity, ledger: RosterLedger):
        super().__init__(identity)
        self._ledger = ledger

    @property
    def assigned_sections(self) -> List['Section']:
        return self._ledger.assignments(self)

    def teaches(self, section: 'Section') -> bool:
        return section.instructor is self

    def assign_course(self, section: 'Section') -> OperationResult:
        """Record ``section`` on this instructor's side only.

        The section's own instructor is left as it is; use
        ``Section.assign_instructor`` to change both sides.
        """
        with self._ledger.lock:
            if not section.is_active:
                return OperationResult.fail(
                    ResultKind.NOT_FOUND,
                    f"Section {section.label} has been removed",
                    reference_number=section.reference_number,
                )
            if self._ledger.is_assigned(self, section):
                return OperationResult.fail(
                    ResultKind.ALREADY_ASSIGNED,
                    "Instructor already assigned to this course",
                    reference_number=section.reference_number,
                )
            self._ledger.add_assignment(self, section)
        return OperationResult.ok(f"{self.name} assigned to {section.label}", value=section)

    def remove_course_assignment(self, section: 'Section') -> OperationResult:
        with self._ledger.lock:
            if not self.teaches(section):
                return OperationResult.fail(
                    ResultKind.NOT_ASSIGNED,
                    f"{self.name} is not assigned to {section.label}",
                    reference_number=section.reference_number,
                )
            section.assign_instructor(None)
            self._ledger.remove_assignment(self, section)
        logger.info("Removed %s from %s", self.id, section.label)
        return OperationResult.ok(f"Unassigned {self.name} from {section.label}", value=section)

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict['sections'] = [section.reference_number for section in self.assigned_sections]
        return base_dict


class Admin(Account):
    """An administrator whose actions are gated by a permission set.

    Every gated operation checks the required permission first. Without it
    the call reports ``PERMISSION_DENIED`` and changes nothing; with it the
    call is forwarded to the catalog or registry and their result is
    returned unchanged.
    """

    role = RoleKind.ADMIN

    def __init__(self, identity: Identity, permissions: Optional[Iterable[Union[Permission, str]]] = None):
        super().__init__(identity)
        self._permissions: Set[Permission] = set()
        for permission in permissions or ():
            self.add_permission(permission)

    @property
    def permissions(self) -> List[Permission]:
        return [permission for permission in Permission if permission in self._permissions]

    def has_permission(self, permission: Union[Permission, str]) -> bool:
        try:
            return Permission.lookup(permission) in self._permissions
        except ValueError:
            return False

    def add_permission(self, permission: Union[Permission, str]) -> None:
        self._permissions.add(self._resolve(permission))
        self._identity.touch()

    def revoke_permission(self, permission: Union[Permission, str]) -> None:
        self._permissions.discard(self._resolve(permission))
        self._identity.touch()

    def grant_all_permissions(self) -> None:
        self._permissions = set(Permission)
        self._identity.touch()

    @staticmethod
    def _resolve(permission: Union[Permission, str]) -> Permission:
        try:
            return Permission.lookup(permission)
        except ValueError:
            raise ValidationError(
                f"Unknown permission {permission!r}; expected one of {', '.join(Permission.names())}",
                details={'permission': permission},
            )

    def _denied(self, permission: Permission, action: str) -> Optional[OperationResult]:
        if permission in self._permissions:
            return None
        logger.info("Admin %s denied %s (requires %s)", self.id, action, permission.value)
        return OperationResult.fail(
            ResultKind.PERMISSION_DENIED,
            NO_PERMISSION_MESSAGE,
            permission=permission.value,
            action=action,
        )

    # Course management

    def create_course(self, catalog: 'Catalog', course_id: str, name: str,
                      description: str = "", credits: int = 0) -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "create_course")
        if denied is not None:
            return denied
        return catalog.create_course(course_id, name, description, credits)

    def create_course_section(self, catalog: 'Catalog', course: Union['Course', str],
                              time_slots: Iterable[TimeSlot], capacity: int) -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "create_course_section")
        if denied is not None:
            return denied
        return catalog.create_section(course, time_slots, capacity)

    def remove_course(self, catalog: 'Catalog', course: Union['Course', str]) -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "remove_course")
        if denied is not None:
            return denied
        return catalog.remove_course(course)

    def remove_course_section(self, catalog: 'Catalog', section: Union['Section', str]) -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "remove_course_section")
        if denied is not None:
            return denied
        return catalog.remove_section(section)

    def assign_instructor(self, section: 'Section', instructor: Instructor) -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "assign_instructor")
        if denied is not None:
            return denied
        return section.assign_instructor(instructor)

    def unassign_instructor(self, section: 'Section') -> OperationResult:
        denied = self._denied(Permission.COURSE_MANAGEMENT, "unassign_instructor")
        if denied is not None:
            return denied
        instructor = section.instructor
        if instructor is None:
            return OperationResult.fail(ResultKind.NOT_ASSIGNED, f"{section.label} has no instructor")
        return instructor.remove_course_assignment(section)

    # User management

    def create_student(self, registry: 'Registry', name: str, advising_hold: bool = False) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "create_student")
        if denied is not None:
            return denied
        return registry.create_student(name, advising_hold=advising_hold)

    def create_instructor(self, registry: 'Registry', name: str) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "create_instructor")
        if denied is not None:
            return denied
        return registry.create_instructor(name)

    def create_admin(self, registry: 'Registry', name: str) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "create_admin")
        if denied is not None:
            return denied
        return registry.create_admin(name)

    def remove_user(self, registry: 'Registry', account: Union[Account, str]) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "remove_user")
        if denied is not None:
            return denied
        if isinstance(account, str):
            found = registry.find_by_id_or_email(account)
            if found is None:
                return OperationResult.fail(ResultKind.NOT_FOUND, f"No user matches {account}")
            account = found
        return registry.remove_identity(account)

    def enroll_student(self, student: Student, section: 'Section') -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "enroll_student")
        if denied is not None:
            return denied
        return student.enroll(section)

    def drop_student(self, student: Student, section: 'Section') -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "drop_student")
        if denied is not None:
            return denied
        return student.drop(section)

    def set_advising_hold(self, student: Student, advising_hold: bool) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "set_advising_hold")
        if denied is not None:
            return denied
        student.set_advising_hold(advising_hold)
        return OperationResult.ok(
            f"Advising hold is now {'ON' if advising_hold else 'OFF'}.", value=student)

    def set_all_advising_holds(self, registry: 'Registry', advising_hold: bool = True) -> OperationResult:
        denied = self._denied(Permission.USER_MANAGEMENT, "set_all_advising_holds")
        if denied is not None:
            return denied
        return registry.set_all_advising_holds(advising_hold)

    # Admin management

    def grant_permission(self, target: 'Admin', permission: Union[Permission, str]) -> OperationResult:
        denied = self._denied(Permission.ADMIN_MANAGEMENT, "grant_permission")
        if denied is not None:
            return denied
        target.add_permission(permission)
        return OperationResult.ok("Permission granted.", value=target)

    def revoke_permission_from(self, target: 'Admin', permission: Union[Permission, str]) -> OperationResult:
        denied = self._denied(Permission.ADMIN_MANAGEMENT, "revoke_permission")
        if denied is not None:
            return denied
        target.revoke_permission(permission)
        return OperationResult.ok("Permission revoked.", value=target)

    def grant_all_permissions_to(self, target: 'Admin') -> OperationResult:
        denied = self._denied(Permission.ADMIN_MANAGEMENT, "grant_all_permissions")
        if denied is not None:
            return denied
        target.grant_all_permissions()
        return OperationResult.ok(f"All permissions granted to {target.name}.", value=target)

    # Read access

    def view_courses(self, catalog: 'Catalog') -> OperationResult:
        denied = self._denied(Permission.VIEW_COURSES, "view_courses")
        if denied is not None:
            return denied
        return OperationResult.ok(value=catalog.courses)

    def view_sections(self, catalog: 'Catalog') -> OperationResult:
        denied = self._denied(Permission.VIEW_COURSES, "view_sections")
        if denied is not None:
            return denied
        return OperationResult.ok(value=catalog.sections())

    def view_users(self, registry: 'Registry') -> OperationResult:
        denied = self._denied(Permission.VIEW_USERS, "view_users")
        if denied is not None:
            return denied
        return OperationResult.ok(value=registry.accounts)

    def view_admins(self, registry: 'Registry') -> OperationResult:
        denied = self._denied(Permission.VIEW_USERS, "view_admins")
        if denied is not None:
            return denied
        return OperationResult.ok(value=registry.admins())

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict['permissions'] = [permission.value for permission in self.permissions]
        return base_dict
