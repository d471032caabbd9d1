"""Shared pytest fixtures and configuration."""

import random

import pytest

from registrar.config import RegistrarSettings
from registrar.core import Admin, Course, Instructor, RosterLedger, Student, TimeSlot, Weekday
from registrar.services import Catalog, Registry


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: catalog, registry and entities working together")


# Shared fixtures


@pytest.fixture
def settings() -> RegistrarSettings:
    return RegistrarSettings()


@pytest.fixture
def ledger() -> RosterLedger:
    return RosterLedger()


@pytest.fixture
def catalog(ledger: RosterLedger, settings: RegistrarSettings) -> Catalog:
    return Catalog(ledger, settings)


@pytest.fixture
def registry(ledger: RosterLedger, settings: RegistrarSettings) -> Registry:
    """Registry with a seeded password generator."""
    return Registry(ledger, settings, rng=random.Random(1241))


@pytest.fixture
def course(catalog: Catalog) -> Course:
    return catalog.create_course("MATH 1241", "Calculus I", "Limits, derivatives, integrals", 3).value


@pytest.fixture
def other_course(catalog: Catalog) -> Course:
    return catalog.create_course("ITSC 1212", "Intro to Computer Science", "Programming in Python", 4).value


@pytest.fixture
def monday_morning() -> TimeSlot:
    return TimeSlot.of(Weekday.MONDAY, "09:00", "10:15")


@pytest.fixture
def tuesday_morning() -> TimeSlot:
    return TimeSlot.of(Weekday.TUESDAY, "09:00", "10:15")


@pytest.fixture
def student(registry: Registry) -> Student:
    return registry.create_student("Jane Doe").value


@pytest.fixture
def other_student(registry: Registry) -> Student:
    return registry.create_student("John Smith").value


@pytest.fixture
def instructor(registry: Registry) -> Instructor:
    return registry.create_instructor("Grace Hopper").value


@pytest.fixture
def other_instructor(registry: Registry) -> Instructor:
    return registry.create_instructor("Alan Turing").value


@pytest.fixture
def admin(registry: Registry) -> Admin:
    """Admin holding every permission."""
    admin = registry.create_admin("Ada Lovelace").value
    admin.grant_all_permissions()
    return admin


@pytest.fixture
def bare_admin(registry: Registry) -> Admin:
    """Admin holding no permissions."""
    return registry.create_admin("Edsger Dijkstra").value
