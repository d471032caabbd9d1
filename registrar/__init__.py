"""
Registrar: an in-memory university course-registration engine.

Models courses, sections, time-slot scheduling, student enrollment,
instructor assignment and permission-gated administrative actions over a
shared catalog of academic records.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "In-memory course registration domain engine"
