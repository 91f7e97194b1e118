"""
Gemeinsame Fixtures für die Tests.
"""

import pytest

from studien_verwaltung.config import AppConfig
from studien_verwaltung.domain import Catalog, Instructor
from studien_verwaltung.report import ReportService
from studien_verwaltung.service import CourseService, EnrollmentService, StudentService


@pytest.fixture
def config(tmp_path):
    return AppConfig(data_dir=tmp_path / "data")


@pytest.fixture
def catalog():
    c = Catalog()
    c.add_instructor(Instructor("I001", "Dr. Jane Doe", "jdoe@ccrm.edu"))
    return c


@pytest.fixture
def students(catalog):
    return StudentService(catalog)


@pytest.fixture
def courses(catalog):
    return CourseService(catalog)


@pytest.fixture
def enrollments(catalog):
    return EnrollmentService(catalog, max_credits=20)


@pytest.fixture
def reports(catalog):
    return ReportService(catalog)


@pytest.fixture
def populated(catalog, students, courses):
    """Zwei Studenten und drei Kurse."""
    students.add_student("S101", "R2024-101", "Alice Example", "alice@example.edu")
    students.add_student("S102", "R2024-102", "Bob Builder", "bob@example.edu")
    courses.add_course("CS101", "Intro to Programming", 3, "FALL", "I001")
    courses.add_course("CS102", "Data Structures", 18, "SPRING")
    courses.add_course("MA101", "Calculus", 4, "fall")
    return catalog
