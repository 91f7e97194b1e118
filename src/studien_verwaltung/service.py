"""
Application/Use-Case layer

Die Services arbeiten nur auf dem Catalog und den Domain-Objekten.
- StudentService: Studenten anlegen, ändern, löschen
- CourseService: Kurse anlegen, ändern, löschen
- EnrollmentService: Einschreibung, Abmeldung, Noten

Fachliche Fehler werden als Result zurückgegeben, nicht geworfen.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .domain import NOT_AVAILABLE, Catalog, Course, Enrollment, Grade, Instructor, Semester, Student
from .result import ErrorKind, Result

logger = logging.getLogger(__name__)

STUDENT_ID_PATTERN = re.compile(r"^S(\d+)$")


class StudentService:
    """
    Verwaltung der Studenten.
    ID und Registrierungsnummer müssen eindeutig sein.
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def add_student(self, student_id: str, reg_no: str, full_name: str, email: str) -> Result:
        student_id = student_id.strip()
        reg_no = reg_no.strip()
        if not student_id or not reg_no:
            return Result.failure(ErrorKind.INVALID_INPUT, "ID und Registrierungsnummer dürfen nicht leer sein.")

        if student_id in self._catalog.students:
            return Result.failure(ErrorKind.DUPLICATE_RECORD, f"Student mit ID {student_id} existiert bereits.")
        if self.find_by_reg_no(reg_no) is not None:
            return Result.failure(
                ErrorKind.DUPLICATE_RECORD, f"Registrierungsnummer {reg_no} ist bereits vergeben."
            )

        student = Student(student_id=student_id, reg_no=reg_no, full_name=full_name.strip(), email=email.strip())
        self._catalog.students[student_id] = student
        logger.info("Student %s angelegt", student_id)
        return Result.success("Student erfolgreich angelegt.", student)

    def next_student_id(self) -> str:
        """
        Nächste freie ID im Format S001, S002, ...
        Es wird die höchste vorhandene Nummer + 1 genommen.
        """
        highest = 0
        for sid in self._catalog.students:
            m = STUDENT_ID_PATTERN.match(sid)
            if m:
                highest = max(highest, int(m.group(1)))
        return f"S{highest + 1:03d}"

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._catalog.students.get(student_id)

    def find_by_reg_no(self, reg_no: str) -> Optional[Student]:
        for s in self._catalog.students.values():
            if s.reg_no == reg_no:
                return s
        return None

    def list_students(self) -> List[Student]:
        return list(self._catalog.students.values())

    def update_student(self, student_id: str, full_name: str, email: str) -> Result:
        """
        Ändert Name und E-Mail.
        Das Objekt wird direkt geändert, Einschreibungen bleiben erhalten.
        """
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")

        student.full_name = full_name.strip()
        student.email = email.strip()
        return Result.success("Student erfolgreich geändert.", student)

    def delete_student(self, student_id: str) -> Result:
        """Löscht einen Studenten. Seine Einschreibungen werden mit entfernt."""
        student = self._catalog.students.pop(student_id, None)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")

        logger.info("Student %s gelöscht (%d Einschreibungen)", student_id, len(student.enrollments))
        return Result.success("Student erfolgreich gelöscht.", student)


class CourseService:
    """
    Verwaltung der Kurse.
    Der Kurscode ist eindeutig.
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def add_course(
        self,
        code: str,
        title: str,
        credits: int,
        semester_token: Optional[str],
        instructor_id: Optional[str] = None,
    ) -> Result:
        code = code.strip()
        if not code:
            return Result.failure(ErrorKind.INVALID_INPUT, "Kurscode darf nicht leer sein.")
        if code in self._catalog.courses:
            return Result.failure(ErrorKind.DUPLICATE_RECORD, f"Kurs {code} existiert bereits.")

        checked = self._check_fields(credits, semester_token, instructor_id)
        if not checked.ok:
            return checked
        semester, instructor = checked.value

        course = Course(code=code, title=title.strip(), credits=credits, semester=semester, instructor=instructor)
        self._catalog.courses[code] = course
        logger.info("Kurs %s angelegt", code)
        return Result.success("Kurs erfolgreich angelegt.", course)

    def get_course(self, code: str) -> Optional[Course]:
        return self._catalog.courses.get(code)

    def list_courses(self) -> List[Course]:
        return list(self._catalog.courses.values())

    def update_course(
        self,
        code: str,
        title: str,
        credits: int,
        instructor_id: Optional[str],
        semester_token: Optional[str],
    ) -> Result:
        """
        Ändert einen Kurs.
        Das Objekt wird direkt geändert, damit bestehende Einschreibungen
        auf denselben Kurs zeigen und die neuen Credits sehen.
        """
        course = self._catalog.courses.get(code)
        if course is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Kurs nicht gefunden.")

        checked = self._check_fields(credits, semester_token, instructor_id)
        if not checked.ok:
            return checked
        semester, instructor = checked.value

        course.title = title.strip()
        course.credits = credits
        course.semester = semester
        course.instructor = instructor
        return Result.success("Kurs erfolgreich geändert.", course)

    def delete_course(self, code: str) -> Result:
        """
        Löscht einen Kurs.
        Bestehende Einschreibungen bleiben stehen und werden beim nächsten Laden verworfen.
        """
        course = self._catalog.courses.pop(code, None)
        if course is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Kurs nicht gefunden.")

        dependent = sum(1 for _, e in self._catalog.all_enrollments() if e.course_code == code)
        if dependent:
            logger.warning("Kurs %s gelöscht, %d Einschreibungen verweisen noch darauf", code, dependent)
        return Result.success("Kurs erfolgreich gelöscht.", course)

    def _check_fields(
        self,
        credits: int,
        semester_token: Optional[str],
        instructor_id: Optional[str],
    ) -> Result:
        """
        Prüft Credits, Semester und Instructor.
        Bei Erfolg ist value = (Semester oder None, Instructor oder None).
        """
        if credits <= 0:
            return Result.failure(ErrorKind.INVALID_INPUT, f"Credits müssen > 0 sein, sind aber {credits}.")

        semester: Optional[Semester] = None
        if semester_token and semester_token.strip().upper() != NOT_AVAILABLE:
            semester = Semester.parse(semester_token)
            if semester is None:
                return Result.failure(
                    ErrorKind.INVALID_INPUT,
                    f"Unbekanntes Semester {semester_token!r} (SPRING, SUMMER, FALL).",
                )

        instructor: Optional[Instructor] = None
        if instructor_id and instructor_id.strip() and instructor_id.strip() != NOT_AVAILABLE:
            instructor = self._catalog.instructors.get(instructor_id.strip())
            if instructor is None:
                return Result.failure(ErrorKind.NOT_FOUND, f"Lehrkraft {instructor_id} nicht gefunden.")

        return Result.success(value=(semester, instructor))


class EnrollmentService:
    """
    Einschreibung und Noten.

    Regeln:
    - Keine doppelte Einschreibung in denselben Kurs.
    - Summe der Credits darf max_credits nicht überschreiten.
    """

    def __init__(self, catalog: Catalog, max_credits: int) -> None:
        self._catalog = catalog
        self._max_credits = max_credits

    @property
    def max_credits(self) -> int:
        return self._max_credits

    def enroll(self, student_id: str, course_code: str) -> Result:
        """
        Schreibt einen Studenten in einen Kurs ein.
        Reihenfolge der Prüfungen:
        1) Student und Kurs vorhanden
        2) Noch nicht eingeschrieben
        3) Credit-Limit
        """
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")
        course = self._catalog.courses.get(course_code)
        if course is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Kurs nicht gefunden.")

        if student.find_enrollment(course_code) is not None:
            return Result.failure(
                ErrorKind.DUPLICATE_ENROLLMENT, "Student ist bereits in diesem Kurs eingeschrieben."
            )

        if student.current_credits() + course.credits > self._max_credits:
            return Result.failure(
                ErrorKind.CREDIT_LIMIT_EXCEEDED,
                f"Die Einschreibung würde das Credit-Limit von {self._max_credits} überschreiten.",
            )

        enrollment = Enrollment(course=course)
        student.enrollments.append(enrollment)
        return Result.success(f"{student.full_name} in {course.title} eingeschrieben.", enrollment)

    def unenroll(self, student_id: str, course_code: str) -> Result:
        """
        Meldet einen Studenten ab.
        Es zählt nur der Kurscode, der Kurs selbst muss nicht mehr existieren.
        """
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")

        enrollment = student.find_enrollment(course_code)
        if enrollment is None:
            return Result.failure(ErrorKind.NOT_ENROLLED, "Student ist in diesem Kurs nicht eingeschrieben.")

        student.enrollments.remove(enrollment)
        return Result.success(f"{student.full_name} von {course_code} abgemeldet.", enrollment)

    def record_grade(self, student_id: str, course_code: str, grade_token: str) -> Result:
        """
        Setzt oder überschreibt eine Note.
        Bei ungültiger Note bleibt die alte Note unverändert.
        """
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")

        grade = Grade.parse(grade_token)
        if grade is None:
            return Result.failure(ErrorKind.INVALID_GRADE, "Ungültige Note. Erlaubt sind S, A, B, C, D, E oder F.")

        enrollment = student.find_enrollment(course_code)
        if enrollment is None:
            return Result.failure(ErrorKind.NOT_ENROLLED, "Student ist in diesem Kurs nicht eingeschrieben.")

        enrollment.grade = grade
        return Result.success(
            f"Note für {student.full_name} in {course_code} eingetragen: {grade.name}.", enrollment
        )

    def calculate_gpa(self, student_id: str) -> Result:
        """GPA eines Studenten per ID. value ist die GPA."""
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")
        return Result.success(value=student.calculate_gpa())
