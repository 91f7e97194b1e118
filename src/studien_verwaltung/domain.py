"""
Domain beinhaltet die Entities + Enums

Dieses Modul enthält nur die Fachlogik.
Es enthält keine UI- oder Datei-Logik.

- Entities sind Dataclasses.
- Sie enthalten auch fachliche Methoden (Credits, GPA).
- Die GPA wird immer berechnet und nicht gespeichert.
- Fehlende Werte sind erlaubt (z.B. grade=None = noch nicht benotet).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Protocol, Tuple


NOT_AVAILABLE = "N/A"


class Semester(Enum):
    """Semester, in dem ein Kurs angeboten wird."""
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    FALL = "FALL"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Semester"]:
        """
        Parst ein Semester tolerant (Groß/Klein, Leerzeichen).
        Wenn nichts passt: None.
        """
        if raw is None:
            return None
        s = raw.strip().upper()
        if s in cls.__members__:
            return cls[s]
        return None


class Grade(Enum):
    """
    Noten mit Notenpunkten.
    Der Wert ist der Notenpunkt für die GPA-Berechnung.
    """
    S = 10
    A = 9
    B = 8
    C = 7
    D = 6
    E = 5
    F = 0

    @property
    def grade_point(self) -> int:
        return self.value

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Grade"]:
        """
        Parst eine Note aus Text.
        - Groß/Klein egal ("a" == "A")
        - Unbekannt -> None, es wird nie eine Exception geworfen.
        """
        if raw is None:
            return None
        s = raw.strip().upper()
        if s in cls.__members__:
            return cls[s]
        return None


class Profile(Protocol):
    """Gemeinsame Anzeige-Fähigkeit von Student und Instructor."""

    def profile_lines(self) -> List[str]:
        ...


@dataclass(frozen=True, slots=True)
class Instructor:
    """
    Eine Lehrkraft.
    Wird von Kursen nur referenziert, nie besessen.
    """
    instructor_id: str
    full_name: str
    email: str

    def profile_lines(self) -> List[str]:
        return [
            "--- Profil Lehrkraft ---",
            f"ID: {self.instructor_id}",
            f"Name: {self.full_name}",
            f"E-Mail: {self.email}",
        ]


@dataclass(slots=True)
class Course:
    """
    Ein Kurs.
    - credits muss positiv sein.
    - semester und instructor sind optional.
    """
    code: str
    title: str
    credits: int
    semester: Optional[Semester] = None
    instructor: Optional[Instructor] = None

    def __post_init__(self) -> None:
        """Prüft Grundregeln des Kurses."""
        if self.credits <= 0:
            raise ValueError(f"credits muss > 0 sein, ist aber {self.credits}.")

    def __str__(self) -> str:
        semester = self.semester.name if self.semester else NOT_AVAILABLE
        text = f"{self.code} | {self.title} | {self.credits} Credits | {semester}"
        if self.instructor is not None:
            text += f" | {self.instructor.full_name}"
        return text


@dataclass(slots=True)
class Enrollment:
    """
    Einschreibung eines Studenten in einen Kurs.
    Gehört dem Studenten, der Kurs ist nur eine Referenz.
    """
    course: Course
    grade: Optional[Grade] = None

    @property
    def course_code(self) -> str:
        return self.course.code

    def is_graded(self) -> bool:
        return self.grade is not None

    def __str__(self) -> str:
        grade = self.grade.name if self.grade else NOT_AVAILABLE
        return f"{self.course.code} ({self.course.title}, {self.course.credits} Credits) - Note: {grade}"


@dataclass(slots=True)
class Student:
    """
    Ein Student mit seinen Einschreibungen.
    Die Reihenfolge der Einschreibungen ist die Reihenfolge der Anmeldung.
    """
    student_id: str
    reg_no: str
    full_name: str
    email: str
    enrollments: List[Enrollment] = field(default_factory=list)

    def current_credits(self) -> int:
        """Summe der Credits aller Einschreibungen, egal ob benotet."""
        return sum(e.course.credits for e in self.enrollments)

    def find_enrollment(self, course_code: str) -> Optional[Enrollment]:
        """Liefert die Einschreibung zu einem Kurscode oder None."""
        for e in self.enrollments:
            if e.course_code == course_code:
                return e
        return None

    def calculate_gpa(self) -> float:
        """
        Gewichtete GPA über alle benoteten Einschreibungen.
        - Unbenotete zählen weder im Zähler noch im Nenner.
        - Keine Einschreibungen oder nichts benotet: 0.0
        """
        if not self.enrollments:
            return 0.0

        total_points = 0
        total_credits = 0
        for e in self.enrollments:
            if e.grade is None:
                continue
            total_points += e.grade.grade_point * e.course.credits
            total_credits += e.course.credits

        if total_credits == 0:
            return 0.0
        return total_points / total_credits

    def profile_lines(self) -> List[str]:
        lines = [
            "--- Profil Student ---",
            f"ID: {self.student_id}",
            f"Registrierungsnummer: {self.reg_no}",
            f"Name: {self.full_name}",
            f"E-Mail: {self.email}",
            f"Aktuelle Credits: {self.current_credits()}",
            f"GPA: {self.calculate_gpa():.2f}",
            "Belegte Kurse:",
        ]
        if not self.enrollments:
            lines.append("  Keine Kurse belegt.")
        else:
            lines.extend(f"  {e}" for e in self.enrollments)
        return lines


@dataclass(slots=True)
class Catalog:
    """
    Der komplette Datenbestand im Speicher.
    dicts behalten die Einfügereihenfolge, dadurch ist die Ausgabe stabil.
    """
    students: Dict[str, Student] = field(default_factory=dict)
    courses: Dict[str, Course] = field(default_factory=dict)
    instructors: Dict[str, Instructor] = field(default_factory=dict)

    def add_instructor(self, instructor: Instructor) -> None:
        self.instructors[instructor.instructor_id] = instructor

    def all_enrollments(self) -> Iterator[Tuple[Student, Enrollment]]:
        """Gibt (Student, Enrollment) für alle Einschreibungen zurück."""
        for s in self.students.values():
            for e in s.enrollments:
                yield s, e
