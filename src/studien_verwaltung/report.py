"""
Suche und Berichte

Der ReportService liest nur aus dem Catalog und ändert nichts.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import List

from .domain import Catalog, Course, Student
from .result import ErrorKind, Result


@dataclass(slots=True)
class GpaBucket:
    """
    Eine Zeile der GPA-Verteilung.
    Bereich ist [lower, lower + 1).
    """
    lower: int
    count: int

    @property
    def upper(self) -> int:
        return self.lower + 1

    def __str__(self) -> str:
        return f"GPA-Bereich {self.lower}-{self.upper}: {self.count} Studenten"


class ReportService:
    """Suche über Studenten/Kurse und GPA-Bericht."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def search_students(self, query: str) -> List[Student]:
        """Teilstring-Suche (Groß/Klein egal) in ID, Registrierungsnummer und Name."""
        q = query.lower()
        return [
            s for s in self._catalog.students.values()
            if q in s.student_id.lower() or q in s.reg_no.lower() or q in s.full_name.lower()
        ]

    def search_courses(self, query: str) -> List[Course]:
        """Teilstring-Suche (Groß/Klein egal) in Code und Titel."""
        q = query.lower()
        return [
            c for c in self._catalog.courses.values()
            if q in c.code.lower() or q in c.title.lower()
        ]

    def gpa_distribution(self) -> List[GpaBucket]:
        """
        Verteilt alle Studenten auf ganzzahlige GPA-Bereiche.
        - Leere Bereiche fehlen.
        - Sortiert aufsteigend.
        """
        counts = Counter(math.floor(s.calculate_gpa()) for s in self._catalog.students.values())
        return [GpaBucket(lower=k, count=counts[k]) for k in sorted(counts)]

    def transcript(self, student_id: str) -> Result:
        """Profil eines Studenten inklusive Kurse und GPA. value sind die Zeilen."""
        student = self._catalog.students.get(student_id)
        if student is None:
            return Result.failure(ErrorKind.NOT_FOUND, "Student nicht gefunden.")
        return Result.success(value=student.profile_lines())
