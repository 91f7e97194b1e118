"""
Persistence layer (CSV)

Hier liegt die Speicherung in drei flachen Text-Dateien. Die Domain selbst bleibt frei von Datei-Details.
- RecordRepository: Schnittstelle (load / save)
- CsvRecordRepository: Datei-Repository für Studenten, Kurse und Einschreibungen
- CsvSerializer: Mapping zwischen Entities und CSV-Zeilen

Für eine bessere Fehlerbehandlung:
- Felder werden per csv-Modul geschrieben, Kommas in Namen bleiben erhalten.
- Fehlerhafte Zeilen werden beim Laden übersprungen, gezählt und als Warnung geloggt.
- I/O-Fehler brechen die Anwendung nicht ab.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

from .config import AppConfig
from .domain import NOT_AVAILABLE, Catalog, Course, Enrollment, Grade, Instructor, Semester, Student
from .result import ErrorKind, Result

logger = logging.getLogger(__name__)


STUDENT_HEADER = ["id", "regNo", "fullName", "email"]
COURSE_HEADER = ["code", "title", "credits", "instructorId", "semester"]
ENROLLMENT_HEADER = ["studentId", "courseCode", "grade"]

# Lehrkräfte werden nicht aus einer Datei geladen, sondern vorbelegt.
DEFAULT_INSTRUCTORS: Tuple[Instructor, ...] = (
    Instructor("I001", "Dr. Jane Doe", "jdoe@ccrm.edu"),
)


@dataclass(slots=True)
class LoadResult:
    """
    Ergebnis eines Ladevorgangs.
    - catalog: geladener (evtl. unvollständiger) Datenbestand
    - loaded/skipped: Zeilen pro Datei ("students", "courses", "enrollment")
    - errors: I/O-Fehlertexte
    """
    catalog: Catalog
    loaded: Dict[str, int] = field(default_factory=dict)
    skipped: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


class RecordRepository(Protocol):
    """
    Schnittstelle für Persistenz.
    """
    def load(self) -> LoadResult:
        """Lädt den Datenbestand."""
        ...

    def save(self, catalog: Catalog) -> Result:
        """Speichert den Datenbestand."""
        ...


class FileStorage:
    """
    Klasse für Dateihandling beim laden und speichern.
    - Nur lesen/schreiben.
    - UTF-8 wird fest genutzt.
    """

    def exists(self, pfad: Path) -> bool:
        return pfad.is_file()

    def read_text(self, pfad: Path) -> str:
        """
        Liest eine Datei als Text.
        Fehlerbehandlung:
        - FileNotFoundError, wenn Datei fehlt
        - OSError bei Leseproblemen, auch wenn die Datei kein gültiges UTF-8 ist
        """
        try:
            with open(pfad, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise OSError(f"{pfad} ist kein gültiges UTF-8 ({e.reason} bei Byte {e.start})") from e

    def write_text(self, pfad: Path, content: str) -> None:
        """
        Schreibt Text in eine Datei. Eine vorhandene Datei wird überschrieben.
        """
        with open(pfad, "w", encoding="utf-8", newline="") as f:
            f.write(content)


class CsvSerializer:
    """
    Wandelt Entities <-> CSV-Zeilen.
    - Erste Zeile jeder Datei ist der Header.
    - Fehlende Werte: "N/A" (Instructor, Semester) bzw. leeres Feld (Note).
    - Parsing ist tolerant bei Groß/Klein, aber nicht bei der Feldanzahl.
    """

    def dumps(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
        """Baut den Dateiinhalt inklusive Header."""
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(header)
        writer.writerows(rows)
        return buf.getvalue()

    def iter_rows(self, raw: str) -> Iterator[Tuple[int, List[str]]]:
        """
        Liefert (Zeilennummer, Felder) für alle Datenzeilen.
        Header und Leerzeilen werden übersprungen.
        Die Felder bleiben roh, getrimmt wird erst beim Mapping.
        """
        reader = csv.reader(io.StringIO(raw))
        for i, row in enumerate(reader):
            if i == 0:
                continue
            if not any(part.strip() for part in row):
                continue
            yield reader.line_num, row

    def student_to_row(self, s: Student) -> List[str]:
        return [s.student_id, s.reg_no, s.full_name, s.email]

    def course_to_row(self, c: Course) -> List[str]:
        instructor_id = c.instructor.instructor_id if c.instructor else NOT_AVAILABLE
        semester = c.semester.name if c.semester else NOT_AVAILABLE
        return [c.code, c.title, str(c.credits), instructor_id, semester]

    def enrollment_to_row(self, s: Student, e: Enrollment) -> List[str]:
        grade = e.grade.name if e.grade else ""
        return [s.student_id, e.course_code, grade]

    def _expect_fields(self, row: List[str], count: int) -> None:
        if len(row) != count:
            raise ValueError(f"{count} Felder erwartet, aber {len(row)} gefunden")

    def student_from_row(self, row: List[str]) -> Student:
        """Mapping für Student. ValueError bei falscher Feldanzahl."""
        self._expect_fields(row, len(STUDENT_HEADER))
        student_id, reg_no, full_name, email = row
        student_id, reg_no, email = student_id.strip(), reg_no.strip(), email.strip()
        if not student_id or not reg_no:
            raise ValueError("id und regNo dürfen nicht leer sein")
        return Student(student_id=student_id, reg_no=reg_no, full_name=full_name, email=email)

    def course_from_row(self, row: List[str], instructors: Dict[str, Instructor]) -> Course:
        """
        Mapping für Kurs.
        - Unbekannte Instructor-ID -> kein Instructor
        - Unbekanntes Semester oder ungültige Credits -> ValueError
        """
        self._expect_fields(row, len(COURSE_HEADER))
        code, title, credits_raw, instructor_id, semester_raw = row
        code, instructor_id = code.strip(), instructor_id.strip()
        if not code:
            raise ValueError("code darf nicht leer sein")

        try:
            credits = int(credits_raw.strip())
        except ValueError:
            raise ValueError(f"ungültige Credits {credits_raw!r}") from None

        semester = parse_optional_semester(semester_raw)

        instructor = None
        if instructor_id and instructor_id != NOT_AVAILABLE:
            instructor = instructors.get(instructor_id)
            if instructor is None:
                logger.warning("Kurs %s: unbekannte Instructor-ID %r, Kurs ohne Instructor geladen",
                               code, instructor_id)

        return Course(code=code, title=title, credits=credits, semester=semester, instructor=instructor)

    def enrollment_from_row(self, row: List[str]) -> Tuple[str, str, Optional[Grade]]:
        """Mapping für Einschreibung: (studentId, courseCode, Note oder None)."""
        self._expect_fields(row, len(ENROLLMENT_HEADER))
        student_id, course_code, grade_raw = (part.strip() for part in row)
        grade = None
        if grade_raw:
            grade = Grade.parse(grade_raw)
            if grade is None:
                raise ValueError(f"unbekannte Note {grade_raw!r}")
        return student_id, course_code, grade


def parse_optional_semester(raw: str) -> Optional[Semester]:
    """
    Leer oder "N/A" bedeutet: kein Semester.
    Alles andere muss ein gültiges Semester sein.
    """
    if not raw or raw.strip().upper() == NOT_AVAILABLE:
        return None
    semester = Semester.parse(raw)
    if semester is None:
        raise ValueError(f"unbekanntes Semester {raw!r}")
    return semester


class CsvRecordRepository:
    """
    Repository für die drei CSV-Dateien.
    - FileStorage für Datei-Zugriff
    - CsvSerializer für Mapping

    Ladereihenfolge: Studenten, Kurse, Einschreibungen.
    Einschreibungen verweisen per ID auf Studenten und Kurse.
    """

    def __init__(
        self,
        config: AppConfig,
        storage: Optional[FileStorage] = None,
        serializer: Optional[CsvSerializer] = None,
        instructors: Sequence[Instructor] = DEFAULT_INSTRUCTORS,
    ) -> None:
        self._config = config
        self._storage = storage or FileStorage()
        self._serializer = serializer or CsvSerializer()
        self._instructors = tuple(instructors)

    def load(self) -> LoadResult:
        """
        Lädt alle Dateien und baut die Domain-Objekte.
        Eine fehlende Datei gilt als leer.
        """
        catalog = Catalog()
        for instructor in self._instructors:
            catalog.add_instructor(instructor)

        result = LoadResult(catalog=catalog)
        self._load_file(result, "students", self._config.students_path, self._apply_student)
        self._load_file(result, "courses", self._config.courses_path, self._apply_course)
        self._load_file(result, "enrollment", self._config.enrollment_path, self._apply_enrollment)

        logger.info(
            "Daten geladen: %d Studenten, %d Kurse, %d Einschreibungen (%d Zeilen übersprungen)",
            len(catalog.students),
            len(catalog.courses),
            result.loaded.get("enrollment", 0),
            result.total_skipped,
        )
        return result

    def _load_file(
        self,
        result: LoadResult,
        name: str,
        pfad: Path,
        apply: Callable[[Catalog, List[str]], None],
    ) -> None:
        """
        Liest eine Datei und wendet jede Zeile an.
        - Fehlerhafte Zeilen: Warnung + Zähler
        - I/O-Fehler: Fehler-Log, der Rest bleibt erhalten
        """
        result.loaded[name] = 0
        result.skipped[name] = 0

        if not self._storage.exists(pfad):
            logger.info("Datei %s nicht gefunden, wird als leer behandelt", pfad)
            return

        try:
            raw = self._storage.read_text(pfad)
            for line_no, row in self._serializer.iter_rows(raw):
                try:
                    apply(result.catalog, row)
                except ValueError as e:
                    result.skipped[name] += 1
                    logger.warning("%s Zeile %d übersprungen: %s", pfad.name, line_no, e)
                else:
                    result.loaded[name] += 1
        except (OSError, csv.Error) as e:
            message = f"Laden von {pfad} fehlgeschlagen: {e}"
            logger.error(message)
            result.errors.append(message)

    def _apply_student(self, catalog: Catalog, row: List[str]) -> None:
        student = self._serializer.student_from_row(row)
        if student.student_id in catalog.students:
            raise ValueError(f"doppelte Studenten-ID {student.student_id!r}")
        if any(s.reg_no == student.reg_no for s in catalog.students.values()):
            raise ValueError(f"doppelte Registrierungsnummer {student.reg_no!r}")
        catalog.students[student.student_id] = student

    def _apply_course(self, catalog: Catalog, row: List[str]) -> None:
        course = self._serializer.course_from_row(row, catalog.instructors)
        if course.code in catalog.courses:
            raise ValueError(f"doppelter Kurscode {course.code!r}")
        catalog.courses[course.code] = course

    def _apply_enrollment(self, catalog: Catalog, row: List[str]) -> None:
        student_id, course_code, grade = self._serializer.enrollment_from_row(row)
        student = catalog.students.get(student_id)
        if student is None:
            raise ValueError(f"unbekannter Student {student_id!r}")
        course = catalog.courses.get(course_code)
        if course is None:
            raise ValueError(f"unbekannter Kurs {course_code!r}")
        if student.find_enrollment(course_code) is not None:
            raise ValueError(f"doppelte Einschreibung {student_id}/{course_code}")
        student.enrollments.append(Enrollment(course=course, grade=grade))

    def save(self, catalog: Catalog) -> Result:
        """
        Serialisiert und schreibt alle drei Dateien.
        Reihenfolge: Studenten, Kurse, Einschreibungen.
        Es gibt keine Atomarität über die Dateien.
        """
        s = self._serializer
        try:
            self._config.ensure_data_dir()

            self._storage.write_text(
                self._config.students_path,
                s.dumps(STUDENT_HEADER, [s.student_to_row(x) for x in catalog.students.values()]),
            )
            self._storage.write_text(
                self._config.courses_path,
                s.dumps(COURSE_HEADER, [s.course_to_row(c) for c in catalog.courses.values()]),
            )
            self._storage.write_text(
                self._config.enrollment_path,
                s.dumps(ENROLLMENT_HEADER, [s.enrollment_to_row(st, e) for st, e in catalog.all_enrollments()]),
            )
        except OSError as e:
            logger.error("Speichern fehlgeschlagen: %s", e)
            return Result.failure(ErrorKind.IO_FAILURE, f"FEHLER beim Speichern: {e}")

        logger.info("Daten gespeichert nach %s", self._config.data_dir)
        return Result.success("Daten erfolgreich gespeichert.")
