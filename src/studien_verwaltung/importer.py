"""
Import von Studenten und Kursen aus einfachen Textdateien.

Formate (eine Zeile pro Datensatz):
- Studenten: regNo,fullName,email  (ID wird vergeben)
- Kurse: code,title,credits,instructor,semester,department  (department wird ignoriert)

Eine Header-Zeile und Kommentarzeilen (#) werden ignoriert.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .persistence import FileStorage
from .result import ErrorKind, Result
from .service import CourseService, StudentService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportReport:
    """Anzahl importierter und übersprungener Zeilen."""
    imported: int = 0
    skipped: int = 0

    def __str__(self) -> str:
        return f"{self.imported} importiert, {self.skipped} übersprungen"


class Importer:
    """
    Liest Import-Dateien und legt die Datensätze über die Services an.
    Damit gelten dieselben Regeln wie bei manueller Eingabe.
    """

    def __init__(
        self,
        students: StudentService,
        courses: CourseService,
        storage: Optional[FileStorage] = None,
    ) -> None:
        self._students = students
        self._courses = courses
        self._storage = storage or FileStorage()

    def import_students(self, pfad: Path) -> Result:
        raw = self._read(pfad)
        if not raw.ok:
            return raw

        report = ImportReport()
        for line_no, row in self._rows(raw.value, header_field="regno"):
            if len(row) != 3:
                self._skip(report, pfad, line_no, f"3 Felder erwartet, aber {len(row)} gefunden")
                continue

            reg_no, full_name, email = row
            result = self._students.add_student(self._students.next_student_id(), reg_no, full_name, email)
            if result.ok:
                report.imported += 1
            else:
                self._skip(report, pfad, line_no, result.message)

        logger.info("Studenten-Import aus %s: %s", pfad, report)
        return Result.success(f"Studenten-Import: {report}", report)

    def import_courses(self, pfad: Path) -> Result:
        raw = self._read(pfad)
        if not raw.ok:
            return raw

        report = ImportReport()
        for line_no, row in self._rows(raw.value, header_field="code"):
            if len(row) != 6:
                self._skip(report, pfad, line_no, f"6 Felder erwartet, aber {len(row)} gefunden")
                continue

            code, title, credits_raw, instructor_id, semester, _department = row
            try:
                credits = int(credits_raw)
            except ValueError:
                self._skip(report, pfad, line_no, f"ungültige Credits {credits_raw!r}")
                continue

            result = self._courses.add_course(code, title, credits, semester, instructor_id or None)
            if result.ok:
                report.imported += 1
            else:
                self._skip(report, pfad, line_no, result.message)

        logger.info("Kurs-Import aus %s: %s", pfad, report)
        return Result.success(f"Kurs-Import: {report}", report)

    def _read(self, pfad: Path) -> Result:
        try:
            return Result.success(value=self._storage.read_text(pfad))
        except OSError as e:
            logger.error("Import-Datei %s nicht lesbar: %s", pfad, e)
            return Result.failure(ErrorKind.IO_FAILURE, f"Import-Datei nicht lesbar: {e}")

    def _rows(self, raw: str, header_field: str) -> Iterator[Tuple[int, List[str]]]:
        """
        Liefert (Zeilennummer, Felder).
        Leerzeilen, Kommentare und ein Header in der ersten Zeile fallen weg.
        """
        reader = csv.reader(io.StringIO(raw))
        first = True
        for row in reader:
            fields = [part.strip() for part in row]
            if not any(fields) or fields[0].startswith("#"):
                continue
            if first and fields[0].lower() == header_field:
                first = False
                continue
            first = False
            yield reader.line_num, fields

    def _skip(self, report: ImportReport, pfad: Path, line_no: int, reason: str) -> None:
        report.skipped += 1
        logger.warning("%s Zeile %d übersprungen: %s", pfad.name, line_no, reason)
