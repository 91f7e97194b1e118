"""
Controller layer

Der AppController steuert die App. Er verbindet Repository, Services und View.

Aufgaben:
- Daten laden
- Menü anzeigen und Eingaben verarbeiten
- Aufrufe an die Services
- Beim Beenden speichern
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .backup import BackupService
from .config import AppConfig
from .domain import Catalog
from .importer import Importer
from .persistence import RecordRepository
from .report import ReportService
from .result import Result
from .service import CourseService, EnrollmentService, StudentService
from .view import ConsoleView

logger = logging.getLogger(__name__)


MAIN_MENU = [
    "1) Studenten verwalten",
    "2) Kurse verwalten",
    "3) Einschreibungen & Noten",
    "4) Daten importieren",
    "5) Backup erstellen",
    "6) Berichte",
    "7) Speichern",
    "0) Beenden",
]

STUDENT_MENU = [
    "1) Student anlegen",
    "2) Studenten auflisten",
    "3) Studenten suchen",
    "4) Student ändern",
    "5) Student löschen",
    "0) Zurück",
]

COURSE_MENU = [
    "1) Kurs anlegen",
    "2) Kurse auflisten",
    "3) Kurse suchen",
    "4) Kurs ändern",
    "5) Kurs löschen",
    "0) Zurück",
]

ENROLLMENT_MENU = [
    "1) Einschreiben",
    "2) Abmelden",
    "3) Note eintragen",
    "4) Transcript anzeigen",
    "0) Zurück",
]

IMPORT_MENU = [
    "1) Studenten importieren",
    "2) Kurse importieren",
    "0) Zurück",
]

REPORT_MENU = [
    "1) GPA-Verteilung",
    "0) Zurück",
]


class AppController:
    """
    Hauptcontroller.

    Aufgaben:
    - Menü-Schleife
    - Aufrufe an Services und View
    - Speichern beim Beenden
    """

    def __init__(
        self,
        repo: RecordRepository,
        view: ConsoleView,
        config: AppConfig,
        backup: Optional[BackupService] = None,
    ) -> None:
        """
        Erstellt den Controller.

        - repo: Laden/Speichern
        - view: Ein-/Ausgabe
        - config: Regeln und Pfade
        """
        self._repo = repo
        self._view = view
        self._config = config
        self._backup = backup or BackupService(config)
        self._bind(Catalog())

    def load(self) -> None:
        """Lädt die Daten und baut die Services auf."""
        result = self._repo.load()
        for error in result.errors:
            self._view.show_message(f"FEHLER beim Laden der Daten: {error}")
        if result.total_skipped:
            self._view.show_message(f"Hinweis: {result.total_skipped} fehlerhafte Zeilen wurden übersprungen.")
        self._bind(result.catalog)

    def _bind(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self.students = StudentService(catalog)
        self.courses = CourseService(catalog)
        self.enrollments = EnrollmentService(catalog, self._config.max_credits)
        self.reports = ReportService(catalog)
        self.importer = Importer(self.students, self.courses)

    def start_app(self) -> None:
        """
        Startet die Anwendung.

        - Daten laden
        - Menü-Schleife starten
        """
        self.load()
        self._view.show_message(f"Willkommen beim {self._config.app_name}.")

        # Schleife bis Beenden.
        while True:
            self._view.render_menu("HAUPTMENÜ", MAIN_MENU)
            choice = self._view.prompt("Auswahl: ").strip()

            if choice == "1":
                self.student_menu()
            elif choice == "2":
                self.course_menu()
            elif choice == "3":
                self.enrollment_menu()
            elif choice == "4":
                self.import_menu()
            elif choice == "5":
                self._report(self._backup.create_backup())
            elif choice == "6":
                self.report_menu()
            elif choice == "7":
                self.save()
            elif choice == "0":
                self._quit()
                break
            else:
                self._view.show_message("Ungültige Auswahl.")

    def student_menu(self) -> None:
        self._view.render_menu("STUDENTEN", STUDENT_MENU)
        choice = self._view.prompt("Auswahl: ").strip()

        if choice == "1":
            student_id = self._view.prompt("Student-ID: ")
            reg_no = self._view.prompt("Registrierungsnummer: ")
            full_name = self._view.prompt("Name: ")
            email = self._view.prompt("E-Mail: ")
            self._report(self.students.add_student(student_id, reg_no, full_name, email))
        elif choice == "2":
            self._view.render_students(self.students.list_students())
        elif choice == "3":
            query = self._view.prompt("Suche (ID, RegNo oder Name): ")
            found = self.reports.search_students(query)
            if not found:
                self._view.show_message("Keine passenden Studenten gefunden.")
            for s in found:
                self._view.show_lines(s.profile_lines())
        elif choice == "4":
            student_id = self._view.prompt("Student-ID: ").strip()
            full_name = self._view.prompt("Neuer Name: ")
            email = self._view.prompt("Neue E-Mail: ")
            self._report(self.students.update_student(student_id, full_name, email))
        elif choice == "5":
            student_id = self._view.prompt("Student-ID: ").strip()
            self._report(self.students.delete_student(student_id))
        elif choice != "0":
            self._view.show_message("Ungültige Auswahl.")

    def course_menu(self) -> None:
        self._view.render_menu("KURSE", COURSE_MENU)
        choice = self._view.prompt("Auswahl: ").strip()

        if choice == "1":
            code = self._view.prompt("Kurscode: ")
            title = self._view.prompt("Titel: ")
            credits = self._prompt_int("Credits: ")
            if credits is None:
                return
            semester = self._view.prompt("Semester (SPRING, SUMMER, FALL): ")
            instructor_id = self._view.prompt("Instructor-ID (leer = keiner): ")
            self._report(self.courses.add_course(code, title, credits, semester, instructor_id))
        elif choice == "2":
            self._view.render_courses(self.courses.list_courses())
        elif choice == "3":
            query = self._view.prompt("Suche (Code oder Titel): ")
            found = self.reports.search_courses(query)
            if found:
                self._view.render_courses(found)
            else:
                self._view.show_message("Keine passenden Kurse gefunden.")
        elif choice == "4":
            code = self._view.prompt("Kurscode: ").strip()
            title = self._view.prompt("Neuer Titel: ")
            credits = self._prompt_int("Neue Credits: ")
            if credits is None:
                return
            instructor_id = self._view.prompt("Neue Instructor-ID (z.B. I001): ")
            semester = self._view.prompt("Neues Semester (SPRING, SUMMER, FALL): ")
            self._report(self.courses.update_course(code, title, credits, instructor_id, semester))
        elif choice == "5":
            code = self._view.prompt("Kurscode: ").strip()
            self._report(self.courses.delete_course(code))
        elif choice != "0":
            self._view.show_message("Ungültige Auswahl.")

    def enrollment_menu(self) -> None:
        self._view.render_menu("EINSCHREIBUNGEN & NOTEN", ENROLLMENT_MENU)
        choice = self._view.prompt("Auswahl: ").strip()

        if choice in ("1", "2", "3"):
            student_id = self._view.prompt("Student-ID: ").strip()
            code = self._view.prompt("Kurscode: ").strip()
            if choice == "1":
                self._report(self.enrollments.enroll(student_id, code))
            elif choice == "2":
                self._report(self.enrollments.unenroll(student_id, code))
            else:
                grade = self._view.prompt("Note (S, A, B, C, D, E, F): ")
                self._report(self.enrollments.record_grade(student_id, code, grade))
        elif choice == "4":
            student_id = self._view.prompt("Student-ID: ").strip()
            result = self.reports.transcript(student_id)
            if result.ok:
                self._view.show_lines(result.value)
            else:
                self._report(result)
        elif choice != "0":
            self._view.show_message("Ungültige Auswahl.")

    def import_menu(self) -> None:
        self._view.render_menu("IMPORT", IMPORT_MENU)
        choice = self._view.prompt("Auswahl: ").strip()

        if choice in ("1", "2"):
            raw = self._view.prompt("Pfad zur Import-Datei: ").strip()
            if not raw:
                return
            pfad = Path(raw)
            if choice == "1":
                self._report(self.importer.import_students(pfad))
            else:
                self._report(self.importer.import_courses(pfad))
        elif choice != "0":
            self._view.show_message("Ungültige Auswahl.")

    def report_menu(self) -> None:
        self._view.render_menu("BERICHTE", REPORT_MENU)
        choice = self._view.prompt("Auswahl: ").strip()

        if choice == "1":
            self._view.render_distribution(self.reports.gpa_distribution())
        elif choice != "0":
            self._view.show_message("Ungültige Auswahl.")

    def save(self) -> Result:
        """
        Speichert den Datenbestand.
        """
        result = self._repo.save(self._catalog)
        self._report(result)
        return result

    def _prompt_int(self, frage: str) -> Optional[int]:
        raw = self._view.prompt(frage).strip()
        try:
            return int(raw)
        except ValueError:
            self._view.show_message("Ungültige Zahl.")
            return None

    def _report(self, result: Result) -> None:
        """Gibt das Ergebnis aus. Fehler beenden die Schleife nicht."""
        if result.ok:
            if result.message:
                self._view.show_message(result.message)
        else:
            self._view.show_message(f"Fehler: {result.message}")

    def _quit(self) -> None:
        """
        Beendet das Programm.
        Vorher wird immer gespeichert.
        """
        self.save()
        logger.info("Anwendung beendet")
        self._view.show_message(f"{self._config.app_name} wird beendet.")
