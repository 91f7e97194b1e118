"""
UI layer für die Console

Diese View zeigt Menüs, Listen und Profile in der Konsole.
- Text formatieren und ausgeben
- Eingaben abfragen
- Tabellen mit Rahmen bauen
"""

from __future__ import annotations

import shutil
import textwrap
from typing import Iterable, List, Sequence

from .domain import Course, Student
from .report import GpaBucket


class ConsoleView:
    """
    View für die Konsole.

    Die Breite wird automatisch ermittelt anhand der breite des aktuellen Fensters.
    """

    def __init__(self, width: int | None = None) -> None:
        """
        Erstellt die View.
        - Wenn width None ist, wird die Terminal-Breite genutzt.
        - Es gibt eine Mindestbreite.
        """
        term_cols = shutil.get_terminal_size(fallback=(100, 24)).columns

        if width is None:
            width = term_cols

        self._width = max(60, width)

    def render_menu(self, title: str, options: Sequence[str]) -> None:
        """Zeigt ein Menü mit Rahmen."""
        inner = max(len(title), *(len(o) for o in options)) + 4
        print()
        print("╔" + "═" * inner + "╗")
        print("║" + title.center(inner) + "║")
        print("╠" + "═" * inner + "╣")
        for option in options:
            print("║  " + option.ljust(inner - 2) + "║")
        print("╚" + "═" * inner + "╝")

    def prompt(self, frage: str) -> str:
        """
        Fragt den Nutzer nach Eingabe.
        """
        return input(frage)

    def show_message(self, text: str) -> None:
        """
        Gibt eine Nachricht aus.
        """
        print(text)

    def show_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            print(line)

    def render_students(self, students: Sequence[Student]) -> None:
        """Tabelle der Studenten."""
        if not students:
            self.show_message("Keine Studenten vorhanden.")
            return

        rows = [
            f"{s.student_id:8} │ {s.reg_no:12} │ {s.full_name:30} │ {s.current_credits():3d} Credits │ "
            f"GPA {s.calculate_gpa():.2f}"
            for s in students
        ]
        self.show_lines(self._table("STUDENTEN", rows))

    def render_courses(self, courses: Sequence[Course]) -> None:
        """Tabelle der Kurse."""
        if not courses:
            self.show_message("Keine Kurse vorhanden.")
            return
        self.show_lines(self._table("KURSE", [str(c) for c in courses]))

    def render_distribution(self, buckets: Sequence[GpaBucket]) -> None:
        """GPA-Verteilung mit einfachem Balken."""
        self.show_message("--- GPA-Verteilung ---")
        if not buckets:
            self.show_message("Keine Studenten vorhanden.")
            return
        for b in buckets:
            self.show_message(f"{b}  {'█' * b.count}")

    def _table(self, title: str, rows: Sequence[str]) -> List[str]:
        """
        Baut eine Tabelle mit Rahmen.
        """
        sep = "+" + "─" * (self._width - 2) + "+"
        lines = [sep]
        lines.extend(self._rows_wrapped(title))
        lines.append(sep)
        lines.extend(self._row(r) for r in rows)
        lines.append(sep)
        return lines

    def _row(self, text: str) -> str:
        """
        Baut eine Zeile mit Rahmen.
        - Zu langer Text wird gekürzt um die breite der Konsole nicht zu verändern.
        - Zu kurzer Text wird aufgefüllt.
        """
        inner = self._width - 2
        content = text[:inner].ljust(inner)
        return "│" + content + "│"

    def _rows_wrapped(self, text: str) -> List[str]:
        """
        Bricht langen Text um.
        """
        inner = self._width - 2
        rows: List[str] = []

        for part in textwrap.wrap(text, width=inner, break_long_words=False) or [""]:
            rows.append("│" + part.ljust(inner) + "│")

        return rows
