"""
Konfiguration der Anwendung.

Die Werte kommen aus Defaults, Umgebungsvariablen (Präfix CCRM_) oder einer .env-Datei.
Die Konfiguration wird einmal in main() erzeugt und an die Komponenten übergeben.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Einstellungen für Datenablage und Regeln."""

    model_config = SettingsConfigDict(env_prefix="CCRM_", env_file=".env", extra="ignore")

    app_name: str = "Campus Course & Records Manager (CCRM)"

    # Datenablage
    data_dir: Path = Path("data")
    students_file: str = "students.csv"
    courses_file: str = "courses.csv"
    enrollment_file: str = "enrollment.csv"

    # Regeln
    max_credits: int = Field(default=20, gt=0)

    # Logging
    log_level: str = "INFO"

    @property
    def students_path(self) -> Path:
        return self.data_dir / self.students_file

    @property
    def courses_path(self) -> Path:
        return self.data_dir / self.courses_file

    @property
    def enrollment_path(self) -> Path:
        return self.data_dir / self.enrollment_file

    def data_files(self) -> list[Path]:
        """Die drei Datendateien in Speicher-Reihenfolge."""
        return [self.students_path, self.courses_path, self.enrollment_path]

    def ensure_data_dir(self) -> Path:
        """Legt das Datenverzeichnis an, falls es fehlt."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir
