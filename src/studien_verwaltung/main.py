"""
Entry point für die Studien-Verwaltung.
Dieses Modul startet die Anwendung.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import AppConfig
from .controller import AppController
from .persistence import CsvRecordRepository
from .view import ConsoleView

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Campus Course & Records Manager (Konsole)")
    parser.add_argument(
        "--data-dir",
        "-d",
        help="Verzeichnis für students.csv, courses.csv und enrollment.csv",
    )
    parser.add_argument(
        "--log-level",
        help="Log-Level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Kommandozeile überschreibt Umgebung und Defaults."""
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.log_level:
        overrides["log_level"] = args.log_level
    return AppConfig(**overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Startpunkt der Anwendung.
    Ablauf:
    - Konfiguration bauen
    - Logging einrichten
    - Komponenten erstellen
    - Controller starten
    """
    config = build_config(parse_args(argv))

    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config.ensure_data_dir()
        logger.info("Datenverzeichnis: %s", config.data_dir.resolve())

        # Bausteine der App erstellen.
        repo = CsvRecordRepository(config)
        view = ConsoleView()
        controller = AppController(repo, view, config)

        # App starten.
        controller.start_app()

    except KeyboardInterrupt:
        # Sauberer Abbruch per Strg+C.
        print("\nAnwendung beendet.")
        sys.exit(0)

    except Exception as e:
        # Unerwarteter Fehler.
        logger.exception("Unerwarteter Fehler")
        print(f"\nFEHLER: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
