"""
Backup der Datendateien in ein Verzeichnis mit Zeitstempel.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import AppConfig
from .result import ErrorKind, Result

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class BackupService:
    """
    Kopiert die drei Datendateien nach <data_dir>/backup_<YYYYMMDD>_<HHmmss>.
    Fehlende Dateien werden übersprungen.
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config

    def backup_dir_for(self, now: datetime) -> Path:
        return self._config.data_dir / f"{BACKUP_PREFIX}{now.strftime(TIMESTAMP_FORMAT)}"

    def create_backup(self, now: Optional[datetime] = None) -> Result:
        """
        Legt das Backup an.
        value ist das Backup-Verzeichnis.
        """
        target = self.backup_dir_for(now or datetime.now())
        try:
            target.mkdir(parents=True, exist_ok=True)
            copied = 0
            for source in self._config.data_files():
                if not source.is_file():
                    logger.info("Backup: %s fehlt, übersprungen", source)
                    continue
                shutil.copy2(source, target / source.name)
                copied += 1
        except OSError as e:
            logger.error("Backup fehlgeschlagen: %s", e)
            return Result.failure(ErrorKind.IO_FAILURE, f"FEHLER beim Backup: {e}")

        logger.info("Backup mit %d Dateien erstellt: %s", copied, target)
        return Result.success(f"Backup erstellt: {target.resolve()}", target)
