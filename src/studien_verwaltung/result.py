"""
Ergebnis-Objekte für die Services.

Fachliche Fehler werden nicht als Exception geworfen.
Jede Operation liefert ein Result, der Aufrufer muss ok/kind prüfen.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Fehlerarten der Anwendung."""
    NOT_FOUND = "NotFound"
    DUPLICATE_ENROLLMENT = "DuplicateEnrollment"
    CREDIT_LIMIT_EXCEEDED = "CreditLimitExceeded"
    NOT_ENROLLED = "NotEnrolled"
    INVALID_GRADE = "InvalidGrade"
    IO_FAILURE = "IOFailure"
    DUPLICATE_RECORD = "DuplicateRecord"
    INVALID_INPUT = "InvalidInput"


@dataclass(slots=True)
class Result:
    """
    Ergebnis einer Operation.
    - ok: Erfolg ja/nein
    - kind: Fehlerart, nur bei Fehlern gesetzt
    - message: Text für die Anzeige
    - value: optionaler Rückgabewert
    """
    ok: bool
    message: str = ""
    kind: Optional[ErrorKind] = None
    value: Any = None

    @classmethod
    def success(cls, message: str = "", value: Any = None) -> "Result":
        return cls(ok=True, message=message, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result":
        return cls(ok=False, message=message, kind=kind)

    def __bool__(self) -> bool:
        return self.ok
