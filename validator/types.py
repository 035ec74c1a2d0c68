"""
validator/types.py — kody błędów, rodzaje importu i struktury raportu.

ImportKind       — jeden z czterech akceptowanych kształtów dokumentu importu.
ValidationError  — pojedynczy błąd z kodem, ścieżką i komunikatem.
ValidationReport — wynik walidacji: is_valid, errors, warnings,
    opcjonalnie zbudowana (typowana, z wartościami domyślnymi) wartość.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ImportKind(StrEnum):
    """Kształt dokumentu importu."""
    FULL_FORM      = "full_form"
    PAGES_ONLY     = "pages_only"
    SECTIONS_ONLY  = "sections_only"
    SINGLE_SECTION = "single_section"


class ErrorCode(StrEnum):
    """Stałe kody błędów importu (parsowanie, klasyfikacja, schemat, konflikty)."""

    # parsowanie
    PARSE                = "E_PARSE"

    # klasyfikacja
    SHAPE_UNRECOGNIZED   = "E_SHAPE_UNRECOGNIZED"

    # schemat
    REQUIRED             = "E_REQUIRED"
    EMPTY                = "E_EMPTY"
    TYPE                 = "E_TYPE"
    MAP_NOT_ARRAY        = "E_MAP_NOT_ARRAY"
    MIN_ITEMS            = "E_MIN_ITEMS"
    ENUM                 = "E_ENUM"
    NEGATIVE_ORDER       = "E_NEGATIVE_ORDER"
    SCHEMA_VIOLATION     = "E_SCHEMA_VIOLATION"
    DUPLICATE_ID         = "E_DUPLICATE_ID"

    # konflikty / tryby scalania
    UNRESOLVED_RENAME    = "E_UNRESOLVED_RENAME"
    UNKNOWN_RESOLUTION   = "E_UNKNOWN_RESOLUTION"
    MODE_NOT_ALLOWED     = "E_MODE_NOT_ALLOWED"


@dataclass(slots=True)
class ValidationError:
    """
    Pojedynczy błąd.

    - code:    stały identyfikator klasy błędu (ErrorCode)
    - path:    ścieżka w dokumencie, np. "pages[1].sections[0].fields[2].label";
               korzeń dokumentu to "$"
    - message: czytelny opis naruszonej reguły
    - details: opcjonalny słownik z dodatkowymi danymi
    """

    code: ErrorCode
    path: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.path} - {self.message}"


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik walidacji dokumentu w zadanym kształcie.

    - is_valid: True gdy brak błędów (warnings nie wpływają)
    - errors:   pełna lista błędów (nigdy nie obcinana)
    - warnings: komunikaty ostrzegawcze (str)
    - kind:     kształt, względem którego walidowano
    - value:    typowana wartość z wartościami domyślnymi
                (None gdy walidacja nie przeszła)
    """

    is_valid: bool
    kind: ImportKind | None = None
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    value: Any = None

    @property
    def messages(self) -> list[str]:
        """Błędy w postaci '<ścieżka> - <komunikat>'."""
        return [str(e) for e in self.errors]
