"""
form_import/classifier.py — rozpoznanie kształtu dokumentu importu.

Kolejność sprawdzania (pierwsze trafienie wygrywa):
  1. id + name + formType + pages   → full_form
  2. pages (tablica)                → pages_only
  3. sections (tablica)             → sections_only
  4. id + title + fields            → single_section

Po klasyfikacji dane trafiają do walidatora dla danego kształtu — udana
klasyfikacja nie oznacza udanej walidacji. Błędy parsowania, klasyfikacji
i schematu są zwracane jako dane (ValidationReport), nigdy jako wyjątki.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from validator import (
    ErrorCode,
    ImportKind,
    ValidationError,
    ValidationReport,
    validate_shape,
)

from .types import ClassifiedImport

logger = logging.getLogger(__name__)

_FULL_FORM_KEYS      = ("id", "name", "formType", "pages")
_SINGLE_SECTION_KEYS = ("id", "title", "fields")

ACCEPTED_SHAPES: dict[ImportKind, str] = {
    ImportKind.FULL_FORM:      "Pełny formularz: { id, name, formType, pages }",
    ImportKind.PAGES_ONLY:     "Tylko strony: { pages }",
    ImportKind.SECTIONS_ONLY:  "Tylko sekcje: { sections }",
    ImportKind.SINGLE_SECTION: "Pojedyncza sekcja: { id, title, fields }",
}

_DESCRIPTIONS: dict[ImportKind, str] = {
    ImportKind.FULL_FORM:      "Kompletny formularz z metadanymi, stronami i sekcjami",
    ImportKind.PAGES_ONLY:     "Jedna lub więcej stron wraz z sekcjami",
    ImportKind.SECTIONS_ONLY:  "Jedna lub więcej sekcji do dodania na stronę",
    ImportKind.SINGLE_SECTION: "Pojedyncza sekcja do dodania na stronę",
}


def describe_import_kind(kind: ImportKind) -> str:
    """Opis rodzaju importu dla interfejsu użytkownika."""
    return _DESCRIPTIONS[kind]


def detect_kind(data: Any) -> ImportKind | None:
    """Zwraca rozpoznany kształt albo None, gdy żaden nie pasuje."""
    if not isinstance(data, dict):
        return None
    if all(k in data for k in _FULL_FORM_KEYS):
        return ImportKind.FULL_FORM
    if isinstance(data.get("pages"), list):
        return ImportKind.PAGES_ONLY
    if isinstance(data.get("sections"), list):
        return ImportKind.SECTIONS_ONLY
    if all(k in data for k in _SINGLE_SECTION_KEYS):
        return ImportKind.SINGLE_SECTION
    return None


def _unrecognized(data: Any) -> ValidationReport:
    lead = (
        "Import musi być obiektem JSON"
        if not isinstance(data, dict)
        else "Nie można ustalić rodzaju importu"
    )
    shapes = list(ACCEPTED_SHAPES.values())
    return ValidationReport(
        is_valid=False,
        errors=[ValidationError(
            code=ErrorCode.SHAPE_UNRECOGNIZED,
            path="$",
            message=f"{lead}. Oczekiwano jednego z: " + "; ".join(shapes),
            details={"accepted": shapes},
        )],
    )


def classify(data: Any) -> ValidationReport:
    """
    Klasyfikuje sparsowaną wartość JSON i waliduje ją dla rozpoznanego kształtu.

    Przy powodzeniu report.value to ClassifiedImport.
    """
    kind = detect_kind(data)
    if kind is None:
        logger.debug("Nie rozpoznano kształtu importu")
        return _unrecognized(data)

    logger.debug("Rozpoznano import: %s", kind)
    report = validate_shape(data, kind)
    if report.is_valid:
        report.value = ClassifiedImport(kind=kind, data=report.value)
    return report


def parse_json(raw: str | bytes | bytearray) -> tuple[Any, list[ValidationError]]:
    """Parsuje surowe bajty / tekst. Zwraca (wartość, błędy)."""
    try:
        return json.loads(raw), []
    except json.JSONDecodeError as exc:
        return None, [ValidationError(
            code=ErrorCode.PARSE,
            path="$",
            message=f"Niepoprawny JSON: {exc.msg} (wiersz {exc.lineno}, kolumna {exc.colno})",
            details={"line": exc.lineno, "column": exc.colno},
        )]
    except UnicodeDecodeError as exc:
        return None, [ValidationError(
            code=ErrorCode.PARSE,
            path="$",
            message=f"Niepoprawne kodowanie pliku: {exc.reason}",
        )]


def classify_and_validate(raw: Any) -> ValidationReport:
    """
    Pełna ścieżka: (parsowanie) → klasyfikacja → walidacja.

    Args:
        raw: surowy tekst / bajty JSON albo wartość już sparsowana
    """
    if isinstance(raw, (str, bytes, bytearray)):
        data, errors = parse_json(raw)
        if errors:
            return ValidationReport(is_valid=False, errors=errors)
    else:
        data = raw
    return classify(data)
