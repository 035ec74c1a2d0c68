"""
validator — walidator dokumentów importu formularza (cztery kształty).

Interfejs publiczny:
    FormValidator    — główny walidator (etapy A–C)
    validate_shape   — walidacja współdzielonym walidatorem
    validate_form    — skrót dla pełnego formularza
    ImportKind       — kształty: full_form, pages_only, sections_only, single_section
    ValidationReport, ValidationError, ErrorCode — typy raportu

Typowe użycie:
    from validator import ImportKind, validate_shape

    report = validate_shape(json.loads(raw), ImportKind.PAGES_ONLY)
    if not report.is_valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
    else:
        pages = report.value          # list[Page] z wartościami domyślnymi
"""

from .types import ErrorCode, ImportKind, ValidationError, ValidationReport
from .schemas import SHAPE_SCHEMAS
from .form_validator import (
    FormValidator,
    default_validator,
    render_path,
    validate_form,
    validate_shape,
)

__all__ = [
    "ErrorCode",
    "ImportKind",
    "ValidationError",
    "ValidationReport",
    "SHAPE_SCHEMAS",
    "FormValidator",
    "default_validator",
    "render_path",
    "validate_form",
    "validate_shape",
]
