"""
validator/form_validator.py — walidator dokumentów importu formularza.

FormValidator.validate(data, kind) -> ValidationReport

Etapy:
  A — JSON Schema           (struktura kształtu; błędy agregowane, nie fail-fast)
  B — identyfikatory        (unikalność wśród rodzeństwa: strony, sekcje, pola)
  C — rodzaje pól           (nieznany field_type lub pole wyboru bez opcji
                             → ostrzeżenie, nie błąd)

Etap A jest bramką: przy błędach struktury nie budujemy wartości typowanej
i nie uruchamiamy etapów B–C. Walidacja nigdy nie rzuca wyjątku.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator, Sequence
from typing import Any

import jsonschema

from data_model import CHOICE_FIELD_TYPES, KNOWN_FIELD_TYPES, Field, FormKind, Page, Section

from .normalizer import build_value
from .schemas import SHAPE_SCHEMAS
from .types import ErrorCode, ImportKind, ValidationError, ValidationReport

logger = logging.getLogger(__name__)

ORDER_KEYS: frozenset[str] = frozenset({"page_order", "section_order", "field_order"})

# Nazwa listy → rodzaj węzła jej elementów
_CONTAINER_KIND: dict[str, str] = {
    "pages":    "page",
    "sections": "section",
    "fields":   "field",
    "options":  "option",
}

# Rodzaj węzła w korzeniu dokumentu dla danego kształtu
_ROOT_KIND: dict[ImportKind, str] = {
    ImportKind.FULL_FORM:      "form",
    ImportKind.PAGES_ONLY:     "import",
    ImportKind.SECTIONS_ONLY:  "import",
    ImportKind.SINGLE_SECTION: "section",
}

_NODE_NAMES: dict[str, str] = {
    "form":    "Formularz",
    "page":    "Strona",
    "section": "Sekcja",
    "field":   "Pole",
    "option":  "Opcja",
    "import":  "Import",
    "node":    "Element",
}

_PROP_RULES: dict[str, str] = {
    "id":         "musi mieć niepusty identyfikator (id)",
    "name":       "musi mieć niepustą nazwę (name)",
    "title":      "musi mieć niepusty tytuł (title)",
    "label":      "musi mieć niepustą etykietę (label)",
    "field_type": "musi mieć niepusty rodzaj pola (field_type)",
    "formType":   "musi mieć rodzaj formularza (formType): " + ", ".join(FormKind),
    "value":      "musi mieć wartość (value)",
}

_AT_LEAST_ONE: dict[str, str] = {
    "pages":    "co najmniej jedną stronę",
    "sections": "co najmniej jedną sekcję",
}

_JSON_TYPE_NAMES: dict[str, str] = {
    "object":  "obiekt",
    "array":   "tablicę",
    "string":  "napis",
    "integer": "liczbę całkowitą",
    "number":  "liczbę",
    "boolean": "wartość logiczną",
    "null":    "null",
}


# ---------------------------------------------------------------------------
# Funkcje pomocnicze
# ---------------------------------------------------------------------------

def render_path(parts: Sequence[str | int]) -> str:
    """['pages', 1, 'sections', 0, 'label'] → 'pages[1].sections[0].label'; [] → '$'."""
    out = ""
    for p in parts:
        if isinstance(p, int):
            out += f"[{p}]"
        else:
            out += f".{p}" if out else p
    return out or "$"


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    return "null" if value is None else type(value).__name__


def _resolve(data: Any, parts: Sequence[str | int]) -> Any:
    node = data
    for p in parts:
        try:
            node = node[p]
        except (KeyError, IndexError, TypeError):
            return None
    return node


def _node_kind(parts: Sequence[str | int], kind: ImportKind) -> str:
    """Rodzaj węzła wskazywanego przez ścieżkę (ostatnia para lista[indeks])."""
    for i in range(len(parts) - 1, 0, -1):
        if isinstance(parts[i], int) and isinstance(parts[i - 1], str):
            return _CONTAINER_KIND.get(parts[i - 1], "node")
    return _ROOT_KIND[kind]


def _subject(data: Any, parts: Sequence[str | int], kind: ImportKind) -> str:
    """Np. "Strona 'p1'" albo "Pole" (gdy węzeł nie ma czytelnego id)."""
    name = _NODE_NAMES[_node_kind(parts, kind)]
    node = _resolve(data, parts)
    node_id = node.get("id") if isinstance(node, dict) else None
    if isinstance(node_id, str) and node_id.strip():
        return f"{name} '{node_id}'"
    return name


# ---------------------------------------------------------------------------
# FormValidator
# ---------------------------------------------------------------------------

class FormValidator:
    """
    Walidator dokumentu importu względem jednego z czterech kształtów.

    Użycie:
        validator = FormValidator()
        report    = validator.validate(json.loads(raw), ImportKind.FULL_FORM)
        if not report.is_valid:
            for e in report.errors:
                print(e.code, e.path, e.message)
    """

    def __init__(self, known_field_types: Sequence[str] = KNOWN_FIELD_TYPES) -> None:
        self._known_field_types = frozenset(known_field_types)
        self._schema_validators = {
            kind: jsonschema.Draft202012Validator(schema)
            for kind, schema in SHAPE_SCHEMAS.items()
        }

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def validate(self, data: Any, kind: ImportKind) -> ValidationReport:
        """
        Waliduje dane i zwraca ValidationReport.

        Args:
            data: wartość po json.loads, o której sądzimy, że ma kształt `kind`
            kind: oczekiwany kształt dokumentu
        """
        errors: list[ValidationError] = []
        warnings: list[str] = []

        # A: JSON Schema
        self._stage_schema(data, kind, errors)
        if errors:
            logger.debug("Walidacja %s: %d błąd(ów) schematu", kind, len(errors))
            return ValidationReport(is_valid=False, kind=kind, errors=errors, warnings=warnings)

        value = build_value(data, kind)

        # B: identyfikatory
        self._stage_identity(value, kind, errors)

        # C: rodzaje pól
        self._stage_field_types(value, kind, warnings)

        logger.debug(
            "Walidacja %s: %d błąd(ów), %d ostrzeżeń", kind, len(errors), len(warnings)
        )
        return ValidationReport(
            is_valid=not errors,
            kind=kind,
            errors=errors,
            warnings=warnings,
            value=value if not errors else None,
        )

    # ------------------------------------------------------------------
    # Stage A: JSON Schema
    # ------------------------------------------------------------------

    def _stage_schema(self, data: Any, kind: ImportKind, errors: list[ValidationError]) -> None:
        seen_required: set[tuple[str, str]] = set()
        raw_errors = sorted(
            self._schema_validators[kind].iter_errors(data),
            key=lambda e: [(0, p, "") if isinstance(p, int) else (1, 0, p) for p in e.absolute_path],
        )
        for e in raw_errors:
            parts = list(e.absolute_path)
            if e.validator == "required":
                for prop in e.validator_value:
                    if prop in e.instance or (render_path(parts), prop) in seen_required:
                        continue
                    seen_required.add((render_path(parts), prop))
                    errors.append(self._required_error(data, parts, prop, kind))
                continue
            errors.append(self._translate(e, data, parts, kind))

    def _required_error(
        self,
        data: Any,
        parts: list[str | int],
        prop: str,
        kind: ImportKind,
    ) -> ValidationError:
        subject = _subject(data, parts, kind)
        if prop in _AT_LEAST_ONE:
            message = f"{subject} musi mieć {_AT_LEAST_ONE[prop]}"
        elif prop in _PROP_RULES:
            message = f"{subject} {_PROP_RULES[prop]}"
        else:
            message = f"{subject} nie zawiera wymaganej właściwości '{prop}'"
        return ValidationError(
            code=ErrorCode.REQUIRED,
            path=render_path([*parts, prop]),
            message=message,
            details={"property": prop},
        )

    def _translate(
        self,
        e: jsonschema.ValidationError,
        data: Any,
        parts: list[str | int],
        kind: ImportKind,
    ) -> ValidationError:
        path = render_path(parts)
        prop = parts[-1] if parts else None
        owner = parts[:-1] if isinstance(prop, str) else parts
        subject = _subject(data, owner, kind)

        match e.validator:
            case "minLength" | "pattern":
                rule = _PROP_RULES.get(prop, f"musi mieć niepustą wartość '{prop}'")
                return ValidationError(ErrorCode.EMPTY, path, f"{subject} {rule}")

            case "type" if (
                e.validator_value == "object"
                and isinstance(e.instance, list)
                and isinstance(prop, str)
            ):
                return ValidationError(
                    ErrorCode.MAP_NOT_ARRAY,
                    path,
                    f"{subject}: '{prop}' musi być obiektem (mapą), nie tablicą",
                    details={"property": prop},
                )

            case "type" | "minimum" if prop in ORDER_KEYS:
                code = ErrorCode.NEGATIVE_ORDER if e.validator == "minimum" else ErrorCode.TYPE
                return ValidationError(
                    code, path, f"{subject}: '{prop}' musi być nieujemną liczbą całkowitą"
                )

            case "type":
                expected = _JSON_TYPE_NAMES.get(e.validator_value, str(e.validator_value))
                return ValidationError(
                    ErrorCode.TYPE,
                    path,
                    f"{subject}: oczekiwano typu {expected}, otrzymano {_json_type(e.instance)}",
                    details={"expected": e.validator_value},
                )

            case "minItems" if prop in _AT_LEAST_ONE:
                return ValidationError(
                    ErrorCode.MIN_ITEMS, path, f"{subject} musi mieć {_AT_LEAST_ONE[prop]}"
                )

            case "enum":
                allowed = ", ".join(str(v) for v in e.validator_value)
                what = {
                    "formType": "Rodzaj formularza",
                    "width":    "Szerokość pola",
                }.get(prop, f"Wartość '{prop}'")
                return ValidationError(
                    ErrorCode.ENUM,
                    path,
                    f"{subject}: {what} musi być jednym z: {allowed}",
                    details={"allowed": list(e.validator_value), "got": e.instance},
                )

        return ValidationError(ErrorCode.SCHEMA_VIOLATION, path, f"{subject}: {e.message}")

    # ------------------------------------------------------------------
    # Stage B: unikalność identyfikatorów
    # ------------------------------------------------------------------

    def _stage_identity(self, value: Any, kind: ImportKind, errors: list[ValidationError]) -> None:
        match kind:
            case ImportKind.FULL_FORM:
                self._check_pages(value.pages, "pages", errors)
            case ImportKind.PAGES_ONLY:
                self._check_pages(value, "pages", errors)
            case ImportKind.SECTIONS_ONLY:
                self._check_sections(value, "sections", errors)
            case ImportKind.SINGLE_SECTION:
                self._check_unique(value.fields, "fields", "Pole", errors)

    def _check_pages(self, pages: list[Page], base: str, errors: list[ValidationError]) -> None:
        self._check_unique(pages, base, "Strona", errors)
        for i, page in enumerate(pages):
            self._check_sections(page.sections, f"{base}[{i}].sections", errors)

    def _check_sections(self, sections: list[Section], base: str, errors: list[ValidationError]) -> None:
        self._check_unique(sections, base, "Sekcja", errors)
        for i, section in enumerate(sections):
            self._check_unique(section.fields, f"{base}[{i}].fields", "Pole", errors)

    @staticmethod
    def _check_unique(
        nodes: Sequence[Page | Section | Field],
        base: str,
        noun: str,
        errors: list[ValidationError],
    ) -> None:
        first_seen: dict[str, int] = {}
        for i, node in enumerate(nodes):
            if node.id in first_seen:
                errors.append(ValidationError(
                    code=ErrorCode.DUPLICATE_ID,
                    path=f"{base}[{i}].id",
                    message=(
                        f"{noun} '{node.id}' powtarza identyfikator elementu "
                        f"{base}[{first_seen[node.id]}]"
                    ),
                    details={"id": node.id, "first_index": first_seen[node.id]},
                ))
            else:
                first_seen[node.id] = i

    # ------------------------------------------------------------------
    # Stage C: rodzaje pól
    # ------------------------------------------------------------------

    def _stage_field_types(self, value: Any, kind: ImportKind, warnings: list[str]) -> None:
        for path, f in _iter_fields(value, kind):
            if f.field_type not in self._known_field_types:
                warnings.append(
                    f"{path}.field_type - nieznany rodzaj pola '{f.field_type}' "
                    f"(pole zostanie zaimportowane bez zmian)"
                )
            elif f.field_type in CHOICE_FIELD_TYPES and not f.options:
                warnings.append(f"{path}.options - pole wyboru '{f.id}' nie ma zdefiniowanych opcji")


def _iter_fields(value: Any, kind: ImportKind) -> Iterator[tuple[str, Field]]:
    def in_sections(sections: list[Section], base: str) -> Iterator[tuple[str, Field]]:
        for si, section in enumerate(sections):
            for fi, f in enumerate(section.fields):
                yield f"{base}[{si}].fields[{fi}]", f

    match kind:
        case ImportKind.FULL_FORM | ImportKind.PAGES_ONLY:
            pages = value.pages if kind is ImportKind.FULL_FORM else value
            for pi, page in enumerate(pages):
                yield from in_sections(page.sections, f"pages[{pi}].sections")
        case ImportKind.SECTIONS_ONLY:
            yield from in_sections(value, "sections")
        case ImportKind.SINGLE_SECTION:
            for fi, f in enumerate(value.fields):
                yield f"fields[{fi}]", f


# ---------------------------------------------------------------------------
# Funkcje modułowe
# ---------------------------------------------------------------------------

@functools.cache
def default_validator() -> FormValidator:
    """Współdzielony FormValidator (skompilowane schematy tworzone raz)."""
    return FormValidator()


def validate_shape(data: Any, kind: ImportKind) -> ValidationReport:
    return default_validator().validate(data, kind)


def validate_form(data: Any) -> ValidationReport:
    """Skrót: walidacja pełnego formularza (kształt FULL_FORM)."""
    return validate_shape(data, ImportKind.FULL_FORM)
