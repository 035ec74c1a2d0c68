"""
exporter/builder.py — budowa minimalnego, publicznego dokumentu eksportu.

build_export(doc, now=None) -> ExportResult

Kroki:
  1. konwersja Document → słownik w kształcie pełnego formularza importu
     (puste opisy, puste settings, required=false są pomijane; bloki
     konfiguracji pola są emitowane zawsze, gdy są skonfigurowane — także
     puste — żeby rozróżnienie "brak" / "pusty" przeżyło ponowny import)
  2. rekurencyjne usunięcie atrybutów przejściowych (stan UI, znaczniki
     czasu, referencje do rodzica, flagi synchronizacji) — także wewnątrz
     otwartych map
  3. ponowna walidacja względem schematu pełnego formularza; wynik
     strukturalnie niepoprawny (np. strona bez sekcji) to błąd eksportu
  4. propozycja nazwy pliku: form-<slug>-<YYYY-MM-DDTHH-MM-SS>.json
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from data_model import FIELD_CONFIG_BLOCKS, Document, Field, Page, Section, utcnow
from validator import ValidationError, validate_form

logger = logging.getLogger(__name__)

TRANSIENT_KEYS: frozenset[str] = frozenset({
    # stan UI
    "isSelected", "isEditing", "isDirty", "isExpanded", "isVisible", "editMode",
    "selectedFieldId", "selectedSectionId", "selectedPageId", "dragState",
    "dropZone", "isHovered", "isFocused", "isActive", "uiState", "editorState",
    "previewMode",
    # metadane bazy danych
    "created_at", "updated_at", "created_by", "updated_by", "form_id",
    "page_id", "section_id", "version", "status",
    # referencje wewnętrzne
    "parentId", "childIds", "siblingIds", "depth", "index", "path",
    # stan tymczasowy
    "tempId", "isNew", "isDeleted", "pendingChanges", "validationErrors",
    "lastModified", "syncStatus",
})


@dataclass(slots=True)
class ExportResult:
    """
    Wynik eksportu.

    - is_valid: True gdy dokument przeszedł ponowną walidację
    - value:    oczyszczony słownik (None przy błędzie)
    - errors:   błędy walidacji wyniku
    - filename: proponowana nazwa pliku (None przy błędzie)
    """
    is_valid: bool
    value: dict[str, Any] | None = None
    errors: list[ValidationError] = field(default_factory=list)
    filename: str | None = None

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]

    def to_json(self) -> str:
        if self.value is None:
            raise ValueError("Eksport nie powiódł się — brak dokumentu do serializacji")
        return json.dumps(self.value, ensure_ascii=False, indent=2)


# ---------------------------------------------------------------------------
# Nazwa pliku
# ---------------------------------------------------------------------------

def slugify(name: str) -> str:
    """'Ankieta Łąki 2024!' → 'ankieta-aki-2024' (ASCII, małe litery, myślniki)."""
    raw = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    raw = re.sub(r"[^a-z0-9\s-]", "", raw.lower())
    raw = re.sub(r"\s+", "-", raw.strip())
    raw = re.sub(r"-{2,}", "-", raw).strip("-")
    return raw or "untitled"


def export_filename(name: str, now: datetime | None = None) -> str:
    stamp = (now or utcnow()).isoformat()[:19].replace(":", "-")
    return f"form-{slugify(name)}-{stamp}.json"


# ---------------------------------------------------------------------------
# Konwersja
# ---------------------------------------------------------------------------

def _field_out(f: Field, position: int) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id":         f.id,
        "field_type": f.field_type,
        "label":      f.label,
    }
    if f.placeholder:
        out["placeholder"] = f.placeholder
    if f.help_text:
        out["help_text"] = f.help_text
    if f.required:
        out["required"] = True
    out["width"] = str(f.width)
    out["field_order"] = f.field_order if f.field_order is not None else position
    for block in FIELD_CONFIG_BLOCKS:
        value = getattr(f, block)
        if value is not None:
            out[block] = value
    return out


def _section_out(s: Section, position: int) -> dict[str, Any]:
    out: dict[str, Any] = {"id": s.id, "title": s.title}
    if s.description:
        out["description"] = s.description
    out["section_order"] = s.section_order if s.section_order is not None else position
    if s.settings:
        out["settings"] = s.settings
    out["fields"] = [_field_out(f, i) for i, f in enumerate(s.fields, start=1)]
    return out


def _page_out(p: Page, position: int) -> dict[str, Any]:
    out: dict[str, Any] = {"id": p.id, "title": p.title}
    if p.description:
        out["description"] = p.description
    out["page_order"] = p.page_order if p.page_order is not None else position
    if p.settings:
        out["settings"] = p.settings
    out["sections"] = [_section_out(s, i) for i, s in enumerate(p.sections, start=1)]
    return out


def to_exportable(doc: Document) -> dict[str, Any]:
    out: dict[str, Any] = {"id": doc.id, "name": doc.name}
    if doc.description:
        out["description"] = doc.description
    out["formType"] = str(doc.form_type)
    out["pages"] = [_page_out(p, i) for i, p in enumerate(doc.pages, start=1)]
    return out


def strip_transient(value: Any) -> Any:
    """Rekurencyjnie usuwa klucze z TRANSIENT_KEYS i wartości None (zwraca kopię)."""
    if isinstance(value, dict):
        return {
            k: strip_transient(v)
            for k, v in value.items()
            if k not in TRANSIENT_KEYS and v is not None
        }
    if isinstance(value, list):
        return [strip_transient(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Publiczny interfejs
# ---------------------------------------------------------------------------

def build_export(doc: Document, now: datetime | None = None) -> ExportResult:
    """Buduje eksport dokumentu; błędy zwraca w ExportResult, nie rzuca."""
    cleaned = strip_transient(to_exportable(doc))
    report = validate_form(cleaned)

    if not report.is_valid:
        logger.warning(
            "Eksport formularza '%s' odrzucony: %d błąd(ów)", doc.id, len(report.errors)
        )
        return ExportResult(is_valid=False, errors=report.errors)

    logger.info("Eksport formularza '%s' gotowy", doc.id)
    return ExportResult(
        is_valid=True,
        value=cleaned,
        filename=export_filename(doc.name, now),
    )
