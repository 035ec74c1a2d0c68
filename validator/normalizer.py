"""
validator/normalizer.py — budowa typowanych węzłów z poprawnego JSON importu.

build_value(data, kind):
  - Zakłada, że dane przeszły etap schematu (struktura jest poprawna).
  - Zwraca nowe obiekty; otwarte mapy są kopiowane głęboko, więc wynik nie
    współdzieli stanu z wejściem.
  - Wartości domyślne: required=False, width=full, settings={}, fields=[].
  - Nieobecne bloki konfiguracji pola zostają None (nie pustą mapą).
  - Pozycje kolejności z wejścia są przenoszone bez zmian (silnik scalania
    i tak numeruje na nowo każdą listę, którą przepisuje).
"""

from __future__ import annotations

import copy
from typing import Any

from data_model import (
    FIELD_CONFIG_BLOCKS,
    Document,
    Field,
    FieldWidth,
    FormKind,
    Page,
    Section,
)

from .types import ImportKind


def _opt_block(raw: dict[str, Any], key: str) -> Any:
    value = raw.get(key)
    return copy.deepcopy(value) if value is not None else None


def field_from_wire(raw: dict[str, Any]) -> Field:
    return Field(
        id=raw["id"],
        field_type=raw["field_type"],
        label=raw["label"],
        placeholder=raw.get("placeholder"),
        help_text=raw.get("help_text"),
        required=raw.get("required", False),
        width=FieldWidth(raw.get("width", FieldWidth.FULL)),
        field_order=raw.get("field_order"),
        **{block: _opt_block(raw, block) for block in FIELD_CONFIG_BLOCKS},
    )


def section_from_wire(raw: dict[str, Any]) -> Section:
    return Section(
        id=raw["id"],
        title=raw["title"],
        description=raw.get("description"),
        section_order=raw.get("section_order"),
        settings=copy.deepcopy(raw.get("settings", {})),
        fields=[field_from_wire(f) for f in raw.get("fields", [])],
    )


def page_from_wire(raw: dict[str, Any]) -> Page:
    return Page(
        id=raw["id"],
        title=raw["title"],
        description=raw.get("description"),
        page_order=raw.get("page_order"),
        settings=copy.deepcopy(raw.get("settings", {})),
        sections=[section_from_wire(s) for s in raw["sections"]],
    )


def document_from_wire(raw: dict[str, Any]) -> Document:
    return Document(
        id=raw["id"],
        name=raw["name"],
        form_type=FormKind(raw["formType"]),
        description=raw.get("description"),
        pages=[page_from_wire(p) for p in raw["pages"]],
    )


def build_value(raw: dict[str, Any], kind: ImportKind) -> Any:
    """
    Zwraca typowaną wartość dla danego kształtu:

      FULL_FORM      → Document
      PAGES_ONLY     → list[Page]
      SECTIONS_ONLY  → list[Section]
      SINGLE_SECTION → Section
    """
    match kind:
        case ImportKind.FULL_FORM:
            return document_from_wire(raw)
        case ImportKind.PAGES_ONLY:
            return [page_from_wire(p) for p in raw["pages"]]
        case ImportKind.SECTIONS_ONLY:
            return [section_from_wire(s) for s in raw["sections"]]
        case ImportKind.SINGLE_SECTION:
            return section_from_wire(raw)
    raise ValueError(f"Nieznany rodzaj importu: {kind!r}")
