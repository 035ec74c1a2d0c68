"""
Struktury danych dokumentu formularza: Document → Page → Section → Field.

Każdy poziom drzewa jest właścicielem swoich dzieci (Page należy wyłącznie
do Document itd.). Silnik scalania buduje nowe kopie węzłów zamiast
przepinać istniejące referencje, więc wynik scalania nigdy nie współdzieli
obiektów z dokumentem sprzed scalenia.

Mapowanie na format wymiany:
  Document.name        ↔ name
  Document.form_type   ↔ formType
  Page.page_order      ↔ page_order
  Section.section_order↔ section_order
  Field.field_order    ↔ field_order
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator

from .common import AttrMap, FieldWidth, FormKind, FormStatus, NodeId


# ---------------------------------------------------------------------------
# Field
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Field:
    """
    Pole formularza.

    - id:          unikalny w obrębie sekcji
    - field_type:  rodzaj pola (otwarty napis, np. "text", "select")
    - label:       etykieta, niepusta
    - required:    domyślnie False
    - width:       domyślnie FieldWidth.FULL
    - field_order: pozycja wśród rodzeństwa (None gdy nieznana)

    Bloki konfiguracji (options, validation, conditional_visibility,
    calculated_config, lookup_config, metadata) są otwartymi mapami;
    None oznacza "nie skonfigurowano" i NIE jest równoważne pustej mapie.
    """
    id: NodeId
    field_type: str
    label: str
    placeholder: str | None = None
    help_text: str | None = None
    required: bool = False
    width: FieldWidth = FieldWidth.FULL
    field_order: int | None = None
    options: list[AttrMap] | None = None
    validation: AttrMap | None = None
    conditional_visibility: AttrMap | None = None
    calculated_config: AttrMap | None = None
    lookup_config: AttrMap | None = None
    metadata: AttrMap | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Section
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Section:
    """Sekcja strony: uporządkowana lista pól."""
    id: NodeId
    title: str
    description: str | None = None
    section_order: int | None = None
    settings: AttrMap = field(default_factory=dict)
    fields: list[Field] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Page:
    """Strona formularza. Do importu wymagana jest co najmniej jedna sekcja."""
    id: NodeId
    title: str
    description: str | None = None
    page_order: int | None = None
    settings: AttrMap = field(default_factory=dict)
    sections: list[Section] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Document:
    """
    Korzeń drzewa: kompletny formularz.

    Dokument bez stron jest poprawnym (pustym) dokumentem roboczym, ale nie
    przechodzi walidacji importu pełnego formularza.

    Pola status, version, tags, created_at, updated_at należą wyłącznie do
    reprezentacji wewnętrznej i są usuwane przy eksporcie.
    """
    id: NodeId
    name: str
    form_type: FormKind = FormKind.OTHER
    description: str | None = None
    pages: list[Page] = field(default_factory=list)
    status: FormStatus = FormStatus.DRAFT
    version: int = 1
    tags: list[str] = field(default_factory=list)
    settings: AttrMap = field(default_factory=dict)
    metadata: AttrMap = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_page(self, page_id: NodeId) -> Page | None:
        return next((p for p in self.pages if p.id == page_id), None)

    def iter_sections(self) -> Iterator[tuple[Page, Section]]:
        for page in self.pages:
            for section in page.sections:
                yield page, section

    def node_ids(self) -> set[tuple[NodeId, ...]]:
        """
        Zbiór identyfikatorów węzłów jako ścieżek:
        (page,), (page, section), (page, section, field).
        """
        ids: set[tuple[NodeId, ...]] = set()
        for page in self.pages:
            ids.add((page.id,))
            for section in page.sections:
                ids.add((page.id, section.id))
                for f in section.fields:
                    ids.add((page.id, section.id, f.id))
        return ids
