"""
form_import/merge.py — silnik scalania importu z dokumentem istniejącym.

merge(imp, existing, mode, target_page_id=None, resolutions=None, now=None) -> Document

Polityki:
  overwrite         — nowy dokument zbudowany wyłącznie z importu
                      (tylko pełny formularz, chyba że existing is None)
  append            — nowe strony/sekcje dopisywane; kolizja sekcji = pominięcie,
                      chyba że rozstrzygnięcie dla pary strona-sekcja mówi inaczej
  replace-matching  — kolizja sekcji zawsze zastępuje treść sekcji, zachowując
                      jej pozycję i created_at; pozostałe sekcje strony bez zmian

Gwarancje:
  - funkcja czysta: argumenty nie są modyfikowane, wynik nie współdzieli
    z nimi obiektów (kopie głębokie / węzły budowane od zera),
  - każdy zapisany węzeł dostaje świeże znaczniki czasu (nowy: created+updated,
    zastąpiony: tylko updated),
  - lista rodzeństwa, do której coś wstawiono, jest numerowana od 1 według
    pozycji; wartości kolejności z importu są ignorowane.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime
from typing import Sequence

from data_model import (
    FIELD_CONFIG_BLOCKS,
    Document,
    Field,
    FormKind,
    NodeId,
    Page,
    Section,
    utcnow,
)
from validator import ImportKind

from .normalize import candidate_pages
from .types import (
    ClassifiedImport,
    ConflictResolution,
    ImportModeError,
    MergeMode,
    ResolutionAction,
    Resolutions,
    conflict_key,
    normalize_resolutions,
)

logger = logging.getLogger(__name__)

IMPORTED_FORM_NAME = "Imported Form"


# ---------------------------------------------------------------------------
# Budowa węzłów
# ---------------------------------------------------------------------------

def build_field(src: Field, order: int, now: datetime) -> Field:
    return Field(
        id=src.id,
        field_type=src.field_type,
        label=src.label,
        placeholder=src.placeholder,
        help_text=src.help_text,
        required=src.required,
        width=src.width,
        field_order=order,
        **{block: copy.deepcopy(getattr(src, block)) for block in FIELD_CONFIG_BLOCKS},
        created_at=now,
        updated_at=now,
    )


def build_section(
    src: Section,
    order: int | None,
    now: datetime,
    *,
    section_id: NodeId | None = None,
    created_at: datetime | None = None,
) -> Section:
    """Nowa sekcja z importu; pola numerowane od 1."""
    return Section(
        id=section_id or src.id,
        title=src.title,
        description=src.description,
        section_order=order,
        settings=copy.deepcopy(src.settings),
        fields=[build_field(f, i, now) for i, f in enumerate(src.fields, start=1)],
        created_at=created_at or now,
        updated_at=now,
    )


def build_page(src: Page, order: int | None, now: datetime) -> Page:
    return Page(
        id=src.id,
        title=src.title,
        description=src.description,
        page_order=order,
        settings=copy.deepcopy(src.settings),
        sections=[build_section(s, i, now) for i, s in enumerate(src.sections, start=1)],
        created_at=now,
        updated_at=now,
    )


def _renumber(nodes: Sequence[Page | Section], attr: str) -> None:
    for i, node in enumerate(nodes, start=1):
        setattr(node, attr, i)


# ---------------------------------------------------------------------------
# overwrite / brak dokumentu
# ---------------------------------------------------------------------------

def build_document(imp: ClassifiedImport, now: datetime) -> Document:
    """Dokument zbudowany wyłącznie z importu (pozycje od 1)."""
    pages = [build_page(p, i, now) for i, p in enumerate(candidate_pages(imp), start=1)]
    if imp.kind is ImportKind.FULL_FORM:
        src: Document = imp.data
        return Document(
            id=src.id,
            name=src.name,
            form_type=src.form_type,
            description=src.description,
            pages=pages,
            created_at=now,
            updated_at=now,
        )
    return Document(
        id=str(uuid.uuid4()),
        name=IMPORTED_FORM_NAME,
        form_type=FormKind.OTHER,
        pages=pages,
        created_at=now,
        updated_at=now,
    )


# ---------------------------------------------------------------------------
# append / replace-matching
# ---------------------------------------------------------------------------

def _merge_sections(
    page: Page,
    incoming: list[Section],
    mode: MergeMode,
    resolutions: dict[str, ConflictResolution],
    now: datetime,
) -> None:
    """Scala sekcje importu ze stroną `page` (kopią roboczą, modyfikowaną w miejscu)."""
    index = {s.id: i for i, s in enumerate(page.sections)}
    # zajęte: sekcje strony, wszystkie sekcje importu i nadane już nowe id
    taken = set(index) | {s.id for s in incoming}
    inserted = replaced = False

    for src in incoming:
        pos = index.get(src.id)
        if pos is None:
            page.sections.append(build_section(src, None, now))
            index[src.id] = len(page.sections) - 1
            inserted = True
            continue

        resolution = resolutions.get(conflict_key(page.id, src.id))
        action = resolution.action if resolution is not None else None

        if mode is MergeMode.REPLACE_MATCHING or action is ResolutionAction.OVERWRITE:
            current = page.sections[pos]
            page.sections[pos] = build_section(
                src, current.section_order, now, created_at=current.created_at
            )
            replaced = True
        elif action is ResolutionAction.RENAME:
            new_id = resolution.new_id
            if not new_id:
                raise ImportModeError(
                    f"Rozstrzygnięcie rename dla '{conflict_key(page.id, src.id)}' "
                    f"nie zawiera nowego identyfikatora"
                )
            if new_id in taken:
                raise ImportModeError(
                    f"Nowy identyfikator sekcji '{new_id}' jest już zajęty "
                    f"na stronie '{page.id}' lub w imporcie"
                )
            taken.add(new_id)
            page.sections.append(build_section(src, None, now, section_id=new_id))
            index[new_id] = len(page.sections) - 1
            inserted = True
        # append bez rozstrzygnięcia (lub skip): istniejąca sekcja zostaje

    if inserted:
        _renumber(page.sections, "section_order")
    if inserted or replaced:
        page.updated_at = now


def merge(
    imp: ClassifiedImport,
    existing: Document | None,
    mode: MergeMode,
    target_page_id: NodeId | None = None,
    resolutions: Resolutions | None = None,
    *,
    now: datetime | None = None,
) -> Document:
    """
    Scala import z dokumentem istniejącym według polityki `mode`.

    Args:
        imp:            sklasyfikowany i zwalidowany import
        existing:       bieżący dokument (None — brak dokumentu)
        mode:           polityka scalania
        target_page_id: strona docelowa dla importu częściowego; gdy brak lub
                        nie istnieje, tworzona jest strona syntetyczna
        resolutions:    rozstrzygnięcia konfliktów, klucz "<pageId>-<sectionId>"
        now:            znacznik czasu zapisu (domyślnie bieżący czas UTC)

    Raises:
        ImportModeError: overwrite dla importu innego niż pełny formularz przy
            istniejącym dokumencie; rename bez nowego lub z zajętym identyfikatorem
            (zajęte są sekcje strony i wszystkie sekcje importu); nieznana akcja
            rozstrzygnięcia.
    """
    now = now or utcnow()

    if existing is None or mode is MergeMode.OVERWRITE:
        if existing is not None and imp.kind is not ImportKind.FULL_FORM:
            raise ImportModeError(
                f"Tryb overwrite wymaga importu pełnego formularza (otrzymano: {imp.kind})"
            )
        logger.info("Scalanie %s: budowa nowego dokumentu (%s)", imp.kind, mode)
        return build_document(imp, now)

    res = normalize_resolutions(resolutions)
    result = copy.deepcopy(existing)
    result.updated_at = now

    if imp.kind is ImportKind.FULL_FORM:
        src: Document = imp.data
        result.name = src.name
        result.form_type = src.form_type
        if src.description is not None:
            result.description = src.description

    page_index = {p.id: i for i, p in enumerate(result.pages)}
    pages_inserted = False

    for page in candidate_pages(imp, existing, target_page_id):
        pos = page_index.get(page.id)
        if pos is None:
            result.pages.append(build_page(page, None, now))
            page_index[page.id] = len(result.pages) - 1
            pages_inserted = True
        else:
            _merge_sections(result.pages[pos], page.sections, mode, res, now)

    if pages_inserted:
        _renumber(result.pages, "page_order")

    logger.info(
        "Scalanie %s (%s) z dokumentem '%s': %d stron w wyniku",
        imp.kind, mode, existing.id, len(result.pages),
    )
    return result
