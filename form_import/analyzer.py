"""
form_import/analyzer.py — analiza konfliktów importu względem dokumentu istniejącego.

analyze(imp, existing, mode, target_page_id=None, resolutions=None) -> ImportAnalysis

Przebieg:
  - brak dokumentu istniejącego        → wszystko nowe, brak konfliktów
  - overwrite + pełny formularz         → podsumowanie = liczności importu
  - overwrite + import częściowy/stron  → błąd trybu (can_proceed=False)
  - w pozostałych przypadkach           → dopasowanie stron i sekcji po id

Import częściowy bez wskazanej strony docelowej porównywany jest z sekcjami
całego dokumentu: konflikt wskazuje stronę, na której sekcja już istnieje.
Sekcje trafią wtedy na nową stronę, więc takie konflikty są informacyjne,
a rozstrzygnięcia nie są stosowane.

Funkcja jest czysta: nie modyfikuje argumentów i nie ma stanu ukrytego.
"""

from __future__ import annotations

import logging

from data_model import Document, NodeId, Page, Section
from validator import ErrorCode, ImportKind, ValidationError

from .normalize import candidate_pages, resolve_target_page
from .types import (
    ClassifiedImport,
    ConflictResolution,
    ConflictType,
    ImportAnalysis,
    ImportConflict,
    ImportSummary,
    MergeMode,
    ResolutionAction,
    Resolutions,
    parse_resolutions,
)

logger = logging.getLogger(__name__)


def allowed_modes(kind: ImportKind, existing: Document | None) -> list[MergeMode]:
    """Tryby scalania oferowane dla danego kształtu importu."""
    if existing is None or kind is ImportKind.FULL_FORM:
        return [MergeMode.OVERWRITE, MergeMode.APPEND, MergeMode.REPLACE_MATCHING]
    return [MergeMode.APPEND, MergeMode.REPLACE_MATCHING]


def _count_fields(pages: list[Page]) -> int:
    return sum(len(s.fields) for p in pages for s in p.sections)


def _count_sections(pages: list[Page]) -> int:
    return sum(len(p.sections) for p in pages)


def analyze(
    imp: ClassifiedImport,
    existing: Document | None,
    mode: MergeMode,
    target_page_id: NodeId | None = None,
    resolutions: Resolutions | None = None,
) -> ImportAnalysis:
    """
    Analizuje import i zwraca ImportAnalysis.

    Args:
        imp:            sklasyfikowany i zwalidowany import
        existing:       bieżący dokument (None — brak dokumentu)
        mode:           wybrana polityka scalania
        target_page_id: strona docelowa dla importu częściowego
        resolutions:    rozstrzygnięcia zebrane od użytkownika (klucz "page-section")
    """
    pages = candidate_pages(imp, existing, target_page_id)
    analysis = ImportAnalysis(
        import_kind=imp.kind,
        summary=ImportSummary(total_fields=_count_fields(pages)),
        requires_target_page=imp.is_partial,
    )

    if existing is None:
        analysis.summary.new_pages = len(pages)
        analysis.summary.new_sections = _count_sections(pages)
        return analysis

    if mode is MergeMode.OVERWRITE:
        if imp.kind is not ImportKind.FULL_FORM:
            analysis.errors.append(ValidationError(
                code=ErrorCode.MODE_NOT_ALLOWED,
                path="$",
                message=(
                    f"Tryb overwrite wymaga importu pełnego formularza "
                    f"(otrzymano: {imp.kind})"
                ),
                details={"allowed": [str(m) for m in allowed_modes(imp.kind, existing)]},
            ))
            analysis.can_proceed = False
            return analysis
        analysis.summary.new_pages = len(pages)
        analysis.summary.new_sections = _count_sections(pages)
        return analysis

    res, resolution_errors = parse_resolutions(resolutions)
    analysis.errors.extend(resolution_errors)

    if imp.is_partial and resolve_target_page(existing, target_page_id) is None:
        analysis.summary.new_pages = len(pages)
        if target_page_id:
            analysis.warnings.append(
                f"Strona docelowa '{target_page_id}' nie istnieje — "
                f"sekcje trafią na nową stronę"
            )
            analysis.summary.new_sections = _count_sections(pages)
        else:
            _walk_document_sections(imp.sections(), existing, analysis)
    else:
        _walk_pages(pages, existing, mode, res, analysis)

    analysis.can_proceed = not analysis.errors and not any(
        _is_blocking(c, res) for c in analysis.conflicts
    )
    logger.info(
        "Analiza importu %s (%s): %d nowych stron, %d nowych sekcji, "
        "%d zastąpionych, %d konfliktów",
        imp.kind, mode,
        analysis.summary.new_pages,
        analysis.summary.new_sections,
        analysis.summary.replaced_sections,
        len(analysis.conflicts),
    )
    return analysis


# ---------------------------------------------------------------------------
# Przejście drzewa
# ---------------------------------------------------------------------------

def _walk_pages(
    pages: list[Page],
    existing: Document,
    mode: MergeMode,
    res: dict[str, ConflictResolution],
    analysis: ImportAnalysis,
) -> None:
    existing_pages = {p.id: p for p in existing.pages}
    for page in pages:
        current = existing_pages.get(page.id)
        if current is None:
            analysis.summary.new_pages += 1
            analysis.summary.new_sections += len(page.sections)
            continue
        existing_ids = {s.id for s in current.sections}
        # zajęte: sekcje strony, wszystkie sekcje importu i nadane już nowe id
        taken = existing_ids | {s.id for s in page.sections}
        for section in page.sections:
            if section.id not in existing_ids:
                analysis.summary.new_sections += 1
            else:
                _collision(current, section, taken, mode, res, analysis)


def _walk_document_sections(
    sections: list[Section],
    existing: Document,
    analysis: ImportAnalysis,
) -> None:
    """
    Import częściowy bez strony docelowej: sekcje trafią na nową stronę,
    więc konflikty są jedynie informacyjne, a rozstrzygnięcia nie działają.
    """
    owners: dict[NodeId, Page] = {}
    for page, section in existing.iter_sections():
        owners.setdefault(section.id, page)
    conflicted = 0
    for section in sections:
        owner = owners.get(section.id)
        if owner is None:
            analysis.summary.new_sections += 1
            continue
        analysis.conflicts.append(_conflict(owner, section))
        conflicted += 1
    if conflicted:
        analysis.warnings.append(
            f"Brak strony docelowej: {conflicted} sekcji koliduje z sekcjami formularza; "
            f"rozstrzygnięcia konfliktów zadziałają dopiero po wskazaniu strony docelowej"
        )


def _conflict(page: Page, section: Section) -> ImportConflict:
    return ImportConflict(
        type=ConflictType.DUPLICATE_SECTION,
        page_id=page.id,
        section_id=section.id,
        message=f'Sekcja "{section.title}" już istnieje na stronie "{page.title}"',
        suggested_action=ResolutionAction.SKIP,
    )


def _collision(
    page: Page,
    section: Section,
    taken: set[NodeId],
    mode: MergeMode,
    res: dict[str, ConflictResolution],
    analysis: ImportAnalysis,
) -> None:
    if mode is MergeMode.REPLACE_MATCHING:
        analysis.summary.replaced_sections += 1
        return

    conflict = _conflict(page, section)
    analysis.conflicts.append(conflict)

    resolution = res.get(conflict.key)
    if resolution is None:
        return
    match resolution.action:
        case ResolutionAction.OVERWRITE:
            analysis.summary.replaced_sections += 1
        case ResolutionAction.RENAME:
            if not resolution.new_id:
                analysis.errors.append(ValidationError(
                    code=ErrorCode.UNRESOLVED_RENAME,
                    path=conflict.key,
                    message=f"Zmiana nazwy sekcji '{section.id}' wymaga podania nowego identyfikatora",
                ))
            elif resolution.new_id in taken:
                analysis.errors.append(ValidationError(
                    code=ErrorCode.UNRESOLVED_RENAME,
                    path=conflict.key,
                    message=(
                        f"Nowy identyfikator '{resolution.new_id}' jest już zajęty "
                        f"na stronie '{page.id}' lub w imporcie"
                    ),
                ))
            else:
                taken.add(resolution.new_id)
                analysis.summary.new_sections += 1


def _is_blocking(conflict: ImportConflict, res: dict[str, ConflictResolution]) -> bool:
    if conflict.suggested_action is not ResolutionAction.RENAME:
        return False
    resolution = res.get(conflict.key)
    return resolution is None or not resolution.new_id
