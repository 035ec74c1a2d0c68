"""
form_import/types.py — typy klasyfikacji, analizy konfliktów i scalania.

ClassifiedImport  — unia oznaczona {kind, data}: sklasyfikowany i zwalidowany import.
MergeMode         — polityka scalania: overwrite | append | replace-matching.
ImportConflict    — kolizja identyfikatora sekcji importu z sekcją istniejącą.
ImportAnalysis    — wynik analizy: konflikty, podsumowanie, can_proceed.
ConflictResolution— decyzja wywołującego dla jednej pary strona-sekcja.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from data_model import Document, NodeId, Page, Section
from validator import ErrorCode, ImportKind, ValidationError

# Kształty częściowe wymagają strony docelowej przy scalaniu.
PARTIAL_KINDS: frozenset[ImportKind] = frozenset(
    {ImportKind.SECTIONS_ONLY, ImportKind.SINGLE_SECTION}
)


class ImportModeError(ValueError):
    """Naruszenie warunku wstępnego scalania (np. overwrite dla importu częściowego)."""


# ---------------------------------------------------------------------------
# Tryby i rozstrzygnięcia
# ---------------------------------------------------------------------------

class MergeMode(StrEnum):
    """Polityka scalania wybrana przez operatora."""
    OVERWRITE        = "overwrite"
    APPEND           = "append"
    REPLACE_MATCHING = "replace-matching"


class ResolutionAction(StrEnum):
    SKIP      = "skip"
    OVERWRITE = "overwrite"
    RENAME    = "rename"


class ConflictType(StrEnum):
    DUPLICATE_SECTION = "duplicate_section"


@dataclass(frozen=True, slots=True)
class ConflictResolution:
    """
    Rozstrzygnięcie konfliktu.

    - action: skip | overwrite | rename
    - new_id: nowy identyfikator sekcji (wymagany dla rename)
    """
    action: ResolutionAction
    new_id: NodeId | None = None


# Klucz: "<pageId>-<sectionId>"; wartość: akcja (także jako napis) lub pełne rozstrzygnięcie.
Resolutions: TypeAlias = Mapping[str, ConflictResolution | ResolutionAction | str]


def conflict_key(page_id: NodeId, section_id: NodeId) -> str:
    return f"{page_id}-{section_id}"


def parse_resolutions(
    resolutions: Resolutions | None,
) -> tuple[dict[str, ConflictResolution], list[ValidationError]]:
    """
    Sprowadza mapę rozstrzygnięć do postaci {klucz: ConflictResolution}.

    Wpisy z nieznaną akcją są pomijane i zwracane jako błędy E_UNKNOWN_RESOLUTION.
    """
    out: dict[str, ConflictResolution] = {}
    errors: list[ValidationError] = []
    for key, value in (resolutions or {}).items():
        if isinstance(value, ConflictResolution):
            out[key] = value
            continue
        try:
            out[key] = ConflictResolution(ResolutionAction(value))
        except ValueError:
            errors.append(ValidationError(
                code=ErrorCode.UNKNOWN_RESOLUTION,
                path=key,
                message=(
                    f"Nieznana akcja rozstrzygnięcia {value!r} "
                    f"(dozwolone: {', '.join(ResolutionAction)})"
                ),
                details={"got": value},
            ))
    return out, errors


def normalize_resolutions(
    resolutions: Resolutions | None,
) -> dict[str, ConflictResolution]:
    """Jak parse_resolutions, ale nieznana akcja to ImportModeError."""
    out, errors = parse_resolutions(resolutions)
    if errors:
        raise ImportModeError(errors[0].message)
    return out


# ---------------------------------------------------------------------------
# Import sklasyfikowany
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ClassifiedImport:
    """
    Unia oznaczona wyniku klasyfikacji.

      FULL_FORM      → data: Document
      PAGES_ONLY     → data: list[Page]
      SECTIONS_ONLY  → data: list[Section]
      SINGLE_SECTION → data: Section
    """
    kind: ImportKind
    data: Document | list[Page] | list[Section] | Section

    @property
    def is_partial(self) -> bool:
        return self.kind in PARTIAL_KINDS

    def sections(self) -> list[Section]:
        """Sekcje importu częściowego (pusta lista dla pozostałych kształtów)."""
        match self.kind:
            case ImportKind.SECTIONS_ONLY:
                return list(self.data)
            case ImportKind.SINGLE_SECTION:
                return [self.data]
        return []

    def pages(self) -> list[Page]:
        """Strony importu pełnego / stronicowego (pusta lista dla częściowych)."""
        match self.kind:
            case ImportKind.FULL_FORM:
                return list(self.data.pages)
            case ImportKind.PAGES_ONLY:
                return list(self.data)
        return []


# ---------------------------------------------------------------------------
# Analiza
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ImportConflict:
    """
    Wykryta kolizja identyfikatorów.

    - type:             rodzaj konfliktu (duplicate_section)
    - page_id:          strona będąca właścicielem istniejącej sekcji
    - section_id:       identyfikator sekcji
    - message:          opis dla człowieka
    - suggested_action: proponowane rozstrzygnięcie
    """
    type: ConflictType
    page_id: NodeId
    section_id: NodeId
    message: str
    suggested_action: ResolutionAction

    @property
    def key(self) -> str:
        return conflict_key(self.page_id, self.section_id)


@dataclass(slots=True)
class ImportSummary:
    new_pages: int = 0
    new_sections: int = 0
    replaced_sections: int = 0
    total_fields: int = 0


@dataclass(slots=True)
class ImportAnalysis:
    """
    Wynik analizy importu względem dokumentu istniejącego.

    - is_valid:             False gdy analiza wykryła błędy blokujące
    - can_proceed:          czy można wywołać merge z podanymi rozstrzygnięciami
    - requires_target_page: import częściowy — wywołujący musi wskazać stronę
    """
    import_kind: ImportKind
    summary: ImportSummary
    conflicts: list[ImportConflict] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    can_proceed: bool = True
    requires_target_page: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors
