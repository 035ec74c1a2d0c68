"""
form_import/normalize.py — sprowadzenie każdego kształtu importu do listy
stron-kandydatów, na której pracuje wspólny algorytm analizy i scalania.

  full_form / pages_only      → strony importu bez zmian
  sections_only / single_*    → jedna strona: docelowa (gdy wskazana i istnieje)
                                albo syntetyczna "Imported Section(s)"
"""

from __future__ import annotations

import uuid

from data_model import Document, NodeId, Page
from validator import ImportKind

from .types import ClassifiedImport

SYNTHETIC_PAGE_TITLES: dict[ImportKind, tuple[str, str]] = {
    ImportKind.SECTIONS_ONLY:  ("Imported Sections", "Page created for imported sections"),
    ImportKind.SINGLE_SECTION: ("Imported Section", "Page created for imported section"),
}


def synthetic_page_id() -> NodeId:
    return f"page-{uuid.uuid4()}"


def resolve_target_page(
    existing: Document | None,
    target_page_id: NodeId | None,
) -> Page | None:
    if existing is None or not target_page_id:
        return None
    return existing.find_page(target_page_id)


def candidate_pages(
    imp: ClassifiedImport,
    existing: Document | None = None,
    target_page_id: NodeId | None = None,
) -> list[Page]:
    """
    Zwraca strony-kandydatów importu.

    Dla importu częściowego strona-kandydat dzieli identyfikator ze stroną
    docelową, więc wspólny algorytm dopasuje ją do strony istniejącej.
    Zwrócone sekcje są obiektami importu — nie wolno ich modyfikować.
    """
    if not imp.is_partial:
        return imp.pages()

    target = resolve_target_page(existing, target_page_id)
    if target is not None:
        return [Page(id=target.id, title=target.title, sections=imp.sections())]

    title, description = SYNTHETIC_PAGE_TITLES[imp.kind]
    return [Page(
        id=synthetic_page_id(),
        title=title,
        description=description,
        sections=imp.sections(),
    )]
