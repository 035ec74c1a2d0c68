"""
Wspólne fiksury testów formweave.

Dokument istniejący: formularz "form-1" z jedną stroną p1, na niej sekcja s1
z dwoma polami (f1, f2); pozycje gęste od 1.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

import pytest

from data_model import Document, Field, FormKind, Page, Section
from form_import import ClassifiedImport, classify_and_validate

T0  = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 6, 15, 12, 30, 45, tzinfo=timezone.utc)


# =============================================================================
# Dokumenty
# =============================================================================

def make_section(section_id: str, order: int, n_fields: int = 2, title: str | None = None) -> Section:
    return Section(
        id=section_id,
        title=title or f"Section {section_id}",
        section_order=order,
        fields=[
            Field(
                id=f"f{i}",
                field_type="text",
                label=f"Field {i}",
                field_order=i,
                created_at=T0,
                updated_at=T0,
            )
            for i in range(1, n_fields + 1)
        ],
        created_at=T0,
        updated_at=T0,
    )


@pytest.fixture
def existing_doc() -> Document:
    return Document(
        id="form-1",
        name="Appraisal",
        form_type=FormKind.UAD_3_6,
        description="Existing form",
        pages=[
            Page(
                id="p1",
                title="Page 1",
                page_order=1,
                sections=[make_section("s1", 1)],
                created_at=T0,
                updated_at=T0,
            ),
        ],
        created_at=T0,
        updated_at=T0,
    )


@pytest.fixture
def three_section_doc(existing_doc: Document) -> Document:
    page = existing_doc.pages[0]
    page.sections = [make_section("s1", 1), make_section("s2", 2), make_section("s3", 3)]
    return existing_doc


# =============================================================================
# Ładunki importu (format wymiany)
# =============================================================================

@pytest.fixture
def sections_payload() -> dict[str, Any]:
    return {
        "sections": [
            {
                "id": "s1",
                "title": "New S1",
                "fields": [{"id": "f1", "field_type": "text", "label": "X"}],
            },
            {"id": "s2", "title": "S2", "fields": []},
        ]
    }


@pytest.fixture
def single_section_payload() -> dict[str, Any]:
    return {
        "id": "s9",
        "title": "Single",
        "fields": [
            {"id": "a", "field_type": "select", "label": "Pick",
             "options": [{"label": "Yes", "value": "y"}]},
        ],
    }


@pytest.fixture
def pages_payload() -> dict[str, Any]:
    return {
        "pages": [
            {
                "id": "p2",
                "title": "Page 2",
                "sections": [
                    {"id": "s20", "title": "S20",
                     "fields": [{"id": "g1", "field_type": "number", "label": "Amount"}]},
                ],
            }
        ]
    }


@pytest.fixture
def full_form_payload() -> dict[str, Any]:
    return {
        "id": "form-1",
        "name": "Imported Appraisal",
        "formType": "UAD_3_6",
        "description": "From file",
        "pages": [
            {
                "id": "p1",
                "title": "Page 1",
                "page_order": 5,
                "sections": [
                    {
                        "id": "s1",
                        "title": "Subject",
                        "section_order": 3,
                        "fields": [
                            {"id": "f1", "field_type": "text", "label": "Address",
                             "required": True, "width": "half", "field_order": 9},
                            {"id": "f3", "field_type": "textarea", "label": "Notes",
                             "validation": {}},
                        ],
                    }
                ],
            },
            {
                "id": "p9",
                "title": "Page 9",
                "sections": [
                    {"id": "s90", "title": "S90",
                     "fields": [{"id": "h1", "field_type": "checkbox", "label": "Ok"}]},
                ],
            },
        ],
    }


# =============================================================================
# Pomocnicze
# =============================================================================

def classified(payload: Any) -> ClassifiedImport:
    """Klasyfikuje ładunek, który musi być poprawny."""
    report = classify_and_validate(copy.deepcopy(payload))
    assert report.is_valid, report.messages
    return report.value


def section_ids(page: Page) -> list[str]:
    return [s.id for s in page.sections]
