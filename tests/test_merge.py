"""Silnik scalania: polityki, kolejność, znaczniki czasu, czystość."""

from __future__ import annotations

import copy

import pytest
from conftest import NOW, T0, classified, section_ids

from data_model import Document, FormKind
from form_import import (
    ConflictResolution,
    ImportModeError,
    MergeMode,
    ResolutionAction,
    merge,
)
from form_import.merge import IMPORTED_FORM_NAME


def _ids(doc: Document) -> set[tuple[str, ...]]:
    return doc.node_ids()


class TestSectionsOnlyScenario:
    def test_append_keeps_existing_and_appends_new(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1", now=NOW
        )

        [page] = result.pages
        assert page.id == "p1"
        assert section_ids(page) == ["s1", "s2"]
        s1, s2 = page.sections
        assert [f.id for f in s1.fields] == ["f1", "f2"]
        assert s1.title == "Section s1"
        assert s1.updated_at == T0
        assert s2.fields == []
        assert (s2.section_order, s2.created_at) == (2, NOW)

    def test_replace_swaps_content_in_place(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.REPLACE_MATCHING, "p1", now=NOW
        )

        page = result.pages[0]
        assert section_ids(page) == ["s1", "s2"]
        s1 = page.sections[0]
        assert s1.title == "New S1"
        assert [f.id for f in s1.fields] == ["f1"]
        assert s1.fields[0].label == "X"
        assert s1.section_order == 1
        assert s1.created_at == T0
        assert s1.updated_at == NOW
        assert page.updated_at == NOW


class TestReplaceMatching:
    def test_preserves_position(self, three_section_doc):
        payload = {"id": "s2", "title": "Replaced", "fields": [
            {"id": "z", "field_type": "text", "label": "Z"},
        ]}
        result = merge(
            classified(payload), three_section_doc, MergeMode.REPLACE_MATCHING, "p1", now=NOW
        )

        page = result.pages[0]
        assert section_ids(page) == ["s1", "s2", "s3"]
        assert page.sections[1].title == "Replaced"
        assert page.sections[1].section_order == 2
        assert [s.section_order for s in page.sections] == [1, 2, 3]

    def test_ignores_skip_resolution(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.REPLACE_MATCHING, "p1",
            {"p1-s1": "skip"}, now=NOW,
        )
        assert result.pages[0].sections[0].title == "New S1"


class TestAppend:
    def test_idempotent_without_resolutions(self, existing_doc, full_form_payload):
        imp = classified(full_form_payload)
        once = merge(imp, existing_doc, MergeMode.APPEND, now=NOW)
        twice = merge(imp, once, MergeMode.APPEND, now=NOW)

        assert _ids(once) == _ids(twice)
        assert [p.id for p in twice.pages] == ["p1", "p9"]

    def test_new_page_appended_and_renumbered(self, existing_doc, pages_payload):
        result = merge(classified(pages_payload), existing_doc, MergeMode.APPEND, now=NOW)

        assert [(p.id, p.page_order) for p in result.pages] == [("p1", 1), ("p2", 2)]
        new_page = result.pages[1]
        assert new_page.created_at == NOW
        assert [f.field_order for f in new_page.sections[0].fields] == [1]

    def test_import_order_values_ignored(self, pages_payload):
        pages_payload["pages"][0]["page_order"] = 40
        pages_payload["pages"][0]["sections"][0]["section_order"] = 7
        result = merge(classified(pages_payload), None, MergeMode.APPEND, now=NOW)

        page = result.pages[0]
        assert page.page_order == 1
        assert page.sections[0].section_order == 1

    def test_overwrite_resolution(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            {"p1-s1": ResolutionAction.OVERWRITE}, now=NOW,
        )
        assert result.pages[0].sections[0].title == "New S1"

    def test_rename_resolution(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            {"p1-s1": ConflictResolution(ResolutionAction.RENAME, "s1-copy")}, now=NOW,
        )

        page = result.pages[0]
        assert section_ids(page) == ["s1", "s1-copy", "s2"]
        assert [s.section_order for s in page.sections] == [1, 2, 3]
        assert page.sections[0].title == "Section s1"
        assert page.sections[1].title == "New S1"

    @pytest.mark.parametrize("resolution", [
        ConflictResolution(ResolutionAction.RENAME),
        ConflictResolution(ResolutionAction.RENAME, "s1"),
    ])
    def test_rename_errors(self, existing_doc, sections_payload, resolution):
        with pytest.raises(ImportModeError):
            merge(
                classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
                {"p1-s1": resolution}, now=NOW,
            )

    @pytest.mark.parametrize("reverse", [False, True])
    def test_rename_onto_other_imported_id(self, existing_doc, sections_payload, reverse):
        if reverse:
            sections_payload["sections"].reverse()
        with pytest.raises(ImportModeError):
            merge(
                classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
                {"p1-s1": ConflictResolution(ResolutionAction.RENAME, "s2")}, now=NOW,
            )

    def test_unknown_action_rejected(self, existing_doc, sections_payload):
        with pytest.raises(ImportModeError):
            merge(
                classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
                {"p1-s1": "Overwrite"}, now=NOW,
            )

    def test_full_form_updates_metadata(self, existing_doc, full_form_payload):
        result = merge(classified(full_form_payload), existing_doc, MergeMode.APPEND, now=NOW)

        assert result.id == "form-1"
        assert result.name == "Imported Appraisal"
        assert result.description == "From file"
        assert result.created_at == T0
        assert result.updated_at == NOW


class TestPartialTargets:
    def test_without_target_creates_synthetic_page(self, existing_doc, single_section_payload):
        result = merge(classified(single_section_payload), existing_doc, MergeMode.APPEND, now=NOW)

        assert len(result.pages) == 2
        synthetic = result.pages[1]
        assert synthetic.id.startswith("page-")
        assert synthetic.title == "Imported Section"
        assert synthetic.page_order == 2
        assert section_ids(synthetic) == ["s9"]

    def test_missing_target_creates_synthetic_page(self, existing_doc, sections_payload):
        result = merge(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "ghost", now=NOW
        )
        assert result.pages[1].title == "Imported Sections"
        assert section_ids(result.pages[1]) == ["s1", "s2"]


class TestOverwrite:
    def test_identifier_set_equals_import(self, existing_doc, full_form_payload):
        imp = classified(full_form_payload)
        result = merge(imp, existing_doc, MergeMode.OVERWRITE, now=NOW)

        assert _ids(result) == imp.data.node_ids()
        assert result.form_type is FormKind.UAD_3_6
        assert [p.page_order for p in result.pages] == [1, 2]
        assert result.created_at == NOW

    def test_partial_import_rejected(self, existing_doc, sections_payload):
        with pytest.raises(ImportModeError):
            merge(classified(sections_payload), existing_doc, MergeMode.OVERWRITE, "p1")

    def test_partial_import_without_existing(self, sections_payload):
        result = merge(classified(sections_payload), None, MergeMode.OVERWRITE, now=NOW)

        assert result.name == IMPORTED_FORM_NAME
        assert result.form_type is FormKind.OTHER
        assert section_ids(result.pages[0]) == ["s1", "s2"]


@pytest.mark.parametrize("mode", list(MergeMode))
def test_merge_is_pure(existing_doc, full_form_payload, mode):
    imp = classified(full_form_payload)
    doc_before, imp_before = copy.deepcopy(existing_doc), copy.deepcopy(imp)

    result = merge(imp, existing_doc, mode, now=NOW)
    result.pages[0].sections[0].fields[0].label = "mutated"

    assert existing_doc == doc_before
    assert imp == imp_before


def test_default_timestamp_is_aware(existing_doc, pages_payload):
    result = merge(classified(pages_payload), existing_doc, MergeMode.APPEND)
    assert result.updated_at.tzinfo is not None
