"""Analiza konfliktów: podsumowanie, konflikty, blokady, dozwolone tryby."""

from __future__ import annotations

import copy

import pytest
from conftest import classified

from form_import import (
    ConflictResolution,
    ConflictType,
    MergeMode,
    ResolutionAction,
    allowed_modes,
    analyze,
)
from validator import ErrorCode, ImportKind


class TestSectionsOnlyScenario:
    def test_append_reports_conflict_and_new_section(self, existing_doc, sections_payload):
        analysis = analyze(classified(sections_payload), existing_doc, MergeMode.APPEND)

        [conflict] = analysis.conflicts
        assert conflict.type is ConflictType.DUPLICATE_SECTION
        assert conflict.section_id == "s1"
        assert conflict.page_id == "p1"
        assert conflict.key == "p1-s1"
        assert conflict.suggested_action is ResolutionAction.SKIP
        assert analysis.summary.new_sections == 1
        assert analysis.summary.replaced_sections == 0
        assert analysis.summary.total_fields == 1
        assert analysis.requires_target_page
        assert analysis.can_proceed

    def test_append_with_target_page(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, target_page_id="p1"
        )
        assert [c.key for c in analysis.conflicts] == ["p1-s1"]
        assert analysis.summary.new_pages == 0
        assert analysis.summary.new_sections == 1

    def test_replace_counts_replacement(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.REPLACE_MATCHING, "p1"
        )
        assert analysis.conflicts == []
        assert analysis.summary.replaced_sections == 1
        assert analysis.summary.new_sections == 1

    def test_missing_target_page_warns(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, target_page_id="nope"
        )
        assert analysis.conflicts == []
        assert analysis.summary.new_pages == 1
        assert analysis.summary.new_sections == 2
        assert any("nope" in w for w in analysis.warnings)


class TestResolutions:
    def test_overwrite_resolution_counts_as_replaced(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": "overwrite"},
        )
        assert analysis.summary.replaced_sections == 1
        assert analysis.can_proceed

    def test_rename_counts_as_new(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": ConflictResolution(ResolutionAction.RENAME, "s1-copy")},
        )
        assert analysis.summary.new_sections == 2
        assert analysis.is_valid

    def test_rename_without_new_id_blocks(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": ResolutionAction.RENAME},
        )
        assert not analysis.can_proceed
        [err] = analysis.errors
        assert err.code is ErrorCode.UNRESOLVED_RENAME
        assert err.path == "p1-s1"

    def test_rename_to_taken_id_blocks(self, three_section_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), three_section_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": ConflictResolution(ResolutionAction.RENAME, "s3")},
        )
        assert not analysis.can_proceed
        assert analysis.errors[0].code is ErrorCode.UNRESOLVED_RENAME

    @pytest.mark.parametrize("reverse", [False, True])
    def test_rename_onto_other_imported_id_blocks(self, existing_doc, sections_payload, reverse):
        if reverse:
            sections_payload["sections"].reverse()
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": ConflictResolution(ResolutionAction.RENAME, "s2")},
        )

        assert not analysis.can_proceed
        [err] = analysis.errors
        assert err.code is ErrorCode.UNRESOLVED_RENAME
        assert "'s2'" in err.message

    def test_unknown_action_is_reported(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND, "p1",
            resolutions={"p1-s1": "Overwrite"},
        )

        assert not analysis.can_proceed
        [err] = analysis.errors
        assert err.code is ErrorCode.UNKNOWN_RESOLUTION
        assert err.path == "p1-s1"
        assert analysis.summary.replaced_sections == 0


class TestWithoutTargetPage:
    def test_counts_synthetic_page(self, existing_doc, sections_payload):
        analysis = analyze(classified(sections_payload), existing_doc, MergeMode.APPEND)

        assert analysis.summary.new_pages == 1
        assert [c.key for c in analysis.conflicts] == ["p1-s1"]
        assert any("strony docelowej" in w for w in analysis.warnings)

    def test_resolutions_are_not_applied(self, existing_doc, sections_payload):
        analysis = analyze(
            classified(sections_payload), existing_doc, MergeMode.APPEND,
            resolutions={"p1-s1": ResolutionAction.RENAME},
        )

        assert analysis.errors == []
        assert analysis.can_proceed
        assert analysis.summary.replaced_sections == 0


class TestFullFormAndPages:
    def test_no_existing_document(self, full_form_payload):
        analysis = analyze(classified(full_form_payload), None, MergeMode.APPEND)

        assert analysis.summary.new_pages == 2
        assert analysis.summary.new_sections == 2
        assert analysis.summary.total_fields == 3
        assert analysis.conflicts == []

    def test_overwrite_full_form(self, existing_doc, full_form_payload):
        analysis = analyze(classified(full_form_payload), existing_doc, MergeMode.OVERWRITE)

        assert analysis.can_proceed
        assert analysis.conflicts == []
        assert analysis.summary.new_pages == 2

    def test_overwrite_partial_not_allowed(self, existing_doc, pages_payload):
        analysis = analyze(classified(pages_payload), existing_doc, MergeMode.OVERWRITE)

        assert not analysis.can_proceed
        [err] = analysis.errors
        assert err.code is ErrorCode.MODE_NOT_ALLOWED
        assert err.details["allowed"] == ["append", "replace-matching"]

    def test_append_full_form(self, existing_doc, full_form_payload):
        analysis = analyze(classified(full_form_payload), existing_doc, MergeMode.APPEND)

        assert [c.key for c in analysis.conflicts] == ["p1-s1"]
        assert analysis.summary.new_pages == 1
        assert analysis.summary.new_sections == 1

    def test_pages_only_new_page(self, existing_doc, pages_payload):
        analysis = analyze(classified(pages_payload), existing_doc, MergeMode.APPEND)

        assert analysis.summary.new_pages == 1
        assert analysis.summary.new_sections == 1
        assert not analysis.requires_target_page


def test_analyze_is_pure(existing_doc, sections_payload):
    imp = classified(sections_payload)
    doc_before, imp_before = copy.deepcopy(existing_doc), copy.deepcopy(imp)

    analyze(imp, existing_doc, MergeMode.REPLACE_MATCHING, "p1", {"p1-s1": "skip"})

    assert existing_doc == doc_before
    assert imp == imp_before


class TestAllowedModes:
    def test_partial_against_existing(self, existing_doc):
        assert MergeMode.OVERWRITE not in allowed_modes(ImportKind.SECTIONS_ONLY, existing_doc)

    def test_full_form_or_empty(self, existing_doc):
        assert MergeMode.OVERWRITE in allowed_modes(ImportKind.FULL_FORM, existing_doc)
        assert MergeMode.OVERWRITE in allowed_modes(ImportKind.SINGLE_SECTION, None)
