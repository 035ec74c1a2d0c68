"""Klasyfikacja kształtu importu i pełna ścieżka parse → classify → validate."""

from __future__ import annotations

import json

import pytest

from data_model import Document, Section
from form_import import (
    ACCEPTED_SHAPES,
    ClassifiedImport,
    classify,
    classify_and_validate,
    describe_import_kind,
    detect_kind,
)
from validator import ErrorCode, ImportKind


class TestDetectKind:
    def test_canonical_shapes(
        self, full_form_payload, pages_payload, sections_payload, single_section_payload
    ):
        assert detect_kind(full_form_payload) is ImportKind.FULL_FORM
        assert detect_kind(pages_payload) is ImportKind.PAGES_ONLY
        assert detect_kind(sections_payload) is ImportKind.SECTIONS_ONLY
        assert detect_kind(single_section_payload) is ImportKind.SINGLE_SECTION

    def test_full_form_wins_over_pages(self, full_form_payload):
        # pełny formularz też ma "pages", decyduje komplet kluczy
        assert detect_kind(full_form_payload) is ImportKind.FULL_FORM
        del full_form_payload["formType"]
        assert detect_kind(full_form_payload) is ImportKind.PAGES_ONLY

    def test_pages_must_be_array(self):
        assert detect_kind({"pages": {"p1": {}}}) is None

    def test_sections_preferred_over_single_section(self):
        payload = {"id": "s", "title": "S", "fields": [], "sections": []}
        assert detect_kind(payload) is ImportKind.SECTIONS_ONLY

    @pytest.mark.parametrize("value", [{}, {"foo": 1}, [], "x", None])
    def test_unrecognized(self, value):
        assert detect_kind(value) is None


class TestClassify:
    def test_unrecognized_lists_all_shapes(self):
        report = classify({"title": "Lonely"})

        assert not report.is_valid
        [err] = report.errors
        assert err.code is ErrorCode.SHAPE_UNRECOGNIZED
        assert err.path == "$"
        assert err.details["accepted"] == list(ACCEPTED_SHAPES.values())
        for hint in ACCEPTED_SHAPES.values():
            assert hint in err.message

    def test_classified_but_invalid(self):
        report = classify({"sections": []})

        assert report.kind is ImportKind.SECTIONS_ONLY
        assert not report.is_valid
        assert report.errors[0].code is ErrorCode.MIN_ITEMS

    def test_value_is_tagged_union(self, single_section_payload):
        report = classify(single_section_payload)

        assert report.is_valid
        imp = report.value
        assert isinstance(imp, ClassifiedImport)
        assert imp.kind is ImportKind.SINGLE_SECTION
        assert isinstance(imp.data, Section)
        assert imp.is_partial
        assert [s.id for s in imp.sections()] == ["s9"]
        assert imp.pages() == []

    def test_full_form_pages(self, full_form_payload):
        imp = classify(full_form_payload).value

        assert isinstance(imp.data, Document)
        assert not imp.is_partial
        assert [p.id for p in imp.pages()] == ["p1", "p9"]
        assert imp.sections() == []


class TestClassifyAndValidate:
    def test_accepts_text_and_bytes(self, pages_payload):
        raw = json.dumps(pages_payload)

        assert classify_and_validate(raw).kind is ImportKind.PAGES_ONLY
        assert classify_and_validate(raw.encode("utf-8")).kind is ImportKind.PAGES_ONLY

    def test_parse_error_before_classification(self):
        report = classify_and_validate('{"pages": [')

        assert not report.is_valid
        assert report.kind is None
        [err] = report.errors
        assert err.code is ErrorCode.PARSE
        assert err.details["line"] == 1

    def test_bad_encoding_is_parse_error(self):
        report = classify_and_validate(b"\xff\xfe\x00garbage")

        assert [e.code for e in report.errors] == [ErrorCode.PARSE]

    def test_already_parsed_value(self, sections_payload):
        report = classify_and_validate(sections_payload)
        assert report.is_valid
        assert report.value.kind is ImportKind.SECTIONS_ONLY


def test_every_kind_has_description():
    for kind in ImportKind:
        assert describe_import_kind(kind)
