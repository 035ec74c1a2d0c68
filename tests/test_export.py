"""Eksport: czyszczenie, ponowna walidacja, nazwa pliku, round-trip."""

from __future__ import annotations

import json

import pytest
from conftest import NOW, classified

from data_model import Document, Field, Page, Section
from exporter import build_export, export_filename, slugify, strip_transient
from form_import import MergeMode, classify_and_validate, merge
from validator import ErrorCode, ImportKind


class TestRoundTrip:
    def test_merge_result_reimports_as_full_form(self, existing_doc, sections_payload):
        merged = merge(
            classified(sections_payload), existing_doc, MergeMode.REPLACE_MATCHING, "p1", now=NOW
        )
        result = build_export(merged, now=NOW)

        assert result.is_valid
        report = classify_and_validate(result.to_json())
        assert report.kind is ImportKind.FULL_FORM
        assert report.errors == []
        assert report.value.data.node_ids() == merged.node_ids()

    def test_omitted_vs_empty_block_survives(self, full_form_payload):
        doc = merge(classified(full_form_payload), None, MergeMode.OVERWRITE, now=NOW)
        value = build_export(doc).value

        address, notes = value["pages"][0]["sections"][0]["fields"]
        assert "validation" not in address
        assert notes["validation"] == {}

        again = classified(value).data.pages[0].sections[0].fields
        assert again[0].validation is None
        assert again[1].validation == {}


class TestCleaning:
    def test_minimal_shape(self, existing_doc):
        value = build_export(existing_doc).value

        assert set(value) == {"id", "name", "description", "formType", "pages"}
        field = value["pages"][0]["sections"][0]["fields"][0]
        assert field == {
            "id": "f1",
            "field_type": "text",
            "label": "Field 1",
            "width": "full",
            "field_order": 1,
        }
        assert "settings" not in value["pages"][0]

    def test_transient_keys_stripped_inside_open_maps(self, existing_doc):
        f = existing_doc.pages[0].sections[0].fields[0]
        f.required = True
        f.metadata = {"isSelected": True, "source": "legacy", "nested": {"tempId": "x", "keep": 1}}
        existing_doc.pages[0].settings = {"isExpanded": False}

        value = build_export(existing_doc).value
        page = value["pages"][0]
        field = page["sections"][0]["fields"][0]

        assert field["required"] is True
        assert field["metadata"] == {"source": "legacy", "nested": {"keep": 1}}
        assert page["settings"] == {}

    def test_strip_transient_returns_copy(self):
        src = {"a": [{"updated_at": "x", "b": None, "c": 1}], "created_at": "y"}
        assert strip_transient(src) == {"a": [{"c": 1}]}
        assert src["created_at"] == "y"


class TestInvalidExport:
    def test_page_without_sections_fails(self):
        doc = Document(id="form-x", name="Broken", pages=[Page(id="p1", title="Empty")])
        result = build_export(doc, now=NOW)

        assert not result.is_valid
        assert result.value is None
        assert result.filename is None
        assert result.errors[0].code is ErrorCode.MIN_ITEMS
        assert "'p1'" in result.messages[0]
        with pytest.raises(ValueError):
            result.to_json()

    def test_blank_label_fails(self):
        doc = Document(id="form-x", name="Broken", pages=[
            Page(id="p1", title="P", sections=[
                Section(id="s1", title="S", fields=[Field(id="f1", field_type="text", label="")]),
            ]),
        ])
        result = build_export(doc)
        assert [e.path for e in result.errors] == ["pages[0].sections[0].fields[0].label"]


class TestFilename:
    def test_format(self):
        assert export_filename("Ankieta Łąki 2024!", NOW) == \
            "form-ankieta-aki-2024-2024-06-15T12-30-45.json"

    def test_result_carries_filename(self, existing_doc):
        assert build_export(existing_doc, now=NOW).filename == \
            "form-appraisal-2024-06-15T12-30-45.json"

    @pytest.mark.parametrize("name, slug", [
        ("  Many   Spaces ", "many-spaces"),
        ("a--b", "a-b"),
        ("!!!", "untitled"),
        ("Café Form", "cafe-form"),
    ])
    def test_slugify(self, name, slug):
        assert slugify(name) == slug


def test_to_json_is_utf8_and_indented(existing_doc):
    existing_doc.name = "Wycena łąki"
    text = build_export(existing_doc).to_json()

    assert "Wycena łąki" in text
    assert json.loads(text)["name"] == "Wycena łąki"
    assert "\n  " in text
