"""
validator/schemas.py — deklaracje akceptowanych kształtów importu (JSON Schema 2020-12).

Schematy opisują wyłącznie strukturę; reguły wymagające porównań między
węzłami (unikalność identyfikatorów) sprawdza FormValidator po etapie schematu.

Dodatkowe właściwości są dopuszczalne — eksporty starszych wersji edytora
mogą zawierać pola, których import nie interpretuje.
"""

from __future__ import annotations

from typing import Any

from data_model import FieldWidth, FormKind

from .types import ImportKind

_NON_EMPTY: dict[str, Any] = {"type": "string", "pattern": r"\S"}
_TEXT:      dict[str, Any] = {"type": "string"}
_ORDER:     dict[str, Any] = {"type": "integer", "minimum": 0}
_MAP:       dict[str, Any] = {"type": "object"}

OPTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["label", "value"],
    "properties": {
        "label":    _TEXT,
        "value":    _TEXT,
        "disabled": {"type": "boolean"},
        "metadata": _MAP,
    },
}

FIELD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "field_type", "label"],
    "properties": {
        "id":                     _NON_EMPTY,
        "field_type":             _NON_EMPTY,
        "label":                  _NON_EMPTY,
        "placeholder":            _TEXT,
        "help_text":              _TEXT,
        "required":               {"type": "boolean"},
        "width":                  {"enum": [str(w) for w in FieldWidth]},
        "field_order":            _ORDER,
        "options":                {"type": "array", "items": OPTION_SCHEMA},
        "validation":             _MAP,
        "conditional_visibility": _MAP,
        "calculated_config":      _MAP,
        "lookup_config":          _MAP,
        "metadata":               _MAP,
    },
}

SECTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "title"],
    "properties": {
        "id":            _NON_EMPTY,
        "title":         _NON_EMPTY,
        "description":   _TEXT,
        "section_order": _ORDER,
        "settings":      _MAP,
        "fields":        {"type": "array", "items": FIELD_SCHEMA},
    },
}

PAGE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "title", "sections"],
    "properties": {
        "id":          _NON_EMPTY,
        "title":       _NON_EMPTY,
        "description": _TEXT,
        "page_order":  _ORDER,
        "settings":    _MAP,
        "sections":    {"type": "array", "minItems": 1, "items": SECTION_SCHEMA},
    },
}

FULL_FORM_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["id", "name", "formType", "pages"],
    "properties": {
        "id":          _NON_EMPTY,
        "name":        _NON_EMPTY,
        "description": _TEXT,
        "formType":    {"enum": [str(k) for k in FormKind]},
        "pages":       {"type": "array", "minItems": 1, "items": PAGE_SCHEMA},
    },
}

PAGES_ONLY_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["pages"],
    "properties": {
        "pages": {"type": "array", "minItems": 1, "items": PAGE_SCHEMA},
    },
}

SECTIONS_ONLY_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["sections"],
    "properties": {
        "sections": {"type": "array", "minItems": 1, "items": SECTION_SCHEMA},
    },
}

SINGLE_SECTION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    **SECTION_SCHEMA,
    "required": ["id", "title", "fields"],
}

SHAPE_SCHEMAS: dict[ImportKind, dict[str, Any]] = {
    ImportKind.FULL_FORM:      FULL_FORM_SCHEMA,
    ImportKind.PAGES_ONLY:     PAGES_ONLY_SCHEMA,
    ImportKind.SECTIONS_ONLY:  SECTIONS_ONLY_SCHEMA,
    ImportKind.SINGLE_SECTION: SINGLE_SECTION_SCHEMA,
}
