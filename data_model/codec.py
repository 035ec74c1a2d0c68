"""
data_model/codec.py — reprezentacja wewnętrzna (słownik JSON) dokumentu.

Format przechowywania jest nadzbiorem formatu wymiany: zawiera dodatkowo
status, version, tags oraz znaczniki czasu (ISO-8601). Pominięte bloki
konfiguracji pola pozostają pominięte w obie strony.

Publiczne API:
  document_to_dict(doc)   -> dict
  document_from_dict(d)   -> Document
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .common import FieldWidth, FormKind, FormStatus
from .constants import FIELD_CONFIG_BLOCKS
from .forms import Document, Field, Page, Section


# ---------------------------------------------------------------------------
# Znaczniki czasu
# ---------------------------------------------------------------------------

def _ts_out(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _ts_in(value: Any) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


# ---------------------------------------------------------------------------
# Document → dict
# ---------------------------------------------------------------------------

def field_to_dict(f: Field) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id":         f.id,
        "field_type": f.field_type,
        "label":      f.label,
        "required":   f.required,
        "width":      str(f.width),
    }
    _put(out, "placeholder", f.placeholder)
    _put(out, "help_text", f.help_text)
    _put(out, "field_order", f.field_order)
    for block in FIELD_CONFIG_BLOCKS:
        _put(out, block, getattr(f, block))
    _put(out, "created_at", _ts_out(f.created_at))
    _put(out, "updated_at", _ts_out(f.updated_at))
    return out


def section_to_dict(s: Section) -> dict[str, Any]:
    out: dict[str, Any] = {"id": s.id, "title": s.title}
    _put(out, "description", s.description)
    _put(out, "section_order", s.section_order)
    out["settings"] = s.settings
    out["fields"] = [field_to_dict(f) for f in s.fields]
    _put(out, "created_at", _ts_out(s.created_at))
    _put(out, "updated_at", _ts_out(s.updated_at))
    return out


def page_to_dict(p: Page) -> dict[str, Any]:
    out: dict[str, Any] = {"id": p.id, "title": p.title}
    _put(out, "description", p.description)
    _put(out, "page_order", p.page_order)
    out["settings"] = p.settings
    out["sections"] = [section_to_dict(s) for s in p.sections]
    _put(out, "created_at", _ts_out(p.created_at))
    _put(out, "updated_at", _ts_out(p.updated_at))
    return out


def document_to_dict(doc: Document) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id":       doc.id,
        "name":     doc.name,
        "formType": str(doc.form_type),
    }
    _put(out, "description", doc.description)
    out.update({
        "status":   str(doc.status),
        "version":  doc.version,
        "tags":     list(doc.tags),
        "settings": doc.settings,
        "metadata": doc.metadata,
        "pages":    [page_to_dict(p) for p in doc.pages],
    })
    _put(out, "created_at", _ts_out(doc.created_at))
    _put(out, "updated_at", _ts_out(doc.updated_at))
    return out


# ---------------------------------------------------------------------------
# dict → Document
# ---------------------------------------------------------------------------

def field_from_dict(d: dict[str, Any]) -> Field:
    return Field(
        id=str(d["id"]),
        field_type=str(d.get("field_type", "")),
        label=str(d.get("label", "")),
        placeholder=d.get("placeholder"),
        help_text=d.get("help_text"),
        required=bool(d.get("required", False)),
        width=FieldWidth(d.get("width") or FieldWidth.FULL),
        field_order=d.get("field_order"),
        **{block: d.get(block) for block in FIELD_CONFIG_BLOCKS},
        created_at=_ts_in(d.get("created_at")),
        updated_at=_ts_in(d.get("updated_at")),
    )


def section_from_dict(d: dict[str, Any]) -> Section:
    return Section(
        id=str(d["id"]),
        title=str(d.get("title", "")),
        description=d.get("description"),
        section_order=d.get("section_order"),
        settings=dict(d.get("settings") or {}),
        fields=[field_from_dict(f) for f in d.get("fields") or []],
        created_at=_ts_in(d.get("created_at")),
        updated_at=_ts_in(d.get("updated_at")),
    )


def page_from_dict(d: dict[str, Any]) -> Page:
    return Page(
        id=str(d["id"]),
        title=str(d.get("title", "")),
        description=d.get("description"),
        page_order=d.get("page_order"),
        settings=dict(d.get("settings") or {}),
        sections=[section_from_dict(s) for s in d.get("sections") or []],
        created_at=_ts_in(d.get("created_at")),
        updated_at=_ts_in(d.get("updated_at")),
    )


def document_from_dict(d: dict[str, Any]) -> Document:
    return Document(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        form_type=FormKind(d.get("formType") or FormKind.OTHER),
        description=d.get("description"),
        pages=[page_from_dict(p) for p in d.get("pages") or []],
        status=FormStatus(d.get("status") or FormStatus.DRAFT),
        version=int(d.get("version", 1)),
        tags=list(d.get("tags") or []),
        settings=dict(d.get("settings") or {}),
        metadata=dict(d.get("metadata") or {}),
        created_at=_ts_in(d.get("created_at")),
        updated_at=_ts_in(d.get("updated_at")),
    )
