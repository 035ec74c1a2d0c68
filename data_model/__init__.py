"""
data_model — struktury danych dokumentu formularza.

Użycie:
  from data_model import Document, Page, Section, Field, FormKind, ...

Moduły:
  common     — NodeId, AttrMap, FormKind, FieldWidth, FormStatus, utcnow
  forms      — Document, Page, Section, Field
  constants  — KNOWN_FIELD_TYPES, CHOICE_FIELD_TYPES, FIELD_CONFIG_BLOCKS
  codec      — document_to_dict / document_from_dict (format przechowywania)

Hierarchia:
  Document.pages    → list[Page]
  Page.sections     → list[Section]   (≥1 przy imporcie)
  Section.fields    → list[Field]
"""

from .common import (
    NodeId,
    AttrMap,
    FormKind,
    FieldWidth,
    FormStatus,
    utcnow,
)
from .forms import (
    Field,
    Section,
    Page,
    Document,
)
from .constants import (
    KNOWN_FIELD_TYPES,
    CHOICE_FIELD_TYPES,
    FIELD_CONFIG_BLOCKS,
)
from .codec import (
    document_to_dict,
    document_from_dict,
)

__all__ = [
    # common
    "NodeId",
    "AttrMap",
    "FormKind",
    "FieldWidth",
    "FormStatus",
    "utcnow",
    # forms
    "Field",
    "Section",
    "Page",
    "Document",
    # constants
    "KNOWN_FIELD_TYPES",
    "CHOICE_FIELD_TYPES",
    "FIELD_CONFIG_BLOCKS",
    # codec
    "document_to_dict",
    "document_from_dict",
]
