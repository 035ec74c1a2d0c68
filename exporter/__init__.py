"""
exporter — eksport dokumentu formularza do publicznego formatu wymiany.

Publiczne API:
  build_export(doc, now=None)   → ExportResult (value, errors, filename)
  export_filename(name, now)    → "form-<slug>-<znacznik czasu>.json"
  strip_transient(value)        → kopia bez atrybutów przejściowych
"""

from .builder import (
    TRANSIENT_KEYS,
    ExportResult,
    build_export,
    export_filename,
    slugify,
    strip_transient,
    to_exportable,
)

__all__ = [
    "TRANSIENT_KEYS",
    "ExportResult",
    "build_export",
    "export_filename",
    "slugify",
    "strip_transient",
    "to_exportable",
]
