"""
Wybór magazynu dokumentów — konfiguracja przez zmienne środowiskowe.

  FORMWEAVE_STORE      file | pg        (domyślnie: file)
  FORMWEAVE_STORE_DIR  katalog plików   (domyślnie: ./forms)

Opcje CLI --store / --store-dir mają pierwszeństwo przed zmiennymi.
"""

from __future__ import annotations

import os

from storage import DocumentStore, JsonFileStore, PgDocumentStore

STORE_KINDS = ("file", "pg")


def get_store(kind: str | None = None, root: str | None = None) -> DocumentStore:
    kind = kind or os.getenv("FORMWEAVE_STORE", "file")
    if kind == "pg":
        from fw._db import get_connection
        return PgDocumentStore(get_connection())
    if kind != "file":
        raise ValueError(f"Nieznany rodzaj magazynu: {kind!r} (dozwolone: {', '.join(STORE_KINDS)})")
    return JsonFileStore(root or os.getenv("FORMWEAVE_STORE_DIR", "forms"))
