"""
storage — kolaborator trwałości: odczyt / zapis całego dokumentu po id.

  DocumentStore          — protokół (load_document, save_document, exists)
  JsonFileStore          — katalog plików <id>.json
  PgDocumentStore        — PostgreSQL, tabela form_document (JSONB)
  StorageError, DocumentNotFoundError
"""

from .base import DocumentNotFoundError, DocumentStore, StorageError
from .file_store import JsonFileStore
from .pg_store import PgDocumentStore

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "StorageError",
    "JsonFileStore",
    "PgDocumentStore",
]
