"""
storage/base.py — interfejs kolaboratora trwałości dokumentów.

Silnik importu nie interpretuje ani nie ponawia błędów zapisu; wyjątki
StorageError przechodzą do wywołującego bez zmian.
"""

from __future__ import annotations

from typing import Protocol

from data_model import Document, NodeId


class StorageError(RuntimeError):
    """Błąd warstwy trwałości (I/O, baza danych, uszkodzony zapis)."""


class DocumentNotFoundError(StorageError, LookupError):
    def __init__(self, document_id: NodeId) -> None:
        super().__init__(f"Brak dokumentu: {document_id}")
        self.document_id = document_id


class DocumentStore(Protocol):
    """Zapis / odczyt całego dokumentu (bez transakcji częściowych)."""

    def load_document(self, document_id: NodeId) -> Document: ...

    def save_document(self, doc: Document) -> Document: ...

    def exists(self, document_id: NodeId) -> bool: ...
