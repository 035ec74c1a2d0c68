"""
storage/pg_store.py — magazyn dokumentów w PostgreSQL (tabela form_document).

Dokument przechowywany jest w całości jako JSONB (format data_model.codec);
zapis to upsert jednego wiersza — bez transakcji częściowych.
Schemat tabeli: storage/schema.sql (komenda: fw apply-schema).
"""

from __future__ import annotations

import logging

import psycopg2
import psycopg2.extras

from data_model import Document, NodeId, document_from_dict, document_to_dict

from .base import DocumentNotFoundError, StorageError

logger = logging.getLogger(__name__)

_SELECT_DOCUMENT = "SELECT body FROM form_document WHERE id = %s"

_EXISTS_DOCUMENT = "SELECT 1 FROM form_document WHERE id = %s"

_UPSERT_DOCUMENT = """
    INSERT INTO form_document (id, name, form_type, body, updated_at)
    VALUES (%s, %s, %s, %s, now())
    ON CONFLICT (id) DO UPDATE SET
        name       = EXCLUDED.name,
        form_type  = EXCLUDED.form_type,
        body       = EXCLUDED.body,
        updated_at = EXCLUDED.updated_at
"""


class PgDocumentStore:
    """
    Użycie:
        from fw._db import get_connection
        store = PgDocumentStore(get_connection())
    """

    def __init__(self, conn) -> None:
        self._conn = conn

    def exists(self, document_id: NodeId) -> bool:
        try:
            with self._conn.cursor() as cur:
                cur.execute(_EXISTS_DOCUMENT, (document_id,))
                return cur.fetchone() is not None
        except psycopg2.Error as exc:
            raise StorageError(f"Błąd odczytu dokumentu {document_id}: {exc}") from exc

    def load_document(self, document_id: NodeId) -> Document:
        try:
            with self._conn.cursor() as cur:
                cur.execute(_SELECT_DOCUMENT, (document_id,))
                row = cur.fetchone()
        except psycopg2.Error as exc:
            raise StorageError(f"Błąd odczytu dokumentu {document_id}: {exc}") from exc
        if row is None:
            raise DocumentNotFoundError(document_id)
        # psycopg2 dekoduje jsonb do dict
        return document_from_dict(row[0])

    def save_document(self, doc: Document) -> Document:
        body = psycopg2.extras.Json(document_to_dict(doc))
        try:
            with self._conn.cursor() as cur:
                cur.execute(_UPSERT_DOCUMENT, (doc.id, doc.name, str(doc.form_type), body))
            self._conn.commit()
        except psycopg2.Error as exc:
            self._conn.rollback()
            raise StorageError(f"Błąd zapisu dokumentu {doc.id}: {exc}") from exc
        logger.debug("Zapisano dokument %s w form_document", doc.id)
        return doc
