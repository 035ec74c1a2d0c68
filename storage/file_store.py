"""
storage/file_store.py — magazyn dokumentów w katalogu plików JSON.

Jeden plik <id>.json na dokument, w formacie data_model.codec.
Zapis jest atomowy: plik tymczasowy w tym samym katalogu + os.replace.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import re
import tempfile

from data_model import Document, NodeId, document_from_dict, document_to_dict

from .base import DocumentNotFoundError, StorageError

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$")


class JsonFileStore:
    """
    Użycie:
        store = JsonFileStore("forms/")
        doc   = store.load_document("form-1")
        store.save_document(doc)
    """

    def __init__(self, root: str | pathlib.Path) -> None:
        self.root = pathlib.Path(root)

    def _path(self, document_id: NodeId) -> pathlib.Path:
        if not _SAFE_ID_RE.match(document_id) or ".." in document_id:
            raise StorageError(f"Identyfikator nie nadaje się na nazwę pliku: {document_id!r}")
        return self.root / f"{document_id}.json"

    def exists(self, document_id: NodeId) -> bool:
        return self._path(document_id).exists()

    def load_document(self, document_id: NodeId) -> Document:
        path = self._path(document_id)
        if not path.exists():
            raise DocumentNotFoundError(document_id)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return document_from_dict(raw)
        except (json.JSONDecodeError, KeyError, ValueError) as exc:
            raise StorageError(f"Uszkodzony zapis dokumentu {path}: {exc}") from exc

    def save_document(self, doc: Document) -> Document:
        path = self._path(doc.id)
        payload = json.dumps(document_to_dict(doc), ensure_ascii=False, indent=2)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{doc.id}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"Nie można zapisać dokumentu {path}: {exc}") from exc
        logger.debug("Zapisano dokument %s → %s", doc.id, path)
        return doc

    def list_ids(self) -> list[NodeId]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))
