import asyncio
import json
import os
import uuid
from abc import ABC, abstractmethod
from typing import Any

from finance_tracker.domain.errors import ConflictError, StoreError
from finance_tracker.logger import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]

TRANSACTIONS = "transactions"
BUDGETS = "budgets"


def _matches(document: Document, query: dict[str, Any] | None) -> bool:
    if not query:
        return True
    return all(document.get(key) == value for key, value in query.items())


def _check_unique(
    collection: str, documents: list[Document], candidate: Document, unique_on: tuple[str, ...]
) -> None:
    if not unique_on:
        return
    key = {field: candidate.get(field) for field in unique_on}
    if any(_matches(doc, key) for doc in documents):
        raise ConflictError(f"Duplicate {collection} key: {key}")


class DocumentStore(ABC):
    """Minimal document database used by the services."""

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @abstractmethod
    async def find(self, collection: str, query: dict[str, Any] | None = None) -> list[Document]:
        """All documents whose fields equal every value in ``query``."""
        pass

    @abstractmethod
    async def insert(
        self, collection: str, document: Document, unique_on: tuple[str, ...] = ()
    ) -> Document:
        """Store a copy of ``document`` under a new ``id`` and return it.

        With ``unique_on``, raise ``ConflictError`` if another document already
        has the same values for those fields. Check and write are atomic.
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        document_id: str,
        fields: Document,
        unique_on: tuple[str, ...] = (),
    ) -> Document | None:
        """Merge ``fields`` into the document; None when the id is unknown.

        ``unique_on`` works as for ``insert``, ignoring the document itself.
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> bool:
        pass

    async def find_one(self, collection: str, query: dict[str, Any]) -> Document | None:
        found = await self.find(collection, query)
        return found[0] if found else None


class JsonDocumentStore(DocumentStore):
    """One JSON file per collection, held in memory between writes."""

    def __init__(self, data_dir: str = ".", name: str = "finance_manager"):
        self.data_dir = data_dir
        self.name = name
        self._collections: dict[str, list[Document]] | None = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._collections is not None

    def path_for(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{self.name}.{collection}.json")

    def _read_file(self, collection: str) -> list[Document]:
        path = self.path_for(collection)
        if not os.path.exists(path):
            return []
        try:
            with open(path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Failed to read {collection} from {path}: {exc}") from exc
        if not isinstance(data, list):
            raise StoreError(f"Failed to read {collection} from {path}: expected a JSON list")
        return data

    def _write_file(self, collection: str, documents: list[Document]) -> None:
        path = self.path_for(collection)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(documents, handle, indent=2)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StoreError(f"Failed to write {collection} to {path}: {exc}") from exc

    def _require(self) -> dict[str, list[Document]]:
        if self._collections is None:
            raise StoreError("Document store is not connected")
        return self._collections

    async def _load(self, collection: str) -> list[Document]:
        collections = self._require()
        if collection not in collections:
            collections[collection] = await asyncio.to_thread(self._read_file, collection)
        return collections[collection]

    async def connect(self) -> None:
        if self._collections is not None:
            return
        try:
            os.makedirs(self.data_dir, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Data directory {self.data_dir} is not usable: {exc}") from exc
        self._collections = {}
        logger.info("[STORE] Connected to '%s' in %s", self.name, os.path.abspath(self.data_dir))

    async def close(self) -> None:
        if self._collections is None:
            return
        self._collections = None
        logger.info("[STORE] Closed '%s'", self.name)

    async def find(self, collection: str, query: dict[str, Any] | None = None) -> list[Document]:
        async with self._lock:
            documents = await self._load(collection)
            return [dict(doc) for doc in documents if _matches(doc, query)]

    async def insert(
        self, collection: str, document: Document, unique_on: tuple[str, ...] = ()
    ) -> Document:
        async with self._lock:
            documents = await self._load(collection)
            _check_unique(collection, documents, document, unique_on)
            stored = {**document, "id": uuid.uuid4().hex}
            updated = [*documents, stored]
            await asyncio.to_thread(self._write_file, collection, updated)
            self._require()[collection] = updated
            logger.debug("[STORE] Inserted %s/%s", collection, stored["id"])
            return dict(stored)

    async def update(
        self,
        collection: str,
        document_id: str,
        fields: Document,
        unique_on: tuple[str, ...] = (),
    ) -> Document | None:
        async with self._lock:
            documents = await self._load(collection)
            for index, doc in enumerate(documents):
                if doc.get("id") == document_id:
                    merged = {**doc, **fields, "id": document_id}
                    others = [other for other in documents if other is not doc]
                    _check_unique(collection, others, merged, unique_on)
                    updated = [*documents[:index], merged, *documents[index + 1:]]
                    await asyncio.to_thread(self._write_file, collection, updated)
                    self._require()[collection] = updated
                    logger.debug("[STORE] Updated %s/%s", collection, document_id)
                    return dict(merged)
            return None

    async def delete(self, collection: str, document_id: str) -> bool:
        async with self._lock:
            documents = await self._load(collection)
            remaining = [doc for doc in documents if doc.get("id") != document_id]
            if len(remaining) == len(documents):
                return False
            await asyncio.to_thread(self._write_file, collection, remaining)
            self._require()[collection] = remaining
            logger.debug("[STORE] Deleted %s/%s", collection, document_id)
            return True
