"""In-memory adapter — A process-local Whoosh index with the same clause semantics as Solr.

Useful for local runs and tests where no Solr instance is available. Each
collection is a Whoosh index in RAM: the free-text field is analysed like
Solr's ``text_general`` (word tokens, lowercased, no stop words) and parsed
with Whoosh's query parser, so ``AND`` / ``OR`` / phrases behave the way
they do against Solr. Filter fields are indexed as untokenized ``ID`` fields
and matched exactly.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from whoosh.analysis import StandardAnalyzer
from whoosh.fields import ID, STORED, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.index import Index
from whoosh.qparser import QueryParser
from whoosh.query import And, Every, Or, Query, Term

from rostersearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from rostersearch.adapters.base.exceptions import ConnectionError, DocumentNotFoundError, IndexingError
from rostersearch.models.document import (
    COURSE_ID_FIELD,
    EMAIL_FIELD,
    ID_FIELD,
    NAME_FIELD,
    REGISTRATION_STATUS_FIELD,
    SECTION_FIELD,
    TEAM_FIELD,
    TEXT_FIELD,
    first_value,
)
from rostersearch.models.query import CompiledQuery

logger = logging.getLogger(__name__)

# Whoosh rejects field names starting with an underscore
_SCHEMA_NAMES: dict[str, str] = {
    ID_FIELD: "id",
    TEXT_FIELD: "text",
    COURSE_ID_FIELD: COURSE_ID_FIELD,
    EMAIL_FIELD: EMAIL_FIELD,
    NAME_FIELD: NAME_FIELD,
    TEAM_FIELD: TEAM_FIELD,
    SECTION_FIELD: SECTION_FIELD,
    REGISTRATION_STATUS_FIELD: REGISTRATION_STATUS_FIELD,
}
_DOCUMENT_NAMES = {v: k for k, v in _SCHEMA_NAMES.items()}


def _make_schema() -> Schema:
    return Schema(
        id=ID(stored=True, unique=True),
        text=TEXT(stored=True, analyzer=StandardAnalyzer(stoplist=None, minsize=1)),
        courseId=ID(stored=True),
        email=ID(stored=True),
        name=STORED(),
        team=ID(stored=True),
        section=ID(stored=True),
        registrationStatus=ID(stored=True),
    )


def _to_row(document: dict[str, Any]) -> dict[str, str]:
    """Map an index document to Whoosh field values, leaving out empty ones."""
    if not first_value(document.get(ID_FIELD)):
        raise IndexingError("Document has no 'id' field.")
    row = {}
    for field, schema_name in _SCHEMA_NAMES.items():
        value = first_value(document.get(field))
        if value is not None and value != "":
            row[schema_name] = str(value)
    return row


def _to_document(stored: dict[str, Any]) -> dict[str, Any]:
    return {field: stored.get(schema_name, "") for schema_name, field in _DOCUMENT_NAMES.items()}


class MemoryAdapter(SearchAdapter):
    """Whoosh ``RamStorage`` index adapter.

    Documents are stored per collection, keyed by ``id``; writing an
    existing id replaces the stored document. Everything is dropped on
    shutdown.
    """

    def __init__(self, writer_limit_mb: int = 32) -> None:
        self._writer_limit_mb = writer_limit_mb
        self._indexes: dict[str, Index] | None = None

    @property
    def name(self) -> str:
        return "memory"

    async def initialize(self) -> None:
        if self._indexes is None:
            self._indexes = {}
        logger.info("In-memory index ready")

    async def shutdown(self) -> None:
        self._indexes = None

    async def index_documents(self, collection: str, documents: list[dict[str, Any]]) -> None:
        # Nothing is written unless every document in the batch is valid
        rows = [_to_row(document) for document in documents]
        if not rows:
            return
        with self._index(collection).writer(limitmb=self._writer_limit_mb) as writer:
            for row in rows:
                writer.update_document(**row)
        logger.debug("Indexed %d documents into '%s'", len(rows), collection)

    async def delete_documents(self, collection: str, doc_ids: list[str]) -> None:
        if not doc_ids:
            return
        with self._index(collection).writer() as writer:
            for doc_id in doc_ids:
                writer.delete_by_term("id", doc_id)

    async def delete_all(self, collection: str) -> None:
        indexes = self._require_indexes()
        indexes[collection] = RamStorage().create_index(_make_schema())
        logger.info("Deleted all documents from in-memory collection '%s'", collection)

    async def search(self, collection: str, query: CompiledQuery, limit: int) -> RawResults:
        start = time.monotonic()
        index = self._index(collection)

        if query.matches_all:
            primary: Query = Every()
        else:
            primary = QueryParser("text", schema=index.schema).parse(query.text)

        restrict = None
        if query.filters:
            restrict = And(
                [Or([Term(_SCHEMA_NAMES[c.field], v) for v in c.values]) for c in query.filters]
            )

        with index.searcher() as searcher:
            results = searcher.search(primary, limit=None, filter=restrict)
            total_hits = results.scored_length()
            documents = [_to_document(hit.fields()) for hit in results[:limit]]

        return RawResults(
            total_hits=total_hits,
            documents=documents,
            took_ms=int((time.monotonic() - start) * 1000),
        )

    async def fetch_document(self, collection: str, doc_id: str) -> dict[str, Any]:
        with self._index(collection).searcher() as searcher:
            stored = searcher.document(id=doc_id)
        if stored is None:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found.")
        return _to_document(stored)

    async def health_check(self) -> AdapterHealth:
        if self._indexes is None:
            return AdapterHealth(status="unhealthy", message="Index not initialized")
        total = sum(index.doc_count() for index in self._indexes.values())
        return AdapterHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message=f"{len(self._indexes)} collections, {total} documents",
        )

    def _require_indexes(self) -> dict[str, Index]:
        if self._indexes is None:
            raise ConnectionError("In-memory index not initialized.")
        return self._indexes

    def _index(self, collection: str) -> Index:
        indexes = self._require_indexes()
        if collection not in indexes:
            indexes[collection] = RamStorage().create_index(_make_schema())
        return indexes[collection]
