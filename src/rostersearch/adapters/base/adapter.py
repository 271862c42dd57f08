"""Base search adapter — Abstract interface for all index connectors.

Every index backend must implement this interface. The adapter is
responsible for:
  1. Writing and deleting documents (overwrite by ``id``)
  2. Executing compiled queries, rendering them in the backend's syntax
  3. Fetching individual documents
  4. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from rostersearch.models.query import CompiledQuery


class AdapterHealth(BaseModel):
    """Health status of an index adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class RawResults(BaseModel):
    """Raw matching documents from a backend, before visibility re-checks."""

    total_hits: int = Field(default=0, description="Total number of matching documents")
    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw document dicts")
    took_ms: int = Field(default=0, description="Backend query execution time in ms")


class SearchAdapter(ABC):
    """Abstract base class for index adapters.

    Adapters hold no per-request state and must be safe to call
    concurrently once initialized. Any failed round trip raises a
    ``SearchServiceError`` subclass; partial results are never returned.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'solr', 'memory')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections and verify the backend is reachable."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close connections and release resources."""

    @abstractmethod
    async def index_documents(self, collection: str, documents: list[dict[str, Any]]) -> None:
        """Write documents, replacing any existing document with the same ``id``.

        Raises:
            IndexingError: If the backend rejects the write.
        """

    @abstractmethod
    async def delete_documents(self, collection: str, doc_ids: list[str]) -> None:
        """Delete documents by ``id``. Unknown ids are ignored."""

    @abstractmethod
    async def delete_all(self, collection: str) -> None:
        """Delete every document in the collection."""

    @abstractmethod
    async def search(self, collection: str, query: CompiledQuery, limit: int) -> RawResults:
        """Execute a compiled query.

        Args:
            collection: Collection to search.
            query: Primary clause plus conjunctive filter clauses.
            limit: Maximum number of documents to return.

        Returns:
            Raw matching documents.

        Raises:
            QueryError: If the backend rejects the query.
        """

    @abstractmethod
    async def fetch_document(self, collection: str, doc_id: str) -> dict[str, Any]:
        """Retrieve a single document by its ``id``.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the backend."""
