"""Apache Solr adapter — Student index over Solr's JSON Request API.

Connects to Apache Solr (v8+) using ``httpx`` (async). Documents are
written through ``/update`` (Solr's ``uniqueKey`` is ``id``, so a re-write
replaces the previous version) and queried through ``/select``.

Usage::

    adapter = SolrAdapter(base_url="http://localhost:8983/solr")
    await adapter.initialize()
    results = await adapter.search("students", compiled_query, limit=100)
"""

from __future__ import annotations

import logging
import re
import time
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from rostersearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from rostersearch.adapters.base.exceptions import (
    ConnectionError,
    DocumentNotFoundError,
    IndexingError,
    QueryError,
)
from rostersearch.models.document import TEXT_FIELD
from rostersearch.models.query import MATCH_ALL, CompiledQuery, FilterClause

logger = logging.getLogger(__name__)

# Characters that terminate or escape a Solr phrase
_PHRASE_SPECIAL = re.compile(r'(["\\])')


class SolrAdapter(SearchAdapter):
    """Index adapter for Apache Solr (v8+).

    The primary clause is parsed with ``edismax`` over the free-text field;
    each filter clause becomes one ``fq`` entry of quoted, escaped phrases.

    Args:
        base_url: Solr base URL, e.g. ``"http://localhost:8983/solr"``.
        username: Optional basic-auth username.
        password: Optional basic-auth password.
        timeout: HTTP request timeout in seconds.
        ping_collection: Collection pinged on startup and by health checks.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8983/solr",
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        ping_collection: str = "students",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._password = password
        self._timeout = timeout
        self._ping_collection = ping_collection
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "solr"

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` and ping the Solr admin API."""
        auth = None
        if self._username and self._password:
            auth = httpx.BasicAuth(self._username, self._password)

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            auth=auth,
        )

        try:
            resp = await self._client.get(f"/{self._ping_collection}/admin/ping")
            resp.raise_for_status()
            logger.info(
                "Connected to Solr collection '%s' at %s",
                self._ping_collection,
                self._base_url,
            )
        except httpx.HTTPError as e:
            await self.shutdown()
            raise ConnectionError(f"Failed to connect to Solr: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Writes ───────────────────────────────────────────────────────────

    async def index_documents(self, collection: str, documents: list[dict[str, Any]]) -> None:
        """Add or replace documents and commit."""
        if not documents:
            return
        await self._update(collection, documents, action="index")
        logger.debug("Indexed %d documents into '%s'", len(documents), collection)

    async def delete_documents(self, collection: str, doc_ids: list[str]) -> None:
        """Delete documents by id and commit."""
        if not doc_ids:
            return
        await self._update(collection, {"delete": list(doc_ids)}, action="delete")

    async def delete_all(self, collection: str) -> None:
        """Delete every document in the collection and commit."""
        await self._update(collection, {"delete": {"query": MATCH_ALL}}, action="delete")
        logger.info("Deleted all documents from Solr collection '%s'", collection)

    async def _update(self, collection: str, body: Any, action: str) -> None:
        client = self._require_client()
        try:
            resp = await client.post(
                f"/{collection}/update",
                json=body,
                params={"commit": "true"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise IndexingError(f"Solr {action} failed: {e}") from e

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, collection: str, query: CompiledQuery, limit: int) -> RawResults:
        """Execute a compiled query against Solr using the JSON Request API."""
        client = self._require_client()

        params: dict[str, Any] = {
            "query": MATCH_ALL if query.matches_all else query.text,
            "limit": limit,
            "offset": 0,
            "params": {
                "defType": "edismax",
                "qf": TEXT_FIELD,
                "q.alt": MATCH_ALL,
            },
        }
        if query.filters:
            params["filter"] = [self.render_filter(clause) for clause in query.filters]

        try:
            start = time.monotonic()
            resp = await client.post(f"/{collection}/select", json=params)
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Solr query failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"Solr returned an unreadable response: {e}") from e

        response_section = data.get("response") if isinstance(data, dict) else None
        if not isinstance(response_section, dict):
            raise QueryError("Solr response has no 'response' section")

        try:
            return RawResults(
                total_hits=response_section.get("numFound", 0),
                documents=response_section.get("docs", []),
                took_ms=took_ms,
            )
        except ValidationError as e:
            raise QueryError(f"Solr returned malformed results: {e}") from e

    async def fetch_document(self, collection: str, doc_id: str) -> dict[str, Any]:
        """Retrieve a single document through Solr's real-time get handler."""
        client = self._require_client()

        try:
            resp = await client.get(f"/{collection}/get", params={"id": doc_id})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to fetch document from Solr: {e}") from e
        except ValueError as e:
            raise QueryError(f"Solr returned an unreadable response: {e}") from e

        if not isinstance(data, dict):
            raise QueryError("Solr returned a malformed real-time get response")
        doc = data.get("doc")
        if doc is None:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found.")
        if not isinstance(doc, dict):
            raise QueryError("Solr returned a malformed real-time get response")
        return dict(doc)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Ping the Solr admin endpoint."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get(f"/{self._ping_collection}/admin/ping")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                data = resp.json()
                solr_status = data.get("status", "unknown")
                return AdapterHealth(
                    status="healthy" if solr_status == "OK" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Collection: {self._ping_collection}, status: {solr_status}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Solr returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise ConnectionError("Solr client not initialized.")
        return self._client

    @staticmethod
    def quote_term(value: str) -> str:
        """Quote a value as an exact Solr phrase, escaping quotes and backslashes."""
        return '"' + _PHRASE_SPECIAL.sub(r"\\\1", value) + '"'

    @classmethod
    def render_filter(cls, clause: FilterClause) -> str:
        """Render a filter clause as ``field:("a" OR "b")``."""
        terms = " OR ".join(cls.quote_term(v) for v in clause.values)
        return f"{clause.field}:({terms})"
