"""Integration test fixtures — A Solr backend seeded with student documents.

Expects Solr to be running with a ``students`` collection, e.g.:
    docker run -d -p 8983:8983 solr:9 solr-precreate students

Tests skip when Solr is not reachable.
"""

from __future__ import annotations

import asyncio
import contextlib
import time

import httpx
import pytest

SOLR_HOST = "http://localhost:8983/solr"
COLLECTION = "students"

_STRING_FIELDS = ["courseId", "email", "name", "team", "section", "registrationStatus"]


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _prepare_schema(host: str = SOLR_HOST, collection: str = COLLECTION) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        # Filter fields must be exact-match strings, not tokenized text
        for name in _STRING_FIELDS:
            field = {"name": name, "type": "string", "stored": True, "indexed": True}
            with contextlib.suppress(httpx.HTTPError):
                resp = await client.post(f"/{collection}/schema", json={"add-field": field})
                if resp.status_code != 200:
                    await client.post(f"/{collection}/schema", json={"replace-field": field})

        text_field = {"name": "_text_", "type": "text_general", "stored": True, "indexed": True}
        with contextlib.suppress(httpx.HTTPError):
            resp = await client.post(f"/{collection}/schema", json={"add-field": text_field})
            if resp.status_code != 200:
                await client.post(f"/{collection}/schema", json={"replace-field": text_field})


@pytest.fixture(scope="session")
def solr_ready() -> str:
    """Ensure Solr is running and the student schema is in place."""
    if not _wait_for_service(f"{SOLR_HOST}/{COLLECTION}/admin/ping", timeout=30.0):
        pytest.skip(f"Solr not available at {SOLR_HOST}")
    asyncio.run(_prepare_schema())
    return SOLR_HOST
