"""Tests for the in-memory index adapter."""

from __future__ import annotations

import pytest

from rostersearch.adapters.base.exceptions import ConnectionError, DocumentNotFoundError, IndexingError
from rostersearch.adapters.memory.adapter import MemoryAdapter
from rostersearch.models.query import MATCH_ALL, CompiledQuery, FilterClause


def _doc(doc_id: str, text: str, course_id: str = "CS101", team: str = "teamX") -> dict[str, str]:
    return {"id": doc_id, "_text_": text, "courseId": course_id, "team": team}


@pytest.fixture
async def loaded(memory_adapter: MemoryAdapter) -> MemoryAdapter:
    await memory_adapter.index_documents(
        "students",
        [
            _doc("1", "Ann Lee ann@x.com CS101", team="Team (A)"),
            _doc("2", "Bob Moss bob@x.com CS101"),
            _doc("3", "Cid Lee cid@x.com MA101", course_id="MA101"),
        ],
    )
    return memory_adapter


class TestMemorySearch:
    async def test_match_all(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text=MATCH_ALL), limit=10)
        assert results.total_hits == 3

    async def test_all_terms_must_match(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text="lee ann"), limit=10)
        assert [d["id"] for d in results.documents] == ["1"]

    async def test_case_insensitive(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text="LEE"), limit=10)
        assert {d["id"] for d in results.documents} == {"1", "3"}

    async def test_or_operator(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text="Ann OR Bob"), limit=10)
        assert {d["id"] for d in results.documents} == {"1", "2"}

    async def test_phrase(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text='"bob moss"'), limit=10)
        assert [d["id"] for d in results.documents] == ["2"]

    async def test_email_term(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(text="cid@x.com"), limit=10)
        assert [d["id"] for d in results.documents] == ["3"]

    async def test_filters_apply_to_free_text(self, loaded: MemoryAdapter) -> None:
        query = CompiledQuery(text="lee", filters=[FilterClause(field="courseId", values=("MA101",))])
        results = await loaded.search("students", query, limit=10)
        assert results.total_hits == 1
        assert [d["id"] for d in results.documents] == ["3"]

    async def test_filters_are_exact_and_conjunctive(self, loaded: MemoryAdapter) -> None:
        query = CompiledQuery(
            filters=[
                FilterClause(field="courseId", values=("CS101", "MA101")),
                FilterClause(field="team", values=("Team (A)",)),
            ]
        )
        results = await loaded.search("students", query, limit=10)
        assert [d["id"] for d in results.documents] == ["1"]

    async def test_limit(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("students", CompiledQuery(), limit=2)
        assert results.total_hits == 3
        assert len(results.documents) == 2

    async def test_unknown_collection_is_empty(self, loaded: MemoryAdapter) -> None:
        results = await loaded.search("accounts", CompiledQuery(), limit=10)
        assert results.documents == []


class TestMemoryWrites:
    async def test_same_id_overwrites(self, loaded: MemoryAdapter) -> None:
        await loaded.index_documents("students", [_doc("1", "Ann Lee-Smith")])
        results = await loaded.search("students", CompiledQuery(), limit=10)
        assert results.total_hits == 3
        assert (await loaded.fetch_document("students", "1"))["_text_"] == "Ann Lee-Smith"

    async def test_missing_id_rejected(self, memory_adapter: MemoryAdapter) -> None:
        with pytest.raises(IndexingError):
            await memory_adapter.index_documents("students", [{"_text_": "no id"}])

    async def test_invalid_batch_writes_nothing(self, loaded: MemoryAdapter) -> None:
        batch = [_doc("4", "Eve Park eve@x.com CS101"), {"_text_": "no id"}, _doc("1", "Ann Renamed")]
        with pytest.raises(IndexingError):
            await loaded.index_documents("students", batch)

        assert (await loaded.search("students", CompiledQuery(), limit=10)).total_hits == 3
        assert (await loaded.fetch_document("students", "1"))["_text_"] == "Ann Lee ann@x.com CS101"
        with pytest.raises(DocumentNotFoundError):
            await loaded.fetch_document("students", "4")

    async def test_empty_fields_round_trip_as_blank(self, memory_adapter: MemoryAdapter) -> None:
        await memory_adapter.index_documents("students", [_doc("9", "Solo", team="")])
        doc = await memory_adapter.fetch_document("students", "9")
        assert doc["team"] == ""
        assert doc["section"] == ""

    async def test_returned_documents_are_copies(self, loaded: MemoryAdapter) -> None:
        doc = await loaded.fetch_document("students", "1")
        doc["courseId"] = "HACKED"
        assert (await loaded.fetch_document("students", "1"))["courseId"] == "CS101"

    async def test_delete_documents(self, loaded: MemoryAdapter) -> None:
        await loaded.delete_documents("students", ["1", "missing"])
        with pytest.raises(DocumentNotFoundError):
            await loaded.fetch_document("students", "1")

    async def test_delete_all(self, loaded: MemoryAdapter) -> None:
        await loaded.delete_all("students")
        assert (await loaded.search("students", CompiledQuery(), limit=10)).total_hits == 0


class TestMemoryLifecycle:
    async def test_not_initialized(self) -> None:
        adapter = MemoryAdapter()
        with pytest.raises(ConnectionError, match="not initialized"):
            await adapter.search("students", CompiledQuery(), limit=10)
        assert (await adapter.health_check()).status == "unhealthy"

    async def test_health(self, loaded: MemoryAdapter) -> None:
        health = await loaded.health_check()
        assert health.status == "healthy"
        assert "3 documents" in (health.message or "")

    async def test_shutdown_drops_data(self, loaded: MemoryAdapter) -> None:
        await loaded.shutdown()
        await loaded.initialize()
        assert (await loaded.search("students", CompiledQuery(), limit=10)).total_hits == 0
