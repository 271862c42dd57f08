"""Tests for the adapter registry."""

from __future__ import annotations

import pytest

from rostersearch.adapters.base.exceptions import ConfigurationError
from rostersearch.adapters.base.registry import AdapterRegistry
from rostersearch.adapters.memory.adapter import MemoryAdapter
from rostersearch.adapters.solr.adapter import SolrAdapter
from rostersearch.config.settings import IndexSettings


class TestAdapterRegistry:
    def test_builtin_names(self) -> None:
        assert AdapterRegistry().registered_adapters == ["memory", "solr"]

    def test_builtin_lazy_lookup(self) -> None:
        registry = AdapterRegistry()
        assert registry.get_class("solr") is SolrAdapter
        assert registry.get_class("memory") is MemoryAdapter

    def test_unknown_adapter(self) -> None:
        with pytest.raises(ConfigurationError, match="No adapter registered"):
            AdapterRegistry().get_class("elasticsearch")

    def test_custom_registration_wins(self) -> None:
        class CustomAdapter(MemoryAdapter):
            pass

        registry = AdapterRegistry()
        registry.register("memory", CustomAdapter)
        assert registry.get_class("memory") is CustomAdapter

    async def test_create_initializes(self) -> None:
        adapter = await AdapterRegistry().create("memory")
        assert (await adapter.health_check()).status == "healthy"

    async def test_create_from_settings_memory(self) -> None:
        adapter = await AdapterRegistry().create_from_settings(IndexSettings(backend="Memory"))
        assert isinstance(adapter, MemoryAdapter)

    async def test_create_from_settings_solr_kwargs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def _no_ping(self: SolrAdapter) -> None:
            return None

        monkeypatch.setattr(SolrAdapter, "initialize", _no_ping)
        settings = IndexSettings(
            base_url="http://solr:8983/solr",
            collection="students",
            username="u",
            password="p",
            timeout=5.0,
        )
        adapter = await AdapterRegistry().create_from_settings(settings)

        assert isinstance(adapter, SolrAdapter)
        assert adapter._base_url == "http://solr:8983/solr"
        assert adapter._timeout == 5.0
        assert adapter._username == "u"
        assert adapter._ping_collection == "students"

    async def test_extra_options_reach_constructor(self) -> None:
        settings = IndexSettings(backend="memory", extra={"writer_limit_mb": 8})
        adapter = await AdapterRegistry().create_from_settings(settings)
        assert isinstance(adapter, MemoryAdapter)
        assert adapter._writer_limit_mb == 8

    async def test_unknown_extra_option_rejected(self) -> None:
        settings = IndexSettings(backend="memory", extra={"shards": 3})
        with pytest.raises(ConfigurationError, match="Invalid options for adapter 'memory'"):
            await AdapterRegistry().create_from_settings(settings)
