"""Adapter Registry — Registration and construction of index adapters.

Adapter classes are registered by name and built from ``IndexSettings``.
Built-in adapters are imported lazily so that a backend's dependencies are
only needed when that backend is configured.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from rostersearch.adapters.base.adapter import SearchAdapter
from rostersearch.adapters.base.exceptions import ConfigurationError

if TYPE_CHECKING:
    from rostersearch.config.settings import IndexSettings

logger = logging.getLogger(__name__)

# Maps adapter names to (module_path, class_name) for lazy import
_BUILTIN_ADAPTERS: dict[str, tuple[str, str]] = {
    "solr": ("rostersearch.adapters.solr.adapter", "SolrAdapter"),
    "memory": ("rostersearch.adapters.memory.adapter", "MemoryAdapter"),
}


class AdapterRegistry:
    """Registry of index adapter classes.

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register("solr", SolrAdapter)
        >>> adapter = await registry.create("solr", base_url="http://localhost:8983/solr")
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchAdapter]] = {}

    def register(self, name: str, adapter_class: type[SearchAdapter]) -> None:
        """Register an adapter class.

        Args:
            name: Unique name for this adapter type.
            adapter_class: The adapter class to register.
        """
        if name in self._classes:
            logger.warning("Overwriting existing adapter registration: %s", name)
        self._classes[name] = adapter_class
        logger.debug("Registered adapter: %s", name)

    def get_class(self, name: str) -> type[SearchAdapter]:
        """Look up a registered class, falling back to the built-in adapters.

        Raises:
            ConfigurationError: If no adapter is known under this name.
        """
        if name in self._classes:
            return self._classes[name]

        entry = _BUILTIN_ADAPTERS.get(name)
        if entry is None:
            raise ConfigurationError(
                f"No adapter registered with name '{name}'. "
                f"Available adapters: {self.registered_adapters}"
            )

        module_path, class_name = entry
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise ConfigurationError(f"Failed to import adapter '{name}': {e}") from e
        adapter_class: type[SearchAdapter] = getattr(module, class_name)
        self.register(name, adapter_class)
        return adapter_class

    async def create(self, name: str, **kwargs: Any) -> SearchAdapter:
        """Create and initialize an adapter instance.

        Args:
            name: The adapter name.
            **kwargs: Configuration parameters passed to the adapter constructor.

        Returns:
            The initialized adapter.

        Raises:
            ConfigurationError: If the adapter does not accept ``kwargs``.
        """
        adapter_class = self.get_class(name)
        try:
            adapter = adapter_class(**kwargs)
        except TypeError as e:
            raise ConfigurationError(f"Invalid options for adapter '{name}': {e}") from e
        await adapter.initialize()
        logger.info("Initialized adapter: %s", name)
        return adapter

    async def create_from_settings(self, settings: IndexSettings) -> SearchAdapter:
        """Build the adapter described by ``settings``."""
        kwargs: dict[str, Any] = {}
        if settings.backend == "solr":
            kwargs["base_url"] = settings.base_url
            kwargs["timeout"] = settings.timeout
            kwargs["ping_collection"] = settings.collection
            if settings.username:
                kwargs["username"] = settings.username
            if settings.password:
                kwargs["password"] = settings.password
        # Extra options are constructor arguments and may override the above
        kwargs.update(settings.extra)
        return await self.create(settings.backend, **kwargs)

    @property
    def registered_adapters(self) -> list[str]:
        """List all known adapter names, built-in ones included."""
        return sorted(set(self._classes) | set(_BUILTIN_ADAPTERS))
