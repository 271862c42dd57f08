"""Base adapter interface — Abstract classes for index connectors."""

from rostersearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from rostersearch.adapters.base.registry import AdapterRegistry

__all__ = ["AdapterHealth", "AdapterRegistry", "RawResults", "SearchAdapter"]
