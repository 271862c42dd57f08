"""In-process index adapter."""

from rostersearch.adapters.memory.adapter import MemoryAdapter

__all__ = ["MemoryAdapter"]
