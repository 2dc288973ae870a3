"""Shared test doubles — re-export memory backends."""

from __future__ import annotations

from loadwork.persistence.memory_backend import MemoryObjectStore, MemoryWorkflowStore

__all__ = ["MemoryObjectStore", "MemoryWorkflowStore"]
