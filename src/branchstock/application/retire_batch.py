"""Application services: taking batches out of circulation.

Three ways a batch leaves: retired by hand, swept up once expired, or
physically removed when it was registered by mistake and nothing was
allocated from it.
"""

from __future__ import annotations

from branchstock.domain.service.batch_registry import BatchRegistry


class RetireBatchHandler:

    def __init__(self, registry: BatchRegistry) -> None:
        self._registry = registry

    def handle(self, batch_id: str) -> None:
        self._registry.retire_batch(batch_id)


class RemoveBatchHandler:

    def __init__(self, registry: BatchRegistry) -> None:
        self._registry = registry

    def handle(self, batch_id: str) -> None:
        self._registry.remove_batch(batch_id)


class DeactivateExpiredHandler:
    """Meant to be invoked periodically (e.g. once a day) by a scheduler."""

    def __init__(self, registry: BatchRegistry) -> None:
        self._registry = registry

    def handle(self) -> int:
        return self._registry.deactivate_all_expired()
