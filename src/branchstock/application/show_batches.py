"""Application service: Show Batches use case (query)."""

from __future__ import annotations

from branchstock.application.dto import BatchDTO, batch_to_dto
from branchstock.domain.clock import Clock
from branchstock.domain.exceptions import ValidationError
from branchstock.domain.model.batch import Batch
from branchstock.domain.service.allocation_ledger import AllocationLedger
from branchstock.domain.service.batch_registry import BatchRegistry


class ShowBatchesHandler:

    def __init__(
        self,
        registry: BatchRegistry,
        ledger: AllocationLedger,
        clock: Clock,
    ) -> None:
        self._registry = registry
        self._ledger = ledger
        self._clock = clock

    def handle(
        self,
        product_id: str | None = None,
        expiring: bool = False,
        expired: bool = False,
    ) -> list[BatchDTO]:
        """List batches, optionally narrowed to one filter."""
        if sum((product_id is not None, expiring, expired)) > 1:
            raise ValidationError("Choose at most one of product, expiring, expired")

        if expiring:
            batches = self._registry.list_expiring_soon()
        elif expired:
            batches = self._registry.list_expired()
        elif product_id is not None:
            batches = self._registry.list_by_product(product_id)
        else:
            batches = self._registry.list_batches()
        return [self._to_dto(b) for b in batches]

    def handle_one(self, batch_id: str) -> BatchDTO:
        return self._to_dto(self._registry.get_batch(batch_id))

    def _to_dto(self, batch: Batch) -> BatchDTO:
        return batch_to_dto(
            batch, self._clock.today(), self._ledger.allocated_quantity(batch.id)
        )
