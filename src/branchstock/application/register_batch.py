"""Application service: Register Batch use case (inbound receiving)."""

from __future__ import annotations

from branchstock.application.dto import BatchDTO, batch_to_dto, parse_date
from branchstock.domain.clock import Clock
from branchstock.domain.service.batch_registry import BatchRegistry


class RegisterBatchHandler:

    def __init__(self, registry: BatchRegistry, clock: Clock) -> None:
        self._registry = registry
        self._clock = clock

    def handle(
        self,
        product_id: str,
        batch_number: str,
        quantity: int,
        expiration_date: str,
        warning_days: int | None = None,
    ) -> BatchDTO:
        batch = self._registry.register_batch(
            product_id=product_id,
            batch_number=batch_number,
            quantity=quantity,
            expiration_date=parse_date(expiration_date, "expiration date"),
            warning_days=warning_days,
        )
        # A freshly received batch has nothing allocated yet.
        return batch_to_dto(batch, self._clock.today(), allocated=0)
