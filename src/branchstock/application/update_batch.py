"""Application services: correcting a batch after it was received."""

from __future__ import annotations

from branchstock.application.dto import BatchDTO, batch_to_dto, parse_date
from branchstock.domain.clock import Clock
from branchstock.domain.service.allocation_ledger import AllocationLedger
from branchstock.domain.service.batch_registry import BatchRegistry


class UpdateBatchHandler:

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
        batch_id: str,
        batch_number: str | None = None,
        quantity: int | None = None,
        expiration_date: str | None = None,
        warning_days: int | None = None,
    ) -> BatchDTO:
        """Partially update a batch; omitted fields are left unchanged."""
        batch = self._registry.update_batch(
            batch_id,
            batch_number=batch_number,
            quantity=quantity,
            expiration_date=(
                parse_date(expiration_date, "expiration date")
                if expiration_date is not None
                else None
            ),
            warning_days=warning_days,
        )
        return batch_to_dto(
            batch, self._clock.today(), self._ledger.allocated_quantity(batch.id)
        )


class SetBatchNotificationHandler:

    def __init__(self, registry: BatchRegistry) -> None:
        self._registry = registry

    def handle(self, batch_id: str, enabled: bool) -> None:
        self._registry.set_notification_enabled(batch_id, enabled)
