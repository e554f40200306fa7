"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from branchstock.application.dto import BranchStockDTO, stock_to_dto
from branchstock.domain.exceptions import ValidationError
from branchstock.domain.service.allocation_ledger import AllocationLedger


class ShowStockHandler:

    def __init__(self, ledger: AllocationLedger) -> None:
        self._ledger = ledger

    def handle(
        self,
        branch_id: str | None = None,
        product_id: str | None = None,
        batch_id: str | None = None,
        low_only: bool = False,
    ) -> list[BranchStockDTO]:
        """List stock rows filtered by at most one of branch, product, batch.

        ``low_only`` narrows any of those listings to low-stock rows.
        """
        filters = [f for f in (branch_id, product_id, batch_id) if f is not None]
        if len(filters) > 1:
            raise ValidationError("Filter by at most one of branch, product, batch")

        if low_only and product_id is None and batch_id is None:
            rows = self._ledger.list_low_stock(branch_id)
        else:
            if branch_id is not None:
                rows = self._ledger.list_by_branch(branch_id)
            elif product_id is not None:
                rows = self._ledger.list_by_product(product_id)
            elif batch_id is not None:
                rows = self._ledger.list_by_batch(batch_id)
            else:
                rows = self._ledger.list_all()
            if low_only:
                rows = [r for r in rows if r.low_stock]
        return [stock_to_dto(r) for r in rows]

    def available(self, batch_id: str) -> int:
        return self._ledger.available_to_allocate(batch_id)
