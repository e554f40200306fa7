"""Application service: Allocate Stock use case.

Grants part of a batch to a branch.  Each call creates a new grant, even
when the branch already holds stock of the same batch.
"""

from __future__ import annotations

from branchstock.application.dto import BranchStockDTO, stock_to_dto
from branchstock.domain.service.allocation_ledger import AllocationLedger


class AllocateStockHandler:

    def __init__(self, ledger: AllocationLedger) -> None:
        self._ledger = ledger

    def handle(
        self,
        branch_id: str,
        batch_id: str,
        quantity: int,
        minimum_stock: int = 0,
    ) -> BranchStockDTO:
        stock = self._ledger.allocate(
            branch_id=branch_id,
            batch_id=batch_id,
            quantity=quantity,
            minimum_stock=minimum_stock,
        )
        return stock_to_dto(stock)
