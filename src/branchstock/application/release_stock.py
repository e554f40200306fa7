"""Application service: Release Stock use case."""

from __future__ import annotations

from branchstock.application.dto import BranchStockDTO, stock_to_dto
from branchstock.domain.service.allocation_ledger import AllocationLedger


class ReleaseStockHandler:

    def __init__(self, ledger: AllocationLedger) -> None:
        self._ledger = ledger

    def handle(self, stock_id: str) -> BranchStockDTO:
        """Delete a grant, returning its units to the batch's pool."""
        return stock_to_dto(self._ledger.release(stock_id))
