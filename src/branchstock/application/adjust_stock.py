"""Application services: correcting a branch's stock row."""

from __future__ import annotations

from branchstock.application.dto import BranchStockDTO, stock_to_dto
from branchstock.domain.service.allocation_ledger import AllocationLedger


class AdjustStockHandler:

    def __init__(self, ledger: AllocationLedger) -> None:
        self._ledger = ledger

    def handle(self, stock_id: str, new_quantity: int) -> BranchStockDTO:
        """Set the counted quantity; a count of zero removes the row."""
        return stock_to_dto(self._ledger.adjust(stock_id, new_quantity))


class SetMinimumStockHandler:

    def __init__(self, ledger: AllocationLedger) -> None:
        self._ledger = ledger

    def handle(self, stock_id: str, minimum_stock: int) -> BranchStockDTO:
        return stock_to_dto(self._ledger.set_minimum_stock(stock_id, minimum_stock))
