"""Application service: Transfer Stock use case."""

from __future__ import annotations

from branchstock.application.dto import TransferDTO, stock_to_dto
from branchstock.domain.service.transfer_coordinator import TransferCoordinator


class TransferStockHandler:

    def __init__(self, coordinator: TransferCoordinator) -> None:
        self._coordinator = coordinator

    def handle(
        self,
        source_stock_id: str,
        target_branch_id: str,
        quantity: int,
    ) -> TransferDTO:
        result = self._coordinator.transfer(
            source_stock_id=source_stock_id,
            target_branch_id=target_branch_id,
            quantity=quantity,
        )
        return TransferDTO(
            status=result.transfer.status.value,
            quantity=result.transfer.quantity,
            source=stock_to_dto(result.source_stock),
            source_removed=result.source_stock.is_empty,
            target=stock_to_dto(result.target_stock),
        )
