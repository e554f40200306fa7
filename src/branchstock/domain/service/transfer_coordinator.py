"""Domain service: Transfer Coordinator.

Moves allocated units of one batch from one branch's grant to another
branch.  The request goes REQUESTED -> VALIDATED -> APPLIED, or ends in
REJECTED; there is no partially applied state.

Every check runs before anything is written.  The new source and
destination rows are computed on copies and handed to the repository in a
single ``apply_changes`` call, all under the batch's lock, so units are
never observed missing from both rows or present in both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from branchstock.domain.exceptions import (
    BatchNotActiveError,
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    SameBranchError,
    ValidationError,
)
from branchstock.domain.model.branch_stock import BranchStock
from branchstock.domain.model.transfer import Transfer
from branchstock.domain.model.value_objects import Quantity
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.domain.repository.branch_repository import BranchRepository
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.domain.service.batch_locks import BatchLockRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    """Both sides of an applied transfer.

    ``source_stock.quantity`` may be 0, in which case the row no longer
    exists in the repository.
    """

    source_stock: BranchStock
    target_stock: BranchStock
    transfer: Transfer


class TransferCoordinator:

    def __init__(
        self,
        batch_repo: BatchRepository,
        stock_repo: BranchStockRepository,
        branch_repo: BranchRepository,
        locks: BatchLockRegistry,
    ) -> None:
        self._batch_repo = batch_repo
        self._stock_repo = stock_repo
        self._branch_repo = branch_repo
        self._locks = locks

    def transfer(
        self,
        source_stock_id: str,
        target_branch_id: str,
        quantity: int,
    ) -> TransferResult:
        """Move *quantity* units from a stock row to *target_branch_id*.

        Raises, in this order of precedence: EntityNotFoundError (source),
        ValidationError (quantity), InsufficientStockError, SameBranchError,
        BatchNotActiveError, then EntityNotFoundError / ValidationError for
        the target branch.
        """
        transfer = Transfer(
            source_stock_id=source_stock_id,
            target_branch_id=target_branch_id,
            quantity=quantity,
        )
        try:
            result = self._execute(transfer)
        except DomainException as exc:
            transfer.reject(exc)
            logger.warning(
                "Rejected transfer of %s from stock #%s to branch #%s: %s",
                quantity, source_stock_id, target_branch_id, exc,
            )
            raise

        logger.info(
            "Transferred %d of batch #%s from stock #%s to branch #%s (stock #%s)",
            quantity, result.target_stock.batch_id, source_stock_id,
            target_branch_id, result.target_stock.id,
        )
        return result

    def _execute(self, transfer: Transfer) -> TransferResult:
        source = self._get_source(transfer.source_stock_id)

        with self._locks.hold(source.batch_id):
            # Re-read under the lock: another writer may have changed the row.
            source = self._get_source(transfer.source_stock_id)

            moved = Quantity(transfer.quantity)
            if moved.value > source.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock in #{source.id} "
                    f"(need {moved.value}, have {source.quantity})"
                )
            if transfer.target_branch_id == source.branch_id:
                raise SameBranchError(
                    f"Stock #{source.id} already belongs to branch #{source.branch_id}"
                )

            batch = self._batch_repo.get_by_id(source.batch_id)
            if batch is None:
                raise EntityNotFoundError(f"Batch #{source.batch_id} not found")
            if not batch.active:
                raise BatchNotActiveError(
                    f"Batch {batch.batch_number} is inactive; its stock cannot be transferred"
                )

            target_branch = self._branch_repo.get_by_id(transfer.target_branch_id)
            if target_branch is None:
                raise EntityNotFoundError(f"Branch #{transfer.target_branch_id} not found")
            if not target_branch.active:
                raise ValidationError(f"Branch '{target_branch.name}' is inactive")

            transfer.mark_validated()

            new_source = replace(source)
            new_source.withdraw(moved)

            existing = [
                s for s in self._stock_repo.list_by_batch(batch.id)
                if s.branch_id == target_branch.id
            ]
            if existing:
                target = replace(existing[0])
                target.deposit(moved)
            else:
                target = BranchStock.grant(target_branch.id, batch, moved, minimum_stock=0)

            if new_source.is_empty:
                self._stock_repo.apply_changes(saved=[target], deleted=[new_source.id])
            else:
                self._stock_repo.apply_changes(saved=[new_source, target], deleted=[])

            transfer.mark_applied()

        return TransferResult(source_stock=new_source, target_stock=target, transfer=transfer)

    def _get_source(self, stock_id: str) -> BranchStock:
        source = self._stock_repo.get_by_id(stock_id)
        if source is None:
            raise EntityNotFoundError(f"Stock #{stock_id} not found")
        return source
