"""Domain service: Allocation Ledger.

Grants portions of a batch to branches while keeping the conservation
invariant:

    sum(stock.quantity for stock granted from B) <= B.quantity

The allocated total is recomputed from the rows at write time, under the
batch's lock, rather than kept in a counter that could drift.  Every
mutation follows the same shape: load, validate everything, then write.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from branchstock.domain.clock import Clock
from branchstock.domain.exceptions import (
    AllocationConflictError,
    BatchNotActiveError,
    EntityNotFoundError,
    InsufficientBatchQuantityError,
    ValidationError,
)
from branchstock.domain.model.batch import Batch
from branchstock.domain.model.branch_stock import BranchStock
from branchstock.domain.model.value_objects import Quantity
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.domain.repository.branch_repository import BranchRepository
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.domain.service.batch_locks import BatchLockRegistry

logger = logging.getLogger(__name__)


class AllocationLedger:

    def __init__(
        self,
        batch_repo: BatchRepository,
        stock_repo: BranchStockRepository,
        branch_repo: BranchRepository,
        clock: Clock,
        locks: BatchLockRegistry,
    ) -> None:
        self._batch_repo = batch_repo
        self._stock_repo = stock_repo
        self._branch_repo = branch_repo
        self._clock = clock
        self._locks = locks

    # --- Queries --------------------------------------------------------------

    def get_stock(self, stock_id: str) -> BranchStock:
        stock = self._stock_repo.get_by_id(stock_id)
        if stock is None:
            raise EntityNotFoundError(f"Stock #{stock_id} not found")
        return stock

    def allocated_quantity(self, batch_id: str) -> int:
        return sum(s.quantity for s in self._stock_repo.list_by_batch(batch_id))

    def available_to_allocate(self, batch_id: str) -> int:
        """Units of the batch not yet granted to any branch (never negative)."""
        batch = self._get_batch(batch_id)
        return max(0, batch.quantity - self.allocated_quantity(batch.id))

    def quantity_held(self, branch_id: str, batch_id: str) -> int:
        """Total a branch holds of one batch, summed over all its grants."""
        return sum(
            s.quantity for s in self._stock_repo.list_by_batch(batch_id)
            if s.branch_id == branch_id
        )

    def list_all(self) -> list[BranchStock]:
        return self._stock_repo.list_all()

    def list_by_branch(self, branch_id: str) -> list[BranchStock]:
        return self._stock_repo.list_by_branch(branch_id)

    def list_by_product(self, product_id: str) -> list[BranchStock]:
        return self._stock_repo.list_by_product(product_id)

    def list_by_batch(self, batch_id: str) -> list[BranchStock]:
        return self._stock_repo.list_by_batch(batch_id)

    def list_low_stock(self, branch_id: str | None = None) -> list[BranchStock]:
        rows = (
            self._stock_repo.list_by_branch(branch_id)
            if branch_id is not None
            else self._stock_repo.list_all()
        )
        return [s for s in rows if s.low_stock]

    # --- Commands -------------------------------------------------------------

    def allocate(
        self,
        branch_id: str,
        batch_id: str,
        quantity: int,
        minimum_stock: int = 0,
    ) -> BranchStock:
        """Grant *quantity* units of a batch to a branch as a new row."""
        granted = Quantity(quantity)
        if isinstance(minimum_stock, bool) or not isinstance(minimum_stock, int) or minimum_stock < 0:
            raise ValidationError("Minimum stock must be a non-negative integer")

        batch = self._get_batch(batch_id)
        branch = self._branch_repo.get_by_id(branch_id)
        if branch is None:
            raise EntityNotFoundError(f"Branch #{branch_id} not found")
        if not branch.active:
            raise ValidationError(f"Branch '{branch.name}' is inactive")

        with self._locks.hold(batch.id):
            batch = self._get_batch(batch.id)
            if not batch.is_usable(self._clock.today()):
                raise BatchNotActiveError(
                    f"Batch {batch.batch_number} is inactive or expired"
                )

            allocated = self._checked_allocated(batch)
            available = batch.quantity - allocated
            if granted.value > available:
                logger.warning(
                    "Rejected allocation of %d from batch #%s to branch #%s (available %d)",
                    granted.value, batch.id, branch_id, available,
                )
                raise InsufficientBatchQuantityError(
                    f"Insufficient quantity in batch {batch.batch_number} "
                    f"(need {granted.value}, have {available} available)"
                )

            stock = BranchStock.grant(branch_id, batch, granted, minimum_stock)
            self._stock_repo.save(stock)

        logger.info(
            "Allocated %d of batch #%s to branch #%s as stock #%s",
            granted.value, batch.id, branch_id, stock.id,
        )
        return stock

    def adjust(self, stock_id: str, new_quantity: int) -> BranchStock:
        """Correct a row's quantity, e.g. after a physical count.

        Lowering is always allowed.  Raising is checked against the other
        rows of the same batch.  A row adjusted to zero is removed.
        """
        stock = self.get_stock(stock_id)
        with self._locks.hold(stock.batch_id):
            stock = replace(self.get_stock(stock_id))
            previous = stock.quantity
            stock.set_quantity(new_quantity)

            if stock.quantity > previous:
                batch = self._get_batch(stock.batch_id)
                allocated = self._checked_allocated(batch)
                others = allocated - previous
                if others + stock.quantity > batch.quantity:
                    raise InsufficientBatchQuantityError(
                        f"Cannot raise stock #{stock.id} to {stock.quantity}: batch "
                        f"{batch.batch_number} has only {batch.quantity - others} units "
                        f"not held by other branches"
                    )

            if stock.is_empty:
                self._stock_repo.delete(stock.id)
            else:
                self._stock_repo.save(stock)

        logger.info("Adjusted stock #%s from %d to %d", stock.id, previous, stock.quantity)
        return stock

    def set_minimum_stock(self, stock_id: str, minimum_stock: int) -> BranchStock:
        stock = self.get_stock(stock_id)
        with self._locks.hold(stock.batch_id):
            stock = replace(self.get_stock(stock_id))
            stock.set_minimum_stock(minimum_stock)
            self._stock_repo.save(stock)
        return stock

    def release(self, stock_id: str) -> BranchStock:
        """Delete a row; its units return to the batch's available pool."""
        stock = self.get_stock(stock_id)
        with self._locks.hold(stock.batch_id):
            stock = self.get_stock(stock_id)
            self._stock_repo.delete(stock.id)
        logger.info(
            "Released stock #%s (%d units of batch #%s)",
            stock.id, stock.quantity, stock.batch_id,
        )
        return stock

    # --- Internal helpers -----------------------------------------------------

    def _get_batch(self, batch_id: str) -> Batch:
        batch = self._batch_repo.get_by_id(batch_id)
        if batch is None:
            raise EntityNotFoundError(f"Batch #{batch_id} not found")
        return batch

    def _checked_allocated(self, batch: Batch) -> int:
        """Allocated total of *batch*, refusing to build on an over-allocation.

        Rows can only exceed the ceiling through an edit made outside this
        ledger; any write that adds units is blocked until it is repaired.
        """
        allocated = self.allocated_quantity(batch.id)
        if allocated > batch.quantity:
            logger.warning(
                "Batch #%s is over-allocated (%d of %d)",
                batch.id, allocated, batch.quantity,
            )
            raise AllocationConflictError(
                f"Batch {batch.batch_number} is over-allocated "
                f"({allocated} allocated, {batch.quantity} declared)"
            )
        return allocated
