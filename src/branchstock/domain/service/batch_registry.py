"""Domain service: Batch Registry.

Owns the Batch records: receiving new lots, correcting them, retiring
them, and answering questions about their time-derived state.  The
registry never touches branch allocations; it only reads them to refuse
changes that would invalidate what branches already hold.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import replace
from datetime import date

from branchstock.domain.clock import Clock
from branchstock.domain.exceptions import (
    AllocationConflictError,
    EntityNotFoundError,
    ValidationError,
)
from branchstock.domain.model.batch import DEFAULT_WARNING_DAYS, Batch, compute_state
from branchstock.domain.model.value_objects import BatchState
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.domain.repository.product_repository import ProductRepository
from branchstock.domain.service.batch_locks import BatchLockRegistry

logger = logging.getLogger(__name__)


class BatchRegistry:

    def __init__(
        self,
        batch_repo: BatchRepository,
        stock_repo: BranchStockRepository,
        product_repo: ProductRepository,
        clock: Clock,
        locks: BatchLockRegistry,
        default_warning_days: int = DEFAULT_WARNING_DAYS,
    ) -> None:
        self._batch_repo = batch_repo
        self._stock_repo = stock_repo
        self._product_repo = product_repo
        self._clock = clock
        self._locks = locks
        self._default_warning_days = default_warning_days

    # --- Derived state --------------------------------------------------------

    @staticmethod
    def compute_state(batch: Batch, as_of: date) -> BatchState:
        return compute_state(batch, as_of)

    # --- Queries --------------------------------------------------------------

    def get_batch(self, batch_id: str) -> Batch:
        batch = self._batch_repo.get_by_id(batch_id)
        if batch is None:
            raise EntityNotFoundError(f"Batch #{batch_id} not found")
        return batch

    def list_batches(self) -> list[Batch]:
        return self._batch_repo.list_all()

    def list_by_product(self, product_id: str) -> list[Batch]:
        return self._batch_repo.list_by_product(product_id)

    def list_expiring_soon(self, as_of: date | None = None) -> list[Batch]:
        """Active batches inside their warning window, soonest first."""
        as_of = as_of or self._clock.today()
        batches = [
            b for b in self._batch_repo.list_all()
            if b.active and compute_state(b, as_of).expiring_soon
        ]
        return sorted(batches, key=lambda b: (b.expiration_date, b.batch_number))

    def list_expired(self, as_of: date | None = None) -> list[Batch]:
        """Every batch past its expiration date, deactivated or not."""
        as_of = as_of or self._clock.today()
        batches = [
            b for b in self._batch_repo.list_all()
            if compute_state(b, as_of).expired
        ]
        return sorted(batches, key=lambda b: (b.expiration_date, b.batch_number))

    # --- Commands -------------------------------------------------------------

    def register_batch(
        self,
        product_id: str,
        batch_number: str,
        quantity: int,
        expiration_date: date,
        warning_days: int | None = None,
    ) -> Batch:
        """Receive a new lot of *product_id*."""
        batch = Batch.create(
            product_id=product_id,
            batch_number=batch_number,
            quantity=quantity,
            expiration_date=expiration_date,
            today=self._clock.today(),
            warning_days=self._default_warning_days if warning_days is None else warning_days,
        )

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        if not product.active:
            raise ValidationError(f"Product '{product.name}' is inactive")

        with self._locks.hold_product(product_id):
            self._require_unique_number(product_id, batch.batch_number)
            self._batch_repo.save(batch)

        logger.info(
            "Registered batch #%s (%s) of product #%s: %d units, expires %s",
            batch.id, batch.batch_number, product_id, batch.quantity,
            batch.expiration_date.isoformat(),
        )
        return batch

    def update_batch(
        self,
        batch_id: str,
        *,
        batch_number: str | None = None,
        quantity: int | None = None,
        expiration_date: date | None = None,
        warning_days: int | None = None,
    ) -> Batch:
        """Partially update a batch.

        Works on a copy so that a rejected field leaves the stored batch
        exactly as it was.
        """
        current = self.get_batch(batch_id)
        with self._locks.hold(current.id), ExitStack() as product_lock:
            current = self.get_batch(batch_id)
            draft = replace(current)

            if batch_number is not None and batch_number.strip() != current.batch_number:
                draft.rename(batch_number)
                product_lock.enter_context(self._locks.hold_product(draft.product_id))
                self._require_unique_number(draft.product_id, draft.batch_number, exclude_id=draft.id)
            if warning_days is not None:
                draft.change_warning_days(warning_days)
            if expiration_date is not None:
                draft.reschedule(expiration_date)
            if quantity is not None:
                allocated = sum(s.quantity for s in self._stock_repo.list_by_batch(draft.id))
                try:
                    draft.change_quantity(quantity, allocated)
                except AllocationConflictError:
                    logger.warning(
                        "Rejected quantity change of batch #%s to %s (allocated %d)",
                        draft.id, quantity, allocated,
                    )
                    raise

            self._batch_repo.save(draft)

        logger.info("Updated batch #%s", draft.id)
        return draft

    def set_notification_enabled(self, batch_id: str, enabled: bool) -> Batch:
        batch = self.get_batch(batch_id)
        with self._locks.hold(batch.id):
            batch = replace(self.get_batch(batch_id))
            batch.set_notification_enabled(enabled)
            self._batch_repo.save(batch)
        return batch

    def retire_batch(self, batch_id: str) -> Batch:
        """Manually deactivate a batch.  Existing allocations are untouched."""
        batch = self.get_batch(batch_id)
        with self._locks.hold(batch.id):
            batch = replace(self.get_batch(batch_id))
            if not batch.deactivate():
                return batch
            self._batch_repo.save(batch)
        logger.info("Retired batch #%s", batch.id)
        return batch

    def remove_batch(self, batch_id: str) -> None:
        """Physically delete a batch that no branch holds stock of."""
        batch = self.get_batch(batch_id)
        with self._locks.hold(batch.id):
            held = self._stock_repo.list_by_batch(batch.id)
            if held:
                raise AllocationConflictError(
                    f"Cannot remove batch {batch.batch_number}: "
                    f"{len(held)} branch allocation(s) still reference it"
                )
            self._batch_repo.delete(batch.id)
        logger.info("Removed batch #%s", batch.id)

    def deactivate_all_expired(self, as_of: date | None = None) -> int:
        """Deactivate every active batch that has expired.

        Idempotent: a second run on the same date finds nothing to do.
        Returns how many batches were deactivated by this call.
        """
        as_of = as_of or self._clock.today()
        count = 0
        for candidate in self._batch_repo.list_all():
            if not candidate.active or not compute_state(candidate, as_of).expired:
                continue
            with self._locks.hold(candidate.id):
                batch = self._batch_repo.get_by_id(candidate.id)
                if batch is None or not batch.active:
                    continue
                batch = replace(batch)
                batch.deactivate()
                self._batch_repo.save(batch)
                count += 1
        logger.info("Deactivated %d expired batch(es) as of %s", count, as_of.isoformat())
        return count

    # --- Internal helpers -----------------------------------------------------

    def _require_unique_number(
        self,
        product_id: str,
        batch_number: str,
        exclude_id: str | None = None,
    ) -> None:
        for other in self._batch_repo.find_by_number(product_id, batch_number):
            if other.active and other.id != exclude_id:
                raise ValidationError(
                    f"Batch number '{batch_number}' already exists for product #{product_id}"
                )
