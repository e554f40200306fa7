"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from branchstock.domain.clock import Clock
from branchstock.domain.repository.branch_repository import BranchRepository
from branchstock.domain.repository.product_repository import ProductRepository
from branchstock.domain.service.allocation_ledger import AllocationLedger
from branchstock.domain.service.batch_locks import BatchLockRegistry
from branchstock.domain.service.batch_registry import BatchRegistry
from branchstock.domain.service.notification_deriver import NotificationDeriver
from branchstock.domain.service.transfer_coordinator import TransferCoordinator
from branchstock.infrastructure.clock import SystemClock
from branchstock.infrastructure.config import Settings
from branchstock.infrastructure.persistence.json_batch_repository import (
    JsonBatchRepository,
)
from branchstock.infrastructure.persistence.json_branch_repository import (
    JsonBranchRepository,
)
from branchstock.infrastructure.persistence.json_branch_stock_repository import (
    JsonBranchStockRepository,
)
from branchstock.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

# One lock registry per process: every service built here must serialise
# on the same per-batch locks.
_LOCKS = BatchLockRegistry()


@dataclass(frozen=True)
class Services:
    products: ProductRepository
    branches: BranchRepository
    registry: BatchRegistry
    ledger: AllocationLedger
    coordinator: TransferCoordinator
    deriver: NotificationDeriver
    clock: Clock


def build_services(settings: Settings, clock: Clock | None = None) -> Services:
    clock = clock or SystemClock()
    products = JsonProductRepository(settings.products_file)
    branches = JsonBranchRepository(settings.branches_file)
    batches = JsonBatchRepository(settings.batches_file)
    stock = JsonBranchStockRepository(settings.branch_stock_file)

    return Services(
        products=products,
        branches=branches,
        registry=BatchRegistry(
            batch_repo=batches,
            stock_repo=stock,
            product_repo=products,
            clock=clock,
            locks=_LOCKS,
            default_warning_days=settings.default_warning_days,
        ),
        ledger=AllocationLedger(
            batch_repo=batches,
            stock_repo=stock,
            branch_repo=branches,
            clock=clock,
            locks=_LOCKS,
        ),
        coordinator=TransferCoordinator(
            batch_repo=batches,
            stock_repo=stock,
            branch_repo=branches,
            locks=_LOCKS,
        ),
        deriver=NotificationDeriver(
            batch_repo=batches,
            stock_repo=stock,
            product_repo=products,
            clock=clock,
        ),
        clock=clock,
    )
