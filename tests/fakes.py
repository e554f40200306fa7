"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from branchstock.domain.clock import Clock
from branchstock.domain.model.batch import Batch
from branchstock.domain.model.branch import Branch
from branchstock.domain.model.branch_stock import BranchStock
from branchstock.domain.model.product import Product
from branchstock.domain.model.value_objects import Money
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.domain.repository.branch_repository import BranchRepository
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.domain.repository.product_repository import ProductRepository
from branchstock.domain.service.allocation_ledger import AllocationLedger
from branchstock.domain.service.batch_locks import BatchLockRegistry
from branchstock.domain.service.batch_registry import BatchRegistry
from branchstock.domain.service.notification_deriver import NotificationDeriver
from branchstock.domain.service.transfer_coordinator import TransferCoordinator

TODAY = date(2026, 3, 1)


class FixedClock(Clock):

    def __init__(self, today: date = TODAY) -> None:
        self.current = today

    def today(self) -> date:
        return self.current


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def next_id(self) -> str:
        return str(len(self._store) + 1)

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        for p in list(self._store.values()):
            if p.sku.lower() == sku.lower():
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakeBranchRepository(BranchRepository):

    def __init__(self, branches: list[Branch] | None = None) -> None:
        self._store: dict[str, Branch] = {}
        for b in branches or []:
            self._store[b.id] = b

    def next_id(self) -> str:
        return str(len(self._store) + 1)

    def get_by_id(self, branch_id: str) -> Branch | None:
        return self._store.get(branch_id)

    def list_all(self) -> list[Branch]:
        return list(self._store.values())

    def save(self, branch: Branch) -> None:
        self._store[branch.id] = branch


class FakeBatchRepository(BatchRepository):

    def __init__(self) -> None:
        self._store: dict[str, Batch] = {}
        self._next_id = 1

    def get_by_id(self, batch_id: str) -> Batch | None:
        return self._store.get(batch_id)

    def find_by_number(self, product_id: str, batch_number: str) -> list[Batch]:
        return [
            b for b in list(self._store.values())
            if b.product_id == product_id and b.batch_number == batch_number
        ]

    def list_by_product(self, product_id: str) -> list[Batch]:
        return [b for b in list(self._store.values()) if b.product_id == product_id]

    def list_all(self) -> list[Batch]:
        return list(self._store.values())

    def save(self, batch: Batch) -> None:
        if batch.id is None:
            batch.id = str(self._next_id)
            self._next_id += 1
        self._store[batch.id] = batch

    def delete(self, batch_id: str) -> None:
        self._store.pop(batch_id, None)


class FakeBranchStockRepository(BranchStockRepository):

    def __init__(self) -> None:
        self._store: dict[str, BranchStock] = {}
        self._next_id = 1
        self.apply_calls = 0

    def get_by_id(self, stock_id: str) -> BranchStock | None:
        return self._store.get(stock_id)

    def list_by_batch(self, batch_id: str) -> list[BranchStock]:
        return [s for s in list(self._store.values()) if s.batch_id == batch_id]

    def list_by_branch(self, branch_id: str) -> list[BranchStock]:
        return [s for s in list(self._store.values()) if s.branch_id == branch_id]

    def list_by_product(self, product_id: str) -> list[BranchStock]:
        return [s for s in list(self._store.values()) if s.product_id == product_id]

    def list_all(self) -> list[BranchStock]:
        return list(self._store.values())

    def save(self, stock: BranchStock) -> None:
        if stock.id is None:
            stock.id = str(self._next_id)
            self._next_id += 1
        self._store[stock.id] = stock

    def delete(self, stock_id: str) -> None:
        self._store.pop(stock_id, None)

    def apply_changes(self, saved: list[BranchStock], deleted: list[str]) -> None:
        self.apply_calls += 1
        for stock_id in deleted:
            self.delete(stock_id)
        for stock in saved:
            self.save(stock)


# ---------------------------------------------------------------------------
# A fully wired engine over the fakes
# ---------------------------------------------------------------------------


@dataclass
class World:
    clock: FixedClock
    products: FakeProductRepository
    branches: FakeBranchRepository
    batches: FakeBatchRepository
    stock: FakeBranchStockRepository
    registry: BatchRegistry
    ledger: AllocationLedger
    coordinator: TransferCoordinator
    deriver: NotificationDeriver


def make_world(today: date = TODAY) -> World:
    """Two products, three branches (the third inactive), no batches."""
    clock = FixedClock(today)
    products = FakeProductRepository([
        Product(id="1", sku="PCM-500", name="Paracetamol", unit_price=Money(Decimal("2.50")),
                brand="Genfar"),
        Product(id="2", sku="IBU-400", name="Ibuprofen", unit_price=Money(Decimal("3.10"))),
        Product(id="3", sku="OLD-001", name="Discontinued", unit_price=Money(Decimal("1.00")),
                active=False),
    ])
    branches = FakeBranchRepository([
        Branch(id="A", name="Centro"),
        Branch(id="B", name="Norte"),
        Branch(id="C", name="Closed", active=False),
    ])
    batches = FakeBatchRepository()
    stock = FakeBranchStockRepository()
    locks = BatchLockRegistry()

    return World(
        clock=clock,
        products=products,
        branches=branches,
        batches=batches,
        stock=stock,
        registry=BatchRegistry(batches, stock, products, clock, locks),
        ledger=AllocationLedger(batches, stock, branches, clock, locks),
        coordinator=TransferCoordinator(batches, stock, branches, locks),
        deriver=NotificationDeriver(batches, stock, products, clock),
    )
