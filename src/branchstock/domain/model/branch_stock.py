"""BranchStock aggregate: the portion of a batch granted to one branch.

Rows are append-only grants.  Two ``allocate`` calls for the same branch
and batch produce two rows; queries aggregate them when a total is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from branchstock.domain.exceptions import InsufficientStockError, ValidationError
from branchstock.domain.model.batch import Batch
from branchstock.domain.model.value_objects import Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_minimum_stock(minimum_stock: int) -> int:
    if isinstance(minimum_stock, bool) or not isinstance(minimum_stock, int):
        raise ValidationError("Minimum stock must be an integer")
    if minimum_stock < 0:
        raise ValidationError("Minimum stock cannot be negative")
    return minimum_stock


@dataclass
class BranchStock:
    """Aggregate root for a single lot-to-branch grant.

    Invariants:
    - ``quantity`` is never negative
    - ``product_id`` always equals the product of ``batch_id``
    """

    id: str | None
    branch_id: str
    product_id: str
    batch_id: str
    quantity: int
    minimum_stock: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def grant(
        branch_id: str,
        batch: Batch,
        quantity: Quantity,
        minimum_stock: int = 0,
    ) -> BranchStock:
        return BranchStock(
            id=None,
            branch_id=branch_id,
            product_id=batch.product_id,
            batch_id=batch.id,
            quantity=quantity.value,
            minimum_stock=_validate_minimum_stock(minimum_stock),
        )

    @property
    def low_stock(self) -> bool:
        return self.quantity <= self.minimum_stock

    @property
    def is_empty(self) -> bool:
        return self.quantity == 0

    def withdraw(self, quantity: Quantity) -> None:
        """Take units out of this grant (the source side of a transfer)."""
        if quantity.value > self.quantity:
            raise InsufficientStockError(
                f"Cannot move {quantity.value} units out of stock #{self.id}: "
                f"only {self.quantity} held"
            )
        self.quantity -= quantity.value
        self._touch()

    def deposit(self, quantity: Quantity) -> None:
        self.quantity += quantity.value
        self._touch()

    def set_quantity(self, new_quantity: int) -> None:
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValidationError("Stock quantity must be an integer")
        if new_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.quantity = new_quantity
        self._touch()

    def set_minimum_stock(self, minimum_stock: int) -> None:
        self.minimum_stock = _validate_minimum_stock(minimum_stock)
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _now()
