"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Dates travel as ISO
strings, derived flags are evaluated once, at mapping time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from branchstock.domain.exceptions import ValidationError
from branchstock.domain.model.batch import Batch, compute_state
from branchstock.domain.model.branch_stock import BranchStock


def parse_date(raw: str, field_name: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string coming from outside."""
    try:
        return date.fromisoformat(raw.strip())
    except (AttributeError, ValueError) as exc:
        raise ValidationError(
            f"Invalid {field_name} {raw!r}, expected YYYY-MM-DD"
        ) from exc


@dataclass(frozen=True)
class BatchDTO:

    id: str
    product_id: str
    batch_number: str
    quantity: int
    allocated: int
    available: int
    expiration_date: str
    warning_days: int
    notification_enabled: bool
    active: bool
    expired: bool
    expiring_soon: bool
    days_until_expiration: int


@dataclass(frozen=True)
class BranchStockDTO:

    id: str
    branch_id: str
    product_id: str
    batch_id: str
    quantity: int
    minimum_stock: int
    low_stock: bool


@dataclass(frozen=True)
class TransferDTO:

    status: str
    quantity: int
    source: BranchStockDTO
    source_removed: bool
    target: BranchStockDTO


@dataclass(frozen=True)
class NotificationDTO:

    batch_id: str
    batch_number: str
    product_id: str
    product_name: str
    product_brand: str
    expiration_date: str
    days_until_expiration: int
    quantity: int
    allocated: int


# --- Mapping ------------------------------------------------------------------


def batch_to_dto(batch: Batch, as_of: date, allocated: int) -> BatchDTO:
    state = compute_state(batch, as_of)
    return BatchDTO(
        id=batch.id,  # type: ignore[arg-type]
        product_id=batch.product_id,
        batch_number=batch.batch_number,
        quantity=batch.quantity,
        allocated=allocated,
        available=max(0, batch.quantity - allocated),
        expiration_date=batch.expiration_date.isoformat(),
        warning_days=batch.warning_days_before_expiration,
        notification_enabled=batch.notification_enabled,
        active=batch.active,
        expired=state.expired,
        expiring_soon=state.expiring_soon,
        days_until_expiration=state.days_until_expiration,
    )


def stock_to_dto(stock: BranchStock) -> BranchStockDTO:
    return BranchStockDTO(
        id=stock.id,  # type: ignore[arg-type]
        branch_id=stock.branch_id,
        product_id=stock.product_id,
        batch_id=stock.batch_id,
        quantity=stock.quantity,
        minimum_stock=stock.minimum_stock,
        low_stock=stock.low_stock,
    )
