"""Batch aggregate — a dated, finite-quantity lot of one product.

A batch's ``quantity`` is the ceiling for allocation to branches.  It is
never decremented when units are granted to a branch; only an explicit
update changes it, and then never below what branches already hold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from branchstock.domain.exceptions import AllocationConflictError, ValidationError
from branchstock.domain.model.value_objects import BatchState

DEFAULT_WARNING_DAYS = 7


def _now() -> datetime:
    return datetime.now(timezone.utc)


def compute_state(batch: Batch, as_of: date) -> BatchState:
    """Derive expired / expiring-soon for *batch* on the calendar date *as_of*.

    A batch expiring today is not expired; it is expiring soon (0 days left).
    """
    days = (batch.expiration_date - as_of).days
    expired = days < 0
    return BatchState(
        expired=expired,
        expiring_soon=not expired and days <= batch.warning_days_before_expiration,
        days_until_expiration=days,
    )


def _validate_warning_days(warning_days: int) -> int:
    if isinstance(warning_days, bool) or not isinstance(warning_days, int):
        raise ValidationError("Warning days must be an integer")
    if warning_days < 1:
        raise ValidationError("Warning days before expiration must be at least 1")
    return warning_days


def _validate_batch_number(batch_number: str) -> str:
    if not batch_number or not batch_number.strip():
        raise ValidationError("Batch number is required")
    return batch_number.strip()


@dataclass
class Batch:
    """Aggregate root for received lots.

    Use ``Batch.create()`` for new batches; ``__init__`` stays simple so the
    repository can reconstitute persisted batches without re-validating
    (an old batch legitimately has an expiration date in the past).
    """

    id: str | None
    product_id: str
    batch_number: str
    quantity: int
    expiration_date: date
    warning_days_before_expiration: int = DEFAULT_WARNING_DAYS
    notification_enabled: bool = True
    active: bool = True
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW batches only) ----------------------------------

    @staticmethod
    def create(
        product_id: str,
        batch_number: str,
        quantity: int,
        expiration_date: date,
        today: date,
        warning_days: int | None = None,
    ) -> Batch:
        """Receive a new batch, enforcing all invariants."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("Batch quantity must be an integer")
        if quantity <= 0:
            raise ValidationError("Batch quantity must be positive")
        if expiration_date <= today:
            raise ValidationError(
                f"Expiration date {expiration_date.isoformat()} must be in the future"
            )
        return Batch(
            id=None,
            product_id=product_id,
            batch_number=_validate_batch_number(batch_number),
            quantity=quantity,
            expiration_date=expiration_date,
            warning_days_before_expiration=_validate_warning_days(
                DEFAULT_WARNING_DAYS if warning_days is None else warning_days
            ),
        )

    # --- Derived state --------------------------------------------------------

    def state(self, as_of: date) -> BatchState:
        return compute_state(self, as_of)

    def is_usable(self, as_of: date) -> bool:
        """True when stock may be granted from this batch."""
        return self.active and not self.state(as_of).expired

    # --- Mutations ------------------------------------------------------------

    def rename(self, batch_number: str) -> None:
        self.batch_number = _validate_batch_number(batch_number)
        self._touch()

    def change_quantity(self, new_quantity: int, allocated: int) -> None:
        """Set the declared quantity.

        *allocated* is the total currently granted to branches; the declared
        quantity may never drop below it.
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValidationError("Batch quantity must be an integer")
        if new_quantity < 0:
            raise ValidationError("Batch quantity cannot be negative")
        if new_quantity < allocated:
            raise AllocationConflictError(
                f"Cannot set quantity of batch {self.batch_number} to {new_quantity} "
                f"because {allocated} units are already allocated to branches"
            )
        self.quantity = new_quantity
        self._touch()

    def reschedule(self, expiration_date: date) -> None:
        self.expiration_date = expiration_date
        self._touch()

    def change_warning_days(self, warning_days: int) -> None:
        self.warning_days_before_expiration = _validate_warning_days(warning_days)
        self._touch()

    def set_notification_enabled(self, enabled: bool) -> None:
        self.notification_enabled = bool(enabled)
        self._touch()

    def deactivate(self) -> bool:
        """Retire the batch.  Returns False if it was already inactive."""
        if not self.active:
            return False
        self.active = False
        self._touch()
        return True

    def _touch(self) -> None:
        self.updated_at = _now()
