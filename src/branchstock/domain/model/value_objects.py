"""Small immutable values the aggregates are built from.

Each one checks itself on construction, so holding an instance is proof
the value is usable.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from branchstock.domain.exceptions import ValidationError

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Catalog unit price, held as a Decimal in a three-letter currency."""

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Price must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Price must be a finite number, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Price cannot be negative, got {self.amount}")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValidationError(f"Invalid currency code {self.currency!r}")

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = "USD") -> Money:
        """Parse a price typed by a user, rounded to whole cents."""
        try:
            value = Decimal(str(amount).strip()).quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity of units.

    Used for every amount that moves stock: a grant, a transfer, a
    received batch.  Zero or negative movements are meaningless.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BatchState:
    """Time-derived state of a batch on a given calendar date.

    Never persisted; always recomputed from the expiration date so a batch
    cannot stay "expiring soon" after its date has passed.
    """

    expired: bool
    expiring_soon: bool
    days_until_expiration: int
