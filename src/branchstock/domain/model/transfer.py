"""Transfer: an atomic move of allocated units between two branches.

Transfers are never stored.  The object only exists for the duration of a
request so callers can see how far it got and why it was rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from branchstock.domain.exceptions import DomainException, ValidationError


class TransferStatus(Enum):
    REQUESTED = "REQUESTED"
    VALIDATED = "VALIDATED"
    APPLIED = "APPLIED"
    REJECTED = "REJECTED"


@dataclass
class Transfer:

    source_stock_id: str
    target_branch_id: str
    quantity: int
    status: TransferStatus = TransferStatus.REQUESTED
    rejection_kind: str | None = None
    rejection_reason: str | None = None

    def mark_validated(self) -> None:
        """Transition REQUESTED -> VALIDATED."""
        if self.status != TransferStatus.REQUESTED:
            raise ValidationError(
                f"Cannot validate transfer in {self.status.value} status"
            )
        self.status = TransferStatus.VALIDATED

    def mark_applied(self) -> None:
        """Transition VALIDATED -> APPLIED (terminal)."""
        if self.status != TransferStatus.VALIDATED:
            raise ValidationError(
                f"Cannot apply transfer in {self.status.value} status, expected VALIDATED"
            )
        self.status = TransferStatus.APPLIED

    def reject(self, error: DomainException) -> None:
        """Transition to REJECTED (terminal), remembering why."""
        if self.status in (TransferStatus.APPLIED, TransferStatus.REJECTED):
            raise ValidationError(
                f"Cannot reject transfer in {self.status.value} status"
            )
        self.status = TransferStatus.REJECTED
        self.rejection_kind = error.kind
        self.rejection_reason = str(error)
