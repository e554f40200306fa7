"""Abstract repository for BranchStock aggregate.

``apply_changes`` is the only multi-row write.  Implementations must make
all of its effects visible together or not at all; the transfer relies on
it to move units between two rows without a reader ever seeing them
missing or doubled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from branchstock.domain.model.branch_stock import BranchStock


class BranchStockRepository(ABC):

    @abstractmethod
    def get_by_id(self, stock_id: str) -> BranchStock | None:
        """Return a stock row by its ID, or None if not found."""

    @abstractmethod
    def list_by_batch(self, batch_id: str) -> list[BranchStock]:
        """Return every row granted from one batch, oldest first."""

    @abstractmethod
    def list_by_branch(self, branch_id: str) -> list[BranchStock]:
        """Return every row held by one branch."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[BranchStock]:
        """Return every row of one product, across batches and branches."""

    @abstractmethod
    def list_all(self) -> list[BranchStock]:
        """Return every stock row."""

    @abstractmethod
    def save(self, stock: BranchStock) -> None:
        """Persist a new or updated row, assigning an ID if it has none."""

    @abstractmethod
    def delete(self, stock_id: str) -> None:
        """Remove a row."""

    @abstractmethod
    def apply_changes(
        self,
        saved: list[BranchStock],
        deleted: list[str],
    ) -> None:
        """Save *saved* and delete the IDs in *deleted* as one atomic write."""
