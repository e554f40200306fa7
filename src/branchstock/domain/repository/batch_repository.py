"""Abstract repository for Batch aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from branchstock.domain.model.batch import Batch


class BatchRepository(ABC):

    @abstractmethod
    def get_by_id(self, batch_id: str) -> Batch | None:
        """Return a batch by its ID, or None if not found."""

    @abstractmethod
    def find_by_number(self, product_id: str, batch_number: str) -> list[Batch]:
        """Return every batch of *product_id* carrying *batch_number*."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[Batch]:
        """Return the batches of one product."""

    @abstractmethod
    def list_all(self) -> list[Batch]:
        """Return every batch, active or not."""

    @abstractmethod
    def save(self, batch: Batch) -> None:
        """Persist a new or updated batch, assigning an ID if it has none."""

    @abstractmethod
    def delete(self, batch_id: str) -> None:
        """Physically remove a batch."""
