"""Abstract repository for Branch aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from branchstock.domain.model.branch import Branch


class BranchRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique branch ID."""

    @abstractmethod
    def get_by_id(self, branch_id: str) -> Branch | None:
        """Return a branch by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Branch]:
        """Return every branch."""

    @abstractmethod
    def save(self, branch: Branch) -> None:
        """Persist a new or updated branch."""
