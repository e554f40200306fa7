"""Application service: Add Branch use case."""

from __future__ import annotations

from branchstock.domain.model.branch import Branch
from branchstock.domain.repository.branch_repository import BranchRepository


class AddBranchHandler:

    def __init__(self, branch_repo: BranchRepository) -> None:
        self._branch_repo = branch_repo

    def handle(self, name: str) -> Branch:
        branch = Branch.create(branch_id=self._branch_repo.next_id(), name=name)
        self._branch_repo.save(branch)
        return branch
