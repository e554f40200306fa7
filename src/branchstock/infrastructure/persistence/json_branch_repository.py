"""JSON-file-backed implementation of BranchRepository."""

from __future__ import annotations

from pathlib import Path

from branchstock.domain.model.branch import Branch
from branchstock.domain.repository.branch_repository import BranchRepository
from branchstock.infrastructure.persistence.json_file import JsonFile


class JsonBranchRepository(BranchRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def next_id(self) -> str:
        return JsonFile.next_id(self._file.load())

    def get_by_id(self, branch_id: str) -> Branch | None:
        for raw in self._file.load():
            if raw["id"] == branch_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Branch]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, branch: Branch) -> None:
        with self._file.editing() as records:
            for i, raw in enumerate(records):
                if raw["id"] == branch.id:
                    records[i] = self._to_raw(branch)
                    break
            else:
                records.append(self._to_raw(branch))

    @staticmethod
    def _to_raw(branch: Branch) -> dict:
        return {"id": branch.id, "name": branch.name, "active": branch.active}

    @staticmethod
    def _to_domain(raw: dict) -> Branch:
        return Branch(id=raw["id"], name=raw["name"], active=raw.get("active", True))
