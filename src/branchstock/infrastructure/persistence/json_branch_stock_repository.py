"""JSON-file-backed implementation of BranchStockRepository.

``apply_changes`` edits the whole file in one ``JsonFile.editing`` cycle,
which ends in a single atomic replace of the file.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from branchstock.domain.model.branch_stock import BranchStock
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.infrastructure.persistence.json_file import JsonFile


class JsonBranchStockRepository(BranchStockRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- BranchStockRepository interface --------------------------------------

    def get_by_id(self, stock_id: str) -> BranchStock | None:
        for raw in self._file.load():
            if raw["id"] == stock_id:
                return self._to_domain(raw)
        return None

    def list_by_batch(self, batch_id: str) -> list[BranchStock]:
        return self._select("batch_id", batch_id)

    def list_by_branch(self, branch_id: str) -> list[BranchStock]:
        return self._select("branch_id", branch_id)

    def list_by_product(self, product_id: str) -> list[BranchStock]:
        return self._select("product_id", product_id)

    def list_all(self) -> list[BranchStock]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, stock: BranchStock) -> None:
        self.apply_changes(saved=[stock], deleted=[])

    def delete(self, stock_id: str) -> None:
        self.apply_changes(saved=[], deleted=[stock_id])

    def apply_changes(self, saved: list[BranchStock], deleted: list[str]) -> None:
        with self._file.editing() as records:
            # Issued before the deletions so a removed row's id is not reused here.
            next_id = int(JsonFile.next_id(records))
            records[:] = [r for r in records if r["id"] not in deleted]
            for stock in saved:
                if stock.id is None:
                    stock.id = str(next_id)
                    next_id += 1
                for i, raw in enumerate(records):
                    if raw["id"] == stock.id:
                        records[i] = self._to_raw(stock)
                        break
                else:
                    records.append(self._to_raw(stock))

    # --- Serialization --------------------------------------------------------

    def _select(self, key: str, value: str) -> list[BranchStock]:
        return [self._to_domain(raw) for raw in self._file.load() if raw[key] == value]

    @staticmethod
    def _to_raw(stock: BranchStock) -> dict:
        return {
            "id": stock.id,
            "branch_id": stock.branch_id,
            "product_id": stock.product_id,
            "batch_id": stock.batch_id,
            "quantity": stock.quantity,
            "minimum_stock": stock.minimum_stock,
            "created_at": stock.created_at.isoformat(),
            "updated_at": stock.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> BranchStock:
        return BranchStock(
            id=raw["id"],
            branch_id=raw["branch_id"],
            product_id=raw["product_id"],
            batch_id=raw["batch_id"],
            quantity=raw["quantity"],
            minimum_stock=raw.get("minimum_stock", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
