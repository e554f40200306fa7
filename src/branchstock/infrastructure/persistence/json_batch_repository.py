"""JSON-file-backed implementation of BatchRepository."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

from branchstock.domain.model.batch import DEFAULT_WARNING_DAYS, Batch
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.infrastructure.persistence.json_file import JsonFile


class JsonBatchRepository(BatchRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- BatchRepository interface --------------------------------------------

    def get_by_id(self, batch_id: str) -> Batch | None:
        for raw in self._file.load():
            if raw["id"] == batch_id:
                return self._to_domain(raw)
        return None

    def find_by_number(self, product_id: str, batch_number: str) -> list[Batch]:
        return [
            self._to_domain(raw) for raw in self._file.load()
            if raw["product_id"] == product_id and raw["batch_number"] == batch_number
        ]

    def list_by_product(self, product_id: str) -> list[Batch]:
        return [
            self._to_domain(raw) for raw in self._file.load()
            if raw["product_id"] == product_id
        ]

    def list_all(self) -> list[Batch]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, batch: Batch) -> None:
        with self._file.editing() as records:
            if batch.id is None:
                batch.id = JsonFile.next_id(records)
            for i, raw in enumerate(records):
                if raw["id"] == batch.id:
                    records[i] = self._to_raw(batch)
                    break
            else:
                records.append(self._to_raw(batch))

    def delete(self, batch_id: str) -> None:
        with self._file.editing() as records:
            records[:] = [r for r in records if r["id"] != batch_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(batch: Batch) -> dict:
        return {
            "id": batch.id,
            "product_id": batch.product_id,
            "batch_number": batch.batch_number,
            "quantity": batch.quantity,
            "expiration_date": batch.expiration_date.isoformat(),
            "warning_days_before_expiration": batch.warning_days_before_expiration,
            "notification_enabled": batch.notification_enabled,
            "active": batch.active,
            "created_at": batch.created_at.isoformat(),
            "updated_at": batch.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Batch:
        return Batch(
            id=raw["id"],
            product_id=raw["product_id"],
            batch_number=raw["batch_number"],
            quantity=raw["quantity"],
            expiration_date=date.fromisoformat(raw["expiration_date"]),
            warning_days_before_expiration=raw.get(
                "warning_days_before_expiration", DEFAULT_WARNING_DAYS
            ),
            notification_enabled=raw.get("notification_enabled", True),
            active=raw.get("active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
