"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from branchstock.domain.model.product import Product
from branchstock.domain.model.value_objects import Money
from branchstock.domain.repository.product_repository import ProductRepository
from branchstock.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        return JsonFile.next_id(self._file.load())

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> Product | None:
        for raw in self._file.load():
            if raw["sku"].lower() == sku.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, product: Product) -> None:
        with self._file.editing() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "brand": product.brand,
            "unit": product.unit,
            "unit_price": str(product.unit_price.amount),
            "currency": product.unit_price.currency,
            "active": product.active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            sku=raw["sku"],
            name=raw["name"],
            brand=raw.get("brand", ""),
            unit=raw.get("unit", "unit"),
            unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", "USD")),
            active=raw.get("active", True),
        )
