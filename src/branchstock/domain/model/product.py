"""Product aggregate.

Products are owned by the catalog, outside this core.  Batches reference
them, so the only things that matter here are identity and whether the
product is still active.
"""

from __future__ import annotations

from dataclasses import dataclass

from branchstock.domain.exceptions import ValidationError
from branchstock.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    sku: str
    name: str
    unit_price: Money
    brand: str = ""
    unit: str = "unit"
    active: bool = True

    @staticmethod
    def create(
        product_id: str,
        sku: str,
        name: str,
        unit_price: Money,
        brand: str = "",
        unit: str = "unit",
    ) -> Product:
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if unit_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        return Product(
            id=product_id,
            sku=sku.strip(),
            name=name.strip(),
            unit_price=unit_price,
            brand=brand.strip(),
            unit=unit.strip() or "unit",
        )
