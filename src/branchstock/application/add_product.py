"""Application service: Add Product use case.

The catalog is owned elsewhere; this exists so batches have something to
reference when the core runs on its own.
"""

from __future__ import annotations

from branchstock.domain.exceptions import ValidationError
from branchstock.domain.model.product import Product
from branchstock.domain.model.value_objects import Money
from branchstock.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        sku: str,
        name: str,
        price: str,
        brand: str = "",
        unit: str = "unit",
    ) -> Product:
        """Add a new product to the catalog."""
        if sku and self._product_repo.get_by_sku(sku.strip()) is not None:
            raise ValidationError(f"Product with SKU '{sku.strip()}' already exists")

        product = Product.create(
            product_id=self._product_repo.next_id(),
            sku=sku,
            name=name,
            unit_price=Money.of(price),
            brand=brand,
            unit=unit,
        )
        self._product_repo.save(product)
        return product
