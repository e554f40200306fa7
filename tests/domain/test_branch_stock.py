"""Unit tests for the BranchStock aggregate."""

from datetime import date

import pytest

from branchstock.domain.exceptions import InsufficientStockError, ValidationError
from branchstock.domain.model.batch import Batch
from branchstock.domain.model.branch_stock import BranchStock
from branchstock.domain.model.value_objects import Quantity


def _batch() -> Batch:
    return Batch(
        id="7", product_id="1", batch_number="L-001",
        quantity=100, expiration_date=date(2026, 6, 1),
    )


class TestGrant:

    def test_grant_copies_product_from_batch(self):
        stock = BranchStock.grant("A", _batch(), Quantity(60), minimum_stock=10)
        assert stock.id is None
        assert stock.branch_id == "A"
        assert stock.batch_id == "7"
        assert stock.product_id == "1"
        assert stock.quantity == 60
        assert stock.minimum_stock == 10

    def test_negative_minimum_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            BranchStock.grant("A", _batch(), Quantity(5), minimum_stock=-1)


class TestLowStock:

    def test_quantity_equal_to_minimum_is_low(self):
        stock = BranchStock.grant("A", _batch(), Quantity(10), minimum_stock=10)
        assert stock.low_stock is True

    def test_quantity_above_minimum_is_not_low(self):
        stock = BranchStock.grant("A", _batch(), Quantity(11), minimum_stock=10)
        assert stock.low_stock is False

    def test_zero_minimum_never_low_while_stocked(self):
        stock = BranchStock.grant("A", _batch(), Quantity(1))
        assert stock.low_stock is False


class TestMovements:

    def test_withdraw_and_deposit(self):
        stock = BranchStock.grant("A", _batch(), Quantity(60))
        stock.withdraw(Quantity(20))
        assert stock.quantity == 40
        stock.deposit(Quantity(5))
        assert stock.quantity == 45

    def test_withdraw_everything_leaves_empty_row(self):
        stock = BranchStock.grant("A", _batch(), Quantity(5))
        stock.withdraw(Quantity(5))
        assert stock.is_empty

    def test_withdraw_more_than_held_rejected(self):
        stock = BranchStock.grant("A", _batch(), Quantity(5))
        with pytest.raises(InsufficientStockError, match="only 5 held"):
            stock.withdraw(Quantity(6))
        assert stock.quantity == 5

    def test_set_quantity_negative_rejected(self):
        stock = BranchStock.grant("A", _batch(), Quantity(5))
        with pytest.raises(ValidationError, match="cannot be negative"):
            stock.set_quantity(-1)
