"""Unit tests for the AllocationLedger domain service."""

import random
import threading
from datetime import timedelta

import pytest

from branchstock.domain.exceptions import (
    AllocationConflictError,
    BatchNotActiveError,
    DomainException,
    EntityNotFoundError,
    InsufficientBatchQuantityError,
    ValidationError,
)
from tests.fakes import TODAY, make_world


def _world_with_batch(quantity=100, expires_in=30):
    world = make_world()
    batch = world.registry.register_batch(
        "1", "L-001", quantity, TODAY + timedelta(days=expires_in)
    )
    return world, batch


def _allocated(world, batch_id):
    return sum(s.quantity for s in world.stock.list_by_batch(batch_id))


class TestAllocate:

    def test_allocate_creates_row(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60, minimum_stock=10)

        assert stock.id is not None
        assert stock.quantity == 60
        assert stock.product_id == "1"
        assert world.ledger.available_to_allocate(batch.id) == 40

    def test_batch_quantity_never_decremented(self):
        world, batch = _world_with_batch()
        world.ledger.allocate("A", batch.id, 60)
        assert world.batches.get_by_id(batch.id).quantity == 100

    def test_over_allocation_rejected(self):
        """60 then 50 out of 100: the second grant must fail."""
        world, batch = _world_with_batch()
        world.ledger.allocate("A", batch.id, 60, minimum_stock=10)

        with pytest.raises(InsufficientBatchQuantityError, match="have 40 available"):
            world.ledger.allocate("B", batch.id, 50, minimum_stock=5)

        assert len(world.stock.list_by_batch(batch.id)) == 1

    def test_allocate_exactly_remaining(self):
        world, batch = _world_with_batch()
        world.ledger.allocate("A", batch.id, 60)
        world.ledger.allocate("B", batch.id, 40)
        assert world.ledger.available_to_allocate(batch.id) == 0

    def test_repeated_grants_are_not_merged(self):
        world, batch = _world_with_batch()
        first = world.ledger.allocate("A", batch.id, 10)
        second = world.ledger.allocate("A", batch.id, 15)

        assert first.id != second.id
        assert len(world.ledger.list_by_branch("A")) == 2
        assert world.ledger.quantity_held("A", batch.id) == 25

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        world, batch = _world_with_batch()
        with pytest.raises(ValidationError):
            world.ledger.allocate("A", batch.id, quantity)

    def test_negative_minimum_rejected(self):
        world, batch = _world_with_batch()
        with pytest.raises(ValidationError, match="Minimum stock"):
            world.ledger.allocate("A", batch.id, 5, minimum_stock=-1)

    def test_unknown_batch_and_branch(self):
        world, batch = _world_with_batch()
        with pytest.raises(EntityNotFoundError, match="Batch"):
            world.ledger.allocate("A", "404", 5)
        with pytest.raises(EntityNotFoundError, match="Branch"):
            world.ledger.allocate("Z", batch.id, 5)

    def test_inactive_branch_rejected(self):
        world, batch = _world_with_batch()
        with pytest.raises(ValidationError, match="inactive"):
            world.ledger.allocate("C", batch.id, 5)

    def test_retired_batch_rejected(self):
        world, batch = _world_with_batch()
        world.registry.retire_batch(batch.id)
        with pytest.raises(BatchNotActiveError):
            world.ledger.allocate("A", batch.id, 5)

    def test_expired_batch_rejected_even_before_sweep(self):
        world, batch = _world_with_batch(expires_in=2)
        world.clock.current = TODAY + timedelta(days=3)
        with pytest.raises(BatchNotActiveError):
            world.ledger.allocate("A", batch.id, 5)

    def test_over_allocated_batch_blocks_further_grants(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 90)
        # Simulate an edit made behind the ledger's back.
        world.stock.get_by_id(stock.id).quantity = 120

        assert world.ledger.available_to_allocate(batch.id) == 0
        with pytest.raises(AllocationConflictError, match="over-allocated"):
            world.ledger.allocate("B", batch.id, 1)


class TestAdjust:

    def test_lowering_is_always_allowed(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        assert world.ledger.adjust(stock.id, 45).quantity == 45
        assert world.ledger.available_to_allocate(batch.id) == 55

    def test_raise_within_batch(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        world.ledger.allocate("B", batch.id, 30)
        assert world.ledger.adjust(stock.id, 70).quantity == 70

    def test_raise_beyond_batch_rejected(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        world.ledger.allocate("B", batch.id, 30)

        with pytest.raises(InsufficientBatchQuantityError):
            world.ledger.adjust(stock.id, 71)
        assert world.stock.get_by_id(stock.id).quantity == 60

    def test_adjust_to_zero_removes_row(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        result = world.ledger.adjust(stock.id, 0)
        assert result.quantity == 0
        assert world.stock.get_by_id(stock.id) is None

    def test_negative_rejected(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        with pytest.raises(ValidationError, match="cannot be negative"):
            world.ledger.adjust(stock.id, -1)

    def test_unknown_stock(self):
        world, _ = _world_with_batch()
        with pytest.raises(EntityNotFoundError, match="Stock #9 not found"):
            world.ledger.adjust("9", 5)


class TestReleaseAndQueries:

    def test_release_returns_units_to_pool(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 60)
        world.ledger.release(stock.id)
        assert world.stock.get_by_id(stock.id) is None
        assert world.ledger.available_to_allocate(batch.id) == 100

    def test_release_unknown(self):
        world, _ = _world_with_batch()
        with pytest.raises(EntityNotFoundError):
            world.ledger.release("9")

    def test_low_stock_listing(self):
        world, batch = _world_with_batch()
        low = world.ledger.allocate("A", batch.id, 10, minimum_stock=10)
        world.ledger.allocate("A", batch.id, 20, minimum_stock=5)
        other = world.ledger.allocate("B", batch.id, 3, minimum_stock=4)

        assert {s.id for s in world.ledger.list_low_stock()} == {low.id, other.id}
        assert [s.id for s in world.ledger.list_low_stock("A")] == [low.id]

    def test_set_minimum_stock(self):
        world, batch = _world_with_batch()
        stock = world.ledger.allocate("A", batch.id, 10)
        assert world.ledger.set_minimum_stock(stock.id, 12).low_stock is True

    def test_list_filters(self):
        world, batch = _world_with_batch()
        world.ledger.allocate("A", batch.id, 10)
        world.ledger.allocate("B", batch.id, 10)
        assert len(world.ledger.list_by_batch(batch.id)) == 2
        assert len(world.ledger.list_by_product("1")) == 2
        assert len(world.ledger.list_by_product("2")) == 0
        assert len(world.ledger.list_by_branch("B")) == 1


class TestConservation:

    def test_random_operation_sequences_never_exceed_batch(self):
        world, batch = _world_with_batch(quantity=100)
        rng = random.Random(1234)

        for _ in range(300):
            rows = world.stock.list_by_batch(batch.id)
            op = rng.choice(["allocate", "adjust", "release", "transfer"])
            try:
                if op == "allocate":
                    world.ledger.allocate(rng.choice("AB"), batch.id, rng.randint(1, 40))
                elif rows and op == "adjust":
                    world.ledger.adjust(rng.choice(rows).id, rng.randint(0, 60))
                elif rows and op == "release":
                    world.ledger.release(rng.choice(rows).id)
                elif rows:
                    world.coordinator.transfer(rng.choice(rows).id, rng.choice("AB"), rng.randint(1, 30))
            except DomainException:
                pass

            assert _allocated(world, batch.id) <= 100
            assert all(s.quantity > 0 for s in world.stock.list_by_batch(batch.id))

    def test_concurrent_allocations_respect_ceiling(self):
        world, batch = _world_with_batch(quantity=100)
        errors: list[Exception] = []

        def worker(branch_id):
            for _ in range(20):
                try:
                    world.ledger.allocate(branch_id, batch.id, 3)
                except InsufficientBatchQuantityError:
                    pass
                except Exception as exc:  # pragma: no cover - surfaced below
                    errors.append(exc)

        threads = [threading.Thread(target=worker, args=(b,)) for b in "ABAB"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert _allocated(world, batch.id) == 99
