"""Integration tests for the batch use cases.

Uses in-memory fake repositories and a fixed clock, no file I/O.
"""

from datetime import timedelta

import pytest

from branchstock.application.register_batch import RegisterBatchHandler
from branchstock.application.retire_batch import (
    DeactivateExpiredHandler,
    RemoveBatchHandler,
    RetireBatchHandler,
)
from branchstock.application.show_batches import ShowBatchesHandler
from branchstock.application.update_batch import (
    SetBatchNotificationHandler,
    UpdateBatchHandler,
)
from branchstock.domain.exceptions import (
    AllocationConflictError,
    EntityNotFoundError,
    ValidationError,
)
from tests.fakes import TODAY, make_world


def _iso(days: int) -> str:
    return (TODAY + timedelta(days=days)).isoformat()


def _setup():
    world = make_world()
    register = RegisterBatchHandler(world.registry, world.clock)
    return world, register


class TestRegisterBatch:

    def test_returns_dto_with_derived_state(self):
        _, register = _setup()
        dto = register.handle("1", "L-001", 100, _iso(5))
        assert dto.id == "1"
        assert dto.expiration_date == _iso(5)
        assert dto.days_until_expiration == 5
        assert dto.expiring_soon is True
        assert dto.expired is False
        assert dto.available == 100
        assert dto.warning_days == 7

    def test_bad_date_string(self):
        _, register = _setup()
        with pytest.raises(ValidationError, match="expected YYYY-MM-DD"):
            register.handle("1", "L-001", 100, "03/01/2027")

    def test_past_date(self):
        _, register = _setup()
        with pytest.raises(ValidationError):
            register.handle("1", "L-001", 100, _iso(-1))

    def test_unknown_product(self):
        _, register = _setup()
        with pytest.raises(EntityNotFoundError):
            register.handle("99", "L-001", 100, _iso(5))


class TestUpdateBatch:

    def test_update_reports_allocation(self):
        world, register = _setup()
        register.handle("1", "L-001", 100, _iso(30))
        world.ledger.allocate("A", "1", 40)

        dto = UpdateBatchHandler(world.registry, world.ledger, world.clock).handle(
            "1", quantity=80, expiration_date=_iso(60)
        )

        assert dto.quantity == 80
        assert dto.allocated == 40
        assert dto.available == 40
        assert dto.expiration_date == _iso(60)

    def test_cannot_go_below_allocated(self):
        world, register = _setup()
        register.handle("1", "L-001", 100, _iso(30))
        world.ledger.allocate("A", "1", 40)

        with pytest.raises(AllocationConflictError):
            UpdateBatchHandler(world.registry, world.ledger, world.clock).handle("1", quantity=39)

    def test_toggle_notification(self):
        world, register = _setup()
        register.handle("1", "L-001", 100, _iso(3))
        SetBatchNotificationHandler(world.registry).handle("1", False)
        assert world.deriver.expiring_notifications() == []


class TestShowBatches:

    def test_filters_are_exclusive(self):
        world, _ = _setup()
        handler = ShowBatchesHandler(world.registry, world.ledger, world.clock)
        with pytest.raises(ValidationError, match="at most one"):
            handler.handle(product_id="1", expired=True)

    def test_expiring_and_expired_listings(self):
        world, register = _setup()
        register.handle("1", "OLD", 10, _iso(1))
        register.handle("1", "NEW", 10, _iso(20))
        world.clock.current = TODAY + timedelta(days=2)
        handler = ShowBatchesHandler(world.registry, world.ledger, world.clock)

        assert [d.batch_number for d in handler.handle(expired=True)] == ["OLD"]
        assert handler.handle(expiring=True) == []
        assert len(handler.handle()) == 2

    def test_handle_one_unknown(self):
        world, _ = _setup()
        handler = ShowBatchesHandler(world.registry, world.ledger, world.clock)
        with pytest.raises(EntityNotFoundError):
            handler.handle_one("5")


class TestRetirement:

    def test_retire_then_sweep_counts_only_new(self):
        world, register = _setup()
        register.handle("1", "A", 10, _iso(1))
        register.handle("1", "B", 10, _iso(1))
        RetireBatchHandler(world.registry).handle("1")
        world.clock.current = TODAY + timedelta(days=2)

        assert DeactivateExpiredHandler(world.registry).handle() == 1
        assert DeactivateExpiredHandler(world.registry).handle() == 0

    def test_remove_unallocated(self):
        world, register = _setup()
        register.handle("1", "A", 10, _iso(10))
        RemoveBatchHandler(world.registry).handle("1")
        assert world.batches.list_all() == []
