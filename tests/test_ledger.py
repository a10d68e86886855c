from datetime import date, timedelta
from decimal import Decimal

import pytest

from travel.database import unit_of_work
from travel.enums import ResourceType
from travel.exceptions import (
    CapacityExceeded, Conflict, Expired, InsufficientCapacity, InvalidInput, NotFound
)
from travel.inventory import InventoryLedger
from travel.models import Tour


def far_future():
    return date.today() + timedelta(days=3650)


def available(db, resource):
    db.refresh(resource)
    return resource.available


class TestReserve:
    def test_reserve_deducts_units(self, db, tour):
        InventoryLedger(db).reserve(ResourceType.TOUR, tour.id, 4)
        assert available(db, tour) == 6

    def test_reserve_accepts_string_kind(self, db, lodge):
        InventoryLedger(db).reserve("LODGE", lodge.id, 2)
        assert available(db, lodge) == 3

    def test_reserve_more_than_available_fails_without_change(self, db, tour):
        with pytest.raises(InsufficientCapacity, match="Only 10 seats available"):
            InventoryLedger(db).reserve(ResourceType.TOUR, tour.id, 11)
        assert available(db, tour) == 10

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_reserve_requires_positive_quantity(self, db, tour, quantity):
        with pytest.raises(InvalidInput):
            InventoryLedger(db).reserve(ResourceType.TOUR, tour.id, quantity)
        assert available(db, tour) == 10

    def test_reserve_unknown_resource(self, db):
        with pytest.raises(NotFound, match="Transport not found with id: 999"):
            InventoryLedger(db).reserve(ResourceType.TRANSPORT, 999, 1)

    def test_unknown_resource_type(self, db):
        with pytest.raises(InvalidInput) as exc:
            InventoryLedger(db).reserve("BOAT", 1, 1)
        assert exc.value.field == "resource_type"

    def test_started_tour_is_expired(self, db, tour):
        ledger = InventoryLedger(db, today=lambda: tour.start_date + timedelta(days=1))
        with pytest.raises(Expired):
            ledger.reserve(ResourceType.TOUR, tour.id, 1)
        assert available(db, tour) == 10

    def test_tour_can_be_booked_on_its_start_date(self, db, tour):
        ledger = InventoryLedger(db, today=lambda: tour.start_date)
        ledger.reserve(ResourceType.TOUR, tour.id, 1)
        assert available(db, tour) == 9

    def test_capacity_is_checked_before_expiry(self, db, tour):
        ledger = InventoryLedger(db, today=lambda: tour.start_date + timedelta(days=1))
        with pytest.raises(InsufficientCapacity):
            ledger.reserve(ResourceType.TOUR, tour.id, 50)

    def test_lodges_and_transports_never_expire(self, db, lodge, transport):
        ledger = InventoryLedger(db, today=far_future)
        ledger.reserve(ResourceType.LODGE, lodge.id, 1)
        ledger.reserve(ResourceType.TRANSPORT, transport.id, 1)
        assert available(db, lodge) == 4
        assert available(db, transport) == 29


class TestRelease:
    def test_release_returns_units(self, db, tour):
        ledger = InventoryLedger(db)
        ledger.reserve(ResourceType.TOUR, tour.id, 5)
        ledger.release(ResourceType.TOUR, tour.id, 3)
        assert available(db, tour) == 8

    def test_release_beyond_capacity_fails(self, db, lodge):
        with pytest.raises(CapacityExceeded, match="Cannot exceed total rooms of 5"):
            InventoryLedger(db).release(ResourceType.LODGE, lodge.id, 1)
        assert available(db, lodge) == 5

    def test_reserve_then_release_restores_availability(self, db, transport):
        ledger = InventoryLedger(db)
        before = available(db, transport)
        ledger.reserve(ResourceType.TRANSPORT, transport.id, 7)
        ledger.release(ResourceType.TRANSPORT, transport.id, 7)
        assert available(db, transport) == before


class TestQueries:
    def test_is_available(self, db, tour):
        ledger = InventoryLedger(db)
        assert ledger.is_available(ResourceType.TOUR, tour.id, 10)
        assert not ledger.is_available(ResourceType.TOUR, tour.id, 11)

    def test_is_available_false_for_started_tour(self, db, tour):
        ledger = InventoryLedger(db, today=lambda: tour.start_date + timedelta(days=1))
        assert not ledger.is_available(ResourceType.TOUR, tour.id, 1)

    def test_is_available_does_not_change_counters(self, db, lodge):
        InventoryLedger(db).is_available(ResourceType.LODGE, lodge.id, 3)
        assert available(db, lodge) == 5

    def test_unit_price_per_kind(self, db, tour, lodge, transport):
        ledger = InventoryLedger(db)
        assert ledger.unit_price(ResourceType.TOUR, tour.id) == Decimal("100.00")
        assert ledger.unit_price(ResourceType.LODGE, lodge.id) == Decimal("40.00")
        assert ledger.unit_price(ResourceType.TRANSPORT, transport.id) == Decimal("25.00")


class TestResize:
    def test_resize_keeps_reserved_units(self, db, tour):
        ledger = InventoryLedger(db)
        ledger.reserve(ResourceType.TOUR, tour.id, 4)
        ledger.resize(ResourceType.TOUR, tour.id, 6)
        db.refresh(tour)
        assert (tour.capacity, tour.available) == (6, 2)

    def test_resize_below_reserved_fails(self, db, tour):
        ledger = InventoryLedger(db)
        ledger.reserve(ResourceType.TOUR, tour.id, 4)
        with pytest.raises(InvalidInput) as exc:
            ledger.resize(ResourceType.TOUR, tour.id, 3)
        assert exc.value.field == "capacity"
        db.refresh(tour)
        assert (tour.capacity, tour.available) == (10, 6)


class TestConcurrency:
    def test_reserve_reads_the_committed_counter(self, session_factory, tour):
        first, second = session_factory(), session_factory()
        try:
            cached = second.get(Tour, tour.id)
            assert cached.available == 10

            InventoryLedger(first).reserve(ResourceType.TOUR, tour.id, 10)

            with pytest.raises(InsufficientCapacity):
                InventoryLedger(second).reserve(ResourceType.TOUR, tour.id, 1)
        finally:
            first.close()
            second.close()

    def test_stale_write_surfaces_as_conflict(self, session_factory, tour):
        first, second = session_factory(), session_factory()
        try:
            stale = first.get(Tour, tour.id)
            InventoryLedger(second).reserve(ResourceType.TOUR, tour.id, 2)

            with pytest.raises(Conflict):
                with unit_of_work(first):
                    stale.available -= 1
                    first.flush()

            fresh = session_factory()
            assert fresh.get(Tour, tour.id).available == 8
            fresh.close()
        finally:
            first.close()
            second.close()
