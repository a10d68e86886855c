from datetime import date, timedelta
from decimal import Decimal

import pytest

from travel.bookings.service import BookingService
from travel.enums import ResourceType
from travel.exceptions import DeletionNotAllowed, InvalidInput, NotFound
from travel.locations.schemas import LocationCreate
from travel.locations.service import LocationService
from travel.lodges.schemas import LodgeCreate, LodgeUpdate
from travel.lodges.service import LodgeService
from travel.tours.schemas import TourCreate, TourUpdate
from travel.tours.service import TourService
from travel.transports.schemas import TransportCreate, TransportUpdate
from travel.transports.service import TransportService


def tour_data(**overrides):
    data = dict(
        name="Everest View Trek",
        price=Decimal("250.00"),
        duration_days=5,
        start_date=date.today() + timedelta(days=10),
        end_date=date.today() + timedelta(days=15),
        capacity=12
    )
    data.update(overrides)
    return TourCreate(**data)


class TestTours:
    def test_create_defaults_available_to_capacity(self, db, location):
        tour = TourService.create_tour(db, tour_data(location_id=location.id))
        assert (tour.capacity, tour.available) == (12, 12)

    @pytest.mark.parametrize("overrides, field", [
        ({"name": " "}, "name"),
        ({"price": Decimal("-1")}, "price"),
        ({"duration_days": 0}, "duration_days"),
        ({"capacity": 5, "available": 6}, "available"),
    ])
    def test_create_validation(self, db, overrides, field):
        with pytest.raises(InvalidInput) as exc:
            TourService.create_tour(db, tour_data(**overrides))
        assert exc.value.field == field

    def test_end_before_start(self, db):
        with pytest.raises(InvalidInput, match="Start date must be before end date"):
            TourService.create_tour(db, tour_data(end_date=date.today()))

    def test_unknown_location(self, db):
        with pytest.raises(NotFound, match="Location"):
            TourService.create_tour(db, tour_data(location_id=999))

    def test_capacity_update_keeps_reservations(self, db, user, tour):
        BookingService(db).create_booking(user.id, ResourceType.TOUR, tour.id, 4)
        updated = TourService.update_tour(db, tour.id, TourUpdate(capacity=20, price=Decimal("120.00")))
        db.refresh(updated)
        assert (updated.capacity, updated.available) == (20, 16)
        assert updated.price == Decimal("120.00")

    def test_capacity_below_reserved_rolls_back(self, db, user, tour):
        BookingService(db).create_booking(user.id, ResourceType.TOUR, tour.id, 4)
        with pytest.raises(InvalidInput):
            TourService.update_tour(db, tour.id, TourUpdate(capacity=3, name="Renamed"))
        db.refresh(tour)
        assert tour.name == "Annapurna Base Camp Trek"
        assert tour.capacity == 10

    def test_delete_with_active_booking(self, db, user, tour):
        booking = BookingService(db).create_booking(user.id, ResourceType.TOUR, tour.id, 1)
        with pytest.raises(DeletionNotAllowed):
            TourService.delete_tour(db, tour.id)
        BookingService(db).cancel_booking(booking.id)
        TourService.delete_tour(db, tour.id)

    def test_deleted_ids_are_not_reused(self, db, user, tour):
        tour_id = tour.id
        booking = BookingService(db).create_booking(user.id, ResourceType.TOUR, tour_id, 1)
        BookingService(db).cancel_booking(booking.id)
        TourService.delete_tour(db, tour_id)

        replacement = TourService.create_tour(db, tour_data())
        assert replacement.id > tour_id
        with pytest.raises(NotFound):
            BookingService(db).get_bookings_by_resource(ResourceType.TOUR, tour_id)

    def test_searches(self, db, location, tour):
        started = TourService.create_tour(db, tour_data(
            name="Sunrise Walk",
            price=Decimal("20.00"),
            start_date=date.today() - timedelta(days=1),
            end_date=date.today() + timedelta(days=1)
        ))
        assert [t.id for t in TourService.get_available_tours(db)] == [tour.id]
        assert [t.id for t in TourService.get_tours_by_price_range(db, Decimal("0"), Decimal("50"))] == [started.id]
        assert [t.id for t in TourService.search_tours_by_name(db, "annapurna")] == [tour.id]
        assert [t.id for t in TourService.get_tours_by_location(db, location.id)] == [tour.id]
        in_range = TourService.get_tours_by_date_range(db, date.today() - timedelta(days=2), date.today())
        assert [t.id for t in in_range] == [started.id]


class TestLodges:
    def test_create_and_rating_bounds(self, db, location):
        lodge = LodgeService.create_lodge(db, LodgeCreate(
            name="Lakeside Inn", type="HOTEL", address="Lakeside", location_id=location.id,
            price_per_night=Decimal("60.00"), rating=Decimal("3.80"), capacity=8
        ))
        assert lodge.available == 8

        with pytest.raises(InvalidInput) as exc:
            LodgeService.update_lodge(db, lodge.id, LodgeUpdate(rating=Decimal("5.50")))
        assert exc.value.field == "rating"

    def test_requires_address(self, db):
        with pytest.raises(InvalidInput) as exc:
            LodgeService.create_lodge(db, LodgeCreate(
                name="Nowhere", type="HOTEL", address="", price_per_night=Decimal("10"), capacity=1
            ))
        assert exc.value.field == "address"

    def test_rating_queries(self, db, location, lodge):
        LodgeService.create_lodge(db, LodgeCreate(
            name="Budget Hostel", type="HOSTEL", address="Freak Street", location_id=location.id,
            price_per_night=Decimal("10.00"), rating=Decimal("3.00"), capacity=20
        ))
        assert [l.id for l in LodgeService.get_top_rated_lodges(db)] == [lodge.id]
        assert len(LodgeService.get_lodges_by_rating(db, Decimal("3"))) == 2
        assert LodgeService.calculate_average_price_by_location(db, location.id) == Decimal("25.00")
        assert [l.type for l in LodgeService.get_lodges_by_type(db, "HOSTEL")] == ["HOSTEL"]

    def test_average_price_without_lodges(self, db, other_location):
        assert LodgeService.calculate_average_price_by_location(db, other_location.id) == Decimal("0")

    def test_available_lodges(self, db, user, lodge):
        BookingService(db).create_booking(user.id, ResourceType.LODGE, lodge.id, 5)
        assert LodgeService.get_available_lodges(db) == []


class TestTransports:
    def test_route_must_differ(self, db, location):
        with pytest.raises(InvalidInput) as exc:
            TransportService.create_transport(db, TransportCreate(
                name="Loop Bus", type="BUS", from_location_id=location.id, to_location_id=location.id,
                price_per_ticket=Decimal("5"), capacity=10
            ))
        assert exc.value.field == "to_location_id"

    def test_by_location_matches_either_end(self, db, location, other_location, transport):
        assert [t.id for t in TransportService.get_transports_by_location(db, location.id)] == [transport.id]
        assert [t.id for t in TransportService.get_transports_by_location(db, other_location.id)] == [transport.id]

    def test_update_and_queries(self, db, transport):
        TransportService.update_transport(db, transport.id, TransportUpdate(price_per_ticket=Decimal("30.00")))
        assert [t.id for t in TransportService.get_transports_by_type(db, "BUS")] == [transport.id]
        assert TransportService.get_transports_by_price_range(db, Decimal("26"), Decimal("35"))[0].id == transport.id
        assert TransportService.get_transports_by_price_range(db, Decimal("0"), Decimal("20")) == []

    def test_invalid_price_range(self, db):
        with pytest.raises(InvalidInput):
            TransportService.get_transports_by_price_range(db, Decimal("50"), Decimal("10"))


class TestLocations:
    def test_create_and_search(self, db):
        created = LocationService.create_location(db, LocationCreate(name="Chitwan", city="Sauraha", country="Nepal"))
        assert [l.id for l in LocationService.search_locations_by_name(db, "chit")] == [created.id]
        assert [l.id for l in LocationService.get_locations_by_country(db, "Nepal")] == [created.id]

    def test_location_in_use_cannot_be_deleted(self, db, location, tour):
        with pytest.raises(DeletionNotAllowed):
            LocationService.delete_location(db, location.id)

    def test_missing_location(self, db):
        with pytest.raises(NotFound):
            LocationService.get_location_by_id(db, 404)
