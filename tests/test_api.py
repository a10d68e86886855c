from decimal import Decimal

from travel.config import settings

API = settings.API_V1_STR


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json()["docs"] == "/docs"
        assert client.get("/health").json()["status"] == "healthy"


class TestAuth:
    def test_register_login_and_me(self, client):
        response = client.post(f"{API}/auth/register", json={
            "name": "Carol", "email": "carol@example.com", "password": "pa55word"
        })
        assert response.status_code == 201
        assert "password" not in response.json()

        response = client.post(f"{API}/auth/login", json={"email": "carol@example.com", "password": "pa55word"})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["roles"] == ["user"]
        assert body["user"]["is_admin"] is False

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.json()["email"] == "carol@example.com"

    def test_duplicate_email(self, client, user):
        response = client.post(f"{API}/auth/register", json={
            "name": "Alice Again", "email": "alice@example.com", "password": "whatever"
        })
        assert response.status_code == 400
        assert response.json()["error"] == "AlreadyExists"
        assert response.json()["field"] == "email"

    def test_wrong_password(self, client, user):
        response = client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationFailed"

    def test_token_form_login(self, client, user):
        response = client.post(f"{API}/auth/token", data={"username": "alice@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_invalid_token(self, client):
        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationFailed"
        assert response.headers["www-authenticate"] == "Bearer"


class TestBookingApi:
    def test_requires_authentication(self, client, tour):
        response = client.post(f"{API}/bookings/", json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 1})
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationFailed"
        assert response.json()["message"] == "Not authenticated"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_create_and_check_availability(self, client, user_headers, tour):
        response = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 4},
            headers=user_headers
        )
        assert response.status_code == 201
        booking = response.json()
        assert booking["status"] == "PENDING"
        assert Decimal(booking["total_amount"]) == Decimal("400")

        params = {"resource_type": "TOUR", "resource_id": tour.id, "quantity": 7}
        assert client.get(f"{API}/bookings/availability", params=params).json()["available"] is False
        params["quantity"] = 6
        assert client.get(f"{API}/bookings/availability", params=params).json()["available"] is True

        mine = client.get(f"{API}/bookings/my-bookings", headers=user_headers).json()
        assert [b["id"] for b in mine] == [booking["id"]]

    def test_overbooking_maps_to_conflict(self, client, user_headers, lodge):
        response = client.post(
            f"{API}/bookings/",
            json={"resource_type": "LODGE", "resource_id": lodge.id, "quantity": 6},
            headers=user_headers
        )
        assert response.status_code == 409
        assert response.json() == {
            "error": "InsufficientCapacity",
            "message": "Only 5 rooms available",
            "field": None
        }

    def test_invalid_quantity(self, client, user_headers, tour):
        response = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 0},
            headers=user_headers
        )
        assert response.status_code == 400
        assert response.json()["field"] == "quantity"

    def test_missing_resource(self, client, user_headers):
        response = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TRANSPORT", "resource_id": 77, "quantity": 1},
            headers=user_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Transport not found with id: 77"

    def test_other_users_booking_is_forbidden(self, client, user_headers, other_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 1},
            headers=user_headers
        ).json()
        response = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=other_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDenied"

    def test_cancel_twice(self, client, user_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 2},
            headers=user_headers
        ).json()
        assert client.post(f"{API}/bookings/{booking['id']}/cancel", headers=user_headers).status_code == 200
        response = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=user_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_admin_summary(self, client, user_headers, admin_headers, tour):
        client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 2},
            headers=user_headers
        )
        forbidden = client.get(f"{API}/bookings/admin/summary", headers=user_headers)
        assert forbidden.status_code == 403
        assert forbidden.json()["error"] == "PermissionDenied"
        summary = client.get(f"{API}/bookings/admin/summary", headers=admin_headers).json()
        assert summary["total_bookings"] == 1
        assert summary["pending_bookings"] == 1

    def test_listing_all_bookings_needs_admin(self, client, user_headers, admin_headers):
        response = client.get(f"{API}/bookings/", headers=user_headers)
        assert response.status_code == 403
        assert response.json() == {
            "error": "PermissionDenied", "message": "Not enough permissions", "field": None
        }
        assert client.get(f"{API}/bookings/", headers=admin_headers).status_code == 200

    def test_customer_cannot_confirm_without_paying(self, client, user_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 2},
            headers=user_headers
        ).json()

        response = client.post(f"{API}/bookings/{booking['id']}/confirm", headers=user_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDenied"
        assert client.get(f"{API}/bookings/{booking['id']}", headers=user_headers).json()["status"] == "PENDING"

        payment = client.post(
            f"{API}/payments/",
            json={"booking_id": booking["id"], "method": "CARD"},
            headers=user_headers
        ).json()
        processed = client.post(f"{API}/payments/{payment['id']}/process", headers=user_headers)
        assert processed.json()["status"] == "COMPLETED"
        assert client.get(f"{API}/bookings/{booking['id']}", headers=user_headers).json()["status"] == "CONFIRMED"

    def test_admin_confirms_booking(self, client, user_headers, admin_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 1},
            headers=user_headers
        ).json()
        response = client.post(f"{API}/bookings/{booking['id']}/confirm", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"


class TestPaymentApi:
    def test_pay_and_refund(self, client, user_headers, admin_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 3},
            headers=user_headers
        ).json()

        payment = client.post(
            f"{API}/payments/",
            json={"booking_id": booking["id"], "method": "CARD"},
            headers=user_headers
        ).json()
        assert payment["status"] == "PENDING"

        processed = client.post(f"{API}/payments/{payment['id']}/process", headers=user_headers)
        assert processed.json()["status"] == "COMPLETED"
        assert client.get(f"{API}/bookings/{booking['id']}", headers=user_headers).json()["status"] == "CONFIRMED"

        again = client.post(f"{API}/payments/{payment['id']}/process", headers=user_headers)
        assert again.status_code == 409
        assert again.json()["error"] == "AlreadyProcessed"

        assert client.post(f"{API}/payments/{payment['id']}/refund", headers=user_headers).status_code == 403
        refunded = client.post(f"{API}/payments/{payment['id']}/refund", headers=admin_headers)
        assert refunded.json()["status"] == "REFUNDED"

        tour_now = client.get(f"{API}/tours/{tour.id}").json()
        assert tour_now["available"] == 10

    def test_payment_for_cancelled_booking(self, client, user_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 1},
            headers=user_headers
        ).json()
        client.post(f"{API}/bookings/{booking['id']}/cancel", headers=user_headers)
        response = client.post(
            f"{API}/payments/",
            json={"booking_id": booking["id"], "method": "CARD"},
            headers=user_headers
        )
        assert response.status_code == 409
        assert response.json()["error"] == "PaymentNotAllowed"

    def test_customer_pays_booking_total(self, client, user_headers, admin_headers, tour):
        booking = client.post(
            f"{API}/bookings/",
            json={"resource_type": "TOUR", "resource_id": tour.id, "quantity": 2},
            headers=user_headers
        ).json()

        response = client.post(
            f"{API}/payments/",
            json={"booking_id": booking["id"], "method": "CARD", "amount": "0.01"},
            headers=user_headers
        )
        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDenied"
        assert response.json()["field"] == "amount"

        payment = client.post(
            f"{API}/payments/",
            json={"booking_id": booking["id"], "method": "CARD"},
            headers=user_headers
        ).json()
        assert Decimal(payment["amount"]) == Decimal("200")

        changed = client.put(f"{API}/payments/{payment['id']}", json={"amount": "0.01"}, headers=user_headers)
        assert changed.status_code == 403
        assert changed.json()["field"] == "amount"

        adjusted = client.put(f"{API}/payments/{payment['id']}", json={"amount": "150.00"}, headers=admin_headers)
        assert adjusted.status_code == 200
        assert Decimal(adjusted.json()["amount"]) == Decimal("150.00")


class TestCatalogApi:
    def test_catalog_writes_need_admin(self, client, user_headers, admin_headers, location):
        payload = {
            "name": "Jungle Safari",
            "location_id": location.id,
            "price": "80.00",
            "duration_days": 2,
            "start_date": "2099-01-10",
            "end_date": "2099-01-12",
            "capacity": 15
        }
        assert client.post(f"{API}/tours/", json=payload, headers=user_headers).status_code == 403

        response = client.post(f"{API}/tours/", json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["available"] == 15

    def test_missing_tour(self, client):
        response = client.get(f"{API}/tours/12345")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_public_listings(self, client, tour, lodge, transport):
        assert client.get(f"{API}/tours/").json()["total"] == 1
        assert client.get(f"{API}/lodges/top-rated").json()[0]["id"] == lodge.id
        assert client.get(f"{API}/transports/type/BUS").json()[0]["id"] == transport.id
        assert client.get(f"{API}/locations/country/Nepal").status_code == 200
