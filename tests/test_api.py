import pytest

from apps.accounts.models import UserRole
from apps.orders.models import OrderStatus

from .conftest import CITY_BOUNDARY

pytestmark = pytest.mark.django_db


def test_health_needs_no_credentials(api_client):
    response = api_client().get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["tracking"]["connections"] == 0


def test_readiness_reports_dependencies(api_client):
    response = api_client().get("/api/v1/health/ready/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"] == {"database": True, "cache": True}
    assert body["eventBus"] == "disabled"


def test_missing_credentials_use_error_envelope(api_client):
    response = api_client().get("/api/v1/orders/")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"


def test_bad_token_is_rejected(api_client):
    client = api_client()
    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    response = client.get("/api/v1/orders/")
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid token"


def test_customer_places_and_reads_order(api_client, customer, vendor, address, products):
    client = api_client(customer)
    response = client.post(
        "/api/v1/orders/",
        {
            "vendor_id": str(vendor.id),
            "delivery_address_id": str(address.id),
            "items": [{"product_id": str(products[0].id), "quantity": 2}],
        },
        format="json",
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["status_category"] == "active"
    assert body["subtotal"] == "240.00"
    assert body["total"] == "302.00"
    assert body["items"][0]["product_name"] == "Masala Dosa"
    assert body["status_history"][0]["notes"] == "Order created"

    fetched = client.get(f"/api/v1/orders/{body['id']}/")
    assert fetched.status_code == 200
    assert fetched.json()["order_number"] == body["order_number"]

    listed = client.get("/api/v1/orders/")
    assert [order["id"] for order in listed.json()] == [body["id"]]


def test_only_customers_may_create_orders(api_client, vendor_owner, vendor, products):
    response = api_client(vendor_owner).post(
        "/api/v1/orders/",
        {"vendor_id": str(vendor.id), "items": [{"product_id": str(products[0].id), "quantity": 1}]},
        format="json",
    )
    assert response.status_code == 403


def test_malformed_order_payload(api_client, customer, vendor):
    response = api_client(customer).post(
        "/api/v1/orders/", {"vendor_id": str(vendor.id), "items": []}, format="json"
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "items" in error["fields"]


def test_admission_errors_are_rendered(api_client, customer, vendor, products):
    response = api_client(customer).post(
        "/api/v1/orders/",
        {"vendor_id": str(vendor.id), "items": [{"product_id": str(products[0].id), "quantity": 1}]},
        format="json",
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ADDRESS_NOT_FOUND"


def test_status_updates_through_api(api_client, make_order, vendor_owner, customer):
    order = make_order()

    response = api_client(vendor_owner).post(
        f"/api/v1/orders/{order.id}/status/", {"status": "ACCEPTED", "notes": "On it"}, format="json"
    )
    assert response.status_code == 200
    assert response.json()["status"] == OrderStatus.ACCEPTED
    assert response.json()["status_history"][-1]["notes"] == "On it"

    response = api_client(customer).post(
        f"/api/v1/orders/{order.id}/status/", {"status": "DELIVERED"}, format="json"
    )
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "INVALID_STATE_TRANSITION"
    assert error["currentStatus"] == "ACCEPTED"
    assert error["allowed"] == ["CANCELLED"]


def test_order_visibility(api_client, make_order, make_user):
    order = make_order()
    stranger = make_user(UserRole.CUSTOMER)

    assert api_client(stranger).get(f"/api/v1/orders/{order.id}/").status_code == 403
    missing = api_client(stranger).get("/api/v1/orders/00000000-0000-0000-0000-000000000000/")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ORDER_NOT_FOUND"
    assert api_client(stranger).get("/api/v1/orders/").json() == []


def test_vendor_manages_meal_slots(api_client, vendor_owner, vendor, make_user):
    client = api_client(vendor_owner)
    response = client.post(
        f"/api/v1/vendors/{vendor.id}/meal-slots/",
        {"name": "Dinner", "start_time": "19:00", "end_time": "21:00", "cutoff_time": "17:00"},
        format="json",
    )
    assert response.status_code == 201
    slot_id = response.json()["id"]

    windows = client.get(f"/api/v1/meal-slots/{slot_id}/windows/").json()
    assert windows["windows"] == [{"start": "19:00", "end": "20:00"}, {"start": "20:00", "end": "21:00"}]

    response = client.patch(f"/api/v1/meal-slots/{slot_id}/", {"cutoff_time": "20:00"}, format="json")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SLOT_CONFIGURATION"

    assert client.delete(f"/api/v1/meal-slots/{slot_id}/").json()["is_active"] is False
    assert client.get(f"/api/v1/vendors/{vendor.id}/meal-slots/?active=true").json() == []

    other_vendor = make_user(UserRole.VENDOR)
    response = api_client(other_vendor).post(
        f"/api/v1/vendors/{vendor.id}/meal-slots/",
        {"name": "Brunch", "start_time": "10:00", "end_time": "12:00", "cutoff_time": "08:00"},
        format="json",
    )
    assert response.status_code == 403


def test_vendor_toggles_fulfillment(api_client, vendor_owner, customer, vendor):
    url = f"/api/v1/vendors/{vendor.id}/fulfillment/"
    assert api_client(customer).get(url).json()["enabled_methods"] == ["PICKUP", "DELIVERY"]

    response = api_client(vendor_owner).patch(url, {"eat_in_enabled": True}, format="json")
    assert response.status_code == 200
    assert response.json()["enabled_methods"] == ["EAT_IN", "PICKUP", "DELIVERY"]

    assert api_client(customer).patch(url, {"eat_in_enabled": False}, format="json").status_code == 403
    assert api_client(vendor_owner).patch(url, {}, format="json").status_code == 400


def test_service_area_admin_and_serviceability(api_client, admin, customer, service_area):
    response = api_client(admin).post(
        "/api/v1/service-areas/",
        {
            "name": "Whitefield",
            "city": "Bengaluru",
            "state": "Karnataka",
            "boundary": {
                "type": "Polygon",
                "coordinates": [[[77.72, 12.95], [77.78, 12.95], [77.78, 13.0], [77.72, 13.0], [77.72, 12.95]]],
            },
            "pincodes": ["560066"],
        },
        format="json",
    )
    assert response.status_code == 201

    assert api_client(customer).post(
        "/api/v1/service-areas/",
        {"name": "Nope", "city": "X", "state": "Y", "boundary": CITY_BOUNDARY},
        format="json",
    ).status_code == 403

    names = [area["name"] for area in api_client(customer).get("/api/v1/service-areas/").json()]
    assert names == ["Central Bengaluru", "Whitefield"]

    check = api_client(customer).get("/api/v1/service-areas/check/?lat=13.0&lng=77.6").json()
    assert check["serviceable"] is True
    assert check["serviceArea"]["id"] == str(service_area.id)

    invalid = api_client(admin).post(
        "/api/v1/service-areas/",
        {"name": "Broken", "city": "X", "state": "Y", "boundary": {"type": "Polygon", "coordinates": [[[0, 0]]]}},
        format="json",
    )
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "INVALID_GEOMETRY"
