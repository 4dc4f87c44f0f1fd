"""Shared fixtures: marketplace actors, a serviceable area and bearer tokens."""

import datetime
from decimal import Decimal

import jwt
import pytest
from django.conf import settings
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.accounts.models import Address, User, UserRole
from apps.geofencing.models import ServiceArea
from apps.scheduling.models import MealSlot
from apps.vendors.models import Product, Vendor, VendorStatus

# Square around central Bengaluru, [lng, lat] pairs
CITY_BOUNDARY = {
    "type": "Polygon",
    "coordinates": [
        [[77.50, 12.90], [77.70, 12.90], [77.70, 13.10], [77.50, 13.10], [77.50, 12.90]],
    ],
}


def make_token(user_id, role, expires_in=3600, secret=None):
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": datetime.datetime.now(tz=datetime.timezone.utc) + datetime.timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.CUSTOMER, name=None):
        counter["n"] += 1
        return User.objects.create(
            name=name or f"{role.title()} {counter['n']}",
            phone=f"90000{counter['n']:05d}",
            role=role,
        )

    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER, name="Asha")


@pytest.fixture
def vendor_owner(make_user):
    return make_user(UserRole.VENDOR, name="Ravi")


@pytest.fixture
def partner(make_user):
    return make_user(UserRole.DELIVERY_PARTNER, name="Imran")


@pytest.fixture
def other_partner(make_user):
    return make_user(UserRole.DELIVERY_PARTNER, name="Kiran")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.SUPER_ADMIN, name="Ops")


@pytest.fixture
def service_area(db):
    return ServiceArea.objects.create(
        name="Central Bengaluru",
        city="Bengaluru",
        state="Karnataka",
        boundary=CITY_BOUNDARY,
        pincodes=["560001"],
        center_latitude=Decimal("13.00000000"),
        center_longitude=Decimal("77.60000000"),
    )


@pytest.fixture
def vendor(vendor_owner, service_area):
    return Vendor.objects.create(
        user=vendor_owner,
        business_name="Ravi's Kitchen",
        status=VendorStatus.ACTIVE,
        service_area=service_area,
        latitude=Decimal("13.00000000"),
        longitude=Decimal("77.60000000"),
        service_radius_km=Decimal("10.00"),
    )


@pytest.fixture
def address(customer):
    return Address.objects.create(
        user=customer,
        label="Home",
        street="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        pincode="560001",
        latitude=Decimal("12.98000000"),
        longitude=Decimal("77.62000000"),
    )


@pytest.fixture
def products(vendor):
    return [
        Product.objects.create(vendor=vendor, name="Masala Dosa", price=Decimal("120.00")),
        Product.objects.create(vendor=vendor, name="Filter Coffee", price=Decimal("40.50")),
    ]


@pytest.fixture
def lunch_slot(vendor):
    return MealSlot.objects.create(
        vendor=vendor,
        name="Lunch",
        start_time="12:00",
        end_time="14:00",
        cutoff_time="10:00",
        time_window_duration=30,
    )


@pytest.fixture
def morning():
    """A moment well before the lunch cutoff."""
    return datetime.datetime(2026, 3, 2, 8, 30, tzinfo=datetime.timezone.utc)


@pytest.fixture
def api_client():
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user.id, user.role)}")
        return client

    return _client


@pytest.fixture
def make_order(customer, vendor, address):
    from apps.orders.models import Order, OrderStatus, OrderStatusHistory

    counter = {"n": 0}

    def _make_order(status=OrderStatus.PENDING, delivery_partner=None):
        counter["n"] += 1
        order = Order.objects.create(
            order_number=f"ORD-20260302-{counter['n']:05d}",
            customer=customer,
            vendor=vendor,
            delivery_address=address,
            delivery_partner=delivery_partner,
            subtotal=Decimal("100.00"),
            delivery_fee=Decimal("50.00"),
            tax=Decimal("5.00"),
            total=Decimal("155.00"),
            status=status,
        )
        OrderStatusHistory.objects.create(order=order, sequence=1, status=status, notes="Order created")
        return order

    return _make_order


class FakeConnection:
    """Stands in for a websocket consumer registered with the tracking registry."""

    def __init__(self, fail_sends=False):
        self.is_open = True
        self.fail_sends = fail_sends
        self.sent = []
        self.close_codes = []

    async def send_event(self, message):
        if self.fail_sends:
            raise ConnectionError("broken pipe")
        self.sent.append(message)

    async def close(self, code=None):
        self.is_open = False
        self.close_codes.append(code)


@pytest.fixture
def make_connection():
    return FakeConnection
