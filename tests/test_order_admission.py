import datetime
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from apps.accounts.models import Address, UserRole
from apps.core.exceptions import (
    AddressNotFound,
    AddressNotServiceable,
    AddressOwnershipMismatch,
    MealSlotUnavailable,
    MethodNotEnabled,
    OrderCreationFailed,
    OutOfDeliveryRange,
    ProductUnavailable,
    Unauthorized,
    ValidationFailed,
    VendorDoesNotServeLocation,
    VendorNotFound,
    VendorUnavailable,
    WindowOutOfRange,
)
from apps.geofencing.models import ServiceArea
from apps.orders.admission import OrderItemRequest, OrderRequest, order_admission_service
from apps.orders.models import Cart, CartItem, Order, OrderItem, OrderNumberSequence, OrderStatus
from apps.scheduling.models import MealSlot
from apps.scheduling.services import meal_slot_service
from apps.vendors.models import FulfillmentMethod, Product, ProductStatus, Vendor, VendorStatus
from apps.vendors.services import fulfillment_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def published():
    with mock.patch("apps.events.services.EventService.publish") as publish:
        yield publish


@pytest.fixture
def order_request(customer, vendor, address, products):
    dosa, coffee = products

    def _request(**overrides):
        values = {
            "customer_id": str(customer.id),
            "vendor_id": str(vendor.id),
            "items": [OrderItemRequest(str(dosa.id), 2), OrderItemRequest(str(coffee.id), 1)],
            "delivery_address_id": str(address.id),
        }
        values.update(overrides)
        return OrderRequest(**values)

    return _request


def test_delivery_order_is_priced_and_recorded(order_request, morning, vendor, published):
    order = order_admission_service.create_order(order_request(notes="Ring twice"), now=morning)

    assert order.status == OrderStatus.PENDING
    assert order.order_number == "ORD-20260302-00001"
    assert order.subtotal == Decimal("280.50")
    assert order.delivery_fee == Decimal("50.00")
    assert order.tax == Decimal("14.03")
    assert order.total == Decimal("344.53")
    assert order.notes == "Ring twice"

    items = sorted(order.items.all(), key=lambda item: item.product_name)
    assert [(i.product_name, i.unit_price, i.quantity, i.line_total) for i in items] == [
        ("Filter Coffee", Decimal("40.50"), 1, Decimal("40.50")),
        ("Masala Dosa", Decimal("120.00"), 2, Decimal("240.00")),
    ]

    history = list(order.status_history.all())
    assert len(history) == 1
    assert history[0].sequence == 1
    assert history[0].status == OrderStatus.PENDING
    assert history[0].notes == "Order created"

    vendor.refresh_from_db()
    assert vendor.total_orders == 1


def test_order_numbers_increase_within_a_day(order_request, morning, published):
    first = order_admission_service.create_order(order_request(), now=morning)
    second = order_admission_service.create_order(order_request(), now=morning)
    next_day = order_admission_service.create_order(order_request(), now=morning + datetime.timedelta(days=1))

    assert first.order_number == "ORD-20260302-00001"
    assert second.order_number == "ORD-20260302-00002"
    assert next_day.order_number == "ORD-20260303-00001"


def test_order_numbers_continue_after_existing_orders(order_request, make_order, morning, published):
    make_order()
    make_order()

    order = order_admission_service.create_order(order_request(), now=morning)
    assert order.order_number == "ORD-20260302-00003"


def test_order_numbers_are_allocated_under_a_row_lock(order_request, morning, published):
    manager = OrderNumberSequence.objects
    with mock.patch.object(manager, "select_for_update", wraps=manager.select_for_update) as locked:
        order_admission_service.create_order(order_request(), now=morning)
        order_admission_service.create_order(order_request(), now=morning)

    assert locked.call_count == 2
    assert OrderNumberSequence.objects.get(day=datetime.date(2026, 3, 2)).last_value == 2


def test_order_numbers_grow_past_five_digits(order_request, morning, published):
    OrderNumberSequence.objects.create(day=datetime.date(2026, 3, 2), last_value=99999)

    first = order_admission_service.create_order(order_request(), now=morning)
    second = order_admission_service.create_order(order_request(), now=morning)

    assert first.order_number == "ORD-20260302-100000"
    assert second.order_number == "ORD-20260302-100001"


def test_longest_existing_number_wins(order_request, make_order, morning, published):
    Order.objects.filter(pk=make_order().pk).update(order_number="ORD-20260302-99999")
    Order.objects.filter(pk=make_order().pk).update(order_number="ORD-20260302-100000")

    order = order_admission_service.create_order(order_request(), now=morning)
    assert order.order_number == "ORD-20260302-100001"


def test_naive_now_is_read_as_local_time(order_request, lunch_slot, published):
    order = order_admission_service.create_order(
        order_request(meal_slot_id=str(lunch_slot.id)), now=datetime.datetime(2026, 3, 2, 8, 30)
    )
    assert order.order_number == "ORD-20260302-00001"

    with pytest.raises(MealSlotUnavailable):
        order_admission_service.create_order(
            order_request(meal_slot_id=str(lunch_slot.id)), now=datetime.datetime(2026, 3, 2, 11, 0)
        )


def test_item_prices_are_snapshots(order_request, morning, products, published):
    order = order_admission_service.create_order(order_request(), now=morning)
    dosa = products[0]
    dosa.price = Decimal("999.00")
    dosa.save()

    item = OrderItem.objects.get(order=order, product=dosa)
    assert item.unit_price == Decimal("120.00")


def test_duplicate_products_are_merged(order_request, morning, products, published):
    dosa = products[0]
    order = order_admission_service.create_order(
        order_request(items=[OrderItemRequest(str(dosa.id), 1), OrderItemRequest(str(dosa.id), 2)]), now=morning
    )
    [item] = order.items.all()
    assert item.quantity == 3
    assert order.subtotal == Decimal("360.00")


def test_pickup_needs_no_address_and_has_no_fee(order_request, morning, published):
    order = order_admission_service.create_order(
        order_request(fulfillment_method=FulfillmentMethod.PICKUP, delivery_address_id=None), now=morning
    )
    assert order.fulfillment_method == FulfillmentMethod.PICKUP
    assert order.delivery_address_id is None
    assert order.delivery_fee == Decimal("0.00")
    assert order.total == Decimal("294.53")


def test_matching_cart_is_cleared(order_request, morning, customer, vendor, products, published):
    cart = Cart.objects.create(customer=customer, vendor=vendor)
    CartItem.objects.create(cart=cart, product=products[0], quantity=2)

    order_admission_service.create_order(order_request(), now=morning)

    assert not Cart.objects.filter(customer=customer, vendor=vendor).exists()
    assert not CartItem.objects.exists()


def test_created_event_is_sent_after_commit(order_request, morning, published, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        order = order_admission_service.create_order(order_request(), now=morning)

    [event] = [call.args[0] for call in published.call_args_list]
    assert event.event_type == "order_created"
    assert event.order_id == str(order.id)
    assert event.status == "PENDING"


def test_only_customers_place_orders(order_request, vendor_owner, morning):
    with pytest.raises(Unauthorized):
        order_admission_service.create_order(order_request(customer_id=str(vendor_owner.id)), now=morning)
    with pytest.raises(Unauthorized):
        order_admission_service.create_order(order_request(customer_id="not-a-uuid"), now=morning)


def test_vendor_must_exist_and_be_active(order_request, vendor, morning):
    with pytest.raises(VendorNotFound):
        order_admission_service.create_order(
            order_request(vendor_id="00000000-0000-0000-0000-000000000000"), now=morning
        )

    vendor.status = VendorStatus.SUSPENDED
    vendor.save()
    with pytest.raises(VendorUnavailable):
        order_admission_service.create_order(order_request(), now=morning)


def test_disabled_method_is_rejected_before_anything_else(order_request, vendor, morning):
    fulfillment_service.update_config(vendor.id, delivery_enabled=False)

    with pytest.raises(MethodNotEnabled) as excinfo:
        order_admission_service.create_order(order_request(delivery_address_id=None), now=morning)

    assert excinfo.value.details["method"] == "DELIVERY"
    assert not Order.objects.exists()


def test_eat_in_is_off_by_default(order_request, morning):
    with pytest.raises(MethodNotEnabled):
        order_admission_service.create_order(
            order_request(fulfillment_method=FulfillmentMethod.EAT_IN, delivery_address_id=None), now=morning
        )


def test_delivery_address_rules(order_request, make_user, morning):
    with pytest.raises(AddressNotFound):
        order_admission_service.create_order(order_request(delivery_address_id=None), now=morning)
    with pytest.raises(AddressNotFound):
        order_admission_service.create_order(
            order_request(delivery_address_id="00000000-0000-0000-0000-000000000000"), now=morning
        )

    stranger = make_user(UserRole.CUSTOMER)
    foreign = Address.objects.create(
        user=stranger, street="1 Brigade Road", city="Bengaluru", state="Karnataka", pincode="560025"
    )
    with pytest.raises(AddressOwnershipMismatch):
        order_admission_service.create_order(order_request(delivery_address_id=str(foreign.id)), now=morning)
    assert not Order.objects.exists()


def test_meal_slot_window_is_recorded(order_request, lunch_slot, morning, published):
    order = order_admission_service.create_order(
        order_request(
            meal_slot_id=str(lunch_slot.id), preferred_delivery_start="12:30", preferred_delivery_end="13:00"
        ),
        now=morning,
    )
    assert order.meal_slot_id == lunch_slot.id
    assert order.preferred_delivery_start == "12:30"
    assert order.preferred_delivery_end == "13:00"


def test_meal_slot_past_cutoff(order_request, lunch_slot, morning):
    late = morning.replace(hour=10, minute=0)
    with pytest.raises(MealSlotUnavailable):
        order_admission_service.create_order(order_request(meal_slot_id=str(lunch_slot.id)), now=late)


def test_inactive_or_foreign_meal_slot(order_request, lunch_slot, make_user, service_area, morning):
    lunch_slot.is_active = False
    lunch_slot.save()
    with pytest.raises(MealSlotUnavailable):
        order_admission_service.create_order(order_request(meal_slot_id=str(lunch_slot.id)), now=morning)

    other_vendor = Vendor.objects.create(
        user=make_user(UserRole.VENDOR), business_name="Elsewhere", status=VendorStatus.ACTIVE
    )
    foreign = MealSlot.objects.create(
        vendor=other_vendor, name="Lunch", start_time="12:00", end_time="14:00", cutoff_time="10:00"
    )
    with pytest.raises(MealSlotUnavailable):
        order_admission_service.create_order(order_request(meal_slot_id=str(foreign.id)), now=morning)


@pytest.mark.parametrize(
    "start,end,cutoff,duration",
    [("12:00", "13:45", "10:00", 30), ("18:00", "21:00", "17:00", 40), ("23:00", "23:50", "22:00", 60)],
)
def test_every_offered_window_is_admitted(order_request, vendor, morning, published, start, end, cutoff, duration):
    slot = meal_slot_service.create_meal_slot(vendor.id, "Any", start, end, cutoff, duration)

    for window in meal_slot_service.get_delivery_windows(slot.id):
        offered = window.to_dict()
        order = order_admission_service.create_order(
            order_request(
                meal_slot_id=str(slot.id),
                preferred_delivery_start=offered["start"],
                preferred_delivery_end=offered["end"],
            ),
            now=morning,
        )
        assert (order.preferred_delivery_start, order.preferred_delivery_end) == (offered["start"], offered["end"])


def test_window_past_slot_end_is_still_rejected(order_request, lunch_slot, morning):
    meal_slot_service.update_meal_slot(lunch_slot.id, end_time="13:45")
    with pytest.raises(WindowOutOfRange):
        order_admission_service.create_order(
            order_request(
                meal_slot_id=str(lunch_slot.id), preferred_delivery_start="13:30", preferred_delivery_end="14:00"
            ),
            now=morning,
        )


@pytest.mark.parametrize(
    "start,end",
    [("11:30", "12:30"), ("13:30", "14:30"), ("13:00", "12:30"), ("12:30", None)],
)
def test_window_outside_slot(order_request, lunch_slot, morning, start, end):
    with pytest.raises(WindowOutOfRange):
        order_admission_service.create_order(
            order_request(
                meal_slot_id=str(lunch_slot.id), preferred_delivery_start=start, preferred_delivery_end=end
            ),
            now=morning,
        )


def test_window_requires_meal_slot(order_request, morning):
    with pytest.raises(WindowOutOfRange):
        order_admission_service.create_order(
            order_request(preferred_delivery_start="12:30", preferred_delivery_end="13:00"), now=morning
        )


def test_address_outside_every_area_gets_nearest_hint(order_request, customer, service_area, morning):
    outside = Address.objects.create(
        user=customer,
        street="Hosur Road",
        city="Bengaluru",
        state="Karnataka",
        pincode="560100",
        latitude=Decimal("12.50000000"),
        longitude=Decimal("77.60000000"),
    )
    with pytest.raises(AddressNotServiceable) as excinfo:
        order_admission_service.create_order(order_request(delivery_address_id=str(outside.id)), now=morning)

    nearest = excinfo.value.details["nearestArea"]
    assert nearest["id"] == str(service_area.id)
    assert nearest["distanceKm"] == pytest.approx(55.6, abs=0.5)


def test_vendor_outside_customer_area(order_request, vendor, morning):
    other_area = ServiceArea.objects.create(
        name="Mysuru",
        city="Mysuru",
        state="Karnataka",
        boundary={
            "type": "Polygon",
            "coordinates": [[[76.5, 12.2], [76.8, 12.2], [76.8, 12.4], [76.5, 12.4], [76.5, 12.2]]],
        },
    )
    vendor.service_area = other_area
    vendor.save()

    with pytest.raises(VendorDoesNotServeLocation):
        order_admission_service.create_order(order_request(), now=morning)


def test_address_beyond_vendor_radius(order_request, vendor, morning):
    vendor.service_radius_km = Decimal("2.00")
    vendor.save()

    with pytest.raises(OutOfDeliveryRange) as excinfo:
        order_admission_service.create_order(order_request(), now=morning)

    assert excinfo.value.details["serviceRadiusKm"] == 2.0
    assert 2.0 < excinfo.value.details["distanceKm"] < 4.0


def test_address_without_coordinates_skips_geofence(order_request, customer, vendor, morning, published):
    vendor.service_area = None
    vendor.save()
    bare = Address.objects.create(
        user=customer, street="Old Airport Road", city="Bengaluru", state="Karnataka", pincode="560017"
    )

    order = order_admission_service.create_order(order_request(delivery_address_id=str(bare.id)), now=morning)
    assert order.delivery_address_id == bare.id


def test_item_rules(order_request, products, make_user, vendor, morning):
    with pytest.raises(ValidationFailed):
        order_admission_service.create_order(order_request(items=[]), now=morning)
    with pytest.raises(ValidationFailed):
        order_admission_service.create_order(
            order_request(items=[OrderItemRequest(str(products[0].id), 0)]), now=morning
        )

    products[1].status = ProductStatus.UNAVAILABLE
    products[1].save()
    with pytest.raises(ProductUnavailable) as excinfo:
        order_admission_service.create_order(order_request(), now=morning)
    assert excinfo.value.details["productIds"] == [str(products[1].id)]

    other_vendor = Vendor.objects.create(user=make_user(UserRole.VENDOR), business_name="Elsewhere")
    foreign = Product.objects.create(vendor=other_vendor, name="Idli", price=Decimal("60.00"))
    with pytest.raises(ProductUnavailable):
        order_admission_service.create_order(
            order_request(items=[OrderItemRequest(str(foreign.id), 1)]), now=morning
        )
    assert not Order.objects.exists()


def test_database_failure_rolls_back(order_request, morning, vendor, published):
    with mock.patch.object(OrderItem.objects, "bulk_create", side_effect=DatabaseError("disk full")):
        with pytest.raises(OrderCreationFailed):
            order_admission_service.create_order(order_request(), now=morning)

    assert not Order.objects.exists()
    vendor.refresh_from_db()
    assert vendor.total_orders == 0
    assert not published.called

    retried = order_admission_service.create_order(order_request(), now=morning)
    assert retried.order_number == "ORD-20260302-00001"
