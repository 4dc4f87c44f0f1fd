"""
Order admission.

``OrderAdmissionService.create_order`` runs a fixed sequence of gates and
stops at the first one that fails:

1. the customer exists and has the CUSTOMER role
2. the vendor exists and is ACTIVE
3. the vendor has the requested fulfillment method enabled
4. a DELIVERY order names an address the customer owns
5. the meal slot (if any) is the vendor's, active and before cutoff, and
   the preferred window (if any) lies inside it
6. a DELIVERY address with coordinates is inside an active service area the
   vendor serves and within the vendor's radius
7. every item is priced from the vendor's live catalog
8. the order, its first history row and its items are written and the
   matching cart is cleared, all in one transaction
9. an ``order_created`` event is sent after commit

Addresses without coordinates skip gate 6 entirely.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.db.models.functions import Length

from apps.accounts.models import Address, User, UserRole
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
    VendorUnavailable,
    WindowOutOfRange,
)
from apps.events.services import event_service
from apps.geofencing.geometry import GeoPoint, distance_km
from apps.geofencing.services import service_area_service
from apps.scheduling.models import MealSlot
from apps.scheduling.services import local_now, meal_slot_service
from apps.scheduling.timewindows import parse_clock, validate_delivery_window
from apps.vendors.models import FulfillmentMethod, Product, ProductStatus, Vendor, VendorStatus
from apps.vendors.services import fulfillment_service, get_vendor

from .models import Cart, Order, OrderItem, OrderNumberSequence, OrderStatus, OrderStatusHistory

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class OrderItemRequest:
    product_id: str
    quantity: int


@dataclass
class OrderRequest:
    customer_id: str
    vendor_id: str
    items: List[OrderItemRequest] = field(default_factory=list)
    fulfillment_method: str = FulfillmentMethod.DELIVERY
    delivery_address_id: Optional[str] = None
    meal_slot_id: Optional[str] = None
    preferred_delivery_start: Optional[str] = None
    preferred_delivery_end: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class PricedItem:
    product: Product
    quantity: int

    @property
    def line_total(self):
        return (self.product.price * self.quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


def _as_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _money(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderAdmissionService:
    def create_order(self, request: OrderRequest, now=None):
        now = local_now(now)

        customer = self._resolve_customer(request.customer_id)
        vendor = self._resolve_vendor(request.vendor_id)
        method = self._check_fulfillment(vendor, request.fulfillment_method)

        address = None
        if fulfillment_service.requires_delivery_address(method):
            address = self._resolve_address(customer, request.delivery_address_id)

        meal_slot = self._check_meal_slot(vendor, request, now)

        if method == FulfillmentMethod.DELIVERY:
            if address.has_coordinates:
                self._check_geofence(vendor, address)
            else:
                logger.warning(
                    f"Address {address.id} has no coordinates; admitting order for vendor "
                    f"{vendor.id} without geofence validation"
                )

        priced = self._price_items(vendor, request.items)
        subtotal = sum((item.line_total for item in priced), Decimal("0.00"))
        delivery_fee = _money(settings.ORDER_DELIVERY_FEE) if method == FulfillmentMethod.DELIVERY else _money(0)
        tax = _money(subtotal * settings.ORDER_TAX_RATE)
        total = subtotal + delivery_fee + tax

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    order_number=self._next_order_number(now),
                    customer=customer,
                    vendor=vendor,
                    delivery_address=address,
                    meal_slot=meal_slot,
                    fulfillment_method=method,
                    preferred_delivery_start=self._clock_or_none(request.preferred_delivery_start),
                    preferred_delivery_end=self._clock_or_none(request.preferred_delivery_end),
                    subtotal=subtotal,
                    delivery_fee=delivery_fee,
                    tax=tax,
                    total=total,
                    status=OrderStatus.PENDING,
                    notes=request.notes,
                )
                OrderStatusHistory.objects.create(
                    order=order,
                    sequence=1,
                    status=OrderStatus.PENDING,
                    notes="Order created",
                    actor_role=UserRole.CUSTOMER,
                    actor_id=customer.id,
                )
                OrderItem.objects.bulk_create(
                    [
                        OrderItem(
                            order=order,
                            product=item.product,
                            product_name=item.product.name,
                            unit_price=item.product.price,
                            quantity=item.quantity,
                            line_total=item.line_total,
                        )
                        for item in priced
                    ]
                )
                Vendor.objects.filter(id=vendor.id).update(total_orders=F("total_orders") + 1)
                Cart.objects.filter(customer=customer, vendor=vendor).delete()

                event_service.order_created(order)
        except DatabaseError as e:
            logger.exception(f"Order creation failed for customer {customer.id} at vendor {vendor.id}")
            raise OrderCreationFailed() from e

        logger.info(f"Order {order.order_number} created for customer {customer.id} at vendor {vendor.id}")
        return Order.objects.select_related("vendor", "customer", "delivery_address", "meal_slot").prefetch_related(
            "items", "status_history"
        ).get(id=order.id)

    # Gate 1
    @staticmethod
    def _resolve_customer(customer_id):
        customer = User.objects.filter(id=_as_uuid(customer_id), is_active=True).first()
        if customer is None or customer.role != UserRole.CUSTOMER:
            raise Unauthorized("Only customers can place orders")
        return customer

    # Gate 2
    @staticmethod
    def _resolve_vendor(vendor_id):
        vendor = get_vendor(vendor_id)
        if vendor.status != VendorStatus.ACTIVE:
            raise VendorUnavailable()
        return vendor

    # Gate 3
    @staticmethod
    def _check_fulfillment(vendor, method):
        if method not in FulfillmentMethod.values or not fulfillment_service.is_enabled(vendor.id, method):
            raise MethodNotEnabled(method)
        return FulfillmentMethod(method)

    # Gate 4
    @staticmethod
    def _resolve_address(customer, address_id):
        if not address_id:
            raise AddressNotFound("Delivery address is required for delivery orders")
        address = Address.objects.filter(id=_as_uuid(address_id)).first()
        if address is None:
            raise AddressNotFound()
        if address.user_id != customer.id:
            raise AddressOwnershipMismatch()
        return address

    # Gate 5
    @staticmethod
    def _check_meal_slot(vendor, request, now):
        start, end = request.preferred_delivery_start, request.preferred_delivery_end
        wants_window = bool(start or end)

        if not request.meal_slot_id:
            if wants_window:
                raise WindowOutOfRange("A preferred delivery window requires a meal slot")
            return None

        slot = MealSlot.objects.filter(id=_as_uuid(request.meal_slot_id), vendor=vendor).first()
        if slot is None or not meal_slot_service.is_available(slot, now):
            raise MealSlotUnavailable()

        if wants_window:
            if not (start and end):
                raise WindowOutOfRange("Both preferred delivery start and end are required")
            if not validate_delivery_window(slot, start, end):
                raise WindowOutOfRange()
        return slot

    # Gate 6
    @staticmethod
    def _check_geofence(vendor, address):
        point = GeoPoint(float(address.latitude), float(address.longitude))

        containing = service_area_service.find_containing_areas(point)
        if not containing:
            details = {}
            nearest = service_area_service.find_nearest(point)
            if nearest:
                area, distance = nearest
                details["nearestArea"] = {"id": str(area.id), "name": area.name, "distanceKm": distance}
            raise AddressNotServiceable(**details)

        if vendor.service_area_id not in {area.id for area in containing}:
            raise VendorDoesNotServeLocation()

        if vendor.has_coordinates:
            center = GeoPoint(float(vendor.latitude), float(vendor.longitude))
            distance = distance_km(point, center)
            if distance > float(vendor.service_radius_km):
                raise OutOfDeliveryRange(round(distance, 2), vendor.service_radius_km)

    # Gate 7
    @staticmethod
    def _price_items(vendor, items):
        if not items:
            raise ValidationFailed("Order must contain at least one item")

        quantities = OrderedDict()
        for item in items:
            if int(item.quantity) < 1:
                raise ValidationFailed("Item quantity must be at least 1", productId=str(item.product_id))
            key = _as_uuid(item.product_id)
            if key is None:
                raise ProductUnavailable(productIds=[str(item.product_id)])
            quantities[key] = quantities.get(key, 0) + int(item.quantity)

        products = {
            product.id: product
            for product in Product.objects.filter(
                id__in=list(quantities), vendor=vendor, status=ProductStatus.AVAILABLE
            )
        }
        missing = [str(product_id) for product_id in quantities if product_id not in products]
        if missing:
            raise ProductUnavailable(productIds=missing)

        return [PricedItem(products[product_id], quantity) for product_id, quantity in quantities.items()]

    @staticmethod
    def _next_order_number(now):
        """Allocate the next per-day number; must run inside the order transaction."""
        prefix = f"ORD-{now:%Y%m%d}-"
        counter, _ = OrderNumberSequence.objects.select_for_update().get_or_create(
            day=now.date(), defaults={"last_value": lambda: OrderAdmissionService._highest_sequence(prefix)}
        )
        counter.last_value += 1
        counter.save(update_fields=["last_value"])
        return f"{prefix}{counter.last_value:05d}"

    @staticmethod
    def _highest_sequence(prefix):
        # Longer numbers sort first so 100000 outranks 99999.
        last = (
            Order.objects.filter(order_number__startswith=prefix)
            .order_by(Length("order_number").desc(), "-order_number")
            .values_list("order_number", flat=True)
            .first()
        )
        return int(last[len(prefix):]) if last else 0

    @staticmethod
    def _clock_or_none(value):
        return str(parse_clock(value)) if value else None


order_admission_service = OrderAdmissionService()
