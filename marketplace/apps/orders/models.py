from apps.core.models import AppendOnlyModel, TimeStampedUUIDModel
from apps.vendors.models import FulfillmentMethod
from django.db import models
from django.utils import timezone


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ACCEPTED = "ACCEPTED", "Accepted"
    PREPARING = "PREPARING", "Preparing"
    READY_FOR_PICKUP = "READY_FOR_PICKUP", "Ready for Pickup"
    ASSIGNED_TO_DELIVERY = "ASSIGNED_TO_DELIVERY", "Assigned to Delivery"
    PICKED_UP = "PICKED_UP", "Picked Up"
    IN_TRANSIT = "IN_TRANSIT", "In Transit"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"
    REJECTED = "REJECTED", "Rejected"


class Order(TimeStampedUUIDModel):
    order_number = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey("accounts.User", on_delete=models.PROTECT, related_name="orders")
    vendor = models.ForeignKey("vendors.Vendor", on_delete=models.PROTECT, related_name="orders")
    delivery_address = models.ForeignKey(
        "accounts.Address", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    delivery_partner = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_orders",
    )
    meal_slot = models.ForeignKey(
        "scheduling.MealSlot", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    fulfillment_method = models.CharField(
        max_length=20, choices=FulfillmentMethod.choices, default=FulfillmentMethod.DELIVERY
    )
    preferred_delivery_start = models.CharField(max_length=5, null=True, blank=True)
    preferred_delivery_end = models.CharField(max_length=5, null=True, blank=True)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=30, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        indexes = [
            models.Index(fields=["status"], name="orders_status_1d6b3f_idx"),
            models.Index(fields=["customer", "status"], name="orders_custome_7e2a90_idx"),
            models.Index(fields=["vendor", "status"], name="orders_vendor__c35e18_idx"),
            models.Index(fields=["delivery_partner", "status"], name="orders_deliver_4f9d62_idx"),
            models.Index(fields=["created_at"], name="orders_created_8b0c45_idx"),
        ]

    def __str__(self):
        return f"Order #{self.order_number} - {self.status}"


class OrderNumberSequence(models.Model):
    """Last order number handed out per calendar day; rows are locked while allocating."""

    day = models.DateField(unique=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_number_sequences"

    def __str__(self):
        return f"{self.day:%Y%m%d} #{self.last_value}"


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "vendors.Product", on_delete=models.SET_NULL, null=True, blank=True, related_name="order_items"
    )
    product_name = models.CharField(max_length=150)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    line_total = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "order_items"

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"


class OrderStatusHistory(AppendOnlyModel):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="status_history")
    sequence = models.PositiveIntegerField()
    status = models.CharField(max_length=30, choices=OrderStatus.choices)
    notes = models.TextField(null=True, blank=True)
    actor_role = models.CharField(max_length=20, null=True, blank=True)
    actor_id = models.UUIDField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "order_status_history"
        ordering = ["order", "sequence"]
        constraints = [
            models.UniqueConstraint(fields=["order", "sequence"], name="unique_order_history_sequence"),
        ]

    def __str__(self):
        return f"{self.order_id} #{self.sequence} {self.status}"


class Cart(TimeStampedUUIDModel):
    customer = models.ForeignKey("accounts.User", on_delete=models.CASCADE, related_name="carts")
    vendor = models.ForeignKey("vendors.Vendor", on_delete=models.CASCADE, related_name="carts")

    class Meta:
        db_table = "carts"
        constraints = [
            models.UniqueConstraint(fields=["customer", "vendor"], name="unique_cart_per_customer_vendor"),
        ]


class CartItem(TimeStampedUUIDModel):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey("vendors.Product", on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "cart_items"
