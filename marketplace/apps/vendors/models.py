from apps.core.models import TimeStampedUUIDModel
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class FulfillmentMethod(models.TextChoices):
    DELIVERY = "DELIVERY", "Delivery"
    PICKUP = "PICKUP", "Pickup"
    EAT_IN = "EAT_IN", "Eat In"


class VendorStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ACTIVE = "ACTIVE", "Active"
    SUSPENDED = "SUSPENDED", "Suspended"
    INACTIVE = "INACTIVE", "Inactive"


class ProductStatus(models.TextChoices):
    AVAILABLE = "AVAILABLE", "Available"
    UNAVAILABLE = "UNAVAILABLE", "Unavailable"


class Vendor(TimeStampedUUIDModel):
    user = models.ForeignKey("accounts.User", on_delete=models.CASCADE, related_name="vendors")
    business_name = models.CharField(max_length=150)
    status = models.CharField(max_length=20, choices=VendorStatus.choices, default=VendorStatus.PENDING)
    service_area = models.ForeignKey(
        "geofencing.ServiceArea",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="vendors",
    )
    latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)
    service_radius_km = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=5,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
    )
    total_orders = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "vendors"
        indexes = [
            models.Index(fields=["status"], name="vendors_status_6a1e0d_idx"),
            models.Index(fields=["service_area"], name="vendors_service_2b7c94_idx"),
        ]

    def __str__(self):
        return f"{self.business_name} ({self.status})"

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None


class VendorFulfillmentConfig(TimeStampedUUIDModel):
    vendor = models.OneToOneField(Vendor, on_delete=models.CASCADE, related_name="fulfillment_config")
    eat_in_enabled = models.BooleanField(default=False)
    pickup_enabled = models.BooleanField(default=True)
    delivery_enabled = models.BooleanField(default=True)

    class Meta:
        db_table = "vendor_fulfillment_configs"

    def __str__(self):
        return f"Fulfillment config for {self.vendor_id}"


class Product(TimeStampedUUIDModel):
    vendor = models.ForeignKey(Vendor, on_delete=models.CASCADE, related_name="products")
    name = models.CharField(max_length=150)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=ProductStatus.choices, default=ProductStatus.AVAILABLE)

    class Meta:
        db_table = "products"
        indexes = [
            models.Index(fields=["vendor", "status"], name="products_vendor__9e4f12_idx"),
        ]

    def __str__(self):
        return f"{self.name} - {self.price}"
