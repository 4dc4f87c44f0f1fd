from apps.core.models import TimeStampedUUIDModel
from django.db import models


class UserRole(models.TextChoices):
    CUSTOMER = "CUSTOMER", "Customer"
    VENDOR = "VENDOR", "Vendor"
    DELIVERY_PARTNER = "DELIVERY_PARTNER", "Delivery Partner"
    SUPER_ADMIN = "SUPER_ADMIN", "Super Admin"


class User(TimeStampedUUIDModel):
    """A marketplace account. Credentials are issued elsewhere."""

    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=15, unique=True)
    email = models.EmailField(max_length=100, null=True, blank=True)
    role = models.CharField(max_length=20, choices=UserRole.choices)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["role"], name="users_role_0b9f3e_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.role})"


class Address(TimeStampedUUIDModel):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="addresses")
    label = models.CharField(max_length=50, blank=True)
    street = models.CharField(max_length=255)
    landmark = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)

    class Meta:
        db_table = "addresses"
        indexes = [
            models.Index(fields=["user"], name="addresses_user_id_5c2d71_idx"),
        ]

    def __str__(self):
        return f"{self.street}, {self.city} - {self.pincode}"

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None
