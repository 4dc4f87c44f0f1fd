from apps.core.models import TimeStampedUUIDModel
from django.db import models


class ServiceAreaStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class ServiceArea(TimeStampedUUIDModel):
    """A named delivery territory: GeoJSON polygon (with optional holes) plus pincodes."""

    name = models.CharField(max_length=100, unique=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    boundary = models.JSONField()
    pincodes = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20, choices=ServiceAreaStatus.choices, default=ServiceAreaStatus.ACTIVE
    )
    center_latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    center_longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)

    class Meta:
        db_table = "service_areas"
        indexes = [
            models.Index(fields=["status"], name="service_are_status_3f0c2a_idx"),
            models.Index(fields=["city"], name="service_are_city_8d41e7_idx"),
        ]

    def __str__(self):
        return f"{self.name} - {self.city} ({self.status})"
