from apps.core.models import TimeStampedUUIDModel
from django.core.validators import MinValueValidator
from django.db import models


class MealSlot(TimeStampedUUIDModel):
    """A recurring time-of-day ordering window, e.g. Lunch 12:00-14:00 with a 10:00 cutoff."""

    vendor = models.ForeignKey("vendors.Vendor", on_delete=models.CASCADE, related_name="meal_slots")
    name = models.CharField(max_length=50)
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)
    cutoff_time = models.CharField(max_length=5)
    time_window_duration = models.PositiveIntegerField(default=60, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "meal_slots"
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["vendor", "is_active"], name="meal_slots_vendor__4c8a27_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.start_time}-{self.end_time})"
