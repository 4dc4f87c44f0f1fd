import logging

from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.core.exceptions import MealSlotNotFound
from apps.vendors.services import get_vendor

from .models import MealSlot
from .timewindows import enumerate_windows, is_within_cutoff, parse_clock, validate_slot_configuration

logger = logging.getLogger(__name__)

_CLOCK_FIELDS = ("start_time", "end_time", "cutoff_time")


def local_now(now=None):
    """``now`` (default: the current time) in the configured zone; naive values are taken as local."""
    now = now or timezone.now()
    if timezone.is_naive(now):
        now = timezone.make_aware(now)
    return timezone.localtime(now)


class MealSlotService:
    @staticmethod
    def get_meal_slot(meal_slot_id):
        try:
            return MealSlot.objects.select_related("vendor").get(id=meal_slot_id)
        except (MealSlot.DoesNotExist, ValueError, ValidationError):
            raise MealSlotNotFound()

    @staticmethod
    def get_meal_slots(vendor_id, active_only=False):
        vendor = get_vendor(vendor_id)
        queryset = MealSlot.objects.filter(vendor=vendor)
        if active_only:
            queryset = queryset.filter(is_active=True)
        return list(queryset.order_by("start_time"))

    def get_available_meal_slots(self, vendor_id, now=None):
        """Active slots whose cutoff has not passed yet today."""
        current = local_now(now)
        return [
            slot
            for slot in self.get_meal_slots(vendor_id, active_only=True)
            if is_within_cutoff(current, slot.cutoff_time)
        ]

    @staticmethod
    def is_available(slot, now=None):
        return slot.is_active and is_within_cutoff(local_now(now), slot.cutoff_time)

    @staticmethod
    def create_meal_slot(vendor_id, name, start_time, end_time, cutoff_time, time_window_duration=60):
        vendor = get_vendor(vendor_id)
        validate_slot_configuration(start_time, end_time, cutoff_time, time_window_duration)

        slot = MealSlot.objects.create(
            vendor=vendor,
            name=name,
            start_time=str(parse_clock(start_time)),
            end_time=str(parse_clock(end_time)),
            cutoff_time=str(parse_clock(cutoff_time)),
            time_window_duration=time_window_duration or 60,
        )
        logger.info(f"Meal slot created: {slot.name} ({slot.id}) for vendor {vendor.id}")
        return slot

    def update_meal_slot(self, meal_slot_id, **changes):
        slot = self.get_meal_slot(meal_slot_id)

        for field in _CLOCK_FIELDS:
            if changes.get(field) is not None:
                setattr(slot, field, str(parse_clock(changes[field])))
        if changes.get("name"):
            slot.name = changes["name"]
        if changes.get("time_window_duration") is not None:
            slot.time_window_duration = changes["time_window_duration"]
        if changes.get("is_active") is not None:
            slot.is_active = changes["is_active"]

        validate_slot_configuration(slot.start_time, slot.end_time, slot.cutoff_time, slot.time_window_duration)
        slot.save()
        logger.info(f"Meal slot updated: {slot.name} ({slot.id})")
        return slot

    def deactivate_meal_slot(self, meal_slot_id):
        slot = self.get_meal_slot(meal_slot_id)
        if slot.is_active:
            slot.is_active = False
            slot.save(update_fields=["is_active", "updated_at"])
            logger.info(f"Meal slot deactivated: {slot.name} ({slot.id})")
        return slot

    def get_delivery_windows(self, meal_slot_id):
        return enumerate_windows(self.get_meal_slot(meal_slot_id))


meal_slot_service = MealSlotService()
