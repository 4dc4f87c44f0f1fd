import logging

from django.core.exceptions import ValidationError

from apps.accounts.models import UserRole
from apps.core.exceptions import Unauthorized, VendorNotFound

from .models import FulfillmentMethod, Vendor, VendorFulfillmentConfig

logger = logging.getLogger(__name__)

_METHOD_FLAGS = {
    FulfillmentMethod.EAT_IN: "eat_in_enabled",
    FulfillmentMethod.PICKUP: "pickup_enabled",
    FulfillmentMethod.DELIVERY: "delivery_enabled",
}


def get_vendor(vendor_id):
    try:
        return Vendor.objects.get(id=vendor_id)
    except (Vendor.DoesNotExist, ValueError, ValidationError):
        raise VendorNotFound()


def ensure_can_manage_vendor(vendor, principal):
    """Vendors may only manage their own storefront; admins manage any."""
    if principal.role == UserRole.SUPER_ADMIN:
        return
    if principal.role == UserRole.VENDOR and str(vendor.user_id) == str(principal.user_id):
        return
    raise Unauthorized("You do not have permission to manage this vendor")


class FulfillmentService:
    @staticmethod
    def get_config(vendor_id):
        """Return the vendor's config, creating one with defaults on first use."""
        config, created = VendorFulfillmentConfig.objects.get_or_create(
            vendor_id=vendor_id,
            defaults={
                "eat_in_enabled": False,
                "pickup_enabled": True,
                "delivery_enabled": True,
            },
        )
        if created:
            logger.info(f"Created default fulfillment config for vendor {vendor_id}")
        return config

    def update_config(self, vendor_id, **flags):
        config = self.get_config(vendor_id)
        changed = []
        for field in _METHOD_FLAGS.values():
            if field in flags and flags[field] is not None:
                setattr(config, field, bool(flags[field]))
                changed.append(field)
        if changed:
            config.save(update_fields=changed + ["updated_at"])
            logger.info(f"Fulfillment config updated for vendor {vendor_id}: {', '.join(changed)}")
        return config

    def get_enabled_methods(self, vendor_id):
        config = self.get_config(vendor_id)
        return [method for method, field in _METHOD_FLAGS.items() if getattr(config, field)]

    def is_enabled(self, vendor_id, method):
        field = _METHOD_FLAGS.get(method)
        if field is None:
            return False
        return getattr(self.get_config(vendor_id), field)

    @staticmethod
    def requires_delivery_address(method):
        return method == FulfillmentMethod.DELIVERY


fulfillment_service = FulfillmentService()
