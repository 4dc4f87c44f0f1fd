"""
Domain error taxonomy.

Every failure a service can report to a caller is a ``MarketplaceError``
subclass carrying a stable ``code``, an HTTP-equivalent ``status_code`` and
optional structured ``details`` (nearest area, computed distance, allowed
next statuses...). The DRF exception handler renders them verbatim.
"""


class MarketplaceError(Exception):
    code = "MARKETPLACE_ERROR"
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        payload = {"code": self.code, "message": self.message}
        payload.update(self.details)
        return payload


# Validation: malformed inputs, rejected before any side effect
class ValidationFailed(MarketplaceError):
    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidTimeFormat(ValidationFailed):
    code = "INVALID_TIME_FORMAT"
    default_message = "Time must be in HH:MM format"


class InvalidSlotConfiguration(ValidationFailed):
    code = "INVALID_SLOT_CONFIGURATION"
    default_message = "Meal slot times must satisfy cutoff < start < end"


class InvalidGeometry(ValidationFailed):
    code = "INVALID_GEOMETRY"
    default_message = "Invalid polygon"

    def __init__(self, errors):
        super().__init__(f"Invalid polygon: {'; '.join(errors)}", errors=list(errors))


# Policy: user-correctable business rules
class PolicyViolation(MarketplaceError):
    code = "POLICY_VIOLATION"
    status_code = 422


class VendorUnavailable(PolicyViolation):
    code = "VENDOR_UNAVAILABLE"
    default_message = "Vendor is not currently active"


class MethodNotEnabled(PolicyViolation):
    code = "METHOD_NOT_ENABLED"

    def __init__(self, method):
        super().__init__(f"{method} is not available for this vendor", method=str(method))


class MealSlotUnavailable(PolicyViolation):
    code = "MEAL_SLOT_UNAVAILABLE"
    default_message = "Meal slot is not available for ordering"


class WindowOutOfRange(PolicyViolation):
    code = "WINDOW_OUT_OF_RANGE"
    default_message = "Delivery window is not within meal slot time range"


class ProductUnavailable(PolicyViolation):
    code = "PRODUCT_UNAVAILABLE"
    default_message = "One or more products are not available"


# Authorization: ownership and role mismatches
class Unauthorized(MarketplaceError):
    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "You do not have permission to perform this action"


class AddressOwnershipMismatch(Unauthorized):
    code = "ADDRESS_OWNERSHIP_MISMATCH"
    default_message = "Delivery address does not belong to this customer"


# Lookups
class NotFound(MarketplaceError):
    code = "NOT_FOUND"
    status_code = 404


class AddressNotFound(NotFound):
    code = "ADDRESS_NOT_FOUND"
    default_message = "Delivery address not found"


class OrderNotFound(NotFound):
    code = "ORDER_NOT_FOUND"
    default_message = "Order not found"


class VendorNotFound(NotFound):
    code = "VENDOR_NOT_FOUND"
    default_message = "Vendor not found"


class MealSlotNotFound(NotFound):
    code = "MEAL_SLOT_NOT_FOUND"
    default_message = "Meal slot not found"


class ServiceAreaNotFound(NotFound):
    code = "SERVICE_AREA_NOT_FOUND"
    default_message = "Service area not found"


# Geofencing
class GeofenceViolation(MarketplaceError):
    code = "GEOFENCE_VIOLATION"
    status_code = 422


class AddressNotServiceable(GeofenceViolation):
    code = "ADDRESS_NOT_SERVICEABLE"
    default_message = "Service is not available at this address"


class VendorDoesNotServeLocation(GeofenceViolation):
    code = "VENDOR_DOES_NOT_SERVE_LOCATION"
    default_message = "This vendor does not deliver to your service area"


class OutOfDeliveryRange(GeofenceViolation):
    code = "OUT_OF_DELIVERY_RANGE"

    def __init__(self, distance_km, radius_km):
        super().__init__(
            f"Address is {distance_km} km away, beyond the vendor's {radius_km} km delivery radius",
            distanceKm=float(distance_km),
            serviceRadiusKm=float(radius_km),
        )


# State
class InvalidStateTransition(MarketplaceError):
    code = "INVALID_STATE_TRANSITION"
    status_code = 409

    def __init__(self, current, target, allowed):
        allowed = sorted(str(status) for status in allowed)
        super().__init__(
            f"Invalid status transition from {current} to {target}. "
            f"Allowed transitions: {', '.join(allowed) or 'none'}",
            currentStatus=str(current),
            targetStatus=str(target),
            allowed=allowed,
        )


# Infrastructure
class OrderCreationFailed(MarketplaceError):
    code = "ORDER_CREATION_FAILED"
    status_code = 500
    default_message = "Order could not be created"
