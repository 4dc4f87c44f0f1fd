import logging
import re
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from infrastructure.cache import delete_cache_key, get_cache_key_value, set_cache_key

from apps.core.exceptions import ServiceAreaNotFound, ValidationFailed

from .geometry import (
    GeoPoint,
    nearest_service_area,
    point_in_polygon,
    representative_point,
    validate_boundary,
)
from .models import ServiceArea, ServiceAreaStatus

logger = logging.getLogger(__name__)

ACTIVE_AREAS_CACHE_KEY = "service-areas:active"
PINCODE_RE = re.compile(r"^\d{6}$")


def _validate_pincodes(pincodes):
    invalid = [p for p in pincodes if not isinstance(p, str) or not PINCODE_RE.match(p)]
    if invalid:
        raise ValidationFailed(
            "Invalid pincode format. Pincode must be 6 digits", pincodes=[str(p) for p in invalid]
        )
    return sorted(set(pincodes))


def _apply_boundary(area, boundary):
    validate_boundary(boundary)
    center = representative_point(boundary)
    area.boundary = boundary
    area.center_latitude = Decimal(str(round(center.latitude, 8)))
    area.center_longitude = Decimal(str(round(center.longitude, 8)))


class ServiceAreaService:
    @staticmethod
    def invalidate_cache():
        delete_cache_key(ACTIVE_AREAS_CACHE_KEY)

    @staticmethod
    def get_active_service_areas():
        areas = get_cache_key_value(ACTIVE_AREAS_CACHE_KEY)
        if areas is None:
            areas = list(ServiceArea.objects.filter(status=ServiceAreaStatus.ACTIVE).order_by("name"))
            set_cache_key(ACTIVE_AREAS_CACHE_KEY, areas, settings.SERVICE_AREA_CACHE_TTL)
        return areas

    @staticmethod
    def list_service_areas(status=None):
        queryset = ServiceArea.objects.all().order_by("name")
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset)

    @staticmethod
    def get_service_area(service_area_id):
        try:
            return ServiceArea.objects.get(id=service_area_id)
        except (ServiceArea.DoesNotExist, ValueError, ValidationError):
            raise ServiceAreaNotFound()

    def create_service_area(self, name, city, state, boundary, pincodes=(), status=ServiceAreaStatus.ACTIVE):
        if not name or not city or not state:
            raise ValidationFailed("Missing required fields: name, city, state, and boundary are required")
        if ServiceArea.objects.filter(name=name).exists():
            raise ValidationFailed("Service area with this name already exists")

        area = ServiceArea(name=name, city=city, state=state, status=status)
        _apply_boundary(area, boundary)
        area.pincodes = _validate_pincodes(pincodes)

        with transaction.atomic():
            area.save()
            transaction.on_commit(self.invalidate_cache)
        self.invalidate_cache()

        logger.info(f"Service area created: {area.name} ({area.id})")
        return area

    def update_service_area(self, service_area_id, **changes):
        area = self.get_service_area(service_area_id)

        name = changes.get("name")
        if name and name != area.name:
            if ServiceArea.objects.filter(name=name).exclude(id=area.id).exists():
                raise ValidationFailed("Service area with this name already exists")
            area.name = name
        for field in ("city", "state", "status"):
            if changes.get(field):
                setattr(area, field, changes[field])
        if "boundary" in changes:
            _apply_boundary(area, changes["boundary"])
        if "pincodes" in changes:
            area.pincodes = _validate_pincodes(changes["pincodes"])

        with transaction.atomic():
            area.save()
            transaction.on_commit(self.invalidate_cache)
        self.invalidate_cache()

        logger.info(f"Service area updated: {area.name} ({area.id})")
        return area

    def activate(self, service_area_id):
        return self.update_service_area(service_area_id, status=ServiceAreaStatus.ACTIVE)

    def deactivate(self, service_area_id):
        return self.update_service_area(service_area_id, status=ServiceAreaStatus.INACTIVE)

    def find_containing_areas(self, point: GeoPoint):
        return [area for area in self.get_active_service_areas() if point_in_polygon(point, area.boundary)]

    def find_nearest(self, point: GeoPoint):
        return nearest_service_area(point, self.get_active_service_areas())

    def get_service_area_by_pincode(self, pincode):
        for area in self.get_active_service_areas():
            if pincode in (area.pincodes or []):
                return area
        return None

    def check_serviceability(self, point: GeoPoint):
        """Describe whether ``point`` is deliverable, with a nearest-area hint if not."""
        containing = self.find_containing_areas(point)
        if containing:
            area = containing[0]
            return {
                "serviceable": True,
                "serviceArea": {"id": str(area.id), "name": area.name, "city": area.city, "state": area.state},
            }

        result = {"serviceable": False, "message": "Service is not available in this area"}
        nearest = self.find_nearest(point)
        if nearest:
            area, distance = nearest
            result["nearestArea"] = {"id": str(area.id), "name": area.name, "distanceKm": distance}
        return result


service_area_service = ServiceAreaService()
