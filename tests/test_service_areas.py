import pytest

from apps.core.exceptions import InvalidGeometry, ServiceAreaNotFound, ValidationFailed
from apps.geofencing.geometry import GeoPoint
from apps.geofencing.models import ServiceAreaStatus
from apps.geofencing.services import ACTIVE_AREAS_CACHE_KEY, service_area_service
from django.core.cache import cache

from .conftest import CITY_BOUNDARY

pytestmark = pytest.mark.django_db

INSIDE = GeoPoint(latitude=12.98, longitude=77.62)
OUTSIDE = GeoPoint(latitude=13.30, longitude=77.60)


def test_create_computes_center_and_normalises_pincodes():
    area = service_area_service.create_service_area(
        name="Central",
        city="Bengaluru",
        state="Karnataka",
        boundary=CITY_BOUNDARY,
        pincodes=["560002", "560001", "560002"],
    )
    assert float(area.center_latitude) == pytest.approx(13.0)
    assert float(area.center_longitude) == pytest.approx(77.6)
    assert area.pincodes == ["560001", "560002"]
    assert area.status == ServiceAreaStatus.ACTIVE


def test_create_rejects_invalid_geometry_before_saving():
    with pytest.raises(InvalidGeometry):
        service_area_service.create_service_area(
            name="Broken", city="X", state="Y", boundary={"type": "Polygon", "coordinates": [[[0, 0]]]}
        )
    assert service_area_service.list_service_areas() == []


def test_create_rejects_duplicate_name(service_area):
    with pytest.raises(ValidationFailed):
        service_area_service.create_service_area(
            name=service_area.name, city="Bengaluru", state="Karnataka", boundary=CITY_BOUNDARY
        )


def test_create_rejects_bad_pincode():
    with pytest.raises(ValidationFailed) as exc_info:
        service_area_service.create_service_area(
            name="Central", city="Bengaluru", state="Karnataka", boundary=CITY_BOUNDARY, pincodes=["5600"]
        )
    assert exc_info.value.details["pincodes"] == ["5600"]


def test_get_unknown_area():
    with pytest.raises(ServiceAreaNotFound):
        service_area_service.get_service_area("00000000-0000-0000-0000-000000000000")
    with pytest.raises(ServiceAreaNotFound):
        service_area_service.get_service_area("not-a-uuid")


def test_serviceability_inside(service_area):
    result = service_area_service.check_serviceability(INSIDE)
    assert result["serviceable"] is True
    assert result["serviceArea"]["id"] == str(service_area.id)


def test_serviceability_outside_includes_nearest_hint(service_area):
    result = service_area_service.check_serviceability(OUTSIDE)
    assert result["serviceable"] is False
    assert result["nearestArea"]["name"] == service_area.name
    assert result["nearestArea"]["distanceKm"] > 0


def test_deactivated_area_stops_serving_and_cache_is_refreshed(service_area):
    assert service_area_service.find_containing_areas(INSIDE) == [service_area]
    assert cache.get(ACTIVE_AREAS_CACHE_KEY) is not None

    service_area_service.deactivate(service_area.id)

    assert service_area_service.find_containing_areas(INSIDE) == []
    assert service_area_service.check_serviceability(INSIDE) == {
        "serviceable": False,
        "message": "Service is not available in this area",
    }


def test_update_boundary_moves_center(service_area):
    shifted = {
        "type": "Polygon",
        "coordinates": [[[78.0, 13.0], [78.2, 13.0], [78.2, 13.2], [78.0, 13.2], [78.0, 13.0]]],
    }
    area = service_area_service.update_service_area(service_area.id, boundary=shifted)
    assert float(area.center_longitude) == pytest.approx(78.1)
    assert service_area_service.find_containing_areas(INSIDE) == []


def test_lookup_by_pincode(service_area):
    assert service_area_service.get_service_area_by_pincode("560001") == service_area
    assert service_area_service.get_service_area_by_pincode("110001") is None
