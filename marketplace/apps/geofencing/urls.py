from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ServiceabilityCheckView, ServiceAreaViewSet

app_name = "geofencing"

router = SimpleRouter()
router.register(r"", ServiceAreaViewSet, basename="service-area")

urlpatterns = [
    path("check/", ServiceabilityCheckView.as_view(), name="serviceability-check"),
    path("", include(router.urls)),
]
