from django.urls import include, path

urlpatterns = [
    path("health/", include("apps.core.urls")),
    path("orders/", include("apps.orders.urls")),
    path("vendors/", include("apps.vendors.urls")),
    path("meal-slots/", include("apps.scheduling.urls")),
    path("service-areas/", include("apps.geofencing.urls")),
]
