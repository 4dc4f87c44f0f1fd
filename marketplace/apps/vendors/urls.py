from django.urls import path

from apps.scheduling.views import AvailableMealSlotsView, VendorMealSlotsView

from .views import FulfillmentConfigView

app_name = "vendors"

urlpatterns = [
    path("<uuid:vendor_id>/fulfillment/", FulfillmentConfigView.as_view(), name="fulfillment-config"),
    path("<uuid:vendor_id>/meal-slots/", VendorMealSlotsView.as_view(), name="meal-slots"),
    path(
        "<uuid:vendor_id>/meal-slots/available/",
        AvailableMealSlotsView.as_view(),
        name="available-meal-slots",
    ),
]
