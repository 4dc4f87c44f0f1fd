from django.urls import path

from .views import MealSlotDetailView, MealSlotWindowsView

app_name = "scheduling"

urlpatterns = [
    path("<uuid:meal_slot_id>/", MealSlotDetailView.as_view(), name="meal-slot-detail"),
    path("<uuid:meal_slot_id>/windows/", MealSlotWindowsView.as_view(), name="meal-slot-windows"),
]
