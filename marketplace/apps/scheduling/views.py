from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.vendors.services import ensure_can_manage_vendor, get_vendor

from .serializers import MealSlotCreateSerializer, MealSlotSerializer, MealSlotUpdateSerializer
from .services import meal_slot_service


class VendorMealSlotsView(APIView):
    def get(self, request, vendor_id):
        active_only = request.query_params.get("active", "").lower() == "true"
        slots = meal_slot_service.get_meal_slots(vendor_id, active_only=active_only)
        return Response(MealSlotSerializer(slots, many=True).data)

    def post(self, request, vendor_id):
        vendor = get_vendor(vendor_id)
        ensure_can_manage_vendor(vendor, request.user)

        serializer = MealSlotCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = meal_slot_service.create_meal_slot(vendor.id, **serializer.validated_data)
        return Response(MealSlotSerializer(slot).data, status=status.HTTP_201_CREATED)


class AvailableMealSlotsView(APIView):
    def get(self, request, vendor_id):
        slots = meal_slot_service.get_available_meal_slots(vendor_id)
        return Response(MealSlotSerializer(slots, many=True).data)


class MealSlotDetailView(APIView):
    def get(self, request, meal_slot_id):
        slot = meal_slot_service.get_meal_slot(meal_slot_id)
        return Response(MealSlotSerializer(slot).data)

    def patch(self, request, meal_slot_id):
        slot = meal_slot_service.get_meal_slot(meal_slot_id)
        ensure_can_manage_vendor(slot.vendor, request.user)

        serializer = MealSlotUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = meal_slot_service.update_meal_slot(slot.id, **serializer.validated_data)
        return Response(MealSlotSerializer(slot).data)

    def delete(self, request, meal_slot_id):
        slot = meal_slot_service.get_meal_slot(meal_slot_id)
        ensure_can_manage_vendor(slot.vendor, request.user)
        slot = meal_slot_service.deactivate_meal_slot(slot.id)
        return Response(MealSlotSerializer(slot).data)


class MealSlotWindowsView(APIView):
    def get(self, request, meal_slot_id):
        windows = meal_slot_service.get_delivery_windows(meal_slot_id)
        return Response(
            {
                "meal_slot_id": str(meal_slot_id),
                "windows": [window.to_dict() for window in windows],
            }
        )
