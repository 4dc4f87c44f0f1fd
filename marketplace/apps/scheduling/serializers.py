from rest_framework import serializers

from .models import MealSlot


class MealSlotSerializer(serializers.ModelSerializer):
    vendor_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = MealSlot
        fields = [
            "id",
            "vendor_id",
            "name",
            "start_time",
            "end_time",
            "cutoff_time",
            "time_window_duration",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MealSlotCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    start_time = serializers.CharField(max_length=5)
    end_time = serializers.CharField(max_length=5)
    cutoff_time = serializers.CharField(max_length=5)
    time_window_duration = serializers.IntegerField(min_value=1, required=False, default=60)


class MealSlotUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50, required=False)
    start_time = serializers.CharField(max_length=5, required=False)
    end_time = serializers.CharField(max_length=5, required=False)
    cutoff_time = serializers.CharField(max_length=5, required=False)
    time_window_duration = serializers.IntegerField(min_value=1, required=False)
    is_active = serializers.BooleanField(required=False)
