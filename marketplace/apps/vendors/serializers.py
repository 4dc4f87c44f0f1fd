from rest_framework import serializers

from .models import VendorFulfillmentConfig


class FulfillmentConfigSerializer(serializers.ModelSerializer):
    vendor_id = serializers.UUIDField(read_only=True)
    enabled_methods = serializers.SerializerMethodField()

    class Meta:
        model = VendorFulfillmentConfig
        fields = [
            "vendor_id",
            "eat_in_enabled",
            "pickup_enabled",
            "delivery_enabled",
            "enabled_methods",
            "updated_at",
        ]
        read_only_fields = fields

    def get_enabled_methods(self, obj):
        flags = (
            ("EAT_IN", obj.eat_in_enabled),
            ("PICKUP", obj.pickup_enabled),
            ("DELIVERY", obj.delivery_enabled),
        )
        return [method for method, enabled in flags if enabled]


class FulfillmentConfigUpdateSerializer(serializers.Serializer):
    eat_in_enabled = serializers.BooleanField(required=False)
    pickup_enabled = serializers.BooleanField(required=False)
    delivery_enabled = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one fulfillment flag is required")
        return attrs
