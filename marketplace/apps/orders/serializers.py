from rest_framework import serializers

from apps.vendors.models import FulfillmentMethod

from .models import Order, OrderItem, OrderStatus, OrderStatusHistory
from .state_machine import status_category, status_description


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["product_id", "product_name", "unit_price", "quantity", "line_total"]


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["sequence", "status", "notes", "actor_role", "actor_id", "timestamp"]


class OrderSerializer(serializers.ModelSerializer):
    customer_id = serializers.UUIDField(read_only=True)
    vendor_id = serializers.UUIDField(read_only=True)
    delivery_address_id = serializers.UUIDField(read_only=True)
    delivery_partner_id = serializers.UUIDField(read_only=True)
    meal_slot_id = serializers.UUIDField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)
    status_description = serializers.SerializerMethodField()
    status_category = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "vendor_id",
            "delivery_address_id",
            "delivery_partner_id",
            "meal_slot_id",
            "fulfillment_method",
            "preferred_delivery_start",
            "preferred_delivery_end",
            "subtotal",
            "delivery_fee",
            "tax",
            "total",
            "status",
            "status_description",
            "status_category",
            "notes",
            "items",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_description(self, obj):
        return status_description(obj.status)

    def get_status_category(self, obj):
        return status_category(obj.status)


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    vendor_id = serializers.UUIDField()
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    fulfillment_method = serializers.ChoiceField(
        choices=FulfillmentMethod.choices, default=FulfillmentMethod.DELIVERY
    )
    delivery_address_id = serializers.UUIDField(required=False, allow_null=True)
    meal_slot_id = serializers.UUIDField(required=False, allow_null=True)
    preferred_delivery_start = serializers.CharField(max_length=5, required=False, allow_null=True)
    preferred_delivery_end = serializers.CharField(max_length=5, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
