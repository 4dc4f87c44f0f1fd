from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.models import UserRole
from apps.accounts.permissions import IsCustomer

from .admission import OrderItemRequest, OrderRequest, order_admission_service
from .models import Order
from .serializers import OrderCreateSerializer, OrderSerializer, OrderStatusUpdateSerializer
from .services import order_lifecycle_service


class OrderViewSet(viewsets.ViewSet):
    def get_permissions(self):
        if self.action == "create":
            return [IsCustomer()]
        return super().get_permissions()

    def list(self, request):
        principal = request.user
        orders = Order.objects.all()
        if principal.role == UserRole.CUSTOMER:
            orders = orders.filter(customer_id=principal.user_id)
        elif principal.role == UserRole.VENDOR:
            orders = orders.filter(vendor__user_id=principal.user_id)
        elif principal.role == UserRole.DELIVERY_PARTNER:
            orders = orders.filter(delivery_partner_id=principal.user_id)

        status_filter = request.query_params.get("status")
        if status_filter:
            orders = orders.filter(status=status_filter)

        orders = orders.prefetch_related("items", "status_history").order_by("-created_at")
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request, pk=None):
        order = order_lifecycle_service.get_order_for(pk, request.user.role, request.user.user_id)
        return Response(OrderSerializer(order).data)

    def create(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = order_admission_service.create_order(
            OrderRequest(
                customer_id=request.user.user_id,
                vendor_id=data["vendor_id"],
                items=[OrderItemRequest(item["product_id"], item["quantity"]) for item in data["items"]],
                fulfillment_method=data["fulfillment_method"],
                delivery_address_id=data.get("delivery_address_id"),
                meal_slot_id=data.get("meal_slot_id"),
                preferred_delivery_start=data.get("preferred_delivery_start"),
                preferred_delivery_end=data.get("preferred_delivery_end"),
                notes=data.get("notes"),
            )
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order_lifecycle_service.transition(
            pk,
            request.user.role,
            request.user.user_id,
            serializer.validated_data["status"],
            notes=serializer.validated_data.get("notes"),
        )
        order = order_lifecycle_service.get_order(pk)
        return Response(OrderSerializer(order).data)
