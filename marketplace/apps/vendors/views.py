from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import FulfillmentConfigSerializer, FulfillmentConfigUpdateSerializer
from .services import ensure_can_manage_vendor, fulfillment_service, get_vendor


class FulfillmentConfigView(APIView):
    def get(self, request, vendor_id):
        vendor = get_vendor(vendor_id)
        config = fulfillment_service.get_config(vendor.id)
        return Response(FulfillmentConfigSerializer(config).data)

    def patch(self, request, vendor_id):
        vendor = get_vendor(vendor_id)
        ensure_can_manage_vendor(vendor, request.user)

        serializer = FulfillmentConfigUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        config = fulfillment_service.update_config(vendor.id, **serializer.validated_data)
        return Response(FulfillmentConfigSerializer(config).data)
