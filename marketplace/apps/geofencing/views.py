from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin

from .geometry import GeoPoint
from .serializers import (
    ServiceabilityQuerySerializer,
    ServiceAreaSerializer,
    ServiceAreaWriteSerializer,
)
from .services import service_area_service


class ServiceAreaViewSet(viewsets.ViewSet):
    def get_permissions(self):
        if self.action in ("create", "partial_update"):
            return [IsAdmin()]
        return super().get_permissions()

    def list(self, request):
        areas = service_area_service.list_service_areas(status=request.query_params.get("status"))
        serializer = ServiceAreaSerializer(areas, many=True)
        return Response(serializer.data)

    def retrieve(self, request, pk=None):
        area = service_area_service.get_service_area(pk)
        serializer = ServiceAreaSerializer(area)
        return Response(serializer.data)

    def create(self, request):
        serializer = ServiceAreaWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        area = service_area_service.create_service_area(**serializer.validated_data)
        return Response(ServiceAreaSerializer(area).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = ServiceAreaWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        area = service_area_service.update_service_area(pk, **serializer.validated_data)
        return Response(ServiceAreaSerializer(area).data)


class ServiceabilityCheckView(APIView):
    def get(self, request):
        serializer = ServiceabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        point = GeoPoint(serializer.validated_data["lat"], serializer.validated_data["lng"])
        return Response(service_area_service.check_serviceability(point))
