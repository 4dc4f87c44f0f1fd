from django.conf import settings
from infrastructure.cache import check_cache_connection
from infrastructure.database import check_database_connection
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.tracking.registry import connection_registry


class LivenessView(APIView):
    """Process is up; reports live tracking load."""

    authentication_classes = []
    permission_classes = []

    def get(self, request):
        return Response(
            {
                "status": "healthy",
                "service": "marketplace-orders",
                "tracking": {
                    "connections": connection_registry.connection_count(),
                    "byRole": connection_registry.count_by_role(),
                },
            }
        )


class ReadinessView(APIView):
    """Ready to take traffic once the database and cache answer."""

    authentication_classes = []
    permission_classes = []

    def get(self, request):
        checks = {
            "database": check_database_connection(),
            "cache": check_cache_connection(),
        }
        ready = all(checks.values())
        return Response(
            {
                "status": "ready" if ready else "not_ready",
                "checks": checks,
                "eventBus": "kafka" if settings.KAFKA_ENABLED else "disabled",
            },
            status=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
