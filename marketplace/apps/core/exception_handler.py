import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import MarketplaceError

logger = logging.getLogger(__name__)


def marketplace_exception_handler(exc, context):
    """Render domain errors as {"error": {"code", "message", ...}}."""
    if isinstance(exc, MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}", exc_info=exc.__cause__ or exc)
        return Response({"error": exc.to_dict()}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if response.status_code == status.HTTP_400_BAD_REQUEST:
        response.data = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request payload",
                "fields": response.data,
            }
        }
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data = {
            "error": {
                "code": getattr(response.data["detail"], "code", "ERROR").upper(),
                "message": str(response.data["detail"]),
            }
        }
    return response
