"""
Bearer credential verification.

Tokens are HMAC-signed JWTs minted by the login service. The payload names
the user in ``sub`` (older tokens use ``userId``) and carries ``role`` and
``exp``. Both the REST API and the tracking gateway resolve a verified
``Principal`` through ``verify_token``.
"""

import logging
from dataclasses import dataclass

import jwt
from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from .models import UserRole

logger = logging.getLogger(__name__)


class TokenError(Exception):
    pass


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str

    is_authenticated = True

    @property
    def is_admin(self):
        return self.role == UserRole.SUPER_ADMIN


def extract_token(header_value):
    if not header_value:
        return None
    if header_value.startswith("Bearer "):
        return header_value[len("Bearer "):].strip() or None
    return header_value.strip() or None


def verify_token(token):
    """Decode ``token`` and return the ``Principal`` it vouches for."""
    if not token:
        raise TokenError("Token required")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token expired")
    except jwt.InvalidTokenError:
        raise TokenError("Invalid token")

    user_id = payload.get("sub") or payload.get("userId")
    role = payload.get("role")
    if not user_id or not role:
        raise TokenError("Invalid token payload")
    if role not in UserRole.values:
        raise TokenError("Invalid user role")

    return Principal(user_id=str(user_id), role=role)


class BearerTokenAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        header = get_authorization_header(request).decode("latin-1")
        if not header:
            return None

        token = extract_token(header)
        try:
            principal = verify_token(token)
        except TokenError as e:
            logger.info(f"Rejected bearer credential: {e}")
            raise exceptions.AuthenticationFailed(str(e))
        return principal, token

    def authenticate_header(self, request):
        return self.keyword
