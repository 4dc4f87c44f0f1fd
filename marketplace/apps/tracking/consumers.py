import asyncio
import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.accounts.authentication import TokenError, verify_token
from apps.core.exceptions import NotFound
from apps.orders.services import can_view_order, order_lifecycle_service

from .registry import CLOSE_AUTH_FAILED, connection_registry

logger = logging.getLogger(__name__)


class TrackingConsumer(AsyncWebsocketConsumer):
    """
    Authenticated live order tracking.

    The socket is accepted unauthenticated; the first useful message must be
    ``{"type": "auth", "token": ...}`` and has to arrive before the auth
    timeout. Afterwards the client may ``subscribe``/``unsubscribe`` to
    orders and ``ping``. Lifecycle events are pushed by the broadcaster
    through ``send_event``.
    """

    registry = connection_registry

    async def connect(self):
        self.user_id = None
        self.role = None
        self.is_open = False
        self._auth_timer = None

        await self.accept()
        self.is_open = True
        self._auth_timer = asyncio.create_task(self._expire_unauthenticated())
        self.registry.start_sweeper()

    async def disconnect(self, close_code):
        self.is_open = False
        self._cancel_auth_timer()
        if self.user_id is not None:
            await self.registry.schedule_purge(self.user_id, self)
            logger.info(f"Tracking connection closed for user {self.user_id} (code {close_code})")

    async def close(self, code=None):
        self.is_open = False
        self._cancel_auth_timer()
        await super().close(code=code)

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send_json({"type": "auth_error", "message": "Invalid message format"})
            return
        if not isinstance(data, dict):
            await self.send_json({"type": "auth_error", "message": "Invalid message format"})
            return

        message_type = data.get("type")
        if self.user_id is None:
            if message_type == "auth":
                await self.authenticate(data.get("token"))
            else:
                await self.send_json(
                    {"type": "auth_error", "message": "Not authenticated. Send auth message first."}
                )
            return

        if message_type == "subscribe":
            await self.subscribe(data.get("orderId"))
        elif message_type == "unsubscribe":
            await self.unsubscribe(data.get("orderId"))
        elif message_type == "ping":
            await self.send_json({"type": "pong", "timestamp": timezone.now().isoformat()})
        elif message_type == "auth":
            await self.send_json({"type": "error", "message": "Already authenticated"})
        else:
            await self.send_json({"type": "error", "message": f"Unknown message type: {message_type}"})

    async def authenticate(self, token):
        if not token:
            await self.reject_auth("Token required")
            return
        try:
            principal = verify_token(token)
        except TokenError as e:
            await self.reject_auth(str(e))
            return

        self._cancel_auth_timer()
        self.user_id = principal.user_id
        self.role = principal.role
        await self.registry.register(self.user_id, self.role, self)
        await self.send_json({"type": "auth_success", "userId": self.user_id, "role": self.role})
        logger.info(f"Tracking connection authenticated for user {self.user_id} ({self.role})")

    async def reject_auth(self, message):
        logger.info(f"Tracking authentication failed: {message}")
        await self.send_json({"type": "auth_error", "message": message})
        await self.close(code=CLOSE_AUTH_FAILED)

    async def subscribe(self, order_id):
        if not order_id:
            await self.send_json({"type": "error", "message": "orderId is required"})
            return
        if not await self.can_track(order_id):
            await self.send_json(
                {"type": "error", "message": "Order not found or not accessible", "orderId": order_id}
            )
            return

        await self.registry.subscribe(self.user_id, order_id)
        await self.send_json({"type": "subscribed", "orderId": order_id})

    async def unsubscribe(self, order_id):
        if not order_id:
            await self.send_json({"type": "error", "message": "orderId is required"})
            return
        await self.registry.unsubscribe(self.user_id, order_id)
        await self.send_json({"type": "unsubscribed", "orderId": order_id})

    async def send_event(self, message):
        if not self.is_open:
            raise ConnectionError("Connection is closed")
        await self.send_json(message)

    async def send_json(self, payload):
        await self.send(text_data=json.dumps(payload))

    @database_sync_to_async
    def can_track(self, order_id):
        try:
            order = order_lifecycle_service.get_order(order_id)
        except NotFound:
            return False
        return can_view_order(order, self.role, self.user_id)

    async def _expire_unauthenticated(self):
        await asyncio.sleep(settings.TRACKING_AUTH_TIMEOUT)
        if self.user_id is None and self.is_open:
            await self.send_json({"type": "auth_error", "message": "Authentication timeout"})
            await self.close(code=CLOSE_AUTH_FAILED)

    def _cancel_auth_timer(self):
        timer = self._auth_timer
        self._auth_timer = None
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()
