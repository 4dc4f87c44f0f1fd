"""
Live connection bookkeeping for the tracking gateway.

One ``ConnectionRegistry`` per process holds at most one connection per
user plus the order subscriptions of those users. Every mutation happens
under a single ``asyncio.Lock``; network writes and closes happen outside
it.

A connection handle is anything with an ``is_open`` attribute and the
coroutines ``send_event(message)`` and ``close(code)``.
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from django.conf import settings
from django.utils import timezone

from .subscriptions import SubscriptionIndex

logger = logging.getLogger(__name__)

CLOSE_NORMAL = 1000
CLOSE_AUTH_FAILED = 4001
CLOSE_SUPERSEDED = 4002


@dataclass
class Connection:
    user_id: str
    role: str
    handle: object
    connected_at: datetime = field(default_factory=timezone.now)

    @property
    def is_open(self):
        return bool(getattr(self.handle, "is_open", False))


class ConnectionRegistry:
    def __init__(self, grace_period=None, sweep_interval=None):
        self._grace_period = grace_period
        self._sweep_interval = sweep_interval
        self._connections = {}
        self._subscriptions = SubscriptionIndex()
        self._purge_tasks = {}
        self._sweeper = None
        self._lock = asyncio.Lock()

    @property
    def grace_period(self):
        if self._grace_period is not None:
            return self._grace_period
        return settings.TRACKING_RECONNECT_GRACE

    @property
    def sweep_interval(self):
        if self._sweep_interval is not None:
            return self._sweep_interval
        return settings.TRACKING_SWEEP_INTERVAL

    async def register(self, user_id, role, handle):
        """Make ``handle`` the user's live connection, closing any connection it replaces."""
        user_id = str(user_id)
        async with self._lock:
            pending = self._purge_tasks.pop(user_id, None)
            if pending is not None:
                pending.cancel()
            previous = self._connections.get(user_id)
            connection = Connection(user_id=user_id, role=str(role), handle=handle)
            self._connections[user_id] = connection

        if previous is not None and previous.handle is not handle and previous.is_open:
            logger.info(f"Closing superseded connection for user {user_id}")
            try:
                await previous.handle.close(CLOSE_SUPERSEDED)
            except Exception:
                logger.exception(f"Failed to close superseded connection for user {user_id}")
        return connection

    async def unregister(self, user_id, handle=None) -> bool:
        """Remove the user's connection and subscriptions now, skipping the grace window."""
        user_id = str(user_id)
        async with self._lock:
            current = self._connections.get(user_id)
            if current is None or (handle is not None and current.handle is not handle):
                return False
            self._drop(user_id)
        return True

    async def schedule_purge(self, user_id, handle):
        """Purge the user once the grace window passes unless a fresher connection registers first."""
        user_id = str(user_id)
        async with self._lock:
            current = self._connections.get(user_id)
            if current is not None and current.handle is not handle:
                return None
            pending = self._purge_tasks.pop(user_id, None)
            if pending is not None:
                pending.cancel()
            task = asyncio.get_running_loop().create_task(self._purge_after_grace(user_id, handle))
            self._purge_tasks[user_id] = task
        return task

    async def _purge_after_grace(self, user_id, handle):
        await asyncio.sleep(self.grace_period)
        async with self._lock:
            if self._purge_tasks.get(user_id) is asyncio.current_task():
                del self._purge_tasks[user_id]
            current = self._connections.get(user_id)
            if current is not None and current.handle is not handle:
                return
            self._drop(user_id)
        logger.info(f"Purged user {user_id} after reconnect grace window")

    def _drop(self, user_id):
        self._connections.pop(user_id, None)
        self._subscriptions.remove_user(user_id)

    async def subscribe(self, user_id, order_id):
        async with self._lock:
            self._subscriptions.add(order_id, user_id)

    async def unsubscribe(self, user_id, order_id) -> bool:
        async with self._lock:
            return self._subscriptions.remove(order_id, user_id)

    async def subscribers(self, order_id):
        async with self._lock:
            return self._subscriptions.subscribers(order_id)

    async def subscriptions_for(self, user_id):
        async with self._lock:
            return self._subscriptions.orders_for(user_id)

    async def send_to_user(self, user_id, message) -> bool:
        user_id = str(user_id)
        async with self._lock:
            connection = self._connections.get(user_id)
        if connection is None or not connection.is_open:
            return False

        try:
            await connection.handle.send_event(message)
        except Exception as e:
            logger.warning(f"Dropping dead connection for user {user_id}: {e}")
            async with self._lock:
                current = self._connections.get(user_id)
                if current is connection:
                    self._drop(user_id)
            return False
        return True

    async def broadcast_to_role(self, role, message, exclude=()) -> int:
        excluded = {str(user_id) for user_id in exclude if user_id}
        async with self._lock:
            targets = [
                user_id
                for user_id, connection in self._connections.items()
                if connection.role == role and connection.is_open and user_id not in excluded
            ]

        delivered = 0
        for user_id in targets:
            if await self.send_to_user(user_id, message):
                delivered += 1
        return delivered

    async def sweep(self) -> int:
        """
        Evict connections whose transport is no longer open.

        Users still inside a reconnect grace window keep their subscriptions;
        the pending purge clears them.
        """
        async with self._lock:
            dead = [user_id for user_id, connection in self._connections.items() if not connection.is_open]
            for user_id in dead:
                if user_id in self._purge_tasks:
                    self._connections.pop(user_id, None)
                else:
                    self._drop(user_id)
        if dead:
            logger.info(f"Sweep evicted {len(dead)} stale connection(s)")
        return len(dead)

    def start_sweeper(self):
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())
        return self._sweeper

    async def _sweep_forever(self):
        while True:
            await asyncio.sleep(self.sweep_interval)
            try:
                await self.sweep()
            except Exception:
                logger.exception("Connection sweep failed")

    async def shutdown(self):
        """Cancel timers and forget every connection."""
        tasks = list(self._purge_tasks.values())
        if self._sweeper is not None:
            tasks.append(self._sweeper)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._purge_tasks.clear()
        self._sweeper = None
        self._connections.clear()
        self._subscriptions.clear()
        self._lock = asyncio.Lock()

    def is_connected(self, user_id) -> bool:
        connection = self._connections.get(str(user_id))
        return connection is not None and connection.is_open

    def connection_count(self) -> int:
        return len(self._connections)

    def count_by_role(self):
        return dict(Counter(connection.role for connection in self._connections.values()))


connection_registry = ConnectionRegistry()
