"""
Best-effort fan-out of order lifecycle events to connected clients.

The dispatcher owns the session registry: every open connection declares one
identity (``customer:<id>``, ``restaurant:<id>`` or ``admin``) and keeps it
until it disconnects. Events are delivered to the connections registered on
the target channels at dispatch time; with no listeners the event is dropped.
Nothing is queued or retried.
"""

import logging
import threading
from dataclasses import dataclass

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.utils import timezone

from apps.common.constants import UserRole

logger = logging.getLogger(__name__)

SUBSCRIBABLE_ROLES = (UserRole.CUSTOMER, UserRole.RESTAURANT, UserRole.ADMIN)
ADMIN_CHANNEL = "admin"


class SubscriptionError(Exception):
    pass


def channel_key(role, subject_id=None) -> str:
    if role == UserRole.ADMIN:
        return ADMIN_CHANNEL
    return f"{role}:{subject_id}"


@dataclass(frozen=True)
class Subscription:
    connection_id: str
    role: str
    subject_id: str | None = None

    @property
    def channel(self) -> str:
        return channel_key(self.role, self.subject_id)


class ChannelLayerTransport:
    """Hands a payload to one connection through the Channels layer."""

    message_type = "order.event"

    def send(self, connection_id: str, payload: dict) -> None:
        layer = get_channel_layer()
        if layer is None:
            raise RuntimeError("No channel layer configured")
        async_to_sync(layer.send)(connection_id, {"type": self.message_type, "payload": payload})


class NotificationDispatcher:
    def __init__(self, transport=None):
        self.transport = transport or ChannelLayerTransport()
        self._sessions: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    # -- sessions --------------------------------------------------------

    def subscribe(self, connection_id, role, subject_id=None) -> Subscription:
        if role not in SUBSCRIBABLE_ROLES:
            raise SubscriptionError(f"Cannot subscribe as '{role}'.")
        if role != UserRole.ADMIN and not subject_id:
            raise SubscriptionError(f"A {role} subscription needs an id.")

        subscription = Subscription(
            connection_id=connection_id,
            role=str(role),
            subject_id=None if role == UserRole.ADMIN else str(subject_id),
        )

        with self._lock:
            existing = self._sessions.get(connection_id)
            if existing is not None and existing != subscription:
                raise SubscriptionError(f"Connection already joined {existing.channel}.")
            self._sessions[connection_id] = subscription

        logger.info("Connection %s joined %s", connection_id, subscription.channel)
        return subscription

    def unsubscribe(self, connection_id) -> Subscription | None:
        with self._lock:
            subscription = self._sessions.pop(connection_id, None)
        if subscription:
            logger.info("Connection %s left %s", connection_id, subscription.channel)
        return subscription

    def session(self, connection_id) -> Subscription | None:
        return self._sessions.get(connection_id)

    def members(self, channel) -> list:
        with self._lock:
            return [s.connection_id for s in self._sessions.values() if s.channel == channel]

    def stats(self) -> dict:
        with self._lock:
            sessions = list(self._sessions.values())
        by_role = {str(role): 0 for role in SUBSCRIBABLE_ROLES}
        for subscription in sessions:
            by_role[subscription.role] += 1
        return {"connected_clients": len(sessions), "by_role": by_role}

    # -- delivery --------------------------------------------------------

    def target_channels(self, event) -> list:
        channels = [
            channel_key(UserRole.CUSTOMER, event.customer_id),
            channel_key(UserRole.RESTAURANT, event.restaurant_id),
        ]
        if getattr(settings, "ORDER_NOTIFY_ADMINS", False):
            channels.append(ADMIN_CHANNEL)
        return channels

    def dispatch(self, event) -> int:
        """Send ``event`` to every connection on its target channels; return deliveries made."""
        connection_ids = []
        for channel in self.target_channels(event):
            connection_ids.extend(self.members(channel))

        if not connection_ids:
            logger.debug("No listeners for %s on order %s, dropped", event.type, event.order_number)
            return 0

        return self._deliver(connection_ids, event.to_payload())

    def broadcast(self, message, sender=None) -> int:
        """Administrative broadcast: the only send that reaches every connected client."""
        with self._lock:
            connection_ids = list(self._sessions)

        payload = {
            "type": "admin.broadcast",
            "message": message,
            "from": str(sender) if sender else "admin",
            "timestamp": timezone.now().isoformat(),
        }
        logger.info("Admin broadcast to %d connection(s)", len(connection_ids))
        return self._deliver(connection_ids, payload)

    def _deliver(self, connection_ids, payload) -> int:
        delivered = 0
        for connection_id in connection_ids:
            try:
                self.transport.send(connection_id, payload)
            except Exception as e:  # noqa: BLE001
                logger.warning("Dropping %s for connection %s: %s", payload.get("type"), connection_id, e)
                continue
            delivered += 1
        return delivered


dispatcher = NotificationDispatcher()
