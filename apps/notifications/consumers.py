import logging

from channels.generic.websocket import JsonWebsocketConsumer
from django.core.exceptions import ValidationError
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from apps.common.constants import UserRole
from apps.common.utils import is_admin
from apps.notifications.dispatcher import SubscriptionError, dispatcher
from apps.restaurants.models import Restaurant

logger = logging.getLogger(__name__)


def can_subscribe(user, role, subject_id) -> bool:
    if is_admin(user):
        return True
    if role == UserRole.CUSTOMER:
        return user.role == UserRole.CUSTOMER and str(user.id) == str(subject_id)
    if role == UserRole.RESTAURANT:
        try:
            return Restaurant.objects.filter(pk=subject_id, owner=user).exists()
        except ValidationError:
            return False
    return False


class NotificationConsumer(JsonWebsocketConsumer):
    """
    Push channel for order events.

    After connecting the client sends exactly one identity declaration:
    ``{"action": "subscribe", "role": "customer", "id": "<uuid>", "token": "<access JWT>"}``.
    """

    def connect(self):
        self.accept()

    def disconnect(self, code):
        dispatcher.unsubscribe(self.channel_name)

    def receive_json(self, content, **kwargs):
        action = content.get("action") if isinstance(content, dict) else None

        if action == "subscribe":
            self._subscribe(content)
        elif action == "ping":
            self.send_json({"type": "pong"})
        else:
            self._error(f"Unknown action '{action}'.")

    def order_event(self, message):
        self.send_json(message["payload"])

    def _subscribe(self, content):
        role = content.get("role")
        subject_id = content.get("id")

        user = self._authenticate(content.get("token"))
        if user is None:
            self._error("Invalid or missing token.")
            return

        if not can_subscribe(user, role, subject_id):
            logger.info("User %s refused subscription to %s:%s", user.pk, role, subject_id)
            self._error("You cannot subscribe to this channel.")
            return

        try:
            subscription = dispatcher.subscribe(self.channel_name, role, subject_id)
        except SubscriptionError as e:
            self._error(str(e))
            return

        self.send_json({"type": "subscribed", "channel": subscription.channel})

    @staticmethod
    def _authenticate(token):
        if not token:
            return None
        auth = JWTAuthentication()
        try:
            validated = auth.get_validated_token(token)
            return auth.get_user(validated)
        except (InvalidToken, TokenError, AuthenticationFailed):
            return None

    def _error(self, detail):
        self.send_json({"type": "error", "detail": detail})
