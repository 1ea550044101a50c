"""The websocket consumer: identity declaration, event relay and cleanup on disconnect."""

import pytest
from asgiref.sync import async_to_sync, sync_to_async
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import AccessToken

from apps.common.constants import NotificationEvent, UserRole
from apps.notifications.consumers import NotificationConsumer
from apps.notifications.dispatcher import NotificationDispatcher, channel_key
from apps.notifications.events import OrderEvent

pytestmark = pytest.mark.django_db(transaction=True)


@pytest.fixture()
def socket_dispatcher(settings, monkeypatch):
    """A dispatcher that pushes through a fresh in-memory channel layer."""
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
    dispatcher = NotificationDispatcher()
    monkeypatch.setattr("apps.notifications.consumers.dispatcher", dispatcher)
    return dispatcher


def token_for(user):
    return str(AccessToken.for_user(user))


def run(scenario):
    return async_to_sync(scenario)()


async def open_socket():
    communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), "/ws/notifications/")
    connected, _ = await communicator.connect()
    assert connected
    return communicator


class TestSubscribe:
    def test_customer_joins_own_channel(self, socket_dispatcher, customer):
        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "customer", "id": str(customer.id), "token": token_for(customer)}
            )
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert run(scenario) == {"type": "subscribed", "channel": f"customer:{customer.id}"}

    def test_owner_joins_restaurant_channel(self, socket_dispatcher, owner, restaurant):
        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "restaurant", "id": str(restaurant.id), "token": token_for(owner)}
            )
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert run(scenario) == {"type": "subscribed", "channel": f"restaurant:{restaurant.id}"}

    def test_bad_token_gets_an_error_frame(self, socket_dispatcher, customer):
        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "customer", "id": str(customer.id), "token": "not-a-jwt"}
            )
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert run(scenario) == {"type": "error", "detail": "Invalid or missing token."}
        assert socket_dispatcher.stats()["connected_clients"] == 0

    def test_foreign_channel_is_refused(self, socket_dispatcher, customer, other_customer):
        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {
                    "action": "subscribe",
                    "role": "customer",
                    "id": str(other_customer.id),
                    "token": token_for(customer),
                }
            )
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert run(scenario) == {"type": "error", "detail": "You cannot subscribe to this channel."}

    def test_second_identity_on_one_connection_is_refused(self, socket_dispatcher, admin_user, customer):
        async def scenario():
            communicator = await open_socket()
            token = token_for(admin_user)
            await communicator.send_json_to({"action": "subscribe", "role": "admin", "token": token})
            first = await communicator.receive_json_from()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "customer", "id": str(customer.id), "token": token}
            )
            second = await communicator.receive_json_from()
            await communicator.disconnect()
            return first, second

        first, second = run(scenario)
        assert first == {"type": "subscribed", "channel": "admin"}
        assert second == {"type": "error", "detail": "Connection already joined admin."}

    def test_ping_and_unknown_action(self, socket_dispatcher):
        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to({"action": "ping"})
            pong = await communicator.receive_json_from()
            await communicator.send_json_to({"action": "dance"})
            error = await communicator.receive_json_from()
            await communicator.disconnect()
            return pong, error

        pong, error = run(scenario)
        assert pong == {"type": "pong"}
        assert error == {"type": "error", "detail": "Unknown action 'dance'."}


class TestRelay:
    def test_dispatched_event_reaches_the_socket(self, socket_dispatcher, customer, restaurant):
        event = OrderEvent(
            type=NotificationEvent.ORDER_STATUS_CHANGED,
            order_id="3f0c8a2e-0000-4000-8000-000000000001",
            order_number="DE17000000000000001",
            customer_id=str(customer.id),
            restaurant_id=str(restaurant.id),
            status="preparing",
            payment_status="pending",
            message="Your food is being prepared",
        )

        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "customer", "id": str(customer.id), "token": token_for(customer)}
            )
            await communicator.receive_json_from()
            delivered = await sync_to_async(socket_dispatcher.dispatch)(event)
            payload = await communicator.receive_json_from()
            await communicator.disconnect()
            return delivered, payload

        delivered, payload = run(scenario)
        assert delivered == 1
        assert payload["type"] == NotificationEvent.ORDER_STATUS_CHANGED
        assert payload["order_number"] == "DE17000000000000001"
        assert payload["status"] == "preparing"


class TestDisconnect:
    def test_session_is_dropped(self, socket_dispatcher, customer):
        channel = channel_key(UserRole.CUSTOMER, customer.id)

        async def scenario():
            communicator = await open_socket()
            await communicator.send_json_to(
                {"action": "subscribe", "role": "customer", "id": str(customer.id), "token": token_for(customer)}
            )
            await communicator.receive_json_from()
            (connection_id,) = socket_dispatcher.members(channel)
            joined = socket_dispatcher.session(connection_id)
            await communicator.disconnect()
            return connection_id, joined

        connection_id, joined = run(scenario)
        assert joined.channel == channel
        assert socket_dispatcher.session(connection_id) is None
        assert socket_dispatcher.members(channel) == []
