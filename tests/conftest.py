"""Shared fixtures: accounts for every role, a restaurant with a menu and an isolated notifier."""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.common.constants import MenuCategory, UserRole
from apps.notifications.dispatcher import NotificationDispatcher
from apps.orders.services import place_order
from apps.restaurants.models import MenuItem, Restaurant
from apps.users.models import User

PASSWORD = "Str0ng-pass-123"

ADDRESS = {
    "street": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
    "landmark": "Opp. City Mall",
}


class RecordingTransport:
    """Collects every payload instead of pushing it to a socket."""

    def __init__(self):
        self.sent = []
        self.broken = set()

    def send(self, connection_id, payload):
        if connection_id in self.broken:
            raise ConnectionError(f"{connection_id} went away")
        self.sent.append((connection_id, payload))

    def to(self, connection_id):
        return [payload for cid, payload in self.sent if cid == connection_id]


def make_user(email, role, **extra):
    extra.setdefault("name", email.split("@")[0].title())
    return User.objects.create_user(email=email, password=PASSWORD, role=role, **extra)


def make_restaurant(owner, **extra):
    fields = {
        "name": "Spice Route",
        "street": "4 FC Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411004",
        "minimum_order": Decimal("100.00"),
        "delivery_fee": Decimal("30.00"),
        "estimated_delivery_time": 30,
    }
    fields.update(extra)
    return Restaurant.objects.create(owner=owner, **fields)


def add_item(restaurant, name="Paneer Tikka", price="100.00", **extra):
    extra.setdefault("category", MenuCategory.STARTERS)
    return MenuItem.objects.create(restaurant=restaurant, name=name, price=Decimal(price), **extra)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture(autouse=True)
def notifier(monkeypatch, transport):
    """A fresh dispatcher per test so subscriptions never leak between tests."""
    dispatcher = NotificationDispatcher(transport=transport)
    monkeypatch.setattr("apps.orders.services.dispatcher", dispatcher)
    monkeypatch.setattr("apps.notifications.views.dispatcher", dispatcher)
    monkeypatch.setattr("apps.notifications.consumers.dispatcher", dispatcher)
    return dispatcher


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer(db):
    return make_user("asha@example.com", UserRole.CUSTOMER, phone="9876543210")


@pytest.fixture()
def other_customer(db):
    return make_user("ravi@example.com", UserRole.CUSTOMER)


@pytest.fixture()
def owner(db):
    return make_user("owner@spiceroute.in", UserRole.RESTAURANT)


@pytest.fixture()
def other_owner(db):
    return make_user("owner@dosacorner.in", UserRole.RESTAURANT)


@pytest.fixture()
def delivery_partner(db):
    return make_user("rider@example.com", UserRole.DELIVERY)


@pytest.fixture()
def admin_user(db):
    return User.objects.create_superuser(email="admin@example.com", password=PASSWORD, name="Admin")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
@pytest.fixture()
def restaurant(owner):
    return make_restaurant(owner)


@pytest.fixture()
def other_restaurant(other_owner):
    return make_restaurant(other_owner, name="Dosa Corner")


@pytest.fixture()
def item(restaurant):
    return add_item(restaurant, preparation_time=20)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@pytest.fixture()
def place(customer, restaurant, item):
    """Place an order of ``quantity`` x ``item`` (100.00 each) for ``customer``."""

    def _place(quantity=2, who=None, at=None, menu_item=None):
        return place_order(
            customer=who or customer,
            restaurant_id=str((at or restaurant).id),
            items=[{"menu_item_id": str((menu_item or item).id), "quantity": quantity}],
            delivery_address=ADDRESS,
        )

    return _place


@pytest.fixture()
def api_client():
    return APIClient()


@pytest.fixture()
def client_for(api_client):
    def _client_for(user):
        api_client.force_authenticate(user=user)
        return api_client

    return _client_for
