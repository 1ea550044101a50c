"""HTTP surface of orders, payments and the realtime endpoints."""

import uuid
from decimal import Decimal

import pytest

from apps.common.constants import OrderStatus, PaymentStatus, UserRole
from apps.orders.models import Order
from apps.orders.services import update_status
from tests.conftest import ADDRESS

ORDERS_URL = "/orders/"


def cart(restaurant, item, quantity=2, **extra):
    return {
        "restaurant_id": str(restaurant.id),
        "items": [{"menu_item_id": str(item.id), "quantity": quantity}],
        "delivery_address": ADDRESS,
        **extra,
    }


class TestPlaceOrderEndpoint:
    def test_created(self, client_for, customer, restaurant, item):
        response = client_for(customer).post(ORDERS_URL, cart(restaurant, item), format="json")

        assert response.status_code == 201, response.data
        body = response.data
        assert body["status"] == "placed"
        assert body["payment_status"] == "pending"
        assert body["payment_method"] == "cod"
        assert body["summary"] == {
            "items_total": "200.00",
            "delivery_fee": "30.00",
            "taxes": "10.00",
            "discount": "0.00",
            "total_amount": "240.00",
        }
        assert body["items"][0]["name"] == "Paneer Tikka"
        assert body["items"][0]["line_total"] == "200.00"
        assert body["delivery_address"]["pincode"] == "411001"
        assert [entry["status"] for entry in body["tracking"]] == ["placed"]

    def test_below_minimum(self, client_for, customer, restaurant, item):
        response = client_for(customer).post(ORDERS_URL, cart(restaurant, item, quantity=1), format="json")
        assert response.status_code == 201

        restaurant.minimum_order = Decimal("250.00")
        restaurant.save()

        response = client_for(customer).post(ORDERS_URL, cart(restaurant, item, quantity=2), format="json")

        assert response.status_code == 400
        assert response.data["error"] == "precondition_failed"
        assert response.data["code"] == "below_minimum_order"
        assert response.data["minimum_order"] == "250.00"
        assert response.data["current_total"] == "200.00"

    def test_closed_restaurant(self, client_for, customer, restaurant, item):
        restaurant.is_accepting_orders = False
        restaurant.save()

        response = client_for(customer).post(ORDERS_URL, cart(restaurant, item), format="json")

        assert response.status_code == 400
        assert response.data["code"] == "restaurant_closed"
        assert Order.objects.count() == 0

    def test_unknown_restaurant(self, client_for, customer, item):
        payload = cart(item.restaurant, item)
        payload["restaurant_id"] = str(uuid.uuid4())

        response = client_for(customer).post(ORDERS_URL, payload, format="json")

        assert response.status_code == 404
        assert response.data["code"] == "restaurant_not_found"

    def test_zero_quantity(self, client_for, customer, restaurant, item):
        response = client_for(customer).post(ORDERS_URL, cart(restaurant, item, quantity=0), format="json")

        assert response.status_code == 400
        assert response.data["error"] == "invalid_input"

    def test_empty_cart(self, client_for, customer, restaurant):
        payload = {"restaurant_id": str(restaurant.id), "items": [], "delivery_address": ADDRESS}

        response = client_for(customer).post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400

    def test_only_customers_order(self, client_for, owner, restaurant, item):
        response = client_for(owner).post(ORDERS_URL, cart(restaurant, item), format="json")

        assert response.status_code == 403

    def test_requires_login(self, api_client, restaurant, item):
        response = api_client.post(ORDERS_URL, cart(restaurant, item), format="json")

        assert response.status_code == 401


class TestListOrders:
    def test_paginated(self, client_for, customer, place):
        for _ in range(3):
            place()

        response = client_for(customer).get(ORDERS_URL, {"limit": 2})

        assert response.status_code == 200
        assert response.data["count"] == 3
        assert response.data["total_pages"] == 2
        assert response.data["page"] == 1
        assert len(response.data["results"]) == 2

    def test_filter_by_status(self, client_for, customer, owner, place):
        kept = place()
        cancelled = place()
        update_status(owner, cancelled.id, "cancelled")

        response = client_for(customer).get(ORDERS_URL, {"status": "placed"})

        assert [row["id"] for row in response.data["results"]] == [str(kept.id)]

    def test_customers_see_only_their_orders(self, client_for, other_customer, place):
        place()

        response = client_for(other_customer).get(ORDERS_URL)

        assert response.data["count"] == 0

    def test_owner_sees_restaurant_orders(self, client_for, owner, place):
        place()

        response = client_for(owner).get(ORDERS_URL)

        assert response.data["count"] == 1


class TestOrderDetail:
    def test_own_order(self, client_for, customer, place):
        order = place()

        response = client_for(customer).get(f"{ORDERS_URL}{order.id}")

        assert response.status_code == 200
        assert response.data["order_number"] == order.order_number

    def test_someone_elses_order(self, client_for, other_customer, place):
        order = place()

        response = client_for(other_customer).get(f"{ORDERS_URL}{order.id}")

        assert response.status_code == 403
        assert response.data["error"] == "forbidden"

    def test_unknown_order(self, client_for, customer):
        response = client_for(customer).get(f"{ORDERS_URL}{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.data["code"] == "order_not_found"


class TestStatusEndpoint:
    def url(self, order):
        return f"{ORDERS_URL}{order.id}/status"

    def test_owner_updates(self, client_for, owner, place):
        order = place()

        response = client_for(owner).patch(
            self.url(order), {"status": "preparing", "message": "Tandoor is hot"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "preparing"
        assert response.data["tracking"][-1]["message"] == "Tandoor is hot"
        assert response.data["tracking"][-1]["updated_by"] == str(owner.id)

    def test_finalized(self, client_for, owner, place):
        order = place()
        update_status(owner, order.id, "delivered")

        response = client_for(owner).patch(self.url(order), {"status": "cancelled"}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "order_finalized"
        assert response.data["current_status"] == "delivered"

    def test_unknown_status(self, client_for, owner, place):
        order = place()

        response = client_for(owner).patch(self.url(order), {"status": "teleported"}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "invalid_status"
        assert "preparing" in response.data["allowed"]

    def test_customer_cannot_advance(self, client_for, customer, place):
        order = place()

        response = client_for(customer).patch(self.url(order), {"status": "ready"}, format="json")

        assert response.status_code == 403


class TestBulkStatusEndpoint:
    URL = f"{ORDERS_URL}bulk-status"

    def test_updates_eligible_orders(self, client_for, owner, place):
        orders = [place() for _ in range(3)]
        update_status(owner, orders[0].id, "delivered")

        response = client_for(owner).put(
            self.URL, {"order_ids": [str(o.id) for o in orders], "status": "confirmed"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["updated_count"] == 2
        assert response.data["new_status"] == "confirmed"

    def test_invalid_status(self, client_for, owner, place):
        order = place()

        response = client_for(owner).put(self.URL, {"order_ids": [str(order.id)], "status": "flying"}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "invalid_status"

    def test_customers_are_refused(self, client_for, customer, place):
        order = place()

        response = client_for(customer).put(
            self.URL, {"order_ids": [str(order.id)], "status": "confirmed"}, format="json"
        )

        assert response.status_code == 403


class TestPaymentResultEndpoint:
    URL = "/payments/result"

    def test_paid_by_order_number(self, client_for, customer, place):
        order = place()

        response = client_for(customer).post(
            self.URL,
            {"order_number": order.order_number, "outcome": "paid", "payment_id": "pay_29QQoUBi66xm2f"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.CONFIRMED
        assert response.data["payment_status"] == PaymentStatus.PAID
        assert response.data["payment_id"] == "pay_29QQoUBi66xm2f"

    def test_failed_by_order_id(self, client_for, customer, place):
        order = place()

        response = client_for(customer).post(
            self.URL, {"order_id": str(order.id), "outcome": "failed", "reason": "Card declined"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.PLACED
        assert response.data["tracking"][-1]["message"] == "Payment failed: Card declined"

    def test_both_identifiers(self, client_for, customer, place):
        order = place()

        response = client_for(customer).post(
            self.URL,
            {"order_id": str(order.id), "order_number": order.order_number, "outcome": "paid"},
            format="json",
        )

        assert response.status_code == 400

    def test_unknown_order_number(self, client_for, customer):
        response = client_for(customer).post(
            self.URL, {"order_number": "DE0000", "outcome": "paid"}, format="json"
        )

        assert response.status_code == 404


class TestRealtimeEndpoints:
    def test_stats(self, client_for, customer, notifier):
        notifier.subscribe("c1", UserRole.CUSTOMER, customer.id)

        response = client_for(customer).get("/realtime/stats")

        assert response.status_code == 200
        assert response.data["connected_clients"] == 1
        assert response.data["by_role"]["customer"] == 1

    def test_broadcast(self, client_for, admin_user, customer, notifier, transport):
        notifier.subscribe("c1", UserRole.CUSTOMER, customer.id)

        response = client_for(admin_user).post("/realtime/broadcast", {"message": "Rain delays"}, format="json")

        assert response.status_code == 200
        assert response.data == {"delivered": 1}
        assert transport.to("c1")[0]["message"] == "Rain delays"

    @pytest.mark.parametrize("who", ["customer", "owner"])
    def test_broadcast_is_admin_only(self, request, client_for, who):
        response = client_for(request.getfixturevalue(who)).post(
            "/realtime/broadcast", {"message": "hi"}, format="json"
        )

        assert response.status_code == 403


def test_health(api_client, db):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.data == {"status": "ok", "database": "ok"}
