"""Pricing and validation of carts, run against an in-memory catalog."""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.common.constants import MenuCategory
from apps.common.exceptions import (
    BelowMinimumOrder,
    InvalidInput,
    ItemRestaurantMismatch,
    ItemUnavailable,
    MenuItemNotFound,
    RestaurantClosed,
    RestaurantNotFound,
)
from apps.orders.pricing import price_order
from apps.restaurants.models import MenuItem, Restaurant

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)
CUSTOMER_ID = str(uuid.uuid4())


class StubCatalog:
    def __init__(self, restaurants=(), items=()):
        self.restaurants = {str(r.id): r for r in restaurants}
        self.items = {str(i.id): i for i in items}

    def get_restaurant(self, restaurant_id):
        return self.restaurants.get(str(restaurant_id))

    def get_menu_item(self, menu_item_id):
        return self.items.get(str(menu_item_id))


def restaurant(**extra):
    fields = {
        "name": "Spice Route",
        "minimum_order": Decimal("100.00"),
        "delivery_fee": Decimal("30.00"),
        "estimated_delivery_time": 30,
    }
    fields.update(extra)
    return Restaurant(**fields)


def menu_item(owner, name="Paneer Tikka", price="100.00", **extra):
    extra.setdefault("category", MenuCategory.STARTERS)
    extra.setdefault("preparation_time", 15)
    return MenuItem(restaurant=owner, name=name, price=Decimal(price), **extra)


def line(item, quantity=1, **extra):
    return {"menu_item_id": str(item.id), "quantity": quantity, **extra}


@pytest.fixture()
def spice_route():
    return restaurant()


@pytest.fixture()
def tikka(spice_route):
    return menu_item(spice_route)


@pytest.fixture()
def catalog(spice_route, tikka):
    return StubCatalog([spice_route], [tikka])


def price(catalog, spice_route, items, **kwargs):
    kwargs.setdefault("now", NOW)
    return price_order(spice_route.id, CUSTOMER_ID, items, catalog=catalog, **kwargs)


class TestTotals:
    def test_breakdown_of_a_simple_cart(self, catalog, spice_route, tikka):
        draft = price(catalog, spice_route, [line(tikka, 2)])

        assert draft.items_total == Decimal("200.00")
        assert draft.delivery_fee == Decimal("30.00")
        assert draft.taxes == Decimal("10.00")
        assert draft.discount == Decimal("0.00")
        assert draft.total_amount == Decimal("240.00")

    def test_total_is_sum_of_parts(self, catalog, spice_route, tikka):
        draft = price(catalog, spice_route, [line(tikka, 3)])

        assert draft.total_amount == draft.items_total + draft.delivery_fee + draft.taxes - draft.discount

    def test_items_total_rounded_once(self, spice_route):
        spice_route.minimum_order = Decimal("0")
        cheap = menu_item(spice_route, "Masala Chai", "33.33")
        draft = price(StubCatalog([spice_route], [cheap]), spice_route, [line(cheap, 3)])

        assert draft.items_total == Decimal("99.99")
        assert draft.taxes == Decimal("5.00")
        assert draft.total_amount == Decimal("134.99")

    def test_tax_rate_follows_settings(self, settings, catalog, spice_route, tikka):
        settings.ORDER_TAX_RATE = Decimal("0.18")

        draft = price(catalog, spice_route, [line(tikka, 2)])

        assert draft.taxes == Decimal("36.00")
        assert draft.total_amount == Decimal("266.00")

    def test_discounted_price_wins(self, spice_route):
        deal = menu_item(spice_route, "Veg Thali", "150.00", discounted_price=Decimal("120.00"))
        draft = price(StubCatalog([spice_route], [deal]), spice_route, [line(deal, 1)])

        assert draft.items[0].unit_price == Decimal("120.00")
        assert draft.items_total == Decimal("120.00")

    def test_variant_replaces_price_and_add_ons_add_per_unit(self, spice_route):
        pizza = menu_item(
            spice_route,
            "Farmhouse Pizza",
            "200.00",
            variants=[{"name": "Large", "price": "250.00"}],
            add_ons=[{"name": "Extra Cheese", "price": "20.00"}],
        )
        cart = [line(pizza, 2, variant="Large", add_ons=["Extra Cheese"])]
        draft = price(StubCatalog([spice_route], [pizza]), spice_route, cart)

        snapshot = draft.items[0]
        assert snapshot.unit_price == Decimal("270.00")
        assert snapshot.variant == "Large"
        assert snapshot.add_ons == ({"name": "Extra Cheese", "price": "20.00"},)
        assert draft.items_total == Decimal("540.00")

    def test_unknown_variant_is_rejected(self, catalog, spice_route, tikka):
        with pytest.raises(InvalidInput) as exc:
            price(catalog, spice_route, [line(tikka, 1, variant="Jumbo")])

        assert exc.value.context["field"] == "variant"


class TestSnapshots:
    def test_names_and_prices_are_copied(self, catalog, spice_route, tikka):
        draft = price(catalog, spice_route, [line(tikka, 2, special_instructions="Less spicy")])

        snapshot = draft.items[0]
        assert snapshot.menu_item_id == str(tikka.id)
        assert snapshot.name == "Paneer Tikka"
        assert snapshot.unit_price == Decimal("100.00")
        assert snapshot.quantity == 2
        assert snapshot.special_instructions == "Less spicy"

    def test_estimated_delivery_uses_slowest_item(self, spice_route, tikka):
        biryani = menu_item(spice_route, "Dum Biryani", "250.00", preparation_time=40)
        catalog = StubCatalog([spice_route], [tikka, biryani])

        draft = price(catalog, spice_route, [line(tikka), line(biryani)])

        assert draft.preparation_time == 40
        assert draft.estimated_delivery_time == NOW + timedelta(minutes=70)

    def test_delivery_address_is_normalised(self, catalog, spice_route, tikka):
        draft = price(
            catalog,
            spice_route,
            [line(tikka, 2)],
            delivery_address={"street": "12 MG Road", "city": "Pune", "pincode": 411001},
        )

        assert draft.delivery_address["pincode"] == "411001"
        assert draft.delivery_address["landmark"] == ""


class TestMinimumOrder:
    def test_below_minimum_reports_both_amounts(self, catalog, spice_route, tikka):
        spice_route.minimum_order = Decimal("500.00")

        with pytest.raises(BelowMinimumOrder) as exc:
            price(catalog, spice_route, [line(tikka, 2)])

        assert exc.value.kind == "precondition_failed"
        assert exc.value.context == {"minimum_order": "500.00", "current_total": "200.00"}

    def test_exactly_the_minimum_is_accepted(self, catalog, spice_route, tikka):
        spice_route.minimum_order = Decimal("200.00")

        draft = price(catalog, spice_route, [line(tikka, 2)])

        assert draft.items_total == Decimal("200.00")


class TestCatalogPreconditions:
    def test_unknown_restaurant(self, catalog, tikka):
        with pytest.raises(RestaurantNotFound):
            price_order(uuid.uuid4(), CUSTOMER_ID, [line(tikka)], catalog=catalog)

    def test_restaurant_not_accepting_orders(self, catalog, spice_route, tikka):
        spice_route.is_accepting_orders = False

        with pytest.raises(RestaurantClosed):
            price(catalog, spice_route, [line(tikka)])

    def test_inactive_restaurant_is_closed(self, catalog, spice_route, tikka):
        spice_route.is_active = False

        with pytest.raises(RestaurantClosed):
            price(catalog, spice_route, [line(tikka)])

    def test_closed_restaurant_reported_before_item_problems(self, catalog, spice_route, tikka):
        spice_route.is_accepting_orders = False
        tikka.is_available = False

        with pytest.raises(RestaurantClosed):
            price(catalog, spice_route, [line(tikka)])

    def test_unknown_menu_item(self, catalog, spice_route):
        with pytest.raises(MenuItemNotFound):
            price(catalog, spice_route, [{"menu_item_id": str(uuid.uuid4()), "quantity": 1}])

    def test_unavailable_item(self, catalog, spice_route, tikka):
        tikka.is_available = False

        with pytest.raises(ItemUnavailable):
            price(catalog, spice_route, [line(tikka)])

    def test_retired_item_is_unavailable_even_if_flagged_available(self, catalog, spice_route, tikka):
        tikka.is_active = False

        with pytest.raises(ItemUnavailable):
            price(catalog, spice_route, [line(tikka)])

    def test_item_from_another_restaurant(self, spice_route, tikka):
        dosa_corner = restaurant(name="Dosa Corner")
        dosa = menu_item(dosa_corner, "Masala Dosa", "120.00")
        catalog = StubCatalog([spice_route, dosa_corner], [tikka, dosa])

        with pytest.raises(ItemRestaurantMismatch):
            price(catalog, spice_route, [line(tikka, 2), line(dosa)])


class TestCartShape:
    def test_empty_cart(self, catalog, spice_route):
        with pytest.raises(InvalidInput):
            price(catalog, spice_route, [])

    @pytest.mark.parametrize("quantity", [0, -1, "2", 1.5, True, None])
    def test_quantity_must_be_a_positive_integer(self, catalog, spice_route, tikka, quantity):
        with pytest.raises(InvalidInput):
            price(catalog, spice_route, [line(tikka, quantity)])

    def test_missing_menu_item_id(self, catalog, spice_route):
        with pytest.raises(InvalidInput):
            price(catalog, spice_route, [{"quantity": 1}])
