"""
Pricing & validation of a cart against the live catalog.

``price_order`` either returns a complete ``PricedOrderDraft`` or raises the
first violated precondition; callers never see a partial draft. Names and
prices are copied into the draft here, which is the last time the catalog is
read for an order.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from apps.common.exceptions import (
    BelowMinimumOrder,
    InvalidInput,
    ItemRestaurantMismatch,
    ItemUnavailable,
    MenuItemNotFound,
    RestaurantClosed,
    RestaurantNotFound,
)
from apps.common.utils import quantize
from apps.restaurants.catalog import CatalogView

ADDRESS_FIELDS = ("street", "city", "state", "pincode", "landmark", "contact_phone")


@dataclass(frozen=True)
class LineItemDraft:
    menu_item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    preparation_time: int
    variant: str = ""
    add_ons: tuple = ()
    special_instructions: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PricedOrderDraft:
    restaurant_id: str
    customer_id: str
    items: tuple
    items_total: Decimal
    delivery_fee: Decimal
    taxes: Decimal
    total_amount: Decimal
    preparation_time: int
    estimated_delivery_time: datetime
    discount: Decimal = Decimal("0.00")
    delivery_address: dict = field(default_factory=dict)


def tax_rate() -> Decimal:
    return Decimal(str(getattr(settings, "ORDER_TAX_RATE", "0.05")))


def _check_cart(items):
    if not items:
        raise InvalidInput("Order must contain at least one item.", field="items")

    for index, entry in enumerate(items):
        if not isinstance(entry, dict) or not entry.get("menu_item_id"):
            raise InvalidInput(f"Item {index} is missing a menu item id.", field="items", index=index)

        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidInput(f"Item {index} must have a quantity of at least 1.", field="items", index=index)


def _unit_price(menu_item, entry) -> tuple:
    """Return ``(unit_price, variant_name, add_on_snapshots)`` for one cart line."""
    unit_price = menu_item.effective_price

    variant_name = entry.get("variant") or ""
    if variant_name:
        variant = menu_item.find_variant(variant_name)
        if variant is None:
            raise InvalidInput(
                f"{menu_item.name} has no variant '{variant_name}'.",
                field="variant",
                menu_item_id=str(menu_item.id),
            )
        unit_price = Decimal(str(variant["price"]))

    add_ons = []
    for add_on_name in entry.get("add_ons") or []:
        add_on = menu_item.find_add_on(add_on_name)
        if add_on is None:
            raise InvalidInput(
                f"{menu_item.name} has no add-on '{add_on_name}'.",
                field="add_ons",
                menu_item_id=str(menu_item.id),
            )
        price = Decimal(str(add_on["price"]))
        add_ons.append({"name": add_on["name"], "price": str(price)})
        unit_price += price

    return unit_price, variant_name, tuple(add_ons)


def price_order(restaurant_id, customer_id, items, delivery_address=None, catalog=None, now=None) -> PricedOrderDraft:
    catalog = catalog or CatalogView()

    _check_cart(items)

    restaurant = catalog.get_restaurant(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFound(restaurant_id=str(restaurant_id))

    if not restaurant.is_open:
        raise RestaurantClosed(
            f"{restaurant.name} is not accepting orders right now.",
            restaurant_id=str(restaurant.id),
        )

    lines = []
    for entry in items:
        menu_item_id = entry["menu_item_id"]
        menu_item = catalog.get_menu_item(menu_item_id)
        if menu_item is None:
            raise MenuItemNotFound(f"Menu item {menu_item_id} does not exist.", menu_item_id=str(menu_item_id))

        if not (menu_item.is_available and menu_item.is_active):
            raise ItemUnavailable(f"{menu_item.name} is currently unavailable.", menu_item_id=str(menu_item.id))

        if menu_item.restaurant_id != restaurant.id:
            raise ItemRestaurantMismatch(
                f"{menu_item.name} does not belong to {restaurant.name}.",
                menu_item_id=str(menu_item.id),
                restaurant_id=str(restaurant.id),
            )

        unit_price, variant, add_ons = _unit_price(menu_item, entry)
        lines.append(
            LineItemDraft(
                menu_item_id=str(menu_item.id),
                name=menu_item.name,
                unit_price=unit_price,
                quantity=entry["quantity"],
                preparation_time=menu_item.preparation_time,
                variant=variant,
                add_ons=add_ons,
                special_instructions=entry.get("special_instructions") or "",
            )
        )

    # Rounded once, at the total
    items_total = quantize(sum((line.line_total for line in lines), Decimal("0")))

    if items_total < restaurant.minimum_order:
        raise BelowMinimumOrder(
            f"Minimum order amount is {quantize(restaurant.minimum_order)}.",
            minimum_order=str(quantize(restaurant.minimum_order)),
            current_total=str(items_total),
        )

    delivery_fee = quantize(restaurant.delivery_fee)
    taxes = quantize(items_total * tax_rate())
    discount = Decimal("0.00")
    total_amount = items_total + delivery_fee + taxes - discount

    preparation_time = max(line.preparation_time for line in lines)
    now = now or timezone.now()
    estimated_delivery_time = now + timedelta(minutes=preparation_time + restaurant.estimated_delivery_time)

    address = {key: str((delivery_address or {}).get(key) or "") for key in ADDRESS_FIELDS}

    return PricedOrderDraft(
        restaurant_id=str(restaurant.id),
        customer_id=str(customer_id),
        items=tuple(lines),
        items_total=items_total,
        delivery_fee=delivery_fee,
        taxes=taxes,
        discount=discount,
        total_amount=total_amount,
        preparation_time=preparation_time,
        estimated_delivery_time=estimated_delivery_time,
        delivery_address=address,
    )
