"""
Order status rules.

The default mode is permissive: any non-terminal order may move to any known
status. With ``ORDER_STRICT_TRANSITIONS`` enabled the forward delivery path
must be followed one step at a time; cancellation and refund stay reachable
from every non-terminal status.
"""

from django.conf import settings

from apps.common.constants import OrderStatus
from apps.common.exceptions import InvalidStatus, InvalidTransition, OrderFinalized

FORWARD_PATH = [
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

ALWAYS_REACHABLE = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}

DEFAULT_MESSAGES = {
    OrderStatus.PLACED: "Order placed successfully",
    OrderStatus.CONFIRMED: "Order confirmed by restaurant",
    OrderStatus.PREPARING: "Your food is being prepared",
    OrderStatus.READY: "Order is ready for pickup",
    OrderStatus.PICKED_UP: "Order picked up by delivery partner",
    OrderStatus.OUT_FOR_DELIVERY: "Order is out for delivery",
    OrderStatus.DELIVERED: "Order delivered",
    OrderStatus.CANCELLED: "Order cancelled",
    OrderStatus.REFUNDED: "Order refunded",
}


def strict_mode() -> bool:
    return getattr(settings, "ORDER_STRICT_TRANSITIONS", False)


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as err:
        raise InvalidStatus(
            f"'{value}' is not a valid order status.",
            allowed=list(OrderStatus.values),
        ) from err


def is_terminal(status) -> bool:
    return status in OrderStatus.terminal()


def allowed_next(current, strict=None) -> set:
    """Statuses reachable from ``current`` under the active mode."""
    if is_terminal(current):
        return set()
    if strict is None:
        strict = strict_mode()
    if not strict:
        # placed is only ever entered at creation
        return set(OrderStatus) - {OrderStatus.PLACED}

    index = FORWARD_PATH.index(OrderStatus(current))
    return {FORWARD_PATH[index + 1], *ALWAYS_REACHABLE}


def check_transition(current, new_status, strict=None) -> OrderStatus:
    """Validate ``current -> new_status`` and return the parsed target status."""
    if is_terminal(current):
        raise OrderFinalized(
            f"Order is already {current} and cannot be updated.",
            current_status=str(current),
        )

    target = parse_status(new_status)

    if target not in allowed_next(current, strict=strict):
        raise InvalidTransition(
            f"Cannot move order from {current} to {target}.",
            current_status=str(current),
            requested_status=str(target),
        )
    return target


def default_message(status) -> str:
    return DEFAULT_MESSAGES.get(status, f"Order status updated to {status}")
