import logging
from dataclasses import dataclass, field
from functools import partial

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone

from apps.common.constants import OrderStatus, PaymentMethod, PaymentOutcome, PaymentStatus
from apps.common.exceptions import (
    DuplicateOrderNumber,
    Forbidden,
    InvalidInput,
    OrderNotFound,
    RestaurantNotFound,
    Unexpected,
)
from apps.common.utils import is_admin, is_authenticated, is_customer, is_delivery_partner, is_restaurant_owner
from apps.notifications import events
from apps.notifications.dispatcher import dispatcher
from apps.orders.models import Order, OrderItem, OrderTracking
from apps.orders.pricing import PricedOrderDraft, price_order
from apps.orders.state_machine import allowed_next, check_transition, default_message, parse_status
from apps.restaurants.models import Restaurant

logger = logging.getLogger(__name__)

# Customers may call off an order until the kitchen starts on it
CUSTOMER_CANCELLABLE = (OrderStatus.PLACED, OrderStatus.CONFIRMED)


@dataclass
class BulkUpdateResult:
    updated_count: int
    new_status: str
    order_ids: list = field(default_factory=list)


def _emit(event):
    # Listeners only ever hear about committed state
    transaction.on_commit(partial(dispatcher.dispatch, event))


def _actor_or_none(actor):
    return actor if is_authenticated(actor) else None


def _get_locked_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().select_related("restaurant").get(id=order_id)
    except (Order.DoesNotExist, ValidationError) as err:
        raise OrderNotFound(order_id=str(order_id)) from err


def _append_tracking(order, status, message, actor, timestamp) -> OrderTracking:
    last = order.tracking.aggregate(last=Max("sequence"))["last"] or 0
    return OrderTracking.objects.create(
        order=order,
        sequence=last + 1,
        status=status,
        message=message,
        updated_by=_actor_or_none(actor),
        timestamp=timestamp,
    )


def generate_order_number(now=None) -> str:
    now = now or timezone.now()
    count = Order.objects.count()
    prefix = getattr(settings, "ORDER_NUMBER_PREFIX", "DE")
    return f"{prefix}{int(now.timestamp() * 1000)}{count:04d}"


# --- Order store -------------------------------------------------------------


@transaction.atomic
def create_order(
    draft: PricedOrderDraft,
    customer,
    payment_method=PaymentMethod.COD,
    special_instructions="",
) -> Order:
    """Persist a priced draft together with its line items and first tracking entry."""
    now = timezone.now()
    order_number = generate_order_number(now)
    address = draft.delivery_address

    try:
        with transaction.atomic():
            order = Order.objects.create(
                order_number=order_number,
                customer=customer,
                restaurant_id=draft.restaurant_id,
                items_total=draft.items_total,
                delivery_fee=draft.delivery_fee,
                taxes=draft.taxes,
                discount=draft.discount,
                total_amount=draft.total_amount,
                delivery_street=address.get("street", ""),
                delivery_city=address.get("city", ""),
                delivery_state=address.get("state", ""),
                delivery_pincode=address.get("pincode", ""),
                delivery_landmark=address.get("landmark", ""),
                contact_phone=address.get("contact_phone") or customer.phone,
                payment_method=payment_method,
                estimated_delivery_time=draft.estimated_delivery_time,
                preparation_time=draft.preparation_time,
                special_instructions=special_instructions or "",
            )
    except IntegrityError as err:
        if Order.objects.filter(order_number=order_number).exists():
            raise DuplicateOrderNumber(order_number=order_number) from err
        raise Unexpected("Order could not be stored.") from err

    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                menu_item_id=line.menu_item_id,
                position=position,
                name=line.name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                variant=line.variant,
                add_ons=list(line.add_ons),
                special_instructions=line.special_instructions,
            )
            for position, line in enumerate(draft.items)
        ]
    )
    _append_tracking(order, OrderStatus.PLACED, default_message(OrderStatus.PLACED), customer, now)
    return order


def place_order(
    customer,
    restaurant_id,
    items,
    delivery_address=None,
    payment_method=PaymentMethod.COD,
    special_instructions="",
    catalog=None,
) -> Order:
    """Validate, price and persist an order in one transaction, then announce it."""
    with transaction.atomic():
        draft = price_order(restaurant_id, customer.id, items, delivery_address, catalog=catalog)
        order = create_order(draft, customer, payment_method, special_instructions)
        _emit(events.order_placed(order))

    logger.info(
        "Order %s placed by %s at restaurant %s for %s",
        order.order_number,
        customer.pk,
        order.restaurant_id,
        order.total_amount,
    )
    return order


def orders_visible_to(user):
    qs = Order.objects.select_related("restaurant", "customer").prefetch_related("items")
    if is_admin(user):
        return qs
    if is_restaurant_owner(user):
        return qs.filter(restaurant__owner=user)
    if is_delivery_partner(user):
        return qs.filter(delivery_partner=user)
    return qs.filter(customer=user)


def get_order_for(user, order_id) -> Order:
    try:
        order = (
            Order.objects.select_related("restaurant", "customer")
            .prefetch_related("items", "tracking")
            .get(id=order_id)
        )
    except (Order.DoesNotExist, ValidationError) as err:
        raise OrderNotFound(order_id=str(order_id)) from err

    if not (is_admin(user) or order.customer_id == user.id):
        raise Forbidden("Not authorized to view this order.")
    return order


# --- State machine -------------------------------------------------------------


def _status_changes(order, target, message, now) -> dict:
    """Field updates that come with moving ``order`` to ``target``."""
    changes = {"status": target}
    if target == OrderStatus.DELIVERED:
        changes["actual_delivery_time"] = now
    elif target == OrderStatus.CANCELLED:
        changes["cancellation_reason"] = message
    elif target == OrderStatus.REFUNDED and order.payment_status == PaymentStatus.PAID:
        changes["payment_status"] = PaymentStatus.REFUNDED
    return changes


def apply_transition(order, new_status, actor, message=None, strict=None) -> Order:
    """
    Move a locked order to ``new_status`` and append the matching tracking entry.

    Must run inside the transaction that locked ``order``.
    """
    target = check_transition(order.status, new_status, strict=strict)
    now = timezone.now()
    message = message or default_message(target)

    changes = _status_changes(order, target, message, now)
    for name, value in changes.items():
        setattr(order, name, value)
    order.save(update_fields=[*changes, "updated_at"])
    _append_tracking(order, target, message, actor, now)
    _emit(events.status_changed(order, message, now))
    return order


def _authorize_status_change(actor, order, new_status):
    if is_admin(actor):
        return
    if is_restaurant_owner(actor) and order.restaurant.owner_id == actor.id:
        return
    if is_delivery_partner(actor) and order.delivery_partner_id == actor.id:
        return
    if is_customer(actor) and order.customer_id == actor.id:
        if new_status == OrderStatus.CANCELLED and order.status in CUSTOMER_CANCELLABLE:
            return
        raise Forbidden("Customers can only cancel orders that are not being prepared yet.")
    raise Forbidden("You are not allowed to update this order.")


@transaction.atomic
def update_status(actor, order_id, new_status, message=None) -> Order:
    order = _get_locked_order(order_id)
    _authorize_status_change(actor, order, new_status)

    previous = order.status
    apply_transition(order, new_status, actor, message)

    logger.info("Order %s moved %s -> %s by %s", order.order_number, previous, order.status, actor.pk)
    return order


def _restaurant_for(actor, restaurant_id=None) -> Restaurant:
    if restaurant_id and is_admin(actor):
        try:
            return Restaurant.objects.get(pk=restaurant_id)
        except (Restaurant.DoesNotExist, ValidationError) as err:
            raise RestaurantNotFound(restaurant_id=str(restaurant_id)) from err

    restaurant = Restaurant.objects.filter(owner=actor).first()
    if restaurant is None:
        if is_admin(actor):
            raise InvalidInput("restaurant_id is required for administrators.", field="restaurant_id")
        raise RestaurantNotFound("You do not have a restaurant registered.")
    return restaurant


@transaction.atomic
def bulk_update_status(actor, order_ids, new_status, message=None, restaurant_id=None) -> BulkUpdateResult:
    """
    Move every listed order of the caller's restaurant to ``new_status``.

    Orders of other restaurants, already finalized orders and (in strict mode)
    orders for which the move is not the next step are left out of the update
    and of the count, not reported as errors.
    """
    if not order_ids:
        raise InvalidInput("Provide at least one order id.", field="order_ids")

    target = parse_status(new_status)
    restaurant = _restaurant_for(actor, restaurant_id)

    candidates = (
        Order.objects.select_for_update()
        .filter(id__in=order_ids, restaurant=restaurant)
        .exclude(status__in=OrderStatus.terminal())
        .order_by("created_at")
    )
    eligible = [order for order in candidates if target in allowed_next(order.status)]
    if not eligible:
        return BulkUpdateResult(updated_count=0, new_status=target)

    now = timezone.now()
    message = message or f"Bulk updated to {target}"
    ids = [order.id for order in eligible]

    update_fields = {"status", "updated_at"}
    for order in eligible:
        changes = _status_changes(order, target, message, now)
        for name, value in changes.items():
            setattr(order, name, value)
        # auto_now is not applied by bulk_update
        order.updated_at = now
        update_fields.update(changes)
    updated = Order.objects.bulk_update(eligible, sorted(update_fields))

    last_sequences = dict(
        OrderTracking.objects.filter(order_id__in=ids)
        .order_by()
        .values_list("order_id")
        .annotate(last=Max("sequence"))
    )
    OrderTracking.objects.bulk_create(
        [
            OrderTracking(
                order=order,
                sequence=last_sequences.get(order.id, 0) + 1,
                status=target,
                message=message,
                updated_by=_actor_or_none(actor),
                timestamp=now,
            )
            for order in eligible
        ]
    )

    for order in eligible:
        _emit(events.status_changed(order, message, now))

    logger.info(
        "Bulk update by %s on restaurant %s: %d of %d order(s) -> %s",
        actor.pk,
        restaurant.pk,
        updated,
        len(order_ids),
        target,
    )
    return BulkUpdateResult(updated_count=updated, new_status=target, order_ids=[str(i) for i in ids])


# --- Payment results -----------------------------------------------------------


@transaction.atomic
def apply_payment_result(actor, order_id, outcome, payment_id="", reason="") -> Order:
    order = _get_locked_order(order_id)

    if not (is_admin(actor) or order.customer_id == actor.id):
        raise Forbidden("Not authorized to pay for this order.")

    now = timezone.now()

    if outcome == PaymentOutcome.PAID:
        order.payment_status = PaymentStatus.PAID
        if payment_id:
            order.payment_id = payment_id
        order.save(update_fields=["payment_status", "payment_id", "updated_at"])

        message = "Payment successful - Order confirmed"
        if order.status == OrderStatus.PLACED:
            apply_transition(order, OrderStatus.CONFIRMED, actor, message, strict=False)
        else:
            message = "Payment successful"
            _append_tracking(order, order.status, message, actor, now)

    elif outcome == PaymentOutcome.FAILED:
        order.payment_status = PaymentStatus.FAILED
        if payment_id:
            order.payment_id = payment_id
        order.save(update_fields=["payment_status", "payment_id", "updated_at"])

        message = f"Payment failed: {reason or 'Unknown error'}"
        # Status is unchanged, so the entry repeats the current one
        _append_tracking(order, order.status, message, actor, now)

    else:
        raise InvalidInput(f"Unknown payment outcome '{outcome}'.", field="outcome")

    _emit(events.payment_result(order, message, now))
    logger.info("Payment %s recorded for order %s (%s)", outcome, order.order_number, order.payment_id or "-")
    return order
