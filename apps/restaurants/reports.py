"""Read-only aggregates for a restaurant's own order book."""

from datetime import timedelta
from decimal import Decimal

from django.db.models import Avg, Count, DecimalField, F, Sum
from django.db.models.functions import ExtractHour, TruncDate
from django.utils import timezone

from apps.common.constants import OrderStatus, PaymentStatus
from apps.common.utils import quantize
from apps.orders.models import Order, OrderItem

TOP_ITEMS_LIMIT = 5
RECENT_ORDERS_LIMIT = 10
LIVE_ORDERS_LIMIT = 20
POPULAR_ITEMS_LIMIT = 10

ANALYTICS_PERIODS = {"7days": 7, "30days": 30, "90days": 90}
DEFAULT_ANALYTICS_PERIOD = "7days"


def dashboard(restaurant) -> dict:
    orders = Order.objects.filter(restaurant=restaurant)
    start_of_day = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)

    paid = orders.filter(payment_status=PaymentStatus.PAID).aggregate(
        revenue=Sum("total_amount"),
        average=Avg("total_amount"),
    )

    top_items = (
        OrderItem.objects.filter(order__restaurant=restaurant)
        .values("menu_item_id", "name")
        .annotate(orders=Count("order", distinct=True), quantity=Sum("quantity"))
        .order_by("-quantity", "name")[:TOP_ITEMS_LIMIT]
    )

    recent = orders.select_related("customer").order_by("-created_at")[:RECENT_ORDERS_LIMIT]

    return {
        "restaurant": {
            "id": str(restaurant.id),
            "name": restaurant.name,
            "is_accepting_orders": restaurant.is_accepting_orders,
        },
        "stats": {
            "total_orders": orders.count(),
            "today_orders": orders.filter(created_at__gte=start_of_day).count(),
            "pending_orders": orders.filter(status__in=OrderStatus.pending()).count(),
            "total_revenue": str(quantize(paid["revenue"] or Decimal("0"))),
            "average_order_value": str(quantize(paid["average"] or Decimal("0"))),
        },
        "top_items": [
            {
                "menu_item_id": str(row["menu_item_id"]),
                "name": row["name"],
                "orders": row["orders"],
                "quantity": row["quantity"],
            }
            for row in top_items
        ],
        "recent_orders": [
            {
                "id": str(order.id),
                "order_number": order.order_number,
                "customer": order.customer.name,
                "status": order.status,
                "total_amount": str(order.total_amount),
                "created_at": order.created_at.isoformat(),
            }
            for order in recent
        ],
    }


def live_orders(restaurant):
    """Orders the kitchen still has to act on, oldest first, grouped by status."""
    orders = (
        Order.objects.filter(restaurant=restaurant, status__in=OrderStatus.live())
        .select_related("customer")
        .prefetch_related("items")
        .order_by("created_at")[:LIVE_ORDERS_LIMIT]
    )
    orders = list(orders)

    grouped = {str(status): [] for status in OrderStatus.live()}
    for order in orders:
        grouped[order.status].append(order)
    return orders, grouped


def analytics(restaurant, period=DEFAULT_ANALYTICS_PERIOD) -> dict:
    """
    Revenue and demand over the last 7, 30 or 90 days.

    Daily revenue counts paid orders only; popular items and peak hours look at
    every order placed in the window, whatever its payment state.
    """
    end = timezone.now()
    start = end - timedelta(days=ANALYTICS_PERIODS[period])
    orders = Order.objects.filter(restaurant=restaurant, created_at__gte=start, created_at__lte=end)

    daily = list(
        orders.filter(payment_status=PaymentStatus.PAID)
        .annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(revenue=Sum("total_amount"), orders=Count("id"), average=Avg("total_amount"))
        .order_by("day")
    )

    popular = (
        OrderItem.objects.filter(order__in=orders)
        .values("name")
        .annotate(
            quantity=Sum("quantity"),
            revenue=Sum(F("unit_price") * F("quantity"), output_field=DecimalField(max_digits=12, decimal_places=2)),
        )
        .order_by("-quantity", "name")[:POPULAR_ITEMS_LIMIT]
    )

    peak_hours = (
        orders.annotate(hour=ExtractHour("created_at"))
        .values("hour")
        .annotate(orders=Count("id"), revenue=Sum("total_amount"))
        .order_by("hour")
    )

    total_revenue = sum((row["revenue"] for row in daily), Decimal("0"))
    total_orders = sum(row["orders"] for row in daily)
    days_with_sales = len(daily) or 1

    return {
        "period": period,
        "date_range": {
            "from": timezone.localdate(start).isoformat(),
            "to": timezone.localdate(end).isoformat(),
        },
        "daily_revenue": [
            {
                "date": row["day"].isoformat(),
                "revenue": str(quantize(row["revenue"])),
                "orders": row["orders"],
                "average_order_value": str(quantize(row["average"])),
            }
            for row in daily
        ],
        "popular_items": [
            {
                "name": row["name"],
                "total_ordered": row["quantity"],
                "revenue": str(quantize(row["revenue"])),
            }
            for row in popular
        ],
        "peak_hours": [
            {
                "hour": row["hour"],
                "orders": row["orders"],
                "revenue": str(quantize(row["revenue"])),
            }
            for row in peak_hours
        ],
        "summary": {
            "total_revenue": str(quantize(total_revenue)),
            "total_orders": total_orders,
            "average_daily_revenue": str(quantize(total_revenue / days_with_sales)),
            # Mean of the daily averages, so each selling day weighs the same
            "average_order_value": str(
                quantize(sum((row["average"] for row in daily), Decimal("0")) / days_with_sales)
            ),
        },
    }
