from dataclasses import asdict, dataclass, field

from django.utils import timezone

from apps.common.constants import NotificationEvent


@dataclass(frozen=True)
class OrderEvent:
    type: str
    order_id: str
    order_number: str
    customer_id: str
    restaurant_id: str
    status: str
    payment_status: str
    message: str = ""
    timestamp: str = field(default_factory=lambda: timezone.now().isoformat())

    @classmethod
    def from_order(cls, event_type, order, message="", timestamp=None):
        return cls(
            type=str(event_type),
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            restaurant_id=str(order.restaurant_id),
            status=str(order.status),
            payment_status=str(order.payment_status),
            message=message,
            timestamp=(timestamp or timezone.now()).isoformat(),
        )

    def to_payload(self) -> dict:
        return asdict(self)


def order_placed(order):
    return OrderEvent.from_order(NotificationEvent.ORDER_PLACED, order, message="New order received")


def status_changed(order, message, timestamp=None):
    return OrderEvent.from_order(NotificationEvent.ORDER_STATUS_CHANGED, order, message=message, timestamp=timestamp)


def payment_result(order, message, timestamp=None):
    return OrderEvent.from_order(NotificationEvent.ORDER_PAYMENT_RESULT, order, message=message, timestamp=timestamp)
