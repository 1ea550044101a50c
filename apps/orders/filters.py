import django_filters

from apps.common.constants import OrderStatus, PaymentStatus
from apps.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    placed_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    placed_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lt")

    class Meta:
        model = Order
        fields = ["status", "payment_status", "placed_after", "placed_before"]
