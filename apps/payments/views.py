from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import generics, status
from rest_framework.response import Response

from apps.orders.serializers import OrderDetailSerializer
from apps.payments.serializers import PaymentResultSerializer


@extend_schema(
    summary="Customer: Report the payment gateway result for an order.",
    description=(
        "Identify the order by either order_id (UUID) or order_number. A successful payment of a freshly "
        "placed order confirms it; a failed payment only records the failure."
    ),
    operation_id="payment_result",
    request=PaymentResultSerializer,
    responses={200: OrderDetailSerializer},
    examples=[
        OpenApiExample(
            "Paid",
            value={"order_number": "DE17291234567890042", "outcome": "paid", "payment_id": "pay_29QQoUBi66xm2f"},
            request_only=True,
        ),
        OpenApiExample(
            "Failed",
            value={"order_number": "DE17291234567890042", "outcome": "failed", "reason": "Card declined"},
            request_only=True,
        ),
    ],
    tags=["payments"],
)
class PaymentResultView(generics.CreateAPIView):
    serializer_class = PaymentResultSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)
