from rest_framework import serializers

from apps.common.constants import PaymentOutcome
from apps.common.exceptions import OrderNotFound
from apps.orders.models import Order
from apps.orders.serializers import OrderDetailSerializer
from apps.orders.services import apply_payment_result


class PaymentResultSerializer(serializers.Serializer):
    order_id = serializers.UUIDField(write_only=True, required=False)
    order_number = serializers.CharField(write_only=True, required=False, max_length=32)
    outcome = serializers.ChoiceField(choices=PaymentOutcome.choices, write_only=True)
    payment_id = serializers.CharField(write_only=True, required=False, allow_blank=True, max_length=255)
    reason = serializers.CharField(write_only=True, required=False, allow_blank=True, max_length=200)

    def validate(self, attrs):
        order_id = attrs.get("order_id")
        order_number = attrs.get("order_number")

        # Exactly one way to point at the order
        if bool(order_id) == bool(order_number):
            raise serializers.ValidationError("Provide either 'order_id' or 'order_number' (not both).")

        if order_number:
            order_id = Order.objects.filter(order_number=order_number).values_list("id", flat=True).first()
            if order_id is None:
                raise OrderNotFound(order_number=order_number)

        attrs["order_id"] = order_id
        return attrs

    def create(self, validated_data):
        return apply_payment_result(
            self.context["request"].user,
            validated_data["order_id"],
            validated_data["outcome"],
            payment_id=validated_data.get("payment_id", ""),
            reason=validated_data.get("reason", ""),
        )

    def to_representation(self, instance):
        return OrderDetailSerializer(instance, context=self.context).data
