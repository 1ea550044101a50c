from rest_framework import serializers

from apps.common.constants import OrderStatus, PaymentMethod
from apps.orders.models import Order, OrderItem, OrderTracking
from apps.orders.services import place_order


class CartItemSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    variant = serializers.CharField(required=False, allow_blank=True, max_length=100)
    add_ons = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    special_instructions = serializers.CharField(required=False, allow_blank=True, max_length=200)


class DeliveryAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    pincode = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "Pincode must be 6 digits."})
    landmark = serializers.CharField(required=False, allow_blank=True, max_length=255)
    contact_phone = serializers.CharField(required=False, allow_blank=True, max_length=20)


class OrderCreateSerializer(serializers.Serializer):
    restaurant_id = serializers.UUIDField()
    items = CartItemSerializer(many=True, allow_empty=False)
    delivery_address = DeliveryAddressSerializer(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.COD)
    special_instructions = serializers.CharField(required=False, allow_blank=True, max_length=500)

    def create(self, validated_data):
        items = [{**item, "menu_item_id": str(item["menu_item_id"])} for item in validated_data["items"]]
        return place_order(
            customer=self.context["request"].user,
            restaurant_id=str(validated_data["restaurant_id"]),
            items=items,
            delivery_address=validated_data.get("delivery_address"),
            payment_method=validated_data["payment_method"],
            special_instructions=validated_data.get("special_instructions", ""),
        )

    def to_representation(self, instance):
        return OrderDetailSerializer(instance, context=self.context).data


class OrderItemSerializer(serializers.ModelSerializer):
    menu_item_id = serializers.UUIDField(read_only=True)
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "menu_item_id",
            "name",
            "unit_price",
            "quantity",
            "variant",
            "add_ons",
            "special_instructions",
            "line_total",
        ]
        read_only_fields = fields


class OrderTrackingSerializer(serializers.ModelSerializer):
    updated_by = serializers.UUIDField(source="updated_by_id", read_only=True)

    class Meta:
        model = OrderTracking
        fields = ["sequence", "status", "message", "updated_by", "timestamp"]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    restaurant = serializers.CharField(source="restaurant.name", read_only=True)
    restaurant_id = serializers.UUIDField(read_only=True)
    customer_id = serializers.UUIDField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "restaurant_id",
            "restaurant",
            "customer_id",
            "items",
            "status",
            "payment_status",
            "payment_method",
            "total_amount",
            "estimated_delivery_time",
            "created_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderListSerializer):
    delivery_address = serializers.DictField(read_only=True)
    tracking = OrderTrackingSerializer(many=True, read_only=True)
    summary = serializers.SerializerMethodField()

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + [
            "summary",
            "delivery_address",
            "delivery_partner",
            "payment_id",
            "preparation_time",
            "actual_delivery_time",
            "special_instructions",
            "cancellation_reason",
            "tracking",
            "updated_at",
        ]
        read_only_fields = fields

    def get_summary(self, obj):
        return {
            "items_total": str(obj.items_total),
            "delivery_fee": str(obj.delivery_fee),
            "taxes": str(obj.taxes),
            "discount": str(obj.discount),
            "total_amount": str(obj.total_amount),
        }


class OrderStatusUpdateSerializer(serializers.Serializer):
    # Left as a plain string so unknown values reach the state machine's own error
    status = serializers.CharField(max_length=32)
    message = serializers.CharField(required=False, allow_blank=True, max_length=255)


class BulkStatusUpdateSerializer(serializers.Serializer):
    order_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    status = serializers.CharField(max_length=32)
    message = serializers.CharField(required=False, allow_blank=True, max_length=255)
    restaurant_id = serializers.UUIDField(required=False)


class BulkStatusResultSerializer(serializers.Serializer):
    updated_count = serializers.IntegerField()
    new_status = serializers.ChoiceField(choices=OrderStatus.choices)
    order_ids = serializers.ListField(child=serializers.CharField())
