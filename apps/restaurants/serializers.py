from decimal import Decimal

from rest_framework import serializers

from apps.restaurants.models import MenuItem, Restaurant
from apps.restaurants.reports import ANALYTICS_PERIODS, DEFAULT_ANALYTICS_PERIOD


class PricedOptionSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.00"))
    description = serializers.CharField(required=False, allow_blank=True, max_length=200)


class RestaurantSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)
    is_open = serializers.BooleanField(read_only=True)

    class Meta:
        model = Restaurant
        fields = [
            "id",
            "owner_id",
            "name",
            "description",
            "cuisine_types",
            "street",
            "city",
            "state",
            "pincode",
            "landmark",
            "is_accepting_orders",
            "is_open",
            "delivery_radius",
            "minimum_order",
            "delivery_fee",
            "estimated_delivery_time",
            "created_at",
        ]
        read_only_fields = ["id", "owner_id", "is_open", "created_at"]
        extra_kwargs = {
            # Defaults used when a new restaurant omits them
            "minimum_order": {"default": Decimal("100.00")},
            "delivery_fee": {"default": Decimal("30.00")},
            "estimated_delivery_time": {"default": 30},
        }

    def validate_cuisine_types(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
            raise serializers.ValidationError("Cuisine types must be a list of names.")
        return [v.strip() for v in value]


class RestaurantSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = Restaurant
        fields = ["is_accepting_orders", "delivery_fee", "minimum_order", "estimated_delivery_time"]


class MenuItemSerializer(serializers.ModelSerializer):
    restaurant_id = serializers.UUIDField(read_only=True)
    variants = serializers.ListField(child=PricedOptionSerializer(), required=False)
    add_ons = serializers.ListField(child=PricedOptionSerializer(), required=False)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "restaurant_id",
            "name",
            "description",
            "category",
            "price",
            "discounted_price",
            "is_veg",
            "spice_level",
            "is_available",
            "preparation_time",
            "variants",
            "add_ons",
        ]
        read_only_fields = ["id", "restaurant_id"]

    def validate(self, attrs):
        price = attrs.get("price", getattr(self.instance, "price", None))
        discounted = attrs.get("discounted_price", getattr(self.instance, "discounted_price", None))
        if discounted is not None and price is not None and discounted >= price:
            raise serializers.ValidationError({"discounted_price": "Discounted price must be less than original price."})

        for name in ("variants", "add_ons"):
            if name in attrs:
                # Stored as JSON, so prices are kept as exact decimal strings
                attrs[name] = [{**option, "price": str(option["price"])} for option in attrs[name]]
                names = [option["name"] for option in attrs[name]]
                if len(names) != len(set(names)):
                    raise serializers.ValidationError({name: "Option names must be unique."})
        return attrs


class MenuQuerySerializer(serializers.Serializer):
    SORT_CHOICES = ("price-low", "price-high", "popular", "name")

    category = serializers.CharField(required=False)
    is_veg = serializers.BooleanField(required=False, allow_null=True, default=None)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    sort_by = serializers.ChoiceField(choices=SORT_CHOICES, required=False)


class AnalyticsQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=list(ANALYTICS_PERIODS), default=DEFAULT_ANALYTICS_PERIOD)
