from django.contrib.auth import get_user_model
from django.core.validators import RegexValidator
from rest_framework import serializers

User = get_user_model()

phone_validator = RegexValidator(r"^[6-9]\d{9}$", "Enter a valid 10-digit mobile number.")


class UserSerializer(serializers.ModelSerializer):
    restaurant_id = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "name", "phone", "role", "restaurant_id", "created_at"]
        read_only_fields = fields

    def get_restaurant_id(self, obj):
        restaurant = getattr(obj, "restaurant", None)
        return str(restaurant.id) if restaurant else None


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own account; email and role stay fixed."""

    class Meta:
        model = User
        fields = ["name", "phone"]
        extra_kwargs = {
            "name": {"min_length": 2},
            "phone": {"validators": [phone_validator]},
        }
