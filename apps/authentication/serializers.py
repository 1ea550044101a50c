from django.contrib.auth import get_user_model, password_validation
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.authentication.utils import generate_tokens_for_user, get_custom_token
from apps.common.constants import UserRole
from apps.users.serializers import phone_validator

User = get_user_model()

SELF_SERVICE_ROLES = [UserRole.CUSTOMER, UserRole.RESTAURANT, UserRole.DELIVERY]


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        return get_custom_token(user)


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    password2 = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=SELF_SERVICE_ROLES, default=UserRole.CUSTOMER)

    class Meta:
        model = User
        fields = ("id", "email", "name", "phone", "role", "password", "password2")
        read_only_fields = ("id",)
        extra_kwargs = {"phone": {"validators": [phone_validator]}}

    def validate_password(self, value):
        password_validation.validate_password(value, self.instance)
        return value

    def validate(self, data):
        if data["password"] != data["password2"]:
            raise serializers.ValidationError("Passwords do not match.")
        return data

    def create(self, validated_data):
        validated_data.pop("password2")
        return User.objects.create_user(**validated_data)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data.update(generate_tokens_for_user(instance))
        return data
