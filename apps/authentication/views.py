from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework.generics import CreateAPIView
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.authentication.serializers import CustomTokenObtainPairSerializer, RegisterSerializer

User = get_user_model()


@extend_schema(summary="Register a customer, restaurant or delivery account", tags=["auth"])
class RegisterView(CreateAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    queryset = User.objects.all()
    serializer_class = RegisterSerializer


@extend_schema(summary="Obtain an access/refresh token pair", tags=["auth"])
class LoginView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


@extend_schema(summary="Refresh an access token", tags=["auth"])
class RefreshView(TokenRefreshView):
    pass
