from django.contrib import admin
from django.db import DatabaseError, connection
from django.urls import include, path
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView


@extend_schema(summary="Service and database health.", tags=["health"])
class HealthView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            return Response({"status": "error", "database": "unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "ok", "database": "ok"})


swagger_urls = [
    path("schema/swagger-ui/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("schema/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]

api_urls = [
    path("auth/", include("apps.authentication.urls", namespace="authentication")),
    path("users/", include("apps.users.urls", namespace="users")),
    path("restaurants/", include("apps.restaurants.urls", namespace="restaurants")),
    path("menu/", include("apps.restaurants.menu_urls", namespace="menu")),
    path("orders/", include("apps.orders.urls", namespace="orders")),
    path("payments/", include("apps.payments.urls", namespace="payments")),
    path("realtime/", include("apps.notifications.urls", namespace="realtime")),
    path("health", HealthView.as_view(), name="health"),
    path("", include(swagger_urls)),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include(api_urls)),
]
