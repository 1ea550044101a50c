from django.db.models import Count, F
from django.db.models.functions import Coalesce
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.constants import MenuCategory, UserRole
from apps.common.exceptions import RestaurantNotFound
from apps.common.mixins import RoleMixin
from apps.orders.serializers import OrderListSerializer
from apps.restaurants import reports
from apps.restaurants.models import MenuItem, Restaurant
from apps.restaurants.serializers import (
    AnalyticsQuerySerializer,
    MenuItemSerializer,
    MenuQuerySerializer,
    RestaurantSerializer,
    RestaurantSettingsSerializer,
)
from apps.restaurants.services import (
    create_restaurant,
    editable_menu_item,
    restaurant_for_menu,
    restaurant_of,
    retire_menu_item,
    update_settings,
)


@extend_schema(
    summary="Restaurant: Register my restaurant.",
    request=RestaurantSerializer,
    responses={201: RestaurantSerializer},
    tags=["restaurants"],
)
class RestaurantCreateView(RoleMixin, generics.CreateAPIView):
    serializer_class = RestaurantSerializer
    allowed_roles = (UserRole.RESTAURANT,)

    def perform_create(self, serializer):
        serializer.instance = create_restaurant(self.request.user, **serializer.validated_data)


@extend_schema(
    summary="Restaurant: Update order-taking settings.",
    request=RestaurantSettingsSerializer,
    responses={200: RestaurantSerializer},
    tags=["restaurants"],
)
class RestaurantSettingsView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def patch(self, request):
        restaurant = restaurant_of(request.user)
        serializer = RestaurantSettingsSerializer(restaurant, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        restaurant = update_settings(restaurant, **serializer.validated_data)
        return Response(RestaurantSerializer(restaurant).data)


@extend_schema(summary="Restaurant: Dashboard figures.", tags=["restaurants"])
class RestaurantDashboardView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def get(self, request):
        return Response(reports.dashboard(restaurant_of(request.user)))


@extend_schema(
    summary="Restaurant: Revenue, popular items and peak hours over a period.",
    parameters=[OpenApiParameter(name="period", type=str, enum=list(reports.ANALYTICS_PERIODS))],
    tags=["restaurants"],
)
class RestaurantAnalyticsView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def get(self, request):
        query = AnalyticsQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        return Response(reports.analytics(restaurant_of(request.user), query.validated_data["period"]))


@extend_schema(summary="Restaurant: Orders waiting on the kitchen.", tags=["restaurants"])
class RestaurantLiveOrdersView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def get(self, request):
        orders, grouped = reports.live_orders(restaurant_of(request.user))
        return Response(
            {
                "count": len(orders),
                "orders": {
                    status_name: OrderListSerializer(group, many=True).data for status_name, group in grouped.items()
                },
            }
        )


@extend_schema(
    summary="Public: Available menu of a restaurant, grouped by category.",
    parameters=[
        OpenApiParameter(name="category", type=str, enum=MenuCategory.values),
        OpenApiParameter(name="is_veg", type=bool),
        OpenApiParameter(name="min_price", type=float),
        OpenApiParameter(name="max_price", type=float),
        OpenApiParameter(name="sort_by", type=str, enum=MenuQuerySerializer.SORT_CHOICES),
    ],
    tags=["restaurants"],
)
class RestaurantMenuView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    ORDERING = {
        "price-low": ("sort_price", "name"),
        "price-high": ("-sort_price", "name"),
        "popular": ("-times_ordered", "name"),
        "name": ("name",),
    }

    def get(self, request, restaurant_id):
        restaurant = Restaurant.objects.filter(pk=restaurant_id, is_active=True).first()
        if restaurant is None:
            raise RestaurantNotFound(restaurant_id=str(restaurant_id))

        query = MenuQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        params = query.validated_data

        items = MenuItem.objects.filter(restaurant=restaurant, is_available=True, is_active=True).annotate(
            sort_price=Coalesce("discounted_price", F("price")),
            times_ordered=Count("order_items"),
        )
        if params.get("category"):
            items = items.filter(category=params["category"])
        if params.get("is_veg") is not None:
            items = items.filter(is_veg=params["is_veg"])
        if params.get("min_price") is not None:
            items = items.filter(sort_price__gte=params["min_price"])
        if params.get("max_price") is not None:
            items = items.filter(sort_price__lte=params["max_price"])
        items = items.order_by(*self.ORDERING.get(params.get("sort_by"), ("category", "name")))

        menu = {}
        for item in items:
            menu.setdefault(item.category, []).append(MenuItemSerializer(item).data)

        return Response(
            {
                "restaurant": {
                    "id": str(restaurant.id),
                    "name": restaurant.name,
                    "is_open": restaurant.is_open,
                    "minimum_order": str(restaurant.minimum_order),
                    "delivery_fee": str(restaurant.delivery_fee),
                    "estimated_delivery_time": restaurant.estimated_delivery_time,
                },
                "menu": menu,
                "total_items": sum(len(group) for group in menu.values()),
            }
        )


@extend_schema(
    summary="Restaurant: Add a menu item.",
    parameters=[
        OpenApiParameter(name="restaurant_id", type=str, description="Administrators only: target restaurant"),
    ],
    request=MenuItemSerializer,
    responses={201: MenuItemSerializer},
    tags=["menu"],
)
class MenuItemCreateView(RoleMixin, generics.CreateAPIView):
    serializer_class = MenuItemSerializer
    allowed_roles = (UserRole.RESTAURANT,)

    def perform_create(self, serializer):
        restaurant = restaurant_for_menu(self.request.user, self.request.query_params.get("restaurant_id"))
        serializer.save(restaurant=restaurant)


@extend_schema(
    summary="Restaurant: Edit or retire a menu item.",
    description="DELETE hides the item from the menu and from new orders; orders already placed are unaffected.",
    request=MenuItemSerializer,
    responses={200: MenuItemSerializer},
    tags=["menu"],
)
class MenuItemUpdateView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def patch(self, request, item_id):
        item = editable_menu_item(request.user, item_id)
        serializer = MenuItemSerializer(item, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)

    def delete(self, request, item_id):
        retire_menu_item(editable_menu_item(request.user, item_id))
        return Response(status=status.HTTP_204_NO_CONTENT)
