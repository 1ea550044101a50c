from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.constants import UserRole
from apps.common.drf_permissions import RoleBasedPermission
from apps.common.mixins import RoleMixin
from apps.orders.filters import OrderFilter
from apps.orders.paginators import OrderPagination
from apps.orders.serializers import (
    BulkStatusResultSerializer,
    BulkStatusUpdateSerializer,
    OrderCreateSerializer,
    OrderDetailSerializer,
    OrderListSerializer,
    OrderStatusUpdateSerializer,
)
from apps.orders.services import bulk_update_status, get_order_for, orders_visible_to, update_status


@extend_schema_view(
    get=extend_schema(
        summary="Customer: My orders. | Restaurant: Orders of my restaurant. | Admin: All orders.",
        parameters=[
            OpenApiParameter(name="limit", type=int, description="Page size (default 10, max 100)"),
        ],
        responses={200: OrderListSerializer(many=True)},
        tags=["orders"],
    ),
    post=extend_schema(
        summary="Customer: Place an order.",
        description="Validates the cart against the live menu, prices it and stores the order in one step.",
        request=OrderCreateSerializer,
        responses={201: OrderDetailSerializer},
        tags=["orders"],
    ),
)
class OrderListCreateView(generics.ListCreateAPIView):
    pagination_class = OrderPagination
    filterset_class = OrderFilter

    allowed_roles = (UserRole.CUSTOMER,)

    def get_permissions(self):
        if self.request.method == "POST":
            return [RoleBasedPermission()]
        return super().get_permissions()

    def get_queryset(self):
        return orders_visible_to(self.request.user)

    def get_serializer_class(self):
        if self.request.method == "POST":
            return OrderCreateSerializer
        return OrderListSerializer


@extend_schema(
    summary="Customer: Get my order by id.",
    parameters=[
        OpenApiParameter(name="order_id", type=str, location=OpenApiParameter.PATH, required=True),
    ],
    responses={200: OrderDetailSerializer},
    tags=["orders"],
)
class OrderDetailView(APIView):
    def get(self, request, order_id):
        order = get_order_for(request.user, order_id)
        return Response(OrderDetailSerializer(order, context={"request": request}).data)


@extend_schema(
    summary="Move an order to a new status.",
    description=(
        "Restaurant owners, the assigned delivery partner and administrators may set any status the order "
        "can reach; customers may only cancel their own order while it is placed or confirmed."
    ),
    request=OrderStatusUpdateSerializer,
    responses={200: OrderDetailSerializer},
    tags=["orders"],
)
class OrderStatusView(APIView):
    def patch(self, request, order_id):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = update_status(
            request.user,
            order_id,
            serializer.validated_data["status"],
            serializer.validated_data.get("message") or None,
        )
        return Response(OrderDetailSerializer(order, context={"request": request}).data)


@extend_schema(
    summary="Restaurant: Update the status of several orders at once.",
    description="Orders of other restaurants and already finalized orders are skipped and not counted.",
    request=BulkStatusUpdateSerializer,
    responses={200: BulkStatusResultSerializer},
    tags=["orders"],
)
class BulkStatusView(RoleMixin, APIView):
    allowed_roles = (UserRole.RESTAURANT,)

    def put(self, request):
        serializer = BulkStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = bulk_update_status(
            request.user,
            [str(order_id) for order_id in data["order_ids"]],
            data["status"],
            message=data.get("message") or None,
            restaurant_id=data.get("restaurant_id"),
        )
        return Response(BulkStatusResultSerializer(result).data, status=status.HTTP_200_OK)
