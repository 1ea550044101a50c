from django.urls import path

from apps.orders import views

app_name = "orders"

urlpatterns = [
    path("", views.OrderListCreateView.as_view(), name="order-list"),  # GET list, POST place
    path("bulk-status", views.BulkStatusView.as_view(), name="order-bulk-status"),  # PUT
    path("<uuid:order_id>", views.OrderDetailView.as_view(), name="order-detail"),  # GET
    path("<uuid:order_id>/status", views.OrderStatusView.as_view(), name="order-status"),  # PATCH
]
