from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from apps.orders.models import Order, OrderItem, OrderTracking


class OrderItemInline(TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "name", "unit_price", "quantity", "variant", "add_ons", "special_instructions")
    exclude = ("deleted_at", "position")
    can_delete = False

    def has_add_permission(self, request, obj):
        return False


class OrderTrackingInline(TabularInline):
    model = OrderTracking
    extra = 0
    fields = ("sequence", "status", "message", "updated_by", "timestamp")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(ModelAdmin):
    list_display = ("order_number", "customer", "restaurant", "status", "payment_status", "total_amount", "created_at")
    list_filter = ("status", "payment_status", "payment_method", "restaurant", "created_at")
    search_fields = ("order_number", "customer__email", "customer__name", "restaurant__name")
    # Status only moves through the order endpoints so every change is tracked
    readonly_fields = (
        "order_number",
        "status",
        "payment_status",
        "items_total",
        "delivery_fee",
        "taxes",
        "discount",
        "total_amount",
        "actual_delivery_time",
        "created_at",
        "updated_at",
    )
    exclude = ("deleted_at",)
    inlines = [OrderItemInline, OrderTrackingInline]
    autocomplete_fields = ["customer", "restaurant", "delivery_partner"]

    def get_list_display_links(self, request, list_display):
        return ("order_number",)

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.is_terminal:
            return False
        return super().has_change_permission(request, obj)
