from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from apps.restaurants.models import MenuItem, Restaurant


class MenuItemInline(TabularInline):
    model = MenuItem
    extra = 0
    fields = ("name", "category", "price", "discounted_price", "is_veg", "is_available", "preparation_time")


@admin.register(Restaurant)
class RestaurantAdmin(ModelAdmin):
    list_display = ("name", "owner", "city", "is_accepting_orders", "is_active", "minimum_order", "delivery_fee")
    list_filter = ("is_accepting_orders", "is_active", "city")
    search_fields = ("name", "owner__email", "city")
    exclude = ("deleted_at",)
    inlines = [MenuItemInline]
    autocomplete_fields = ["owner"]


@admin.register(MenuItem)
class MenuItemAdmin(ModelAdmin):
    list_display = ("name", "restaurant", "category", "price", "discounted_price", "is_available")
    list_filter = ("category", "is_available", "is_veg", "restaurant")
    search_fields = ("name", "restaurant__name")
    exclude = ("deleted_at",)
    autocomplete_fields = ["restaurant"]
