"""
Read-only view over the live catalog.

Only the pricing engine consults it, and only while an order is being
validated; placed orders keep their own name/price snapshots and never read
back through here.
"""

from django.core.exceptions import ValidationError

from apps.restaurants.models import MenuItem, Restaurant


class CatalogView:
    def get_restaurant(self, restaurant_id) -> Restaurant | None:
        return self._get(Restaurant.objects.all(), restaurant_id)

    def get_menu_item(self, menu_item_id) -> MenuItem | None:
        return self._get(MenuItem.objects.all(), menu_item_id)

    @staticmethod
    def _get(queryset, pk):
        # Malformed ids cannot match anything
        try:
            return queryset.filter(pk=pk).first()
        except (ValidationError, ValueError, TypeError):
            return None
