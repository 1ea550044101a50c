from django.urls import path

from apps.restaurants import views

app_name = "restaurants"

urlpatterns = [
    path("", views.RestaurantCreateView.as_view(), name="restaurant-create"),  # POST
    path("me/settings", views.RestaurantSettingsView.as_view(), name="restaurant-settings"),  # PATCH
    path("me/dashboard", views.RestaurantDashboardView.as_view(), name="restaurant-dashboard"),  # GET
    path("me/live-orders", views.RestaurantLiveOrdersView.as_view(), name="restaurant-live-orders"),  # GET
    path("me/analytics", views.RestaurantAnalyticsView.as_view(), name="restaurant-analytics"),  # GET
    path("<uuid:restaurant_id>/menu", views.RestaurantMenuView.as_view(), name="restaurant-menu"),  # GET
]
