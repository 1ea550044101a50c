from django.urls import path

from apps.restaurants import views

app_name = "menu"

urlpatterns = [
    path("items", views.MenuItemCreateView.as_view(), name="menu-item-create"),  # POST
    path("items/<uuid:item_id>", views.MenuItemUpdateView.as_view(), name="menu-item-update"),  # PATCH, DELETE
]
