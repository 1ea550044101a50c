from django.urls import path

from apps.notifications import views

app_name = "realtime"

urlpatterns = [
    path("stats", views.RealtimeStatsView.as_view(), name="realtime-stats"),  # GET
    path("broadcast", views.BroadcastView.as_view(), name="realtime-broadcast"),  # POST
]
