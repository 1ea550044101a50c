from django.urls import path

from apps.payments import views

app_name = "payments"

urlpatterns = [
    path("result", views.PaymentResultView.as_view(), name="payment-result"),  # POST
]
