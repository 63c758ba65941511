from django.urls import path

from modules.payments.views import WebhookView

urlpatterns = [
    path("webhook/", WebhookView.as_view(), name="payment-webhook"),
]
