from django.apps import AppConfig
from django.conf import settings


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.payments"
    label = "payments"

    payment_settings = None
    gateway = None

    def ready(self) -> None:
        from modules.payments.config import PaymentSettings
        from modules.payments.gateway import build_gateway

        self.payment_settings = PaymentSettings.from_mapping(getattr(settings, "PAYMENTS", {}))
        self.gateway = build_gateway(self.payment_settings)
