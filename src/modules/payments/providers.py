"""Access to the payment settings and gateway built at startup.

Views resolve collaborators through these helpers instead of importing
module-level singletons; tests swap them by patching the app config.
"""

from __future__ import annotations

from typing import Optional

from django.apps import apps

from modules.payments.config import PaymentSettings
from modules.payments.gateway.port import PaymentGateway


def get_payment_settings() -> PaymentSettings:
    return apps.get_app_config("payments").payment_settings


def get_gateway() -> Optional[PaymentGateway]:
    return apps.get_app_config("payments").gateway
