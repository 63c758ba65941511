"""Order URL configuration.

``verify-payment/`` is a list-level action, so it resolves before the
``{pk}/`` detail route.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
