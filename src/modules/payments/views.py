"""Payments API views."""

from __future__ import annotations

import structlog
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.orders.reconciliation import OrderReconciler
from modules.orders.repositories import OrderDjangoRepository
from modules.payments.providers import get_payment_settings
from modules.payments.webhooks import SIGNATURE_HEADER, WebhookIngestor

logger = structlog.get_logger(__name__)


def _build_ingestor() -> WebhookIngestor:
    return WebhookIngestor(
        reconciler=OrderReconciler(OrderDjangoRepository()),
        payment_settings=get_payment_settings(),
    )


class WebhookView(APIView):
    """Receives gateway event notifications.

    Authenticated by the HMAC signature header only, so no user
    authentication runs.  The body is read from ``request.body`` and never
    through ``request.data``: the signature covers the exact bytes sent.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Payments"],
        summary="Gateway webhook",
        request=None,
        responses={
            200: OpenApiResponse(description="Delivery accepted"),
            400: OpenApiResponse(description="Not configured, bad signature or bad JSON"),
        },
    )
    def post(self, request: Request) -> Response:
        outcome = _build_ingestor().ingest(
            request.body,
            request.headers.get(SIGNATURE_HEADER),
        )
        logger.info(
            "webhook.delivery_handled",
            event_type=outcome.event_type,
            outcome=outcome.outcome,
        )
        return Response({"received": True}, status=status.HTTP_200_OK)
