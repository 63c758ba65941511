"""Domain error taxonomy shared by every module.

Services raise these; they never build HTTP responses themselves.
``DomainExceptionHandler`` plugs into drf-standardized-errors and turns a
``DomainError`` into the matching ``APIException`` so every error body has
the same ``{"type", "errors": [{"code", "detail", "attr"}]}`` shape.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from rest_framework import exceptions, status

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "error"
    default_detail: str = "The request could not be processed."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    """Malformed or missing input."""

    default_code = "invalid"
    default_detail = "Invalid input."


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"
    default_detail = "Not found."


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "permission_denied"
    default_detail = "Access denied."


class SignatureMismatchError(DomainError):
    """A payment or webhook signature did not match.

    Security relevant: callers log it before raising.
    """

    default_code = "invalid_signature"
    default_detail = "Invalid signature."


class GatewayError(DomainError):
    """The external payment gateway failed or refused the request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_code = "gateway_error"
    default_detail = "Payment gateway error."


class NotConfiguredError(DomainError):
    """A feature is disabled because its credentials are missing."""

    default_code = "not_configured"
    default_detail = "Feature not configured."


class DomainExceptionHandler(ExceptionHandler):
    """drf-standardized-errors handler aware of ``DomainError``."""

    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, DomainError):
            api_exc = exceptions.APIException(detail=exc.detail, code=exc.default_code)
            api_exc.status_code = exc.status_code
            return api_exc
        return super().convert_known_exceptions(exc)

    def report_exception(self, exc: exceptions.APIException, response) -> None:
        # A DomainError with a 5xx status (gateway failure) is already logged
        # where it was raised; it is not a crash.
        if isinstance(self.exc, DomainError):
            return
        super().report_exception(exc, response)

    def convert_unhandled_exceptions(self, exc: Exception) -> exceptions.APIException:
        if not isinstance(exc, exceptions.APIException):
            logger.error(
                "api.unhandled_exception",
                error_type=type(exc).__name__,
                exc_info=exc,
            )
            # Generic message: internals never reach the client.
            return exceptions.APIException()
        return exc
