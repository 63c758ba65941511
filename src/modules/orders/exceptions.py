"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
extends the shared taxonomy in ``modules.core.exceptions`` so the API
layer renders it with the right status code.
"""

from __future__ import annotations

from modules.core.exceptions import AuthorizationError, NotFoundError, ValidationError


class EmptyOrder(ValidationError):
    default_detail = "Items must be an array with at least one item."


class InvalidQuantity(ValidationError):
    default_code = "invalid_quantity"
    default_detail = "Quantity must be a positive integer."


class UnknownProduct(ValidationError):
    """One or more requested products are not in the catalog.

    Items are never dropped silently: a partially priced order is rejected
    as a whole.
    """

    default_code = "unknown_product"
    default_detail = "One or more products not found."


class InvalidShipping(ValidationError):
    default_detail = "Shipping must be a non-negative amount."


class InvalidOrderUpdate(ValidationError):
    """An update payload breaks an order invariant."""


class OrderNotFound(NotFoundError):
    default_detail = "Order not found."


class OrderAccessDenied(AuthorizationError):
    """The caller neither owns the order nor holds administrator rights."""


class OrderTotalTooLarge(ValidationError):
    default_code = "order_total_too_large"
    default_detail = "Order total exceeds the maximum allowed amount."
