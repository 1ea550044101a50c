"""
Service-layer error taxonomy and the DRF exception handler that renders it.

Services raise ``ServiceError`` subclasses; every subclass carries a stable
``kind`` (the broad category a client can switch on) and a specific ``code``.
Extra keyword arguments are kept as ``context`` and rendered next to the
message so clients can show e.g. the required minimum order.
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    kind = "unexpected"
    code = "unexpected"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong."

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"error": self.kind, "code": self.code, "detail": self.message, **self.context}


class InvalidInput(ServiceError):
    kind = code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class InvalidStatus(InvalidInput):
    code = "invalid_status"
    default_message = "Unknown order status."


class NotFound(ServiceError):
    kind = code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class RestaurantNotFound(NotFound):
    code = "restaurant_not_found"
    default_message = "Restaurant not found."


class MenuItemNotFound(NotFound):
    code = "menu_item_not_found"
    default_message = "Menu item not found."


class OrderNotFound(NotFound):
    code = "order_not_found"
    default_message = "Order not found."


class PreconditionFailed(ServiceError):
    kind = code = "precondition_failed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request cannot be fulfilled in the current state."


class RestaurantClosed(PreconditionFailed):
    code = "restaurant_closed"
    default_message = "Restaurant is not accepting orders right now."


class ItemUnavailable(PreconditionFailed):
    code = "item_unavailable"
    default_message = "Menu item is currently unavailable."


class ItemRestaurantMismatch(PreconditionFailed):
    code = "item_restaurant_mismatch"
    default_message = "Menu item does not belong to this restaurant."


class BelowMinimumOrder(PreconditionFailed):
    code = "below_minimum_order"
    default_message = "Order total is below the restaurant's minimum order."


class OrderFinalized(PreconditionFailed):
    code = "order_finalized"
    default_message = "Order has already reached a final status."


class InvalidTransition(PreconditionFailed):
    code = "invalid_transition"
    default_message = "Order cannot move to the requested status."


class Forbidden(ServiceError):
    kind = code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have access to this resource."


class Conflict(ServiceError):
    kind = code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class DuplicateRestaurant(Conflict):
    code = "duplicate_restaurant"
    default_message = "You already have a restaurant registered."


class DuplicateOrderNumber(Conflict):
    code = "duplicate_order_number"
    default_message = "Order number already in use, please retry."


class Unexpected(ServiceError):
    pass


def exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        if isinstance(exc, Unexpected):
            logger.error("Unexpected service failure: %s", exc, exc_info=exc)
        return Response(exc.as_dict(), status=exc.status_code)

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error("Database failure in %s: %s", type(view).__name__, exc, exc_info=exc)
        return Response(Unexpected().as_dict(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = drf_exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "error" not in response.data:
        code = getattr(exc, "default_code", "error")
        kind = {
            status.HTTP_400_BAD_REQUEST: InvalidInput.kind,
            status.HTTP_403_FORBIDDEN: Forbidden.kind,
            status.HTTP_404_NOT_FOUND: NotFound.kind,
        }.get(response.status_code, code)
        response.data = {"error": kind, "code": code, **response.data}
    return response
