"""
Shared helpers for role checks and money arithmetic.
These functions ensure consistent behavior across permission classes, mixins and services.
"""

from decimal import ROUND_HALF_UP, Decimal

from apps.common.constants import UserRole

TWOPLACES = Decimal("0.01")


def quantize(amount) -> Decimal:
    return Decimal(amount or 0).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def is_authenticated(user) -> bool:
    return getattr(user, "is_authenticated", False)


def has_role(user, *roles) -> bool:
    return is_authenticated(user) and getattr(user, "role", None) in roles


def is_admin(user) -> bool:
    if getattr(user, "is_superuser", False):
        return True
    return has_role(user, UserRole.ADMIN)


def is_customer(user) -> bool:
    return has_role(user, UserRole.CUSTOMER)


def is_restaurant_owner(user) -> bool:
    return has_role(user, UserRole.RESTAURANT)


def is_delivery_partner(user) -> bool:
    return has_role(user, UserRole.DELIVERY)
