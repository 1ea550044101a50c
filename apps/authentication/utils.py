from rest_framework_simplejwt.tokens import RefreshToken


def get_custom_token(user):
    """
    Refresh token carrying the claims the clients route on: ``role`` and,
    for restaurant owners, the ``restaurant_id`` they subscribe to.
    """
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role

    restaurant = getattr(user, "restaurant", None)
    if restaurant is not None:
        refresh["restaurant_id"] = str(restaurant.id)
    return refresh


def generate_tokens_for_user(user) -> dict:
    refresh = get_custom_token(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }
