import logging

from django.db import IntegrityError, transaction

from apps.common.exceptions import DuplicateRestaurant, Forbidden, MenuItemNotFound, RestaurantNotFound
from apps.common.utils import is_admin
from apps.restaurants.models import MenuItem, Restaurant

logger = logging.getLogger(__name__)


def restaurant_of(user) -> Restaurant:
    restaurant = Restaurant.objects.filter(owner=user).first()
    if restaurant is None:
        raise RestaurantNotFound("You do not have a restaurant registered.")
    return restaurant


@transaction.atomic
def create_restaurant(owner, **fields) -> Restaurant:
    if Restaurant.objects.filter(owner=owner).exists():
        raise DuplicateRestaurant()

    try:
        with transaction.atomic():
            restaurant = Restaurant.objects.create(owner=owner, **fields)
    except IntegrityError as err:
        # Lost a race against another request for the same owner
        raise DuplicateRestaurant() from err

    logger.info("Restaurant %s registered by %s", restaurant.pk, owner.pk)
    return restaurant


@transaction.atomic
def update_settings(restaurant, **changes) -> Restaurant:
    restaurant = Restaurant.objects.select_for_update().get(pk=restaurant.pk)
    for name, value in changes.items():
        setattr(restaurant, name, value)
    restaurant.save(update_fields=[*changes, "updated_at"])

    logger.info("Restaurant %s settings updated: %s", restaurant.pk, ", ".join(sorted(changes)))
    return restaurant


def restaurant_for_menu(user, restaurant_id=None) -> Restaurant:
    """The restaurant a new menu item goes to: the caller's own, or any one for an administrator."""
    if is_admin(user) and restaurant_id:
        restaurant = Restaurant.objects.filter(pk=restaurant_id).first()
        if restaurant is None:
            raise RestaurantNotFound(restaurant_id=str(restaurant_id))
        return restaurant
    return restaurant_of(user)


def editable_menu_item(user, item_id) -> MenuItem:
    # Retired items are gone for good
    item = MenuItem.objects.select_related("restaurant").filter(pk=item_id, is_active=True).first()
    if item is None:
        raise MenuItemNotFound(menu_item_id=str(item_id))
    if not (is_admin(user) or item.restaurant.owner_id == user.id):
        raise Forbidden("You can only edit items of your own restaurant.")
    return item


@transaction.atomic
def retire_menu_item(item) -> MenuItem:
    """Take an item off the menu for good; past orders keep their snapshots."""
    item = MenuItem.objects.select_for_update().get(pk=item.pk)
    item.is_available = False
    if item.soft_delete("is_available"):
        logger.info("Menu item %s retired from restaurant %s", item.pk, item.restaurant_id)
    return item
