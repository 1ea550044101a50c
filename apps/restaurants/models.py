from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q

from apps.common.constants import MenuCategory
from apps.common.models import BaseModel
from apps.users.models import User


class Restaurant(BaseModel):
    owner = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="restaurant",
        db_column="owner_id",
    )
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500, blank=True)
    cuisine_types = models.JSONField(default=list, blank=True)

    street = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=10)
    landmark = models.CharField(max_length=255, blank=True)

    is_accepting_orders = models.BooleanField(default=True)
    delivery_radius = models.PositiveIntegerField(default=5)  # km
    minimum_order = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    delivery_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("30.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    estimated_delivery_time = models.PositiveIntegerField(default=30)  # minutes

    class Meta:
        db_table = "restaurant"
        indexes = [
            models.Index(fields=["is_active", "is_accepting_orders"], name="restaurant_open_idx"),
            models.Index(fields=["city"], name="restaurant_city_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_open(self) -> bool:
        return self.is_active and self.is_accepting_orders


class MenuItem(BaseModel):
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="menu_items",
        db_column="restaurant_id",
    )
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=300, blank=True)
    category = models.CharField(max_length=30, choices=MenuCategory.choices)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("1.00"))],
    )
    discounted_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_veg = models.BooleanField(default=True)
    spice_level = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    is_available = models.BooleanField(default=True)
    preparation_time = models.PositiveIntegerField(default=15)  # minutes
    # [{"name": "Large", "price": "250.00", "description": ""}]
    variants = models.JSONField(default=list, blank=True)
    # [{"name": "Extra Cheese", "price": "20.00"}]
    add_ons = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "menu_item"
        indexes = [
            models.Index(fields=["restaurant", "is_available"], name="menu_item_available_idx"),
            models.Index(fields=["category"], name="menu_item_category_idx"),
        ]
        ordering = ["restaurant", "category", "name"]
        constraints = [
            models.CheckConstraint(
                name="discounted_price_below_price",
                condition=Q(discounted_price__isnull=True) | Q(discounted_price__lt=F("price")),
            ),
        ]

    def __str__(self):
        return f"{self.restaurant} · {self.name}"

    def clean(self):
        super().clean()
        if self.discounted_price is not None and self.price is not None and self.discounted_price >= self.price:
            raise ValidationError({"discounted_price": "Discounted price must be less than original price."})

    @property
    def effective_price(self) -> Decimal:
        if self.discounted_price is not None:
            return self.discounted_price
        return self.price

    def find_variant(self, name):
        return next((v for v in self.variants if v.get("name") == name), None)

    def find_add_on(self, name):
        return next((a for a in self.add_ons if a.get("name") == name), None)
