from decimal import Decimal

from django.db import models
from django.db.models import F, Q, Value

from apps.common.constants import OrderStatus, PaymentMethod, PaymentStatus
from apps.common.models import BaseModel
from apps.restaurants.models import MenuItem, Restaurant
from apps.users.models import User

TOTAL_BREAKDOWN = F("items_total") + F("delivery_fee") + F("taxes") - F("discount")
HALF_CENT = Value(Decimal("0.005"))


class Order(BaseModel):
    order_number = models.CharField(max_length=32, unique=True, editable=False)  # for ex "DE17291234567890042"

    customer = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="orders",
        db_column="customer_id",
    )
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.PROTECT,
        related_name="orders",
        db_column="restaurant_id",
    )
    delivery_partner = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="deliveries",
        db_column="delivery_partner_id",
    )

    items_total = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    taxes = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    # Copied at placement time
    delivery_street = models.CharField(max_length=255, blank=True)
    delivery_city = models.CharField(max_length=100, blank=True)
    delivery_state = models.CharField(max_length=100, blank=True)
    delivery_pincode = models.CharField(max_length=10, blank=True)
    delivery_landmark = models.CharField(max_length=255, blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)

    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PLACED)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_id = models.CharField(max_length=255, blank=True)

    estimated_delivery_time = models.DateTimeField(null=True, blank=True)
    actual_delivery_time = models.DateTimeField(null=True, blank=True)
    preparation_time = models.PositiveIntegerField(default=0)  # minutes

    special_instructions = models.TextField(blank=True)
    cancellation_reason = models.TextField(blank=True)

    class Meta:
        db_table = "order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
            models.Index(fields=["restaurant", "-created_at"], name="order_restaurant_created_idx"),
            models.Index(fields=["delivery_partner", "-created_at"], name="order_partner_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                name="order_total_matches_breakdown",
                # Equal to the cent; SQLite stores decimals as floats
                condition=Q(total_amount__gt=TOTAL_BREAKDOWN - HALF_CENT)
                & Q(total_amount__lt=TOTAL_BREAKDOWN + HALF_CENT),
            ),
        ]

    def __str__(self):
        return f"{self.order_number} • {self.customer}"

    @property
    def is_terminal(self) -> bool:
        return self.status in OrderStatus.terminal()

    @property
    def delivery_address(self) -> dict:
        return {
            "street": self.delivery_street,
            "city": self.delivery_city,
            "state": self.delivery_state,
            "pincode": self.delivery_pincode,
            "landmark": self.delivery_landmark,
            "contact_phone": self.contact_phone,
        }


class OrderItem(BaseModel):
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        db_column="order_id",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.PROTECT,
        related_name="order_items",
        db_column="menu_item_id",
    )
    position = models.PositiveIntegerField(default=0)
    name = models.CharField(max_length=100)  # snapshot
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)  # snapshot
    quantity = models.PositiveIntegerField()
    variant = models.CharField(max_length=100, blank=True)
    add_ons = models.JSONField(default=list, blank=True)
    special_instructions = models.TextField(blank=True)

    class Meta:
        db_table = "order_item"
        ordering = ["order", "position"]
        indexes = [
            models.Index(fields=["order"], name="order_item_order_idx"),
            models.Index(fields=["menu_item"], name="order_item_menu_item_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="order_item_quantity_positive", condition=Q(quantity__gte=1)),
        ]

    def __str__(self):
        return f"{self.order.order_number} · {self.name} × {self.quantity}"

    @property
    def line_total(self):
        return self.unit_price * self.quantity


class TrackingEntryImmutable(Exception):
    pass


class OrderTracking(models.Model):
    """One entry of an order's status history. Rows are only ever inserted."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="tracking",
        db_column="order_id",
    )
    sequence = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    message = models.CharField(max_length=255)
    updated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        db_column="updated_by_id",
    )
    timestamp = models.DateTimeField()

    class Meta:
        db_table = "order_tracking"
        ordering = ["order", "sequence"]
        constraints = [
            models.UniqueConstraint(fields=["order", "sequence"], name="order_tracking_unique_sequence"),
        ]

    def __str__(self):
        return f"{self.order.order_number} #{self.sequence} {self.status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TrackingEntryImmutable("Tracking entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TrackingEntryImmutable("Tracking entries cannot be deleted.")
