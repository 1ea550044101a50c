import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

ORDER_STATUS_CHOICES = [
    ("placed", "Placed"),
    ("confirmed", "Confirmed"),
    ("preparing", "Preparing"),
    ("ready", "Ready for pickup"),
    ("picked-up", "Picked up"),
    ("out-for-delivery", "Out for delivery"),
    ("delivered", "Delivered"),
    ("cancelled", "Cancelled"),
    ("refunded", "Refunded"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("restaurants", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("order_number", models.CharField(editable=False, max_length=32, unique=True)),
                ("items_total", models.DecimalField(decimal_places=2, max_digits=10)),
                ("delivery_fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("taxes", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("delivery_street", models.CharField(blank=True, max_length=255)),
                ("delivery_city", models.CharField(blank=True, max_length=100)),
                ("delivery_state", models.CharField(blank=True, max_length=100)),
                ("delivery_pincode", models.CharField(blank=True, max_length=10)),
                ("delivery_landmark", models.CharField(blank=True, max_length=255)),
                ("contact_phone", models.CharField(blank=True, max_length=20)),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, default="placed", max_length=20)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("paid", "Paid"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("razorpay", "Razorpay"), ("stripe", "Stripe"), ("cod", "Cash on delivery")],
                        max_length=20,
                    ),
                ),
                ("payment_id", models.CharField(blank=True, max_length=255)),
                ("estimated_delivery_time", models.DateTimeField(blank=True, null=True)),
                ("actual_delivery_time", models.DateTimeField(blank=True, null=True)),
                ("preparation_time", models.PositiveIntegerField(default=0)),
                ("special_instructions", models.TextField(blank=True)),
                ("cancellation_reason", models.TextField(blank=True)),
                (
                    "customer",
                    models.ForeignKey(
                        db_column="customer_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "restaurant",
                    models.ForeignKey(
                        db_column="restaurant_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="restaurants.restaurant",
                    ),
                ),
                (
                    "delivery_partner",
                    models.ForeignKey(
                        blank=True,
                        db_column="delivery_partner_id",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="deliveries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "order",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
                    models.Index(fields=["restaurant", "-created_at"], name="order_restaurant_created_idx"),
                    models.Index(fields=["delivery_partner", "-created_at"], name="order_partner_created_idx"),
                    models.Index(fields=["status"], name="order_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            total_amount__gt=models.F("items_total")
                            + models.F("delivery_fee")
                            + models.F("taxes")
                            - models.F("discount")
                            - models.Value(Decimal("0.005"))
                        )
                        & models.Q(
                            total_amount__lt=models.F("items_total")
                            + models.F("delivery_fee")
                            + models.F("taxes")
                            - models.F("discount")
                            + models.Value(Decimal("0.005"))
                        ),
                        name="order_total_matches_breakdown",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("position", models.PositiveIntegerField(default=0)),
                ("name", models.CharField(max_length=100)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("quantity", models.PositiveIntegerField()),
                ("variant", models.CharField(blank=True, max_length=100)),
                ("add_ons", models.JSONField(blank=True, default=list)),
                ("special_instructions", models.TextField(blank=True)),
                (
                    "order",
                    models.ForeignKey(
                        db_column="order_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
                (
                    "menu_item",
                    models.ForeignKey(
                        db_column="menu_item_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                        to="restaurants.menuitem",
                    ),
                ),
            ],
            options={
                "db_table": "order_item",
                "ordering": ["order", "position"],
                "indexes": [
                    models.Index(fields=["order"], name="order_item_order_idx"),
                    models.Index(fields=["menu_item"], name="order_item_menu_item_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(quantity__gte=1), name="order_item_quantity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderTracking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence", models.PositiveIntegerField()),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, max_length=20)),
                ("message", models.CharField(max_length=255)),
                ("timestamp", models.DateTimeField()),
                (
                    "order",
                    models.ForeignKey(
                        db_column="order_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracking",
                        to="orders.order",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        db_column="updated_by_id",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "order_tracking",
                "ordering": ["order", "sequence"],
                "constraints": [
                    models.UniqueConstraint(fields=("order", "sequence"), name="order_tracking_unique_sequence"),
                ],
            },
        ),
    ]
