import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Restaurant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, max_length=500)),
                ("cuisine_types", models.JSONField(blank=True, default=list)),
                ("street", models.CharField(max_length=255)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(max_length=100)),
                ("pincode", models.CharField(max_length=10)),
                ("landmark", models.CharField(blank=True, max_length=255)),
                ("is_accepting_orders", models.BooleanField(default=True)),
                ("delivery_radius", models.PositiveIntegerField(default=5)),
                (
                    "minimum_order",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "delivery_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("30.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("estimated_delivery_time", models.PositiveIntegerField(default=30)),
                (
                    "owner",
                    models.OneToOneField(
                        db_column="owner_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="restaurant",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "restaurant",
                "indexes": [
                    models.Index(fields=["is_active", "is_accepting_orders"], name="restaurant_open_idx"),
                    models.Index(fields=["city"], name="restaurant_city_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, max_length=300)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Starters", "Starters"),
                            ("Main Course", "Main Course"),
                            ("Rice & Biryani", "Rice & Biryani"),
                            ("Breads", "Breads"),
                            ("Desserts", "Desserts"),
                            ("Beverages", "Beverages"),
                            ("Snacks", "Snacks"),
                            ("Salads", "Salads"),
                            ("Soups", "Soups"),
                            ("Combos", "Combos"),
                            ("Thali", "Thali"),
                        ],
                        max_length=30,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("1.00"))],
                    ),
                ),
                ("discounted_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("is_veg", models.BooleanField(default=True)),
                (
                    "spice_level",
                    models.PositiveSmallIntegerField(
                        default=3,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("is_available", models.BooleanField(default=True)),
                ("preparation_time", models.PositiveIntegerField(default=15)),
                ("variants", models.JSONField(blank=True, default=list)),
                ("add_ons", models.JSONField(blank=True, default=list)),
                (
                    "restaurant",
                    models.ForeignKey(
                        db_column="restaurant_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="menu_items",
                        to="restaurants.restaurant",
                    ),
                ),
            ],
            options={
                "db_table": "menu_item",
                "ordering": ["restaurant", "category", "name"],
                "indexes": [
                    models.Index(fields=["restaurant", "is_available"], name="menu_item_available_idx"),
                    models.Index(fields=["category"], name="menu_item_category_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("discounted_price__isnull", True),
                            ("discounted_price__lt", models.F("price")),
                            _connector="OR",
                        ),
                        name="discounted_price_below_price",
                    ),
                ],
            },
        ),
    ]
