import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Article",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=32, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "unit",
                    models.CharField(
                        choices=[
                            ("st", "Piece"),
                            ("tim", "Hour"),
                            ("m", "Meter"),
                            ("m2", "Square meter"),
                            ("kg", "Kilogram"),
                            ("l", "Liter"),
                            ("pkt", "Package"),
                        ],
                        default="st",
                        max_length=8,
                    ),
                ),
                (
                    "default_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "vat_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("25.00"),
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00")),
                            django.core.validators.MaxValueValidator(Decimal("100.00")),
                        ],
                    ),
                ),
                ("category", models.CharField(db_index=True, default="Other", max_length=64)),
                ("sort_order", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "db_table": "catalog_article",
                "ordering": ["category", "sort_order", "name"],
                "indexes": [
                    models.Index(fields=["is_active", "category", "sort_order"], name="catalog_art_active_cat_idx")
                ],
            },
        ),
    ]
