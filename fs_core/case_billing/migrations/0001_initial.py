import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CaseBillingItem",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("case_id", models.UUIDField(db_index=True)),
                (
                    "case_type",
                    models.CharField(
                        choices=[("private", "Private"), ("business", "Business"), ("contract", "Contract")],
                        max_length=16,
                    ),
                ),
                ("customer_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("article_code", models.CharField(blank=True, default="", max_length=32)),
                ("article_name", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("discount_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("discounted_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("vat_rate", models.DecimalField(decimal_places=2, default=Decimal("25.00"), max_digits=5)),
                (
                    "price_source",
                    models.CharField(
                        choices=[("standard", "Standard price"), ("customer_list", "Customer price list")],
                        default="standard",
                        max_length=16,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("billed", "Billed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("requires_approval", models.BooleanField(db_index=True, default=False)),
                ("added_by_technician_id", models.IntegerField(blank=True, null=True)),
                ("added_by_technician_name", models.CharField(blank=True, default="", max_length=255)),
                ("approved_by_user_id", models.IntegerField(blank=True, null=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("discount_notified_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "article",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="billing_items",
                        to="catalog.article",
                    ),
                ),
            ],
            options={
                "db_table": "case_billing_item",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["case_id", "case_type", "created_at"], name="cb_item_case_idx"),
                    models.Index(fields=["requires_approval", "status", "created_at"], name="cb_item_approval_idx"),
                ],
            },
        ),
    ]
