import decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("production", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("inventory_number", models.CharField(max_length=60, unique=True)),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_sku", models.CharField(blank=True, default="", max_length=100)),
                ("batch_numbers", models.JSONField(blank=True, default=list)),
                ("quantity", models.PositiveIntegerField()),
                ("good_quantity", models.PositiveIntegerField(default=0)),
                ("bad_quantity", models.PositiveIntegerField(default=0)),
                ("wastage_quantity", models.PositiveIntegerField(default=0)),
                ("classification", models.CharField(choices=[("good", "Good"), ("bad", "Bad"), ("wastage", "Wastage"), ("unclassified", "Unclassified")], default="unclassified", max_length=20)),
                ("quality_grade", models.CharField(choices=[("A", "A"), ("B", "B"), ("C", "C"), ("D", "D"), ("Waste", "Waste"), ("Standard", "Standard")], default="Standard", max_length=20)),
                ("price_per_piece", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("total_cost", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=14)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("source_challan", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="inventory_item", to="production.stitchingchallan")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "indexes": [
                    models.Index(fields=["classification", "date"], name="inventory_class_date_idx"),
                    models.Index(fields=["product_sku"], name="inventory_sku_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalInventoryItem",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("inventory_number", models.CharField(db_index=True, max_length=60)),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_sku", models.CharField(blank=True, default="", max_length=100)),
                ("batch_numbers", models.JSONField(blank=True, default=list)),
                ("quantity", models.PositiveIntegerField()),
                ("good_quantity", models.PositiveIntegerField(default=0)),
                ("bad_quantity", models.PositiveIntegerField(default=0)),
                ("wastage_quantity", models.PositiveIntegerField(default=0)),
                ("classification", models.CharField(choices=[("good", "Good"), ("bad", "Bad"), ("wastage", "Wastage"), ("unclassified", "Unclassified")], default="unclassified", max_length=20)),
                ("quality_grade", models.CharField(choices=[("A", "A"), ("B", "B"), ("C", "C"), ("D", "D"), ("Waste", "Waste"), ("Standard", "Standard")], default="Standard", max_length=20)),
                ("price_per_piece", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("total_cost", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=14)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                ("history_type", models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1)),
                ("created_by", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("history_user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("source_challan", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="production.stitchingchallan")),
            ],
            options={
                "verbose_name": "historical inventory item",
                "verbose_name_plural": "historical inventory items",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="InventoryConversionLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("converted_at", models.DateTimeField(auto_now_add=True)),
                ("challan", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="conversion_log", to="production.stitchingchallan")),
                ("converted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("inventory_item", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="conversion_log", to="inventory.inventoryitem")),
            ],
            options={
                "ordering": ("-converted_at", "-id"),
            },
        ),
    ]
