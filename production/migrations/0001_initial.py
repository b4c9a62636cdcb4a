import decimal

import django.core.validators
import django.db.models.deletion
import django_fsm
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("masterdata", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("purchase_no", models.CharField(max_length=50, unique=True)),
                ("purchase_date", models.DateField()),
                ("material_type", models.CharField(choices=[("Cotton", "Cotton"), ("Silk", "Silk"), ("Wool", "Wool"), ("Polyester", "Polyester"), ("Linen", "Linen")], max_length=20)),
                ("total_meters", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))])),
                ("rate_per_meter", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("gst_percent", models.CharField(choices=[("Not Applicable", "Not Applicable"), ("2.5%", "2.5%"), ("5%", "5%"), ("6%", "6%"), ("9%", "9%"), ("12%", "12%"), ("18%", "18%")], default="Not Applicable", max_length=20)),
                ("total_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=14)),
                ("invoice_number", models.CharField(blank=True, default="", max_length=100)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("vendor_ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="purchases", to="masterdata.ledger")),
            ],
            options={
                "ordering": ("-purchase_date", "-id"),
                "indexes": [models.Index(fields=["material_type", "purchase_date"], name="purchase_material_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="WeaverChallan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("challan_no", models.CharField(max_length=50, unique=True)),
                ("challan_date", models.DateField()),
                ("material_type", models.CharField(blank=True, choices=[("Cotton", "Cotton"), ("Silk", "Silk"), ("Wool", "Wool"), ("Polyester", "Polyester"), ("Linen", "Linen")], default="", max_length=20)),
                ("batch_number", models.CharField(blank=True, default="", max_length=50)),
                ("ms_party_name", models.CharField(blank=True, default="", max_length=255)),
                ("total_grey_mtr", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("taka", models.PositiveIntegerField(blank=True, null=True)),
                ("quantity_sent_meters", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))])),
                ("quantity_received_meters", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("weaving_loss_meters", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=12)),
                ("loss_percentage", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=5)),
                ("rate_per_meter", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("vendor_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("vendor_amount_manual", models.BooleanField(default=False)),
                ("transport_name", models.CharField(blank=True, default="", max_length=255)),
                ("lr_number", models.CharField(blank=True, default="", max_length=100)),
                ("transport_charge", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("status", django_fsm.FSMField(choices=[("Sent", "Sent"), ("Received", "Received"), ("Completed", "Completed")], default="Sent", max_length=50, protected=True)),
                ("received_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("purchase", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="weaver_challans", to="production.purchase")),
                ("weaver_ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="weaver_challans", to="masterdata.ledger")),
            ],
            options={
                "ordering": ("-challan_date", "-id"),
                "indexes": [
                    models.Index(fields=["status", "challan_date"], name="weaver_status_date_idx"),
                    models.Index(fields=["material_type", "challan_date"], name="weaver_material_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ShortingEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_no", models.CharField(max_length=50, unique=True)),
                ("entry_date", models.DateField()),
                ("material_type", models.CharField(choices=[("Cotton", "Cotton"), ("Silk", "Silk"), ("Wool", "Wool"), ("Polyester", "Polyester"), ("Linen", "Linen")], max_length=20)),
                ("batch_number", models.CharField(blank=True, default="", max_length=50)),
                ("total_pieces", models.PositiveIntegerField()),
                ("good_pieces", models.PositiveIntegerField(default=0)),
                ("damaged_pieces", models.PositiveIntegerField(default=0)),
                ("rejected_pieces", models.PositiveIntegerField(default=0)),
                ("size_breakdown", models.JSONField(blank=True, default=dict)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("purchase", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="shorting_entries", to="production.purchase")),
                ("weaver_challan", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="shorting_entries", to="production.weaverchallan")),
            ],
            options={
                "verbose_name_plural": "shorting entries",
                "ordering": ("-entry_date", "-id"),
            },
        ),
        migrations.CreateModel(
            name="StitchingChallan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("challan_no", models.CharField(max_length=50, unique=True)),
                ("challan_date", models.DateField()),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_sku", models.CharField(blank=True, default="", max_length=100)),
                ("batch_numbers", models.JSONField(blank=True, default=list)),
                ("quantity_sent", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("quantity_received", models.PositiveIntegerField(default=0)),
                ("stitching_loss", models.PositiveIntegerField(default=0, editable=False)),
                ("loss_percentage", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=5)),
                ("rate_per_piece", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("amount_payable", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=14)),
                ("total_good", models.PositiveIntegerField(default=0, editable=False)),
                ("total_bad", models.PositiveIntegerField(default=0, editable=False)),
                ("total_wastage", models.PositiveIntegerField(default=0, editable=False)),
                ("qc_remarks", models.TextField(blank=True, default="", editable=False)),
                ("size_breakdown", models.JSONField(blank=True, default=dict)),
                ("transport_name", models.CharField(blank=True, default="", max_length=255)),
                ("lr_number", models.CharField(blank=True, default="", max_length=100)),
                ("transport_charge", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("status", django_fsm.FSMField(choices=[("Pending", "Pending"), ("QC Pending", "QC Pending"), ("QC Done", "QC Done"), ("Converted", "Converted"), ("Cancelled", "Cancelled")], default="Pending", max_length=50, protected=True)),
                ("qc_done_at", models.DateTimeField(blank=True, null=True)),
                ("converted_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="stitching_challans", to="masterdata.ledger")),
                ("qc_done_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("shorting_entry", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="stitching_challans", to="production.shortingentry")),
            ],
            options={
                "ordering": ("-challan_date", "-id"),
                "indexes": [
                    models.Index(fields=["status", "challan_date"], name="stitching_status_date_idx"),
                    models.Index(fields=["product_sku"], name="stitching_sku_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalWeaverChallan",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("challan_no", models.CharField(db_index=True, max_length=50)),
                ("challan_date", models.DateField()),
                ("material_type", models.CharField(blank=True, choices=[("Cotton", "Cotton"), ("Silk", "Silk"), ("Wool", "Wool"), ("Polyester", "Polyester"), ("Linen", "Linen")], default="", max_length=20)),
                ("batch_number", models.CharField(blank=True, default="", max_length=50)),
                ("ms_party_name", models.CharField(blank=True, default="", max_length=255)),
                ("total_grey_mtr", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("taka", models.PositiveIntegerField(blank=True, null=True)),
                ("quantity_sent_meters", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))])),
                ("quantity_received_meters", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("weaving_loss_meters", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=12)),
                ("loss_percentage", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=5)),
                ("rate_per_meter", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("vendor_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("vendor_amount_manual", models.BooleanField(default=False)),
                ("transport_name", models.CharField(blank=True, default="", max_length=255)),
                ("lr_number", models.CharField(blank=True, default="", max_length=100)),
                ("transport_charge", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("status", django_fsm.FSMField(choices=[("Sent", "Sent"), ("Received", "Received"), ("Completed", "Completed")], default="Sent", max_length=50, protected=True)),
                ("received_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                ("history_type", models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1)),
                ("created_by", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("history_user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("purchase", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="production.purchase")),
                ("weaver_ledger", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="masterdata.ledger")),
            ],
            options={
                "verbose_name": "historical weaver challan",
                "verbose_name_plural": "historical weaver challans",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalStitchingChallan",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("challan_no", models.CharField(db_index=True, max_length=50)),
                ("challan_date", models.DateField()),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_sku", models.CharField(blank=True, default="", max_length=100)),
                ("batch_numbers", models.JSONField(blank=True, default=list)),
                ("quantity_sent", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("quantity_received", models.PositiveIntegerField(default=0)),
                ("stitching_loss", models.PositiveIntegerField(default=0, editable=False)),
                ("loss_percentage", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=5)),
                ("rate_per_piece", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("amount_payable", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=14)),
                ("total_good", models.PositiveIntegerField(default=0, editable=False)),
                ("total_bad", models.PositiveIntegerField(default=0, editable=False)),
                ("total_wastage", models.PositiveIntegerField(default=0, editable=False)),
                ("qc_remarks", models.TextField(blank=True, default="", editable=False)),
                ("size_breakdown", models.JSONField(blank=True, default=dict)),
                ("transport_name", models.CharField(blank=True, default="", max_length=255)),
                ("lr_number", models.CharField(blank=True, default="", max_length=100)),
                ("transport_charge", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("status", django_fsm.FSMField(choices=[("Pending", "Pending"), ("QC Pending", "QC Pending"), ("QC Done", "QC Done"), ("Converted", "Converted"), ("Cancelled", "Cancelled")], default="Pending", max_length=50, protected=True)),
                ("qc_done_at", models.DateTimeField(blank=True, null=True)),
                ("converted_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                ("history_type", models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1)),
                ("created_by", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("history_user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("ledger", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="masterdata.ledger")),
                ("qc_done_by", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("shorting_entry", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="production.shortingentry")),
            ],
            options={
                "verbose_name": "historical stitching challan",
                "verbose_name_plural": "historical stitching challans",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("expense_date", models.DateField()),
                ("expense_type", models.CharField(choices=[("Transport", "Transport"), ("Labor", "Labor"), ("Job Work", "Job Work"), ("Material", "Material"), ("Other", "Other")], max_length=20)),
                ("challan_no", models.CharField(blank=True, default="", max_length=50)),
                ("challan_type", models.CharField(blank=True, choices=[("Weaver", "Weaver"), ("Stitching", "Stitching"), ("Purchase", "Purchase"), ("Other", "Other")], default="", max_length=20)),
                ("description", models.TextField(blank=True, default="")),
                ("cost", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("paid_to", models.CharField(blank=True, default="", max_length=255)),
                ("payment_mode", models.CharField(blank=True, choices=[("Cash", "Cash"), ("Bank Transfer", "Bank Transfer"), ("Cheque", "Cheque"), ("UPI", "UPI"), ("Other", "Other")], default="", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="expenses", to="masterdata.ledger")),
            ],
            options={
                "ordering": ("-expense_date", "-id"),
                "indexes": [models.Index(fields=["expense_type", "expense_date"], name="expense_type_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="PaymentVoucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("voucher_no", models.CharField(max_length=50, unique=True)),
                ("payment_date", models.DateField()),
                ("payment_for", models.CharField(blank=True, default="", max_length=255)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))])),
                ("payment_mode", models.CharField(choices=[("Cash", "Cash"), ("Bank Transfer", "Bank Transfer"), ("Cheque", "Cheque"), ("UPI", "UPI"), ("Other", "Other")], default="Cash", max_length=20)),
                ("reference_no", models.CharField(blank=True, default="", max_length=100)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payment_vouchers", to="masterdata.ledger")),
            ],
            options={
                "ordering": ("-payment_date", "-id"),
            },
        ),
    ]
