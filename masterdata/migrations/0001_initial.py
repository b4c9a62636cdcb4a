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
            name="Ledger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_name", models.CharField(max_length=255)),
                ("ledger_type", models.CharField(choices=[("vendor", "Vendor"), ("weaver", "Weaver"), ("stitching", "Stitching unit"), ("customer", "Customer"), ("transport", "Transport"), ("other", "Other")], default="vendor", max_length=20)),
                ("contact_person_name", models.CharField(blank=True, default="", max_length=255)),
                ("mobile_number", models.CharField(blank=True, default="", max_length=20)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("district", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("country", models.CharField(blank=True, default="India", max_length=100)),
                ("zip_code", models.CharField(blank=True, default="", max_length=12)),
                ("gst_number", models.CharField(blank=True, default="", max_length=15, validators=[django.core.validators.RegexValidator("^[0-9A-Z]{15}$", "GST number must be 15 characters alphanumeric.", code="invalid_gst")])),
                ("pan_number", models.CharField(blank=True, default="", max_length=10, validators=[django.core.validators.RegexValidator("^[0-9A-Z]{10}$", "PAN number must be 10 characters alphanumeric.", code="invalid_pan")])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["business_name"],
                "indexes": [models.Index(fields=["ledger_type", "business_name"], name="ledger_type_name_idx")],
            },
        ),
    ]
