from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models


def normalize_tax_id(value):
    """Strip whitespace and upper-case a GSTIN/PAN as typed by users."""
    return "".join((value or "").split()).upper()


gst_validator = RegexValidator(
    r"^[0-9A-Z]{15}$", "GST number must be 15 characters alphanumeric.", code="invalid_gst"
)
pan_validator = RegexValidator(
    r"^[0-9A-Z]{10}$", "PAN number must be 10 characters alphanumeric.", code="invalid_pan"
)


class Ledger(models.Model):
    """Business partner: vendor, weaver, stitching unit, customer.

    Referenced by purchases, challans, expenses and payment vouchers through
    PROTECT foreign keys, so a ledger in use cannot be deleted.
    """

    class LedgerType(models.TextChoices):
        VENDOR = "vendor", "Vendor"
        WEAVER = "weaver", "Weaver"
        STITCHING = "stitching", "Stitching unit"
        CUSTOMER = "customer", "Customer"
        TRANSPORT = "transport", "Transport"
        OTHER = "other", "Other"

    business_name = models.CharField(max_length=255)
    ledger_type = models.CharField(max_length=20, choices=LedgerType.choices, default=LedgerType.VENDOR)

    contact_person_name = models.CharField(max_length=255, blank=True, default="")
    mobile_number = models.CharField(max_length=20, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    address = models.TextField(blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="India")
    zip_code = models.CharField(max_length=12, blank=True, default="")

    gst_number = models.CharField(max_length=15, blank=True, default="", validators=[gst_validator])
    pan_number = models.CharField(max_length=10, blank=True, default="", validators=[pan_validator])

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["business_name"]
        indexes = [models.Index(fields=["ledger_type", "business_name"], name="ledger_type_name_idx")]

    def __str__(self):
        return self.business_name

    def save(self, *args, **kwargs):
        self.gst_number = normalize_tax_id(self.gst_number)
        self.pan_number = normalize_tax_id(self.pan_number)
        super().save(*args, **kwargs)
