from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from production.services import calculator


class MaterialType(models.TextChoices):
    COTTON = "Cotton", "Cotton"
    SILK = "Silk", "Silk"
    WOOL = "Wool", "Wool"
    POLYESTER = "Polyester", "Polyester"
    LINEN = "Linen", "Linen"


class GstRate(models.TextChoices):
    NOT_APPLICABLE = "Not Applicable", "Not Applicable"
    GST_2_5 = "2.5%", "2.5%"
    GST_5 = "5%", "5%"
    GST_6 = "6%", "6%"
    GST_9 = "9%", "9%"
    GST_12 = "12%", "12%"
    GST_18 = "18%", "18%"


class Purchase(models.Model):
    """Raw material bought from a vendor.

    ``total_amount`` is always recomputed on save from meters, rate and GST.
    Once a weaver challan or shorting entry points at the purchase only its
    invoice metadata may change (see PurchaseLedger.edit_lock).
    """

    purchase_no = models.CharField(max_length=50, unique=True)
    purchase_date = models.DateField()
    vendor_ledger = models.ForeignKey(
        "masterdata.Ledger", null=True, blank=True, on_delete=models.PROTECT, related_name="purchases"
    )
    material_type = models.CharField(max_length=20, choices=MaterialType.choices)

    total_meters = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    rate_per_meter = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    gst_percent = models.CharField(max_length=20, choices=GstRate.choices, default=GstRate.NOT_APPLICABLE)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), editable=False)

    invoice_number = models.CharField(max_length=100, blank=True, default="")
    remarks = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-purchase_date", "-id")
        indexes = [models.Index(fields=["material_type", "purchase_date"], name="purchase_material_date_idx")]

    def __str__(self):
        return self.purchase_no

    def recalculate(self):
        self.total_amount = calculator.purchase_amount(self.total_meters, self.rate_per_meter, self.gst_percent)

    def save(self, *args, **kwargs):
        self.recalculate()
        super().save(*args, **kwargs)
