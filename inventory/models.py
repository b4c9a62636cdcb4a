from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords

from production.services import calculator


class Classification(models.TextChoices):
    GOOD = "good", "Good"
    BAD = "bad", "Bad"
    WASTAGE = "wastage", "Wastage"
    UNCLASSIFIED = "unclassified", "Unclassified"


class QualityGrade(models.TextChoices):
    A = "A", "A"
    B = "B", "B"
    C = "C", "C"
    D = "D", "D"
    WASTE = "Waste", "Waste"
    STANDARD = "Standard", "Standard"


# grade written when only the classification is known
GRADE_FOR_CLASSIFICATION = {
    Classification.GOOD.value: QualityGrade.A.value,
    Classification.BAD.value: QualityGrade.C.value,
    Classification.WASTAGE.value: QualityGrade.WASTE.value,
    Classification.UNCLASSIFIED.value: QualityGrade.STANDARD.value,
}


class InventoryItem(models.Model):
    """Finished goods materialized from exactly one converted stitching challan.

    Created only by ``inventory.services.conversion``. Quantity and source
    challan never change afterwards; classification, grade and price may.
    """

    inventory_number = models.CharField(max_length=60, unique=True)
    source_challan = models.OneToOneField(
        "production.StitchingChallan", on_delete=models.PROTECT, related_name="inventory_item"
    )

    product_name = models.CharField(max_length=255, blank=True, default="")
    product_sku = models.CharField(max_length=100, blank=True, default="")
    batch_numbers = models.JSONField(default=list, blank=True)

    quantity = models.PositiveIntegerField()
    good_quantity = models.PositiveIntegerField(default=0)
    bad_quantity = models.PositiveIntegerField(default=0)
    wastage_quantity = models.PositiveIntegerField(default=0)

    classification = models.CharField(
        max_length=20, choices=Classification.choices, default=Classification.UNCLASSIFIED
    )
    quality_grade = models.CharField(max_length=20, choices=QualityGrade.choices, default=QualityGrade.STANDARD)

    price_per_piece = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), editable=False)

    date = models.DateField(default=timezone.localdate)
    remarks = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ("-date", "-id")
        indexes = [
            models.Index(fields=["classification", "date"], name="inventory_class_date_idx"),
            models.Index(fields=["product_sku"], name="inventory_sku_idx"),
        ]

    def __str__(self):
        return self.inventory_number

    def save(self, *args, **kwargs):
        self.total_cost = calculator.derive_amount(self.quantity, self.price_per_piece)
        super().save(*args, **kwargs)


class InventoryConversionLog(models.Model):
    """One row per successful conversion, written in the conversion transaction."""

    challan = models.OneToOneField(
        "production.StitchingChallan", on_delete=models.PROTECT, related_name="conversion_log"
    )
    inventory_item = models.OneToOneField(InventoryItem, on_delete=models.PROTECT, related_name="conversion_log")
    quantity = models.PositiveIntegerField()
    converted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    converted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-converted_at", "-id")

    def __str__(self):
        return f"{self.challan} -> {self.inventory_item}"
