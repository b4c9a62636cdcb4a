from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import ConcurrentTransitionMixin, FSMField, transition
from django_fsm_log.decorators import fsm_log_by, fsm_log_description
from simple_history.models import HistoricalRecords

from core.exceptions import InvalidQuantity
from production.models.base import QuantityInvariantMixin
from production.services import calculator


class StitchingChallan(QuantityInvariantMixin, ConcurrentTransitionMixin, models.Model):
    """Pieces sent to a stitching unit to become finished product.

    Pending -> QC Pending -> QC Done -> Converted, with cancel allowed from
    any of the first three. Converted and Cancelled are terminal.

    ``mark_converted`` is internal: only the conversion service in
    ``inventory.services.conversion`` calls it, inside the same transaction
    that creates the inventory item.
    """

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        QC_PENDING = "QC Pending", "QC Pending"
        QC_DONE = "QC Done", "QC Done"
        CONVERTED = "Converted", "Converted"
        CANCELLED = "Cancelled", "Cancelled"

    TERMINAL = (Status.CONVERTED, Status.CANCELLED)
    CLASSIFIED = (Status.QC_PENDING, Status.QC_DONE, Status.CONVERTED)

    challan_no = models.CharField(max_length=50, unique=True)
    challan_date = models.DateField()
    ledger = models.ForeignKey(
        "masterdata.Ledger", null=True, blank=True, on_delete=models.PROTECT, related_name="stitching_challans"
    )
    # Lineage only, like ShortingEntry.weaver_challan.
    shorting_entry = models.ForeignKey(
        "production.ShortingEntry", null=True, blank=True, on_delete=models.PROTECT, related_name="stitching_challans"
    )

    product_name = models.CharField(max_length=255, blank=True, default="")
    product_sku = models.CharField(max_length=100, blank=True, default="")
    batch_numbers = models.JSONField(default=list, blank=True)

    quantity_sent = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    quantity_received = models.PositiveIntegerField(default=0)
    stitching_loss = models.PositiveIntegerField(default=0, editable=False)
    loss_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"), editable=False)

    rate_per_piece = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    amount_payable = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), editable=False)

    total_good = models.PositiveIntegerField(default=0, editable=False)
    total_bad = models.PositiveIntegerField(default=0, editable=False)
    total_wastage = models.PositiveIntegerField(default=0, editable=False)
    qc_remarks = models.TextField(blank=True, default="", editable=False)
    size_breakdown = models.JSONField(default=dict, blank=True)

    transport_name = models.CharField(max_length=255, blank=True, default="")
    lr_number = models.CharField(max_length=100, blank=True, default="")
    transport_charge = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )

    status = FSMField(default=Status.PENDING, choices=Status.choices, protected=True)

    qc_done_at = models.DateTimeField(null=True, blank=True)
    qc_done_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    converted_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ("-challan_date", "-id")
        indexes = [
            models.Index(fields=["status", "challan_date"], name="stitching_status_date_idx"),
            models.Index(fields=["product_sku"], name="stitching_sku_idx"),
        ]

    def __str__(self):
        return self.challan_no

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL

    @property
    def classified_pieces(self) -> int:
        return (self.total_good or 0) + (self.total_bad or 0) + (self.total_wastage or 0)

    def check_quantities(self):
        calculator.loss_quantity(self.quantity_sent, self.quantity_received)
        if self.status in self.CLASSIFIED:
            calculator.check_piece_conservation(
                self.quantity_received, self.total_good, self.total_bad, self.total_wastage,
                label="good, bad and wastage pieces",
            )

    def recalculate(self):
        self.stitching_loss = int(calculator.loss_quantity(self.quantity_sent, self.quantity_received))
        self.loss_percentage = calculator.loss_percentage(self.quantity_sent, self.quantity_received)
        self.amount_payable = calculator.derive_amount(self.quantity_received, self.rate_per_piece)

    def save(self, *args, **kwargs):
        self.recalculate()
        super().save(*args, **kwargs)

    @fsm_log_by
    @transition(field=status, source=[Status.PENDING, Status.QC_PENDING], target=Status.QC_PENDING)
    def record_qc(self, good=0, bad=0, wastage=0, remarks="", by=None):
        """Store the inspection result; the three buckets must cover every received piece."""
        if not self.quantity_received:
            raise InvalidQuantity(
                "Record the quantity received before performing QC.", field="quantity_received"
            )
        counts = {}
        for name, value in (("good", good), ("bad", bad), ("wastage", wastage)):
            number = calculator.to_decimal(value, name)
            if number < 0 or number != number.to_integral_value():
                raise InvalidQuantity(f"{name} must be a whole, non-negative number of pieces.", field=name)
            counts[name] = int(number)
        calculator.check_piece_conservation(
            self.quantity_received, *counts.values(), label="good, bad and wastage pieces"
        )
        self.total_good = counts["good"]
        self.total_bad = counts["bad"]
        self.total_wastage = counts["wastage"]
        self.qc_remarks = remarks or ""

    @fsm_log_by
    @transition(field=status, source=Status.QC_PENDING, target=Status.QC_DONE)
    def approve_qc(self, by=None):
        self.qc_done_at = timezone.now()
        self.qc_done_by = by

    @fsm_log_by
    @transition(field=status, source=Status.QC_DONE, target=Status.CONVERTED, custom={"internal": True})
    def mark_converted(self, by=None):
        self.converted_at = timezone.now()

    @fsm_log_by
    @fsm_log_description
    @transition(
        field=status,
        source=[Status.PENDING, Status.QC_PENDING, Status.QC_DONE],
        target=Status.CANCELLED,
    )
    def cancel(self, by=None, description=None):
        self.cancelled_at = timezone.now()
        self.cancellation_reason = description or ""
