from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import ConcurrentTransitionMixin, FSMField, transition
from django_fsm_log.decorators import fsm_log_by
from simple_history.models import HistoricalRecords

from core.exceptions import InvalidQuantity
from production.models.base import QuantityInvariantMixin
from production.models.purchase import MaterialType
from production.services import calculator


class WeaverChallan(QuantityInvariantMixin, ConcurrentTransitionMixin, models.Model):
    """Grey cloth sent to a weaver.

    Sent -> Received -> Completed. Loss and vendor amount are derived on every
    save through the calculator; the vendor amount keeps a manual value only
    while ``vendor_amount_manual`` is set.
    """

    class Status(models.TextChoices):
        SENT = "Sent", "Sent"
        RECEIVED = "Received", "Received"
        COMPLETED = "Completed", "Completed"

    challan_no = models.CharField(max_length=50, unique=True)
    challan_date = models.DateField()
    purchase = models.ForeignKey(
        "production.Purchase", null=True, blank=True, on_delete=models.PROTECT, related_name="weaver_challans"
    )
    weaver_ledger = models.ForeignKey(
        "masterdata.Ledger", null=True, blank=True, on_delete=models.PROTECT, related_name="weaver_challans"
    )
    material_type = models.CharField(max_length=20, choices=MaterialType.choices, blank=True, default="")
    batch_number = models.CharField(max_length=50, blank=True, default="")
    ms_party_name = models.CharField(max_length=255, blank=True, default="")

    total_grey_mtr = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal("0"))]
    )
    taka = models.PositiveIntegerField(null=True, blank=True)

    quantity_sent_meters = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    quantity_received_meters = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    weaving_loss_meters = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"), editable=False)
    loss_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"), editable=False)

    rate_per_meter = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    vendor_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )
    vendor_amount_manual = models.BooleanField(default=False)

    transport_name = models.CharField(max_length=255, blank=True, default="")
    lr_number = models.CharField(max_length=100, blank=True, default="")
    transport_charge = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0"))]
    )

    status = FSMField(default=Status.SENT, choices=Status.choices, protected=True)
    received_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ("-challan_date", "-id")
        indexes = [
            models.Index(fields=["status", "challan_date"], name="weaver_status_date_idx"),
            models.Index(fields=["material_type", "challan_date"], name="weaver_material_date_idx"),
        ]

    def __str__(self):
        return self.challan_no

    @property
    def meters_per_taka(self):
        if not self.taka:
            return None
        return calculator.meters_per_taka(self.total_grey_mtr or self.quantity_sent_meters, self.taka)

    def check_quantities(self):
        calculator.loss_quantity(self.quantity_sent_meters, self.quantity_received_meters)

    def recalculate(self):
        sent, received = self.quantity_sent_meters, self.quantity_received_meters
        self.weaving_loss_meters = calculator.loss_quantity(sent, received)
        self.loss_percentage = calculator.loss_percentage(sent, received)
        if not self.vendor_amount_manual:
            self.vendor_amount = calculator.derive_amount(received, self.rate_per_meter)

    def save(self, *args, **kwargs):
        self.recalculate()
        super().save(*args, **kwargs)

    @fsm_log_by
    @transition(field=status, source=Status.SENT, target=Status.RECEIVED)
    def mark_received(self, by=None, quantity_received_meters=None):
        """Record the cloth coming back from the weaver."""
        if quantity_received_meters not in (None, ""):
            self.quantity_received_meters = calculator.to_decimal(
                quantity_received_meters, "quantity_received_meters"
            )
        if calculator.to_decimal(self.quantity_received_meters) <= 0:
            raise InvalidQuantity(
                "Enter the quantity received before marking the challan received.",
                field="quantity_received_meters",
            )
        self.check_quantities()
        self.received_at = timezone.now()

    @fsm_log_by
    @transition(field=status, source=Status.RECEIVED, target=Status.COMPLETED)
    def complete(self, by=None):
        self.completed_at = timezone.now()
