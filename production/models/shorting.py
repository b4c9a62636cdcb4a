from django.conf import settings
from django.db import models

from core.exceptions import InvalidQuantity
from production.models.base import QuantityInvariantMixin
from production.models.purchase import MaterialType
from production.services import calculator


class ShortingEntry(QuantityInvariantMixin, models.Model):
    """Graded split of woven cloth into good, damaged and rejected pieces."""

    entry_no = models.CharField(max_length=50, unique=True)
    entry_date = models.DateField()

    # Lineage only; shorting may be recorded without either.
    weaver_challan = models.ForeignKey(
        "production.WeaverChallan", null=True, blank=True, on_delete=models.PROTECT, related_name="shorting_entries"
    )
    purchase = models.ForeignKey(
        "production.Purchase", null=True, blank=True, on_delete=models.PROTECT, related_name="shorting_entries"
    )

    material_type = models.CharField(max_length=20, choices=MaterialType.choices)
    batch_number = models.CharField(max_length=50, blank=True, default="")

    total_pieces = models.PositiveIntegerField()
    good_pieces = models.PositiveIntegerField(default=0)
    damaged_pieces = models.PositiveIntegerField(default=0)
    rejected_pieces = models.PositiveIntegerField(default=0)
    size_breakdown = models.JSONField(default=dict, blank=True)

    remarks = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-entry_date", "-id")
        verbose_name_plural = "shorting entries"

    def __str__(self):
        return self.entry_no

    @property
    def quality_rate(self) -> str:
        return calculator.quality_rate(self.total_pieces, self.good_pieces)

    @property
    def quality_band(self):
        return calculator.quality_band(self.quality_rate)

    def check_quantities(self):
        calculator.check_piece_conservation(
            self.total_pieces, self.good_pieces, self.damaged_pieces, self.rejected_pieces,
            label="good, damaged and rejected pieces",
        )
        self._check_size_breakdown()

    def _check_size_breakdown(self):
        breakdown = self.size_breakdown or {}
        if not isinstance(breakdown, dict):
            raise InvalidQuantity("Size breakdown must map size labels to piece counts.", field="size_breakdown")
        for size, count in breakdown.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise InvalidQuantity(
                    f"Size {size!r} must have a whole, non-negative piece count.", field="size_breakdown"
                )
        if sum(breakdown.values()) > (self.total_pieces or 0):
            raise InvalidQuantity(
                f"Size breakdown adds up to {sum(breakdown.values())} pieces, more than the "
                f"{self.total_pieces} total.",
                field="size_breakdown",
            )
